"""
Resultados uniformes devueltos por las operaciones del inventario.
"""
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class OperationResult:
    """
    Resultado de una escritura: {success, message?}.
    warnings lleva avisos que no impiden el commit (p. ej. descuento FEFO incompleto).
    """

    success: bool
    message: Optional[str] = None
    code: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    data: Any = None

    @classmethod
    def ok(cls, data: Any = None, warnings: Optional[List[str]] = None) -> "OperationResult":
        return cls(success=True, data=data, warnings=list(warnings or []))

    @classmethod
    def fail(cls, message: Optional[str] = None, code: Optional[str] = None) -> "OperationResult":
        return cls(success=False, message=message, code=code)

    def to_dict(self) -> dict:
        out = {"success": self.success}
        if self.message:
            out["message"] = self.message
        if self.code:
            out["code"] = self.code
        if self.warnings:
            out["warnings"] = list(self.warnings)
        if self.data is not None:
            out["data"] = self.data
        return out


@dataclass
class QueryResult(Generic[T]):
    """
    Resultado de una lectura. data siempre es una lista (vacía si la lectura falló);
    error permite distinguir "no hay datos" de "la lectura falló".
    """

    data: List[T] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: str) -> "QueryResult[T]":
        return cls(data=[], error=error)
