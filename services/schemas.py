"""
Esquemas de entrada (pydantic) para compras, ventas, lotes y consumos.
La capa de UI ya valida, pero el inventario vuelve a rechazar cantidades inválidas.
"""
from datetime import date, datetime
from typing import Annotated, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, Field, ValidationError, model_validator

from services.exceptions import InvalidRequestError

_CONTAINER_ALIASES = {
    "single-unit": "unidad",
    "unit": "unidad",
    "box": "caja",
    "package": "paquete",
}


def _to_container(v):
    if v is None:
        return "unidad"
    text = str(v).strip().lower()
    return _CONTAINER_ALIASES.get(text, text)


def _reject_bool(v):
    if isinstance(v, bool):
        raise ValueError("se esperaba un número")
    return v


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


ContainerType = Annotated[Literal["unidad", "caja", "paquete"], BeforeValidator(_to_container)]
Quantity = Annotated[int, BeforeValidator(_reject_bool), Field(gt=0)]
Price = Annotated[float, BeforeValidator(_reject_bool), Field(ge=0)]
EntityId = Annotated[int, BeforeValidator(_reject_bool), Field(gt=0)]
OptionalDate = Annotated[Optional[date], BeforeValidator(_blank_to_none)]
OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


def piezas_fisicas(tipo_contenedor: str, cantidad: int, unidades_por_contenedor: int) -> int:
    """Piezas reales: caja y paquete multiplican por unidades_por_contenedor."""
    if tipo_contenedor in ("caja", "paquete"):
        return cantidad * unidades_por_contenedor
    return cantidad


def subtotal_linea(
    tipo_contenedor: str, cantidad: int, unidades_por_contenedor: int, precio_unitario: float
) -> float:
    """
    Solo "paquete" multiplica por unidades_por_contenedor en el importe; "caja" cobra por
    contenedor aunque sus piezas sí se multipliquen.
    """
    if tipo_contenedor == "paquete":
        return cantidad * unidades_por_contenedor * precio_unitario
    return cantidad * precio_unitario


class _ContainerLine(BaseModel):
    tipo_contenedor: ContainerType = "unidad"
    unidades_por_contenedor: EntityId = 1

    @model_validator(mode="after")
    def _unit_has_one_piece(self):
        if self.tipo_contenedor == "unidad":
            self.unidades_por_contenedor = 1
        return self

    @property
    def piezas(self) -> int:
        return piezas_fisicas(self.tipo_contenedor, self.cantidad, self.unidades_por_contenedor)


class LotIn(BaseModel):
    producto_id: EntityId
    detalle_compra_id: Optional[EntityId] = None
    lote: OptionalText = None
    fecha_caducidad: OptionalDate = None
    cantidad_actual: Annotated[int, BeforeValidator(_reject_bool), Field(ge=0)] = 0
    activo: bool = True


class LotUpdate(BaseModel):
    """Reemplazo completo de los campos mutables del lote."""

    detalle_compra_id: Optional[EntityId] = None
    lote: OptionalText = None
    fecha_caducidad: OptionalDate = None
    cantidad_actual: Annotated[int, BeforeValidator(_reject_bool)] = 0
    activo: bool = True


class PurchaseItemIn(_ContainerLine):
    producto_id: EntityId
    cantidad: Quantity
    precio_unitario: Price
    lote: OptionalText = None
    fecha_caducidad: OptionalDate = None


class PurchaseIn(BaseModel):
    proveedor_id: EntityId
    fecha: Optional[datetime] = None
    total: Price = 0.0
    observaciones: OptionalText = None
    detalles: List[PurchaseItemIn] = Field(default_factory=list)


class PurchaseUpdate(BaseModel):
    proveedor_id: EntityId
    fecha: Optional[datetime] = None
    total: Price = 0.0
    observaciones: OptionalText = None


class SaleItemIn(_ContainerLine):
    producto_id: EntityId
    cantidad: Quantity
    # None => precio_venta actual del producto menos descuento_manual_fijo
    precio_unitario: Optional[Price] = None
    descuento_manual_fijo: Price = 0.0
    lote: OptionalText = None
    fecha_caducidad: OptionalDate = None


class SaleIn(BaseModel):
    fecha: Optional[datetime] = None
    total: Price = 0.0
    observaciones: OptionalText = None
    detalles: List[SaleItemIn] = Field(default_factory=list)


class ConsumptionIn(BaseModel):
    lote_id: EntityId
    cantidad: Quantity
    motivo: OptionalText = None
    observaciones: OptionalText = None


M = TypeVar("M", bound=BaseModel)


def _describe(exc: ValidationError) -> str:
    partes = []
    for err in exc.errors():
        campo = ".".join(str(p) for p in err.get("loc", ())) or "payload"
        partes.append(f"{campo}: {err.get('msg')}")
    return "Datos inválidos: " + "; ".join(partes)


def parse_payload(model: Type[M], payload: Union[M, dict, None]) -> M:
    """
    Convierte un dict (o el propio modelo) al esquema; InvalidRequestError si no cuadra.
    """
    if isinstance(payload, model):
        return payload
    if payload is None:
        raise InvalidRequestError("Datos inválidos: no se recibió información")
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidRequestError(_describe(exc)) from exc
