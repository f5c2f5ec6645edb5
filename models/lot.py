"""
Lotes: cada lote es un bloque de piezas de un producto con su propia caducidad.
"""
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from config.database import Base
from utils.dates import now_local


class Lot(Base):
    """
    Lote de inventario.
    Un lote con cantidad_actual <= 0 debe quedar inactivo.
    """

    __tablename__ = "lotes"

    id = Column(Integer, primary_key=True, index=True)
    producto_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    detalle_compra_id = Column(Integer, ForeignKey("detail_compras.id"), nullable=True)
    lote = Column(String(100), nullable=True)
    fecha_caducidad = Column(Date, nullable=True, index=True)
    cantidad_actual = Column(Integer, nullable=False, default=0)
    activo = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=now_local)
    updated_at = Column(DateTime, nullable=False, default=now_local, onupdate=now_local)

    producto = relationship("Product")

    @property
    def cantidad_disponible(self) -> int:
        """Cantidad vendible; nunca negativa."""
        return max(self.cantidad_actual or 0, 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "producto_id": self.producto_id,
            "detalle_compra_id": self.detalle_compra_id,
            "lote": self.lote,
            "fecha_caducidad": self.fecha_caducidad,
            "cantidad_actual": self.cantidad_actual,
            "activo": bool(self.activo),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self):
        return (
            f"<Lot(id={self.id}, producto_id={self.producto_id}, "
            f"cantidad_actual={self.cantidad_actual}, activo={self.activo})>"
        )
