from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from config.database import Base
from utils.dates import now_local


class Purchase(Base):
    """
    Compra (encabezado): entrada de mercancía de un proveedor.
    """

    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    proveedor_id = Column(Integer, ForeignKey("providers.id"), nullable=False)
    fecha = Column(DateTime, nullable=False, default=now_local)
    total = Column(Float, nullable=False, default=0.0)
    observaciones = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_local)
    updated_at = Column(DateTime, nullable=False, default=now_local, onupdate=now_local)

    proveedor = relationship("Provider")
    detalles = relationship(
        "PurchaseItem", back_populates="compra", cascade="all, delete-orphan"
    )


class PurchaseItem(Base):
    """
    Detalle de compra. Cada renglón genera un lote nuevo.
    """

    __tablename__ = "detail_compras"

    id = Column(Integer, primary_key=True, index=True)
    compra_id = Column(Integer, ForeignKey("purchases.id"), nullable=False, index=True)
    producto_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    cantidad = Column(Integer, nullable=False, default=0)
    precio_unitario = Column(Float, nullable=False, default=0.0)
    subtotal = Column(Float, nullable=False, default=0.0)
    lote = Column(String(100), nullable=True)
    fecha_caducidad = Column(Date, nullable=True)
    tipo_contenedor = Column(String(20), nullable=False, default="unidad")  # unidad / caja / paquete
    unidades_por_contenedor = Column(Integer, nullable=False, default=1)
    piezas_ingresadas = Column(Integer, nullable=False, default=0)
    precio_por_pieza = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, nullable=False, default=now_local)
    updated_at = Column(DateTime, nullable=False, default=now_local, onupdate=now_local)

    compra = relationship("Purchase", back_populates="detalles")
