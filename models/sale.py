from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from config.database import Base
from utils.dates import now_local


class Sale(Base):
    """
    Venta (encabezado).
    """

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    fecha = Column(DateTime, nullable=False, default=now_local, index=True)
    total = Column(Float, nullable=False, default=0.0)
    observaciones = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_local)
    updated_at = Column(DateTime, nullable=False, default=now_local, onupdate=now_local)

    detalles = relationship("SaleItem", back_populates="venta", cascade="all, delete-orphan")


class SaleItem(Base):
    """
    Detalle de venta. cantidad está en la unidad cobrada (unidad, caja o paquete);
    piezas_vendidas es lo que realmente sale de los lotes.
    """

    __tablename__ = "detail_ventas"

    id = Column(Integer, primary_key=True, index=True)
    venta_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    producto_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    cantidad = Column(Integer, nullable=False, default=0)
    precio_lista = Column(Float, nullable=False, default=0.0)
    descuento_manual_fijo = Column(Float, nullable=False, default=0.0)
    precio_unitario = Column(Float, nullable=False, default=0.0)
    subtotal = Column(Float, nullable=False, default=0.0)
    tipo_contenedor = Column(String(20), nullable=False, default="unidad")  # unidad / caja / paquete
    unidades_por_contenedor = Column(Integer, nullable=False, default=1)
    piezas_vendidas = Column(Integer, nullable=False, default=0)
    lote = Column(String(100), nullable=True)
    fecha_caducidad = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_local)
    updated_at = Column(DateTime, nullable=False, default=now_local, onupdate=now_local)

    venta = relationship("Sale", back_populates="detalles")
