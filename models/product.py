from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from config.database import Base
from utils.dates import now_local


class Product(Base):
    """
    Productos de la tienda.
    El inventario solo los lee (precio, existencia); el CRUD vive en otra parte.
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(200), nullable=False)
    categoria_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    precio_compra = Column(Float, nullable=False, default=0.0)
    precio_venta = Column(Float, nullable=False, default=0.0)
    codigo_barras = Column(String(50), nullable=True, index=True)
    activo = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=now_local)
    updated_at = Column(DateTime, nullable=False, default=now_local, onupdate=now_local)

    categoria = relationship("Category", lazy="joined")
