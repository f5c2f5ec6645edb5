from sqlalchemy import Boolean, Column, DateTime, Integer, String

from config.database import Base
from utils.dates import now_local


class Category(Base):
    """
    Categoría de producto (catálogo administrado fuera del inventario).
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(100), nullable=False, index=True)
    activo = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=now_local)
    updated_at = Column(DateTime, nullable=False, default=now_local, onupdate=now_local)
