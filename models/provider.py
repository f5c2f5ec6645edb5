from sqlalchemy import Boolean, Column, DateTime, Integer, String

from config.database import Base
from utils.dates import now_local


class Provider(Base):
    """
    Proveedores a quienes se registran las compras.
    """

    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(200), nullable=False)
    contacto = Column(String(200), nullable=True)
    telefono = Column(String(50), nullable=True)
    email = Column(String(200), nullable=True)
    activo = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=now_local)
    updated_at = Column(DateTime, nullable=False, default=now_local, onupdate=now_local)
