"""
Consumo interno: merma, muestras, daño. Sale de un lote sin pasar por una venta.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from config.database import Base
from utils.dates import now_local


class InternalConsumption(Base):
    """
    Registro de consumo interno. Nunca se actualiza ni se borra.
    """

    __tablename__ = "consumos_internos"

    id = Column(Integer, primary_key=True, index=True)
    lote_id = Column(Integer, ForeignKey("lotes.id"), nullable=False, index=True)
    cantidad = Column(Integer, nullable=False, default=0)
    motivo = Column(String(100), nullable=True)  # muestras / consumo interno / daño ...
    observaciones = Column(Text, nullable=True)
    fecha = Column(DateTime, nullable=False, default=now_local)
    created_at = Column(DateTime, nullable=False, default=now_local)
    updated_at = Column(DateTime, nullable=False, default=now_local, onupdate=now_local)

    lote = relationship("Lot")
