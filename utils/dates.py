"""
Fechas en la zona horaria canónica de la tienda.
"""
from datetime import date, datetime

from dateutil import tz

from config.settings import DEFAULT_TIMEZONE

_store_tz = tz.gettz(DEFAULT_TIMEZONE)


def set_store_timezone(name: str) -> None:
    """Cambia la zona horaria usada por now_local (se llama al arrancar)."""
    global _store_tz
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Zona horaria desconocida: {name}")
    _store_tz = zone


def now_local() -> datetime:
    """
    Fecha/hora actual de la tienda, sin tzinfo (así se guarda en la base).
    """
    return datetime.now(_store_tz).replace(tzinfo=None, microsecond=0)


def today_local() -> date:
    return now_local().date()

