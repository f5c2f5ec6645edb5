from datetime import date, datetime
from typing import Optional, Union

import locale

# Intenta usar el locale es_MX para el formato de moneda, si está disponible
try:
    locale.setlocale(locale.LC_ALL, "es_MX.UTF-8")
except locale.Error:
    # En algunos entornos Windows el locale tiene otro nombre o no existe.
    pass


def format_currency(value: Optional[float]) -> str:
    """
    Formatea un número como moneda en pesos.
    """
    value = value or 0.0
    try:
        return locale.currency(value, grouping=True)
    except ValueError:
        return f"${value:,.2f}"


def format_date(d: Union[date, datetime, None]) -> str:
    """
    Formatea fechas como dd/mm/aaaa (con hora si es datetime).
    """
    if d is None:
        return "-"
    if isinstance(d, datetime):
        return d.strftime("%d/%m/%Y %H:%M")
    return d.strftime("%d/%m/%Y")


def format_container(tipo: Optional[str], unidades: Optional[int]) -> str:
    if not tipo or tipo == "unidad":
        return "unidad"
    return f"{tipo} x{unidades or 1}"
