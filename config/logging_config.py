"""
Configuración de logging del inventario (logging de la biblioteca estándar).
"""
import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configura el logger raíz una sola vez. Llamadas siguientes solo ajustan el nivel.
    """
    global _handler

    if level is None:
        from config.settings import load_settings

        level = load_settings().log_level

    root = logging.getLogger()
    root.setLevel(level)
    if _handler is not None:
        return

    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(_handler)

    # SQLAlchemy es muy verboso en INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def reset_logging() -> None:
    """Quita el handler instalado por configure_logging."""
    global _handler

    if _handler is not None:
        logging.getLogger().removeHandler(_handler)
        _handler = None
