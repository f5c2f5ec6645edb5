"""
Arranque compartido por app.py y las páginas: un solo Database e InventoryAPI por proceso.
"""
import atexit

import streamlit as st

from config.database import Database
from config.logging_config import configure_logging
from config.settings import load_settings
from services.inventory_api import InventoryAPI
from utils.dates import set_store_timezone


@st.cache_resource
def get_api() -> InventoryAPI:
    """
    Inicializa logging, zona horaria y base de datos (crea tablas si faltan).
    """
    settings = load_settings()
    configure_logging(settings.log_level)
    set_store_timezone(settings.store_timezone)

    database = Database(settings.database_url, echo=settings.sql_echo)
    database.init_db()
    atexit.register(database.dispose)
    return InventoryAPI(
        database,
        low_stock_threshold=settings.low_stock_threshold,
        expiry_window_days=settings.expiry_window_days,
    )
