import logging

import pytest

from config.logging_config import configure_logging, reset_logging
from config.settings import load_settings
from utils.dates import now_local, set_store_timezone, today_local


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("STORE_TIMEZONE", "America/Monterrey")
    monkeypatch.setenv("LOW_STOCK_THRESHOLD", "8")
    monkeypatch.setenv("EXPIRY_WINDOW_DAYS", "no-es-numero")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.database_url == "sqlite://"
    assert settings.store_timezone == "America/Monterrey"
    assert settings.low_stock_threshold == 8
    assert settings.expiry_window_days == 30
    assert settings.log_level == "DEBUG"
    assert settings.sql_echo is False


def test_explicit_url_wins(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///otra.db")
    assert load_settings("sqlite://").database_url == "sqlite://"


def test_configure_logging_installs_one_handler():
    root = logging.getLogger()
    antes = len(root.handlers)
    try:
        configure_logging("INFO")
        configure_logging("WARNING")
        assert len(root.handlers) == antes + 1
        assert root.level == logging.WARNING
    finally:
        reset_logging()
    assert len(root.handlers) == antes


def test_unknown_timezone_rejected():
    with pytest.raises(ValueError, match="Zona horaria desconocida"):
        set_store_timezone("Marte/Olympus")


def test_local_time_is_naive_and_whole_seconds():
    ahora = now_local()
    assert ahora.tzinfo is None
    assert ahora.microsecond == 0
    assert today_local() in (ahora.date(), now_local().date())
