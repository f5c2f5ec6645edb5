"""
Configuración de la base de datos del inventario.
- Soporta SQLite (archivo local) para la tienda
- Soporta PostgreSQL vía DATABASE_URL
La conexión no es un global: se crea un Database al arrancar y se pasa hacia abajo.
"""
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base para los modelos
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Crea el engine según el tipo de base.
    """
    if database_url.startswith("postgresql"):
        return create_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            pool_size=10,
            max_overflow=20,
            pool_recycle=3600,
        )

    # SQLite (archivo local o memoria)
    options = {"connect_args": {"check_same_thread": False}, "echo": echo}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # Una sola conexión compartida; si no, cada sesión vería una base vacía
        options["poolclass"] = StaticPool
    engine = create_engine(database_url, **options)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class Database:
    """
    Recurso de almacenamiento: dueño del engine y de la fábrica de sesiones.
    Se crea una vez al iniciar el proceso y se inyecta en quien lo necesite.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.url = database_url
        self.engine = build_engine(database_url, echo=echo)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def init_db(self) -> None:
        """
        Crea todas las tablas definidas en los modelos.
        Debe llamarse una vez al inicializar la aplicación.
        """
        # Importa modelos aquí para registrarlos en el metadata
        from models import (  # noqa: F401
            category,
            consumption,
            lot,
            product,
            provider,
            purchase,
            sale,
        )

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def create_database(database_url: Optional[str] = None) -> Database:
    """
    Construye el Database a partir de la configuración del entorno.
    """
    from config.settings import load_settings

    settings = load_settings(database_url)
    return Database(settings.database_url, echo=settings.sql_echo)
