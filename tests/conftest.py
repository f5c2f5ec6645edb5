import os
import sys
from datetime import date
from typing import Optional

import pytest

# Permite correr pytest desde la raíz o desde tests/
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from config.database import Database  # noqa: E402
from models.category import Category  # noqa: E402
from models.lot import Lot  # noqa: E402
from models.product import Product  # noqa: E402
from models.provider import Provider  # noqa: E402
from services.lot_service import LotService  # noqa: E402


@pytest.fixture
def database():
    """Base SQLite en memoria, nueva para cada prueba."""
    database = Database("sqlite://")
    database.init_db()
    yield database
    database.dispose()


@pytest.fixture
def file_database(tmp_path):
    """Base SQLite en archivo: cada sesión usa su propia conexión, como en la app."""
    database = Database(f"sqlite:///{tmp_path / 'inventario.db'}")
    database.init_db()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    with database.session() as session:
        yield session


@pytest.fixture
def make_product(db):
    def _make(nombre: str = "Leche entera 1L", precio_venta: float = 20.0, activo: bool = True) -> Product:
        categoria = db.query(Category).filter_by(nombre="General").first()
        if categoria is None:
            categoria = Category(nombre="General")
            db.add(categoria)
            db.flush()
        product = Product(
            nombre=nombre,
            categoria_id=categoria.id,
            precio_compra=precio_venta / 2,
            precio_venta=precio_venta,
            activo=activo,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def provider(db) -> Provider:
    prov = Provider(nombre="Distribuidora Central")
    db.add(prov)
    db.commit()
    return prov


@pytest.fixture
def make_lot(db):
    def _make(
        producto_id: int,
        cantidad: int,
        caducidad: Optional[date] = None,
        activo: bool = True,
        etiqueta: Optional[str] = None,
    ) -> Lot:
        lot = LotService.build_lot(
            producto_id,
            lote=etiqueta,
            fecha_caducidad=caducidad,
            cantidad_actual=cantidad,
            activo=activo,
        )
        db.add(lot)
        db.commit()
        return lot

    return _make


@pytest.fixture
def reload(db):
    """Lee la fila de nuevo desde la base, ignorando lo que haya en la sesión."""

    def _reload(model, pk):
        db.expire_all()
        return db.get(model, pk)

    return _reload
