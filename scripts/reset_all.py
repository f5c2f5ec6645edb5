"""
Script para limpiar todas las tablas y probar desde cero.
- Borra los datos (vía SQL, sin borrar el archivo de la base)
- Reinicia los contadores de ID en SQLite

Puede correr con Streamlit abierto.
"""
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config.database import create_database


# Orden: tablas hijas primero (por las llaves foráneas)
TABLES_TO_TRUNCATE = [
    "consumos_internos",
    "detail_ventas",
    "sales",
    "lotes",
    "detail_compras",
    "purchases",
    "products",
    "providers",
    "categories",
]


def main() -> None:
    print("Limpiando tablas del inventario...")
    database = create_database()
    database.init_db()  # garantiza que las tablas existan

    with database.engine.connect() as conn:
        for table in TABLES_TO_TRUNCATE:
            try:
                conn.execute(text(f"DELETE FROM {table}"))
                conn.commit()
                print("  Limpia:", table)
            except SQLAlchemyError as e:
                conn.rollback()
                print("  ", table, "-", e)
        if database.is_sqlite:
            try:
                conn.execute(text("DELETE FROM sqlite_sequence"))
                conn.commit()
            except SQLAlchemyError:
                # sqlite_sequence solo existe si alguna tabla usó AUTOINCREMENT
                conn.rollback()
    database.dispose()
    print("  Base de datos limpia (datos eliminados).")


if __name__ == "__main__":
    main()
