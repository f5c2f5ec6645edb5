"""
Script para inicializar la base de datos del inventario.
- Crea todas las tablas
- Muestra dónde quedó la base
"""
from config.database import create_database


def main() -> None:
    print("📦 Inicializando base de datos del inventario...")
    database = create_database()
    try:
        database.init_db()
        print(f"✅ Tablas creadas (si no existían) en {database.url}")
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
