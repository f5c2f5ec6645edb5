"""
Carga de productos ficticios para pruebas del inventario.
Crea categorías, un proveedor, productos y una compra inicial (que genera los lotes).
Puede ejecutarse en local o en producción (cuidado al correrlo en producción).
"""
import sys
from datetime import timedelta
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from config.database import create_database
from models.category import Category
from models.product import Product
from models.provider import Provider
from services.purchase_service import PurchaseService
from utils.dates import today_local


BASE_PRODUCTOS = [
    # (categoría, nombre, código de barras, precio compra, precio venta, piezas, días para caducar)
    ("Lácteos", "Leche entera 1L", "7501000000011", 18.0, 26.5, 24, 10),
    ("Lácteos", "Yogur natural 1kg", "7501000000028", 32.0, 45.0, 12, 20),
    ("Lácteos", "Queso panela 400g", "7501000000035", 48.0, 69.9, 8, 15),
    ("Abarrotes", "Arroz 1kg", "7501000000042", 19.0, 29.9, 30, 365),
    ("Abarrotes", "Frijol negro 1kg", "7501000000059", 25.0, 38.0, 20, 300),
    ("Abarrotes", "Aceite vegetal 1L", "7501000000066", 30.0, 44.5, 15, 240),
    ("Bebidas", "Agua natural 1.5L", "7501000000073", 8.0, 14.0, 48, None),
    ("Bebidas", "Refresco de cola 600ml", "7501000000080", 10.5, 18.0, 36, 120),
    ("Limpieza", "Jabón de barra", "7501000000097", 9.0, 15.5, 25, None),
    ("Limpieza", "Detergente 1kg", "7501000000103", 28.0, 42.0, 10, None),
]


def main() -> None:
    database = create_database()
    database.init_db()
    hoy = today_local()
    with database.session() as db:
        if db.query(Product).count() > 0:
            print("ℹ️ Ya existen productos; no se cargó nada.")
            return

        categorias = {}
        for nombre_cat, *_ in BASE_PRODUCTOS:
            if nombre_cat not in categorias:
                categorias[nombre_cat] = Category(nombre=nombre_cat)
                db.add(categorias[nombre_cat])
        proveedor = Provider(nombre="Distribuidora Central", contacto="Ventas", telefono="5555555555")
        db.add(proveedor)
        db.flush()

        detalles = []
        for nombre_cat, nombre, codigo, compra, venta, piezas, dias in BASE_PRODUCTOS:
            producto = Product(
                nombre=nombre,
                categoria_id=categorias[nombre_cat].id,
                precio_compra=compra,
                precio_venta=venta,
                codigo_barras=codigo,
            )
            db.add(producto)
            db.flush()
            detalles.append(
                {
                    "producto_id": producto.id,
                    "cantidad": piezas,
                    "precio_unitario": compra,
                    "lote": f"L-{codigo[-4:]}",
                    "fecha_caducidad": hoy + timedelta(days=dias) if dias else None,
                }
            )
        db.commit()

        resultado = PurchaseService.create_purchase(
            db,
            {
                "proveedor_id": proveedor.id,
                "total": sum(d["cantidad"] * d["precio_unitario"] for d in detalles),
                "observaciones": "Inventario inicial (seed)",
                "detalles": detalles,
            },
        )
        if resultado.success:
            print(f"✅ {len(detalles)} productos cargados con su lote inicial.")
        else:
            print(f"❌ No se pudo registrar la compra inicial: {resultado.message}")
    database.dispose()


if __name__ == "__main__":
    main()
