from datetime import date

import pytest

from models.lot import Lot
from models.purchase import Purchase, PurchaseItem
from services.purchase_service import PurchaseService


def _compra(proveedor_id, *detalles, total=0.0):
    return {"proveedor_id": proveedor_id, "total": total, "detalles": list(detalles)}


def test_each_line_creates_an_active_lot(db, provider, make_product):
    p = make_product()

    result = PurchaseService.create_purchase(
        db,
        _compra(
            provider.id,
            {
                "producto_id": p.id,
                "cantidad": 8,
                "precio_unitario": 10.0,
                "lote": "L-2025-01",
                "fecha_caducidad": "2025-06-30",
            },
            total=80.0,
        ),
    )

    assert result.success
    compra = db.get(Purchase, result.data["compra_id"])
    assert compra.total == 80.0
    item = db.query(PurchaseItem).one()
    lot = db.query(Lot).one()
    assert lot.producto_id == p.id
    assert lot.cantidad_actual == 8
    assert lot.activo is True
    assert lot.lote == "L-2025-01"
    assert lot.fecha_caducidad == date(2025, 6, 30)
    assert lot.detalle_compra_id == item.id


def test_repeated_purchases_never_merge_lots(db, provider, make_product):
    p = make_product()
    linea = {"producto_id": p.id, "cantidad": 5, "precio_unitario": 1.0, "fecha_caducidad": "2025-06-30"}

    assert PurchaseService.create_purchase(db, _compra(provider.id, linea)).success
    assert PurchaseService.create_purchase(db, _compra(provider.id, linea)).success

    assert db.query(Lot).filter_by(producto_id=p.id).count() == 2


def test_total_is_stored_as_given(db, provider, make_product):
    p = make_product()
    result = PurchaseService.create_purchase(
        db, _compra(provider.id, {"producto_id": p.id, "cantidad": 2, "precio_unitario": 10.0}, total=1.0)
    )
    assert db.get(Purchase, result.data["compra_id"]).total == 1.0


@pytest.mark.parametrize(
    "tipo, subtotal",
    [
        ("caja", 30.0),
        ("paquete", 360.0),
    ],
)
def test_container_lines_enter_physical_pieces(db, provider, make_product, tipo, subtotal):
    p = make_product()

    result = PurchaseService.create_purchase(
        db,
        _compra(
            provider.id,
            {
                "producto_id": p.id,
                "cantidad": 3,
                "precio_unitario": 10.0,
                "tipo_contenedor": tipo,
                "unidades_por_contenedor": 12,
            },
        ),
    )

    assert result.success
    item = db.query(PurchaseItem).one()
    assert item.piezas_ingresadas == 36
    assert item.subtotal == subtotal
    assert item.precio_por_pieza == pytest.approx(subtotal / 36)
    assert db.query(Lot).one().cantidad_actual == 36


def test_unit_line_ignores_units_per_container(db, provider, make_product):
    p = make_product()
    PurchaseService.create_purchase(
        db,
        _compra(
            provider.id,
            {"producto_id": p.id, "cantidad": 4, "precio_unitario": 2.0, "unidades_por_contenedor": 10},
        ),
    )
    item = db.query(PurchaseItem).one()
    assert item.tipo_contenedor == "unidad"
    assert item.unidades_por_contenedor == 1
    assert db.query(Lot).one().cantidad_actual == 4


def test_failure_on_second_line_leaves_nothing(db, provider, make_product):
    p = make_product()

    result = PurchaseService.create_purchase(
        db,
        _compra(
            provider.id,
            {"producto_id": p.id, "cantidad": 5, "precio_unitario": 1.0},
            {"producto_id": 999, "cantidad": 5, "precio_unitario": 1.0},
        ),
    )

    assert not result.success
    assert result.code == "storage_error"
    assert result.message.startswith("No se pudo registrar la compra")
    assert db.query(Purchase).count() == 0
    assert db.query(PurchaseItem).count() == 0
    assert db.query(Lot).count() == 0


def test_invalid_quantity_is_rejected_before_writing(db, provider, make_product):
    p = make_product()

    result = PurchaseService.create_purchase(
        db, _compra(provider.id, {"producto_id": p.id, "cantidad": 0, "precio_unitario": 1.0})
    )

    assert not result.success
    assert result.code == "validation_error"
    assert "detalles.0.cantidad" in result.message
    assert db.query(Purchase).count() == 0


def test_update_purchase_only_touches_header(db, provider, make_product, reload):
    p = make_product()
    creada = PurchaseService.create_purchase(
        db, _compra(provider.id, {"producto_id": p.id, "cantidad": 5, "precio_unitario": 1.0}, total=5.0)
    )
    compra_id = creada.data["compra_id"]

    result = PurchaseService.update_purchase(
        db, compra_id, {"proveedor_id": provider.id, "total": 7.5, "observaciones": "Factura corregida"}
    )

    assert result.success
    compra = reload(Purchase, compra_id)
    assert compra.total == 7.5
    assert compra.observaciones == "Factura corregida"
    assert db.query(Lot).one().cantidad_actual == 5


def test_update_missing_purchase(db, provider):
    result = PurchaseService.update_purchase(db, 123, {"proveedor_id": provider.id})
    assert not result.success
    assert result.code == "not_found"


def test_delete_purchase_keeps_lots(db, provider, make_product, reload):
    p = make_product()
    creada = PurchaseService.create_purchase(
        db, _compra(provider.id, {"producto_id": p.id, "cantidad": 5, "precio_unitario": 1.0})
    )
    lote_id = db.query(Lot).one().id

    result = PurchaseService.delete_purchase(db, creada.data["compra_id"])

    assert result.success
    assert db.query(Purchase).count() == 0
    assert db.query(PurchaseItem).count() == 0
    lot = reload(Lot, lote_id)
    assert lot.cantidad_actual == 5
    assert lot.detalle_compra_id is None


def test_list_purchases_and_items(db, provider, make_product):
    p = make_product()
    PurchaseService.create_purchase(
        db,
        _compra(
            provider.id,
            {"producto_id": p.id, "cantidad": 1, "precio_unitario": 1.0},
            {"producto_id": p.id, "cantidad": 2, "precio_unitario": 1.0},
        ),
    )

    compras = PurchaseService.list_purchases(db)
    assert compras.ok and len(compras.data) == 1
    items = PurchaseService.purchase_items(db, compras.data[0].id)
    assert [i.cantidad for i in items.data] == [1, 2]
