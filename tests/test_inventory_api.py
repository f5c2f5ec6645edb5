import pytest

from models.product import Product
from models.provider import Provider
from services.inventory_api import GENERIC_FAILURE, InventoryAPI
from services.inventory_service import InventoryService
from services.sale_service import SaleService


@pytest.fixture
def api(database):
    return InventoryAPI(database, low_stock_threshold=5, expiry_window_days=30)


@pytest.fixture
def catalog(database):
    with database.session() as db:
        prov = Provider(nombre="Distribuidora Central")
        prod = Product(nombre="Leche entera 1L", precio_venta=26.5)
        db.add_all([prov, prod])
        db.commit()
        return {"proveedor_id": prov.id, "producto_id": prod.id}


def test_purchase_then_sale_round_trip(api, catalog):
    pid = catalog["producto_id"]
    compra = api.create_purchase(
        {
            "proveedor_id": catalog["proveedor_id"],
            "total": 80.0,
            "detalles": [
                {"producto_id": pid, "cantidad": 8, "precio_unitario": 10.0, "fecha_caducidad": "2025-06-30"}
            ],
        }
    )
    assert compra.success

    venta = api.create_sale({"detalles": [{"producto_id": pid, "cantidad": 3}]})
    assert venta.success

    grupos = api.grouped_inventory()
    assert grupos.ok
    assert grupos.data[0].total_piezas == 5
    assert api.sale_items(venta.data["venta_id"]).data[0].precio_unitario == 26.5


def test_lot_admin_through_api(api, catalog):
    creado = api.create_lot(catalog["producto_id"], {"cantidad_actual": 4})
    assert creado.success
    lote_id = creado.data["lote_id"]

    assert api.update_lot(lote_id, {"cantidad_actual": 2}).success
    assert api.list_lots().data[0].cantidad_actual == 2
    assert api.delete_lot(lote_id).success
    assert api.list_lots().data == []


def test_typed_errors_keep_their_code(api):
    result = api.update_lot(999, {"cantidad_actual": 1})

    assert not result.success
    assert result.code == "lot_not_found"
    assert result.message == "El lote #999 no existe"


def test_unexpected_write_error_becomes_generic_failure(api, monkeypatch):
    def boom(db, venta):
        raise RuntimeError("detalle interno")

    monkeypatch.setattr(SaleService, "create_sale", staticmethod(boom))

    result = api.create_sale({"detalles": []})

    assert not result.success
    assert result.message == GENERIC_FAILURE
    assert result.to_dict() == {"success": False, "message": GENERIC_FAILURE}


def test_unexpected_read_error_is_distinguishable_from_empty(api, monkeypatch):
    vacio = api.grouped_inventory()
    assert vacio.ok and vacio.data == []

    def boom(db):
        raise RuntimeError("detalle interno")

    monkeypatch.setattr(InventoryService, "grouped_inventory", staticmethod(boom))

    fallido = api.grouped_inventory()
    assert not fallido.ok
    assert fallido.data == []
    assert fallido.error == GENERIC_FAILURE


def test_low_stock_uses_configured_threshold(api, catalog):
    assert [r.producto_id for r in api.low_stock_products().data] == [catalog["producto_id"]]
    assert api.low_stock_products(threshold=0).data == []


def test_negative_lots_reach_the_api(api, catalog):
    lote_id = api.create_lot(catalog["producto_id"], {"cantidad_actual": 2}).data["lote_id"]
    assert api.negative_lots().data == []

    consumo = api.record_consumption({"lote_id": lote_id, "cantidad": 5, "motivo": "merma"})

    assert consumo.success
    negativos = api.negative_lots()
    assert negativos.ok
    assert [(l.id, l.cantidad_actual) for l in negativos.data] == [(lote_id, -3)]
