from datetime import date

import pytest

from services.exceptions import InvalidRequestError
from services.schemas import (
    ConsumptionIn,
    PurchaseIn,
    SaleItemIn,
    SaleIn,
    parse_payload,
    piezas_fisicas,
    subtotal_linea,
)


class TestContainerMath:

    @pytest.mark.parametrize(
        "tipo, esperado",
        [("unidad", 3), ("caja", 36), ("paquete", 36)],
    )
    def test_pieces(self, tipo, esperado):
        assert piezas_fisicas(tipo, 3, 12) == esperado

    @pytest.mark.parametrize(
        "tipo, esperado",
        [("unidad", 6.0), ("caja", 6.0), ("paquete", 72.0)],
    )
    def test_subtotal_only_package_multiplies(self, tipo, esperado):
        assert subtotal_linea(tipo, 3, 12, 2.0) == esperado


class TestSaleItem:

    @pytest.mark.parametrize(
        "alias, canonico",
        [("single-unit", "unidad"), ("unit", "unidad"), ("box", "caja"), ("Package", "paquete"), (None, "unidad")],
    )
    def test_container_aliases(self, alias, canonico):
        item = SaleItemIn(producto_id=1, cantidad=1, tipo_contenedor=alias)
        assert item.tipo_contenedor == canonico

    def test_unit_forces_one_piece_per_container(self):
        item = SaleItemIn(producto_id=1, cantidad=4, tipo_contenedor="unidad", unidades_por_contenedor=6)
        assert item.unidades_por_contenedor == 1
        assert item.piezas == 4

    def test_unknown_container_rejected(self):
        with pytest.raises(InvalidRequestError, match="tipo_contenedor"):
            parse_payload(SaleItemIn, {"producto_id": 1, "cantidad": 1, "tipo_contenedor": "pallet"})

    def test_boolean_quantity_rejected(self):
        with pytest.raises(InvalidRequestError, match="cantidad"):
            parse_payload(SaleItemIn, {"producto_id": 1, "cantidad": True})

    def test_negative_discount_rejected(self):
        with pytest.raises(InvalidRequestError, match="descuento_manual_fijo"):
            parse_payload(SaleItemIn, {"producto_id": 1, "cantidad": 1, "descuento_manual_fijo": -1})


def test_blank_text_and_dates_become_none():
    compra = parse_payload(
        PurchaseIn,
        {
            "proveedor_id": 1,
            "observaciones": "  ",
            "detalles": [
                {"producto_id": 2, "cantidad": 1, "precio_unitario": 1, "lote": "", "fecha_caducidad": ""},
                {"producto_id": 2, "cantidad": 1, "precio_unitario": 1, "fecha_caducidad": "2025-02-28"},
            ],
        },
    )
    assert compra.observaciones is None
    assert compra.detalles[0].lote is None
    assert compra.detalles[0].fecha_caducidad is None
    assert compra.detalles[1].fecha_caducidad == date(2025, 2, 28)


def test_empty_sale_is_valid():
    assert parse_payload(SaleIn, {}).detalles == []


def test_missing_payload():
    with pytest.raises(InvalidRequestError, match="no se recibió"):
        parse_payload(ConsumptionIn, None)


def test_model_instance_passes_through():
    consumo = ConsumptionIn(lote_id=1, cantidad=2)
    assert parse_payload(ConsumptionIn, consumo) is consumo


def test_error_message_lists_every_field():
    with pytest.raises(InvalidRequestError) as excinfo:
        parse_payload(ConsumptionIn, {"lote_id": 0, "cantidad": "x"})
    assert excinfo.value.code == "validation_error"
    assert excinfo.value.message.startswith("Datos inválidos: ")
    assert "lote_id" in excinfo.value.message
    assert "cantidad" in excinfo.value.message
