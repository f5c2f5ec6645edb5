"""
Fachada que consume la UI. Cada llamada abre su propia sesión, recibe dicts
y nunca lanza: las escrituras devuelven OperationResult y las lecturas QueryResult.
"""
import logging
from typing import Any, Mapping, Optional

from config.database import Database
from services.consumption_service import ConsumptionService
from services.exceptions import InventoryError
from services.inventory_service import InventoryService
from services.lot_service import LotService
from services.purchase_service import PurchaseService
from services.results import OperationResult, QueryResult
from services.sale_service import SaleService

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "No se pudo completar la operación."


class InventoryAPI:
    def __init__(self, database: Database, low_stock_threshold: int = 5, expiry_window_days: int = 30):
        self.database = database
        self.low_stock_threshold = low_stock_threshold
        self.expiry_window_days = expiry_window_days

    def _write(self, name: str, operation) -> OperationResult:
        try:
            with self.database.session() as db:
                return operation(db)
        except InventoryError as exc:
            return OperationResult.fail(exc.message, exc.code)
        except Exception:
            logger.exception("Error inesperado en %s", name)
            return OperationResult.fail(GENERIC_FAILURE)

    def _read(self, name: str, query) -> QueryResult:
        try:
            with self.database.session() as db:
                return query(db)
        except Exception:
            logger.exception("Error inesperado en %s", name)
            return QueryResult.failed(GENERIC_FAILURE)

    # ----- Escrituras del núcleo -----

    def create_purchase(self, payload: Mapping[str, Any]) -> OperationResult:
        return self._write("create_purchase", lambda db: PurchaseService.create_purchase(db, payload))

    def create_sale(self, payload: Mapping[str, Any]) -> OperationResult:
        return self._write("create_sale", lambda db: SaleService.create_sale(db, payload))

    def record_consumption(self, payload: Mapping[str, Any]) -> OperationResult:
        return self._write(
            "record_consumption", lambda db: ConsumptionService.record_consumption(db, payload)
        )

    # ----- Lotes (administración) -----

    def create_lot(self, producto_id: int, fields: Optional[Mapping[str, Any]] = None) -> OperationResult:
        def op(db):
            lot = LotService.create_lot(db, producto_id, fields)
            return OperationResult.ok(data={"lote_id": lot.id})

        return self._write("create_lot", op)

    def update_lot(self, lote_id: int, fields: Mapping[str, Any]) -> OperationResult:
        def op(db):
            LotService.update_lot(db, lote_id, fields)
            return OperationResult.ok()

        return self._write("update_lot", op)

    def delete_lot(self, lote_id: int) -> OperationResult:
        def op(db):
            LotService.delete_lot(db, lote_id)
            return OperationResult.ok()

        return self._write("delete_lot", op)

    def update_purchase(self, compra_id: int, payload: Mapping[str, Any]) -> OperationResult:
        return self._write(
            "update_purchase", lambda db: PurchaseService.update_purchase(db, compra_id, payload)
        )

    def delete_purchase(self, compra_id: int) -> OperationResult:
        return self._write("delete_purchase", lambda db: PurchaseService.delete_purchase(db, compra_id))

    # ----- Lecturas -----

    def list_lots(self) -> QueryResult:
        return self._read("list_lots", LotService.list_lots)

    def negative_lots(self) -> QueryResult:
        return self._read("negative_lots", LotService.negative_lots)

    def grouped_inventory(self) -> QueryResult:
        return self._read("grouped_inventory", InventoryService.grouped_inventory)

    def low_stock_products(self, threshold: Optional[int] = None, limit: int = 10) -> QueryResult:
        threshold = self.low_stock_threshold if threshold is None else threshold
        return self._read(
            "low_stock_products",
            lambda db: InventoryService.low_stock_products(db, threshold=threshold, limit=limit),
        )

    def expiring_lots(self, days: Optional[int] = None, limit: int = 10) -> QueryResult:
        days = self.expiry_window_days if days is None else days
        return self._read(
            "expiring_lots", lambda db: InventoryService.expiring_lots(db, days=days, limit=limit)
        )

    def list_purchases(self) -> QueryResult:
        return self._read("list_purchases", PurchaseService.list_purchases)

    def purchase_items(self, compra_id: int) -> QueryResult:
        return self._read("purchase_items", lambda db: PurchaseService.purchase_items(db, compra_id))

    def list_sales(self) -> QueryResult:
        return self._read("list_sales", SaleService.list_sales)

    def sales_today(self) -> QueryResult:
        return self._read("sales_today", SaleService.sales_today)

    def sale_items(self, venta_id: int) -> QueryResult:
        return self._read("sale_items", lambda db: SaleService.sale_items(db, venta_id))

    def list_consumptions(self, lote_id: Optional[int] = None) -> QueryResult:
        return self._read(
            "list_consumptions", lambda db: ConsumptionService.list_consumptions(db, lote_id)
        )

    def earliest_expiration(self, producto_id: int):
        """Caducidad más próxima del producto (None si no hay o si la lectura falla)."""
        try:
            with self.database.session() as db:
                return LotService.earliest_expiration(db, producto_id)
        except Exception:
            logger.exception("Error inesperado en earliest_expiration")
            return None
