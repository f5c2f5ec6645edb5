"""
Compras: registra encabezado + detalles y genera un lote por renglón, todo en una transacción.
"""
import logging
from typing import Any, Mapping, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.lot import Lot
from models.purchase import Purchase, PurchaseItem
from services.exceptions import InventoryError, StorageError
from services.lot_service import LotService
from services.results import OperationResult, QueryResult
from services.schemas import PurchaseIn, PurchaseUpdate, parse_payload, subtotal_linea
from services.serialization import serialized_write
from utils.dates import now_local

logger = logging.getLogger(__name__)


def _error_message(prefix: str, exc: Exception) -> str:
    detail = getattr(exc, "orig", None) or exc
    return f"{prefix}: {detail}"


class PurchaseService:
    """
    Las compras siempre se aceptan (no hay verificación de stock).
    El total del encabezado se guarda tal como llega; no se recalcula.
    """

    @staticmethod
    @serialized_write
    def create_purchase(db: Session, compra: Union[PurchaseIn, Mapping[str, Any]]) -> OperationResult:
        try:
            data = parse_payload(PurchaseIn, compra)
        except InventoryError as exc:
            logger.warning("Compra rechazada: %s", exc.message)
            return OperationResult.fail(exc.message, exc.code)

        now = now_local()
        try:
            purchase = Purchase(
                proveedor_id=data.proveedor_id,
                fecha=data.fecha or now,
                total=data.total,
                observaciones=data.observaciones,
                created_at=now,
                updated_at=now,
            )
            db.add(purchase)
            db.flush()

            # 1) Detalles
            items = []
            for det in data.detalles:
                sub = subtotal_linea(
                    det.tipo_contenedor, det.cantidad, det.unidades_por_contenedor, det.precio_unitario
                )
                piezas = det.piezas
                item = PurchaseItem(
                    compra_id=purchase.id,
                    producto_id=det.producto_id,
                    cantidad=det.cantidad,
                    precio_unitario=det.precio_unitario,
                    subtotal=sub,
                    lote=det.lote,
                    fecha_caducidad=det.fecha_caducidad,
                    tipo_contenedor=det.tipo_contenedor,
                    unidades_por_contenedor=det.unidades_por_contenedor,
                    piezas_ingresadas=piezas,
                    precio_por_pieza=sub / piezas if piezas else 0.0,
                    created_at=now,
                    updated_at=now,
                )
                db.add(item)
                items.append(item)
            db.flush()

            # 2) Un lote nuevo por renglón, con las piezas reales
            for det, item in zip(data.detalles, items):
                db.add(
                    LotService.build_lot(
                        det.producto_id,
                        detalle_compra_id=item.id,
                        lote=det.lote,
                        fecha_caducidad=det.fecha_caducidad,
                        cantidad_actual=item.piezas_ingresadas,
                        activo=True,
                        now=now,
                    )
                )
            db.commit()
        except Exception as exc:
            db.rollback()
            logger.exception("Error create_purchase")
            return OperationResult.fail(
                _error_message("No se pudo registrar la compra", exc), StorageError.code
            )

        logger.info(
            "Compra #%s registrada: proveedor #%s, %s lote(s) nuevo(s)",
            purchase.id,
            purchase.proveedor_id,
            len(items),
        )
        return OperationResult.ok(data={"compra_id": purchase.id})

    @staticmethod
    def list_purchases(db: Session) -> QueryResult[Purchase]:
        try:
            compras = db.query(Purchase).order_by(Purchase.fecha.desc(), Purchase.id.desc()).all()
            return QueryResult(data=compras)
        except Exception as exc:
            logger.exception("Error list_purchases")
            return QueryResult.failed(_error_message("No se pudieron leer las compras", exc))

    @staticmethod
    def purchase_items(db: Session, compra_id: int) -> QueryResult[PurchaseItem]:
        try:
            items = (
                db.query(PurchaseItem).filter(PurchaseItem.compra_id == compra_id).order_by(PurchaseItem.id).all()
            )
            return QueryResult(data=items)
        except Exception as exc:
            logger.exception("Error purchase_items")
            return QueryResult.failed(_error_message("No se pudieron leer los detalles", exc))

    @staticmethod
    @serialized_write
    def update_purchase(db: Session, compra_id: int, encabezado: Mapping[str, Any]) -> OperationResult:
        """
        Actualiza SOLO el encabezado (no toca detalles ni lotes).
        """
        try:
            data = parse_payload(PurchaseUpdate, encabezado)
        except InventoryError as exc:
            return OperationResult.fail(exc.message, exc.code)

        purchase = db.get(Purchase, compra_id)
        if purchase is None:
            return OperationResult.fail(f"La compra #{compra_id} no existe", "not_found")
        now = now_local()
        try:
            purchase.proveedor_id = data.proveedor_id
            purchase.fecha = data.fecha or now
            purchase.total = data.total
            purchase.observaciones = data.observaciones
            purchase.updated_at = now
            db.commit()
        except Exception as exc:
            db.rollback()
            logger.exception("Error update_purchase")
            return OperationResult.fail(
                _error_message("No se pudo actualizar la compra", exc), StorageError.code
            )
        return OperationResult.ok(data={"compra_id": compra_id})

    @staticmethod
    @serialized_write
    def delete_purchase(db: Session, compra_id: int) -> OperationResult:
        """
        Elimina encabezado + detalles. Los lotes generados se conservan
        (solo pierden la referencia al detalle).
        """
        if db.get(Purchase, compra_id) is None:
            return OperationResult.fail(f"La compra #{compra_id} no existe", "not_found")
        detalle_ids = select(PurchaseItem.id).where(PurchaseItem.compra_id == compra_id)
        try:
            db.query(Lot).filter(Lot.detalle_compra_id.in_(detalle_ids)).update(
                {Lot.detalle_compra_id: None}, synchronize_session=False
            )
            db.query(PurchaseItem).filter(PurchaseItem.compra_id == compra_id).delete(synchronize_session=False)
            db.query(Purchase).filter(Purchase.id == compra_id).delete(synchronize_session=False)
            db.commit()
        except Exception as exc:
            db.rollback()
            logger.exception("Error delete_purchase")
            return OperationResult.fail(
                _error_message("No se pudo eliminar la compra", exc), StorageError.code
            )
        db.expire_all()
        logger.info("Compra #%s eliminada (lotes conservados)", compra_id)
        return OperationResult.ok()
