"""
Ventas: verificación previa de stock, registro de la venta y descuento de lotes FEFO.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, List, Mapping, Union

from sqlalchemy.orm import Session

from models.product import Product
from models.sale import Sale, SaleItem
from services.exceptions import InsufficientStockError, InventoryError, StorageError
from services.lot_service import LotService
from services.results import OperationResult, QueryResult
from services.schemas import SaleIn, SaleItemIn, parse_payload, subtotal_linea
from services.serialization import serialized_write
from utils.dates import now_local, today_local

logger = logging.getLogger(__name__)


class SaleService:
    """
    Flujo de venta:
    (A) fuera de la transacción: stock suficiente para cada renglón, o se rechaza todo;
    (B) en una transacción: encabezado, detalles y descuento FEFO de lotes.
    """

    @staticmethod
    def verify_stock(db: Session, detalles: List[SaleItemIn]) -> None:
        """
        Lanza InsufficientStockError con el primer renglón que no alcanza.
        Cada renglón se compara contra el stock total de su producto.
        """
        for det in detalles:
            disponible = LotService.available_stock(db, det.producto_id)
            if det.piezas > disponible:
                raise InsufficientStockError(det.producto_id, det.piezas, disponible)

    @staticmethod
    def _build_item(db: Session, venta_id: int, det: SaleItemIn, now: datetime) -> SaleItem:
        product = db.get(Product, det.producto_id)
        precio_lista = product.precio_venta if product is not None else (det.precio_unitario or 0.0)
        if det.precio_unitario is None:
            precio_unitario = precio_lista - det.descuento_manual_fijo
        else:
            precio_unitario = det.precio_unitario

        return SaleItem(
            venta_id=venta_id,
            producto_id=det.producto_id,
            cantidad=det.cantidad,
            precio_lista=precio_lista,
            descuento_manual_fijo=det.descuento_manual_fijo,
            precio_unitario=precio_unitario,
            subtotal=subtotal_linea(
                det.tipo_contenedor, det.cantidad, det.unidades_por_contenedor, precio_unitario
            ),
            tipo_contenedor=det.tipo_contenedor,
            unidades_por_contenedor=det.unidades_por_contenedor,
            piezas_vendidas=det.piezas,
            lote=det.lote,
            fecha_caducidad=det.fecha_caducidad,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def deplete_fefo(db: Session, producto_id: int, piezas: int, now: datetime) -> int:
        """
        Descuenta piezas de los lotes del producto en orden FEFO.
        Un lote que llega a cero queda inactivo.
        Devuelve las piezas que no se pudieron descontar (0 si alcanzó).
        """
        restante = piezas
        while restante > 0:
            lot = LotService.next_depletable_lot(db, producto_id)
            if lot is None:
                break

            usado = min(lot.cantidad_actual, restante)
            LotService.decrement(db, lot, usado, now)
            restante -= usado
        return restante

    @staticmethod
    @serialized_write
    def create_sale(db: Session, venta: Union[SaleIn, Mapping[str, Any]]) -> OperationResult:
        try:
            data = parse_payload(SaleIn, venta)
        except InventoryError as exc:
            logger.warning("Venta rechazada: %s", exc.message)
            return OperationResult.fail(exc.message, exc.code)

        # (A) Verificación previa de stock
        try:
            SaleService.verify_stock(db, data.detalles)
        except InsufficientStockError as exc:
            logger.warning("Venta rechazada: %s", exc.message)
            return OperationResult.fail(exc.message, exc.code)
        except Exception as exc:
            db.rollback()
            logger.exception("Error verificando stock")
            return OperationResult.fail(str(exc), StorageError.code)

        # (B) Transacción
        now = now_local()
        warnings = []
        try:
            sale = Sale(
                fecha=data.fecha or now,
                total=data.total,
                observaciones=data.observaciones,
                created_at=now,
                updated_at=now,
            )
            db.add(sale)
            db.flush()

            for det in data.detalles:
                db.add(SaleService._build_item(db, sale.id, det, now))
            db.flush()

            for det in data.detalles:
                faltante = SaleService.deplete_fefo(db, det.producto_id, det.piezas, now)
                if faltante > 0:
                    aviso = (
                        f"Producto #{det.producto_id}: se descontaron {det.piezas - faltante} "
                        f"de {det.piezas} piezas; no quedaron lotes con stock para {faltante}"
                    )
                    logger.warning("Venta #%s: %s", sale.id, aviso)
                    warnings.append(aviso)
            db.commit()
        except Exception as exc:
            db.rollback()
            logger.exception("Error create_sale")
            return OperationResult.fail(str(getattr(exc, "orig", None) or exc), StorageError.code)

        logger.info(
            "Venta #%s registrada: %s renglón(es), %s pieza(s)",
            sale.id,
            len(data.detalles),
            sum(det.piezas for det in data.detalles),
        )
        return OperationResult.ok(data={"venta_id": sale.id}, warnings=warnings)

    @staticmethod
    def list_sales(db: Session) -> QueryResult[Sale]:
        try:
            ventas = db.query(Sale).order_by(Sale.fecha.desc(), Sale.id.desc()).all()
            return QueryResult(data=ventas)
        except Exception as exc:
            logger.exception("Error list_sales")
            return QueryResult.failed(f"No se pudieron leer las ventas: {exc}")

    @staticmethod
    def sales_today(db: Session) -> QueryResult[Sale]:
        """Ventas del día en la hora local de la tienda."""
        inicio = datetime.combine(today_local(), datetime.min.time())
        fin = inicio + timedelta(days=1)
        try:
            ventas = (
                db.query(Sale).filter(Sale.fecha >= inicio, Sale.fecha < fin).order_by(Sale.fecha).all()
            )
            return QueryResult(data=ventas)
        except Exception as exc:
            logger.exception("Error sales_today")
            return QueryResult.failed(f"No se pudieron leer las ventas: {exc}")

    @staticmethod
    def sale_items(db: Session, venta_id: int) -> QueryResult[SaleItem]:
        try:
            items = db.query(SaleItem).filter(SaleItem.venta_id == venta_id).order_by(SaleItem.id).all()
            return QueryResult(data=items)
        except Exception as exc:
            logger.exception("Error sale_items")
            return QueryResult.failed(f"No se pudieron leer los detalles: {exc}")
