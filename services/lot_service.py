"""
Almacén de lotes: CRUD de 'lotes' y la consulta FEFO del siguiente lote a descontar.
"""
import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.lot import Lot
from services.exceptions import LotNotFoundError, StorageError
from services.results import QueryResult
from services.schemas import LotIn, LotUpdate, parse_payload
from services.serialization import serialized_write
from utils.dates import now_local

logger = logging.getLogger(__name__)


def _check_shape(lot: Lot) -> Lot:
    """
    Rechaza filas que no cuadran con la entidad (p. ej. cantidades REAL heredadas
    de una base vieja o un activo que no es booleano).
    """
    if not isinstance(lot.producto_id, int):
        raise StorageError(f"Lote #{lot.id}: producto_id inválido ({lot.producto_id!r})")
    cantidad = lot.cantidad_actual
    if isinstance(cantidad, float) and cantidad.is_integer():
        lot.cantidad_actual = int(cantidad)
    elif not isinstance(cantidad, int) or isinstance(cantidad, bool):
        raise StorageError(f"Lote #{lot.id}: cantidad_actual inválida ({cantidad!r})")
    if lot.activo not in (True, False, 0, 1):
        raise StorageError(f"Lote #{lot.id}: activo inválido ({lot.activo!r})")
    if lot.fecha_caducidad is not None and not isinstance(lot.fecha_caducidad, date):
        raise StorageError(f"Lote #{lot.id}: fecha_caducidad inválida ({lot.fecha_caducidad!r})")
    return lot


def _fefo_order():
    # Sin caducidad al final, luego caducidad más próxima, luego id como desempate
    return (
        Lot.fecha_caducidad.is_(None),
        Lot.fecha_caducidad.asc(),
        Lot.id.asc(),
    )


def _depletable(producto_id: int):
    return (
        Lot.producto_id == producto_id,
        Lot.activo.is_(True),
        Lot.cantidad_actual > 0,
    )


class LotService:
    """
    Manejo de lotes. Las escrituras administrativas hacen commit propio;
    compras, ventas y consumos usan build_lot / next_depletable_lot / decrement dentro de su transacción.
    """

    @staticmethod
    def list_lots(db: Session) -> QueryResult[Lot]:
        """Todos los lotes, activos o no."""
        try:
            lotes = db.query(Lot).order_by(Lot.id).all()
            return QueryResult(data=[_check_shape(l) for l in lotes])
        except (SQLAlchemyError, StorageError) as exc:
            logger.exception("Error list_lots")
            return QueryResult.failed(f"No se pudieron leer los lotes: {exc}")

    @staticmethod
    def get_lot(db: Session, lote_id: int) -> Lot:
        # Siempre desde la base, aunque la sesión ya tenga el lote cargado
        lot = db.query(Lot).populate_existing().filter(Lot.id == lote_id).first()
        if lot is None:
            raise LotNotFoundError(lote_id)
        return _check_shape(lot)

    @staticmethod
    def build_lot(
        producto_id: int,
        detalle_compra_id: Optional[int] = None,
        lote: Optional[str] = None,
        fecha_caducidad: Optional[date] = None,
        cantidad_actual: int = 0,
        activo: bool = True,
        now: Optional[datetime] = None,
    ) -> Lot:
        """Lote nuevo sin guardar; quien llama decide la transacción."""
        now = now or now_local()
        return Lot(
            producto_id=producto_id,
            detalle_compra_id=detalle_compra_id,
            lote=lote,
            fecha_caducidad=fecha_caducidad,
            cantidad_actual=cantidad_actual,
            activo=activo,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    @serialized_write
    def create_lot(db: Session, producto_id: int, fields: Optional[Mapping[str, Any]] = None) -> Lot:
        """
        Alta manual de un lote. cantidad_actual=0 y activo=True si no se indican.
        """
        data = parse_payload(LotIn, {**dict(fields or {}), "producto_id": producto_id})
        lot = LotService.build_lot(**data.model_dump())
        try:
            db.add(lot)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Error create_lot")
            raise StorageError(f"No se pudo crear el lote: {exc}") from exc
        logger.info("Lote #%s creado para producto #%s (%s piezas)", lot.id, producto_id, lot.cantidad_actual)
        return lot

    @staticmethod
    @serialized_write
    def update_lot(db: Session, lote_id: int, fields: Mapping[str, Any]) -> None:
        """
        Reemplaza los campos mutables. No recalcula activo a partir de la cantidad.
        """
        data = parse_payload(LotUpdate, fields)
        lot = LotService.get_lot(db, lote_id)
        try:
            lot.detalle_compra_id = data.detalle_compra_id
            lot.lote = data.lote
            lot.fecha_caducidad = data.fecha_caducidad
            lot.cantidad_actual = data.cantidad_actual
            lot.activo = data.activo
            lot.updated_at = now_local()
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Error update_lot")
            raise StorageError(f"No se pudo actualizar el lote: {exc}") from exc

    @staticmethod
    @serialized_write
    def delete_lot(db: Session, lote_id: int) -> None:
        """
        Borrado físico, sin cascada ni rastro. Usar con cautela.
        """
        lot = LotService.get_lot(db, lote_id)
        try:
            db.delete(lot)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Error delete_lot")
            raise StorageError(f"No se pudo eliminar el lote: {exc}") from exc
        logger.info("Lote #%s eliminado", lote_id)

    @staticmethod
    def next_depletable_lot(db: Session, producto_id: int) -> Optional[Lot]:
        """
        Lote activo con stock que toca descontar según FEFO, o None.
        Siempre relee la fila aunque la sesión ya tenga el lote cargado.
        """
        lot = (
            db.query(Lot)
            .populate_existing()
            .filter(*_depletable(producto_id))
            .order_by(*_fefo_order())
            .first()
        )
        return _check_shape(lot) if lot is not None else None

    @staticmethod
    def decrement(db: Session, lot: Lot, piezas: int, now: Optional[datetime] = None) -> int:
        """
        Resta piezas del lote en SQL (cantidad_actual = cantidad_actual - piezas), sin límite
        inferior, y lo desactiva si quedó en cero o menos. No hace commit.
        Devuelve la cantidad resultante leída de la base.
        """
        now = now or now_local()
        db.query(Lot).filter(Lot.id == lot.id).update(
            {Lot.cantidad_actual: Lot.cantidad_actual - piezas, Lot.updated_at: now},
            synchronize_session=False,
        )
        db.query(Lot).filter(Lot.id == lot.id, Lot.cantidad_actual <= 0).update(
            {Lot.activo: False}, synchronize_session=False
        )
        db.refresh(lot, attribute_names=["cantidad_actual", "activo", "updated_at"])
        return lot.cantidad_actual

    @staticmethod
    def available_stock(db: Session, producto_id: int) -> int:
        """Suma de cantidad_actual en lotes activos con stock."""
        total = (
            db.query(func.coalesce(func.sum(Lot.cantidad_actual), 0))
            .filter(*_depletable(producto_id))
            .scalar()
        )
        return int(total)

    @staticmethod
    def earliest_expiration(db: Session, producto_id: int) -> Optional[date]:
        """
        Caducidad más próxima entre los lotes activos con stock, o None.
        """
        return (
            db.query(func.min(Lot.fecha_caducidad))
            .filter(*_depletable(producto_id), Lot.fecha_caducidad.is_not(None))
            .scalar()
        )

    @staticmethod
    def negative_lots(db: Session) -> QueryResult[Lot]:
        """Lotes cuya cantidad quedó por debajo de cero (consumos mayores al stock)."""
        try:
            lotes = db.query(Lot).filter(Lot.cantidad_actual < 0).order_by(Lot.id).all()
            return QueryResult(data=lotes)
        except SQLAlchemyError as exc:
            logger.exception("Error negative_lots")
            return QueryResult.failed(f"No se pudieron leer los lotes: {exc}")
