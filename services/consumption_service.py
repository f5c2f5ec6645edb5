"""
Consumo interno (merma, muestras, daño): descuenta de un lote específico.
"""
import logging
from typing import Any, Mapping, Optional, Union

from sqlalchemy.orm import Session

from models.consumption import InternalConsumption
from services.exceptions import InventoryError, StorageError
from services.lot_service import LotService
from services.results import OperationResult, QueryResult
from services.schemas import ConsumptionIn, parse_payload
from services.serialization import serialized_write
from utils.dates import now_local

logger = logging.getLogger(__name__)


class ConsumptionService:
    """
    A diferencia de la venta, no se verifica el stock: el conteo físico puede no
    coincidir con el registro, así que la merma puede dejar el lote en negativo.
    """

    @staticmethod
    @serialized_write
    def record_consumption(db: Session, consumo: Union[ConsumptionIn, Mapping[str, Any]]) -> OperationResult:
        try:
            data = parse_payload(ConsumptionIn, consumo)
            lot = LotService.get_lot(db, data.lote_id)
        except InventoryError as exc:
            logger.warning("Consumo rechazado: %s", exc.message)
            return OperationResult.fail(exc.message, exc.code)

        now = now_local()
        try:
            # 1) Registro en consumos_internos
            db.add(
                InternalConsumption(
                    lote_id=data.lote_id,
                    cantidad=data.cantidad,
                    motivo=data.motivo,
                    observaciones=data.observaciones,
                    fecha=now,
                    created_at=now,
                    updated_at=now,
                )
            )

            # 2) Restar del lote en SQL, sin límite inferior; 3) si llegó a 0 o menos => inactivo
            cantidad_final = LotService.decrement(db, lot, data.cantidad, now)
            db.commit()
        except Exception as exc:
            db.rollback()
            logger.exception("Error record_consumption")
            detail = getattr(exc, "orig", None) or exc
            return OperationResult.fail(f"No se pudo registrar el consumo: {detail}", StorageError.code)

        if cantidad_final < 0:
            logger.warning(
                "Lote #%s quedó en %s tras un consumo de %s (stock registrado menor al físico)",
                data.lote_id,
                cantidad_final,
                data.cantidad,
            )
        logger.info(
            "Consumo interno en lote #%s: %s pieza(s), motivo=%s",
            data.lote_id,
            data.cantidad,
            data.motivo or "-",
        )
        return OperationResult.ok(data={"lote_id": data.lote_id, "cantidad_actual": cantidad_final})

    @staticmethod
    def list_consumptions(db: Session, lote_id: Optional[int] = None) -> QueryResult[InternalConsumption]:
        query = db.query(InternalConsumption)
        if lote_id is not None:
            query = query.filter(InternalConsumption.lote_id == lote_id)
        try:
            return QueryResult(
                data=query.order_by(InternalConsumption.fecha.desc(), InternalConsumption.id.desc()).all()
            )
        except Exception as exc:
            logger.exception("Error list_consumptions")
            return QueryResult.failed(f"No se pudieron leer los consumos: {exc}")
