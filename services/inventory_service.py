"""
Agregados de inventario: lotes activos agrupados por producto, stock bajo y próximos a vencer.
Todas son lecturas; "lote activo" significa activo=True y en los totales nunca cuenta una
cantidad negativa.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from models.lot import Lot
from models.product import Product
from services.results import QueryResult
from utils.dates import today_local

logger = logging.getLogger(__name__)


@dataclass
class InventoryGroup:
    product: Product
    lotes_activos: List[Lot] = field(default_factory=list)

    @property
    def cantidad_lotes(self) -> int:
        return len(self.lotes_activos)

    @property
    def total_piezas(self) -> int:
        return sum(l.cantidad_disponible for l in self.lotes_activos)

    def to_dict(self) -> dict:
        return {
            "producto_id": self.product.id,
            "nombre": self.product.nombre,
            "cantidad_lotes": self.cantidad_lotes,
            "total_piezas": self.total_piezas,
            "lotes": [l.to_dict() for l in self.lotes_activos],
        }


@dataclass
class LowStockRow:
    producto_id: int
    nombre: str
    stock: int


class InventoryService:
    @staticmethod
    def grouped_inventory(db: Session) -> QueryResult[InventoryGroup]:
        """
        Un grupo por producto con sus lotes activos, cantidad de lotes y piezas totales.
        Se leen productos y lotes una sola vez.
        """
        try:
            productos = db.query(Product).order_by(Product.nombre, Product.id).all()
            lotes = db.query(Lot).filter(Lot.activo.is_(True)).order_by(Lot.id).all()
        except Exception as exc:
            logger.exception("Error grouped_inventory")
            return QueryResult.failed(f"No se pudo leer el inventario: {exc}")

        por_producto = {}
        for lot in lotes:
            por_producto.setdefault(lot.producto_id, []).append(lot)
        return QueryResult(
            data=[InventoryGroup(product=p, lotes_activos=por_producto.get(p.id, [])) for p in productos]
        )

    @staticmethod
    def low_stock_products(db: Session, threshold: int = 5, limit: int = 10) -> QueryResult[LowStockRow]:
        """
        Productos activos cuyo stock (lotes activos con cantidad > 0) está por debajo
        del umbral, de menor a mayor.
        """
        stock = func.coalesce(func.sum(Lot.cantidad_actual), 0).label("stock")
        query = (
            db.query(Product.id, Product.nombre, stock)
            .outerjoin(
                Lot,
                and_(Lot.producto_id == Product.id, Lot.activo.is_(True), Lot.cantidad_actual > 0),
            )
            .filter(Product.activo.is_(True))
            .group_by(Product.id, Product.nombre)
            .having(stock < threshold)
            .order_by(stock.asc(), Product.id.asc())
            .limit(limit)
        )
        try:
            rows = query.all()
        except Exception as exc:
            logger.exception("Error low_stock_products")
            return QueryResult.failed(f"No se pudo calcular el stock bajo: {exc}")
        return QueryResult(data=[LowStockRow(producto_id=r.id, nombre=r.nombre, stock=int(r.stock)) for r in rows])

    @staticmethod
    def expiring_lots(
        db: Session, days: int = 30, limit: int = 10, today: Optional[date] = None
    ) -> QueryResult[Lot]:
        """
        Lotes activos con stock que caducan entre hoy y hoy + days (los ya vencidos no).
        """
        today = today or today_local()
        query = (
            db.query(Lot)
            .filter(
                Lot.activo.is_(True),
                Lot.cantidad_actual > 0,
                Lot.fecha_caducidad.is_not(None),
                Lot.fecha_caducidad >= today,
                Lot.fecha_caducidad <= today + timedelta(days=days),
            )
            .order_by(Lot.fecha_caducidad.asc(), Lot.id.asc())
            .limit(limit)
        )
        try:
            return QueryResult(data=query.all())
        except Exception as exc:
            logger.exception("Error expiring_lots")
            return QueryResult.failed(f"No se pudieron leer los lotes por vencer: {exc}")
