"""
Errores tipados del inventario.

    InventoryError (base)
    +-- InvalidRequestError      datos mal formados; no se abre transacción
    +-- InsufficientStockError   la verificación previa de una venta falló
    +-- LotNotFoundError         el lote indicado no existe
    +-- StorageError             falla del motor de base de datos (se hace rollback)

Cada error lleva un `code` estable para que el llamador no dependa del texto.
"""


class InventoryError(Exception):
    code = "inventory_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(InventoryError):
    code = "validation_error"


class InsufficientStockError(InventoryError):
    code = "insufficient_stock"

    def __init__(self, producto_id: int, requerido: int, disponible: int):
        self.producto_id = producto_id
        self.requerido = requerido
        self.disponible = disponible
        super().__init__(
            f"No hay stock suficiente para producto #{producto_id}. "
            f"Requerido: {requerido}, disponible: {disponible}"
        )


class LotNotFoundError(InventoryError):
    code = "lot_not_found"

    def __init__(self, lote_id: int):
        self.lote_id = lote_id
        super().__init__(f"El lote #{lote_id} no existe")


class StorageError(InventoryError):
    code = "storage_error"
