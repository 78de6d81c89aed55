"""
Error Taxonomy

Every failure surfaced by the state container or the HTTP layer is one of
these. Validation errors are raised before any write; store errors leave the
in-memory snapshot at its last known-good state.
"""


class InventoryError(Exception):
    """Base class for application errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InventoryValidationError(InventoryError):
    """Input rejected at the boundary; nothing was written"""


class InsufficientStockError(InventoryValidationError):
    """A sale asked for more units than the product has in stock"""

    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            f"Only {available} units of {product_name} available, {requested} requested"
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested


class RecordStoreError(InventoryError):
    """The record store rejected or failed an operation"""


class RecordNotFoundError(RecordStoreError):
    """No record with that id exists for the owner"""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class StockAdjustmentError(RecordStoreError):
    """The sale was recorded but the stock decrement that follows it failed"""


class AuthenticationError(InventoryError):
    """Bad credentials, duplicate account, or an invalid/expired session"""
