"""Domain error classes.

Every operation in kitchen_ledger.core validates its input against the current
snapshot before computing anything, and raises one of these on failure.  The
web layer maps each class to an HTTP status; the message is user-facing.

    LedgerError
    ├── ValidationError
    │   └── InsufficientStockError
    ├── NotFoundError
    ├── DuplicateNameError
    ├── OrphanedCompensationError
    └── StoreWriteError
"""


class LedgerError(Exception):
    """Base class for all domain errors."""


class ValidationError(LedgerError):
    """Malformed input (non-positive quantity, empty name, unknown unit...)."""


class InsufficientStockError(ValidationError):
    """Raised when an item does not have enough stock for the operation.

    shortages is a list of (name, required, available) tuples.
    """

    def __init__(self, message: str, shortages: list = None):
        self.shortages = shortages or []
        super().__init__(message)


class NotFoundError(LedgerError):
    """Raised when a referenced entity does not exist in the snapshot."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class DuplicateNameError(LedgerError):
    """Raised when creating a named record whose name already exists."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"A {kind.lower()} named '{name}' already exists")


class OrphanedCompensationError(LedgerError):
    """Raised when a reversal must restore stock on an item that no longer exists.

    Callers can retry with force=True to drop the record without restoring.
    """

    def __init__(self, record_kind: str, record_id: str, item_id: str):
        self.record_kind = record_kind
        self.record_id = record_id
        self.item_id = item_id
        super().__init__(
            f"Cannot restore stock for {record_kind} {record_id}: "
            f"item {item_id} no longer exists"
        )


class StoreWriteError(LedgerError):
    """Raised when the document store rejects a write."""
