"""Error types shared by the record store and the HTTP layer."""


class StoreError(Exception):
    """Base class for record store errors."""


class RecordNotFound(StoreError):
    """Raised when no row matches the requested id."""

    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__(f'log item {item_id} not found')


class StoreFailure(StoreError):
    """Raised when a write touches an unexpected number of rows."""

    def __init__(self, message: str, rows_affected: int | None = None):
        self.rows_affected = rows_affected
        super().__init__(message)
