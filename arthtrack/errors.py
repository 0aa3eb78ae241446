class ArthTrackError(Exception):
    pass


class StoreUnavailable(ArthTrackError):
    """Raised when a ledger is used before a database connection was bound to it."""

    def __init__(self, message: str = "Database not initialized"):
        super().__init__(message)


class ValidationError(ArthTrackError, ValueError):
    """Caller-supplied input was rejected before reaching the store."""
