"""Remote store error types. Messages are user-facing and passed straight to notifications."""


class StoreError(Exception):
    """A remote store operation was rejected (policy, constraint, bad request)."""

    def __init__(self, message: str, *, status_code: int | None = None, table: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.table = table

    def __str__(self) -> str:
        return self.message


class StoreUnavailableError(StoreError):
    """The remote store could not be reached (network, timeout, connection refused)."""


class RecordNotFoundError(StoreError):
    """A referenced row does not exist."""
