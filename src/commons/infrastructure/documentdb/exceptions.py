"""Document database exceptions."""


class DocumentDBError(Exception):
    """Base exception for document database failures."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class DocumentDBConnectionError(DocumentDBError):
    """Raised when a connection to the database cannot be established."""

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(f"Failed to connect to document database: {cause}", cause)


class DocumentDBOperationError(DocumentDBError):
    """Raised when a single database operation fails."""

    def __init__(
        self,
        collection: str,
        operation: str,
        cause: BaseException | None = None,
    ) -> None:
        self.collection = collection
        self.operation = operation
        super().__init__(
            f"Operation '{operation}' on collection '{collection}' failed: {cause}",
            cause,
        )
