class BookstoreError(Exception):
    """Base exception for bookstore errors."""

    pass


class DatabaseNotInitializedError(BookstoreError):
    """MongoDB client used before init_client() was called."""

    pass


class QueryExecutionError(BookstoreError):
    """MongoDB rejected or failed to execute a statement."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class InvalidPageError(BookstoreError, ValueError):
    """Page number or page size out of range."""

    pass
