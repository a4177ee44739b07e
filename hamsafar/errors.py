# Postgres SQLSTATE for a duplicate unique or primary key
UNIQUE_VIOLATION = "23505"
# Postgres SQLSTATE for a reference to a missing parent row
FOREIGN_KEY_VIOLATION = "23503"


class HamsafarError(Exception):
    """Base class for errors raised or reported by the data-access layer."""


class DataSourceError(HamsafarError):
    """The active data source failed to complete an operation."""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


class UniqueViolation(DataSourceError):
    """An insert collided with an existing unique or composite key."""

    def __init__(self, message, code=UNIQUE_VIOLATION):
        super().__init__(message, code=code)


class ValidationError(HamsafarError):
    """A business rule rejected the operation before the store was touched."""
