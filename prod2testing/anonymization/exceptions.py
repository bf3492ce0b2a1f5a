class AnonymizationError(Exception):
    """Base exception for all anonymization errors."""


class ConfigError(AnonymizationError):
    """Raised when an anonymization document is missing, unreadable or invalid."""


class SchemaError(AnonymizationError):
    """Raised when a table cannot be anonymized safely against the live schema."""


class AnonymizationWarning(UserWarning):
    """Non-fatal problem: the affected item is skipped and the run continues."""

    def __init__(self, table: str, message: str) -> None:
        super().__init__(message)
        self.table = table


class MissingTableWarning(AnonymizationWarning):
    """A configured table does not exist in the live schema."""

    def __init__(self, table: str) -> None:
        super().__init__(
            table,
            f"The table '{table}' is configured but does not exist in db. "
            "Continuing with next table.",
        )


class MissingColumnWarning(AnonymizationWarning):
    """A configured column does not exist in the live schema."""

    def __init__(self, table: str, column: str) -> None:
        super().__init__(
            table,
            f"The column '{table}.{column}' does not exist in db. "
            "Continuing with next column.",
        )
        self.column = column
