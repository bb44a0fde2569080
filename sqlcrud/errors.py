from __future__ import annotations

from typing import Optional


class DataAccessError(RuntimeError):
    """Raised when a statement cannot be executed or its result is unusable."""

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        super().__init__(message)
        self.sql = sql


class IncorrectResultSizeError(DataAccessError):
    """Raised when a single-row query returns a different number of rows."""

    def __init__(self, expected: int, actual: int, sql: Optional[str] = None) -> None:
        super().__init__(f"Incorrect result size: expected {expected}, actual {actual}", sql)
        self.expected = expected
        self.actual = actual


class EmptyResultError(IncorrectResultSizeError):
    """Raised when a single-row query returns no rows."""

    def __init__(self, sql: Optional[str] = None) -> None:
        super().__init__(1, 0, sql)


class TableMetaError(RuntimeError):
    """Raised when the table mapping of an entity class cannot be inferred."""


class TemplateParseError(ValueError):
    """Raised when an XML template file cannot be parsed."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
