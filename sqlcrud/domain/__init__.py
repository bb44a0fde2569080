"""Entity mapping markers and value objects used to build SQL."""

from .markers import Column, Id, Transient, table
from .value_objects import FieldValue, Page, Pageable, SqlSegment

__all__ = [
    "Column",
    "FieldValue",
    "Id",
    "Page",
    "Pageable",
    "SqlSegment",
    "Transient",
    "table",
]
