from .field_value import FieldValue
from .paging import Page, Pageable
from .sql_segment import SqlSegment

__all__ = [
    "FieldValue",
    "Page",
    "Pageable",
    "SqlSegment",
]
