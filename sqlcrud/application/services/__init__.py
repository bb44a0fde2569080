from .crud_service import CrudService
from .table_meta import FieldMeta, TableMeta, camel_to_snake

__all__ = [
    "CrudService",
    "FieldMeta",
    "TableMeta",
    "camel_to_snake",
]
