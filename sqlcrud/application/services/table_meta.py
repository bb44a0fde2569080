"""Table metadata inference for entity classes.

Given an entity class (a dataclass, a pydantic model or any class with
annotated attributes), :meth:`TableMeta.of` works out

- the table name: ``__tablename__`` when set, otherwise the snake_case class name;
- the id field: the field marked ``Id()``, otherwise a field called ``id``;
- the insertable columns: every other field that is not ``Transient()``,
  ``ClassVar`` or ``Final``. Names starting with an underscore are private
  attributes and never mapped;

and pre-builds the select-all, select-by-id, delete-by-id and insert SQL.

Rows are turned back into entities through keyword arguments for dataclasses
and pydantic models; any other class is created without arguments and its
fields are assigned one by one.
"""

from __future__ import annotations

import logging
import re
import typing
from dataclasses import dataclass, field, is_dataclass
from typing import Annotated, Any, ClassVar, Final, Generic, Mapping, TypeVar, get_args, get_origin

from sqlcrud.domain.markers import Column, Id, Transient
from sqlcrud.errors import TableMetaError

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")

_UPPER_RE = re.compile(r"(?<=[^_])([A-Z])")
DEFAULT_ID_FIELD = "id"


def camel_to_snake(value: str) -> str:
    """Convert upper or lower camel case to lower underscore.

    Every upper-case letter starts a new word (``userID`` -> ``user_i_d``),
    existing underscores are kept as they are.
    """
    return _UPPER_RE.sub(r"_\1", value).lower()


@dataclass(frozen=True)
class FieldMeta:
    name: str
    column: str
    is_id: bool = False


def _unwrap(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split an ``Annotated`` hint into its inner type and metadata."""
    if get_origin(hint) is Annotated:
        inner, *extras = get_args(hint)
        return inner, tuple(extras)
    return hint, ()


def _is_class_level(hint: Any) -> bool:
    return hint is ClassVar or hint is Final or get_origin(hint) in (ClassVar, Final)


def _column_override(extras: tuple[Any, ...]) -> str:
    for extra in extras:
        if isinstance(extra, Column) and extra.name:
            return extra.name
    return ""


def _has_marker(extras: tuple[Any, ...], marker: type) -> bool:
    return any(isinstance(extra, marker) or extra is marker for extra in extras)


def _resolve_hints(entity_cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(entity_cls, include_extras=True)
    except Exception as exc:
        logger.error("Could not resolve type hints of %s", entity_cls, exc_info=True)
        raise TableMetaError(f"Cannot resolve annotations of {entity_cls!r}: {exc}") from exc


def _declared_fields(entity_cls: type) -> list[tuple[str, Any, tuple[Any, ...]]]:
    """(name, type, markers) of every attribute, base classes first."""
    model_fields = getattr(entity_cls, "model_fields", None)
    if isinstance(model_fields, dict):
        # pydantic keeps Annotated extras in FieldInfo.metadata
        return [
            (name, info.annotation, tuple(info.metadata)) for name, info in model_fields.items()
        ]
    result = []
    for name, hint in _resolve_hints(entity_cls).items():
        if _is_class_level(hint):
            continue
        inner, extras = _unwrap(hint)
        result.append((name, inner, extras))
    return result


@dataclass
class TableMeta(Generic[EntityT]):
    entity_cls: type[EntityT]
    table_name: str
    id_field: FieldMeta
    columns: list[FieldMeta] = field(default_factory=list)

    # Generated SQL
    get_all_sql: str = ""
    get_by_id_sql: str = ""
    delete_by_id_sql: str = ""
    insert_sql: str = ""

    def __post_init__(self) -> None:
        self._by_name = {f.name: f for f in [self.id_field, *self.columns]}
        self._by_column = {f.column.lower(): f for f in [self.id_field, *self.columns]}
        self._keyword_init = is_dataclass(self.entity_cls) or isinstance(
            getattr(self.entity_cls, "model_fields", None), dict
        )
        self._generate_sql()

    @property
    def id_column(self) -> str:
        return self.id_field.column

    @classmethod
    def of(cls, entity_cls: type[EntityT]) -> "TableMeta[EntityT]":
        """Infer the table mapping of ``entity_cls``."""
        table_name = getattr(entity_cls, "__tablename__", None) or ""
        if not table_name:
            logger.info("[%s] has no __tablename__, deriving it from the class name", entity_cls)
            table_name = camel_to_snake(entity_cls.__name__)

        id_field: FieldMeta | None = None
        columns: list[FieldMeta] = []
        for name, inner, extras in _declared_fields(entity_cls):
            if name.startswith("_") or _is_class_level(inner):
                continue
            column = _column_override(extras) or camel_to_snake(name)
            if _has_marker(extras, Id):
                id_field = FieldMeta(name=name, column=column, is_id=True)
            elif not _has_marker(extras, Transient):
                columns.append(FieldMeta(name=name, column=column))

        if id_field is None:
            logger.info(
                "[%s] has no Id() marker, will use *%s* as id column name",
                entity_cls,
                DEFAULT_ID_FIELD,
            )
            fallback = next((c for c in columns if c.name == DEFAULT_ID_FIELD), None)
            if fallback is None:
                logger.error("initial table meta of %s failed: no id field", entity_cls)
                raise TableMetaError(
                    f"{entity_cls.__name__} has neither an Id() field nor a field named "
                    f"'{DEFAULT_ID_FIELD}'"
                )
            columns.remove(fallback)
            id_field = FieldMeta(name=fallback.name, column=fallback.column, is_id=True)

        meta = cls(entity_cls=entity_cls, table_name=table_name, id_field=id_field, columns=columns)
        logger.info(
            "[%s] detected table meta: table-name `%s`, id-column-name `%s`",
            entity_cls,
            meta.table_name,
            meta.id_column,
        )
        logger.debug("[%s] generated insert sql is `%s`", entity_cls, meta.insert_sql)
        return meta

    def _generate_sql(self) -> None:
        self.get_all_sql = f"select * from {self.table_name}"
        self.get_by_id_sql = f"select * from {self.table_name} where {self.id_column} = :id"
        self.delete_by_id_sql = f"delete from {self.table_name} where {self.id_column} = :id"
        if self.columns:
            keys = ",".join(c.column for c in self.columns)
            values = ",".join(f":{c.name}" for c in self.columns)
            self.insert_sql = f"insert into {self.table_name} ({keys}) values ({values})"
        else:
            self.insert_sql = f"insert into {self.table_name} default values"

    def column_for(self, field_name: str) -> str:
        """Column of a mapped field, or the snake_case of an unknown name."""
        known = self._by_name.get(field_name)
        return known.column if known is not None else camel_to_snake(field_name)

    def to_params(self, entity: EntityT) -> dict[str, Any]:
        """Insert parameters of ``entity`` keyed by field name."""
        return {c.name: getattr(entity, c.name, None) for c in self.columns}

    def id_of(self, entity: EntityT) -> Any:
        return getattr(entity, self.id_field.name)

    def set_id(self, entity: EntityT, value: Any) -> None:
        setattr(entity, self.id_field.name, value)

    def to_entity(self, row: Mapping[str, Any]) -> EntityT:
        """Build an entity from a result row, ignoring unmapped columns."""
        kwargs: dict[str, Any] = {}
        for key, value in row.items():
            meta = self._by_column.get(str(key).lower()) or self._by_name.get(str(key))
            if meta is not None:
                kwargs[meta.name] = value
        if self._keyword_init:
            return self.entity_cls(**kwargs)
        entity = self.entity_cls()
        for name, value in kwargs.items():
            setattr(entity, name, value)
        return entity
