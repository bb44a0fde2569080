"""Generic CRUD over one table.

:class:`CrudService` combines the :class:`~.table_meta.TableMeta` of an entity
class with a :class:`~sqlcrud.repositories.executor.SqlExecutor`. Every
statement is generated from that metadata; field filters match ``None`` with
``is null``.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Iterable, Optional, Sequence, TypeVar, get_args, get_origin

from sqlcrud.domain.value_objects import FieldValue, Page, Pageable, SqlSegment
from sqlcrud.errors import DataAccessError
from sqlcrud.repositories.executor import SqlExecutor

from .table_meta import TableMeta

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")
PkT = TypeVar("PkT")

KEY_PARAM = "id"


def _entity_type_of(service_cls: type) -> Optional[type]:
    """Return the first generic argument given to ``CrudService`` by a subclass."""
    for klass in service_cls.__mro__:
        for base in getattr(klass, "__orig_bases__", ()):
            origin = get_origin(base)
            if isinstance(origin, type) and issubclass(origin, CrudService):
                args = get_args(base)
                if args and isinstance(args[0], type):
                    return args[0]
    return None


class _ParamBinder:
    """Collects named parameters, giving repeated field names distinct keys."""

    def __init__(self, params: Optional[dict[str, Any]] = None) -> None:
        self.params: dict[str, Any] = params if params is not None else {}

    def bind(self, name: str, value: Any) -> str:
        key = name
        n = 1
        while key in self.params:
            n += 1
            key = f"{name}_{n}"
        self.params[key] = value
        return key


class CrudService(Generic[EntityT, PkT]):
    """Basic CRUD over one table, with SQL generated from the entity class.

    The entity class is either passed explicitly or taken from the generic
    argument of a subclass::

        class UserService(CrudService[User, int]):
            pass

        users = UserService(executor)
        users.find_list_by_fields(FieldValue.of("nickName", "woo"))
    """

    def __init__(self, executor: SqlExecutor, entity_cls: Optional[type[EntityT]] = None) -> None:
        if entity_cls is None:
            entity_cls = _entity_type_of(type(self))
            if entity_cls is None:
                logger.warning(
                    "%s's superclass is not a parameterised CrudService", type(self).__name__
                )
                raise TypeError(
                    f"{type(self).__name__} must pass entity_cls or subclass CrudService[Entity, PK]"
                )
        self.executor = executor
        self.entity_cls = entity_cls
        self.meta: TableMeta[EntityT] = TableMeta.of(entity_cls)

    @property
    def table_name(self) -> str:
        return self.meta.table_name

    @property
    def id_column(self) -> str:
        return self.meta.id_column

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get(self, id: PkT) -> Optional[EntityT]:
        try:
            return self.executor.query_for_bean(
                self.meta.get_by_id_sql, {KEY_PARAM: id}, self.meta.to_entity
            )
        except DataAccessError as exc:
            logger.debug("get(%r) on %s returned nothing: %s", id, self.table_name, exc)
            return None

    def get_all(self) -> list[EntityT]:
        return self.executor.query_for_list_bean(self.meta.get_all_sql, None, self.meta.to_entity)

    def get_all_page(self, pageable: Pageable) -> Page[EntityT]:
        return self.executor.query_for_page_bean(
            self.meta.get_all_sql, None, self.meta.to_entity, pageable
        )

    def find_by_segment(self, segment: SqlSegment) -> EntityT:
        sql = f"{self.meta.get_all_sql} where {segment.as_sql()}"
        return self.executor.query_for_bean(sql, segment.bound_params(), self.meta.to_entity)

    def find_list_by_segment(self, segment: SqlSegment) -> list[EntityT]:
        sql = f"{self.meta.get_all_sql} where {segment.as_sql()}"
        return self.executor.query_for_list_bean(sql, segment.bound_params(), self.meta.to_entity)

    def find_by_fields(self, *fvs: FieldValue) -> EntityT:
        sql, params = self._select_where(self.meta.get_all_sql, fvs)
        return self.executor.query_for_bean(sql, params, self.meta.to_entity)

    def find_list_by_fields(self, *fvs: FieldValue) -> list[EntityT]:
        sql, params = self._select_where(self.meta.get_all_sql, fvs)
        return self.executor.query_for_list_bean(sql, params, self.meta.to_entity)

    def find_page_by_fields(self, fvs: Sequence[FieldValue], pageable: Pageable) -> Page[EntityT]:
        sql, params = self._select_where(self.meta.get_all_sql, fvs)
        return self.executor.query_for_page_bean(sql, params, self.meta.to_entity, pageable)

    def count_by_fields(self, *fvs: FieldValue) -> int:
        sql, params = self._select_where(f"select count(*) from {self.table_name}", fvs)
        return int(self.executor.query_for_object(sql, params))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def update_fields(self, id: PkT, *fvs: FieldValue) -> int:
        if not fvs:
            raise ValueError("update_fields requires at least one FieldValue")
        binder = _ParamBinder({KEY_PARAM: id})
        assignments: list[str] = []
        for fv in fvs:
            column = self.meta.column_for(fv.name)
            if fv.value is None:
                assignments.append(f"{column} = null")
            else:
                assignments.append(f"{column} = :{binder.bind(fv.name, fv.value)}")
        sql = (
            f"update {self.table_name} set {','.join(assignments)}"
            f" where {self.id_column} = :{KEY_PARAM}"
        )
        return self.executor.update(sql, binder.params)

    def insert(self, entity: EntityT) -> EntityT:
        key = self.executor.insert(
            self.meta.insert_sql, self.meta.to_params(entity), self.id_column
        )
        self.meta.set_id(entity, key)
        return entity

    def delete(self, id: PkT) -> int:
        return self.executor.update(self.meta.delete_by_id_sql, {KEY_PARAM: id})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def mapped(self, entities: Iterable[EntityT]) -> dict[PkT, EntityT]:
        result: dict[PkT, EntityT] = {}
        for entity in entities:
            try:
                result[self.meta.id_of(entity)] = entity
            except (AttributeError, TypeError):
                logger.warning("could not get id field value for entity %s", type(entity))
        return result

    def _select_where(
        self, head: str, fvs: Iterable[FieldValue]
    ) -> tuple[str, dict[str, Any]]:
        binder = _ParamBinder()
        parts = [f"{head} where 1=1"]
        for fv in fvs:
            column = self.meta.column_for(fv.name)
            if fv.value is None:
                parts.append(f"and {column} is null")
            else:
                parts.append(f"and {column} = :{binder.bind(fv.name, fv.value)}")
        return " ".join(parts), binder.params
