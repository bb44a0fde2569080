from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar, Union

from sqlcrud.domain.value_objects import Page, Pageable
from sqlcrud.errors import EmptyResultError, IncorrectResultSizeError

T = TypeVar("T")
Params = Union[Mapping[str, Any], Sequence[Any]]
Row = dict[str, Any]
RowMapper = Callable[[Row], T]


class SqlExecutor(ABC):
    """Executes parameterised SQL.

    ``params`` is a mapping for ``:name`` placeholders or a sequence for
    positional placeholders. Driver failures surface as
    :class:`~sqlcrud.errors.DataAccessError`.
    """

    @abstractmethod
    def query_for_rows(self, sql: str, params: Optional[Params] = None) -> list[Row]:
        """Run a query and return every row as a column -> value dict."""

    @abstractmethod
    def query_for_object(self, sql: str, params: Optional[Params] = None) -> Any:
        """Run a query expected to return exactly one row and one column."""

    @abstractmethod
    def count(self, sql: str, params: Optional[Params] = None) -> int:
        """Return the number of rows ``sql`` would produce."""

    @abstractmethod
    def paginate(self, sql: str, pageable: Pageable) -> str:
        """Wrap ``sql`` so that it only returns the requested page."""

    @abstractmethod
    def update(self, sql: str, params: Optional[Params] = None) -> int:
        """Run a write statement and return the affected row count."""

    @abstractmethod
    def insert(self, sql: str, params: Optional[Params], key_column: str) -> Any:
        """Run an insert and return the generated value of ``key_column``."""

    def query_for_list_bean(
        self, sql: str, params: Optional[Params], mapper: RowMapper[T]
    ) -> list[T]:
        return [mapper(row) for row in self.query_for_rows(sql, params)]

    def query_for_bean(self, sql: str, params: Optional[Params], mapper: RowMapper[T]) -> T:
        rows = self.query_for_rows(sql, params)
        if not rows:
            raise EmptyResultError(sql)
        if len(rows) > 1:
            raise IncorrectResultSizeError(1, len(rows), sql)
        return mapper(rows[0])

    def query_for_page(
        self, sql: str, params: Optional[Params], pageable: Pageable
    ) -> Page[Row]:
        total = self.count(sql, params)
        content = self.query_for_rows(self.paginate(sql, pageable), params) if total else []
        return Page(content=content, page=pageable.page, size=pageable.size, total=total)

    def query_for_page_bean(
        self,
        sql: str,
        params: Optional[Params],
        mapper: RowMapper[T],
        pageable: Pageable,
    ) -> Page[T]:
        page = self.query_for_page(sql, params, pageable)
        return Page(
            content=[mapper(row) for row in page.content],
            page=page.page,
            size=page.size,
            total=page.total,
        )
