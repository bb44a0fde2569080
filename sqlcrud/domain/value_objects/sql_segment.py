from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

Params = Union[Mapping[str, Any], Sequence[Any]]


@dataclass(frozen=True)
class SqlSegment:
    """A raw condition appended after ``where``.

    ``params`` is either a mapping for ``:name`` placeholders or a sequence
    for ``?`` placeholders.
    """

    sql: str
    params: Optional[Params] = None

    def as_sql(self) -> str:
        return self.sql.strip()

    @property
    def is_param_required(self) -> bool:
        return bool(self.params)

    @property
    def is_keyed(self) -> bool:
        return isinstance(self.params, Mapping)

    @property
    def keyed_params(self) -> dict[str, Any]:
        if self.params is None:
            return {}
        if not isinstance(self.params, Mapping):
            raise TypeError("SqlSegment holds positional parameters")
        return dict(self.params)

    @property
    def list_params(self) -> list[Any]:
        if self.params is None:
            return []
        if isinstance(self.params, Mapping):
            raise TypeError("SqlSegment holds keyed parameters")
        return list(self.params)

    def bound_params(self) -> Optional[Params]:
        """Parameters in the shape the executor expects, or ``None``."""
        if not self.is_param_required:
            return None
        return self.keyed_params if self.is_keyed else self.list_params
