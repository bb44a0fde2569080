"""Markers describing how an entity class maps onto a table.

Markers live in ``typing.Annotated`` metadata so that entities stay plain
dataclasses or pydantic models::

    @table("t_user")
    @dataclass
    class User:
        user_id: Annotated[int | None, Id(), Column("id")] = None
        nickName: str = ""
        cache: Annotated[dict, Transient()] = field(default_factory=dict)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class Id:
    """Marks the primary-key field."""


@dataclass(frozen=True)
class Column:
    """Overrides the column name of a field."""

    name: str = ""


@dataclass(frozen=True)
class Transient:
    """Marks a field that is not persisted."""


def table(name: str) -> Callable[[T], T]:
    """Class decorator setting ``__tablename__``."""

    def decorate(cls: T) -> T:
        cls.__tablename__ = name  # type: ignore[attr-defined]
        return cls

    return decorate
