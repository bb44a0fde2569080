from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def ensure_identifier(name: str, what: str = "field name") -> str:
    """Return ``name`` if it is a plain identifier, raise ``ValueError`` otherwise.

    Names end up interpolated into SQL text, so nothing but letters, digits
    and underscores is accepted.
    """
    if not isinstance(name, str) or not IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid {what}: {name!r}")
    return name


@dataclass(frozen=True)
class FieldValue:
    """A field name/value pair used in dynamic WHERE and SET clauses."""

    name: str
    value: Any = None

    def __post_init__(self) -> None:
        ensure_identifier(self.name)

    @classmethod
    def of(cls, name: str, value: Any) -> "FieldValue":
        return cls(name, value)
