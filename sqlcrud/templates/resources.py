"""Resolution of template locations.

Supported location forms:

- ``classpath:<package>/<path>``: a resource inside an importable package,
  e.g. ``classpath:myapp.sql/templates/`` or ``classpath:/myapp/sql/users.xml``
  (a leading slash is ignored, the first segment is the package);
- ``file:<path>`` or a plain filesystem path.

The last segment may contain ``*``/``?`` wildcards (``classpath:myapp/sql/*.xml``).
Package resources inside zip archives or namespace packages are not plain
files; :attr:`Resource.on_disk` tells them apart.
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

CLASSPATH_PREFIX = "classpath:"
FILE_PREFIX = "file:"
_WILDCARDS = ("*", "?", "[")

Target = Union[Path, Traversable]


@dataclass(frozen=True)
class Resource:
    location: str
    target: Target

    @property
    def name(self) -> str:
        return self.target.name

    @property
    def on_disk(self) -> bool:
        return isinstance(self.target, Path)

    def exists(self) -> bool:
        return self.target.is_file() or self.target.is_dir()

    def is_dir(self) -> bool:
        return self.target.is_dir()

    def read_bytes(self) -> bytes:
        return self.target.read_bytes()

    def children(self) -> list["Resource"]:
        return [
            Resource(f"{self.location.rstrip('/')}/{child.name}", child)
            for child in sorted(self.target.iterdir(), key=lambda t: t.name)
        ]

    def __str__(self) -> str:
        return self.location


def _has_wildcard(segment: str) -> bool:
    return any(ch in segment for ch in _WILDCARDS)


def _split_pattern(path: str) -> tuple[str, str]:
    """Split ``a/b/*.xml`` into ``("a/b", "*.xml")``; no pattern gives ``(path, "")``."""
    head, _, last = path.rstrip("/").rpartition("/")
    if _has_wildcard(last):
        return head, last
    return path, ""


def _package_root(package: str) -> Target | None:
    try:
        return resources.files(package)
    except (ModuleNotFoundError, TypeError) as exc:
        logger.warning("cannot resolve package %s: %s", package, exc)
        return None


def _resolve_classpath(location: str, spec: str) -> list[Resource]:
    spec = spec.lstrip("/")
    package, _, rest = spec.partition("/")
    if not package:
        raise ValueError(f"classpath location needs a package: {location!r}")
    root = _package_root(package)
    if root is None:
        return []
    base_path, pattern = _split_pattern(rest)
    target: Target = root
    for part in (p for p in base_path.split("/") if p):
        target = target / part
    if not pattern:
        return [Resource(location, target)]
    if not target.is_dir():
        return []
    return [
        Resource(location, child)
        for child in sorted(target.iterdir(), key=lambda t: t.name)
        if fnmatch.fnmatch(child.name, pattern)
    ]


def _resolve_file(location: str, spec: str) -> list[Resource]:
    base_path, pattern = _split_pattern(spec)
    base = Path(base_path or ".").expanduser()
    if not pattern:
        return [Resource(location, base)]
    return [Resource(location, p) for p in sorted(base.glob(pattern))]


def resolve(location: str) -> list[Resource]:
    """Return every resource ``location`` points at (possibly none)."""
    location = location.strip()
    if location.startswith(CLASSPATH_PREFIX):
        return _resolve_classpath(location, location[len(CLASSPATH_PREFIX) :])
    if location.startswith(FILE_PREFIX):
        return _resolve_file(location, location[len(FILE_PREFIX) :])
    return _resolve_file(location, location)
