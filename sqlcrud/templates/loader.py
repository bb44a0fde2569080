from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from jinja2 import BaseLoader, Environment, TemplateNotFound

from sqlcrud.logging_config import ReloadStats

from .models import SqlTemplate
from .parser import parse_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateSource:
    name: str
    source: str
    last_modified: float


class SqlTemplateLoader(BaseLoader):
    """In-memory template registry that reloads templates from their XML file.

    Every template loaded from a file is mapped to that file. Looking a
    mapped template up re-parses the file when its modification time no
    longer matches, re-registering every template it contains. The
    ``uptodate`` callback handed to jinja2 performs the same check, so an
    environment with ``auto_reload=True`` picks up edited files.
    """

    def __init__(self, stats: Optional[ReloadStats] = None) -> None:
        self._templates: dict[str, TemplateSource] = {}
        self._paths: dict[str, str] = {}
        self._lock = threading.RLock()
        self.stats = stats if stats is not None else ReloadStats()

    def put_template(self, name: str, source: str, last_modified: float = 0.0) -> None:
        with self._lock:
            self._templates[name] = TemplateSource(name, source, last_modified)

    def add_mapper(self, name: str, path: str | os.PathLike[str]) -> None:
        with self._lock:
            self._paths[name] = os.fspath(path)

    def register(self, template: SqlTemplate) -> None:
        """Store ``template`` and map it to its file, if it has one."""
        with self._lock:
            self.put_template(template.name, template.template, template.last_modified)
            if template.path:
                self.add_mapper(template.name, template.path)

    def remove_template(self, name: str) -> bool:
        with self._lock:
            self._paths.pop(name, None)
            return self._templates.pop(name, None) is not None

    def find_template_source(self, name: str) -> Optional[TemplateSource]:
        with self._lock:
            entry = self._templates.get(name)
            path = self._paths.get(name)
            if entry is None or path is None:
                return entry
            current = _mtime(path)
            if current and current != entry.last_modified:
                logger.debug("template %s changed on disk, reloading %s", name, path)
                self._reload(path)
                self.stats.record_reload()
            else:
                self.stats.record_hit()
            return self._templates.get(name)

    def _reload(self, path: str) -> None:
        """Re-register every template of ``path``; drop the ones no longer in it."""
        stale = {n for n, p in self._paths.items() if p == path}
        for template in parse_template(path):
            self.register(template)
            stale.discard(template.name)
        for gone in sorted(stale):
            logger.debug("template %s was removed from %s", gone, path)
            self.remove_template(gone)

    def get_last_modified(self, name: str) -> float:
        """Current mtime of the file ``name`` is mapped to, ``0`` if unknown."""
        path = self._paths.get(name)
        return _mtime(path) if path is not None else 0.0

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, Optional[str], Callable[[], bool]]:
        entry = self.find_template_source(template)
        if entry is None:
            raise TemplateNotFound(template)
        path = self._paths.get(template)

        def uptodate() -> bool:
            if self._templates.get(template) is not entry:
                return False
            return path is None or _mtime(path) in (0.0, entry.last_modified)

        return entry.source, path, uptodate

    def list_templates(self) -> list[str]:
        return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)


def _mtime(path: str) -> float:
    try:
        return os.path.getmtime(path)
    except OSError:
        return 0.0
