from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Iterable, Optional, Union

from .loader import SqlTemplateLoader
from .models import SqlTemplate
from .parser import XML_SUFFIX, parse_template
from .resources import Resource, resolve

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class SqlTemplateLoaderFactory:
    """Builds a :class:`SqlTemplateLoader` from a list of template locations.

    Disk resources are parsed where they are. Resources that are not plain
    files (templates shipped inside a zipped package, say) are copied into a
    runtime relocation folder first, ``{relocate_to}/{epoch millis}``, so the
    loader can still map every template to a file.
    """

    def __init__(
        self,
        locations: Iterable[str] = (),
        relocate_to: Optional[PathLike] = None,
        loader: Optional[SqlTemplateLoader] = None,
    ) -> None:
        self.locations = list(locations)
        self._relocate_to = Path(relocate_to).expanduser() if relocate_to else None
        self._runtime_relocate_to: Optional[Path] = None
        self.loader = loader if loader is not None else SqlTemplateLoader()

    @property
    def relocate_to(self) -> Path:
        if self._relocate_to is None:
            from sqlcrud.config.settings import settings

            self._relocate_to = settings.relocate_dir
        return self._relocate_to

    @property
    def runtime_relocate_to(self) -> Path:
        """Relocation folder of this run, created on first use."""
        if self._runtime_relocate_to is None:
            folder = self.relocate_to / str(int(time.time() * 1000))
            folder.mkdir(parents=True, exist_ok=True)
            logger.info("Runtime relocate to path: %s", folder)
            self._runtime_relocate_to = folder
        return self._runtime_relocate_to

    def create_sql_template_loader(self) -> SqlTemplateLoader:
        for location in self.locations:
            self.load_templates(location)
        return self.loader

    def load_templates(self, location: str) -> int:
        """Load every template found at ``location``; return how many were registered."""
        count = 0
        for resource in resolve(location):
            if not resource.exists():
                logger.warning("template location %s does not exist", resource)
                continue
            for template in self._templates_of(resource):
                self.loader.register(template)
                count += 1
        logger.info("loaded %d template(s) from %s", count, location)
        return count

    def _templates_of(
        self, resource: Resource, relative: tuple[str, ...] = ()
    ) -> list[SqlTemplate]:
        """Templates below ``resource``; ``relative`` is its path inside the location."""
        if resource.on_disk:
            return parse_template(resource.target)  # type: ignore[arg-type]
        if resource.is_dir():
            result: list[SqlTemplate] = []
            for child in resource.children():
                result.extend(self._templates_of(child, (*relative, child.name)))
            return result
        if not resource.name.lower().endswith(XML_SUFFIX):
            logger.debug("skipping non-xml resource %s", resource)
            return []
        return parse_template(self._relocate(resource, relative or (resource.name,)))

    def _relocate(self, resource: Resource, relative: tuple[str, ...]) -> Path:
        copied = _unused_path(self.runtime_relocate_to.joinpath(*relative))
        copied.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("It seems %s is not a disk file, copied to %s", resource, copied)
        copied.write_bytes(resource.read_bytes())
        return copied


def _unused_path(path: Path) -> Path:
    """``path``, or ``name_2.xml``, ``name_3.xml``... when it is already taken."""
    candidate = path
    n = 1
    while candidate.exists():
        n += 1
        candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
    return candidate
