from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Union

from sqlcrud.errors import TemplateParseError

from .models import SqlTemplate

logger = logging.getLogger(__name__)

ROOT_TAG = "Templates"
TEMPLATE_TAG = "Template"
XML_SUFFIX = ".xml"


def parse_xml(
    data: Union[str, bytes], *, path: str | None = None, last_modified: float = 0.0
) -> list[SqlTemplate]:
    """Parse one ``<Templates>`` document."""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise TemplateParseError(f"Malformed template XML in {path or '<string>'}: {exc}", path) from exc
    if root.tag != ROOT_TAG:
        raise TemplateParseError(
            f"Expected <{ROOT_TAG}> root element in {path or '<string>'}, got <{root.tag}>", path
        )

    result: list[SqlTemplate] = []
    for node in root.findall(TEMPLATE_TAG):
        name = (node.findtext("name") or "").strip()
        if not name:
            raise TemplateParseError(f"<{TEMPLATE_TAG}> without a name in {path or '<string>'}", path)
        result.append(
            SqlTemplate(
                name=name,
                template=node.findtext("template") or "",
                last_modified=last_modified,
                path=path,
            )
        )
    return result


def parse_template(path: Union[str, os.PathLike[str]]) -> list[SqlTemplate]:
    """Parse a template file, or every ``.xml`` file below a directory.

    Templates are stamped with their file's mtime and absolute path. Paths
    that are neither files nor directories yield nothing.
    """
    p = Path(path)
    if p.is_file():
        resolved = p.resolve()
        logger.debug("load template from : %s", resolved)
        return parse_xml(
            resolved.read_bytes(), path=str(resolved), last_modified=resolved.stat().st_mtime
        )
    if p.is_dir():
        logger.debug("load template from folder : %s", p.resolve())
        result: list[SqlTemplate] = []
        for child in sorted(p.iterdir()):
            if child.is_dir() or child.suffix.lower() == XML_SUFFIX:
                result.extend(parse_template(child))
        return result
    return []
