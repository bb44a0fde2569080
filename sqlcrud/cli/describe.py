from __future__ import annotations

import argparse
import importlib
import sys
from typing import List, Sequence

from sqlcrud.application.services.table_meta import TableMeta
from sqlcrud.errors import TableMetaError


def _load_entity(target: str) -> type:
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"entity must look like 'package.module:ClassName', got {target!r}")
    module = importlib.import_module(module_name)
    obj = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    if not isinstance(obj, type):
        raise ValueError(f"{target} is not a class")
    return obj


def _format_meta(meta: TableMeta) -> str:
    out_lines: List[str] = [
        f"entity:    {meta.entity_cls.__module__}.{meta.entity_cls.__qualname__}",
        f"table:     {meta.table_name}",
        f"id:        {meta.id_field.name} -> {meta.id_column}",
        "columns:",
    ]
    if meta.columns:
        out_lines.extend(f"  {c.name} -> {c.column}" for c in meta.columns)
    else:
        out_lines.append("  -")
    out_lines += [
        "sql:",
        f"  get-all:    {meta.get_all_sql}",
        f"  get-by-id:  {meta.get_by_id_sql}",
        f"  delete:     {meta.delete_by_id_sql}",
        f"  insert:     {meta.insert_sql}",
    ]
    return "\n".join(out_lines)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Show the table mapping and SQL inferred for an entity")
    p.add_argument(
        "--entity",
        required=True,
        action="append",
        metavar="MODULE:CLASS",
        help="Entity class to describe (repeatable)",
    )
    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    blocks: List[str] = []
    for target in args.entity:
        try:
            meta = TableMeta.of(_load_entity(target))
        except (ImportError, AttributeError, ValueError, TableMetaError) as exc:
            print(f"error: {target}: {exc}", file=sys.stderr)
            return 1
        blocks.append(_format_meta(meta))
    print("\n\n".join(blocks))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
