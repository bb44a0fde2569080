from __future__ import annotations

import argparse
from typing import Dict, List, Sequence

from jinja2 import TemplateNotFound

from sqlcrud.logging_config import get_logger
from sqlcrud.templates import SqlTemplateLoaderFactory, build_environment, render_sql


def _parse_params(items: Sequence[str]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"--param expects key=value, got {item!r}")
        params[key.strip()] = value
    return params


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="List or render SQL templates loaded from XML files")
    p.add_argument(
        "--location",
        action="append",
        default=None,
        help="Template location: classpath:pkg/dir/, file:path or a path (repeatable). "
        "Defaults to SQLCRUD_TEMPLATE_LOCATIONS",
    )
    p.add_argument("--relocate-to", default=None, help="Folder for copies of non-file resources")
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--list", action="store_true", help="List loaded template names")
    g.add_argument("--render", metavar="NAME", help="Render a template by name")
    p.add_argument(
        "--param", action="append", default=[], metavar="KEY=VALUE", help="Render context value"
    )
    p.add_argument(
        "--log", action="store_true", help="Write JSON logs to stderr and logs/sqlcrud.log"
    )
    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log:
        get_logger()

    locations: List[str] = args.location
    if not locations:
        from sqlcrud.config.settings import settings

        locations = list(settings.template_locations)

    try:
        params = _parse_params(args.param)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    factory = SqlTemplateLoaderFactory(locations, relocate_to=args.relocate_to)
    loader = factory.create_sql_template_loader()

    if args.list:
        names = loader.list_templates()
        if not names:
            print("No templates found.")
        else:
            print("\n".join(names))
        return 0

    env = build_environment(loader)
    try:
        print(render_sql(env, args.render, **params))
    except TemplateNotFound:
        print(f"Unknown template: {args.render}")
        return 1
    finally:
        if args.log:
            loader.stats.log_hit_rate()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
