from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined

from .loader import SqlTemplateLoader


def build_environment(loader: SqlTemplateLoader, **options: Any) -> Environment:
    """Create a jinja2 environment that re-checks templates on every lookup.

    SQL is not HTML, so autoescaping is off; undefined variables raise
    instead of rendering as empty strings. ``options`` override both.
    """
    settings: dict[str, Any] = {
        "auto_reload": True,
        "autoescape": False,
        "undefined": StrictUndefined,
        "keep_trailing_newline": False,
    }
    settings.update(options)
    return Environment(loader=loader, **settings)


def render_sql(env: Environment, name: str, **context: Any) -> str:
    """Render template ``name`` and strip surrounding whitespace."""
    return env.get_template(name).render(**context).strip()
