"""XML-backed SQL templates for jinja2.

Template files look like::

    <Templates>
        <Template>
            <name>user.by_status</name>
            <template><![CDATA[select * from t_user where status = :status]]></template>
        </Template>
    </Templates>

:class:`SqlTemplateLoaderFactory` loads them from package resources or disk
into a :class:`SqlTemplateLoader`, which a jinja2 environment built by
:func:`build_environment` reloads whenever a file's modification time changes.
"""

from .engine import build_environment, render_sql
from .factory import SqlTemplateLoaderFactory
from .loader import SqlTemplateLoader
from .models import SqlTemplate
from .parser import parse_template

__all__ = [
    "SqlTemplate",
    "SqlTemplateLoader",
    "SqlTemplateLoaderFactory",
    "build_environment",
    "parse_template",
    "render_sql",
]
