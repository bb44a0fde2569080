from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

USERS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Templates>
    <Template>
        <name>user.by_status</name>
        <template><![CDATA[select * from t_user where status = {{ status }}]]></template>
    </Template>
    <Template>
        <name>user.count</name>
        <template>select count(*) from t_user</template>
    </Template>
</Templates>
"""

ORDERS_XML = """<Templates>
    <Template>
        <name>order.recent</name>
        <template><![CDATA[
select * from orders
{% if customer %}where customer = :customer{% endif %}
order by created desc
        ]]></template>
    </Template>
</Templates>
"""


def _templates_xml(**templates: str) -> str:
    body = "".join(
        f"<Template><name>{name.replace('__', '.')}</name>"
        f"<template><![CDATA[{sql}]]></template></Template>"
        for name, sql in templates.items()
    )
    return f"<Templates>{body}</Templates>"


@pytest.fixture
def users_xml() -> str:
    return USERS_XML


@pytest.fixture
def orders_xml() -> str:
    return ORDERS_XML


@pytest.fixture
def templates_xml() -> Callable[..., str]:
    """Build a document from keyword arguments; ``a__b`` becomes template ``a.b``."""
    return _templates_xml


@pytest.fixture
def write_xml(tmp_path: Path) -> Callable[[str, str], Path]:
    def write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return write
