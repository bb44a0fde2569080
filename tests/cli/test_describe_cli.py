from __future__ import annotations

import sys
from pathlib import Path

import pytest

import sqlcrud.cli.describe as describe_cli

ENTITIES = '''
from dataclasses import dataclass
from typing import Annotated, Optional

from sqlcrud.domain import Column, Id, table


@table("t_user")
@dataclass
class User:
    user_id: Annotated[Optional[int], Id(), Column("uid")] = None
    nickName: str = ""


@dataclass
class Orphan:
    name: str = ""


@dataclass
class KeyOnly:
    id: Optional[int] = None


NOT_A_CLASS = 3
'''


@pytest.fixture
def entities_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    (tmp_path / "describe_entities.py").write_text(ENTITIES, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    yield "describe_entities"
    sys.modules.pop("describe_entities", None)


def test_describe_prints_mapping(entities_module: str, capsys: pytest.CaptureFixture[str]) -> None:
    rc = describe_cli.main(["--entity", f"{entities_module}:User"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "table:     t_user" in out
    assert "id:        user_id -> uid" in out
    assert "  nickName -> nick_name" in out
    assert "insert into t_user (nick_name) values (:nickName)" in out


def test_describe_several_entities(entities_module: str, capsys: pytest.CaptureFixture[str]) -> None:
    rc = describe_cli.main(
        ["--entity", f"{entities_module}:User", "--entity", f"{entities_module}:KeyOnly"]
    )
    assert rc == 0
    out = capsys.readouterr().out
    assert "table:     key_only" in out
    assert "insert into key_only default values" in out
    assert "  -" in out


@pytest.mark.parametrize(
    "target",
    ["describe_entities:Orphan", "describe_entities:Missing", "describe_entities:NOT_A_CLASS", "nocolon"],
)
def test_describe_errors(entities_module: str, target: str, capsys: pytest.CaptureFixture[str]) -> None:
    rc = describe_cli.main(["--entity", target])
    assert rc == 1
    assert target in capsys.readouterr().err


def test_describe_unknown_module(capsys: pytest.CaptureFixture[str]) -> None:
    assert describe_cli.main(["--entity", "no_such_module_xyz:User"]) == 1
