from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Any

import pytest

_ENV = (
    "SQLCRUD_DB_PATH",
    "SQLCRUD_RELOCATE_DIR",
    "SQLCRUD_TEMPLATE_LOCATIONS",
    "SQLCRUD_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Prevent picking up values from a real .env during the test
    monkeypatch.setattr("dotenv.load_dotenv", lambda *a, **k: None, raising=False)
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def _reload_settings() -> Any:
    # Remove cached module to force re-evaluation of settings on import
    if "sqlcrud.config.settings" in sys.modules:
        del sys.modules["sqlcrud.config.settings"]
    import sqlcrud.config.settings as settings_module

    importlib.reload(settings_module)
    return settings_module


def test_defaults() -> None:
    settings_module = _reload_settings()
    s = settings_module.settings

    assert s.database_path == settings_module.DEFAULT_DB_PATH
    assert s.relocate_dir == Path.home() / ".sqlcrud"
    assert s.template_locations == ()
    assert s.log_level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SQLCRUD_DB_PATH", str(tmp_path / "db.sqlite3"))
    monkeypatch.setenv("SQLCRUD_RELOCATE_DIR", str(tmp_path / "relocated"))
    monkeypatch.setenv(
        "SQLCRUD_TEMPLATE_LOCATIONS", "classpath:app/sql/, ./templates ,, file:/tmp/x.xml"
    )
    monkeypatch.setenv("SQLCRUD_LOG_LEVEL", "debug")

    s = _reload_settings().settings
    assert s.database_path == tmp_path / "db.sqlite3"
    assert s.relocate_dir == tmp_path / "relocated"
    assert s.template_locations == ("classpath:app/sql/", "./templates", "file:/tmp/x.xml")
    assert s.log_level == "DEBUG"


def test_unknown_log_level_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SQLCRUD_LOG_LEVEL", "chatty")
    with pytest.raises(RuntimeError):
        _ = _reload_settings()


def test_settings_are_frozen() -> None:
    s = _reload_settings().settings
    with pytest.raises(Exception):
        s.log_level = "DEBUG"  # type: ignore[misc]
