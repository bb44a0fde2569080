"""Runtime settings for sqlcrud.

Environment variables are loaded from a ``.env`` file using ``python-dotenv``
and exposed through a frozen Pydantic settings object.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Load environment variables from a .env file if present
load_dotenv()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_DB_PATH = Path("data") / "sqlcrud.sqlite3"
DEFAULT_RELOCATE_FOLDER_NAME = ".sqlcrud"
DEFAULT_LOG_LEVEL = "INFO"


class Settings(BaseModel):
    """Immutable settings object used across the application."""

    database_path: Path = DEFAULT_DB_PATH
    relocate_dir: Path
    template_locations: tuple[str, ...] = ()
    log_level: str = DEFAULT_LOG_LEVEL

    model_config = ConfigDict(frozen=True)


def _split_locations(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _build_settings() -> Settings:
    """Construct the ``Settings`` instance based on environment variables."""

    db_path = os.getenv("SQLCRUD_DB_PATH") or str(DEFAULT_DB_PATH)
    relocate_dir = os.getenv("SQLCRUD_RELOCATE_DIR") or str(
        Path.home() / DEFAULT_RELOCATE_FOLDER_NAME
    )
    log_level = (os.getenv("SQLCRUD_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise RuntimeError(f"SQLCRUD_LOG_LEVEL has an unknown level name: {log_level}")

    return Settings(
        database_path=Path(db_path).expanduser(),
        relocate_dir=Path(relocate_dir).expanduser(),
        template_locations=_split_locations(os.getenv("SQLCRUD_TEMPLATE_LOCATIONS")),
        log_level=log_level,
    )


# Public settings instance
settings = _build_settings()
