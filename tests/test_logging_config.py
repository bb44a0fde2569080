import json
import logging
from collections.abc import Generator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from _pytest.logging import LogCaptureFixture

from sqlcrud.logging_config import LOG_NAME, JsonFormatter, ReloadStats, get_logger


@pytest.fixture(autouse=True)
def reset_logger_handlers() -> Generator[None, None, None]:
    """Ensure tests run with a clean logger state."""
    logger = logging.getLogger(LOG_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="sqlcrud.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_returns_json_with_extras() -> None:
    record = _record()
    record.table = "t_user"
    data = json.loads(JsonFormatter().format(record))
    assert data["level"] == "INFO"
    assert data["logger"] == "sqlcrud.test"
    assert data["message"] == "hello"
    assert data["extra"] == {"table": "t_user"}


def test_json_formatter_without_extras_has_no_extra_key() -> None:
    data = json.loads(JsonFormatter().format(_record("plain")))
    assert "extra" not in data
    assert data["message"] == "plain"


def test_get_logger_configures_two_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "out.log"
    logger = get_logger(log_file=log_file, level="DEBUG")
    assert len(logger.handlers) == 2
    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    assert logger.level == logging.DEBUG
    assert log_file.parent.is_dir()
    # Second call reuses the configured handlers
    assert get_logger(log_file=log_file) is logger
    assert len(logger.handlers) == 2


def test_child_module_loggers_write_json_to_file(tmp_path: Path) -> None:
    log_file = tmp_path / "app.log"
    logger = get_logger(log_file=log_file, level="INFO")
    logging.getLogger("sqlcrud.application.services.table_meta").info(
        "detected", extra={"table": "t"}
    )
    for handler in logger.handlers:
        handler.flush()
    line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
    data = json.loads(line)
    assert data["logger"] == "sqlcrud.application.services.table_meta"
    assert data["extra"]["table"] == "t"


def test_reload_stats_hit_rate() -> None:
    stats = ReloadStats()
    assert stats.hit_rate == 0.0
    stats.record_hit()
    assert stats.hit_rate == 100.0
    stats.record_reload()
    assert stats.hit_rate == 50.0


def test_reload_stats_logging(caplog: LogCaptureFixture) -> None:
    stats = ReloadStats()
    stats.record_hit()
    stats.record_hit()
    stats.record_reload()
    caplog.set_level(logging.INFO, logger=LOG_NAME)
    stats.log_hit_rate()
    record = caplog.records[-1]
    assert record.getMessage() == "Template cache hit-rate"
    assert record.hit_rate == 66.67
    assert record.reloads == 1
