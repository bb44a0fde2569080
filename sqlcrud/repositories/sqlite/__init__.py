from .sqlite_executor import SqliteExecutor

__all__ = ["SqliteExecutor"]
