"""Configuration package.

Settings are read from the environment (and an optional ``.env`` file) by
:mod:`sqlcrud.config.settings`. Import from there directly where needed.
"""

__all__: list[str] = []
