"""Generic CRUD helpers over parameterised SQL and XML-backed SQL templates."""

__version__ = "0.1.0"
