"""Application layer: table metadata inference and the generic CRUD service."""
