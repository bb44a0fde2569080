"""Command line entry points (``python -m sqlcrud.cli.<name>``)."""
