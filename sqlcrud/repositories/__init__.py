"""SQL executor interface and implementations.

:class:`SqlExecutor` is the seam between the CRUD service and a database
driver; concrete adapters live under :mod:`sqlcrud.repositories.sqlite`.
"""
