"""REST backend access."""

from user_graph.backend.http import RestBackend
from user_graph.backend.queries import BackendQueries

__all__ = ["RestBackend", "BackendQueries"]
