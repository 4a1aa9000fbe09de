# Importing the backends registers them
from sources import google_search, linkup_search  # noqa: F401
from sources.registry import available_backends, get_search_backend, register

__all__ = ["available_backends", "get_search_backend", "register"]
