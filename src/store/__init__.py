"""Data store collaborator: models, the abstract store and its implementations."""

from .base import DataStore
from .http import HttpStore
from .memory import MemoryStore, load_store_file

__all__ = [
    "DataStore",
    "HttpStore",
    "MemoryStore",
    "load_store_file",
]
