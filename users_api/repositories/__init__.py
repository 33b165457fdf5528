"""
Persistence adapters.

These modules encapsulate how the users document is stored/retrieved
(today a JSON file). Services depend on the store interface rather than
touching the file directly.
"""

from .json_storage import (
    Document,
    DocumentStore,
    InMemoryDocumentStore,
    JsonDocumentStore,
    StorageError,
)

__all__ = ["Document", "DocumentStore", "InMemoryDocumentStore", "JsonDocumentStore", "StorageError"]
