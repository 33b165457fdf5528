"""Users JSON API: CRUD over a single file-backed users document."""

__version__ = "0.1.0"
