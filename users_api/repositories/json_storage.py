"""
JSON document persistence.

The whole collection lives in one file shaped like ``{"users": [...]}``.
Every call to ``load`` re-reads the file; ``save`` rewrites it in full.
Services only see the ``load``/``save`` pair, so the backend can be swapped
(see ``InMemoryDocumentStore``) without touching the handlers.
"""

from __future__ import annotations

from pathlib import Path
import json
import math
import os
import tempfile
from typing import Any, Protocol

Document = dict[str, Any]


class StorageError(Exception):
    """Raised when the document cannot be read, parsed or written."""


class DocumentStore(Protocol):
    def load(self) -> Document: ...

    def save(self, document: Document) -> None: ...

    def write_raw(self, payload: bytes) -> None: ...

    def exists(self) -> bool: ...


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-finite number {token} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"Number {text} is out of range")
    return value


def loads_strict(raw: str | bytes) -> Any:
    """json.loads that rejects NaN, Infinity and overflowing numbers."""
    return json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)


def dumps_strict(document: Document) -> bytes:
    try:
        return json.dumps(document, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except ValueError as exc:
        raise StorageError(f"Document is not valid JSON: {exc}") from exc


def _check_document(document: Any) -> Document:
    if not isinstance(document, dict) or not isinstance(document.get("users"), list):
        raise StorageError("Document must be an object with a 'users' list")
    return document


class JsonDocumentStore:
    """File-backed store; the file is the single source of truth."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Document:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                document = loads_strict(f.read())
        except FileNotFoundError as exc:
            raise StorageError(f"Data file not found: {self.path}") from exc
        except ValueError as exc:
            raise StorageError(f"Invalid JSON in {self.path}: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Could not read {self.path}: {exc}") from exc
        return _check_document(document)

    def save(self, document: Document) -> None:
        _check_document(document)
        self._replace(dumps_strict(document))

    def write_raw(self, payload: bytes) -> None:
        """Persist bytes verbatim (seed body), creating parent directories."""
        self._replace(payload)

    def _replace(self, payload: bytes) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc


class InMemoryDocumentStore:
    """Same contract as JsonDocumentStore, kept in a serialized buffer."""

    def __init__(self, document: Document | None = None) -> None:
        self._raw: bytes | None = None
        if document is not None:
            self.save(document)

    def exists(self) -> bool:
        return self._raw is not None

    def load(self) -> Document:
        if self._raw is None:
            raise StorageError("Document has not been written yet")
        try:
            document = loads_strict(self._raw.decode("utf-8"))
        except ValueError as exc:
            raise StorageError(f"Invalid JSON in memory store: {exc}") from exc
        return _check_document(document)

    def save(self, document: Document) -> None:
        _check_document(document)
        self._raw = dumps_strict(document)

    def write_raw(self, payload: bytes) -> None:
        self._raw = bytes(payload)

    def read_raw(self) -> bytes | None:
        return self._raw
