"""Seed loader: fetch the initial users document and persist it verbatim."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from users_api.repositories.json_storage import DocumentStore, StorageError

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    """Outcome of one seed attempt, exposed on app.state and /health."""

    ok: bool
    url: str
    bytes_written: int = 0
    error: Optional[str] = None


class SeedService:
    """One best-effort GET of the seed URL; no retry, no backoff."""

    def __init__(self, store: DocumentStore, url: str, *, timeout: float = 10.0) -> None:
        self.store = store
        self.url = url
        self.timeout = timeout

    def fetch(self) -> bytes:
        response = requests.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def load_seed(self) -> SeedResult:
        """
        Download the seed and overwrite the document with the raw body.

        Failures are logged and reported in the result; an existing document
        is left untouched.
        """
        try:
            payload = self.fetch()
        except requests.RequestException as exc:
            logger.error("Seed fetch from %s failed: %s", self.url, exc)
            return SeedResult(ok=False, url=self.url, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error fetching seed from %s", self.url)
            return SeedResult(ok=False, url=self.url, error=str(exc))
        try:
            self.store.write_raw(payload)
        except StorageError as exc:
            logger.error("Could not persist seed from %s: %s", self.url, exc)
            return SeedResult(ok=False, url=self.url, error=str(exc))
        logger.info("JSON data from %s has been received and saved (%d bytes).", self.url, len(payload))
        return SeedResult(ok=True, url=self.url, bytes_written=len(payload))
