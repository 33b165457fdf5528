"""
User CRUD use cases over the JSON document.

Each operation is one read -> mutate -> (write) cycle against the store.
With ``serialize_writes`` the cycle runs under a process-wide lock, so
concurrent requests cannot lose each other's updates.
"""

from __future__ import annotations

import logging
import threading
from contextlib import nullcontext
from enum import Enum
from typing import Any

from users_api.domain.users import matches, next_user_id, parse_user_id, record_id
from users_api.repositories.json_storage import Document, DocumentStore, StorageError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"


ERROR_STATUS = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE_ERROR: 500,
}


class UserServiceError(Exception):
    def __init__(self, message: str, kind: ErrorKind = ErrorKind.BAD_REQUEST):
        super().__init__(message)
        self.message = message
        self.kind = kind

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.kind]


class UserService:
    """List, get, create, replace and delete user records."""

    def __init__(self, store: DocumentStore, *, serialize_writes: bool = True) -> None:
        self.store = store
        self.serialize_writes = serialize_writes
        self._lock = threading.Lock() if serialize_writes else nullcontext()

    # -------------------------------------- helpers --------------------------------------
    def _load(self) -> Document:
        try:
            return self.store.load()
        except StorageError as exc:
            logger.warning("Could not load users document: %s", exc)
            raise UserServiceError(str(exc), ErrorKind.STORAGE_ERROR) from exc

    def _save(self, document: Document) -> None:
        try:
            self.store.save(document)
        except StorageError as exc:
            logger.warning("Could not save users document: %s", exc)
            raise UserServiceError(str(exc), ErrorKind.STORAGE_ERROR) from exc

    def _parse_id(self, raw_id: Any) -> int:
        user_id = parse_user_id(raw_id)
        if user_id is None:
            raise UserServiceError(f"Invalid user id: {raw_id!r}", ErrorKind.BAD_REQUEST)
        return user_id

    def _not_found(self, user_id: int) -> UserServiceError:
        logger.info("The id: %s was not found.", user_id)
        return UserServiceError(f"User {user_id} not found", ErrorKind.NOT_FOUND)

    # -------------------------------------- use cases --------------------------------------
    def list_users(self) -> list[dict]:
        with self._lock:
            return self._load()["users"]

    def get_user(self, raw_id: Any) -> dict:
        user_id = self._parse_id(raw_id)
        with self._lock:
            users = self._load()["users"]
        for user in users:
            if matches(user, user_id):
                return user
        raise self._not_found(user_id)

    def create_user(self, payload: Any) -> int:
        if not isinstance(payload, dict) or not payload:
            raise UserServiceError("Body did not include any data.", ErrorKind.BAD_REQUEST)
        with self._lock:
            document = self._load()
            users = document["users"]
            new_id = next_user_id(users)
            record = dict(payload)
            record["id"] = new_id
            users.append(record)
            self._save(document)
        logger.info("Created user with id %s.", new_id)
        return new_id

    def replace_user(self, raw_id: Any, payload: Any) -> list[dict]:
        user_id = self._parse_id(raw_id)
        if not isinstance(payload, dict):
            raise UserServiceError("Body must be a JSON object.", ErrorKind.BAD_REQUEST)
        with self._lock:
            document = self._load()
            users = document["users"]
            replaced = 0
            for index, user in enumerate(users):
                if matches(user, user_id):
                    record = dict(payload)
                    record["id"] = user["id"]
                    users[index] = record
                    replaced += 1
            if not replaced:
                raise self._not_found(user_id)
            self._save(document)
        logger.info("Replaced %d record(s) with id %s.", replaced, user_id)
        return users

    def delete_user(self, raw_id: Any) -> list[dict]:
        user_id = self._parse_id(raw_id)
        with self._lock:
            document = self._load()
            remaining = [user for user in document["users"] if record_id(user) != user_id]
            removed = len(document["users"]) - len(remaining)
            if not removed:
                raise self._not_found(user_id)
            document["users"] = remaining
            self._save(document)
        logger.info("Deleted %d record(s) with id %s.", removed, user_id)
        return remaining
