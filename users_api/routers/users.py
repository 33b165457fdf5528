from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from users_api.repositories.json_storage import loads_strict
from users_api.services.user_service import ErrorKind, UserService, UserServiceError

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


def _get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService not configured")
    return svc


def _error_response(request: Request, err: UserServiceError) -> JSONResponse:
    settings = getattr(request.app.state, "settings", None)
    status_code = 400 if settings is not None and settings.legacy_error_status else err.status_code
    return JSONResponse({"ok": False, "error": err.code, "message": err.message}, status_code=status_code)


async def _json_object(request: Request) -> dict | None:
    """Parse the request body; None when absent, error when not a JSON object."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        body = loads_strict(raw)
    except ValueError as exc:
        raise UserServiceError(f"Invalid JSON body: {exc}", ErrorKind.BAD_REQUEST) from exc
    if not isinstance(body, dict):
        raise UserServiceError("Body must be a JSON object.", ErrorKind.BAD_REQUEST)
    return body


@router.get("")
async def list_users(request: Request):
    logger.info("GET request has been received.")
    svc = _get_user_service(request)
    try:
        return await run_in_threadpool(svc.list_users)
    except UserServiceError as exc:
        return _error_response(request, exc)


@router.get("/{user_id}")
async def get_user(user_id: str, request: Request):
    logger.info("GET request with id: %s has been received.", user_id)
    svc = _get_user_service(request)
    try:
        return await run_in_threadpool(svc.get_user, user_id)
    except UserServiceError as exc:
        return _error_response(request, exc)


@router.post("")
async def create_user(request: Request):
    logger.info("POST request has been received.")
    svc = _get_user_service(request)
    try:
        body = await _json_object(request)
        new_id = await run_in_threadpool(svc.create_user, body)
    except UserServiceError as exc:
        return _error_response(request, exc)
    return JSONResponse(new_id)


@router.put("/{user_id}")
async def replace_user(user_id: str, request: Request):
    logger.info("PUT request has been received with id: %s.", user_id)
    svc = _get_user_service(request)
    try:
        body = await _json_object(request)
        if body is None:
            raise UserServiceError("Body did not include any data.", ErrorKind.BAD_REQUEST)
        return await run_in_threadpool(svc.replace_user, user_id, body)
    except UserServiceError as exc:
        return _error_response(request, exc)


@router.delete("/{user_id}")
async def delete_user(user_id: str, request: Request):
    logger.info("DELETE request with id: %s has been received.", user_id)
    svc = _get_user_service(request)
    try:
        return await run_in_threadpool(svc.delete_user, user_id)
    except UserServiceError as exc:
        return _error_response(request, exc)
