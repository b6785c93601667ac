"""
Purpose: Error taxonomy for the hosted data store / auth provider.
What it does:
- One exception class per failure the rest of the app reacts to differently
  (not found, duplicate, auth, network, validation ...)
- Maps PostgREST / Postgres / GoTrue error payloads onto those classes
- retry_request(): retries a call on network failures only

Rule: No HTTP here. The client hands payloads in, callers catch the classes.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreError(Exception):
    """Base class for every data store / auth failure."""

    code = "UNKNOWN_ERROR"
    status = 500

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code, "status": self.status}


class NotFoundError(StoreError):
    code = "NOT_FOUND"
    status = 404


class DuplicateEntryError(StoreError):
    code = "DUPLICATE_ENTRY"
    status = 409


class ForeignKeyError(StoreError):
    code = "FOREIGN_KEY_VIOLATION"
    status = 400


class TableNotFoundError(StoreError):
    code = "TABLE_NOT_FOUND"
    status = 500


class NetworkError(StoreError):
    code = "NETWORK_ERROR"
    status = 0


class AuthError(StoreError):
    code = "AUTH_ERROR"
    status = 401


class ValidationError(StoreError):
    code = "VALIDATION_ERROR"
    status = 400


# PostgREST / Postgres error codes we translate
_CODE_MAP = {
    "PGRST116": (NotFoundError, "Record not found"),
    "23505": (DuplicateEntryError, "Duplicate entry found"),
    "23503": (ForeignKeyError, "Referenced record does not exist"),
    "42P01": (TableNotFoundError, "Table does not exist"),
}


def _payload_message(payload: Dict[str, Any]) -> Optional[str]:
    # PostgREST uses "message", GoTrue uses "msg" / "error_description" / "error"
    for key in ("message", "msg", "error_description", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def error_from_payload(payload: Optional[Dict[str, Any]], status: int = 500) -> StoreError:
    """
    Translate an error response body into a StoreError subclass.

    Args:
        payload: decoded JSON error body (may be None / empty)
        status: HTTP status of the response
    """
    payload = payload or {}
    message = _payload_message(payload)
    code = payload.get("code")

    if code is not None:
        code = str(code)
        if code in _CODE_MAP:
            error_class, default_message = _CODE_MAP[code]
            return error_class(default_message, details=payload)
        if status not in (401, 403):
            return StoreError(message or "Database error occurred", code=code, status=500, details=payload)

    if status in (401, 403):
        return AuthError(message or "Authentication failed. Please check your credentials.", details=payload)

    lowered = (message or "").lower()
    if "auth" in lowered or "login" in lowered:
        return AuthError("Authentication failed. Please check your credentials.", details=payload)

    if "validation" in lowered or "invalid" in lowered:
        return ValidationError(message, details=payload)

    return StoreError(message or "An unexpected error occurred", details=payload)


def log_error(error: Exception, context: Optional[str] = None) -> None:
    """Log a failure with the same shape regardless of where it came from."""
    code = getattr(error, "code", "UNKNOWN_ERROR")
    status = getattr(error, "status", 500)
    logger.error(f"[{context or 'App'}] Error: {error} (code={code}, status={status})")


def retry_request(request_fn: Callable[[], T], max_retries: int = 3, delay: float = 1.0) -> T:
    """
    Call request_fn, retrying only on NetworkError with a linear back-off
    (delay * attempt seconds). Any other error is raised immediately.
    """
    for attempt in range(1, max_retries + 1):
        try:
            return request_fn()
        except NetworkError as e:
            if attempt >= max_retries:
                raise
            logger.warning(f"Network error on attempt {attempt}/{max_retries}: {e}. Retrying...")
            time.sleep(delay * attempt)

    raise ValueError("max_retries must be >= 1")
