"""
Domain errors raised by repositories and services.

Routes do not catch these; the exception handlers registered in
clubs_api.api.main turn them into the standard error envelope.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ClubsError(Exception):
    """Base class for all domain errors."""

    error_type = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ClubsError):
    """The requested key has no matching row."""

    error_type = "not_found"

    def __init__(self, entity: str, key: Any) -> None:
        super().__init__(f"{entity} '{key}' not found")
        self.entity = entity
        self.key = key


class KeyMismatchError(NotFoundError):
    """The key in the request path disagrees with the key in the payload."""

    def __init__(self, entity: str, path_key: Any, payload_key: Any) -> None:
        super().__init__(entity, path_key)
        self.payload_key = payload_key
        self.message = f"{entity} key '{path_key}' does not match payload key '{payload_key}'"
        self.args = (self.message,)


class ValidationFailedError(ClubsError):
    """
    The payload violates a business invariant (e.g. a duplicate name or code).

    Carries every field-level message found, plus the submitted entity so
    the client can redisplay what it sent.
    """

    error_type = "validation_failed"

    def __init__(self, errors: Dict[str, List[str]], submitted: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("Validation failed")
        self.errors = errors
        self.submitted = submitted or {}


class ConcurrencyConflictError(ClubsError):
    """
    The optimistic-concurrency check failed on write.

    Raised by repositories when an update affected no row, either because the
    row vanished or because its row_version moved on.
    """

    error_type = "concurrency_conflict"

    def __init__(self, entity: str, key: Any, expected_version: Optional[int] = None) -> None:
        detail = f" at version {expected_version}" if expected_version is not None else ""
        super().__init__(f"{entity} '{key}'{detail} was modified or removed by another request")
        self.entity = entity
        self.key = key
        self.expected_version = expected_version
