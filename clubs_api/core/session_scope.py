from __future__ import annotations

from typing import Dict, MutableMapping, Optional, Protocol

from starlette.requests import Request

# Keys stored in the per-client session
COUNTRY_CODE_KEY = "countryCode"
COUNTRY_NAME_KEY = "countryName"
MESSAGE_KEY = "message"
CSRF_TOKEN_KEY = "csrfToken"


class SessionScope(Protocol):
    """Per-client string key/value state that survives across requests."""

    def get_string(self, key: str) -> Optional[str]:
        ...

    def set_string(self, key: str, value: str) -> None:
        ...

    def pop_string(self, key: str) -> Optional[str]:
        ...


class MappingSessionScope:
    """
    SessionScope backed by any mutable mapping.

    Wraps starlette's ``request.session`` dict in the HTTP layer, and a plain
    dict when services are driven directly.
    """

    def __init__(self, data: Optional[MutableMapping[str, str]] = None) -> None:
        self._data: MutableMapping[str, str] = data if data is not None else {}

    def get_string(self, key: str) -> Optional[str]:
        value = self._data.get(key)
        return str(value) if value is not None else None

    def set_string(self, key: str, value: str) -> None:
        self._data[key] = value

    def pop_string(self, key: str) -> Optional[str]:
        value = self._data.pop(key, None)
        return str(value) if value is not None else None

    def as_dict(self) -> Dict[str, str]:
        return dict(self._data)


# PUBLIC_INTERFACE
def session_scope_for(request: Request) -> MappingSessionScope:
    """Return the SessionScope for a request; requires SessionMiddleware."""
    return MappingSessionScope(request.session)
