"""Shared error handling for upstream HTTP requests."""

from __future__ import annotations

import enum
import re
from typing import Optional

import requests

_API_KEY_PATTERN = re.compile(r"(api=)[^&]+")


class RequestKind(enum.Enum):
    """Whether a failed request stops the run or falls back to a placeholder."""

    PRIMARY = "primary"
    BACKGROUND = "background"


class UpstreamError(RuntimeError):
    """Raised when the tile service answers a request with an error."""

    def __init__(
        self,
        kind: RequestKind,
        url: str,
        *,
        status: Optional[int] = None,
        reason: str = "",
    ) -> None:
        self.kind = kind
        self.url = redact_url(url)
        self.status = status
        self.reason = reason
        super().__init__(
            f"Error - HTTP status: {status}, statusText: {reason} url: {self.url}"
        )

    @property
    def recoverable(self) -> bool:
        return self.kind is RequestKind.BACKGROUND


def redact_url(url: str) -> str:
    """Hide the API key embedded in a tile service URL."""

    return _API_KEY_PATTERN.sub(r"\1***", url)


def get_checked(
    session: requests.Session,
    url: str,
    *,
    kind: RequestKind,
    timeout: Optional[int],
) -> requests.Response:
    """GET ``url`` and raise :class:`UpstreamError` unless it answers 2xx."""

    try:
        response = session.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise UpstreamError(kind, url, reason=str(exc)) from exc
    if not 200 <= response.status_code < 300:
        raise UpstreamError(kind, url, status=response.status_code, reason=response.reason or "")
    return response
