"""Signed HTTP transport.

`Transport.send` turns a `RequestDescriptor` into one `requests.request` call and
hands back the raw response. Status handling and JSON decoding happen upstream.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Mapping

import requests
from requests.auth import AuthBase

from .errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json;charset=UTF-8",
}

REQUEST_ID_HEADER = "Request-Id"


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    method: str
    path: str
    entity: str | None = None
    payload: Any = None
    params: Any = None
    headers: Mapping[str, str] | None = None


def request_headers(overrides: Mapping[str, str] | None = None) -> dict[str, str]:
    """Default headers plus a `Request-Id` (caller supplied or a fresh uuid4)."""

    headers = dict(DEFAULT_HEADERS)
    overrides = dict(overrides or {})
    request_id = (
        overrides.pop("requestId", None)
        or overrides.pop(REQUEST_ID_HEADER, None)
        or uuid.uuid4().hex
    )
    headers.update(overrides)
    headers[REQUEST_ID_HEADER] = request_id
    return headers


def build_url(base_url: str, path: str) -> str:
    if path.startswith(("http://", "https://")):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class Transport:
    def __init__(
        self,
        *,
        base_url: str,
        auth: AuthBase,
        timeout_seconds: float = 30,
        debug: bool = False,
    ) -> None:
        self._base_url = base_url
        self._auth = auth
        self._timeout_seconds = timeout_seconds
        self._debug = debug

    @property
    def base_url(self) -> str:
        return self._base_url

    def send(self, descriptor: RequestDescriptor) -> requests.Response:
        """Send `descriptor.path` (already finalized) with signing and headers applied."""

        method = descriptor.method.upper()
        url = build_url(self._base_url, descriptor.path)
        data = None
        if method in {"POST", "PUT"}:
            data = json.dumps(descriptor.payload if descriptor.payload is not None else {})

        # URL only; never headers or tokens.
        logger.log(logging.INFO if self._debug else logging.DEBUG, f"[QBO] {method} {url}")

        try:
            return requests.request(
                method,
                url,
                headers=request_headers(descriptor.headers),
                data=data,
                auth=self._auth,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", request=descriptor) from e
