"""Error taxonomy for QBO API calls.

Every exception raised by this package derives from `QBOError`. HTTP failures are
classified by status code and, for 400s, by the QBO fault code so that a stale
SyncToken or a missing object can be told apart from a generic validation fault.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import requests

    from .transport import RequestDescriptor

logger = logging.getLogger(__name__)

STALE_OBJECT_CODE = "5010"
OBJECT_NOT_FOUND_CODE = "610"

_MARKUP_RE = re.compile(r"^\s*<(\?xml|!doctype|html)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Fault:
    code: str | None
    message: str | None
    detail: str | None = None
    element: str | None = None
    type: str | None = None


class QBOError(Exception):
    """Base class for every error raised by the client."""


class UnsupportedOperation(QBOError):
    """Raised before any I/O when a verb does not apply to an entity."""


class TransportError(QBOError):
    def __init__(self, message: str, *, request: RequestDescriptor | None = None) -> None:
        super().__init__(message)
        self.request = request


class ParseFailure(QBOError):
    def __init__(self, message: str, *, body: str = "", request: RequestDescriptor | None = None) -> None:
        super().__init__(message)
        self.body = body
        self.request = request


class QBOResponseError(QBOError):
    """A non-2xx response. Keeps the request and response for diagnostics."""

    transient = False

    def __init__(
        self,
        *,
        status_code: int,
        faults: list[Fault] | None = None,
        body: str = "",
        request: RequestDescriptor | None = None,
        response: requests.Response | None = None,
        message: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.faults = faults or []
        self.body = body
        self.request = request
        self.response = response
        super().__init__(message or self._format())

    @property
    def fault_codes(self) -> list[str]:
        return [f.code for f in self.faults if f.code]

    def _format(self) -> str:
        where = f" {self.request.method} {self.request.path}" if self.request else ""
        if self.faults:
            reasons = "; ".join(
                f"[{f.code}] {f.message}" + (f": {f.detail}" if f.detail else "")
                for f in self.faults
            )
        else:
            reasons = self.body[:500]
        return f"HTTP {self.status_code}{where}: {reasons}"


class BadRequest(QBOResponseError):
    pass


class StaleObjectError(BadRequest):
    """The SyncToken sent with a mutation no longer matches the server's version."""


class Unauthorized(QBOResponseError):
    pass


class Forbidden(QBOResponseError):
    pass


class NotFoundError(QBOResponseError):
    pass


class ThrottleError(QBOResponseError):
    transient = True


class InternalServerError(QBOResponseError):
    transient = True


class ServiceUnavailable(QBOResponseError):
    transient = True


class UnexpectedResponse(QBOResponseError):
    pass


_BY_STATUS: dict[int, type[QBOResponseError]] = {
    400: BadRequest,
    401: Unauthorized,
    403: Forbidden,
    404: NotFoundError,
    429: ThrottleError,
    500: InternalServerError,
    502: ServiceUnavailable,
    503: ServiceUnavailable,
    504: ServiceUnavailable,
}


def parse_faults(body: str) -> list[Fault]:
    """Parse a QBO `{"Fault": {"Error": [...], "type": ...}}` body.

    HTML/XML error pages and anything that isn't a fault document yield `[]`.
    """

    if not body or _MARKUP_RE.match(body):
        return []
    try:
        data = json.loads(body)
    except ValueError:
        return []
    if not isinstance(data, dict):
        return []

    fault = data.get("Fault") or data.get("fault")
    if not isinstance(fault, dict):
        return []
    errors = fault.get("Error") or fault.get("error") or []
    if isinstance(errors, dict):
        errors = [errors]

    faults: list[Fault] = []
    for err in errors:
        if not isinstance(err, dict):
            continue
        code = err.get("code")
        faults.append(
            Fault(
                code=str(code) if code is not None else None,
                message=err.get("Message") or err.get("message"),
                detail=err.get("Detail") or err.get("detail"),
                element=err.get("element") or None,
                type=fault.get("type"),
            )
        )
    return faults


def classify(status_code: int, faults: list[Fault]) -> type[QBOResponseError]:
    if status_code == 400:
        codes = {f.code for f in faults}
        if STALE_OBJECT_CODE in codes:
            return StaleObjectError
        if OBJECT_NOT_FOUND_CODE in codes:
            return NotFoundError
    if status_code in _BY_STATUS:
        return _BY_STATUS[status_code]
    if 500 <= status_code < 600:
        return InternalServerError
    return UnexpectedResponse


def raise_for_response(
    response: requests.Response, request: RequestDescriptor | None = None
) -> None:
    """Raise the matching `QBOResponseError` unless `response` is 2xx."""

    status = response.status_code
    if 200 <= status < 300:
        return

    body = response.text or ""
    faults = parse_faults(body)
    error_cls = classify(status, faults)
    error = error_cls(
        status_code=status,
        faults=faults,
        body=body,
        request=request,
        response=response,
    )
    logger.warning(
        f"QBO request failed: {error_cls.__name__} status={status} "
        f"fault_codes={error.fault_codes}"
    )
    raise error
