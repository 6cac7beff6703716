"""Python client for the QuickBooks Online accounting API."""

from .client import QBOClient, UpdateStamp
from .config import QBOCredentials, QBOSettings
from .entity import DEFAULT_CATALOG, EntityCatalog, EntityClassifier
from .errors import (
    BadRequest,
    Fault,
    Forbidden,
    InternalServerError,
    NotFoundError,
    ParseFailure,
    QBOError,
    QBOResponseError,
    ServiceUnavailable,
    StaleObjectError,
    ThrottleError,
    TransportError,
    Unauthorized,
    UnexpectedResponse,
    UnsupportedOperation,
)
from .response import RawResponse

__all__ = [
    "QBOClient",
    "UpdateStamp",
    "QBOCredentials",
    "QBOSettings",
    "DEFAULT_CATALOG",
    "EntityCatalog",
    "EntityClassifier",
    "RawResponse",
    "QBOError",
    "QBOResponseError",
    "Fault",
    "UnsupportedOperation",
    "BadRequest",
    "StaleObjectError",
    "Unauthorized",
    "Forbidden",
    "NotFoundError",
    "ThrottleError",
    "InternalServerError",
    "ServiceUnavailable",
    "UnexpectedResponse",
    "ParseFailure",
    "TransportError",
]
