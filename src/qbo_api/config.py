"""Settings and credentials for the QBO client.

Both are plain frozen dataclasses so a client can be built explicitly in code, or
from the environment (`.env` is loaded with python-dotenv, falling back to
`.env.example` for local runs).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import dotenv_values, load_dotenv

ENVIRONMENTS = ("sandbox", "production")
ENDPOINTS = ("accounting", "payments")

V3_ENDPOINT_BASE_URL = "https://sandbox-quickbooks.api.intuit.com/v3/company/"
PAYMENTS_API_BASE_URL = "https://sandbox.api.intuit.com/quickbooks/v4/payments/"
APP_CONNECTION_URL = "https://appcenter.intuit.com/api/v1/connection"

_TRUTHY = {"1", "true", "TRUE", "yes", "YES"}


def _load_env() -> None:
    load_dotenv(override=False)

    # `.env.example` holds blank placeholders for secrets; blanks must not
    # override real values.
    if not os.environ.get("QBO_REALM_ID"):
        example_path = os.path.abspath(".env.example")
        if os.path.exists(example_path):
            for k, v in (dotenv_values(example_path) or {}).items():
                if not k or not v:
                    continue
                if not os.environ.get(k):
                    os.environ[k] = v


@dataclass(frozen=True, slots=True)
class QBOSettings:
    environment: str = "sandbox"
    endpoint: str = "accounting"
    minor_version: str | None = None
    timeout_seconds: float = 30
    debug: bool = False

    def __post_init__(self) -> None:
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {ENVIRONMENTS}, got {self.environment!r}"
            )
        if self.endpoint not in ENDPOINTS:
            raise ValueError(f"endpoint must be one of {ENDPOINTS}, got {self.endpoint!r}")

    @property
    def production(self) -> bool:
        return self.environment == "production"

    @property
    def base_url(self) -> str:
        if self.endpoint == "payments":
            return (
                PAYMENTS_API_BASE_URL.replace("sandbox.", "", 1)
                if self.production
                else PAYMENTS_API_BASE_URL
            )
        return (
            V3_ENDPOINT_BASE_URL.replace("sandbox-", "", 1)
            if self.production
            else V3_ENDPOINT_BASE_URL
        )

    @classmethod
    def from_env(cls) -> "QBOSettings":
        _load_env()
        return cls(
            environment=os.environ.get("QBO_ENVIRONMENT", "sandbox"),
            endpoint=os.environ.get("QBO_ENDPOINT", "accounting"),
            minor_version=os.environ.get("QBO_MINORVERSION") or None,
            timeout_seconds=float(os.environ.get("QBO_HTTP_TIMEOUT_SECONDS", "30")),
            debug=os.environ.get("QBO_DEBUG") in _TRUTHY,
        )


@dataclass(frozen=True, slots=True)
class QBOCredentials:
    """OAuth1 key/secret pairs or an OAuth2 bearer token, scoped to one company."""

    realm_id: str
    consumer_key: str | None = None
    consumer_secret: str | None = None
    token: str | None = None
    token_secret: str | None = None
    access_token: str | None = None

    def __post_init__(self) -> None:
        if not self.realm_id:
            raise ValueError("realm_id must not be empty")
        if self.access_token:
            return
        missing = [
            name
            for name in ("consumer_key", "consumer_secret", "token", "token_secret")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                "Missing OAuth1 credentials ("
                + ", ".join(missing)
                + ") and no bearer access_token given"
            )

    @property
    def uses_bearer(self) -> bool:
        return bool(self.access_token)

    @classmethod
    def from_env(cls) -> "QBOCredentials":
        _load_env()
        return cls(
            realm_id=os.environ.get("QBO_REALM_ID", ""),
            consumer_key=os.environ.get("QBO_CONSUMER_KEY") or None,
            consumer_secret=os.environ.get("QBO_CONSUMER_SECRET") or None,
            token=os.environ.get("QBO_ACCESS_TOKEN") or None,
            token_secret=os.environ.get("QBO_ACCESS_TOKEN_SECRET") or None,
            access_token=os.environ.get("QBO_BEARER_TOKEN") or None,
        )

    @classmethod
    def from_tokens_file(cls, path: str) -> "QBOCredentials":
        """Load bearer credentials saved by an OAuth2 helper (`realm_id`, `access_token`)."""

        if not os.path.exists(path):
            raise FileNotFoundError(f"Token file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)

        return cls(realm_id=raw["realm_id"], access_token=raw["access_token"])
