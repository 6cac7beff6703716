"""Request signing.

Tokens are never acquired or refreshed here; the caller hands in what it already has.
"""

from __future__ import annotations

import requests
from requests.auth import AuthBase
from requests_oauthlib import OAuth1

from .config import QBOCredentials


class BearerAuth(AuthBase):
    def __init__(self, token: str) -> None:
        self.token = token

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.token}"
        return r


def build_auth(credentials: QBOCredentials) -> AuthBase:
    """OAuth2 bearer when an access token is present, otherwise OAuth1 HMAC-SHA1."""

    if credentials.uses_bearer:
        return BearerAuth(credentials.access_token)
    return OAuth1(
        client_key=credentials.consumer_key,
        client_secret=credentials.consumer_secret,
        resource_owner_key=credentials.token,
        resource_owner_secret=credentials.token_secret,
    )
