"""Fixtures for QBO client tests: a scripted stand-in for `requests.request`."""

from __future__ import annotations

import json
from types import SimpleNamespace
from urllib.parse import parse_qs, urlsplit

import pytest

from qbo_api import QBOClient, QBOCredentials, QBOSettings


class _FakeResp:
    def __init__(
        self, status_code: int, payload=None, text: str | None = None, content: bytes | None = None
    ) -> None:
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text
        self.content = text.encode("utf-8") if content is None else content

    def json(self):
        return self._payload


class FakeQBO:
    """Replays queued responses and records every outgoing call."""

    def __init__(self) -> None:
        self.calls: list[SimpleNamespace] = []
        self._responses: list[_FakeResp] = []

    def respond(
        self,
        status_code: int = 200,
        payload=None,
        text: str | None = None,
        content: bytes | None = None,
    ) -> None:
        self._responses.append(_FakeResp(status_code, payload, text, content))

    def __call__(self, method, url, headers=None, data=None, auth=None, timeout=None):
        parts = urlsplit(url)
        self.calls.append(
            SimpleNamespace(
                method=method,
                url=url,
                path=parts.path,
                query=parse_qs(parts.query),
                headers=headers or {},
                body=json.loads(data) if data else None,
                auth=auth,
                timeout=timeout,
            )
        )
        if not self._responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        return self._responses.pop(0)


@pytest.fixture
def fake_qbo(monkeypatch) -> FakeQBO:
    fake = FakeQBO()
    monkeypatch.setattr("requests.request", fake)
    return fake


@pytest.fixture
def credentials() -> QBOCredentials:
    return QBOCredentials(
        realm_id="123",
        consumer_key="ck",
        consumer_secret="cs",
        token="tok",
        token_secret="ts",
    )


@pytest.fixture
def client(credentials) -> QBOClient:
    return QBOClient(credentials=credentials, settings=QBOSettings(environment="sandbox"))
