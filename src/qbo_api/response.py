"""Response envelopes and unwrapping.

QBO wraps results in one of two shapes:

- query:  `{"QueryResponse": {"Invoice": [...], "startPosition": 1, ...}}`
  (`{"QueryResponse": {}}` when nothing matched)
- object: `{"Invoice": {...}, "time": "..."}`

The body is parsed once into a `QueryEnvelope` or `ObjectEnvelope` and the entity
payload is pulled out of that.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from .entity import DEFAULT_CATALOG, EntityClassifier
from .errors import ParseFailure

logger = logging.getLogger(__name__)

QUERY_RESPONSE_KEY = "QueryResponse"


class RawResponse(dict):
    """Parsed body returned as-is because the expected entity key was missing.

    Behaves like the plain dict it wraps; check `isinstance(x, RawResponse)` to tell
    a partial unwrap from a real entity record.
    """

    def __init__(self, data: dict[str, Any], *, expected_key: str) -> None:
        super().__init__(data)
        self.expected_key = expected_key


@dataclass(frozen=True, slots=True)
class QueryEnvelope:
    response: dict[str, Any]
    body: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ObjectEnvelope:
    body: Any


Envelope = QueryEnvelope | ObjectEnvelope


def parse_body(body: str | bytes | None) -> Any:
    if body is None:
        return None
    raw = body
    try:
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        if not body.strip():
            return None
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        raise ParseFailure(f"Response is not valid JSON: {e}", body=text) from e


def parse_envelope(data: Any) -> Envelope:
    if isinstance(data, dict) and QUERY_RESPONSE_KEY in data:
        qr = data[QUERY_RESPONSE_KEY]
        return QueryEnvelope(response=qr if isinstance(qr, dict) else {}, body=data)
    return ObjectEnvelope(body=data)


def _raw(body: Any, key: str) -> Any:
    logger.warning(f"Expected key {key!r} missing from QBO response; returning raw body")
    if isinstance(body, dict):
        return RawResponse(body, expected_key=key)
    return body


def extract(
    envelope: Envelope, entity: str, catalog: EntityClassifier = DEFAULT_CATALOG
) -> Any:
    key = catalog.singular_of(entity)

    if isinstance(envelope, QueryEnvelope):
        if not envelope.response:
            return None
        if key not in envelope.response:
            # aggregate queries: {"QueryResponse": {"totalCount": 42}}
            return _raw(envelope.body, key)
        records = envelope.response[key]
        if not records:
            return None
        return records if isinstance(records, list) else [records]

    body = envelope.body
    if isinstance(body, dict) and key in body:
        return body[key]
    return _raw(body, key)


def unwrap(
    body: str | bytes | None,
    entity: str | None = None,
    catalog: EntityClassifier = DEFAULT_CATALOG,
) -> Any:
    data = parse_body(body)
    if entity is None or data is None:
        return data
    return extract(parse_envelope(data), entity, catalog)
