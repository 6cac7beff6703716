from __future__ import annotations

import json

import pytest

from qbo_api.errors import ParseFailure
from qbo_api.response import (
    ObjectEnvelope,
    QueryEnvelope,
    RawResponse,
    parse_envelope,
    unwrap,
)


def test_parse_envelope_tags_both_shapes() -> None:
    assert isinstance(parse_envelope({"QueryResponse": {}}), QueryEnvelope)
    assert isinstance(parse_envelope({"Customer": {"Id": "1"}}), ObjectEnvelope)
    assert isinstance(parse_envelope([1, 2]), ObjectEnvelope)


def test_unwrap_without_entity_returns_parsed_body() -> None:
    body = json.dumps({"Rows": {"Row": []}})
    assert unwrap(body) == {"Rows": {"Row": []}}


def test_unwrap_query_response() -> None:
    body = json.dumps({"QueryResponse": {"Invoice": [{"Id": "1"}, {"Id": "2"}], "startPosition": 1}})
    assert unwrap(body, "invoice") == [{"Id": "1"}, {"Id": "2"}]


@pytest.mark.parametrize(
    "payload",
    [{"QueryResponse": {}}, {"QueryResponse": {"Invoice": []}}],
)
def test_unwrap_empty_query_response_is_none(payload) -> None:
    assert unwrap(json.dumps(payload), "Invoice") is None


def test_unwrap_object_response() -> None:
    body = json.dumps({"Customer": {"Id": "1", "SyncToken": "0"}, "time": "2024-01-01"})
    assert unwrap(body, "Customer") == {"Id": "1", "SyncToken": "0"}


def test_unwrap_missing_key_returns_marked_raw_body(caplog) -> None:
    body = {"Vendor": {"Id": "9"}}
    result = unwrap(json.dumps(body), "Customer")

    assert isinstance(result, RawResponse)
    assert result == body
    assert result.expected_key == "Customer"
    assert "missing" in caplog.text


def test_unwrap_empty_body_is_none() -> None:
    assert unwrap(b"", "Customer") is None
    assert unwrap(None) is None


def test_unwrap_malformed_json_raises() -> None:
    with pytest.raises(ParseFailure) as exc_info:
        unwrap("<html>oops</html>", "Customer")
    assert exc_info.value.body == "<html>oops</html>"


def test_unwrap_count_query_returns_marked_raw_body() -> None:
    body = {"QueryResponse": {"totalCount": 42}, "time": "2024-01-01"}
    result = unwrap(json.dumps(body), "Invoice")

    assert isinstance(result, RawResponse)
    assert result["QueryResponse"]["totalCount"] == 42
    assert result.expected_key == "Invoice"


def test_unwrap_invalid_utf8_raises_parse_failure() -> None:
    with pytest.raises(ParseFailure) as exc_info:
        unwrap(b"\xff\xfe{", "Customer")
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
