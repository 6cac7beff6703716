from __future__ import annotations

import json

import pytest

from qbo_api.errors import (
    BadRequest,
    Forbidden,
    InternalServerError,
    NotFoundError,
    QBOResponseError,
    ServiceUnavailable,
    StaleObjectError,
    ThrottleError,
    Unauthorized,
    UnexpectedResponse,
    parse_faults,
    raise_for_response,
)
from qbo_api.transport import RequestDescriptor


class _FakeResp:
    def __init__(self, status_code: int, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


def _fault(code: str, message: str = "msg", detail: str = "detail") -> str:
    return json.dumps(
        {
            "Fault": {
                "Error": [{"Message": message, "Detail": detail, "code": code, "element": ""}],
                "type": "ValidationFault",
            },
            "time": "2024-01-01T00:00:00.000-08:00",
        }
    )


def test_parse_faults_reads_qbo_fault_document() -> None:
    faults = parse_faults(_fault("6240", "Duplicate Name Exists Error", "The name supplied already exists."))
    assert len(faults) == 1
    assert faults[0].code == "6240"
    assert faults[0].message == "Duplicate Name Exists Error"
    assert faults[0].type == "ValidationFault"
    assert faults[0].element is None


def test_parse_faults_ignores_markup_and_garbage() -> None:
    assert parse_faults("<!DOCTYPE html><html></html>") == []
    assert parse_faults('<?xml version="1.0"?><IntuitResponse/>') == []
    assert parse_faults("not json") == []
    assert parse_faults("") == []
    assert parse_faults(json.dumps({"ok": True})) == []


def test_success_does_not_raise() -> None:
    raise_for_response(_FakeResp(200, "{}"))
    raise_for_response(_FakeResp(201, "{}"))


@pytest.mark.parametrize(
    "status, body, expected",
    [
        (400, _fault("2020"), BadRequest),
        (400, _fault("5010", "Stale Object Error"), StaleObjectError),
        (400, _fault("610", "Object Not Found"), NotFoundError),
        (401, "", Unauthorized),
        (403, _fault("003100"), Forbidden),
        (404, "", NotFoundError),
        (429, "", ThrottleError),
        (500, "", InternalServerError),
        (501, "", InternalServerError),
        (503, "<html>down</html>", ServiceUnavailable),
        (409, "", UnexpectedResponse),
        (302, "", UnexpectedResponse),
    ],
)
def test_status_classification(status: int, body: str, expected: type) -> None:
    request = RequestDescriptor(method="GET", path="123/customer/1")

    with pytest.raises(expected) as exc_info:
        raise_for_response(_FakeResp(status, body), request)

    err = exc_info.value
    assert type(err) is expected
    assert err.status_code == status
    assert err.request is request
    assert err.response is not None
    assert "123/customer/1" in str(err)


def test_stale_object_is_a_bad_request() -> None:
    with pytest.raises(BadRequest):
        raise_for_response(_FakeResp(400, _fault("5010")))


def test_transient_flag() -> None:
    assert ThrottleError.transient
    assert ServiceUnavailable.transient
    assert InternalServerError.transient
    assert not BadRequest.transient
    assert not QBOResponseError.transient


def test_error_message_includes_fault_details() -> None:
    with pytest.raises(BadRequest) as exc_info:
        raise_for_response(_FakeResp(400, _fault("2050", "Invalid String", "Length exceeded")))
    assert "[2050] Invalid String: Length exceeded" in str(exc_info.value)
    assert exc_info.value.fault_codes == ["2050"]
