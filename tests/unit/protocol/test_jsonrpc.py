"""Unit tests — JSON-RPC message models."""

from __future__ import annotations

import pytest

from promptshield.exceptions import MessageValidationError, ProtocolError
from promptshield.protocol.jsonrpc import (
    JSONRPCErrorResponse,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    message_to_dict,
    parse_message,
    request_id_of,
)


@pytest.mark.unit
class TestParseMessage:
    def test_request(self) -> None:
        msg = parse_message(
            {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {"name": "x"}}
        )
        assert isinstance(msg, JSONRPCRequest)
        assert msg.id == 1
        assert msg.method == "tools/call"

    def test_notification(self) -> None:
        msg = parse_message({"jsonrpc": "2.0", "method": "notifications/progress"})
        assert isinstance(msg, JSONRPCNotification)
        assert msg.params is None

    def test_response(self) -> None:
        msg = parse_message({"jsonrpc": "2.0", "id": "a", "result": {"content": []}})
        assert isinstance(msg, JSONRPCResponse)
        assert msg.id == "a"

    def test_error_response(self) -> None:
        msg = parse_message(
            {"jsonrpc": "2.0", "id": 3, "error": {"code": -32601, "message": "nope"}}
        )
        assert isinstance(msg, JSONRPCErrorResponse)
        assert msg.error.code == -32601

    def test_error_response_with_null_id(self) -> None:
        msg = parse_message(
            {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "parse"}}
        )
        assert isinstance(msg, JSONRPCErrorResponse)
        assert msg.id is None

    def test_unknown_shape_raises(self) -> None:
        with pytest.raises(MessageValidationError):
            parse_message({"jsonrpc": "2.0", "id": 1})

    def test_wrong_version_raises(self) -> None:
        with pytest.raises(MessageValidationError) as exc_info:
            parse_message({"jsonrpc": "1.0", "id": 1, "method": "ping"})
        assert exc_info.value.errors

    def test_non_object_raises(self) -> None:
        with pytest.raises(MessageValidationError):
            parse_message(["not", "a", "message"])  # type: ignore[arg-type]

    def test_validation_error_is_protocol_error(self) -> None:
        with pytest.raises(ProtocolError):
            parse_message({})


@pytest.mark.unit
class TestMessageToDict:
    def test_preserves_received_fields(self) -> None:
        raw = {
            "jsonrpc": "2.0",
            "id": 7,
            "result": {
                "content": [{"type": "text", "text": "hi"}],
                "_meta": {"trace": "abc"},
            },
        }
        assert message_to_dict(parse_message(raw)) == raw

    def test_omits_unset_optional_fields(self) -> None:
        raw = {"jsonrpc": "2.0", "method": "notifications/initialized"}
        assert message_to_dict(parse_message(raw)) == raw

    def test_constructed_message_includes_version(self) -> None:
        msg = JSONRPCRequest(id=1, method="ping")
        assert message_to_dict(msg) == {"jsonrpc": "2.0", "id": 1, "method": "ping"}


@pytest.mark.unit
class TestRequestIdOf:
    def test_request_and_responses_have_ids(self) -> None:
        assert request_id_of(JSONRPCRequest(id=5, method="x")) == 5
        assert request_id_of(JSONRPCResponse(id="r", result={})) == "r"

    def test_notification_has_no_id(self) -> None:
        assert request_id_of(JSONRPCNotification(method="x")) is None


@pytest.mark.unit
def test_messages_are_immutable() -> None:
    msg = JSONRPCRequest(id=1, method="ping")
    with pytest.raises(Exception):
        msg.method = "other"  # type: ignore[misc]
