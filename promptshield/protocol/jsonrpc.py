"""JSON-RPC 2.0 — message models.

The four message shapes exchanged over an MCP transport are modelled as
separate Pydantic v2 classes and combined into the ``JSONRPCMessage`` union.
Only data shapes live here; inspection logic belongs to the security layer.

Models are frozen and keep unknown fields (``_meta`` and other protocol
extensions) so that a forwarded message serialises back to what was received.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from promptshield.exceptions import MessageValidationError

JSONRPC_VERSION = "2.0"

RequestId = Union[str, int]


class _JSONRPCBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION


class JSONRPCRequest(_JSONRPCBase):
    """A request that expects a response correlated by ``id``."""

    id: RequestId
    method: str
    params: dict[str, Any] | list[Any] | None = None


class JSONRPCNotification(_JSONRPCBase):
    """A one-way message; carries no ``id`` and gets no reply."""

    method: str
    params: dict[str, Any] | list[Any] | None = None


class JSONRPCResponse(_JSONRPCBase):
    """A successful reply to a request."""

    id: RequestId
    result: dict[str, Any]


class JSONRPCError(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    code: int
    message: str
    data: Any = None


class JSONRPCErrorResponse(_JSONRPCBase):
    """A failed reply to a request.  ``id`` is null for unparseable requests."""

    id: RequestId | None
    error: JSONRPCError


JSONRPCMessage = Union[
    JSONRPCRequest,
    JSONRPCNotification,
    JSONRPCResponse,
    JSONRPCErrorResponse,
]


def parse_message(payload: dict[str, Any]) -> JSONRPCMessage:
    """Validate a decoded JSON object into one of the four message shapes.

    The shape is chosen from the fields present: ``method`` with ``id`` is a
    request, ``method`` alone a notification, ``result`` a response and
    ``error`` an error response.

    Raises:
        MessageValidationError: the payload matches no shape or fails validation.
    """
    if not isinstance(payload, dict):
        raise MessageValidationError(
            f"JSON-RPC message must be an object, got {type(payload).__name__}"
        )

    model: type[_JSONRPCBase]
    if "method" in payload:
        model = JSONRPCRequest if "id" in payload else JSONRPCNotification
    elif "result" in payload:
        model = JSONRPCResponse
    elif "error" in payload:
        model = JSONRPCErrorResponse
    else:
        raise MessageValidationError(
            "JSON-RPC message has none of 'method', 'result' or 'error'"
        )

    try:
        return model.model_validate(payload)  # type: ignore[return-value]
    except ValidationError as exc:
        raise MessageValidationError(
            f"Invalid JSON-RPC {model.__name__}: {exc.error_count()} error(s)",
            errors=[dict(e) for e in exc.errors(include_url=False)],
        ) from exc


def message_to_dict(message: JSONRPCMessage) -> dict[str, Any]:
    """Serialise *message* back to a plain dict.

    Only fields that were explicitly set are emitted, so optional members the
    sender omitted stay omitted.
    """
    data = message.model_dump(mode="json", exclude_unset=True)
    data.pop("jsonrpc", None)
    return {"jsonrpc": message.jsonrpc, **data}


def request_id_of(message: JSONRPCMessage) -> RequestId | None:
    """Return the correlation id of *message*, or ``None`` for notifications."""
    if isinstance(message, (JSONRPCRequest, JSONRPCResponse, JSONRPCErrorResponse)):
        return message.id
    return None
