"""Protocol layer — JSON-RPC message models and the transport interface."""

from promptshield.protocol.jsonrpc import (
    JSONRPC_VERSION,
    JSONRPCError,
    JSONRPCErrorResponse,
    JSONRPCMessage,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    RequestId,
    message_to_dict,
    parse_message,
    request_id_of,
)
from promptshield.protocol.transport import (
    MessageExtraInfo,
    Transport,
    TransportSendOptions,
)

__all__ = [
    "JSONRPC_VERSION",
    "JSONRPCError",
    "JSONRPCErrorResponse",
    "JSONRPCMessage",
    "JSONRPCNotification",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "RequestId",
    "MessageExtraInfo",
    "Transport",
    "TransportSendOptions",
    "message_to_dict",
    "parse_message",
    "request_id_of",
]
