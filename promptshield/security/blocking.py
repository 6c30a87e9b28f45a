"""Block responses — what the client receives when a request is blocked.

``tools/call`` requests are answered with a normal result carrying
``isError: true``, because MCP clients surface tool errors that way rather
than as protocol errors.  Every other method gets a JSON-RPC error response
with ``SECURITY_VIOLATION_ERROR_CODE``.
"""

from __future__ import annotations

import json
from typing import Any

from promptshield.protocol.jsonrpc import (
    JSONRPCError,
    JSONRPCErrorResponse,
    JSONRPCMessage,
    JSONRPCResponse,
    RequestId,
)
from promptshield.scan.models import ScanResponse

# Implementation-defined server error range is -32000 to -32099.
SECURITY_VIOLATION_ERROR_CODE = -32001

BLOCKED_MESSAGE = "Message blocked by security scan"
BLOCKED_REASON = "Unsafe content detected"
TOOL_CALL_METHOD = "tools/call"


def _error_payload(scan_result: ScanResponse) -> dict[str, Any]:
    return {
        "code": SECURITY_VIOLATION_ERROR_CODE,
        "message": BLOCKED_MESSAGE,
        "data": {
            "categories": scan_result.category_dicts(),
            "reason": BLOCKED_REASON,
        },
    }


def build_block_response(
    request_id: RequestId,
    method: str | None,
    scan_result: ScanResponse,
) -> JSONRPCMessage:
    """Build the reply sent to the client in place of a blocked request."""
    payload = _error_payload(scan_result)

    if method == TOOL_CALL_METHOD:
        return JSONRPCResponse(
            jsonrpc="2.0",
            id=request_id,
            result={
                "isError": True,
                "content": [{"type": "text", "text": json.dumps(payload)}],
            },
        )

    return JSONRPCErrorResponse(
        jsonrpc="2.0",
        id=request_id,
        error=JSONRPCError(**payload),
    )
