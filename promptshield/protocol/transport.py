"""Transport — the capability set every MCP client transport exposes.

A transport moves JSON-RPC messages between the local client and a remote
peer.  Callers register callbacks by assigning the ``on_*`` attributes before
calling ``start()``:

    transport.on_message = handle_message
    transport.on_error = handle_error
    transport.on_close = handle_close
    await transport.start()

Callback contract:
  - ``on_message(message, extra)`` may be a plain function or a coroutine
    function.  Transports must await the returned value when it is
    awaitable so that failures raised by the handler reach the caller that
    delivered the message.
  - ``on_error(exc)`` and ``on_close()`` are plain functions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from promptshield.protocol.jsonrpc import JSONRPCMessage, RequestId


@dataclass(frozen=True)
class MessageExtraInfo:
    """Out-of-band information a transport attaches to an inbound message."""

    request_info: dict[str, Any] | None = None
    auth_info: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransportSendOptions:
    """Per-message options for ``Transport.send``."""

    related_request_id: RequestId | None = None
    resumption_token: str | None = None
    on_resumption_token: Callable[[str], None] | None = None


MessageHandler = Callable[
    [JSONRPCMessage, Optional[MessageExtraInfo]], Optional[Awaitable[None]]
]
ErrorHandler = Callable[[BaseException], None]
CloseHandler = Callable[[], None]


class Transport(ABC):
    """Abstract bidirectional message transport."""

    on_close: CloseHandler | None = None
    on_error: ErrorHandler | None = None
    on_message: MessageHandler | None = None

    # Available after start() on transports that track sessions.
    session_id: str | None = None

    # Transports that negotiate a protocol version expose a callable here.
    set_protocol_version: Callable[[str], None] | None = None

    @abstractmethod
    async def start(self) -> None:
        """Open the connection and begin delivering inbound messages."""

    @abstractmethod
    async def send(
        self,
        message: JSONRPCMessage,
        options: TransportSendOptions | None = None,
    ) -> None:
        """Send *message* to the remote peer."""

    @abstractmethod
    async def close(self) -> None:
        """Close the connection.  ``on_close`` fires once it is closed."""
