"""Scanning client transport — scans inbound MCP messages before delivery.

Wraps any ``Transport`` and exposes the same capability set.  Inbound
messages (server → client) pass through ``ScanPolicy`` before they reach the
application's ``on_message``; outbound ``send()`` is never scanned.

Usage::

    client = AsyncScanClient(api_key="sk-...")
    transport = ScanningClientTransport(
        base_transport,
        client,
        on_unsafe_message=lambda ctx: UnsafeMessageResult(passthrough=False),
    )
    transport.on_message = handle_message
    await transport.start()

Lifecycle::

    UNSTARTED ──start()──► STARTED ──close() / peer close──► CLOSED

Calling ``close()`` again after the application closed the transport is an
error; after a peer close it does nothing.

If a scan or a hook fails, the error is reported through ``on_error`` and
re-raised to whoever delivered the message.  The message is neither
forwarded nor blocked.

Ordering: with ``preserve_order=False`` (default) every inbound message runs
its own pipeline, so a message whose scan finishes early can overtake an
earlier one.  ``preserve_order=True`` runs one pipeline at a time and
delivers in arrival order.
"""

from __future__ import annotations

import asyncio
import contextlib
from enum import Enum

from promptshield.config import get_settings
from promptshield.exceptions import ConfigurationError, TransportStateError
from promptshield.logging import bind_message_context, get_logger, reset_message_context
from promptshield.protocol.jsonrpc import JSONRPCMessage, request_id_of
from promptshield.protocol.transport import (
    MessageExtraInfo,
    Transport,
    TransportSendOptions,
)
from promptshield.security.aggregator import AsyncScanner
from promptshield.security.hooks import (
    AfterScanHook,
    ShouldScanHook,
    UnsafeMessageHook,
    maybe_await,
)
from promptshield.security.policy import ScanPolicy

log = get_logger(__name__)


class TransportState(str, Enum):
    UNSTARTED = "unstarted"
    STARTED = "started"
    CLOSED = "closed"


class ScanningClientTransport(Transport):
    """Client transport that scans every inbound message for prompt injection."""

    def __init__(
        self,
        transport: Transport,
        client: AsyncScanner,
        *,
        should_scan: ShouldScanHook | None = None,
        on_after_scan: AfterScanHook | None = None,
        on_unsafe_message: UnsafeMessageHook | None = None,
        preserve_order: bool | None = None,
    ) -> None:
        if transport is None:
            raise ConfigurationError("ScanningClientTransport requires a transport to wrap")
        if client is None:
            raise ConfigurationError("ScanningClientTransport requires a scan client")

        if preserve_order is None:
            preserve_order = get_settings().transport.preserve_order

        self._wrapped = transport
        self._policy = ScanPolicy(
            client,
            should_scan=should_scan,
            on_after_scan=on_after_scan,
            on_unsafe_message=on_unsafe_message,
        )
        self._order_lock: asyncio.Lock | None = asyncio.Lock() if preserve_order else None
        self._preserve_order = preserve_order
        self._state = TransportState.UNSTARTED
        self._closed_by_peer = False

        self.on_close = None
        self.on_error = None
        self.on_message = None
        self.session_id = None
        self.set_protocol_version = None

    @property
    def state(self) -> TransportState:
        return self._state

    @property
    def wrapped(self) -> Transport:
        return self._wrapped

    @property
    def policy(self) -> ScanPolicy:
        return self._policy

    @property
    def preserve_order(self) -> bool:
        return self._preserve_order

    # ------------------------------------------------------------------
    # Transport API
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if self._state is not TransportState.UNSTARTED:
            raise TransportStateError("start", self._state.value)
        self._state = TransportState.STARTED

        self._wrapped.on_close = self._handle_close
        self._wrapped.on_error = self._handle_error
        self._wrapped.on_message = self._handle_message

        wrapped_set_version = getattr(self._wrapped, "set_protocol_version", None)
        if callable(wrapped_set_version):
            self.set_protocol_version = wrapped_set_version

        await self._wrapped.start()

        if self._wrapped.session_id:
            self.session_id = self._wrapped.session_id
        log.debug(
            "scanning_transport_started",
            wrapped=type(self._wrapped).__name__,
            session_id=self.session_id,
            preserve_order=self._preserve_order,
        )

    async def send(
        self,
        message: JSONRPCMessage,
        options: TransportSendOptions | None = None,
    ) -> None:
        """Forward an outbound message unscanned."""
        if self._state is not TransportState.STARTED:
            raise TransportStateError("send on", self._state.value)
        await self._wrapped.send(message, options)

    async def close(self) -> None:
        if self._state is TransportState.UNSTARTED:
            raise TransportStateError("close", self._state.value)
        if self._state is TransportState.CLOSED:
            if not self._closed_by_peer:
                raise TransportStateError("close", self._state.value)
            log.debug("close_after_peer_close")
            return
        self._state = TransportState.CLOSED
        await self._wrapped.close()

    # ------------------------------------------------------------------
    # Wrapped transport callbacks
    # ------------------------------------------------------------------

    def _handle_close(self) -> None:
        if self._state is not TransportState.CLOSED:
            self._closed_by_peer = True
        self._state = TransportState.CLOSED
        if self.on_close is not None:
            self.on_close()

    def _handle_error(self, error: BaseException) -> None:
        if self.on_error is not None:
            self.on_error(error)

    async def _handle_message(
        self,
        message: JSONRPCMessage,
        extra: MessageExtraInfo | None = None,
    ) -> None:
        token = bind_message_context(request_id_of(message))
        try:
            guard = self._order_lock if self._order_lock is not None else contextlib.nullcontext()
            async with guard:
                disposition = await self._policy.evaluate(message, extra)
                if disposition.message is not None and self.on_message is not None:
                    await maybe_await(self.on_message(disposition.message, extra))
        except Exception as exc:
            log.error(
                "inbound_scan_failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            if self.on_error is not None:
                self.on_error(exc)
            raise
        finally:
            reset_message_context(token)
