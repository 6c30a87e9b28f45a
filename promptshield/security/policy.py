"""Scan policy — turns one inbound message into exactly one disposition.

Decision sequence:

    should_scan?  ──no──►  FORWARD (original)
        │ yes
    extract fragments  ──none──►  FORWARD (original)
        │
    scan + combine
        │
    on_after_scan → passthrough?  ──yes──►  FORWARD (original)
        │ no
    safe?  ──yes──►  FORWARD (original)
        │ no
    on_unsafe_message
        ├─ passthrough           → REPLACE (replace) / FORWARD (original)
        ├─ replace               → REPLACE (replace)
        └─ neither               → BLOCK (request) / DROP (notification, response)

Absent hooks behave as: always scan, never override, block-or-drop.
Exceptions from scans or hooks propagate to the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from promptshield.logging import get_logger
from promptshield.protocol.jsonrpc import JSONRPCMessage, JSONRPCRequest
from promptshield.protocol.transport import MessageExtraInfo
from promptshield.scan.models import ScanResponse
from promptshield.security.aggregator import AsyncScanner, ScanAggregator
from promptshield.security.blocking import build_block_response
from promptshield.security.extractor import extract_content
from promptshield.security.hooks import (
    AfterScanContext,
    AfterScanHook,
    ShouldScanContext,
    ShouldScanHook,
    UnsafeMessageContext,
    UnsafeMessageHook,
    UnsafeMessageResult,
    maybe_await,
)

log = get_logger(__name__)


class DispositionKind(str, Enum):
    FORWARD = "forward"
    REPLACE = "replace"
    BLOCK = "block"
    DROP = "drop"


@dataclass(frozen=True)
class Disposition:
    """Final decision for one inbound message.

    ``message`` is what the application receives; it is ``None`` only for DROP.
    ``scan_result`` is the combined verdict, when a scan took place.
    """

    kind: DispositionKind
    message: JSONRPCMessage | None
    scan_result: ScanResponse | None = None

    @property
    def delivers(self) -> bool:
        return self.message is not None


class ScanPolicy:
    """Evaluates the scan hooks for inbound messages."""

    def __init__(
        self,
        client: AsyncScanner,
        *,
        should_scan: ShouldScanHook | None = None,
        on_after_scan: AfterScanHook | None = None,
        on_unsafe_message: UnsafeMessageHook | None = None,
    ) -> None:
        self._aggregator = ScanAggregator(client)
        self._should_scan = should_scan
        self._on_after_scan = on_after_scan
        self._on_unsafe_message = on_unsafe_message

    async def evaluate(
        self,
        message: JSONRPCMessage,
        extra: MessageExtraInfo | None = None,
    ) -> Disposition:
        if self._should_scan is not None:
            scan = await maybe_await(
                self._should_scan(ShouldScanContext(message=message, extra=extra))
            )
            if not scan:
                log.debug("inbound_scan_skipped", reason="should_scan")
                return Disposition(DispositionKind.FORWARD, message)

        content = extract_content(message)
        if content.is_empty:
            log.debug("inbound_no_content")
            return Disposition(DispositionKind.FORWARD, message)

        verdict = await self._aggregator.aggregate(content.texts, content.images)
        log.info(
            "inbound_scanned",
            is_safe=verdict.is_safe,
            fragments=content.fragment_count,
            categories=[c.code for c in verdict.categories],
            scan_request_id=verdict.request_id,
        )

        if self._on_after_scan is not None:
            after = await maybe_await(
                self._on_after_scan(
                    AfterScanContext(message=message, scan_result=verdict, extra=extra)
                )
            )
            if after.passthrough:
                log.info("inbound_scan_override", is_safe=verdict.is_safe)
                return Disposition(DispositionKind.FORWARD, message, verdict)

        if verdict.is_safe:
            return Disposition(DispositionKind.FORWARD, message, verdict)

        return await self._resolve_unsafe(message, extra, verdict)

    async def _resolve_unsafe(
        self,
        message: JSONRPCMessage,
        extra: MessageExtraInfo | None,
        verdict: ScanResponse,
    ) -> Disposition:
        if self._on_unsafe_message is not None:
            resolution = await maybe_await(
                self._on_unsafe_message(
                    UnsafeMessageContext(message=message, scan_result=verdict, extra=extra)
                )
            )
        else:
            resolution = UnsafeMessageResult(passthrough=False)

        if resolution.replace is not None:
            log.warning("inbound_replaced", passthrough=resolution.passthrough)
            return Disposition(DispositionKind.REPLACE, resolution.replace, verdict)

        if resolution.passthrough:
            log.warning("inbound_unsafe_passthrough")
            return Disposition(DispositionKind.FORWARD, message, verdict)

        if isinstance(message, JSONRPCRequest):
            log.warning("inbound_blocked", method=message.method)
            return Disposition(
                DispositionKind.BLOCK,
                build_block_response(message.id, message.method, verdict),
                verdict,
            )

        log.warning("inbound_dropped", shape=type(message).__name__)
        return Disposition(DispositionKind.DROP, None, verdict)
