"""Unit tests — ScanPolicy decision sequence."""

from __future__ import annotations

import json
from typing import Callable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from promptshield.protocol.jsonrpc import (
    JSONRPCErrorResponse,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
)
from promptshield.protocol.transport import MessageExtraInfo
from promptshield.scan.models import ScanResponse
from promptshield.security.blocking import SECURITY_VIOLATION_ERROR_CODE
from promptshield.security.hooks import (
    AfterScanContext,
    AfterScanResult,
    ShouldScanContext,
    UnsafeMessageContext,
    UnsafeMessageResult,
)
from promptshield.security.policy import Disposition, DispositionKind, ScanPolicy

TOOL_RESULT = JSONRPCResponse(id=3, result={"content": [{"type": "text", "text": "file contents"}]})
TOOL_CALL = JSONRPCRequest(id=7, method="tools/call", params={"name": "read", "arguments": {}})
NOTIFICATION = JSONRPCNotification(method="notifications/message", params={"data": "hi"})


@pytest.fixture
def unsafe_client(scan_client: MagicMock, make_verdict: Callable[..., ScanResponse]) -> MagicMock:
    verdict = make_verdict(is_safe=False, categories=[("data_exfiltration", "high")])
    scan_client.scan_text.return_value = verdict
    scan_client.scan_image.return_value = verdict
    return scan_client


# ---------------------------------------------------------------------------
# Pre-scan gate
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestShouldScan:
    @pytest.mark.asyncio
    async def test_false_skips_extraction_and_scanning(self, unsafe_client: MagicMock) -> None:
        policy = ScanPolicy(unsafe_client, should_scan=lambda ctx: False)

        with patch("promptshield.security.policy.extract_content") as extract:
            disposition = await policy.evaluate(TOOL_RESULT)

        extract.assert_not_called()
        unsafe_client.scan_text.assert_not_called()
        assert disposition == Disposition(DispositionKind.FORWARD, TOOL_RESULT)

    @pytest.mark.asyncio
    async def test_async_hook_and_context(self, scan_client: MagicMock) -> None:
        seen: list[ShouldScanContext] = []
        extra = MessageExtraInfo(request_info={"headers": {}})

        async def should_scan(ctx: ShouldScanContext) -> bool:
            seen.append(ctx)
            return True

        policy = ScanPolicy(scan_client, should_scan=should_scan)
        await policy.evaluate(TOOL_RESULT, extra)

        assert seen == [ShouldScanContext(message=TOOL_RESULT, extra=extra)]
        scan_client.scan_text.assert_awaited_once_with("file contents")

    @pytest.mark.asyncio
    async def test_default_scans_everything(self, scan_client: MagicMock) -> None:
        await ScanPolicy(scan_client).evaluate(NOTIFICATION)
        scan_client.scan_text.assert_awaited_once()


# ---------------------------------------------------------------------------
# No content
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.asyncio
async def test_message_without_content_is_forwarded_unscanned(scan_client: MagicMock) -> None:
    after = MagicMock(return_value=AfterScanResult())
    message = JSONRPCRequest(id=1, method="ping")

    disposition = await ScanPolicy(scan_client, on_after_scan=after).evaluate(message)

    assert disposition.kind is DispositionKind.FORWARD
    assert disposition.message is message
    assert disposition.scan_result is None
    scan_client.scan_text.assert_not_called()
    scan_client.scan_image.assert_not_called()
    after.assert_not_called()


# ---------------------------------------------------------------------------
# Post-scan override
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestAfterScan:
    @pytest.mark.asyncio
    async def test_passthrough_forwards_unsafe_and_skips_unsafe_hook(
        self, unsafe_client: MagicMock
    ) -> None:
        on_unsafe = MagicMock()
        policy = ScanPolicy(
            unsafe_client,
            on_after_scan=lambda ctx: AfterScanResult(passthrough=True),
            on_unsafe_message=on_unsafe,
        )

        disposition = await policy.evaluate(TOOL_CALL)

        assert disposition.kind is DispositionKind.FORWARD
        assert disposition.message is TOOL_CALL
        assert disposition.scan_result is not None
        assert disposition.scan_result.is_safe is False
        on_unsafe.assert_not_called()

    @pytest.mark.asyncio
    async def test_called_for_safe_messages_too(self, scan_client: MagicMock) -> None:
        seen: list[AfterScanContext] = []

        def after(ctx: AfterScanContext) -> AfterScanResult:
            seen.append(ctx)
            return AfterScanResult(passthrough=False)

        disposition = await ScanPolicy(scan_client, on_after_scan=after).evaluate(TOOL_RESULT)

        assert len(seen) == 1
        assert seen[0].scan_result.is_safe is True
        assert disposition.kind is DispositionKind.FORWARD

    @pytest.mark.asyncio
    async def test_no_passthrough_continues_to_blocking(self, unsafe_client: MagicMock) -> None:
        policy = ScanPolicy(unsafe_client, on_after_scan=AsyncMock(return_value=AfterScanResult()))
        disposition = await policy.evaluate(TOOL_CALL)
        assert disposition.kind is DispositionKind.BLOCK


# ---------------------------------------------------------------------------
# Safe messages
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.asyncio
async def test_safe_message_never_reaches_unsafe_hook(scan_client: MagicMock) -> None:
    on_unsafe = MagicMock()
    disposition = await ScanPolicy(scan_client, on_unsafe_message=on_unsafe).evaluate(TOOL_RESULT)

    assert disposition.kind is DispositionKind.FORWARD
    assert disposition.message is TOOL_RESULT
    on_unsafe.assert_not_called()


# ---------------------------------------------------------------------------
# Unsafe resolution — defaults
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestUnsafeDefaults:
    @pytest.mark.asyncio
    async def test_tool_call_request_gets_error_result(self, unsafe_client: MagicMock) -> None:
        disposition = await ScanPolicy(unsafe_client).evaluate(TOOL_CALL)

        assert disposition.kind is DispositionKind.BLOCK
        reply = disposition.message
        assert isinstance(reply, JSONRPCResponse)
        assert reply.id == 7
        assert reply.result["isError"] is True
        assert "data_exfiltration" in reply.result["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_other_request_gets_protocol_error(self, unsafe_client: MagicMock) -> None:
        request = JSONRPCRequest(id="r1", method="sampling/createMessage", params={"messages": []})
        disposition = await ScanPolicy(unsafe_client).evaluate(request)

        reply = disposition.message
        assert isinstance(reply, JSONRPCErrorResponse)
        assert reply.id == "r1"
        assert reply.error.code == SECURITY_VIOLATION_ERROR_CODE

    @pytest.mark.asyncio
    async def test_notification_is_dropped(self, unsafe_client: MagicMock) -> None:
        disposition = await ScanPolicy(unsafe_client).evaluate(NOTIFICATION)
        assert disposition == Disposition(
            DispositionKind.DROP, None, disposition.scan_result
        )
        assert disposition.delivers is False

    @pytest.mark.asyncio
    async def test_response_is_dropped(self, unsafe_client: MagicMock) -> None:
        disposition = await ScanPolicy(unsafe_client).evaluate(TOOL_RESULT)
        assert disposition.kind is DispositionKind.DROP
        assert disposition.message is None


# ---------------------------------------------------------------------------
# Unsafe resolution — hook
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestUnsafeHook:
    @pytest.mark.asyncio
    async def test_receives_combined_verdict(self, unsafe_client: MagicMock) -> None:
        seen: list[UnsafeMessageContext] = []

        def on_unsafe(ctx: UnsafeMessageContext) -> UnsafeMessageResult:
            seen.append(ctx)
            return UnsafeMessageResult(passthrough=False)

        await ScanPolicy(unsafe_client, on_unsafe_message=on_unsafe).evaluate(TOOL_RESULT)

        assert seen[0].message is TOOL_RESULT
        assert [c.code for c in seen[0].scan_result.categories] == ["data_exfiltration"]

    @pytest.mark.asyncio
    async def test_passthrough_forwards_original(self, unsafe_client: MagicMock) -> None:
        policy = ScanPolicy(
            unsafe_client,
            on_unsafe_message=lambda ctx: UnsafeMessageResult(passthrough=True),
        )
        disposition = await policy.evaluate(TOOL_RESULT)
        assert disposition.kind is DispositionKind.FORWARD
        assert disposition.message is TOOL_RESULT

    @pytest.mark.asyncio
    async def test_passthrough_with_replace_forwards_replacement(self, unsafe_client: MagicMock) -> None:
        replacement = JSONRPCResponse(id=3, result={"content": [{"type": "text", "text": "[redacted]"}]})
        policy = ScanPolicy(
            unsafe_client,
            on_unsafe_message=lambda ctx: UnsafeMessageResult(passthrough=True, replace=replacement),
        )
        disposition = await policy.evaluate(TOOL_RESULT)
        assert disposition.kind is DispositionKind.REPLACE
        assert disposition.message is replacement

    @pytest.mark.asyncio
    async def test_replace_without_passthrough_forwards_replacement(
        self, unsafe_client: MagicMock
    ) -> None:
        replacement = JSONRPCResponse(id=7, result={"content": [], "isError": True})

        async def on_unsafe(ctx: UnsafeMessageContext) -> UnsafeMessageResult:
            return UnsafeMessageResult(passthrough=False, replace=replacement)

        disposition = await ScanPolicy(unsafe_client, on_unsafe_message=on_unsafe).evaluate(TOOL_CALL)
        assert disposition.message is replacement

    @pytest.mark.asyncio
    async def test_block_without_replace_on_request(self, unsafe_client: MagicMock) -> None:
        policy = ScanPolicy(
            unsafe_client,
            on_unsafe_message=lambda ctx: UnsafeMessageResult(passthrough=False),
        )
        disposition = await policy.evaluate(TOOL_CALL)
        assert disposition.kind is DispositionKind.BLOCK
        payload = json.loads(disposition.message.result["content"][0]["text"])  # type: ignore[union-attr]
        assert payload["code"] == SECURITY_VIOLATION_ERROR_CODE

    @pytest.mark.asyncio
    async def test_hook_errors_propagate(self, unsafe_client: MagicMock) -> None:
        def on_unsafe(ctx: UnsafeMessageContext) -> UnsafeMessageResult:
            raise RuntimeError("hook broke")

        with pytest.raises(RuntimeError, match="hook broke"):
            await ScanPolicy(unsafe_client, on_unsafe_message=on_unsafe).evaluate(TOOL_CALL)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_scan_failure_propagates(scan_client: MagicMock) -> None:
    scan_client.scan_text.side_effect = ConnectionError("down")
    with pytest.raises(ConnectionError):
        await ScanPolicy(scan_client).evaluate(TOOL_RESULT)
