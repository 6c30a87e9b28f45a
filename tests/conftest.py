"""Shared pytest fixtures for the promptshield test suite."""

from __future__ import annotations

import inspect
from typing import Any, Callable, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest

from promptshield.config import ScanConfig, Settings, override_settings
from promptshield.protocol.jsonrpc import JSONRPCMessage
from promptshield.protocol.transport import (
    MessageExtraInfo,
    Transport,
    TransportSendOptions,
)
from promptshield.scan.models import DetectedCategory, ScanResponse


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def test_settings() -> Iterator[Settings]:
    settings = Settings(
        scan=ScanConfig(base_url="https://scan.test", api_key="test-key"),
    )
    override_settings(settings)
    yield settings
    override_settings(None)


# ---------------------------------------------------------------------------
# Verdicts
# ---------------------------------------------------------------------------


@pytest.fixture
def make_verdict() -> Callable[..., ScanResponse]:
    def _make(
        is_safe: bool = True,
        categories: list[tuple[str, str]] | None = None,
        request_id: str = "req-1",
        api_key_id: str = "key-1",
        request_units: int = 1,
        service_tier: str = "standard",
    ) -> ScanResponse:
        return ScanResponse(
            is_safe=is_safe,
            categories=[
                DetectedCategory(code=code, confidence=conf)
                for code, conf in (categories or [])
            ],
            request_id=request_id,
            api_key_id=api_key_id,
            request_units=request_units,
            service_tier=service_tier,
        )

    return _make


@pytest.fixture
def scan_client(make_verdict: Callable[..., ScanResponse]) -> MagicMock:
    """Scan client stub; every call returns a safe verdict unless reconfigured."""
    client = MagicMock()
    client.scan_text = AsyncMock(return_value=make_verdict())
    client.scan_image = AsyncMock(return_value=make_verdict())
    return client


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class FakeTransport(Transport):
    """In-memory transport that lets tests push inbound messages."""

    def __init__(self, session_id: str | None = "session-123") -> None:
        self.started = False
        self.closed = False
        self.sent: list[tuple[JSONRPCMessage, TransportSendOptions | None]] = []
        self.protocol_versions: list[str] = []
        self._session_after_start = session_id

    async def start(self) -> None:
        self.started = True
        self.session_id = self._session_after_start

    async def send(
        self,
        message: JSONRPCMessage,
        options: TransportSendOptions | None = None,
    ) -> None:
        self.sent.append((message, options))

    async def close(self) -> None:
        self.closed = True
        if self.on_close is not None:
            self.on_close()

    def set_protocol_version(self, version: str) -> None:  # type: ignore[override]
        self.protocol_versions.append(version)

    async def deliver(
        self, message: JSONRPCMessage, extra: MessageExtraInfo | None = None
    ) -> None:
        assert self.on_message is not None
        result: Any = self.on_message(message, extra)
        if inspect.isawaitable(result):
            await result

    def fail(self, error: BaseException) -> None:
        assert self.on_error is not None
        self.on_error(error)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def transport_factory() -> type[FakeTransport]:
    return FakeTransport
