"""Policy hooks — contexts, results and the call-if-present helper.

Hooks are plain callables passed at construction.  Each may return its
result directly or return an awaitable that resolves to it, so both of
these work::

    def should_scan(ctx: ShouldScanContext) -> bool:
        return ctx.message.method != "ping"

    async def on_unsafe_message(ctx: UnsafeMessageContext) -> UnsafeMessageResult:
        await audit.record(ctx.scan_result)
        return UnsafeMessageResult(passthrough=False)

Exceptions raised by a hook are not caught here.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar, Union

from promptshield.protocol.jsonrpc import JSONRPCMessage
from promptshield.protocol.transport import MessageExtraInfo
from promptshield.scan.models import ScanResponse

T = TypeVar("T")


@dataclass(frozen=True)
class ShouldScanContext:
    message: JSONRPCMessage
    extra: MessageExtraInfo | None = None


@dataclass(frozen=True)
class AfterScanContext:
    message: JSONRPCMessage
    scan_result: ScanResponse
    extra: MessageExtraInfo | None = None


@dataclass(frozen=True)
class UnsafeMessageContext:
    message: JSONRPCMessage
    scan_result: ScanResponse
    extra: MessageExtraInfo | None = None


@dataclass(frozen=True)
class AfterScanResult:
    """``passthrough=True`` forwards the original message and skips unsafe handling."""

    passthrough: bool = False


@dataclass(frozen=True)
class UnsafeMessageResult:
    """How to resolve an unsafe message.

    - ``passthrough=True``  → forward ``replace`` if given, else the original
    - ``passthrough=False`` with ``replace`` → forward ``replace``
    - ``passthrough=False`` without ``replace`` → block (requests) or drop
    """

    passthrough: bool = False
    replace: JSONRPCMessage | None = None


ShouldScanHook = Callable[[ShouldScanContext], Union[bool, Awaitable[bool]]]
AfterScanHook = Callable[
    [AfterScanContext], Union[AfterScanResult, Awaitable[AfterScanResult]]
]
UnsafeMessageHook = Callable[
    [UnsafeMessageContext], Union[UnsafeMessageResult, Awaitable[UnsafeMessageResult]]
]


async def maybe_await(value: Union[T, Awaitable[T]]) -> T:
    """Return *value*, awaiting it first when it is awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value  # type: ignore[return-value]
