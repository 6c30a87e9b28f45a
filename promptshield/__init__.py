"""promptshield — prompt-injection scanning for MCP client transports.

Wraps an MCP client transport so that every message arriving from a server
is scanned before the application sees it.  Unsafe messages are blocked,
dropped or replaced according to caller-supplied hooks.

Quick start::

    from promptshield import AsyncScanClient, ScanningClientTransport

    client = AsyncScanClient()                 # reads PROMPTSHIELD_SCAN__API_KEY
    transport = ScanningClientTransport(base_transport, client)
    transport.on_message = handle_message
    await transport.start()
"""

__version__ = "0.1.0"

from promptshield.exceptions import (
    BadRequestError,
    ConfigurationError,
    InternalServerError,
    MissingApiKeyError,
    PayloadTooLargeError,
    PromptShieldError,
    ScanApiError,
    TransportStateError,
    UnauthorizedError,
)
from promptshield.scan import AsyncScanClient, ScanClient, ScanResponse
from promptshield.security import (
    SECURITY_VIOLATION_ERROR_CODE,
    AfterScanContext,
    AfterScanResult,
    ShouldScanContext,
    UnsafeMessageContext,
    UnsafeMessageResult,
)
from promptshield.transport import ScanningClientTransport

__all__ = [
    "__version__",
    "AsyncScanClient",
    "ScanClient",
    "ScanResponse",
    "ScanningClientTransport",
    "SECURITY_VIOLATION_ERROR_CODE",
    "AfterScanContext",
    "AfterScanResult",
    "ShouldScanContext",
    "UnsafeMessageContext",
    "UnsafeMessageResult",
    "PromptShieldError",
    "ConfigurationError",
    "MissingApiKeyError",
    "TransportStateError",
    "ScanApiError",
    "BadRequestError",
    "UnauthorizedError",
    "PayloadTooLargeError",
    "InternalServerError",
]
