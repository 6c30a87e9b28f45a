"""promptshield — Exception hierarchy.

All exceptions raised by the library inherit from PromptShieldError so that
callers can catch the full family with a single except clause when needed.

Hierarchy:
    PromptShieldError
    ├── ConfigurationError
    │   └── MissingApiKeyError
    ├── ProtocolError
    │   └── MessageValidationError
    ├── TransportStateError
    └── ScanApiError
        ├── BadRequestError        (400)
        ├── UnauthorizedError      (401)
        ├── PayloadTooLargeError   (413)
        └── InternalServerError    (500)

Unsafe content is not an error: a detected threat ends in a normal
disposition (forward, replace, block or drop), never in an exception.
"""

from __future__ import annotations

from typing import Any


class PromptShieldError(Exception):
    """Base exception for all promptshield errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context})"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(PromptShieldError):
    """A required collaborator or setting is missing or invalid."""


class MissingApiKeyError(ConfigurationError):
    """No API key was passed to the scan client and none is configured."""

    def __init__(self) -> None:
        super().__init__(
            "API key is required. Pass api_key= to the client or set the "
            "PROMPTSHIELD_SCAN__API_KEY environment variable."
        )


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class ProtocolError(PromptShieldError):
    """Base for JSON-RPC protocol errors."""


class MessageValidationError(ProtocolError):
    """A raw payload is not one of the four JSON-RPC message shapes."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message, context={"validation_errors": errors or []})
        self.errors = errors or []


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class TransportStateError(PromptShieldError):
    """A transport operation was called in a state that does not allow it."""

    def __init__(self, operation: str, state: str) -> None:
        super().__init__(
            f"Cannot {operation} transport in state '{state}'",
            context={"operation": operation, "state": state},
        )
        self.operation = operation
        self.state = state


# ---------------------------------------------------------------------------
# Scan API
# ---------------------------------------------------------------------------


class ScanApiError(PromptShieldError):
    """The scanning API answered with a non-success status code."""

    def __init__(
        self,
        message: str,
        status_code: int,
        response: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            context={"status_code": status_code, "request_id": request_id},
        )
        self.status_code = status_code
        self.response = response
        self.request_id = request_id


class BadRequestError(ScanApiError):
    """The scan request was rejected as invalid (400)."""

    def __init__(
        self,
        message: str,
        response: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message, 400, response, request_id)


class UnauthorizedError(ScanApiError):
    """The API key was missing or rejected (401)."""

    def __init__(
        self,
        message: str,
        response: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message, 401, response, request_id)


class PayloadTooLargeError(ScanApiError):
    """The scanned content exceeded the service size limit (413)."""

    def __init__(
        self,
        message: str,
        response: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message, 413, response, request_id)


class InternalServerError(ScanApiError):
    """The scanning service failed internally (500)."""

    def __init__(
        self,
        message: str,
        response: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message, 500, response, request_id)
