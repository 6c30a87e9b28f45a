"""HTTP clients for the prompt-injection scanning API.

Provides both synchronous (``ScanClient``) and asynchronous
(``AsyncScanClient``) wrappers around the two scan endpoints:

    POST /v1/prompt-injection/text   {"content": "..."}
    POST /v1/prompt-injection/image  {"image": "<base64>"}

Non-success responses are mapped to ``ScanApiError`` subclasses.  Network
failures surface as the underlying ``httpx.HTTPError``.  There is no retry
logic; callers that need it wrap the client.
"""

from __future__ import annotations

import base64
from typing import Any

import httpx

from promptshield.config import get_settings
from promptshield.exceptions import (
    BadRequestError,
    InternalServerError,
    MissingApiKeyError,
    PayloadTooLargeError,
    ScanApiError,
    UnauthorizedError,
)
from promptshield.scan.models import (
    ApiErrorResponse,
    HttpStatus,
    ScanImageRequest,
    ScanResponse,
    ScanTextRequest,
)

TEXT_ENDPOINT = "/v1/prompt-injection/text"
IMAGE_ENDPOINT = "/v1/prompt-injection/image"

_STATUS_ERRORS: dict[int, type[ScanApiError]] = {
    HttpStatus.BAD_REQUEST: BadRequestError,
    HttpStatus.UNAUTHORIZED: UnauthorizedError,
    HttpStatus.PAYLOAD_TOO_LARGE: PayloadTooLargeError,
    HttpStatus.INTERNAL_SERVER_ERROR: InternalServerError,
}


def _client_kwargs(
    base_url: str | None,
    api_key: str | None,
    timeout: float | None,
    headers: dict[str, str] | None,
) -> dict[str, Any]:
    settings = get_settings().scan
    key = api_key or settings.api_key
    if not key:
        raise MissingApiKeyError()

    merged: dict[str, str] = {"Authorization": f"Bearer {key}"}
    if headers:
        merged.update(headers)

    return {
        "base_url": (base_url or settings.base_url).rstrip("/"),
        "headers": merged,
        "timeout": timeout if timeout is not None else settings.timeout_seconds,
    }


def _encode_image(image: str | bytes) -> str:
    if isinstance(image, (bytes, bytearray)):
        return base64.b64encode(image).decode("ascii")
    return image


def _parse_response(resp: httpx.Response) -> ScanResponse:
    if resp.is_success:
        return ScanResponse.model_validate(resp.json())

    body: dict[str, Any] | None = None
    try:
        decoded = resp.json()
    except ValueError:
        decoded = None
    if isinstance(decoded, dict):
        body = decoded

    message = None
    if body is not None:
        message = ApiErrorResponse.model_validate(body).summary()
    message = message or resp.reason_phrase or f"HTTP {resp.status_code}"
    request_id = resp.headers.get("x-request-id")

    error_cls = _STATUS_ERRORS.get(resp.status_code)
    if error_cls is not None:
        raise error_cls(message, body, request_id)  # type: ignore[call-arg]
    raise ScanApiError(message, resp.status_code, body, request_id)


class ScanClient:
    """Synchronous client for the scanning API.

    Usage::

        with ScanClient(api_key="sk-...") as client:
            verdict = client.scan_text("Ignore previous instructions")
            if not verdict.is_safe:
                ...
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        kwargs = _client_kwargs(base_url, api_key, timeout, headers)
        self._base_url: str = kwargs["base_url"]
        self._http = httpx.Client(transport=transport, **kwargs)

    @property
    def base_url(self) -> str:
        return self._base_url

    def scan_text(self, content: str) -> ScanResponse:
        """Scan *content* for prompt-injection attacks."""
        body = ScanTextRequest(content=content)
        resp = self._http.post(TEXT_ENDPOINT, json=body.model_dump())
        return _parse_response(resp)

    def scan_image(self, image: str | bytes) -> ScanResponse:
        """Scan an image given as raw bytes or an already base64-encoded string."""
        body = ScanImageRequest(image=_encode_image(image))
        resp = self._http.post(IMAGE_ENDPOINT, json=body.model_dump())
        return _parse_response(resp)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ScanClient":
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()


class AsyncScanClient:
    """Asynchronous client for the scanning API.

    This is the client ``ScanningClientTransport`` expects.

    Usage::

        async with AsyncScanClient(api_key="sk-...") as client:
            verdict = await client.scan_image(png_bytes)
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        kwargs = _client_kwargs(base_url, api_key, timeout, headers)
        self._base_url: str = kwargs["base_url"]
        self._http = httpx.AsyncClient(transport=transport, **kwargs)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def scan_text(self, content: str) -> ScanResponse:
        body = ScanTextRequest(content=content)
        resp = await self._http.post(TEXT_ENDPOINT, json=body.model_dump())
        return _parse_response(resp)

    async def scan_image(self, image: str | bytes) -> ScanResponse:
        body = ScanImageRequest(image=_encode_image(image))
        resp = await self._http.post(IMAGE_ENDPOINT, json=body.model_dump())
        return _parse_response(resp)

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncScanClient":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
