"""Content extraction — which parts of an inbound message get scanned.

Rules for a response carrying a ``result``:
  1. ``result.content`` is a list of MCP content items:
       - ``{"type": "text", "text": ...}``                     → text
       - ``{"type": "image", "data": ...}``                    → image
       - ``{"type": "resource", "resource": {mimeType, blob}}`` → image,
         when ``mimeType`` is an image type the scanner accepts
       - anything else is ignored
  2. ``result.content`` is a string → that string is one text fragment.
  3. Any other result → the whole result, JSON-serialised, is one text
     fragment, so unrecognised shapes are never left unscanned.

Requests and notifications are scanned as their JSON-serialised ``params``,
empty ones included.  Error responses and messages without a payload yield
nothing.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from promptshield.protocol.jsonrpc import (
    JSONRPCMessage,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
)
from promptshield.scan.images import is_image_mime_type


@dataclass(frozen=True)
class ExtractedContent:
    """Fragments of one message; images stay in their wire (base64) form."""

    texts: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.texts and not self.images

    @property
    def fragment_count(self) -> int:
        return len(self.texts) + len(self.images)


def extract_content(message: JSONRPCMessage) -> ExtractedContent:
    """Return the text and image fragments of *message* that need scanning."""
    texts: list[str] = []
    images: list[str] = []

    if isinstance(message, JSONRPCResponse):
        if message.result is not None:
            _extract_result(message.result, texts, images)
    elif isinstance(message, (JSONRPCRequest, JSONRPCNotification)):
        if message.params is not None:
            texts.append(_serialize(message.params))

    return ExtractedContent(texts=texts, images=images)


def _extract_result(
    result: dict[str, Any], texts: list[str], images: list[str]
) -> None:
    content = result.get("content")

    if isinstance(content, list):
        for item in content:
            if not isinstance(item, dict):
                continue
            kind = item.get("type")
            if kind == "text" and item.get("text"):
                texts.append(item["text"])
            elif kind == "image" and item.get("data"):
                images.append(item["data"])
            elif kind == "resource":
                resource = item.get("resource")
                if (
                    isinstance(resource, dict)
                    and resource.get("blob")
                    and is_image_mime_type(resource.get("mimeType"))
                ):
                    images.append(resource["blob"])
    elif isinstance(content, str) and content:
        texts.append(content)
    else:
        texts.append(_serialize(result))


def _serialize(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
