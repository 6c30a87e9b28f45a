"""Scan API — HTTP clients and verdict models."""

from promptshield.scan.client import AsyncScanClient, ScanClient
from promptshield.scan.images import IMAGE_MIME_TYPES, is_image_mime_type
from promptshield.scan.models import (
    ApiErrorResponse,
    ConfidenceLevel,
    DetectedCategory,
    HttpStatus,
    ScanImageRequest,
    ScanResponse,
    ScanTextRequest,
    ServiceTier,
    ThreatCategory,
)

__all__ = [
    "AsyncScanClient",
    "ScanClient",
    "IMAGE_MIME_TYPES",
    "is_image_mime_type",
    "ApiErrorResponse",
    "ConfidenceLevel",
    "DetectedCategory",
    "HttpStatus",
    "ScanImageRequest",
    "ScanResponse",
    "ScanTextRequest",
    "ServiceTier",
    "ThreatCategory",
]
