"""Scan API — request and response models.

``ScanResponse`` is the verdict for one scanned fragment.  The transport
layer folds several of them into a combined verdict with the same shape.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ThreatCategory(str, Enum):
    """Threat category codes known to the scanning API."""

    BEHAVIORAL_OVERRIDE_LOW = "behavioral_override_low"
    ROLE_MANIPULATION = "role_manipulation"
    CONTEXT_INJECTION = "context_injection"
    INSTRUCTION_HIERARCHY_MANIPULATION = "instruction_hierarchy_manipulation"
    OUTPUT_MANIPULATION = "output_manipulation"
    DATA_EXFILTRATION = "data_exfiltration"
    EXTERNAL_ACTIONS = "external_actions"
    SAFETY_BYPASS = "safety_bypass"


class ConfidenceLevel(str, Enum):
    MEDIUM = "medium"
    HIGH = "high"


class ServiceTier(str, Enum):
    LOW = "low"
    STANDARD = "standard"
    DEDICATED = "dedicated"


class HttpStatus(IntEnum):
    """Status codes the scanning API documents."""

    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    PAYLOAD_TOO_LARGE = 413
    INTERNAL_SERVER_ERROR = 500


class DetectedCategory(BaseModel):
    """One detected threat and how confident the scanner is about it.

    Codes the API adds later are kept as plain strings.
    """

    model_config = ConfigDict(frozen=True)

    code: ThreatCategory | str = Field(union_mode="left_to_right")
    confidence: ConfidenceLevel | str = Field(union_mode="left_to_right")


class ScanResponse(BaseModel):
    """Verdict returned by the scanning API for a single piece of content.

    Attributes:
        is_safe:       False when any prompt-injection technique was detected.
        categories:    Detected categories, in the order the API returned them.
        request_id:    Unique id of the API request.
        api_key_id:    Id of the API key that was billed.
        request_units: Request units consumed.
        service_tier:  Tier that served the request.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    is_safe: bool
    categories: list[DetectedCategory] = Field(default_factory=list)
    request_id: str = ""
    api_key_id: str = ""
    request_units: int = 0
    service_tier: ServiceTier | str = Field(
        default=ServiceTier.STANDARD, union_mode="left_to_right"
    )

    def category_dicts(self) -> list[dict[str, Any]]:
        """Categories as plain JSON-ready dicts."""
        return [c.model_dump(mode="json") for c in self.categories]


class ScanTextRequest(BaseModel):
    content: str


class ScanImageRequest(BaseModel):
    """Body of an image scan; ``image`` is base64 (PNG, JPEG, GIF or WebP)."""

    image: str


class ApiErrorResponse(BaseModel):
    """Error body returned by the API on non-success status codes."""

    model_config = ConfigDict(extra="allow")

    error: str | None = None
    message: str | None = None
    detail: str | None = None

    def summary(self) -> str | None:
        return self.error or self.message or self.detail
