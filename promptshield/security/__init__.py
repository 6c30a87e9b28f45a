"""Security layer — content extraction, scan aggregation and the scan policy."""

from promptshield.security.aggregator import ScanAggregator, combine_verdicts
from promptshield.security.blocking import (
    BLOCKED_MESSAGE,
    BLOCKED_REASON,
    SECURITY_VIOLATION_ERROR_CODE,
    TOOL_CALL_METHOD,
    build_block_response,
)
from promptshield.security.extractor import ExtractedContent, extract_content
from promptshield.security.hooks import (
    AfterScanContext,
    AfterScanResult,
    ShouldScanContext,
    UnsafeMessageContext,
    UnsafeMessageResult,
)
from promptshield.security.policy import Disposition, DispositionKind, ScanPolicy

__all__ = [
    "ScanAggregator",
    "combine_verdicts",
    "BLOCKED_MESSAGE",
    "BLOCKED_REASON",
    "SECURITY_VIOLATION_ERROR_CODE",
    "TOOL_CALL_METHOD",
    "build_block_response",
    "ExtractedContent",
    "extract_content",
    "AfterScanContext",
    "AfterScanResult",
    "ShouldScanContext",
    "UnsafeMessageContext",
    "UnsafeMessageResult",
    "Disposition",
    "DispositionKind",
    "ScanPolicy",
]
