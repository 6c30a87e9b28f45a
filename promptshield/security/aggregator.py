"""Scan aggregation — fan out one scan call per fragment and fold the verdicts.

All calls for a message are started before any is awaited.  The fold waits
for every call; if one fails the whole aggregation fails and no partial
verdict is produced.

Fold rules (dispatch order is all texts, then all images):
  - ``is_safe``        — AND over every verdict
  - ``categories``     — concatenation in dispatch order, duplicates kept
  - ``request_units``  — sum
  - ``request_id``, ``api_key_id``, ``service_tier`` — from the first verdict
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Protocol, Sequence

from promptshield.logging import get_logger
from promptshield.scan.models import ScanResponse, ServiceTier

log = get_logger(__name__)


class AsyncScanner(Protocol):
    """What the aggregator needs from a scan client."""

    def scan_text(self, content: str) -> Awaitable[ScanResponse]: ...

    def scan_image(self, image: str) -> Awaitable[ScanResponse]: ...


def combine_verdicts(results: Sequence[ScanResponse]) -> ScanResponse:
    """Fold per-fragment verdicts into one combined verdict."""
    first = results[0] if results else None
    return ScanResponse(
        is_safe=all(r.is_safe for r in results),
        categories=[c for r in results for c in r.categories],
        request_id=first.request_id if first else "",
        api_key_id=first.api_key_id if first else "",
        request_units=sum(r.request_units for r in results),
        service_tier=first.service_tier if first else ServiceTier.STANDARD,
    )


class ScanAggregator:
    """Scans every fragment of a message concurrently and combines the results."""

    def __init__(self, client: AsyncScanner) -> None:
        self._client = client

    async def aggregate(
        self, texts: Sequence[str], images: Sequence[str]
    ) -> ScanResponse:
        if not texts and not images:
            raise ValueError("aggregate() needs at least one fragment")

        calls = [self._client.scan_text(t) for t in texts]
        calls += [self._client.scan_image(i) for i in images]

        results = await asyncio.gather(*calls)
        combined = combine_verdicts(results)
        log.debug(
            "fragments_scanned",
            texts=len(texts),
            images=len(images),
            is_safe=combined.is_safe,
            request_units=combined.request_units,
        )
        return combined
