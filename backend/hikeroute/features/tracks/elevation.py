"""
Elevation Backfill Service

Fills missing trackpoint elevation from an Open-Elevation compatible
lookup API, with linear interpolation as a manual fallback.

API contract:
    POST {elevation_api_url}
    {"locations": [{"latitude": 46.5, "longitude": 8.0}, ...]}
    -> {"results": [{"elevation": 1234.0}, ...]}   (aligned by index)

Backfill never raises: if the service is unreachable or answers with
garbage, the input sequence comes back unchanged.
"""

import asyncio
import logging
from typing import Optional, Sequence

import httpx

from hikeroute.config import settings
from .schemas import Coordinate

logger = logging.getLogger(__name__)

CoordinateKey = tuple[float, float]


class ElevationLookupError(Exception):
    """A batch lookup failed. Never leaves this module."""
    pass


class ElevationBackfillService:
    """Batched, concurrent elevation lookup for trackpoints."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        batch_size: Optional[int] = None,
        timeout: Optional[float] = None,
        partial_merge: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url or settings.elevation_api_url
        self.batch_size = batch_size or settings.elevation_batch_size
        self.timeout = timeout if timeout is not None else settings.elevation_timeout_seconds
        self.partial_merge = (
            partial_merge if partial_merge is not None else settings.elevation_partial_merge
        )
        self._transport = transport

    async def backfill(self, points: Sequence[Coordinate]) -> list[Coordinate]:
        """
        Fill elevation for points that have none (missing or 0).

        All batches are sent concurrently and awaited as a group. If any
        batch fails the original points are returned, unless partial_merge
        is enabled, in which case successful batches are still merged.

        Args:
            points: Ordered trackpoints

        Returns:
            New list of the same length and order
        """
        points = list(points)
        keys = list(dict.fromkeys(
            (p.lat, p.lng) for p in points if p.needs_elevation
        ))
        if not keys:
            return points

        batches = [
            keys[i:i + self.batch_size]
            for i in range(0, len(keys), self.batch_size)
        ]
        logger.info(
            f"Fetching elevation for {len(keys)} locations in {len(batches)} batches"
        )

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            results = await asyncio.gather(
                *(self._fetch_batch(client, batch) for batch in batches),
                return_exceptions=True,
            )

        elevations: dict[CoordinateKey, float] = {}
        failures = 0
        for batch, result in zip(batches, results):
            if isinstance(result, BaseException):
                failures += 1
                logger.warning(f"Elevation batch of {len(batch)} failed: {result}")
                continue
            for key, elevation in zip(batch, result):
                if elevation is not None:
                    elevations[key] = elevation

        if failures and not self.partial_merge:
            logger.warning(
                f"Elevation backfill skipped: {failures}/{len(batches)} batches failed"
            )
            return points

        return merge_elevations(points, elevations)

    async def _fetch_batch(
        self,
        client: httpx.AsyncClient,
        batch: list[CoordinateKey],
    ) -> list[Optional[float]]:
        """Look up one batch; results are aligned with batch."""
        payload = {
            "locations": [
                {"latitude": lat, "longitude": lng} for lat, lng in batch
            ]
        }

        try:
            response = await client.post(self.api_url, json=payload)
        except httpx.HTTPError as e:
            raise ElevationLookupError(f"Request failed: {e}") from e

        if response.status_code != 200:
            raise ElevationLookupError(
                f"API error: {response.status_code} - {response.text[:200]}"
            )

        try:
            results = response.json()["results"]
        except (ValueError, KeyError, TypeError) as e:
            raise ElevationLookupError(f"Malformed response: {e}") from e

        if not isinstance(results, list) or len(results) != len(batch):
            raise ElevationLookupError(
                f"Expected {len(batch)} results, got "
                f"{len(results) if isinstance(results, list) else type(results).__name__}"
            )

        return [_read_elevation(item) for item in results]


def _read_elevation(item) -> Optional[float]:
    if not isinstance(item, dict):
        return None
    value = item.get("elevation")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def merge_elevations(
    points: Sequence[Coordinate],
    elevations: dict[CoordinateKey, float],
) -> list[Coordinate]:
    """
    Apply looked-up elevations by exact (lat, lng) key.

    Points that already have a nonzero elevation are left untouched.
    """
    merged = []
    for point in points:
        value = elevations.get((point.lat, point.lng))
        if point.needs_elevation and value is not None:
            point = point.model_copy(update={"elevation": value})
        merged.append(point)
    return merged


def estimate_elevation(points: Sequence[Coordinate], index: int) -> float:
    """
    Estimate elevation at index by linear interpolation.

    Scans outward to the nearest points before and after index that have
    elevation and interpolates by index distance.

    Returns:
        Interpolated elevation, or 0 if index is not bracketed on both
        sides by points with elevation
    """
    if points[index].elevation:
        return points[index].elevation

    before = index - 1
    while before >= 0 and not points[before].elevation:
        before -= 1

    after = index + 1
    while after < len(points) and not points[after].elevation:
        after += 1

    if before < 0 or after >= len(points):
        return 0.0

    low = points[before].elevation
    high = points[after].elevation
    ratio = (index - before) / (after - before)
    return low + ratio * (high - low)


def interpolate_missing(points: Sequence[Coordinate]) -> list[Coordinate]:
    """
    Fill every gap that estimate_elevation can bracket.

    Not called automatically; use when the lookup API is unavailable.
    Unbracketed points keep their original value.
    """
    filled = []
    for i, point in enumerate(points):
        if point.needs_elevation:
            estimate = estimate_elevation(points, i)
            if estimate:
                point = point.model_copy(update={"elevation": estimate})
        filled.append(point)
    return filled
