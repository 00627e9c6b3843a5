"""Map raw feed items to normalized :class:`ZoneRecord` objects."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from parkzones.analytics.availability import classify_availability
from parkzones.config import ParkZonesConfig
from parkzones.exceptions import MalformedItem
from parkzones.ingestion.address import parse_address
from parkzones.ingestion.normalize import slugify
from parkzones.models.feed import FeedItem
from parkzones.models.zone import AvailabilityBand, BandHint, GeoPoint, ZoneRecord

_logger = logging.getLogger(__name__)


@dataclass
class NormalizedBatch:
    """Result of normalizing one feed response."""

    records: dict[str, ZoneRecord] = field(default_factory=dict)
    skipped: list[MalformedItem] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def _validation_reason(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "item"
    return f"{location}: {first.get('msg', 'invalid')}"


def _coordinates(item: FeedItem) -> GeoPoint | None:
    if item.latitude is None or item.longitude is None:
        return None
    try:
        return GeoPoint(latitude=item.latitude, longitude=item.longitude)
    except ValidationError:
        _logger.debug("Dropping out-of-range coordinates for %r", item.address)
        return None


def zone_id_for(index: int, address: str, config: ParkZonesConfig) -> str:
    if config.id_strategy == "address":
        return slugify(address) or f"zone-{index}"
    return f"zone-{index}"


def build_zone_record(
    raw: Any,
    *,
    index: int,
    config: ParkZonesConfig,
    zone_id: str | None = None,
) -> ZoneRecord:
    """Normalize one feed entry.

    Raises
    ------
    MalformedItem
        If the entry is not an object, misses required fields, or
        carries values that cannot be coerced.
    """
    if not isinstance(raw, Mapping):
        raise MalformedItem(f"feed item {index} is not an object: {type(raw).__name__}", index=index)

    try:
        item = FeedItem.model_validate(dict(raw))
    except ValidationError as exc:
        raise MalformedItem(f"feed item {index} invalid ({_validation_reason(exc)})", index=index) from exc

    try:
        parsed = parse_address(item.address)
    except MalformedItem as exc:
        raise MalformedItem(f"feed item {index}: {exc}", index=index) from exc

    total = item.number_of_spots
    available = total if item.available_places is None else max(0, min(item.available_places, total))
    hint = BandHint.parse(item.zone_type)
    band = classify_availability(total, available, hint, gap_band=AvailabilityBand(config.gap_band))

    try:
        return ZoneRecord(
            id=zone_id or zone_id_for(index, item.address, config),
            address=item.address,
            street=parsed.street,
            number=parsed.number,
            city=parsed.city or config.default_city,
            country=parsed.country or config.default_country,
            total_spots=total,
            available_spots=available,
            coordinates=_coordinates(item),
            band=band,
            band_hint=hint,
            description=f"{parsed.street} - {available}/{total} spots available",
        )
    except ValidationError as exc:
        raise MalformedItem(f"feed item {index} invalid ({_validation_reason(exc)})", index=index) from exc


def normalize_feed(items: Sequence[Any], config: ParkZonesConfig) -> NormalizedBatch:
    """Normalize a whole feed response, skipping entries that cannot be parsed."""
    batch = NormalizedBatch()
    for index, raw in enumerate(items):
        try:
            record = build_zone_record(raw, index=index, config=config)
        except MalformedItem as exc:
            _logger.warning("Skipping malformed feed item: %s", exc)
            batch.skipped.append(exc)
            continue

        # Address-derived ids can collide; keep keys unique in feed order.
        if record.id in batch.records:
            suffix = 2
            while f"{record.id}-{suffix}" in batch.records:
                suffix += 1
            record = record.model_copy(update={"id": f"{record.id}-{suffix}"})
        batch.records[record.id] = record

    return batch
