"""parkzones - Async parking zone synchronization and availability analytics."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("parkzones")
except PackageNotFoundError:
    __version__ = "0+local"
from parkzones._transport import FeedTransport, HttpFeedTransport
from parkzones.analytics import ZoneSummary, classify_availability, summarize
from parkzones.analytics.traffic import TrafficSynthesizer
from parkzones.client import ParkZonesClient
from parkzones.config import ParkZonesConfig
from parkzones.exceptions import (
    FeedUnavailable,
    MalformedItem,
    ParkZonesConfigError,
    ParkZonesError,
    ZoneStoreClosedError,
)
from parkzones.ingestion.address import ParsedAddress, parse_address
from parkzones.models import (
    AvailabilityBand,
    BandHint,
    CategoryTag,
    FeedItem,
    GeoPoint,
    HourBucket,
    IntensityLevel,
    TrafficProfile,
    ZoneRecord,
)
from parkzones.scheduler import RefreshScheduler
from parkzones.state import RefreshResult, RefreshTrigger, SchedulerState, ZoneSnapshot, ZoneStore

__all__ = [
    "__version__",
    "AvailabilityBand",
    "BandHint",
    "CategoryTag",
    "FeedItem",
    "FeedTransport",
    "FeedUnavailable",
    "GeoPoint",
    "HourBucket",
    "HttpFeedTransport",
    "IntensityLevel",
    "MalformedItem",
    "ParkZonesClient",
    "ParkZonesConfig",
    "ParkZonesConfigError",
    "ParkZonesError",
    "ParsedAddress",
    "RefreshResult",
    "RefreshScheduler",
    "RefreshTrigger",
    "SchedulerState",
    "TrafficProfile",
    "TrafficSynthesizer",
    "ZoneRecord",
    "ZoneSnapshot",
    "ZoneStore",
    "ZoneStoreClosedError",
    "ZoneSummary",
    "classify_availability",
    "parse_address",
    "summarize",
]
