"""Data ingestors for SkySync."""

from .opensky import FeedUnavailableError, OpenSkyFeed, OpenSkyTokenProvider
from .snapshot import SnapshotIngestor, TickResult

__all__ = [
    "FeedUnavailableError",
    "OpenSkyFeed",
    "OpenSkyTokenProvider",
    "SnapshotIngestor",
    "TickResult",
]
