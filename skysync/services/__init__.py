"""Position buffering, playback and classification services."""

from .classifier import FleetClassification, classify, is_nearby
from .resolver import TemporalResolver, select_sample, target_time_for
from .sample_store import PositionSampleStore
from .trails import TrailBuilder

__all__ = [
    "FleetClassification",
    "PositionSampleStore",
    "TemporalResolver",
    "TrailBuilder",
    "classify",
    "is_nearby",
    "select_sample",
    "target_time_for",
]
