"""Display modes for resolved fleet snapshots."""

from __future__ import annotations

from enum import Enum


class PositionMode(str, Enum):
    """Whether a snapshot shows real-time or delayed positions."""

    LIVE = "LIVE"
    DELAYED = "DELAYED"


def mode_for_delay(delay_minutes: float) -> PositionMode:
    return PositionMode.LIVE if delay_minutes == 0 else PositionMode.DELAYED


__all__ = ["PositionMode", "mode_for_delay"]
