"""
Voyage Clock - Presentation-side timing of the river crossing.

The engine is instantaneous: a voyage is launch() followed later by
complete_voyage(). How much later is decided here. Adapters that animate
the crossing ask the clock whether the voyage is due, then complete it.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import time

from ..config import VOYAGE_SECONDS


@dataclass
class VoyageClock:
    """
    Tracks the transit of the current voyage.

    Usage:
        clock = VoyageClock()
        clock.start()
        ...
        if clock.is_due():
            engine.complete_voyage()
            clock.reset()
    """
    duration: float = VOYAGE_SECONDS
    now: Callable[[], float] = time.monotonic
    started_at: float | None = None

    @property
    def running(self) -> bool:
        return self.started_at is not None

    def start(self) -> None:
        self.started_at = self.now()

    def reset(self) -> None:
        self.started_at = None

    def remaining(self) -> float:
        """Seconds until the voyage is due; 0 when due or not running."""
        if self.started_at is None:
            return 0.0
        return max(0.0, self.started_at + self.duration - self.now())

    def is_due(self) -> bool:
        return self.started_at is not None and self.remaining() == 0.0


def format_elapsed(seconds: float) -> str:
    """Format a duration as MM:SS.mmm."""
    millis_total = int(seconds * 1000)
    minutes, rest = divmod(millis_total, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{minutes:02d}:{secs:02d}.{millis:03d}"
