"""
Engine Events - Change notifications for presentation layers.

Renderers subscribe to the engine instead of polling it:
- changed: after every accepted command
- voyage_started: the boat left; the adapter decides when it arrives
- outcome: the game was won or lost
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..logger import get_logger
from .state import Location

logger = get_logger(__name__)

CHANGED = "changed"
VOYAGE_STARTED = "voyage_started"
OUTCOME = "outcome"

CHANNELS = (CHANGED, VOYAGE_STARTED, OUTCOME)


@dataclass(frozen=True)
class Voyage:
    """Payload for a voyage that has left the shore."""
    origin: Location
    target: Location
    passengers: tuple[str, ...]
    trip_number: int


class EngineEvents:
    """Synchronous publish/subscribe registry for engine notifications.

    Channels:
        changed: state snapshot after every accepted mutation.
        voyage_started: a Voyage; the adapter schedules complete_voyage().
        outcome: the Outcome once the game is won or lost.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Callable[..., Any]]] = {}

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe a handler to one of the engine channels."""
        if event not in CHANNELS:
            raise ValueError(f"Unknown engine event: {event}")
        handlers = self._handlers.setdefault(event, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug("Subscribed handler %s to event '%s'", handler, event)

    def unsubscribe(self, event: str, handler: Callable[..., Any]) -> None:
        handlers = self._handlers.get(event)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def clear(self) -> None:
        self._handlers.clear()

    def emit(self, event: str, payload: Any) -> None:
        """Call every handler for the event with the payload, in order."""
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(payload)
            except Exception:
                logger.exception("Error in handler %s for event '%s'", handler, event)
