from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombatEvent:
    """A log event emitted during combat.

    Event types: "move", "attack", "defeat", "round", "end".
    """

    type: str
    message: str
    round: int
    data: Optional[Dict[str, Any]] = None


class CombatLog:
    """In-memory record of what happened in a fight, mirrored to standard logging."""

    def __init__(self) -> None:
        self._events: List[CombatEvent] = []

    def add(self, event_type: str, message: str, round_number: int, **data: Any) -> None:
        ev = CombatEvent(type=event_type, message=message, round=round_number, data=data or None)
        self._events.append(ev)
        if event_type in ("defeat", "end"):
            logger.info(message)
        else:
            logger.debug(message)

    def events(self, event_type: Optional[str] = None) -> List[CombatEvent]:
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e.type == event_type]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
