"""Events emitted for the presentation layer."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    TICKET_CONFIRMED = "ticket_confirmed"
    ROUND_STARTED = "round_started"
    REVEAL_STEP_COMPLETED = "reveal_step_completed"
    ROUND_SETTLED = "round_settled"
    BONUS_ROUND_STARTED = "bonus_round_started"
    BONUS_ROUND_ENDED = "bonus_round_ended"


@dataclass(frozen=True)
class GameEvent:
    seq: int
    type: EventType
    payload: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[GameEvent], None]


class EventBus:
    """Numbered event buffer plus synchronous in-process listeners."""

    def __init__(self, max_buffered: int = 500) -> None:
        self._buffer: deque[GameEvent] = deque(maxlen=max_buffered)
        self._listeners: list[Listener] = []
        self._seq = 0

    @property
    def last_seq(self) -> int:
        return self._seq

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def emit(self, event_type: EventType, **payload: Any) -> GameEvent:
        self._seq += 1
        event = GameEvent(seq=self._seq, type=event_type, payload=payload)
        self._buffer.append(event)
        logger.debug("Event #%s %s %s", event.seq, event_type.value, payload)
        for listener in list(self._listeners):
            listener(event)
        return event

    def since(self, seq: int = 0) -> list[GameEvent]:
        return [event for event in self._buffer if event.seq > seq]
