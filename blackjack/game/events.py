"""Events a round engine reports while a hand is played."""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """What happened at the table."""

    ROUND_STARTED = auto()
    ROUND_ENDED = auto()  # data: outcome, credit, result, balance

    BET_PLACED = auto()
    BET_CHANGED = auto()

    DECK_SHUFFLED = auto()
    CARD_DEALT = auto()  # the hole card is reported as "??"

    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_DOUBLE = auto()

    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()

    PLAYER_BLACKJACK = auto()
    PLAYER_BUSTS = auto()
    PLAYER_WINS = auto()
    PLAYER_LOSES = auto()
    PUSH = auto()

    # Rejected commands; state is unchanged
    INVALID_ACTION = auto()
    INSUFFICIENT_FUNDS = auto()


@dataclass(frozen=True)
class GameEvent:
    """A single table event with its payload."""

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


EventHandler = Callable[[GameEvent], None]

# Upper bound on logged events between two deals
ROUND_LOG_LIMIT = 200


class EventEmitter:
    """
    Dispatches game events and keeps a log of the current round.

    Handlers subscribe to one event type, or to every event with None.
    The log is emptied by ``begin_round`` and never holds more than
    ``max_events`` entries, oldest dropped first.
    """

    def __init__(self, max_events: int = ROUND_LOG_LIMIT) -> None:
        self._handlers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._round_log: deque[GameEvent] = deque(maxlen=max_events)

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self._handlers[event_type].append(handler)

    def begin_round(self) -> None:
        """Start a fresh log for a newly dealt round."""
        self._round_log.clear()

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Log an event built from ``data`` and pass it to its subscribers."""
        event = GameEvent(event_type=event_type, data=data)
        self._round_log.append(event)

        for handler in self._handlers[event_type] + self._handlers[None]:
            handler(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Events logged since the current round was dealt."""
        return list(self._round_log)
