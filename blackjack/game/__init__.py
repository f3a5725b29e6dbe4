"""Round engine and state management."""

from blackjack.game.events import GameEvent, EventType
from blackjack.game.state import Outcome, Phase
from blackjack.game.engine import RoundEngine, RoundSnapshot

__all__ = [
    "GameEvent",
    "EventType",
    "Outcome",
    "Phase",
    "RoundEngine",
    "RoundSnapshot",
]
