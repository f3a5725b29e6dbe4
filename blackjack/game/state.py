"""Round phase and outcome enumerations."""

from decimal import Decimal
from enum import Enum, auto

from blackjack.rules import RuleSet


class Phase(Enum):
    """
    Round state machine phases.

    Flow: BETTING → PLAYER_TURN → DEALER_TURN → SETTLED → BETTING
    PLAYER_TURN goes straight to SETTLED on a natural or a bust.
    """

    # Waiting for a wager
    BETTING = auto()

    # Player hits, stands or doubles
    PLAYER_TURN = auto()

    # Dealer draws to its policy
    DEALER_TURN = auto()

    # Round resolved, waiting for a new round
    SETTLED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").lower()


class Outcome(Enum):
    """How a round was settled, with its display message."""

    BLACKJACK = "Blackjack! You win!"
    PLAYER_BUST = "Bust! Dealer wins"
    DEALER_BUST = "Dealer bust! You win!"
    WIN = "You win!"
    LOSE = "Dealer wins"
    PUSH = "Push"

    @property
    def message(self) -> str:
        return self.value

    @property
    def is_player_win(self) -> bool:
        return self in (Outcome.BLACKJACK, Outcome.DEALER_BUST, Outcome.WIN)

    def credit(self, wager: Decimal, rules: RuleSet) -> Decimal:
        """Amount returned to the balance for ``wager`` under ``rules``."""
        if self == Outcome.BLACKJACK:
            return wager * rules.blackjack_return
        if self.is_player_win:
            return wager * rules.win_return
        if self == Outcome.PUSH:
            return wager * rules.push_return
        return Decimal("0")
