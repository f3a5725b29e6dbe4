"""Table rules."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class RuleSet:
    """
    Blackjack table rules configuration.

    Returns are total credits per unit of wager at settlement, stake
    included: a plain win returns 2 (stake plus even money), a natural
    returns 2.5 (stake plus 3:2).
    """

    # Dealer stands on any total at or above this
    dealer_stands_on: int = 17

    win_return: Decimal = Decimal("2")
    blackjack_return: Decimal = Decimal("2.5")
    push_return: Decimal = Decimal("1")

    # Smallest bet the halve button can produce
    min_bet: Decimal = Decimal("1")

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if not 2 <= self.dealer_stands_on <= 21:
            raise ValueError("dealer_stands_on must be between 2 and 21")
        if self.win_return < 1:
            raise ValueError("win_return must be at least 1")
        if self.blackjack_return < self.win_return:
            raise ValueError("blackjack_return must be at least win_return")
        if self.min_bet <= 0:
            raise ValueError("min_bet must be positive")
