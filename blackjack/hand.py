"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from blackjack.cards import Card

BLACKJACK = 21


def hand_value(cards: Iterable[Card]) -> int:
    """
    Calculate the best value of a set of cards.

    Aces start at 11 and drop to 1 one at a time while the total is over 21.
    Returns the highest value that doesn't bust, or the lowest bust value.
    """
    total = 0
    aces = 0

    for card in cards:
        total += card.value
        if card.is_ace:
            aces += 1

    while total > BLACKJACK and aces > 0:
        total -= 10
        aces -= 1

    return total


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    cards: list[Card] = field(default_factory=list)
    is_doubled: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()
        self.is_doubled = False

    @property
    def value(self) -> int:
        """Calculate the best hand value."""
        return hand_value(self.cards)

    @property
    def is_soft(self) -> bool:
        """Check if the hand has an ace still counted as 11."""
        if not any(card.is_ace for card in self.cards):
            return False
        total_hard = sum(1 if card.is_ace else card.value for card in self.cards)
        return total_hard + 10 <= BLACKJACK

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == BLACKJACK

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BLACKJACK

    @property
    def can_double(self) -> bool:
        """Check if the hand can be doubled down."""
        return len(self.cards) == 2 and not self.is_doubled

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
