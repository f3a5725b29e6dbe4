"""Card and Deck classes - immutable cards, single-deck dealing."""

from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterator, Sequence

from blackjack.errors import EmptyDeckError


class Suit(Enum):
    """Card suits, in canonical deck order."""

    SPADES = auto()
    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.SPADES: "♠",
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
        }
        return symbols[self]

    @property
    def is_red(self) -> bool:
        """Check if this suit is printed in red."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """Card ranks, in canonical deck order (Ace first)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self.value <= 10:
            return self.value
        return 10  # Face cards

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', '10h'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {str(rank): rank for rank in Rank}
        rank_map["T"] = Rank.TEN

        suit_map = {
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def create_cards() -> list[Card]:
    """Return the 52 cards in suit-major, rank-minor order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def shuffle_cards(cards: Sequence[Card], rng: Random | None = None) -> list[Card]:
    """
    Return a shuffled copy of ``cards``.

    Fisher-Yates: walking down from the last index, swap each position with a
    uniformly chosen index at or below it. The input sequence is not touched.

    Args:
        cards: Cards to shuffle
        rng: Random source (a fresh ``Random()`` if omitted)

    Returns:
        A new list holding the same cards in random order
    """
    rng = rng or Random()
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


class Deck:
    """A single 52-card deck dealt from the front."""

    def __init__(
        self,
        cards: Sequence[Card] | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a deck.

        Args:
            cards: Explicit card order (top of deck first); a full ordered
                deck if omitted
            rng: Random number generator for shuffling
        """
        self._rng = rng or Random()
        self._cards: list[Card] = list(cards) if cards is not None else create_cards()

    @classmethod
    def fresh(cls, rng: Random | None = None) -> "Deck":
        """Build a full deck and shuffle it."""
        deck = cls(rng=rng)
        deck.shuffle()
        return deck

    def shuffle(self) -> None:
        """Shuffle the remaining cards."""
        self._cards = shuffle_cards(self._cards, self._rng)

    def draw(self) -> Card:
        """Draw the top card."""
        return self.draw_many(1)[0]

    def draw_many(self, n: int) -> list[Card]:
        """
        Remove and return the first ``n`` cards.

        Raises:
            EmptyDeckError: If fewer than ``n`` cards remain. Nothing is
                removed in that case.
        """
        if n < 0:
            raise ValueError("Cannot draw a negative number of cards")
        if n > len(self._cards):
            raise EmptyDeckError(requested=n, remaining=len(self._cards))
        drawn = self._cards[:n]
        del self._cards[:n]
        return drawn

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)
