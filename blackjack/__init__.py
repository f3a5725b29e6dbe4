"""Single-deck blackjack engine - 100% UI-agnostic."""

from blackjack.cards import Card, Deck, Rank, Suit, create_cards, shuffle_cards
from blackjack.dealer import DealerPolicy
from blackjack.errors import (
    BlackjackError,
    DeckExhaustionError,
    EmptyDeckError,
    InsufficientBalanceError,
    InvalidBetError,
    InvalidTransitionError,
)
from blackjack.hand import Hand, hand_value
from blackjack.rules import RuleSet

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "create_cards",
    "shuffle_cards",
    "DealerPolicy",
    "Hand",
    "hand_value",
    "RuleSet",
    "BlackjackError",
    "DeckExhaustionError",
    "EmptyDeckError",
    "InsufficientBalanceError",
    "InvalidBetError",
    "InvalidTransitionError",
]
