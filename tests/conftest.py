"""Pytest fixtures for blackjack engine tests."""

import pytest
from decimal import Decimal
from random import Random
from typing import Callable

from blackjack.cards import Card, Deck, Rank, Suit, create_cards
from blackjack.dealer import DealerPolicy
from blackjack.game import RoundEngine
from blackjack.hand import Hand
from blackjack.rules import RuleSet


def stacked_deck_factory(*codes: str) -> Callable[[Random], Deck]:
    """
    Deck factory dealing ``codes`` first, then the rest of a full deck.

    Opening deal order is player, dealer, player, dealer, so codes[0] and
    codes[2] go to the player and codes[1] and codes[3] to the dealer.
    """
    top = [Card.from_string(code) for code in codes]
    rest = [card for card in create_cards() if card not in top]

    def factory(rng: Random) -> Deck:
        return Deck(cards=top + rest, rng=rng)

    return factory


def make_hand(*codes: str) -> Hand:
    """Build a hand from card strings like 'AS', '10H'."""
    return Hand(cards=[Card.from_string(code) for code in codes])


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    return Deck.fresh(rng=rng)


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    hand.add_card(Card(Rank.KING, Suit.CLUBS))
    return hand


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def dealer_policy():
    """Stand-on-17 dealer policy."""
    return DealerPolicy()


@pytest.fixture
def game(rng):
    """A new engine with a seeded shuffle."""
    return RoundEngine(initial_balance=Decimal("1000"), rng=rng)


@pytest.fixture
def stacked_game():
    """Factory for engines whose every round deals the given cards first."""

    def _make(*codes: str, balance: str = "1000", bet: str = "10") -> RoundEngine:
        return RoundEngine(
            initial_balance=Decimal(balance),
            bet_amount=Decimal(bet),
            deck_factory=stacked_deck_factory(*codes),
        )

    return _make
