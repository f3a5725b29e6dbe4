"""Tests for Card and Deck classes."""

import pytest
from random import Random

from blackjack.cards import Card, Deck, Rank, Suit, create_cards, shuffle_cards
from blackjack.errors import DeckExhaustionError, EmptyDeckError


class FixedIndexRandom:
    """Random stand-in whose randint always picks the low or high bound."""

    def __init__(self, pick_high: bool) -> None:
        self.pick_high = pick_high
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return b if self.pick_high else a


class TestCard:
    """Tests for the Card class."""

    def test_card_creation(self):
        """Test creating a card."""
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES

    def test_card_immutability(self):
        """Test that cards are immutable."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_value(self):
        """Test card blackjack values."""
        assert Card(Rank.TWO, Suit.HEARTS).value == 2
        assert Card(Rank.TEN, Suit.HEARTS).value == 10
        assert Card(Rank.JACK, Suit.HEARTS).value == 10
        assert Card(Rank.QUEEN, Suit.HEARTS).value == 10
        assert Card(Rank.KING, Suit.HEARTS).value == 10
        assert Card(Rank.ACE, Suit.HEARTS).value == 11

    def test_card_from_string(self):
        """Test creating cards from strings."""
        assert Card.from_string("AS") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_string("2H") == Card(Rank.TWO, Suit.HEARTS)
        assert Card.from_string("10d") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("TD") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("KC") == Card(Rank.KING, Suit.CLUBS)
        assert Card.from_string("Q♥") == Card(Rank.QUEEN, Suit.HEARTS)

    def test_card_from_string_rejects_garbage(self):
        """Test invalid card strings."""
        with pytest.raises(ValueError):
            Card.from_string("1S")
        with pytest.raises(ValueError):
            Card.from_string("AX")
        with pytest.raises(ValueError):
            Card.from_string("A")

    def test_card_str(self):
        """Test string representation."""
        assert str(Card(Rank.ACE, Suit.SPADES)) == "A♠"
        assert str(Card(Rank.TEN, Suit.HEARTS)) == "10♥"

    def test_red_suits(self):
        """Test suit colours."""
        assert Suit.HEARTS.is_red
        assert Suit.DIAMONDS.is_red
        assert not Suit.SPADES.is_red
        assert not Suit.CLUBS.is_red

    def test_card_hash(self):
        """Test that cards can be used in sets/dicts."""
        cards = {Card(Rank.ACE, Suit.SPADES), Card(Rank.ACE, Suit.SPADES)}
        assert len(cards) == 1


class TestCreateCards:
    """Tests for fresh deck construction."""

    def test_has_52_unique_cards(self):
        cards = create_cards()
        assert len(cards) == 52
        assert len(set(cards)) == 52

    def test_canonical_order(self):
        """Suit-major, rank-minor, Ace first."""
        cards = create_cards()
        assert cards[0] == Card(Rank.ACE, Suit.SPADES)
        assert cards[1] == Card(Rank.TWO, Suit.SPADES)
        assert cards[12] == Card(Rank.KING, Suit.SPADES)
        assert cards[13] == Card(Rank.ACE, Suit.HEARTS)
        assert cards[-1] == Card(Rank.KING, Suit.CLUBS)

    def test_every_suit_has_every_rank(self):
        cards = set(create_cards())
        for suit in Suit:
            for rank in Rank:
                assert Card(rank, suit) in cards


class TestShuffleCards:
    """Tests for the Fisher-Yates shuffle."""

    def test_shuffle_is_permutation(self, rng):
        cards = create_cards()
        shuffled = shuffle_cards(cards, rng)
        assert sorted(shuffled, key=repr) == sorted(cards, key=repr)
        assert shuffled != cards

    def test_shuffle_does_not_mutate_input(self, rng):
        cards = create_cards()
        before = list(cards)
        shuffle_cards(cards, rng)
        assert cards == before

    def test_swap_sequence_with_low_picks(self):
        """Always picking index 0 rotates the first card to the end."""
        a, b, c, d = (Card.from_string(s) for s in ("AS", "2S", "3S", "4S"))
        stub = FixedIndexRandom(pick_high=False)

        result = shuffle_cards([a, b, c, d], stub)  # type: ignore[arg-type]

        assert result == [b, c, d, a]
        assert stub.calls == [(0, 3), (0, 2), (0, 1)]

    def test_swap_sequence_with_high_picks(self):
        """Always picking index i leaves the order untouched."""
        cards = create_cards()
        result = shuffle_cards(cards, FixedIndexRandom(pick_high=True))  # type: ignore[arg-type]
        assert result == cards

    def test_seeded_shuffle_is_reproducible(self):
        first = shuffle_cards(create_cards(), Random(7))
        second = shuffle_cards(create_cards(), Random(7))
        assert first == second

    def test_shuffle_empty_and_single(self, rng):
        assert shuffle_cards([], rng) == []
        ace = Card(Rank.ACE, Suit.SPADES)
        assert shuffle_cards([ace], rng) == [ace]


class TestDeck:
    """Tests for the Deck class."""

    def test_deck_creation(self):
        """Test creating a new deck in canonical order."""
        deck = Deck()
        assert len(deck) == 52
        assert list(deck) == create_cards()

    def test_fresh_deck_is_shuffled(self, rng):
        deck = Deck.fresh(rng)
        assert len(deck) == 52
        assert set(deck) == set(create_cards())
        assert list(deck) != create_cards()

    def test_draw_takes_from_front(self):
        deck = Deck()
        assert deck.draw() == Card(Rank.ACE, Suit.SPADES)
        assert deck.draw() == Card(Rank.TWO, Suit.SPADES)
        assert deck.cards_remaining == 50

    def test_draw_many(self):
        deck = Deck()
        drawn = deck.draw_many(4)
        assert drawn == create_cards()[:4]
        assert len(deck) == 48
        assert not set(drawn) & set(deck)

    def test_draw_all(self):
        deck = Deck()
        cards = deck.draw_many(52)
        assert len(deck) == 0
        assert len(cards) == 52

    def test_draw_empty_raises(self):
        """Test that drawing from empty deck raises error."""
        deck = Deck(cards=[])
        with pytest.raises(EmptyDeckError):
            deck.draw()

    def test_overdraw_leaves_deck_untouched(self):
        deck = Deck(cards=create_cards()[:3])
        with pytest.raises(DeckExhaustionError) as exc_info:
            deck.draw_many(4)
        assert exc_info.value.requested == 4
        assert exc_info.value.remaining == 3
        assert len(deck) == 3

    def test_negative_draw_rejected(self):
        with pytest.raises(ValueError):
            Deck().draw_many(-1)
