"""Dealer drawing policy."""

from blackjack.cards import Card, Deck
from blackjack.hand import Hand

DEALER_STANDS_ON = 17


class DealerPolicy:
    """
    Fixed house policy: draw below the threshold, stand on everything else.

    Soft totals get no special treatment, so a soft 17 stands.
    """

    def __init__(self, stands_on: int = DEALER_STANDS_ON) -> None:
        self.stands_on = stands_on

    def should_draw(self, value: int) -> bool:
        """Return True while the dealer must take another card."""
        return value < self.stands_on

    def play(self, hand: Hand, deck: Deck) -> list[Card]:
        """
        Draw cards into ``hand`` until the policy says stand.

        An exhausted deck raises ``DeckExhaustionError`` out of this loop.

        Returns:
            The cards drawn, in order
        """
        drawn: list[Card] = []
        while self.should_draw(hand.value):
            card = deck.draw()
            hand.add_card(card)
            drawn.append(card)
        return drawn
