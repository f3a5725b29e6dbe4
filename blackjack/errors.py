"""Exceptions raised by the blackjack engine."""

from decimal import Decimal


class BlackjackError(Exception):
    """Base class for engine errors. ``str(error)`` is the display message."""


class InvalidBetError(BlackjackError):
    """Bet is not positive or exceeds the balance."""

    def __init__(self, amount: Decimal, balance: Decimal) -> None:
        super().__init__("Invalid bet amount")
        self.amount = amount
        self.balance = balance


class InsufficientBalanceError(BlackjackError):
    """Balance cannot cover the additional stake of a double down."""

    def __init__(self, required: Decimal, available: Decimal) -> None:
        super().__init__("Insufficient balance")
        self.required = required
        self.available = available


class InvalidTransitionError(BlackjackError):
    """A command was issued outside the phase that allows it."""

    def __init__(self, action: str, phase: object, reason: str | None = None) -> None:
        message = f"Cannot {action} during {phase}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.action = action
        self.phase = phase


class DeckExhaustionError(BlackjackError):
    """The deck ran out of cards in the middle of a round."""


class EmptyDeckError(DeckExhaustionError):
    """More cards were requested than the deck holds."""

    def __init__(self, requested: int, remaining: int) -> None:
        super().__init__(
            f"Cannot draw {requested} card(s) from a deck with {remaining} left"
        )
        self.requested = requested
        self.remaining = remaining
