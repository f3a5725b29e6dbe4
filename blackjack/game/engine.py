"""Blackjack round engine with state machine."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from random import Random
from typing import Callable

from transitions import Machine

from blackjack.cards import Card, Deck
from blackjack.dealer import DealerPolicy
from blackjack.errors import (
    InsufficientBalanceError,
    InvalidBetError,
    InvalidTransitionError,
)
from blackjack.game.events import EventEmitter, EventType, GameEvent
from blackjack.game.state import Outcome, Phase
from blackjack.hand import BLACKJACK, Hand
from blackjack.rules import RuleSet

logger = logging.getLogger(__name__)

Amount = Decimal | int | float | str


def _to_amount(value: Amount) -> Decimal:
    """Convert a user-supplied amount to Decimal, NaN for garbage."""
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("NaN")


@dataclass(frozen=True)
class RoundSnapshot:
    """Observable state of a round at one point in time."""

    phase: Phase
    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    player_value: int
    dealer_value: int | None  # None while the hole card is hidden
    hole_card_hidden: bool
    balance: Decimal
    wager: Decimal
    bet_amount: Decimal
    outcome: Outcome | None
    message: str


class RoundEngine:
    """
    Single-player blackjack round engine using a state machine.

    Owns the deck, both hands, the wager and the balance. Every command
    either mutates state and returns a ``RoundSnapshot`` or raises without
    touching state. Nothing here is shared between instances, so each
    player session gets its own engine.
    """

    STATES = [p.name.lower() for p in Phase]

    TRANSITIONS = [
        {"trigger": "start_round", "source": "betting", "dest": "player_turn"},
        # Guard evaluated after every card the player receives; first match wins
        {
            "trigger": "evaluate_hand",
            "source": "player_turn",
            "dest": "settled",
            "conditions": "_player_busted",
            "after": "_settle_bust",
        },
        {
            "trigger": "evaluate_hand",
            "source": "player_turn",
            "dest": "settled",
            "conditions": "_player_has_natural",
            "after": "_settle_blackjack",
        },
        {
            "trigger": "evaluate_hand",
            "source": "player_turn",
            "dest": "dealer_turn",
            "conditions": "_player_must_stand",
            "after": "_play_dealer",
        },
        {"trigger": "stand_hand", "source": "player_turn", "dest": "dealer_turn", "after": "_play_dealer"},
        {"trigger": "settle", "source": "dealer_turn", "dest": "settled", "after": "_settle_showdown"},
        {"trigger": "reset_round", "source": "settled", "dest": "betting"},
    ]

    def __init__(
        self,
        rules: RuleSet | None = None,
        initial_balance: Amount = Decimal("1000"),
        bet_amount: Amount = Decimal("10"),
        rng: Random | None = None,
        deck_factory: Callable[[Random], Deck] = Deck.fresh,
    ) -> None:
        """
        Initialize a new engine in the betting phase.

        Args:
            rules: Table rules (uses defaults if not provided)
            initial_balance: Starting balance
            bet_amount: Default bet offered for the first round
            rng: Random number generator for reproducible shuffles
            deck_factory: Builds the deck for each round from the random source
        """
        self.rules = rules or RuleSet()
        self.dealer_policy = DealerPolicy(stands_on=self.rules.dealer_stands_on)
        self._rng = rng or Random()
        self._deck_factory = deck_factory

        self.balance = _to_amount(initial_balance)
        if not self.balance.is_finite() or self.balance < 0:
            raise ValueError("initial_balance must be a non-negative number")
        self.bet_amount = _to_amount(bet_amount)
        self.wager = Decimal("0")
        self.outcome: Outcome | None = None

        self.deck = Deck(rng=self._rng)
        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.events = EventEmitter()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="betting",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> Phase:
        """Get current round phase as enum."""
        return Phase[self._machine_state.upper()]  # type: ignore[attr-defined]

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # Commands

    def place_bet(self, amount: Amount | None = None) -> RoundSnapshot:
        """
        Commit a wager and deal the opening hands.

        Args:
            amount: Bet amount; the current default bet if omitted

        Raises:
            InvalidBetError: If the amount is not positive or exceeds the balance
            InvalidTransitionError: If not in the betting phase
        """
        self._require(Phase.BETTING, "place a bet")

        stake = self.bet_amount if amount is None else _to_amount(amount)
        if not stake.is_finite() or stake <= 0 or stake > self.balance:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                message="Invalid bet amount",
                amount=str(stake),
                balance=float(self.balance),
            )
            logger.warning("Rejected bet of %s with balance %s", stake, self.balance)
            raise InvalidBetError(stake, self.balance)

        self.events.begin_round()
        self.deck = self._deck_factory(self._rng)
        self.events.emit_new(EventType.DECK_SHUFFLED, cards=len(self.deck))

        self.player_hand.clear()
        self.dealer_hand.clear()
        self.outcome = None

        self.balance -= stake
        self.wager = stake
        self.bet_amount = stake
        self.events.emit_new(EventType.BET_PLACED, amount=float(stake))

        # Deal: player, dealer, player, dealer (face down)
        self._deal_card(self.player_hand)
        self._deal_card(self.dealer_hand)
        self._deal_card(self.player_hand)
        self._deal_card(self.dealer_hand, face_up=False)

        self.start_round()
        self.events.emit_new(EventType.ROUND_STARTED, wager=float(self.wager))
        logger.info("Round started: wager %s, player %s", self.wager, self.player_hand)

        self.evaluate_hand()
        return self.snapshot()

    def hit(self) -> RoundSnapshot:
        """Player takes one more card."""
        self._require(Phase.PLAYER_TURN, "hit")

        self._deal_card(self.player_hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=self.player_hand.value)

        self.evaluate_hand()
        return self.snapshot()

    def stand(self) -> RoundSnapshot:
        """Player keeps the current hand; the dealer plays and the round settles."""
        self._require(Phase.PLAYER_TURN, "stand")

        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.value)
        self.stand_hand()
        return self.snapshot()

    def double_down(self) -> RoundSnapshot:
        """
        Double the wager, take exactly one card, then stand.

        Raises:
            InsufficientBalanceError: If the balance cannot cover a second wager
            InvalidTransitionError: If not in the player's turn or the player
                holds more than two cards
        """
        self._require(Phase.PLAYER_TURN, "double down")
        if not self.player_hand.can_double:
            raise InvalidTransitionError(
                "double down", self.phase, "only allowed on the first two cards"
            )

        if self.balance < self.wager:
            self.events.emit_new(
                EventType.INSUFFICIENT_FUNDS,
                required=float(self.wager),
                available=float(self.balance),
            )
            logger.warning("Rejected double down: need %s, have %s", self.wager, self.balance)
            raise InsufficientBalanceError(self.wager, self.balance)

        self.balance -= self.wager
        self.wager *= 2
        self.player_hand.is_doubled = True

        self._deal_card(self.player_hand)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            hand_value=self.player_hand.value,
            new_wager=float(self.wager),
        )

        self.evaluate_hand()
        return self.snapshot()

    def new_round(self) -> RoundSnapshot:
        """Clear the table and return to betting. Balance and default bet carry over."""
        self._require(Phase.SETTLED, "start a new round")

        self.player_hand.clear()
        self.dealer_hand.clear()
        self.outcome = None
        self.wager = Decimal("0")

        self.reset_round()
        return self.snapshot()

    # Bet sizing, only while betting

    def set_bet(self, amount: Amount) -> RoundSnapshot:
        """Set the default bet. Checked against the balance when placed."""
        self._require(Phase.BETTING, "change the bet")
        value = _to_amount(amount)
        if not value.is_finite() or value <= 0:
            raise InvalidBetError(value, self.balance)
        return self._change_bet(value)

    def halve_bet(self) -> RoundSnapshot:
        """Halve the default bet, never below the table minimum."""
        self._require(Phase.BETTING, "change the bet")
        return self._change_bet(max(self.rules.min_bet, self.bet_amount / 2))

    def double_bet(self) -> RoundSnapshot:
        """Double the default bet, capped at the balance."""
        self._require(Phase.BETTING, "change the bet")
        return self._change_bet(min(self.balance, self.bet_amount * 2))

    def max_bet(self) -> RoundSnapshot:
        """Bet the whole balance."""
        self._require(Phase.BETTING, "change the bet")
        return self._change_bet(self.balance)

    def _change_bet(self, amount: Decimal) -> RoundSnapshot:
        self.bet_amount = amount
        self.events.emit_new(EventType.BET_CHANGED, amount=float(amount))
        return self.snapshot()

    # Queries

    @property
    def player_value(self) -> int:
        return self.player_hand.value

    @property
    def hole_card_hidden(self) -> bool:
        """Check if the dealer's second card is still face down."""
        return self.phase == Phase.PLAYER_TURN and len(self.dealer_hand) == 2

    @property
    def dealer_display_value(self) -> int | None:
        """Dealer's hand value as shown to the player, None while hidden."""
        if self.hole_card_hidden:
            return None
        return self.dealer_hand.value

    @property
    def message(self) -> str:
        """Display text for the last settlement."""
        return self.outcome.message if self.outcome else ""

    @property
    def cards_remaining(self) -> int:
        return self.deck.cards_remaining

    @property
    def can_hit(self) -> bool:
        return self.phase == Phase.PLAYER_TURN

    @property
    def can_stand(self) -> bool:
        return self.phase == Phase.PLAYER_TURN

    @property
    def can_double(self) -> bool:
        """Check if doubling is allowed and affordable."""
        return (
            self.phase == Phase.PLAYER_TURN
            and self.player_hand.can_double
            and self.balance >= self.wager
        )

    @property
    def can_split(self) -> bool:
        """Splitting is not offered at this table."""
        return False

    def snapshot(self) -> RoundSnapshot:
        """Capture the observable state."""
        return RoundSnapshot(
            phase=self.phase,
            player_cards=tuple(self.player_hand.cards),
            dealer_cards=tuple(self.dealer_hand.cards),
            player_value=self.player_value,
            dealer_value=self.dealer_display_value,
            hole_card_hidden=self.hole_card_hidden,
            balance=self.balance,
            wager=self.wager,
            bet_amount=self.bet_amount,
            outcome=self.outcome,
            message=self.message,
        )

    # Internals

    def _require(self, phase: Phase, action: str) -> None:
        if self.phase != phase:
            logger.warning("Rejected '%s' during %s", action, self.phase)
            raise InvalidTransitionError(action, self.phase)

    def _deal_card(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        card = self.deck.draw()
        hand.add_card(card)
        is_dealer = hand is self.dealer_hand
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if is_dealer else "player",
            hand_value=hand.value if face_up or not is_dealer else None,
        )
        return card

    # Transition conditions

    def _player_busted(self) -> bool:
        return self.player_hand.is_busted

    def _player_has_natural(self) -> bool:
        return self.player_hand.is_blackjack

    def _player_must_stand(self) -> bool:
        return self.player_hand.value == BLACKJACK or self.player_hand.is_doubled

    # Transition callbacks

    def _settle_bust(self) -> None:
        self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.value)
        self._finish(Outcome.PLAYER_BUST)

    def _settle_blackjack(self) -> None:
        self.events.emit_new(EventType.PLAYER_BLACKJACK)
        self._reveal_hole_card()
        self._finish(Outcome.BLACKJACK)

    def _play_dealer(self) -> None:
        """Dealer draws to the policy, then the round settles."""
        self._reveal_hole_card()

        for card in self.dealer_policy.play(self.dealer_hand, self.deck):
            self.events.emit_new(
                EventType.DEALER_HITS,
                card=str(card),
                hand_value=self.dealer_hand.value,
            )

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        self.settle()

    def _settle_showdown(self) -> None:
        player_value = self.player_hand.value
        dealer_value = self.dealer_hand.value

        if self.dealer_hand.is_busted:
            outcome = Outcome.DEALER_BUST
        elif player_value > dealer_value:
            outcome = Outcome.WIN
        elif player_value < dealer_value:
            outcome = Outcome.LOSE
        else:
            outcome = Outcome.PUSH

        if outcome.is_player_win:
            self.events.emit_new(EventType.PLAYER_WINS, player=player_value, dealer=dealer_value)
        elif outcome == Outcome.LOSE:
            self.events.emit_new(EventType.PLAYER_LOSES, player=player_value, dealer=dealer_value)
        else:
            self.events.emit_new(EventType.PUSH, player=player_value, dealer=dealer_value)

        self._finish(outcome)

    def _reveal_hole_card(self) -> None:
        if len(self.dealer_hand) >= 2:
            self.events.emit_new(
                EventType.DEALER_REVEALS,
                card=str(self.dealer_hand.cards[1]),
                hand_value=self.dealer_hand.value,
            )

    def _finish(self, outcome: Outcome) -> None:
        """Credit the balance for ``outcome`` and record it."""
        credit = outcome.credit(self.wager, self.rules)
        self.balance += credit
        self.outcome = outcome

        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=outcome.name,
            credit=float(credit),
            result=float(credit - self.wager),
            balance=float(self.balance),
        )
        logger.info(
            "Round settled: %s, wager %s, credit %s, balance %s",
            outcome.name,
            self.wager,
            credit,
            self.balance,
        )
