"""Game API endpoints."""

import logging
import time
from typing import Annotated

from fastapi import APIRouter, HTTPException, Header

from api.schemas import (
    ActionRequest,
    BetRequest,
    BetSizeRequest,
    CardResponse,
    GameStateResponse,
    HandResponse,
)
from api.session import create_session, extract_session_id, get_session, update_session
from blackjack.cards import Card
from blackjack.game import RoundEngine
from blackjack.hand import Hand
from config import config

logger = logging.getLogger(__name__)

router = APIRouter()

# Session data keys
SESSION_KEY_GAME = "game"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"


def _new_engine() -> RoundEngine:
    """Create an engine with the configured table defaults."""
    return RoundEngine(
        initial_balance=config.game.initial_balance,
        bet_amount=config.game.default_bet,
    )


def _card_to_response(card: Card) -> CardResponse:
    return CardResponse(rank=str(card.rank), suit=str(card.suit), value=card.value)


HIDDEN_CARD = CardResponse(rank=None, suit=None, value=None, face_up=False)


def _hand_to_response(hand: Hand, hide_hole_card: bool = False) -> HandResponse:
    """Convert a Hand to HandResponse, optionally masking the second card."""
    cards = [_card_to_response(c) for c in hand.cards]
    if hide_hole_card:
        cards[1] = HIDDEN_CARD
        return HandResponse(
            cards=cards,
            value=None,
            is_soft=False,
            is_blackjack=False,
            is_busted=False,
        )
    return HandResponse(
        cards=cards,
        value=hand.value if hand.cards else 0,
        is_soft=hand.is_soft,
        is_blackjack=hand.is_blackjack,
        is_busted=hand.is_busted,
    )


def _game_state_response(game: RoundEngine) -> GameStateResponse:
    """Convert engine state to response."""
    return GameStateResponse(
        state=game.phase.name,
        player_hand=_hand_to_response(game.player_hand),
        dealer_hand=_hand_to_response(game.dealer_hand, hide_hole_card=game.hole_card_hidden),
        balance=float(game.balance),
        wager=float(game.wager),
        bet_amount=float(game.bet_amount),
        outcome=game.outcome.name if game.outcome else None,
        message=game.message,
        can_hit=game.can_hit,
        can_stand=game.can_stand,
        can_double=game.can_double,
        can_split=game.can_split,
    )


async def _get_game(session_id: str) -> RoundEngine:
    """Look up the engine owned by a session token."""
    if extract_session_id(session_id) is None:
        raise HTTPException(status_code=401, detail="Invalid session")

    session_data = await get_session(session_id)
    if session_data is None:
        raise HTTPException(status_code=401, detail="Unknown or expired session")

    game = session_data.get(SESSION_KEY_GAME)
    if game is None:
        game = _new_engine()
        session_data[SESSION_KEY_GAME] = game

    session_data[SESSION_KEY_LAST_ACTIVITY] = int(time.time())
    await update_session(session_id, session_data)
    return game


@router.post("/new")
async def new_game(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> dict[str, str]:
    """Create a session, or reset the game of an existing one."""
    session_data = None
    if session_id is not None and extract_session_id(session_id) is not None:
        session_data = await get_session(session_id)

    if session_data is None:
        session_id = await create_session()
        session_data = {SESSION_KEY_CREATED_AT: int(time.time())}
        logger.info("Created new game session")

    session_data[SESSION_KEY_GAME] = _new_engine()
    session_data[SESSION_KEY_LAST_ACTIVITY] = int(time.time())
    await update_session(session_id, session_data)

    return {"session_id": session_id}


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    game = await _get_game(session_id)
    return _game_state_response(game)


@router.post("/bet")
async def place_bet(
    request: BetRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Place a bet and deal cards."""
    game = await _get_game(session_id)
    game.place_bet(request.amount)
    return _game_state_response(game)


@router.post("/bet-size")
async def change_bet_size(
    request: BetSizeRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Adjust the default bet before the next deal."""
    game = await _get_game(session_id)

    if request.action == "set":
        if request.amount is None:
            raise HTTPException(status_code=422, detail="Amount required to set the bet")
        game.set_bet(request.amount)
    elif request.action == "half":
        game.halve_bet()
    elif request.action == "double":
        game.double_bet()
    else:
        game.max_bet()

    return _game_state_response(game)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Execute a player action."""
    game = await _get_game(session_id)

    actions = {
        "hit": game.hit,
        "stand": game.stand,
        "double": game.double_down,
    }

    action_fn = actions.get(request.action)
    if action_fn is None:
        raise HTTPException(status_code=400, detail=f"{request.action.title()} is not available")

    action_fn()
    return _game_state_response(game)


@router.post("/next")
async def next_round(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Clear the table for the next round."""
    game = await _get_game(session_id)
    game.new_round()
    return _game_state_response(game)
