"""Pydantic schemas for API requests and responses."""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


class BetRequest(BaseModel):
    """Request to place a bet. Omitting the amount bets the current default."""

    amount: Decimal | None = Field(default=None, description="Bet amount")


class BetSizeRequest(BaseModel):
    """Request to change the default bet between rounds."""

    action: Literal["set", "half", "double", "max"]
    amount: Decimal | None = Field(default=None, description="New default bet")


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "double", "split"]


class CardResponse(BaseModel):
    """Card representation. Rank and suit are withheld while face down."""

    model_config = ConfigDict(from_attributes=True)

    rank: str | None
    suit: str | None
    value: int | None
    face_up: bool = True


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int | None
    is_soft: bool
    is_blackjack: bool
    is_busted: bool


class GameStateResponse(BaseModel):
    """Current round state."""

    state: str
    player_hand: HandResponse
    dealer_hand: HandResponse
    balance: float
    wager: float
    bet_amount: float
    outcome: str | None
    message: str
    can_hit: bool
    can_stand: bool
    can_double: bool
    can_split: bool
