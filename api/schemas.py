"""Pydantic schemas for API requests and responses."""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


# Game schemas
class BetRequest(BaseModel):
    """Request to place a bet."""

    amount: Decimal = Field(..., ge=0, description="Bet amount")
    currency: str = Field(..., description="Currency to bet in (cash or solana)")


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    name: str
    image: str
    value: int


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    score: int
    is_soft: bool
    is_busted: bool


class GameStateResponse(BaseModel):
    """Current game state as shown to the player."""

    game_id: str
    phase: str
    player_hand: HandResponse
    dealer_hand: HandResponse
    dealer_hidden: bool
    player_score: int
    dealer_score: int
    game_over: bool
    bet_amount: Decimal
    bet_currency: str | None
    cards_remaining: int
    outcome: str | None = None


class SettlementResponse(BaseModel):
    """Result of a settled hand."""

    game_id: str
    outcome: str
    player_hand: HandResponse
    dealer_hand: HandResponse
    player_score: int
    dealer_score: int
    bet_amount: Decimal
    bet_currency: str | None
    payout: Decimal
    balance: Decimal | None


# Account schemas
class SessionResponse(BaseModel):
    """A newly created session."""

    session_id: str


class DepositRequest(BaseModel):
    """Request to deposit funds."""

    currency: str = Field(..., description="Currency to deposit (cash or solana)")
    amount: Decimal = Field(..., gt=0, description="Amount to deposit")


class BalanceResponse(BaseModel):
    """Balances per currency."""

    balances: dict[str, Decimal]
