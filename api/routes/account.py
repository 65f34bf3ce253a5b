"""Account API endpoints: sessions and balances."""

from fastapi import APIRouter, Depends
from typing import Annotated

from api.ledger import get_ledger
from api.schemas import BalanceResponse, DepositRequest, SessionResponse
from api.session import create_session_id, current_player
from core.game.state import Currency

router = APIRouter()

PlayerID = Annotated[str, Depends(current_player)]


@router.post("/session")
async def new_session() -> SessionResponse:
    """Create a new signed session token."""
    return SessionResponse(session_id=create_session_id())


@router.get("/balance")
async def get_balance(player_id: PlayerID) -> BalanceResponse:
    """Get the player's balance in every currency."""
    ledger = await get_ledger()
    balances = await ledger.balances(player_id)
    return BalanceResponse(balances={str(c): amount for c, amount in balances.items()})


@router.post("/deposit")
async def deposit(request: DepositRequest, player_id: PlayerID) -> BalanceResponse:
    """Deposit funds in one currency."""
    currency = Currency.parse(request.currency)
    ledger = await get_ledger()
    await ledger.deposit(player_id, currency, request.amount)
    balances = await ledger.balances(player_id)
    return BalanceResponse(balances={str(c): amount for c, amount in balances.items()})
