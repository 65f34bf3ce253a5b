"""Game API endpoints."""

from decimal import Decimal
from fastapi import APIRouter, Depends
from typing import Annotated

from api.ledger import get_ledger
from api.schemas import (
    BetRequest,
    CardResponse,
    GameStateResponse,
    HandResponse,
    SettlementResponse,
)
from api.session import current_player
from config import config
from core.cards import Card
from core.exceptions import BlackjackError, InvalidTransition
from core.game import engine
from core.game.registry import GameRegistry
from core.game.state import Currency, GameState
from core.hand import Hand, evaluate_hands

router = APIRouter()

# Process-wide registry, handed to endpoints through get_registry
_registry: GameRegistry | None = None


def get_registry() -> GameRegistry:
    """Get or create the game registry."""
    global _registry
    if _registry is None:
        _registry = GameRegistry(num_decks=config.game.num_decks)
    return _registry


Registry = Annotated[GameRegistry, Depends(get_registry)]
PlayerID = Annotated[str, Depends(current_player)]


def _table_key(player_id: str, game_id: str) -> str:
    """Scope a game ID to the player who owns it."""
    return f"{player_id}:{game_id}"


def _card_to_response(card: Card) -> CardResponse:
    """Convert a Card to CardResponse."""
    return CardResponse(
        rank="" if card.is_joker else str(card.rank),
        suit=card.suit.label,
        name=card.name,
        image=card.image_path,
        value=card.value,
    )


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a Hand to HandResponse."""
    return HandResponse(
        cards=[_card_to_response(c) for c in hand.cards],
        score=hand.score,
        is_soft=hand.is_soft,
        is_busted=hand.is_busted,
    )


def _game_state_response(game_id: str, gs: GameState) -> GameStateResponse:
    """
    Convert game state to the player's view.

    Until the hand is over only the dealer's first card is shown, and the
    dealer score covers that card alone.
    """
    dealer_hidden = gs.is_dealt and not gs.is_over
    dealer = Hand(gs.dealer.cards[:1]) if dealer_hidden else gs.dealer

    outcome = None
    if gs.is_over and gs.is_dealt:
        outcome = evaluate_hands(gs.player, gs.dealer).value

    return GameStateResponse(
        game_id=game_id,
        phase=gs.phase.name,
        player_hand=_hand_to_response(gs.player),
        dealer_hand=_hand_to_response(dealer),
        dealer_hidden=dealer_hidden,
        player_score=gs.player.score,
        dealer_score=dealer.score,
        game_over=gs.is_over,
        bet_amount=gs.bet_amount,
        bet_currency=str(gs.bet_currency) if gs.bet_currency else None,
        cards_remaining=len(gs.deck),
        outcome=outcome,
    )


@router.get("/{game_id}")
async def get_game(game_id: str, player_id: PlayerID, registry: Registry) -> GameStateResponse:
    """Get a game's state, starting the game if it does not exist yet."""
    gs = registry.get_or_create(_table_key(player_id, game_id))
    return _game_state_response(game_id, gs)


@router.post("/{game_id}/bet")
async def place_bet(
    game_id: str,
    request: BetRequest,
    player_id: PlayerID,
    registry: Registry,
) -> GameStateResponse:
    """Debit the stake from the player's balance and put it on the table."""
    currency = Currency.parse(request.currency)
    amount = engine.parse_amount(request.amount)

    ledger = await get_ledger()
    await ledger.debit(player_id, currency, amount)
    try:
        gs = registry.apply(
            _table_key(player_id, game_id),
            lambda state: engine.place_bet(state, amount, currency),
        )
    except BlackjackError:
        await ledger.credit(player_id, currency, amount)
        raise

    return _game_state_response(game_id, gs)


@router.post("/{game_id}/deal")
async def deal(game_id: str, player_id: PlayerID, registry: Registry) -> GameStateResponse:
    """Deal a new hand, shuffling a fresh deck first if it is running low."""

    def _deal(state: GameState) -> GameState:
        state = engine.reshuffle_if_low(
            state,
            config.game.reshuffle_threshold,
            num_decks=config.game.num_decks,
        )
        return engine.deal(state)

    registry.evict_idle(config.game.max_idle_seconds)
    gs = registry.apply(_table_key(player_id, game_id), _deal)
    return _game_state_response(game_id, gs)


@router.post("/{game_id}/hit")
async def hit(game_id: str, player_id: PlayerID, registry: Registry) -> GameStateResponse:
    """Draw a card for the player."""
    gs = registry.apply(_table_key(player_id, game_id), engine.hit)
    return _game_state_response(game_id, gs)


@router.post("/{game_id}/stand")
async def stand(game_id: str, player_id: PlayerID, registry: Registry) -> GameStateResponse:
    """Stand; the dealer plays out the hand."""
    gs = registry.apply(_table_key(player_id, game_id), engine.stand)
    return _game_state_response(game_id, gs)


@router.post("/{game_id}/shuffle")
async def shuffle(game_id: str, player_id: PlayerID, registry: Registry) -> GameStateResponse:
    """Replace the game's deck with a freshly shuffled one between hands."""

    def _shuffle(state: GameState) -> GameState:
        if state.is_dealt:
            raise InvalidTransition("Cannot shuffle while cards are on the table")
        return engine.shuffle_new_deck(state, num_decks=config.game.num_decks)

    gs = registry.apply(_table_key(player_id, game_id), _shuffle)
    return _game_state_response(game_id, gs)


@router.post("/{game_id}/settle")
async def settle(game_id: str, player_id: PlayerID, registry: Registry) -> SettlementResponse:
    """Settle a finished hand and pay out winnings."""
    settlement = registry.transact(_table_key(player_id, game_id), engine.settle)

    balance: Decimal | None = None
    if settlement.bet_currency is not None:
        ledger = await get_ledger()
        balance = await ledger.credit(player_id, settlement.bet_currency, settlement.payout)

    return SettlementResponse(
        game_id=game_id,
        outcome=settlement.outcome.value,
        player_hand=_hand_to_response(settlement.player),
        dealer_hand=_hand_to_response(settlement.dealer),
        player_score=settlement.player_score,
        dealer_score=settlement.dealer_score,
        bet_amount=settlement.bet_amount,
        bet_currency=str(settlement.bet_currency) if settlement.bet_currency else None,
        payout=settlement.payout,
        balance=balance,
    )
