"""Blackjack transitions over immutable game state."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from random import Random

from transitions import Machine, MachineError

from core.cards import Deck
from core.deck import shuffled_shoe
from core.exceptions import InvalidBet, InvalidTransition
from core.game.state import Currency, GameState, Phase
from core.hand import Hand, Outcome, evaluate_hands

logger = logging.getLogger(__name__)

# Number of 52-card packs in a freshly shuffled table deck
TABLE_DECKS = 3

PHASES = [p.name.lower() for p in Phase]

PHASE_TRANSITIONS = [
    {"trigger": "deal", "source": "*", "dest": "player_turn"},
    {"trigger": "hit", "source": "player_turn", "dest": "player_turn"},
    {"trigger": "bust", "source": "player_turn", "dest": "hand_over"},
    {"trigger": "stand", "source": "player_turn", "dest": "dealer_turn"},
    {"trigger": "stand", "source": "dealer_turn", "dest": "hand_over"},
    {"trigger": "dealer_done", "source": "dealer_turn", "dest": "hand_over"},
    {"trigger": "settle", "source": "hand_over", "dest": "hand_over"},
]


class _PhaseCursor:
    """Carries one phase through the state machine."""

    def __init__(self, phase: Phase) -> None:
        Machine(
            model=self,
            states=PHASES,
            transitions=PHASE_TRANSITIONS,
            initial=phase.name.lower(),
            auto_transitions=False,
        )

    @property
    def phase(self) -> Phase:
        return Phase[self.state.upper()]  # type: ignore[attr-defined]


def _advance(phase: Phase, trigger: str) -> Phase:
    """Fire trigger from phase and return the resulting phase."""
    cursor = _PhaseCursor(phase)
    try:
        getattr(cursor, trigger)()
    except MachineError as exc:
        raise InvalidTransition(f"Cannot {trigger.replace('_', ' ')} during {phase}") from exc
    return cursor.phase


@dataclass(frozen=True)
class Settlement:
    """Final result of one hand."""

    outcome: Outcome
    player: Hand
    dealer: Hand
    bet_amount: Decimal
    bet_currency: Currency | None
    payout: Decimal

    @property
    def player_score(self) -> int:
        return self.player.score

    @property
    def dealer_score(self) -> int:
        return self.dealer.score


def new_game(rng: Random | None = None, num_decks: int = TABLE_DECKS) -> GameState:
    """Create a game with a freshly shuffled deck and no hands."""
    return GameState(deck=shuffled_shoe(num_decks, rng))


def shuffle_new_deck(
    gs: GameState,
    rng: Random | None = None,
    num_decks: int = TABLE_DECKS,
) -> GameState:
    """Replace the deck with a freshly shuffled one; hands and phase are kept."""
    return gs.evolve(deck=shuffled_shoe(num_decks, rng))


def reshuffle_if_low(
    gs: GameState,
    threshold: int,
    rng: Random | None = None,
    num_decks: int = TABLE_DECKS,
) -> GameState:
    """Shuffle a new deck when fewer than threshold cards remain."""
    if len(gs.deck) >= threshold:
        return gs
    logger.info("Reshuffling: %d card(s) left, threshold %d", len(gs.deck), threshold)
    return shuffle_new_deck(gs, rng=rng, num_decks=num_decks)


def deal(gs: GameState) -> GameState:
    """
    Deal a new hand: two cards each, alternating player and dealer.

    Raises:
        InvalidTransition: If the previous hand is still on the table,
            whether in play or finished but not yet settled.
        DeckExhausted: If fewer than four cards remain. The deck is never
            reshuffled here; callers decide when to shuffle.
    """
    if gs.hand_in_progress:
        raise InvalidTransition("A hand is already in progress")
    if gs.is_dealt:
        raise InvalidTransition("The previous hand must be settled first")

    phase = _advance(gs.phase, "deal")
    cards, deck = gs.deck.draw_many(4)
    player = Hand((cards[0], cards[2]))
    dealer = Hand((cards[1], cards[3]))

    logger.debug(
        "Deal: player=%s dealer=%s remaining=%d", player, dealer, len(deck)
    )
    return gs.evolve(deck=deck, player=player, dealer=dealer, phase=phase)


def hit(gs: GameState) -> GameState:
    """
    Draw one card onto the player's hand.

    A player total over 21 ends the hand immediately; the dealer does
    not play.
    """
    phase = _advance(gs.phase, "hit")
    if not gs.is_dealt:
        raise InvalidTransition("No hand has been dealt")

    card, deck = gs.deck.draw()
    player = gs.player.add(card)
    if player.is_busted:
        phase = _advance(phase, "bust")
    return gs.evolve(deck=deck, player=player, phase=phase)


def stand(gs: GameState) -> GameState:
    """
    Advance the phase by one step.

    Standing on the player's turn hands over to the dealer, who draws to
    17 (hitting a soft 17) before the hand is closed, all in this call.
    """
    if gs.phase == Phase.PLAYER_TURN and not gs.is_dealt:
        raise InvalidTransition("No hand has been dealt")

    phase = _advance(gs.phase, "stand")
    if phase != Phase.DEALER_TURN:
        return gs.evolve(phase=phase)

    dealer, deck = _play_dealer(gs.dealer, gs.deck)
    return gs.evolve(deck=deck, dealer=dealer, phase=_advance(phase, "dealer_done"))


def _dealer_should_hit(hand: Hand) -> bool:
    """Dealer hits below 17 and on a soft 17."""
    value = hand.score
    if value < 17:
        return True
    return value == 17 and hand.min_score != 17


def _play_dealer(dealer: Hand, deck: Deck) -> tuple[Hand, Deck]:
    while _dealer_should_hit(dealer):
        card, deck = deck.draw()
        dealer = dealer.add(card)
    return dealer, deck


def settle(gs: GameState) -> tuple[Settlement, GameState]:
    """
    Score a finished hand, then clear both hands and the bet.

    The deck is kept for the next deal.
    """
    _advance(gs.phase, "settle")
    if not gs.is_dealt:
        raise InvalidTransition("No hand to settle")

    outcome = evaluate_hands(gs.player, gs.dealer)
    settlement = Settlement(
        outcome=outcome,
        player=gs.player,
        dealer=gs.dealer,
        bet_amount=gs.bet_amount,
        bet_currency=gs.bet_currency,
        payout=payout(outcome, gs.bet_amount),
    )
    logger.debug(
        "Settle: %s player=%d dealer=%d payout=%s",
        outcome, settlement.player_score, settlement.dealer_score, settlement.payout,
    )
    cleared = gs.evolve(
        player=Hand(),
        dealer=Hand(),
        bet_amount=Decimal("0"),
        bet_currency=None,
    )
    return settlement, cleared


def payout(outcome: Outcome, bet: Decimal) -> Decimal:
    """Return the amount handed back to the player, stake included."""
    if outcome.player_wins:
        return bet * 2
    if outcome == Outcome.PUSH:
        return bet
    return Decimal("0")


def parse_amount(amount: Decimal | int | float | str) -> Decimal:
    """Convert a bet amount to a finite, non-negative Decimal."""
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidBet(f"Invalid bet amount: {amount!r}") from None
    if not value.is_finite() or value < 0:
        raise InvalidBet(f"Bet amount must be a non-negative number, got {amount!r}")
    return value


def place_bet(
    gs: GameState,
    amount: Decimal | int | float | str,
    currency: Currency | str,
) -> GameState:
    """
    Put a bet on the table for the next deal.

    Bets open only on an empty table: a fresh game or one whose last hand
    has been settled. Balance checks belong to the ledger and must happen
    before this call.
    """
    value = parse_amount(amount)
    resolved = Currency.parse(currency)
    if gs.hand_in_progress:
        raise InvalidTransition("Bets are closed while a hand is in progress")
    if gs.is_dealt:
        raise InvalidTransition("Bets are closed until the last hand is settled")
    if gs.has_bet:
        raise InvalidTransition("A bet is already on the table")
    return gs.evolve(bet_amount=value, bet_currency=resolved)
