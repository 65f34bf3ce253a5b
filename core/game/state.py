"""Game phases and the per-game state aggregate."""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum, auto

from core.cards import Deck
from core.exceptions import InvalidTransition, UnknownCurrency
from core.hand import Hand


class Phase(Enum):
    """
    Phases of one blackjack hand.

    Flow: PLAYER_TURN → DEALER_TURN → HAND_OVER, and back to PLAYER_TURN
    only through a fresh deal.
    """

    PLAYER_TURN = auto()
    DEALER_TURN = auto()
    HAND_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid phase transitions
VALID_TRANSITIONS: dict[Phase, list[Phase]] = {
    Phase.PLAYER_TURN: [Phase.PLAYER_TURN, Phase.DEALER_TURN, Phase.HAND_OVER],
    Phase.DEALER_TURN: [Phase.HAND_OVER],
    Phase.HAND_OVER: [Phase.PLAYER_TURN],  # fresh deal only
}


def is_valid_transition(from_phase: Phase, to_phase: Phase) -> bool:
    """
    Check if a phase transition is valid.

    Args:
        from_phase: Current phase
        to_phase: Desired phase

    Returns:
        True if the transition is allowed
    """
    return to_phase in VALID_TRANSITIONS.get(from_phase, [])


class Currency(Enum):
    """Currencies a bet can be placed in."""

    CASH = "cash"
    SOLANA = "solana"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "str | Currency") -> "Currency":
        """Resolve a currency name, raising UnknownCurrency if unsupported."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownCurrency(str(value)) from None


@dataclass(frozen=True)
class GameState:
    """
    Immutable snapshot of one game.

    Transitions in core.game.engine return new GameState values; nothing
    mutates an instance after construction.
    """

    deck: Deck = field(default_factory=Deck)
    phase: Phase = Phase.PLAYER_TURN
    player: Hand = field(default_factory=Hand)
    dealer: Hand = field(default_factory=Hand)
    bet_amount: Decimal = Decimal("0")
    bet_currency: Currency | None = None

    def evolve(self, **changes) -> "GameState":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @property
    def is_dealt(self) -> bool:
        """Check if a hand has been dealt and not yet settled."""
        return bool(self.player.cards)

    @property
    def hand_in_progress(self) -> bool:
        """Check if a dealt hand is still being played."""
        return self.is_dealt and self.phase != Phase.HAND_OVER

    @property
    def is_over(self) -> bool:
        """Check if the current hand has finished."""
        return self.phase == Phase.HAND_OVER

    @property
    def has_bet(self) -> bool:
        """Check if an unsettled bet is on the table."""
        return self.bet_amount > 0

    @property
    def cards_in_play(self) -> int:
        """Return the number of cards held by both hands."""
        return len(self.player) + len(self.dealer)


def current_hand(gs: GameState) -> Hand:
    """
    Return the hand whose turn it is.

    Raises:
        InvalidTransition: When the hand is over and no one is to act.
    """
    if gs.phase == Phase.PLAYER_TURN:
        return gs.player
    if gs.phase == Phase.DEALER_TURN:
        return gs.dealer
    raise InvalidTransition(f"No hand is to act during {gs.phase}")
