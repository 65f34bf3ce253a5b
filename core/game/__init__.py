"""Game state, transitions and the game registry."""

from core.game.state import Currency, GameState, Phase, current_hand
from core.game.engine import Settlement
from core.game.registry import GameRegistry

__all__ = [
    "Currency",
    "GameState",
    "Phase",
    "current_hand",
    "Settlement",
    "GameRegistry",
]
