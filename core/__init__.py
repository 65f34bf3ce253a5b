"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Deck, Rank, Suit
from core.deck import new_deck
from core.hand import Hand, Outcome

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "new_deck",
    "Hand",
    "Outcome",
]
