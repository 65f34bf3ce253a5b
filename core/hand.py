"""Hand evaluation for blackjack."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from core.cards import Card


class Outcome(Enum):
    """Result of a settled hand, from the player's point of view."""

    PLAYER_BUST = "player_bust"
    DEALER_BUST = "dealer_bust"
    PLAYER_WIN = "player_win"
    DEALER_WIN = "dealer_win"
    PUSH = "push"

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def player_wins(self) -> bool:
        """Check if the player takes the hand."""
        return self in (Outcome.PLAYER_WIN, Outcome.DEALER_BUST)


@dataclass(frozen=True)
class Hand:
    """An immutable blackjack hand; adding a card returns a new hand."""

    cards: tuple[Card, ...] = ()

    def add(self, card: Card) -> "Hand":
        """Return a new hand with card appended."""
        return Hand(self.cards + (card,))

    @property
    def min_score(self) -> int:
        """Score with every ace counted as 1."""
        return sum(card.value for card in self.cards)

    @property
    def score(self) -> int:
        """
        Best blackjack total.

        One ace is promoted from 1 to 11 when that cannot bust the hand;
        otherwise the hard total is returned, even above 21.
        """
        min_score = self.min_score
        if min_score > 11:
            return min_score
        if any(card.is_ace for card in self.cards):
            return min_score + 10
        return min_score

    @property
    def is_soft(self) -> bool:
        """Check if the score counts an ace as 11."""
        return self.score != self.min_score

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (score > 21)."""
        return self.score > 21

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.score == 21

    def dealer_string(self) -> str:
        """Render the hand with only the first card shown."""
        if not self.cards:
            return ""
        return f"{self.cards[0].name}, **HIDDEN**"

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        return ", ".join(card.name for card in self.cards)

    def __repr__(self) -> str:
        return f"Hand({list(self.cards)!r}, score={self.score})"


def score(hand: Hand) -> int:
    """Return the best blackjack total of hand."""
    return hand.score


def evaluate_hands(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Compare player and dealer hands.

    A player bust is checked before a dealer bust, so the player loses
    when both hands are over 21.
    """
    player_score = player_hand.score
    dealer_score = dealer_hand.score

    if player_score > 21:
        return Outcome.PLAYER_BUST
    if dealer_score > 21:
        return Outcome.DEALER_BUST
    if player_score > dealer_score:
        return Outcome.PLAYER_WIN
    if dealer_score > player_score:
        return Outcome.DEALER_WIN
    return Outcome.PUSH
