"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from hypothesis import strategies as st

from core.cards import Card, Deck, Rank, Suit
from core.deck import shuffled_shoe
from core.game.registry import GameRegistry
from core.game.state import GameState, Phase
from core.hand import Hand


def make_hand(*cards: str) -> Hand:
    """Build a hand from card strings like 'AS', '10H'."""
    return Hand(tuple(Card.from_string(c) for c in cards))


def stacked_deck(*cards: str) -> Deck:
    """Build a deck whose top cards are exactly the given ones."""
    return Deck(tuple(Card.from_string(c) for c in cards))


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 3-deck table deck."""
    return shuffled_shoe(3, rng)


@pytest.fixture
def fresh_game(shoe):
    """A new game: shuffled deck, player's turn, nothing dealt."""
    return GameState(deck=shoe)


@pytest.fixture
def registry(rng):
    """A registry with reproducible shuffles."""
    return GameRegistry(rng=rng)


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def player_turn_game():
    """A dealt game on the player's turn with a known deck."""
    return GameState(
        deck=stacked_deck("KC", "5D", "9S", "2H", "3C"),
        phase=Phase.PLAYER_TURN,
        player=make_hand("10S", "9H"),
        dealer=make_hand("10D", "6C"),
    )


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random regular card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from([Suit.SPADE, Suit.DIAMOND, Suit.CLUB, Suit.HEART]))
    return Card(rank, suit)


@st.composite
def hand_strategy(draw, min_cards=0, max_cards=8):
    """Generate a random hand."""
    cards = draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
    return Hand(tuple(cards))
