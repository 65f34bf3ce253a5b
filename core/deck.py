"""Deck builder - composable options applied to a canonical 52-card deck."""

from random import Random
from typing import Callable

from core.cards import STANDARD_SUITS, Card, Deck, Rank, Suit

DeckOption = Callable[[list[Card]], list[Card]]

# Process-wide shuffle source, seeded from system entropy at import.
_shuffle_rng = Random()


def standard_cards() -> list[Card]:
    """Return the 52 standard cards, suit-major and rank-ascending."""
    return [Card(rank, suit) for suit in STANDARD_SUITS for rank in Rank]


def new_deck(*options: DeckOption) -> Deck:
    """
    Build a deck from the canonical 52 cards.

    Options are applied in the order given, each receiving the output of
    the previous one, so ``new_deck(with_decks(3), shuffle())`` shuffles
    all 156 cards together while ``new_deck(shuffle(), with_decks(3))``
    repeats one shuffled order three times.
    """
    cards = standard_cards()
    for option in options:
        cards = option(cards)
    return Deck(tuple(cards))


def with_decks(n: int) -> DeckOption:
    """Concatenate n copies of the incoming cards."""
    if n < 1:
        raise ValueError("Deck must contain at least 1 pack")

    def _apply(cards: list[Card]) -> list[Card]:
        return [card for _ in range(n) for card in cards]

    return _apply


def shuffle(rng: Random | None = None) -> DeckOption:
    """
    Return a uniformly random permutation of the incoming cards.

    Args:
        rng: Random source; defaults to the process-wide one. Pass a seeded
            Random for reproducible orders.
    """

    def _apply(cards: list[Card]) -> list[Card]:
        shuffled = list(cards)
        (rng or _shuffle_rng).shuffle(shuffled)
        return shuffled

    return _apply


def add_jokers(n: int) -> DeckOption:
    """Append n jokers, indexed 0..n-1."""
    if n < 0:
        raise ValueError("Joker count cannot be negative")

    def _apply(cards: list[Card]) -> list[Card]:
        return list(cards) + [Card.joker(i) for i in range(n)]

    return _apply


def filter_cards(predicate: Callable[[Card], bool]) -> DeckOption:
    """Remove every card matching predicate, keeping the survivors' order."""

    def _apply(cards: list[Card]) -> list[Card]:
        return [card for card in cards if not predicate(card)]

    return _apply


def sort_cards(key: Callable[[Card], object] | None = None) -> DeckOption:
    """Stable-sort the incoming cards, by suit then rank unless key is given."""

    def _apply(cards: list[Card]) -> list[Card]:
        return sorted(cards, key=key or default_sort_key)  # type: ignore[arg-type]

    return _apply


def default_sort_key(card: Card) -> int:
    """Rank cards by ``suit_index * 13 + rank_index``."""
    return card.sort_key


def is_suit(suit: Suit) -> Callable[[Card], bool]:
    """Predicate matching cards of one suit, for use with filter_cards."""
    return lambda card: card.suit == suit


def is_rank(*ranks: Rank) -> Callable[[Card], bool]:
    """Predicate matching cards of any of the given ranks."""
    return lambda card: not card.is_joker and card.rank in ranks


def shuffled_shoe(num_decks: int = 3, rng: Random | None = None) -> Deck:
    """Build the shuffled multi-deck used at the table."""
    return new_deck(with_decks(num_decks), shuffle(rng))
