"""Card and Deck - immutable card representations."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from core.exceptions import DeckExhausted


class Suit(Enum):
    """Card suits, in canonical deck order."""

    SPADE = 0
    DIAMOND = 1
    CLUB = 2
    HEART = 3
    JOKER = 4  # wildcard

    def __str__(self) -> str:
        symbols = {
            Suit.SPADE: "♠",
            Suit.DIAMOND: "♦",
            Suit.CLUB: "♣",
            Suit.HEART: "♥",
            Suit.JOKER: "🃏",
        }
        return symbols[self]

    @property
    def label(self) -> str:
        """Return the suit name, e.g. 'Spade'."""
        return self.name.title()


STANDARD_SUITS = (Suit.SPADE, Suit.DIAMOND, Suit.CLUB, Suit.HEART)


class Rank(Enum):
    """Card ranks, Ace low."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def label(self) -> str:
        """Return the rank name, e.g. 'Ace' or 'Seven'."""
        return self.name.title()

    @property
    def image_name(self) -> str:
        """Return the rank part of a card image file name."""
        if 2 <= self.value <= 10:
            return str(self.value)
        return self.name.lower()

    @property
    def blackjack_value(self) -> int:
        """Return the hard point value (Ace = 1, face cards = 10)."""
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


MAX_RANK = Rank.KING.value


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    Regular cards carry a Rank. Jokers carry Suit.JOKER and an integer
    joker index in place of a rank; the index only distinguishes jokers
    from each other and never counts towards a score.
    """

    rank: Rank | int
    suit: Suit

    def __post_init__(self) -> None:
        if self.suit == Suit.JOKER:
            if not isinstance(self.rank, int) or isinstance(self.rank, bool) or self.rank < 0:
                raise ValueError(f"Invalid joker index: {self.rank!r}")
        elif not isinstance(self.rank, Rank):
            raise ValueError(f"Regular cards need a Rank, got {self.rank!r}")

    @classmethod
    def joker(cls, index: int = 0) -> "Card":
        """Create a joker with the given index."""
        return cls(index, Suit.JOKER)

    @property
    def is_joker(self) -> bool:
        """Check if this card is a joker."""
        return self.suit == Suit.JOKER

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return not self.is_joker and self.rank.is_ace  # type: ignore[union-attr]

    @property
    def value(self) -> int:
        """Return the hard blackjack value; jokers are worth nothing."""
        if self.is_joker:
            return 0
        return self.rank.blackjack_value  # type: ignore[union-attr]

    @property
    def rank_index(self) -> int:
        """Return the numeric rank (joker index for jokers)."""
        if self.is_joker:
            return self.rank  # type: ignore[return-value]
        return self.rank.value  # type: ignore[union-attr]

    @property
    def sort_key(self) -> int:
        """Composite ordering key: suit-major, rank-ascending."""
        return self.suit.value * MAX_RANK + self.rank_index

    @property
    def name(self) -> str:
        """Return the display name, e.g. 'Ace of Spades'."""
        if self.is_joker:
            return "Joker"
        return f"{self.rank.label} of {self.suit.label}s"  # type: ignore[union-attr]

    @property
    def image_path(self) -> str:
        """Return the static image path used by the table front end."""
        if self.is_joker:
            return "/static/images/joker.png"
        return f"/static/images/{self.rank.image_name}_of_{self.suit.name.lower()}s.png"  # type: ignore[union-attr]

    def __str__(self) -> str:
        if self.is_joker:
            return str(self.suit)
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        if self.is_joker:
            return f"Card(JOKER, {self.rank})"
        return f"Card({self.rank.name}, {self.suit.name})"  # type: ignore[union-attr]

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
            "A": Rank.ACE,
            "2": Rank.TWO,
            "3": Rank.THREE,
            "4": Rank.FOUR,
            "5": Rank.FIVE,
            "6": Rank.SIX,
            "7": Rank.SEVEN,
            "8": Rank.EIGHT,
            "9": Rank.NINE,
            "10": Rank.TEN,
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
        }

        suit_map = {
            "S": Suit.SPADE,
            "♠": Suit.SPADE,
            "D": Suit.DIAMOND,
            "♦": Suit.DIAMOND,
            "C": Suit.CLUB,
            "♣": Suit.CLUB,
            "H": Suit.HEART,
            "♥": Suit.HEART,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


@dataclass(frozen=True, slots=True)
class Deck:
    """
    Immutable ordered sequence of cards.

    Drawing takes from the front and returns a new Deck for the rest, so
    any earlier reference stays a valid snapshot.
    """

    cards: tuple[Card, ...] = ()

    def draw(self) -> tuple[Card, "Deck"]:
        """Draw the top card, returning it with the remaining deck."""
        if not self.cards:
            raise DeckExhausted(needed=1, remaining=0)
        return self.cards[0], Deck(self.cards[1:])

    def draw_many(self, n: int) -> tuple[tuple[Card, ...], "Deck"]:
        """Draw n cards at once; nothing is drawn if fewer remain."""
        if n > len(self.cards):
            raise DeckExhausted(needed=n, remaining=len(self.cards))
        return self.cards[:n], Deck(self.cards[n:])

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __bool__(self) -> bool:
        return bool(self.cards)
