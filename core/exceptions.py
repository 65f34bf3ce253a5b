"""Errors raised by the game core."""

from decimal import Decimal


class BlackjackError(Exception):
    """Base class for game core errors."""


class InvalidTransition(BlackjackError):
    """An operation was attempted outside the phase that allows it."""


class DeckExhausted(BlackjackError):
    """Not enough cards left in the deck to complete a draw."""

    def __init__(self, needed: int = 1, remaining: int = 0) -> None:
        super().__init__(f"Deck exhausted: needed {needed} card(s), {remaining} remaining")
        self.needed = needed
        self.remaining = remaining


class InsufficientFunds(BlackjackError):
    """Bet or debit exceeds the available balance."""

    def __init__(self, currency: str, required: Decimal, available: Decimal) -> None:
        super().__init__(
            f"Insufficient {currency} balance: required {required}, available {available}"
        )
        self.currency = currency
        self.required = required
        self.available = available


class UnknownCurrency(BlackjackError):
    """Currency outside the supported set."""

    def __init__(self, currency: str) -> None:
        super().__init__(f"Unknown currency: {currency!r}")
        self.currency = currency


class InvalidBet(BlackjackError):
    """Bet amount is not a non-negative number."""
