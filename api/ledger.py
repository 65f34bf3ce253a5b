"""Per-player balance ledger with Redis backend and in-memory fallback."""

import asyncio
import logging
from abc import ABC, abstractmethod
from decimal import Decimal

import redis.asyncio as redis
from redis.exceptions import RedisError, WatchError

from config import config
from core.exceptions import InsufficientFunds
from core.game.state import Currency

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class Ledger(ABC):
    """Abstract balance ledger; one balance per player and currency."""

    @abstractmethod
    async def balances(self, player_id: str) -> dict[Currency, Decimal]:
        """Get every balance of a player."""
        ...

    @abstractmethod
    async def _adjust(
        self,
        player_id: str,
        currency: Currency,
        delta: Decimal,
    ) -> Decimal:
        """
        Atomically add delta to a balance and return the new balance.

        Must raise InsufficientFunds, without changing anything, when the
        result would be negative.
        """
        ...

    async def balance(self, player_id: str, currency: Currency | str) -> Decimal:
        """Get one balance of a player."""
        balances = await self.balances(player_id)
        return balances[Currency.parse(currency)]

    async def deposit(self, player_id: str, currency: Currency | str, amount: Decimal) -> Decimal:
        """Add funds to a balance."""
        resolved = Currency.parse(currency)
        if amount <= 0:
            raise ValueError("Deposit amount must be positive")
        new_balance = await self._adjust(player_id, resolved, amount)
        logger.info("Deposit: player=%s %s %s -> %s", player_id, amount, resolved, new_balance)
        return new_balance

    async def debit(self, player_id: str, currency: Currency | str, amount: Decimal) -> Decimal:
        """Take funds from a balance, raising InsufficientFunds if short."""
        resolved = Currency.parse(currency)
        if amount == 0:
            return await self.balance(player_id, resolved)
        new_balance = await self._adjust(player_id, resolved, -amount)
        logger.info("Debit: player=%s %s %s -> %s", player_id, amount, resolved, new_balance)
        return new_balance

    async def credit(self, player_id: str, currency: Currency | str, amount: Decimal) -> Decimal:
        """Return funds to a balance (payouts, refunds)."""
        resolved = Currency.parse(currency)
        if amount == 0:
            return await self.balance(player_id, resolved)
        new_balance = await self._adjust(player_id, resolved, amount)
        logger.info("Credit: player=%s %s %s -> %s", player_id, amount, resolved, new_balance)
        return new_balance


class InMemoryLedger(Ledger):
    """In-memory ledger for local development and tests."""

    def __init__(self) -> None:
        self._balances: dict[str, dict[Currency, Decimal]] = {}
        self._lock = asyncio.Lock()

    async def balances(self, player_id: str) -> dict[Currency, Decimal]:
        """Get every balance of a player."""
        stored = self._balances.get(player_id, {})
        return {currency: stored.get(currency, ZERO) for currency in Currency}

    async def _adjust(self, player_id: str, currency: Currency, delta: Decimal) -> Decimal:
        async with self._lock:
            account = self._balances.setdefault(player_id, {})
            current = account.get(currency, ZERO)
            new_balance = current + delta
            if new_balance < 0:
                raise InsufficientFunds(currency.value, -delta, current)
            account[currency] = new_balance
            return new_balance


class RedisLedger(Ledger):
    """Redis-backed ledger; one hash per player, one field per currency."""

    def __init__(self, redis_client: "redis.Redis") -> None:
        self._redis = redis_client
        self._prefix = "blackjack:balance:"

    def _key(self, player_id: str) -> str:
        """Get Redis key for a player's balances."""
        return f"{self._prefix}{player_id}"

    async def balances(self, player_id: str) -> dict[Currency, Decimal]:
        """Get every balance of a player."""
        stored = await self._redis.hgetall(self._key(player_id))
        return {
            currency: Decimal(stored.get(currency.value, "0"))
            for currency in Currency
        }

    async def _adjust(self, player_id: str, currency: Currency, delta: Decimal) -> Decimal:
        key = self._key(player_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    raw = await pipe.hget(key, currency.value)
                    current = Decimal(raw) if raw is not None else ZERO
                    new_balance = current + delta
                    if new_balance < 0:
                        await pipe.unwatch()
                        raise InsufficientFunds(currency.value, -delta, current)
                    pipe.multi()
                    pipe.hset(key, currency.value, str(new_balance))
                    await pipe.execute()
                    return new_balance
                except WatchError:
                    # Balance changed under us; read it again
                    continue


# Global ledger instance
_ledger: Ledger | None = None


async def get_ledger() -> Ledger:
    """Get or create the ledger."""
    global _ledger

    if _ledger is not None:
        return _ledger

    if config.redis.enabled:
        try:
            redis_client = redis.from_url(config.redis.url, decode_responses=True)
            await redis_client.ping()
            _ledger = RedisLedger(redis_client)
            return _ledger
        except (RedisError, OSError) as exc:
            logger.warning("Redis unavailable (%s), using in-memory ledger", exc)

    _ledger = InMemoryLedger()
    return _ledger
