"""Concurrency-safe table of active games keyed by game ID."""

import logging
import threading
import time
from dataclasses import dataclass, field
from random import Random
from typing import Callable, TypeVar

from core.game.engine import TABLE_DECKS, new_game
from core.game.state import GameState

logger = logging.getLogger(__name__)

T = TypeVar("T")

Transition = Callable[[GameState], GameState]


@dataclass
class _Entry:
    """One game slot; state is only read or replaced while lock is held."""

    state: GameState
    last_used: float
    lock: threading.Lock = field(default_factory=threading.Lock)


class GameRegistry:
    """
    Maps game IDs to game state.

    A registry-wide lock guards the mapping itself and is held only for
    lookups and inserts. Each game has its own lock covering the whole
    read-transition-write of that game, so two requests for one game are
    strictly serialized while unrelated games proceed independently.
    Locks block without timeout; transitions must not do I/O.
    """

    def __init__(
        self,
        rng: Random | None = None,
        num_decks: int = TABLE_DECKS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize an empty registry.

        Args:
            rng: Random source for new games' shuffles
            num_decks: Packs per freshly created deck
            clock: Time source used for idle eviction
        """
        self._rng = rng
        self._num_decks = num_decks
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def _entry(self, game_id: str) -> _Entry:
        """Return the entry for game_id, creating the game if absent."""
        with self._lock:
            entry = self._entries.get(game_id)
            if entry is None:
                entry = _Entry(
                    state=new_game(rng=self._rng, num_decks=self._num_decks),
                    last_used=self._clock(),
                )
                self._entries[game_id] = entry
                logger.info("Created game %s", game_id)
            return entry

    def _acquire(self, game_id: str) -> _Entry:
        """
        Return the live entry for game_id with its lock held.

        An entry evicted or discarded while we waited for its lock is
        dropped and the lookup retried, so writes never land in an entry
        that is no longer registered.
        """
        while True:
            entry = self._entry(game_id)
            entry.lock.acquire()
            with self._lock:
                if self._entries.get(game_id) is entry:
                    return entry
            entry.lock.release()

    def get_or_create(self, game_id: str) -> GameState:
        """Return the game's current state, creating it if needed."""
        entry = self._acquire(game_id)
        try:
            entry.last_used = self._clock()
            return entry.state
        finally:
            entry.lock.release()

    def get(self, game_id: str) -> GameState | None:
        """Return the game's state, or None if it does not exist."""
        with self._lock:
            entry = self._entries.get(game_id)
        if entry is None:
            return None
        with entry.lock:
            return entry.state

    def transact(self, game_id: str, fn: Callable[[GameState], tuple[T, GameState]]) -> T:
        """
        Run fn on the game's state and store the state it returns.

        fn receives the current state and returns ``(result, new_state)``.
        If fn raises, the stored state is left unchanged.
        """
        entry = self._acquire(game_id)
        try:
            result, new_state = fn(entry.state)
            entry.state = new_state
            entry.last_used = self._clock()
            return result
        finally:
            entry.lock.release()

    def apply(self, game_id: str, transition: Transition) -> GameState:
        """Apply transition to the game's state and return the new state."""

        def _step(gs: GameState) -> tuple[GameState, GameState]:
            new_state = transition(gs)
            return new_state, new_state

        return self.transact(game_id, _step)

    def discard(self, game_id: str) -> bool:
        """Remove a game. Returns True if it existed."""
        with self._lock:
            return self._entries.pop(game_id, None) is not None

    def evict_idle(self, max_idle: float) -> int:
        """
        Remove games untouched for more than max_idle seconds.

        Games holding an unsettled bet are kept so the stake is not lost.
        Games whose lock is taken are in use and skipped; the lock is only
        tried, never waited on, while the registry lock is held.
        """
        cutoff = self._clock() - max_idle
        idle: list[str] = []
        with self._lock:
            for gid, entry in list(self._entries.items()):
                if not entry.lock.acquire(blocking=False):
                    continue
                try:
                    if entry.last_used < cutoff and not entry.state.has_bet:
                        del self._entries[gid]
                        idle.append(gid)
                finally:
                    entry.lock.release()
        if idle:
            logger.info("Evicted %d idle game(s)", len(idle))
        return len(idle)

    def __contains__(self, game_id: object) -> bool:
        with self._lock:
            return game_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
