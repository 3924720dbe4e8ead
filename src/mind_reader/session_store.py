"""
Game registry.

Owns the lifecycle of live games: create, read, save, evict.
Games idle for longer than the TTL expire on the next read or cleanup.
"""

import time
from typing import Dict, Optional

from mind_reader.models import GameState


class InMemoryGameStore:
    def __init__(self, ttl_seconds: int = 60 * 60):
        self._ttl_seconds = int(ttl_seconds)
        self._games: Dict[str, GameState] = {}
        self._touched: Dict[str, float] = {}

    def _is_expired(self, game_id: str) -> bool:
        if self._ttl_seconds <= 0:
            return False
        return (time.time() - self._touched.get(game_id, 0.0)) > self._ttl_seconds

    def cleanup(self) -> None:
        """Opportunistic cleanup; safe to call frequently."""
        dead = [k for k in self._games if self._is_expired(k)]
        for k in dead:
            self.evict(k)

    def create(self, state: GameState) -> GameState:
        self.cleanup()
        if state.game_id in self._games:
            raise ValueError(f"Game already exists: {state.game_id}")
        self._games[state.game_id] = state
        self._touched[state.game_id] = time.time()
        return state

    def get(self, game_id: str) -> Optional[GameState]:
        state = self._games.get(game_id)
        if state is None:
            return None
        if self._is_expired(game_id):
            self.evict(game_id)
            return None
        return state

    def save(self, state: GameState) -> None:
        self._games[state.game_id] = state
        self._touched[state.game_id] = time.time()

    def evict(self, game_id: str) -> Optional[GameState]:
        self._touched.pop(game_id, None)
        return self._games.pop(game_id, None)

    def __len__(self):
        return len(self._games)
