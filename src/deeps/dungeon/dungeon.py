from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import DifficultyTable, GenerationSettings
from ..errors import EntityNotFoundError, FloorLevelOutOfRangeError
from ..rng import random_seed
from .factory import generate_floor, validate_level
from .floor import Floor

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Dungeon:
    """
    A multi-floor dungeon instance shared by its players.

    Floors are generated lazily on first access and cached for the lifetime of
    the dungeon. Concurrent first requests for the same level run exactly one
    generation and all receive the same Floor; different levels never wait on
    each other's generation.
    """

    name: str
    total_floors: int
    seed: int = field(default_factory=random_seed)
    difficulty: str = "normal"
    settings: GenerationSettings = field(default_factory=GenerationSettings)
    table: Optional[DifficultyTable] = field(default=None, repr=False)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    players: Dict[str, int] = field(default_factory=dict)
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.monotonic)

    def __post_init__(self) -> None:
        if self.total_floors < 1:
            raise ValueError("total_floors must be >= 1")
        self._floors: Dict[int, Floor] = {}
        self._lock = threading.Lock()
        self._level_locks: Dict[int, threading.Lock] = {}

    # ---- Floors ------------------------------------------------------------
    def get_floor(self, level: int) -> Floor:
        """Return the floor for ``level``, generating it on first request."""
        validate_level(level, self.total_floors)
        self.touch()
        floor = self._floors.get(level)
        if floor is not None:
            return floor

        with self._lock:
            level_lock = self._level_locks.setdefault(level, threading.Lock())
        with level_lock:
            floor = self._floors.get(level)
            if floor is None:
                logger.debug("Dungeon %s: generating floor %d", self.id, level)
                floor = generate_floor(
                    level,
                    self.settings.width,
                    self.settings.height,
                    self.difficulty,
                    self.seed,
                    self.total_floors,
                    settings=self.settings,
                    table=self.table,
                )
                self._floors[level] = floor
        return floor

    def generated_levels(self) -> list[int]:
        return sorted(self._floors)

    # ---- Players -----------------------------------------------------------
    def add_player(self, character_id: str, level: int = 1) -> None:
        validate_level(level, self.total_floors)
        with self._lock:
            self.players[character_id] = level
        self.touch()
        logger.info("Character %s joined dungeon %s on floor %d", character_id, self.id, level)

    def remove_player(self, character_id: str) -> None:
        with self._lock:
            self.players.pop(character_id, None)
        self.touch()

    def set_player_level(self, character_id: str, level: int) -> None:
        if level < 1 or level > self.total_floors:
            raise FloorLevelOutOfRangeError(level, self.total_floors)
        with self._lock:
            if character_id not in self.players:
                raise EntityNotFoundError(f"Character not in dungeon {self.id}: {character_id}")
            self.players[character_id] = level
        self.touch()

    def player_level(self, character_id: str) -> Optional[int]:
        return self.players.get(character_id)

    def has_players(self) -> bool:
        return bool(self.players)

    # ---- Activity ----------------------------------------------------------
    def touch(self) -> None:
        self.last_activity = time.monotonic()

    def is_active(self, max_inactivity: float, now: Optional[float] = None) -> bool:
        """True when the last activity is at most ``max_inactivity`` seconds old."""
        current = time.monotonic() if now is None else now
        return current - self.last_activity <= max_inactivity
