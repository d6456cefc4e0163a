from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from ..config import DifficultyTable, GenerationSettings
from ..errors import DungeonNotFoundError
from ..rng import random_seed
from .dungeon import Dungeon

logger = logging.getLogger(__name__)


class DungeonRepository:
    """In-memory store of live dungeon instances keyed by id."""

    def __init__(
        self,
        settings: Optional[GenerationSettings] = None,
        table: Optional[DifficultyTable] = None,
    ) -> None:
        self.settings = settings or GenerationSettings()
        self.table = table
        self._dungeons: Dict[str, Dungeon] = {}
        self._lock = threading.RLock()

    def create(
        self,
        name: str,
        total_floors: int,
        seed: Optional[int] = None,
        difficulty: Optional[str] = None,
    ) -> Dungeon:
        dungeon = Dungeon(
            name=name,
            total_floors=total_floors,
            seed=random_seed() if seed is None else seed,
            difficulty=difficulty or self.settings.difficulty,
            settings=self.settings,
            table=self.table,
        )
        with self._lock:
            self._dungeons[dungeon.id] = dungeon
        logger.info("Created dungeon %s (%s): %d floors, seed=%d", dungeon.id, name, total_floors, dungeon.seed)
        return dungeon

    def get(self, dungeon_id: str) -> Dungeon:
        with self._lock:
            dungeon = self._dungeons.get(dungeon_id)
        if dungeon is None:
            raise DungeonNotFoundError(f"dungeon not found: {dungeon_id}")
        return dungeon

    def all(self) -> List[Dungeon]:
        with self._lock:
            return list(self._dungeons.values())

    def delete(self, dungeon_id: str) -> None:
        with self._lock:
            if self._dungeons.pop(dungeon_id, None) is None:
                raise DungeonNotFoundError(f"dungeon not found: {dungeon_id}")
        logger.info("Deleted dungeon %s", dungeon_id)

    def cleanup_inactive(self, max_inactivity: float) -> int:
        """Drop dungeons with no players and no activity for ``max_inactivity`` seconds."""
        with self._lock:
            stale = [
                dungeon_id
                for dungeon_id, dungeon in self._dungeons.items()
                if not dungeon.has_players() and not dungeon.is_active(max_inactivity)
            ]
            for dungeon_id in stale:
                del self._dungeons[dungeon_id]
        if stale:
            logger.info("Cleaned up %d inactive dungeons", len(stale))
        return len(stale)

    def add_player(self, dungeon_id: str, character_id: str, level: int = 1) -> Dungeon:
        with self._lock:
            dungeon = self.get(dungeon_id)
            dungeon.add_player(character_id, level)
        return dungeon

    def remove_player(self, dungeon_id: str, character_id: str) -> None:
        with self._lock:
            self.get(dungeon_id).remove_player(character_id)

    def get_player_dungeon(self, character_id: str) -> Optional[Dungeon]:
        with self._lock:
            for dungeon in self._dungeons.values():
                if character_id in dungeon.players:
                    return dungeon
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._dungeons)
