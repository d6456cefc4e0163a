from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from ..entities.items import Item
from ..entities.mobs import Mob
from ..errors import EntityNotFoundError, NotWalkableError, OutOfBoundsError, TileOccupiedError
from .grid import TileGrid
from .rooms import Room
from .tiles import Position, Tile, TileType

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Floor:
    """
    One generated dungeon level: tiles, rooms, stairs, mobs and items.

    Rooms keep placement order; ``rooms[0]`` is the entrance/safe room the
    player arrives in. After generation the floor is only changed through the
    accessors below (occupants, removal on pickup/death) and the visibility
    engine, all of which hold ``lock``.
    """

    level: int
    grid: TileGrid
    rooms: List[Room] = field(default_factory=list)
    mobs: Dict[str, Mob] = field(default_factory=dict)
    items: Dict[str, Item] = field(default_factory=dict)
    characters: Dict[str, Position] = field(default_factory=dict)
    up_stairs: List[Position] = field(default_factory=list)
    down_stairs: List[Position] = field(default_factory=list)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @classmethod
    def blank(cls, level: int, width: int, height: int) -> "Floor":
        """All-wall floor of the given size."""
        return cls(level=level, grid=TileGrid(width, height))

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    @contextmanager
    def exclusive(self) -> Iterator["Floor"]:
        """Hold the floor lock across a multi-step gameplay action."""
        with self.lock:
            yield self

    # ---- Tiles -------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return self.grid.in_bounds(x, y)

    def tile_at(self, x: int, y: int) -> Tile:
        return self.grid.tile_at(x, y)

    def set_type(self, x: int, y: int, t: TileType) -> bool:
        return self.grid.set_type(x, y, t)

    def is_walkable(self, x: int, y: int) -> bool:
        return self.grid.is_walkable(x, y)

    def is_free(self, p: Position) -> bool:
        """True when a mob or item may be placed at ``p``: walkable, unoccupied, not stairs."""
        if not self.grid.in_bounds(p.x, p.y):
            return False
        tile = self.grid.tile_at(p.x, p.y)
        return tile.walkable and not tile.type.is_stairs and tile.mob_id is None and tile.item_id is None

    # ---- Rooms -------------------------------------------------------------
    @property
    def entrance_room(self) -> Optional[Room]:
        return self.rooms[0] if self.rooms else None

    def room_by_id(self, room_id: str) -> Room:
        for room in self.rooms:
            if room.id == room_id:
                return room
        raise EntityNotFoundError(f"Room not found: {room_id}")

    def room_at(self, p: Position) -> Optional[Room]:
        for room in self.rooms:
            if room.contains(p):
                return room
        return None

    # ---- Mobs --------------------------------------------------------------
    def place_mob(self, mob: Mob) -> None:
        with self.lock:
            tile = self._placement_tile(mob.position)
            if tile.mob_id is not None or tile.item_id is not None or tile.type.is_stairs:
                raise TileOccupiedError(f"Cannot place mob {mob.id} at {mob.position}")
            tile.mob_id = mob.id
            self.mobs[mob.id] = mob

    def remove_mob(self, mob_id: str) -> Mob:
        """Remove a mob (e.g. on death) and clear its tile reference."""
        with self.lock:
            mob = self.mobs.pop(mob_id, None)
            if mob is None:
                raise EntityNotFoundError(f"Mob not found: {mob_id}")
            tile = self.grid.tile_at(mob.position.x, mob.position.y)
            if tile.mob_id == mob_id:
                tile.mob_id = None
            logger.debug("Removed mob %s from floor %d", mob_id, self.level)
            return mob

    def move_mob(self, mob_id: str, target: Position) -> None:
        with self.lock:
            mob = self.mobs.get(mob_id)
            if mob is None:
                raise EntityNotFoundError(f"Mob not found: {mob_id}")
            dest = self._placement_tile(target)
            occupied = dest.mob_id is not None or dest.character_id is not None or dest.item_id is not None
            if occupied or dest.type.is_stairs:
                raise TileOccupiedError(f"Cannot move mob {mob_id} to {target}")
            self.grid.tile_at(mob.position.x, mob.position.y).mob_id = None
            dest.mob_id = mob_id
            mob.position = target

    # ---- Items -------------------------------------------------------------
    def place_item(self, item: Item) -> None:
        with self.lock:
            tile = self._placement_tile(item.position)
            if tile.mob_id is not None or tile.item_id is not None or tile.type.is_stairs:
                raise TileOccupiedError(f"Cannot place item {item.id} at {item.position}")
            tile.item_id = item.id
            self.items[item.id] = item

    def remove_item(self, item_id: str) -> Item:
        """Remove an item (e.g. on pickup) and clear its tile reference."""
        with self.lock:
            item = self.items.pop(item_id, None)
            if item is None:
                raise EntityNotFoundError(f"Item not found: {item_id}")
            tile = self.grid.tile_at(item.position.x, item.position.y)
            if tile.item_id == item_id:
                tile.item_id = None
            logger.debug("Removed item %s from floor %d", item_id, self.level)
            return item

    def item_at(self, p: Position) -> Optional[Item]:
        tile = self.grid.tile_at(p.x, p.y)
        return self.items.get(tile.item_id) if tile.item_id else None

    def mob_at(self, p: Position) -> Optional[Mob]:
        tile = self.grid.tile_at(p.x, p.y)
        return self.mobs.get(tile.mob_id) if tile.mob_id else None

    # ---- Characters --------------------------------------------------------
    def place_character(self, character_id: str, p: Position) -> None:
        with self.lock:
            if character_id in self.characters:
                raise TileOccupiedError(f"Character {character_id} is already on floor {self.level}")
            tile = self._placement_tile(p)
            if tile.character_id is not None or tile.mob_id is not None:
                raise TileOccupiedError(f"Cannot place character {character_id} at {p}")
            tile.character_id = character_id
            self.characters[character_id] = p

    def move_character(self, character_id: str, target: Position) -> None:
        with self.lock:
            current = self.characters.get(character_id)
            if current is None:
                raise EntityNotFoundError(f"Character not on floor {self.level}: {character_id}")
            dest = self._placement_tile(target)
            if dest.character_id is not None or dest.mob_id is not None:
                raise TileOccupiedError(f"Cannot move character {character_id} to {target}")
            self.grid.tile_at(current.x, current.y).character_id = None
            dest.character_id = character_id
            self.characters[character_id] = target

    def remove_character(self, character_id: str) -> Position:
        with self.lock:
            p = self.characters.pop(character_id, None)
            if p is None:
                raise EntityNotFoundError(f"Character not on floor {self.level}: {character_id}")
            tile = self.grid.tile_at(p.x, p.y)
            if tile.character_id == character_id:
                tile.character_id = None
            return p

    def _placement_tile(self, p: Position) -> Tile:
        if not self.grid.in_bounds(p.x, p.y):
            raise OutOfBoundsError(f"Position {p} is outside floor {self.level} ({self.width}x{self.height})")
        tile = self.grid.tile_at(p.x, p.y)
        if not tile.walkable:
            raise NotWalkableError(f"Position {p} on floor {self.level} is not walkable")
        return tile

    # ---- Export ------------------------------------------------------------
    def render_ascii(self) -> List[str]:
        lines = [list(line) for line in self.grid.to_str_lines()]
        for item in self.items.values():
            lines[item.position.y][item.position.x] = item.symbol
        for mob in self.mobs.values():
            lines[mob.position.y][mob.position.x] = "M"
        for p in self.characters.values():
            lines[p.y][p.x] = "@"
        return ["".join(line) for line in lines]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible representation consumed by the networking layer."""
        with self.lock:
            return {
                "level": self.level,
                "width": self.width,
                "height": self.height,
                "tiles": [[tile.to_dict() for tile in row] for row in self.grid.rows()],
                "rooms": [room.to_dict() for room in self.rooms],
                "upStairs": [p.to_dict() for p in self.up_stairs],
                "downStairs": [p.to_dict() for p in self.down_stairs],
                "mobs": {mob_id: mob.to_dict() for mob_id, mob in self.mobs.items()},
                "items": {item_id: item.to_dict() for item_id, item in self.items.items()},
            }
