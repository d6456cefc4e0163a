from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class TileType(str, Enum):
    WALL = "wall"
    FLOOR = "floor"
    DOOR = "door"
    STAIRS_UP = "stairs_up"
    STAIRS_DOWN = "stairs_down"

    @property
    def walkable(self) -> bool:
        return self is not TileType.WALL

    @property
    def is_stairs(self) -> bool:
        return self in (TileType.STAIRS_UP, TileType.STAIRS_DOWN)


TILE_SYMBOLS = {
    TileType.WALL: "#",
    TileType.FLOOR: ".",
    TileType.DOOR: "+",
    TileType.STAIRS_UP: "<",
    TileType.STAIRS_DOWN: ">",
}


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}


@dataclass
class Tile:
    """One grid cell.

    Occupant fields hold ids that index into the owning floor's maps; the tile
    never owns the mob, item or character itself. ``explored`` only ever goes
    from False to True.
    """

    type: TileType = TileType.WALL
    explored: bool = False
    visible: bool = False
    mob_id: Optional[str] = None
    item_id: Optional[str] = None
    character_id: Optional[str] = None

    @property
    def walkable(self) -> bool:
        return self.type.walkable

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.type.value,
            "explored": self.explored,
            "visible": self.visible,
        }
        if self.character_id is not None:
            out["characterId"] = self.character_id
        if self.mob_id is not None:
            out["mobId"] = self.mob_id
        if self.item_id is not None:
            out["itemId"] = self.item_id
        return out
