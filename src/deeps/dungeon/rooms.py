from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from .tiles import Position


class RoomType(str, Enum):
    ENTRANCE = "entrance"
    STANDARD = "standard"
    TREASURE = "treasure"
    BOSS = "boss"
    SAFE = "safe"
    SHOP = "shop"


@dataclass
class Room:
    id: str
    type: RoomType
    x: int
    y: int
    width: int
    height: int
    explored: bool = False

    def right(self) -> int:
        return self.x + self.width

    def bottom(self) -> int:
        return self.y + self.height

    def center(self) -> Position:
        return Position(self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, p: Position) -> bool:
        return (self.x <= p.x < self.right()) and (self.y <= p.y < self.bottom())

    def intersects(self, other: "Room", padding: int = 0) -> bool:
        """Padded-rectangle overlap test; both rectangles grow by ``padding`` on every side."""
        return (
            self.x - padding < other.right() + padding
            and self.right() + padding > other.x - padding
            and self.y - padding < other.bottom() + padding
            and self.bottom() + padding > other.y - padding
        )

    def positions(self) -> List[Position]:
        return [Position(x, y) for y in range(self.y, self.bottom()) for x in range(self.x, self.right())]

    def interior(self) -> List[Position]:
        """Positions excluding the 1-tile room border; the whole room when it is too thin."""
        if self.width < 3 or self.height < 3:
            return self.positions()
        return [
            Position(x, y)
            for y in range(self.y + 1, self.bottom() - 1)
            for x in range(self.x + 1, self.right() - 1)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "explored": self.explored,
        }
