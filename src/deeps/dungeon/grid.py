from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Tuple

from ..errors import OutOfBoundsError
from .rooms import Room
from .tiles import TILE_SYMBOLS, Position, Tile, TileType

logger = logging.getLogger(__name__)


class TileGrid:
    """
    Owned ``width x height`` tile buffer, row-major (``rows[y][x]``).

    All reads are bounds-checked. Type writes made during generation are clipped:
    an out-of-bounds ``set_type`` is logged and ignored, so randomized corridor
    routing can never corrupt memory outside the floor.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 3 or height < 3:
            raise ValueError("Grid must be at least 3x3 to maintain wall borders")
        self.width = width
        self.height = height
        self._rows: List[List[Tile]] = [[Tile() for _ in range(width)] for _ in range(height)]

    # ---- Safety / Bounds -------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Tile:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(f"Tile out of bounds: ({x},{y}) not in [0,{self.width})x[0,{self.height})")
        return self._rows[y][x]

    def set_type(self, x: int, y: int, t: TileType) -> bool:
        if not self.in_bounds(x, y):
            logger.debug("Clipped out-of-bounds tile write at (%d,%d)", x, y)
            return False
        self._rows[y][x].type = t
        return True

    def fill(self, t: TileType = TileType.WALL) -> None:
        """Reset every cell to a fresh tile of type ``t``."""
        self._rows = [[Tile(type=t) for _ in range(self.width)] for _ in range(self.height)]

    # ---- Query -----------------------------------------------------------
    def is_walkable(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self._rows[y][x].walkable

    def neighbors_4(self, x: int, y: int) -> Iterator[Position]:
        # Ordered for deterministic traversal
        for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield Position(nx, ny)

    def rows(self) -> Iterable[List[Tile]]:
        return iter(self._rows)

    def positions_of(self, t: TileType) -> List[Position]:
        return [
            Position(x, y)
            for y, row in enumerate(self._rows)
            for x, tile in enumerate(row)
            if tile.type is t
        ]

    # ---- Carving helpers -------------------------------------------------
    def carve_room(self, room: Room) -> None:
        for yy in range(room.y, room.bottom()):
            for xx in range(room.x, room.right()):
                self.set_type(xx, yy, TileType.FLOOR)

    def carve_h_corridor(self, x1: int, x2: int, y: int) -> None:
        if x2 < x1:
            x1, x2 = x2, x1
        for xx in range(x1, x2 + 1):
            self._carve_corridor_tile(xx, y)

    def carve_v_corridor(self, y1: int, y2: int, x: int) -> None:
        if y2 < y1:
            y1, y2 = y2, y1
        for yy in range(y1, y2 + 1):
            self._carve_corridor_tile(x, yy)

    def _carve_corridor_tile(self, x: int, y: int) -> None:
        # Corridors only open walls; existing room, door and stair tiles keep their type
        if self.in_bounds(x, y) and self._rows[y][x].type is not TileType.WALL:
            return
        self.set_type(x, y, TileType.FLOOR)

    # ---- Export / Compare -----------------------------------------------
    def to_str_lines(self) -> List[str]:
        return ["".join(TILE_SYMBOLS[tile.type] for tile in row) for row in self._rows]

    def snapshot(self) -> Tuple[Tuple[str, ...], ...]:
        """
        Deterministic, hashable snapshot of the tile types for equality tests.
        """
        return tuple(tuple(tile.type.value for tile in row) for row in self._rows)
