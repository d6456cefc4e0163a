from __future__ import annotations

import logging
from typing import Optional

from ..floor import Floor
from ..rooms import Room
from ..tiles import Position, TileType

logger = logging.getLogger(__name__)


def _stair_spot(floor: Floor, room: Room) -> Optional[Position]:
    """Room center, or the nearest non-stair floor tile of the room when the center is taken."""
    center = room.center()
    candidates = sorted(
        room.positions(),
        key=lambda p: (abs(p.x - center.x) + abs(p.y - center.y), p.y, p.x),
    )
    for p in candidates:
        tile = floor.tile_at(p.x, p.y)
        if tile.walkable and not tile.type.is_stairs:
            return p
    return None


def place_stairs(floor: Floor, level: int, total_floors: int) -> None:
    """Stairs up in the first room (below level 1), stairs down in the last room (above the bottom)."""
    if not floor.rooms:
        logger.warning("Floor %d has no rooms; no stairs placed", level)
        return

    if level > 1:
        spot = _stair_spot(floor, floor.rooms[0])
        if spot is not None:
            floor.set_type(spot.x, spot.y, TileType.STAIRS_UP)
            floor.up_stairs.append(spot)

    if level < total_floors:
        spot = _stair_spot(floor, floor.rooms[-1])
        if spot is None:
            logger.warning("Floor %d: no free tile for stairs down", level)
        else:
            floor.set_type(spot.x, spot.y, TileType.STAIRS_DOWN)
            floor.down_stairs.append(spot)

    logger.debug("Floor %d stairs: up=%s down=%s", level, floor.up_stairs, floor.down_stairs)
