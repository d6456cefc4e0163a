from __future__ import annotations

import logging
from typing import Set

from ..dungeon.floor import Floor
from ..dungeon.tiles import Position

logger = logging.getLogger(__name__)


def recompute_visibility(floor: Floor, viewer: Position, radius: int) -> Set[Position]:
    """
    Recompute per-tile visibility around ``viewer`` and extend the explored memory.

    Every tile's ``visible`` flag is cleared, then each tile in the bounding box
    of ``radius`` passing ``dx*dx + dy*dy <= radius*radius`` becomes visible and
    explored. Walls block nothing: there is no line-of-sight model. ``explored``
    is never cleared here or anywhere else. The room the viewer stands in is
    marked explored as well.

    Returns the set of visible positions.
    """
    if radius < 0:
        raise ValueError("radius must be >= 0")
    if not floor.in_bounds(viewer.x, viewer.y):
        raise ValueError("viewer position out of bounds")

    r2 = radius * radius
    visible: Set[Position] = set()
    with floor.lock:
        for row in floor.grid.rows():
            for tile in row:
                tile.visible = False

        min_x = max(0, viewer.x - radius)
        max_x = min(floor.width - 1, viewer.x + radius)
        min_y = max(0, viewer.y - radius)
        max_y = min(floor.height - 1, viewer.y + radius)
        for y in range(min_y, max_y + 1):
            dy = y - viewer.y
            for x in range(min_x, max_x + 1):
                dx = x - viewer.x
                if dx * dx + dy * dy <= r2:
                    tile = floor.tile_at(x, y)
                    tile.visible = True
                    tile.explored = True
                    visible.add(Position(x, y))

        room = floor.room_at(viewer)
        if room is not None:
            room.explored = True

    logger.debug("Visibility on floor %d from %s radius %d -> %d visible tiles", floor.level, viewer, radius, len(visible))
    return visible
