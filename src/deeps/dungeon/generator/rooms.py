from __future__ import annotations

import logging
import random
from typing import List, Sequence

from ...config import PlacementTier
from ...rng import make_id
from ..grid import TileGrid
from ..rooms import Room, RoomType
from ..tiles import TileType

logger = logging.getLogger(__name__)

TREASURE_CHANCE = 0.10
SAFE_CHANCE = 0.05
SHOP_CHANCE = 0.05
SHOP_MIN_LEVEL = 3


def place_rooms(
    grid: TileGrid,
    rng: random.Random,
    max_rooms: int,
    min_size: int,
    max_size: int,
    min_separation: int,
    max_attempts_per_room: int,
) -> List[Room]:
    """Rejection-sample up to ``max_rooms`` non-overlapping rooms and carve them.

    Every slot gets ``max_attempts_per_room`` tries; a slot that never finds a free
    spot is simply skipped, so fewer rooms than requested is a normal outcome.
    Rooms always keep a 1-tile wall border to the grid edge.
    """
    size_cap = min(max_size, grid.width - 2, grid.height - 2)
    if size_cap < min_size:
        logger.debug("Grid %dx%d too small for rooms of size >= %d", grid.width, grid.height, min_size)
        return []

    rooms: List[Room] = []
    for slot in range(max_rooms):
        for _ in range(max_attempts_per_room):
            w = rng.randint(min_size, size_cap)
            h = rng.randint(min_size, size_cap)
            x = rng.randint(1, grid.width - w - 1)
            y = rng.randint(1, grid.height - h - 1)
            candidate = Room(id="", type=RoomType.STANDARD, x=x, y=y, width=w, height=h)
            if any(candidate.intersects(other, padding=min_separation) for other in rooms):
                continue
            candidate.id = make_id(rng)
            grid.carve_room(candidate)
            rooms.append(candidate)
            break
        else:
            logger.debug("Room slot %d gave up after %d attempts", slot, max_attempts_per_room)

    logger.debug("Placed %d/%d rooms (size %d-%d, separation %d)", len(rooms), max_rooms, min_size, size_cap, min_separation)
    return rooms


def place_rooms_with_fallback(
    grid: TileGrid,
    rng: random.Random,
    max_rooms: int,
    tiers: Sequence[PlacementTier],
    min_rooms: int,
) -> List[Room]:
    """Run placement tiers in order until at least ``min_rooms`` rooms fit.

    Each retry starts from a freshly walled grid so no orphaned room from an
    earlier pass survives. A shortfall after the last tier is logged, not raised.
    """
    rooms: List[Room] = []
    for index, tier in enumerate(tiers):
        if index > 0:
            grid.fill(TileType.WALL)
            logger.info("Only %d rooms placed; retrying with relaxed tier %d: %s", len(rooms), index, tier)
        rooms = place_rooms(
            grid,
            rng,
            max_rooms,
            tier.min_size,
            tier.max_size,
            tier.min_separation,
            tier.max_attempts,
        )
        if len(rooms) >= min_rooms:
            return rooms

    logger.warning("Placement shortfall: %d rooms after %d tiers (minimum %d)", len(rooms), len(tiers), min_rooms)
    if not rooms:
        # Ensure at least one open area
        x = max(1, grid.width // 4)
        y = max(1, grid.height // 4)
        center_room = Room(
            id=make_id(rng),
            type=RoomType.STANDARD,
            x=x,
            y=y,
            width=max(1, min(grid.width // 2, grid.width - 1 - x)),
            height=max(1, min(grid.height // 2, grid.height - 1 - y)),
        )
        grid.carve_room(center_room)
        rooms.append(center_room)
    return rooms


def assign_room_types(rooms: List[Room], level: int, total_floors: int, rng: random.Random) -> None:
    """Tag rooms: entrance/safe first room, boss room last on the final floor, random specials."""
    if not rooms:
        return
    final_floor = level >= total_floors
    for index, room in enumerate(rooms):
        if index == 0:
            room.type = RoomType.ENTRANCE if level == 1 else RoomType.SAFE
            room.explored = True
        elif final_floor and index == len(rooms) - 1:
            room.type = RoomType.BOSS
        elif rng.random() < TREASURE_CHANCE:
            room.type = RoomType.TREASURE
        elif rng.random() < SAFE_CHANCE:
            room.type = RoomType.SAFE
        elif level >= SHOP_MIN_LEVEL and rng.random() < SHOP_CHANCE:
            room.type = RoomType.SHOP
        else:
            room.type = RoomType.STANDARD
