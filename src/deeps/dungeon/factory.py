from __future__ import annotations

import logging
from typing import Optional

from ..config import DifficultyTable, GenerationSettings, default_difficulty_table
from ..errors import FloorLevelOutOfRangeError
from ..rng import RNGManager, SeedLike
from .floor import Floor
from .generator import (
    assign_room_types,
    connect_rooms,
    place_rooms_with_fallback,
    place_stairs,
    populate_items,
    populate_mobs,
)

logger = logging.getLogger(__name__)

# Smallest side whose fallback room still has two tiles for distinct stairs.
MIN_FLOOR_SIDE = 4


def validate_level(level: int, total_floors: int) -> None:
    if total_floors < 1:
        raise ValueError("total_floors must be >= 1")
    if level < 1 or level > total_floors:
        raise FloorLevelOutOfRangeError(level, total_floors)


def validate_size(width: int, height: int) -> None:
    if width < MIN_FLOOR_SIDE or height < MIN_FLOOR_SIDE:
        raise ValueError(f"floor must be at least {MIN_FLOOR_SIDE}x{MIN_FLOOR_SIDE}, got {width}x{height}")


def generate_floor(
    level: int,
    width: int,
    height: int,
    difficulty: str,
    seed: SeedLike,
    total_floors: int,
    settings: Optional[GenerationSettings] = None,
    table: Optional[DifficultyTable] = None,
) -> Floor:
    """Build one complete floor: rooms, corridors, stairs, mobs and items.

    The stages run in that fixed order against a grid owned by this call. Every
    random decision draws from one RNG derived from ``(seed, "floor", level)``,
    so identical arguments always produce an identical floor and distinct floors
    can be generated concurrently.

    Usage:
      floor = generate_floor(3, 80, 50, "normal", seed=42, total_floors=10)
    """
    validate_level(level, total_floors)
    validate_size(width, height)
    settings = settings or GenerationSettings()
    profile = (table or default_difficulty_table()).resolve(difficulty)
    rng = RNGManager(seed).context_rng("floor", level)

    floor = Floor.blank(level, width, height)
    floor.rooms = place_rooms_with_fallback(
        floor.grid,
        rng,
        settings.max_rooms_for(level),
        settings.placement_tiers,
        settings.min_rooms,
    )
    assign_room_types(floor.rooms, level, total_floors, rng)
    # The arrival room is known territory
    for p in floor.rooms[0].positions():
        floor.tile_at(p.x, p.y).explored = True

    connect_rooms(floor.grid, floor.rooms, rng)
    place_stairs(floor, level, total_floors)
    populate_mobs(floor, level, rng, profile, settings)
    populate_items(floor, level, rng, profile, settings)

    logger.info(
        "Generated floor %d/%d (%dx%d, difficulty=%s): %d rooms, %d mobs, %d items",
        level,
        total_floors,
        width,
        height,
        profile.name,
        len(floor.rooms),
        len(floor.mobs),
        len(floor.items),
    )
    return floor
