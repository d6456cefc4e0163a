from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Sequence

from ...config import VARIANT_NAMES, DifficultyProfile, GenerationSettings
from ...entities.items import Item, create_random_item
from ...entities.mobs import Mob, MobVariant, boss_type_for_level, create_mob, mobs_for_level
from ..floor import Floor
from ..rooms import Room, RoomType
from ..tiles import Position

logger = logging.getLogger(__name__)

MOB_FREE_ROOM_TYPES = (RoomType.SAFE, RoomType.SHOP, RoomType.ENTRANCE)
TREASURE_ITEM_WEIGHT = 3


def _free_spot(floor: Floor, candidates: Sequence[Position], rng: random.Random, retries: int) -> Optional[Position]:
    """Re-roll a random candidate up to ``retries`` times until one is free."""
    if not candidates:
        return None
    for _ in range(retries):
        p = rng.choice(candidates)
        if floor.is_free(p):
            return p
    return None


def _roll_variant(profile: DifficultyProfile, rng: random.Random) -> MobVariant:
    names = [name for name in VARIANT_NAMES if profile.variant_weights.get(name, 0) > 0]
    weights = [profile.variant_weights[name] for name in names]
    return MobVariant(rng.choices(names, weights=weights, k=1)[0])


def mob_rooms(floor: Floor) -> List[Room]:
    """Rooms that may receive regular mobs: never the first room, nor safe/shop rooms."""
    return [room for i, room in enumerate(floor.rooms) if i > 0 and room.type not in MOB_FREE_ROOM_TYPES]


def populate_mobs(
    floor: Floor,
    level: int,
    rng: random.Random,
    profile: DifficultyProfile,
    settings: GenerationSettings,
) -> Dict[str, Mob]:
    """Scatter depth- and difficulty-scaled mobs over the eligible rooms.

    A boss room additionally gets one boss-variant mob near its center. A mob
    whose position cannot be resolved within ``settings.population_retries``
    rolls is skipped.
    """
    placed: Dict[str, Mob] = {}

    for room in floor.rooms:
        if room.type is not RoomType.BOSS:
            continue
        spot = room.center() if floor.is_free(room.center()) else _free_spot(
            floor, room.interior(), rng, settings.population_retries
        )
        if spot is None:
            logger.warning("Floor %d: no free tile for the boss in room %s", level, room.id)
            continue
        boss = create_mob(boss_type_for_level(level), MobVariant.BOSS, level, spot, rng)
        floor.place_mob(boss)
        placed[boss.id] = boss

    target = profile.mob_count(settings.base_mob_count, level)
    rooms = mob_rooms(floor)
    if target and not rooms:
        logger.warning("Floor %d: no rooms eligible for mobs; %d mobs not placed", level, target)
        return placed

    pool = mobs_for_level(level)
    skipped = 0
    for _ in range(target):
        room = rng.choice(rooms)
        mob_type = rng.choice(pool)
        variant = _roll_variant(profile, rng)
        spot = _free_spot(floor, room.interior(), rng, settings.population_retries)
        if spot is None:
            skipped += 1
            continue
        mob = create_mob(mob_type, variant, level, spot, rng)
        floor.place_mob(mob)
        placed[mob.id] = mob

    if skipped:
        logger.warning("Floor %d: skipped %d of %d mobs after %d retries each", level, skipped, target, settings.population_retries)
    logger.debug("Floor %d: placed %d mobs (difficulty=%s)", level, len(placed), profile.name)
    return placed


def populate_items(
    floor: Floor,
    level: int,
    rng: random.Random,
    profile: DifficultyProfile,
    settings: GenerationSettings,
) -> Dict[str, Item]:
    """Scatter items over all rooms, the first room included; treasure rooms are favoured."""
    placed: Dict[str, Item] = {}
    if not floor.rooms:
        return placed

    target = profile.item_count(settings.base_item_count, level)
    weights = [TREASURE_ITEM_WEIGHT if room.type is RoomType.TREASURE else 1 for room in floor.rooms]
    skipped = 0
    for _ in range(target):
        room = rng.choices(floor.rooms, weights=weights, k=1)[0]
        spot = _free_spot(floor, room.interior(), rng, settings.population_retries)
        if spot is None:
            skipped += 1
            continue
        item = create_random_item(level, spot, rng)
        floor.place_item(item)
        placed[item.id] = item

    if skipped:
        logger.warning("Floor %d: skipped %d of %d items after %d retries each", level, skipped, target, settings.population_retries)
    logger.debug("Floor %d: placed %d items", level, len(placed))
    return placed
