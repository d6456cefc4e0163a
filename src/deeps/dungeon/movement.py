from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Set

from ..config import GenerationSettings
from ..errors import EntityNotFoundError, NotWalkableError
from ..fov.visibility import recompute_visibility
from .floor import Floor
from .tiles import Position

logger = logging.getLogger(__name__)


@dataclass
class MoveResult:
    new_pos: Position
    moved: bool
    reason: Optional[str] = None
    visible: Set[Position] = field(default_factory=set)


def _can_stand(floor: Floor, p: Position) -> bool:
    tile = floor.tile_at(p.x, p.y)
    return tile.walkable and tile.character_id is None and tile.mob_id is None


def _arrival_spot(floor: Floor) -> Position:
    room = floor.entrance_room
    if room is None:
        raise NotWalkableError(f"Floor {floor.level} has no rooms to arrive in")
    center = room.center()
    candidates = sorted(
        room.positions(),
        key=lambda p: (abs(p.x - center.x) + abs(p.y - center.y), p.y, p.x),
    )
    for p in candidates:
        if _can_stand(floor, p):
            return p
    raise NotWalkableError(f"No free tile in the arrival room of floor {floor.level}")


def _vision_radius(radius: Optional[int], settings: Optional[GenerationSettings]) -> int:
    if radius is not None:
        return radius
    return (settings or GenerationSettings.from_env()).vision_radius


def spawn_character(
    floor: Floor,
    character_id: str,
    radius: Optional[int] = None,
    settings: Optional[GenerationSettings] = None,
) -> MoveResult:
    """Put a character at the arrival room's center (or the nearest free tile) and look around."""
    with floor.exclusive():
        spot = _arrival_spot(floor)
        floor.place_character(character_id, spot)
        visible = recompute_visibility(floor, spot, _vision_radius(radius, settings))
    logger.info("Character %s arrived on floor %d at %s", character_id, floor.level, spot)
    return MoveResult(new_pos=spot, moved=True, visible=visible)


def move_character(
    floor: Floor,
    character_id: str,
    dx: int,
    dy: int,
    radius: Optional[int] = None,
    settings: Optional[GenerationSettings] = None,
) -> MoveResult:
    """
    Attempt to move a character by (dx, dy). Never performs out-of-bounds tile
    access; treats out-of-bounds as non-walkable. Visibility is recomputed
    after every successful move, using ``radius`` or else the configured
    ``vision_radius``.
    """
    with floor.exclusive():
        pos = floor.characters.get(character_id)
        if pos is None:
            raise EntityNotFoundError(f"Character not on floor {floor.level}: {character_id}")
        target = pos.offset(dx, dy)
        if not floor.in_bounds(target.x, target.y):
            return MoveResult(new_pos=pos, moved=False, reason="out_of_bounds")
        if not floor.is_walkable(target.x, target.y):
            return MoveResult(new_pos=pos, moved=False, reason="blocked")
        if not _can_stand(floor, target):
            return MoveResult(new_pos=pos, moved=False, reason="occupied")
        floor.move_character(character_id, target)
        visible = recompute_visibility(floor, target, _vision_radius(radius, settings))
    logger.debug("Character %s moved to %s on floor %d", character_id, target, floor.level)
    return MoveResult(new_pos=target, moved=True, visible=visible)
