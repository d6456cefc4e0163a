import random

import pytest

from deeps.config import GenerationSettings
from deeps.dungeon.movement import move_character, spawn_character
from deeps.dungeon.tiles import Position
from deeps.entities.mobs import MobType, MobVariant, create_mob
from deeps.errors import EntityNotFoundError, TileOccupiedError


def test_spawn_at_arrival_room_center(room_floor):
    floor = room_floor(width=12, height=8, rooms=((1, 1, 6, 4),))
    result = spawn_character(floor, "hero", radius=2)
    assert result.moved and result.new_pos == Position(4, 3)
    assert floor.characters["hero"] == Position(4, 3)
    assert floor.tile_at(4, 3).character_id == "hero"
    assert floor.tile_at(4, 3).visible and floor.tile_at(4, 3).explored
    assert Position(4, 3) in result.visible

    second = spawn_character(floor, "sidekick", radius=2)
    assert second.new_pos != Position(4, 3)
    assert floor.rooms[0].contains(second.new_pos)

    with pytest.raises(TileOccupiedError):
        spawn_character(floor, "hero")


def test_blocked_by_walls_and_bounds(room_floor):
    floor = room_floor(width=12, height=8, rooms=((1, 1, 6, 4),))
    spawn_character(floor, "hero", radius=2)

    res = move_character(floor, "hero", 0, -3)
    assert res.moved is False and res.reason == "blocked"
    res = move_character(floor, "hero", 0, -10)
    assert res.moved is False and res.reason == "out_of_bounds"
    assert floor.characters["hero"] == Position(4, 3)


def test_mobs_block_movement(room_floor):
    floor = room_floor(width=12, height=8, rooms=((1, 1, 6, 4),))
    spawn_character(floor, "hero", radius=2)
    floor.place_mob(create_mob(MobType.SKELETON, MobVariant.NORMAL, 1, Position(5, 3), random.Random(1)))
    res = move_character(floor, "hero", 1, 0)
    assert res.moved is False and res.reason == "occupied"


def test_move_updates_tiles_and_visibility(room_floor):
    floor = room_floor(width=20, height=8, rooms=((1, 1, 16, 5),))
    spawn_character(floor, "hero", radius=1)
    start = floor.characters["hero"]
    far = Position(start.x + 4, start.y)
    assert not floor.tile_at(far.x, far.y).explored

    for _ in range(4):
        res = move_character(floor, "hero", 1, 0, radius=1)
        assert res.moved
    assert res.new_pos == far
    assert floor.tile_at(start.x, start.y).character_id is None
    assert floor.tile_at(far.x, far.y).character_id == "hero"
    assert floor.tile_at(far.x, far.y).visible
    # Where the hero started is remembered but no longer in view
    assert floor.tile_at(start.x - 1, start.y).explored
    assert not floor.tile_at(start.x - 1, start.y).visible


def test_unknown_character(room_floor):
    floor = room_floor()
    with pytest.raises(EntityNotFoundError):
        move_character(floor, "ghost", 1, 0)


def test_default_radius_follows_configured_vision(room_floor, monkeypatch):
    floor = room_floor(width=20, height=8, rooms=((1, 1, 16, 5),))
    monkeypatch.setenv("DEEPS_VISION_RADIUS", "1")
    result = spawn_character(floor, "hero")
    assert result.new_pos == Position(9, 3)
    assert len(result.visible) == 5

    monkeypatch.setenv("DEEPS_VISION_RADIUS", "3")
    result = move_character(floor, "hero", 1, 0)
    assert len(result.visible) == 29

    result = move_character(floor, "hero", -1, 0, settings=GenerationSettings(vision_radius=2))
    assert len(result.visible) == 13

    result = move_character(floor, "hero", 1, 0, radius=0)
    assert result.visible == {Position(10, 3)}
