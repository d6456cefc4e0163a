import logging
import random

from deeps.config import GenerationSettings, default_difficulty_table
from deeps.dungeon.generator.population import mob_rooms, populate_items, populate_mobs
from deeps.dungeon.rooms import RoomType
from deeps.dungeon.tiles import Position, TileType
from deeps.entities.mobs import MobVariant, mobs_for_level

SETTINGS = GenerationSettings()


def profile(name="normal"):
    return default_difficulty_table().resolve(name)


def test_mobs_avoid_first_safe_and_shop_rooms(room_floor):
    floor = room_floor(width=40, height=20, rooms=((1, 1, 8, 8), (12, 1, 8, 8), (23, 1, 8, 8), (1, 11, 8, 8)))
    floor.rooms[2].type = RoomType.SAFE
    floor.rooms[3].type = RoomType.SHOP
    assert mob_rooms(floor) == [floor.rooms[1]]

    mobs = populate_mobs(floor, 2, random.Random(5), profile(), SETTINGS)
    assert len(mobs) == profile().mob_count(SETTINGS.base_mob_count, 2)
    pool = set(mobs_for_level(2))
    for mob in mobs.values():
        assert mob.position in floor.rooms[1].interior()
        assert mob.type in pool
        assert floor.tile_at(mob.position.x, mob.position.y).mob_id == mob.id
    assert len({m.position for m in mobs.values()}) == len(mobs)


def test_no_eligible_room_places_no_mobs(room_floor, caplog):
    floor = room_floor(width=20, height=20, rooms=((2, 2, 8, 8),))
    with caplog.at_level(logging.WARNING):
        mobs = populate_mobs(floor, 1, random.Random(0), profile(), SETTINGS)
    assert mobs == {}
    assert any("no rooms eligible" in r.getMessage() for r in caplog.records)


def test_boss_room_gets_boss_at_center(room_floor):
    floor = room_floor(width=40, height=20, rooms=((1, 1, 8, 8), (12, 1, 9, 9)))
    floor.rooms[1].type = RoomType.BOSS
    mobs = populate_mobs(floor, 8, random.Random(3), profile("easy"), SETTINGS)
    bosses = [m for m in mobs.values() if m.variant is MobVariant.BOSS]
    assert len(bosses) == 1
    assert bosses[0].position == floor.rooms[1].center()
    assert bosses[0].type.value == "dragon"
    assert bosses[0].name.startswith("Boss ")


def test_items_may_use_first_room_and_skip_stairs(room_floor):
    floor = room_floor(width=20, height=20, rooms=((2, 2, 6, 6),))
    floor.set_type(4, 4, TileType.STAIRS_DOWN)
    items = populate_items(floor, 4, random.Random(2), profile(), SETTINGS)
    assert len(items) == profile().item_count(SETTINGS.base_item_count, 4)
    for item in items.values():
        assert item.position in floor.rooms[0].interior()
        assert item.position != Position(4, 4)


def test_collisions_skip_after_bounded_retries(room_floor, caplog):
    # A 3x3 room has a single interior tile
    floor = room_floor(width=10, height=10, rooms=((1, 1, 3, 3),))
    with caplog.at_level(logging.WARNING):
        items = populate_items(floor, 1, random.Random(0), profile(), SETTINGS)
    assert len(items) == 1
    assert next(iter(items.values())).position == Position(2, 2)
    assert any("skipped 1 of 2 items" in r.getMessage() for r in caplog.records)


def test_treasure_rooms_attract_items(room_floor):
    floor = room_floor(width=40, height=20, rooms=((1, 1, 8, 8), (12, 1, 8, 8)))
    floor.rooms[1].type = RoomType.TREASURE
    settings = GenerationSettings(base_item_count=30)
    items = populate_items(floor, 1, random.Random(8), profile(), settings)
    in_treasure = sum(1 for i in items.values() if floor.rooms[1].contains(i.position))
    assert in_treasure > len(items) / 2


def test_variant_distribution_follows_difficulty(room_floor):
    floor = room_floor(width=40, height=40, rooms=((1, 1, 4, 4), (8, 1, 30, 30)))
    settings = GenerationSettings(base_mob_count=150)
    easy = populate_mobs(floor, 1, random.Random(1), profile("easy"), settings)
    assert {m.variant for m in easy.values()} <= {MobVariant.EASY, MobVariant.NORMAL}

    floor = room_floor(width=40, height=40, rooms=((1, 1, 4, 4), (8, 1, 30, 30)))
    hard = populate_mobs(floor, 1, random.Random(1), profile("hard"), settings)
    assert any(m.variant in (MobVariant.HARD, MobVariant.ELITE, MobVariant.BOSS) for m in hard.values())
