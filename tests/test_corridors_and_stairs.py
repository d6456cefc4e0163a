import random

from deeps.dungeon.generator.corridors import carve_l_corridor, connect_rooms
from deeps.dungeon.generator.stairs import place_stairs
from deeps.dungeon.pathfinding import reachable_from, walkable_regions
from deeps.dungeon.tiles import Position, TileType

FOUR_ROOMS = ((2, 2, 5, 4), (20, 3, 6, 5), (6, 14, 4, 4), (22, 15, 5, 3))


def test_l_corridor_joins_centers(room_floor):
    floor = room_floor(width=30, height=20, rooms=FOUR_ROOMS[:2])
    a, b = floor.rooms
    carve_l_corridor(floor.grid, a, b, random.Random(0))
    assert b.center() in reachable_from(floor.grid, a.center())


def test_chain_plus_extra_links(room_floor):
    floor = room_floor(width=30, height=20, rooms=FOUR_ROOMS)
    assert walkable_regions(floor.grid) == 4
    links = connect_rooms(floor.grid, floor.rooms, random.Random(4))
    # Chain first, then len // 3 + 1 extra links between distinct rooms
    assert links[:3] == [(0, 1), (1, 2), (2, 3)]
    assert len(links) == 3 + 2
    assert all(a != b for a, b in links)
    assert walkable_regions(floor.grid) == 1
    reached = reachable_from(floor.grid, floor.rooms[0].center())
    for room in floor.rooms:
        assert set(room.positions()) <= reached


def test_two_rooms_get_no_extra_links(room_floor):
    floor = room_floor(width=30, height=20, rooms=FOUR_ROOMS[:2])
    assert connect_rooms(floor.grid, floor.rooms, random.Random(1)) == [(0, 1)]
    assert connect_rooms(floor.grid, floor.rooms[:1], random.Random(1)) == []


def test_corridor_borders_stay_wall(room_floor):
    floor = room_floor(width=30, height=20, rooms=FOUR_ROOMS)
    connect_rooms(floor.grid, floor.rooms, random.Random(9))
    lines = floor.grid.to_str_lines()
    assert set(lines[0]) == {"#"} and set(lines[-1]) == {"#"}
    assert all(line[0] == "#" and line[-1] == "#" for line in lines)


def test_stairs_policy_by_level(room_floor):
    top = room_floor(width=30, height=20, rooms=FOUR_ROOMS, level=1)
    place_stairs(top, 1, 5)
    assert top.up_stairs == []
    assert top.down_stairs == [top.rooms[-1].center()]
    assert top.tile_at(*_xy(top.rooms[-1].center())).type is TileType.STAIRS_DOWN

    middle = room_floor(width=30, height=20, rooms=FOUR_ROOMS, level=3)
    place_stairs(middle, 3, 5)
    assert middle.up_stairs == [middle.rooms[0].center()]
    assert middle.down_stairs == [middle.rooms[-1].center()]

    bottom = room_floor(width=30, height=20, rooms=FOUR_ROOMS, level=5)
    place_stairs(bottom, 5, 5)
    assert len(bottom.up_stairs) == 1
    assert bottom.down_stairs == []

    only = room_floor(width=30, height=20, rooms=FOUR_ROOMS, level=1)
    place_stairs(only, 1, 1)
    assert only.up_stairs == [] and only.down_stairs == []


def test_total_floors_is_not_hardcoded(room_floor):
    floor = room_floor(width=30, height=20, rooms=FOUR_ROOMS, level=10)
    place_stairs(floor, 10, 25)
    assert len(floor.down_stairs) == 1


def test_single_room_gets_distinct_stair_tiles(room_floor):
    floor = room_floor(width=10, height=10, rooms=((2, 2, 5, 5),), level=2)
    place_stairs(floor, 2, 3)
    assert floor.up_stairs == [Position(4, 4)]
    assert len(floor.down_stairs) == 1
    assert floor.down_stairs[0] != floor.up_stairs[0]
    assert floor.tile_at(*_xy(floor.down_stairs[0])).type is TileType.STAIRS_DOWN


def _xy(p):
    return p.x, p.y
