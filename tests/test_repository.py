import pytest

from deeps.config import GenerationSettings
from deeps.dungeon.repository import DungeonRepository
from deeps.errors import DungeonNotFoundError


def make_repo():
    return DungeonRepository(settings=GenerationSettings(width=40, height=30, difficulty="hard"))


def test_create_get_all_delete():
    repo = make_repo()
    a = repo.create("Crypt", 5, seed=1)
    b = repo.create("Catacombs", 3)
    assert repo.get(a.id) is a
    assert {d.id for d in repo.all()} == {a.id, b.id}
    assert len(repo) == 2
    assert a.difficulty == "hard"
    assert isinstance(b.seed, int)

    repo.delete(a.id)
    with pytest.raises(DungeonNotFoundError):
        repo.get(a.id)
    with pytest.raises(DungeonNotFoundError):
        repo.delete(a.id)
    with pytest.raises(KeyError):
        repo.get("missing")


def test_created_dungeon_generates_with_repository_settings():
    repo = make_repo()
    d = repo.create("Crypt", 5, seed=3, difficulty="easy")
    floor = d.get_floor(1)
    assert (floor.width, floor.height) == (40, 30)
    assert d.difficulty == "easy"


def test_player_membership():
    repo = make_repo()
    a = repo.create("Crypt", 5, seed=1)
    b = repo.create("Catacombs", 3, seed=2)
    repo.add_player(b.id, "hero", level=2)
    assert repo.get_player_dungeon("hero") is b
    assert b.player_level("hero") == 2
    assert repo.get_player_dungeon("nobody") is None

    repo.remove_player(b.id, "hero")
    assert repo.get_player_dungeon("hero") is None
    with pytest.raises(DungeonNotFoundError):
        repo.add_player("missing", "hero")
    assert not a.has_players()


def test_cleanup_only_removes_empty_idle_dungeons():
    repo = make_repo()
    idle = repo.create("Idle", 3, seed=1)
    busy = repo.create("Busy", 3, seed=2)
    fresh = repo.create("Fresh", 3, seed=3)
    repo.add_player(busy.id, "hero")
    idle.last_activity -= 3600
    busy.last_activity -= 3600

    assert repo.cleanup_inactive(600) == 1
    assert {d.id for d in repo.all()} == {busy.id, fresh.id}
    assert repo.cleanup_inactive(600) == 0
