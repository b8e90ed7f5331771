"""Tests for procedural level generation."""

from __future__ import annotations

import pytest

from tombcrawl.core.config import MapSettings
from tombcrawl.core.constants import (
    MAX_ITEMS_PER_ROOM,
    MAX_MONSTERS_PER_ROOM,
    TROLL_CHANCE,
)
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.mapgen import GeneratedLevel, MapGenerator, Rect, from_dungeon_level
from tombcrawl.models.enums import ItemKind


def _generate(seed: int, level: int = 1) -> GeneratedLevel:
    return MapGenerator(DiceRoller(seed=seed), MapSettings()).generate(level)


class TestFromDungeonLevel:
    """Tests for level step tables."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [(1, 0), (2, 0), (3, 15), (4, 15), (5, 30), (6, 30), (7, 60), (20, 60)],
    )
    def test_troll_chance(self, level: int, expected: int) -> None:
        """Test the last threshold at or below the level wins, absent means 0."""
        assert from_dungeon_level(TROLL_CHANCE, level) == expected

    def test_room_maxima(self) -> None:
        """Test the per-room spawn maxima grow with depth."""
        assert [from_dungeon_level(MAX_MONSTERS_PER_ROOM, n) for n in (1, 4, 6)] == [2, 3, 5]
        assert [from_dungeon_level(MAX_ITEMS_PER_ROOM, n) for n in (1, 3, 4)] == [1, 1, 2]


class TestRect:
    """Tests for room rectangles."""

    def test_center(self) -> None:
        """Test integer center."""
        assert Rect.sized(2, 3, 6, 7).center == (5, 6)

    def test_touching_rooms_intersect(self) -> None:
        """Test rooms sharing a border count as intersecting."""
        a = Rect.sized(0, 0, 6, 6)

        assert a.intersects(Rect.sized(6, 0, 6, 6))
        assert not a.intersects(Rect.sized(7, 0, 6, 6))


class TestMapGenerator:
    """Tests for MapGenerator.generate."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
    def test_rooms_never_intersect(self, seed: int) -> None:
        """Test no two accepted rooms intersect."""
        rooms = _generate(seed).rooms

        assert rooms
        for i, a in enumerate(rooms):
            for b in rooms[i + 1 :]:
                assert not a.intersects(b)

    @pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
    def test_start_is_first_room_center(self, seed: int) -> None:
        """Test the player starts in the center of the first room."""
        level = _generate(seed)

        assert level.start == level.rooms[0].center
        assert not level.grid.is_blocked(*level.start)

    @pytest.mark.parametrize(("seed", "depth"), [(1, 1), (5, 4), (9, 8), (13, 10)])
    def test_spawns_on_open_cells(self, seed: int, depth: int) -> None:
        """Test every spawned entity stands on walkable terrain without overlap."""
        level = _generate(seed, depth)
        blocking = [e.pos for e in level.entities if e.blocks]

        for entity in level.entities:
            assert not level.grid.is_blocked(entity.x, entity.y)
        assert len(blocking) == len(set(blocking))
        assert level.start not in blocking

    def test_stairs_in_last_room(self) -> None:
        """Test the stairs are placed at the last room's center."""
        level = _generate(3)
        stairs = [e for e in level.entities if e.name == "stairs"]

        assert len(stairs) == 1
        assert stairs[0].pos == level.rooms[-1].center
        assert stairs[0].always_visible

    def test_rooms_are_connected(self) -> None:
        """Test every room center is reachable from the start."""
        level = _generate(42)
        grid = level.grid
        seen = {level.start}
        frontier = [level.start]
        while frontier:
            x, y = frontier.pop()
            for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
                if (nx, ny) not in seen and not grid.is_blocked(nx, ny):
                    seen.add((nx, ny))
                    frontier.append((nx, ny))

        assert all(room.center in seen for room in level.rooms)

    def test_level_one_spawns_only_early_content(self) -> None:
        """Test level 1 tables exclude trolls and late items."""
        for seed in range(10):
            for entity in _generate(seed, 1).entities:
                assert entity.name != "troll"
                assert entity.item not in (ItemKind.LIGHTNING, ItemKind.FIREBALL, ItemKind.SWORD)

    def test_seed_reproducible(self) -> None:
        """Test generation is deterministic for a given seed."""
        first, second = _generate(77), _generate(77)

        assert first.rooms == second.rooms
        assert [e.pos for e in first.entities] == [e.pos for e in second.entities]

    def test_small_grid(self) -> None:
        """Test generation works with a custom small map."""
        settings = MapSettings(width=20, height=12, room_min_size=4, room_max_size=6, max_rooms=5)
        level = MapGenerator(DiceRoller(seed=5), settings).generate(1)

        assert level.grid.width == 20 and level.grid.height == 12
        assert 1 <= len(level.rooms) <= 5
