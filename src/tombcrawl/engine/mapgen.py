"""Procedural level generation.

A level is built by rejection sampling: up to ``max_rooms`` random
rectangles are drawn and each one that does not intersect an already
accepted room is carved out and joined to the previous room by an
L-shaped corridor. Rooms are then populated from level-scaled spawn
tables and stairs are placed in the last room.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from tombcrawl.core.config import MapSettings
from tombcrawl.core.constants import (
    CONFUSE_CHANCE,
    FIREBALL_CHANCE,
    HEAL_CHANCE,
    LIGHTNING_CHANCE,
    MAX_ITEMS_PER_ROOM,
    MAX_MONSTERS_PER_ROOM,
    ORC_CHANCE,
    SHIELD_CHANCE,
    SWORD_CHANCE,
    TROLL_CHANCE,
)
from tombcrawl.core.exceptions import MapGenerationError
from tombcrawl.core.logging import get_logger
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.models.entities import Entity, create_item, create_monster, create_stairs
from tombcrawl.models.enums import ItemKind
from tombcrawl.models.game_state import TileGrid


logger = get_logger(__name__)


def from_dungeon_level(table: Sequence[tuple[int, int]], level: int) -> int:
    """Look up a value in a level step table.

    Args:
        table: (level threshold, value) pairs in ascending threshold order.
        level: Current dungeon level.

    Returns:
        The value of the last entry whose threshold is <= level, or 0.
    """
    for threshold, value in reversed(table):
        if level >= threshold:
            return value
    return 0


@dataclass(frozen=True)
class Rect:
    """Axis-aligned room rectangle; the border is wall, the interior floor."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def sized(cls, x: int, y: int, w: int, h: int) -> Rect:
        return cls(x, y, x + w, y + h)

    @property
    def center(self) -> tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: Rect) -> bool:
        # Touching borders count as intersecting so rooms never share a wall
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    @property
    def interior_size(self) -> int:
        return (self.x2 - self.x1 - 1) * (self.y2 - self.y1 - 1)


@dataclass
class GeneratedLevel:
    """Output of one generation run.

    Attributes:
        grid: The carved tile grid.
        entities: Spawned monsters, items and the stairs (never the player).
        start: Where the player starts (center of the first room).
        rooms: Accepted rooms in acceptance order.
    """

    grid: TileGrid
    entities: list[Entity] = field(default_factory=list)
    start: tuple[int, int] = (0, 0)
    rooms: list[Rect] = field(default_factory=list)


class MapGenerator:
    """Builds dungeon levels from random rooms and corridors."""

    def __init__(self, dice: DiceRoller, settings: MapSettings | None = None) -> None:
        self._dice = dice
        self._settings = settings or MapSettings()

    def generate(self, level: int) -> GeneratedLevel:
        """Generate a complete level.

        Args:
            level: Dungeon level; scales monster and item spawn tables.

        Returns:
            The generated level.

        Raises:
            MapGenerationError: If not a single room could be placed.
        """
        cfg = self._settings
        grid = TileGrid.filled(cfg.width, cfg.height)
        result = GeneratedLevel(grid=grid)

        for _ in range(cfg.max_rooms):
            w = self._dice.randint(cfg.room_min_size, cfg.room_max_size)
            h = self._dice.randint(cfg.room_min_size, cfg.room_max_size)
            x = self._dice.randrange(0, cfg.width - w)
            y = self._dice.randrange(0, cfg.height - h)
            room = Rect.sized(x, y, w, h)

            if any(room.intersects(other) for other in result.rooms):
                continue

            self._carve_room(grid, room)
            if not result.rooms:
                result.start = room.center
            else:
                self._connect(grid, result.rooms[-1].center, room.center)
            result.rooms.append(room)
            self._populate(room, result, level)

        if not result.rooms:
            raise MapGenerationError("No room could be placed", dungeon_level=level)

        stairs_x, stairs_y = result.rooms[-1].center
        result.entities.append(create_stairs(stairs_x, stairs_y))

        logger.info(
            "Level generated",
            dungeon_level=level,
            rooms=len(result.rooms),
            entities=len(result.entities),
            start=result.start,
        )
        return result

    # -------------------------------------------------------------------------
    # Carving
    # -------------------------------------------------------------------------

    @staticmethod
    def _carve_room(grid: TileGrid, room: Rect) -> None:
        for x in range(room.x1 + 1, room.x2):
            for y in range(room.y1 + 1, room.y2):
                grid.carve(x, y)

    @staticmethod
    def _carve_h_tunnel(grid: TileGrid, x1: int, x2: int, y: int) -> None:
        for x in range(min(x1, x2), max(x1, x2) + 1):
            grid.carve(x, y)

    @staticmethod
    def _carve_v_tunnel(grid: TileGrid, y1: int, y2: int, x: int) -> None:
        for y in range(min(y1, y2), max(y1, y2) + 1):
            grid.carve(x, y)

    def _connect(
        self, grid: TileGrid, prev: tuple[int, int], new: tuple[int, int]
    ) -> None:
        """Join two room centers with an L-shaped corridor of random orientation."""
        (prev_x, prev_y), (new_x, new_y) = prev, new
        if self._dice.coin_flip():
            self._carve_h_tunnel(grid, prev_x, new_x, prev_y)
            self._carve_v_tunnel(grid, prev_y, new_y, new_x)
        else:
            self._carve_v_tunnel(grid, prev_y, new_y, prev_x)
            self._carve_h_tunnel(grid, prev_x, new_x, new_y)

    # -------------------------------------------------------------------------
    # Population
    # -------------------------------------------------------------------------

    def _populate(self, room: Rect, result: GeneratedLevel, level: int) -> None:
        max_monsters = from_dungeon_level(MAX_MONSTERS_PER_ROOM, level)
        monster_weights = [
            ("orc", from_dungeon_level(ORC_CHANCE, level)),
            ("troll", from_dungeon_level(TROLL_CHANCE, level)),
        ]
        for _ in range(self._dice.randint(0, max_monsters)):
            spot = self._free_spot(room, result)
            if spot is None:
                break
            kind = self._dice.weighted_choice(monster_weights)
            result.entities.append(create_monster(kind, *spot))

        max_items = from_dungeon_level(MAX_ITEMS_PER_ROOM, level)
        item_weights = [
            (ItemKind.HEAL, from_dungeon_level(HEAL_CHANCE, level)),
            (ItemKind.LIGHTNING, from_dungeon_level(LIGHTNING_CHANCE, level)),
            (ItemKind.FIREBALL, from_dungeon_level(FIREBALL_CHANCE, level)),
            (ItemKind.CONFUSE, from_dungeon_level(CONFUSE_CHANCE, level)),
            (ItemKind.SWORD, from_dungeon_level(SWORD_CHANCE, level)),
            (ItemKind.SHIELD, from_dungeon_level(SHIELD_CHANCE, level)),
        ]
        for _ in range(self._dice.randint(0, max_items)):
            spot = self._free_spot(room, result)
            if spot is None:
                break
            kind = self._dice.weighted_choice(item_weights)
            result.entities.append(create_item(kind, *spot))

    def _free_spot(self, room: Rect, result: GeneratedLevel) -> tuple[int, int] | None:
        """Sample an unblocked interior cell, giving up after one try per cell.

        The player's start cell counts as occupied.
        """
        for _ in range(room.interior_size):
            x = self._dice.randrange(room.x1 + 1, room.x2)
            y = self._dice.randrange(room.y1 + 1, room.y2)
            if not self._is_blocked(x, y, result):
                return (x, y)
        return None

    @staticmethod
    def _is_blocked(x: int, y: int, result: GeneratedLevel) -> bool:
        if result.grid.is_blocked(x, y) or (x, y) == result.start:
            return True
        return any(e.blocks and e.x == x and e.y == y for e in result.entities)


__all__ = [
    "Rect",
    "GeneratedLevel",
    "MapGenerator",
    "from_dungeon_level",
]
