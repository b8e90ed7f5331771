"""Terrain, message log and the game aggregate.

The Game aggregate is everything about a session except the live entity
store: the tile grid, the message log, the player's inventory and the
dungeon level. A save file holds the pair (entities, game).
"""

from __future__ import annotations

from collections import deque
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tombcrawl.core.constants import Color
from tombcrawl.models.entities import Entity
from tombcrawl.models.enums import Slot


# =============================================================================
# Terrain
# =============================================================================


class Tile(BaseModel):
    """One grid cell."""

    model_config = ConfigDict(extra="forbid")

    blocked: bool = True
    block_sight: bool = True
    explored: bool = False

    @classmethod
    def empty(cls) -> Self:
        """Create a walkable, transparent floor tile."""
        return cls(blocked=False, block_sight=False)

    @classmethod
    def wall(cls) -> Self:
        """Create a solid, opaque wall tile."""
        return cls(blocked=True, block_sight=True)


class TileGrid(BaseModel):
    """Fixed-size grid of tiles, indexed ``tiles[x][y]``."""

    model_config = ConfigDict(extra="forbid")

    width: int = Field(ge=1)
    height: int = Field(ge=1)
    tiles: list[list[Tile]]

    @model_validator(mode="after")
    def check_dimensions(self) -> "TileGrid":
        """Reject grids whose columns do not match the declared size."""
        if len(self.tiles) != self.width or any(
            len(column) != self.height for column in self.tiles
        ):
            raise ValueError(
                f"tile grid does not match declared size {self.width}x{self.height}"
            )
        return self

    @classmethod
    def filled(cls, width: int, height: int) -> Self:
        """Create a grid made entirely of wall."""
        return cls(
            width=width,
            height=height,
            tiles=[[Tile.wall() for _ in range(height)] for _ in range(width)],
        )

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, x: int, y: int) -> Tile:
        return self.tiles[x][y]

    def carve(self, x: int, y: int) -> None:
        """Turn the cell at (x, y) into floor."""
        self.tiles[x][y] = Tile.empty()

    def is_blocked(self, x: int, y: int) -> bool:
        """Whether terrain blocks movement; out-of-bounds cells always do."""
        if not self.in_bounds(x, y):
            return True
        return self.tiles[x][y].blocked

    def blocks_sight(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return True
        return self.tiles[x][y].block_sight

    def is_explored(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.tiles[x][y].explored

    def mark_explored(self, x: int, y: int) -> None:
        # Exploration is permanent: this never resets the flag
        self.tiles[x][y].explored = True


# =============================================================================
# Message Log
# =============================================================================


class LogEntry(BaseModel):
    """A line of the in-game message log."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str
    color: Color


class MessageLog(BaseModel):
    """Bounded message history with FIFO eviction.

    Entries live in a ``deque`` with ``maxlen=capacity``, so adding a line
    to a full log drops the oldest one and memory stays constant.
    """

    model_config = ConfigDict(extra="forbid")

    capacity: int = Field(default=6, ge=1)
    entries: deque[LogEntry] = Field(default_factory=deque)

    @model_validator(mode="after")
    def bound_entries(self) -> "MessageLog":
        """Rebind the entries to a ring buffer of the configured capacity."""
        self.entries = deque(self.entries, maxlen=self.capacity)
        return self

    def add(self, text: str, color: Color) -> None:
        self.entries.append(LogEntry(text=text, color=color))

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def texts(self) -> list[str]:
        return [entry.text for entry in self.entries]


# =============================================================================
# Game Aggregate
# =============================================================================


class Game(BaseModel):
    """Session state other than the entity store.

    Attributes:
        map: The current level's tile grid.
        log: The in-game message log.
        inventory: Items held by the player, in pickup order.
        dungeon_level: Depth of the current level, starting at 1.
    """

    model_config = ConfigDict(extra="forbid")

    map: TileGrid
    log: MessageLog = Field(default_factory=MessageLog)
    inventory: list[Entity] = Field(default_factory=list)
    dungeon_level: int = Field(default=1, ge=1)

    def equipped_in_slot(self, slot: Slot) -> int | None:
        """Get the inventory index of the item equipped in a slot.

        Args:
            slot: The slot to look up.

        Returns:
            Inventory index, or None if the slot is free.
        """
        for index, item in enumerate(self.inventory):
            if item.equipment is not None and item.equipment.equipped and item.equipment.slot == slot:
                return index
        return None


__all__ = [
    "Tile",
    "TileGrid",
    "LogEntry",
    "MessageLog",
    "Game",
]
