"""Contracts of the external collaborators driving the engine.

The engine never draws, reads keys or shows menus itself. A front end
implements these protocols and hands them to the GameLoop; tests use
scripted fakes.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from tombcrawl.core.exceptions import ValidationError
from tombcrawl.models.entities import Entity
from tombcrawl.models.game_state import LogEntry, TileGrid


# =============================================================================
# Actions
# =============================================================================


class ActionKind(StrEnum):
    """Discrete player commands."""

    MOVE = "move"
    WAIT = "wait"
    PICK_UP = "pick_up"
    DROP = "drop"
    USE_ITEM = "use_item"
    VIEW_CHARACTER = "view_character"
    TOGGLE_FULLSCREEN = "toggle_fullscreen"
    DESCEND = "descend"
    QUIT = "quit"


@dataclass(frozen=True)
class Action:
    """One decoded input.

    Attributes:
        kind: The command.
        dx: Horizontal step for MOVE (-1, 0 or 1).
        dy: Vertical step for MOVE (-1, 0 or 1).
    """

    kind: ActionKind
    dx: int = 0
    dy: int = 0

    @classmethod
    def move(cls, dx: int, dy: int) -> Action:
        if (dx, dy) == (0, 0) or abs(dx) > 1 or abs(dy) > 1:
            raise ValidationError(
                "Move must be one of the 8 directions",
                field_name="dx,dy",
                details={"dx": dx, "dy": dy},
            )
        return cls(ActionKind.MOVE, dx, dy)


class ClickKind(StrEnum):
    """Kind of pointer event seen while targeting."""

    HOVER = "hover"
    LEFT = "left"
    RIGHT = "right"
    ESCAPE = "escape"


@dataclass(frozen=True)
class PointerEvent:
    x: int
    y: int
    click: ClickKind = ClickKind.HOVER


# =============================================================================
# Render Snapshot
# =============================================================================


@dataclass(frozen=True)
class PlayerStats:
    hp: int
    max_hp: int
    power: int
    defense: int
    level: int
    xp: int


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer needs for one frame.

    The grid and entities are copies taken when the snapshot is built.

    Attributes:
        grid: The tile grid (explored flags included).
        entities: Entities to draw, non-blocking ones first so actors
            are drawn over items and remains.
        visible: Cells currently in view.
        messages: Message log lines, oldest first.
        player: The player's derived stats.
        dungeon_level: Current dungeon level.
    """

    grid: TileGrid
    entities: tuple[Entity, ...]
    visible: frozenset[tuple[int, int]]
    messages: tuple[LogEntry, ...]
    player: PlayerStats
    dungeon_level: int


# =============================================================================
# Ports
# =============================================================================


class InputPort(Protocol):
    def poll(self) -> Action | None:
        """Block until the next action; None means the window was closed."""
        ...


class MenuPort(Protocol):
    def select(self, header: str, options: Sequence[str]) -> int | None:
        """Show a menu of at most 26 options and return the chosen index."""
        ...

    def message(self, text: str) -> None:
        """Show a message box and wait for it to be dismissed."""
        ...


class TargetingPort(Protocol):
    def events(self) -> Iterable[PointerEvent]:
        """Stream pointer events until the consumer stops reading."""
        ...


class RenderPort(Protocol):
    def render(self, snapshot: Snapshot) -> None: ...

    def toggle_fullscreen(self) -> None: ...


__all__ = [
    "ActionKind",
    "Action",
    "ClickKind",
    "PointerEvent",
    "PlayerStats",
    "Snapshot",
    "InputPort",
    "MenuPort",
    "TargetingPort",
    "RenderPort",
]
