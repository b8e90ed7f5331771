"""Target selection for spells that need an explicit target.

The TargetingPort only supplies raw pointer events; range, visibility and
cancellation rules live here.
"""

from __future__ import annotations

from collections.abc import Iterator

from tombcrawl.core.constants import PLAYER_INDEX
from tombcrawl.engine.fov import VisibilityField
from tombcrawl.engine.ports import ClickKind, PointerEvent, TargetingPort
from tombcrawl.models.entities import EntityStore
from tombcrawl.models.game_state import TileGrid


def _next_tile(
    events: Iterator[PointerEvent],
    store: EntityStore,
    grid: TileGrid,
    field: VisibilityField,
    max_range: float | None,
) -> tuple[int, int] | None:
    for event in events:
        if event.click in (ClickKind.RIGHT, ClickKind.ESCAPE):
            return None
        if event.click != ClickKind.LEFT:
            continue
        x, y = event.x, event.y
        in_view = grid.in_bounds(x, y) and field.is_visible(x, y)
        in_range = max_range is None or store.player.distance(x, y) <= max_range
        if in_view and in_range:
            return (x, y)
    # Event stream ended without a choice
    return None


def target_tile(
    port: TargetingPort,
    store: EntityStore,
    grid: TileGrid,
    field: VisibilityField,
    max_range: float | None = None,
) -> tuple[int, int] | None:
    """Wait for a left click on a visible cell within range.

    Left clicks on cells out of view or out of range are ignored. A right
    click or escape cancels.

    Returns:
        The chosen cell, or None when cancelled.
    """
    return _next_tile(iter(port.events()), store, grid, field, max_range)


def target_monster(
    port: TargetingPort,
    store: EntityStore,
    grid: TileGrid,
    field: VisibilityField,
    max_range: float | None = None,
) -> int | None:
    """Wait for a left click on a fighting entity other than the player.

    Clicking an empty cell keeps waiting.

    Returns:
        Store index of the chosen entity, or None when cancelled.
    """
    events = iter(port.events())
    while True:
        tile = _next_tile(events, store, grid, field, max_range)
        if tile is None:
            return None
        for index, entity in enumerate(store):
            if index != PLAYER_INDEX and entity.fighter is not None and entity.pos == tile:
                return index


__all__ = [
    "target_tile",
    "target_monster",
]
