"""Visibility field (field of view) computation.

Visibility comes from libtcod's basic ray casting (``FOV_BASIC``) over a
transparency array built from the tile grid. Walls themselves are lit when
``light_walls`` is set, so room borders are drawn as soon as the room is
seen.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import numpy as np
import tcod.constants
import tcod.los
import tcod.map
from numpy.typing import NDArray

from tombcrawl.core.logging import get_logger
from tombcrawl.models.entities import Entity
from tombcrawl.models.game_state import TileGrid


logger = get_logger(__name__)


def transparency(grid: TileGrid) -> NDArray[np.bool_]:
    """Build a ``[x, y]`` indexed array that is True where sight passes."""
    return np.array(
        [[not tile.block_sight for tile in column] for column in grid.tiles],
        dtype=np.bool_,
    )


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> Iterator[tuple[int, int]]:
    """Yield the cells of the line from (x0, y0) to (x1, y1), both ends included."""
    for x, y in tcod.los.bresenham((x0, y0), (x1, y1)).tolist():
        yield x, y


def line_of_sight(grid: TileGrid, origin: tuple[int, int], target: tuple[int, int]) -> bool:
    """Whether nothing between origin and target blocks sight.

    Neither endpoint is tested, only the cells strictly between them.
    """
    for x, y in bresenham_line(*origin, *target):
        if (x, y) == origin or (x, y) == target:
            continue
        if grid.blocks_sight(x, y):
            return False
    return True


class VisibilityField:
    """The set of cells currently in view from the last computed origin."""

    def __init__(self) -> None:
        self._visible: frozenset[tuple[int, int]] = frozenset()
        self._origin: tuple[int, int] | None = None

    @property
    def origin(self) -> tuple[int, int] | None:
        return self._origin

    @property
    def visible(self) -> frozenset[tuple[int, int]]:
        return self._visible

    def reset(self) -> None:
        """Forget the last computation so the next check forces a recompute."""
        self._visible = frozenset()
        self._origin = None

    def needs_update(self, origin: tuple[int, int]) -> bool:
        return origin != self._origin

    def compute(
        self,
        grid: TileGrid,
        origin: tuple[int, int],
        radius: int,
        light_walls: bool = True,
    ) -> frozenset[tuple[int, int]]:
        """Recompute the field from an origin and mark what is seen as explored.

        Args:
            grid: Terrain to look through.
            origin: Viewer position.
            radius: Maximum view distance; 0 or less means unlimited.
            light_walls: Whether sight-blocking cells at the edge of view
                are themselves visible.

        Returns:
            The visible cells.
        """
        lit = tcod.map.compute_fov(
            transparency(grid),
            origin,
            radius=max(radius, 0),
            light_walls=light_walls,
            algorithm=tcod.constants.FOV_BASIC,
        )
        visible = {(int(x), int(y)) for x, y in zip(*np.nonzero(lit))}

        for x, y in visible:
            grid.mark_explored(x, y)

        self._visible = frozenset(visible)
        self._origin = origin
        logger.debug("Visibility computed", origin=origin, visible=len(visible))
        return self._visible

    def is_visible(self, x: int, y: int) -> bool:
        return (x, y) in self._visible

    def shows(self, entity: Entity, grid: TileGrid) -> bool:
        """Whether an entity should be drawn.

        Always-visible entities (stairs) show once their cell is explored.
        """
        if self.is_visible(entity.x, entity.y):
            return True
        return entity.always_visible and grid.is_explored(entity.x, entity.y)


def describe_position(
    x: int, y: int, entities: Iterable[Entity], field: VisibilityField
) -> str:
    """List the names of entities on a cell that is currently in view."""
    return ", ".join(
        e.name for e in entities if e.x == x and e.y == y and field.is_visible(x, y)
    )


__all__ = [
    "VisibilityField",
    "transparency",
    "bresenham_line",
    "line_of_sight",
    "describe_position",
]
