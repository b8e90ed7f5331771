"""Grid movement shared by the player and the AI."""

from __future__ import annotations

from tombcrawl.models.entities import EntityStore
from tombcrawl.models.game_state import TileGrid


def move_by(index: int, dx: int, dy: int, grid: TileGrid, store: EntityStore) -> bool:
    """Move an entity by a delta unless the target cell is blocked.

    Returns:
        True if the entity moved.
    """
    entity = store[index]
    x, y = entity.x + dx, entity.y + dy
    if store.is_blocked(x, y, grid):
        return False
    entity.set_pos(x, y)
    return True


def move_towards(
    index: int, target_x: int, target_y: int, grid: TileGrid, store: EntityStore
) -> bool:
    """Take one step toward a target cell.

    The direction vector is normalized by its Euclidean length and each
    axis is rounded to the nearest integer, so the step is always one of
    the eight neighbors (or no move at all when already on the target).
    """
    entity = store[index]
    dx = target_x - entity.x
    dy = target_y - entity.y
    distance = (dx * dx + dy * dy) ** 0.5
    if distance == 0:
        return False
    step_x = _round_half_away(dx / distance)
    step_y = _round_half_away(dy / distance)
    return move_by(index, step_x, step_y, grid, store)


def _round_half_away(value: float) -> int:
    # Python's round() is banker's rounding; steps need 0.5 -> 1
    if value >= 0:
        return int(value + 0.5)
    return -int(-value + 0.5)


__all__ = [
    "move_by",
    "move_towards",
]
