"""Tests for terrain, the message log and the game aggregate."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from tombcrawl.models.entities import create_dagger, create_item
from tombcrawl.models.enums import ItemKind, Slot
from tombcrawl.models.game_state import Game, MessageLog, Tile, TileGrid


class TestTileGrid:
    """Tests for the tile grid."""

    def test_filled_is_all_wall(self) -> None:
        """Test a new grid blocks everything."""
        grid = TileGrid.filled(4, 3)

        assert all(grid.is_blocked(x, y) for x in range(4) for y in range(3))
        assert all(grid.blocks_sight(x, y) for x in range(4) for y in range(3))

    def test_carve(self) -> None:
        """Test carving makes a cell walkable and transparent."""
        grid = TileGrid.filled(4, 3)
        grid.carve(1, 2)

        assert not grid.is_blocked(1, 2)
        assert not grid.blocks_sight(1, 2)
        assert grid.is_blocked(2, 1)

    def test_out_of_bounds_is_blocked(self) -> None:
        """Test cells outside the grid block movement and sight."""
        grid = TileGrid.filled(4, 3)

        assert grid.is_blocked(-1, 0)
        assert grid.is_blocked(4, 0)
        assert grid.blocks_sight(0, 3)
        assert not grid.is_explored(9, 9)

    def test_dimension_mismatch_rejected(self) -> None:
        """Test tiles must match the declared size."""
        with pytest.raises(PydanticValidationError):
            TileGrid(width=2, height=2, tiles=[[Tile()], [Tile()]])

    def test_explored_flag(self) -> None:
        """Test marking a cell explored."""
        grid = TileGrid.filled(4, 3)
        grid.mark_explored(0, 0)

        assert grid.is_explored(0, 0)
        assert not grid.is_explored(1, 0)


class TestMessageLog:
    """Tests for the bounded message log."""

    def test_fifo_eviction(self) -> None:
        """Test the oldest line is dropped once the log is full."""
        log = MessageLog(capacity=3)
        for i in range(5):
            log.add(f"line {i}", (255, 255, 255))

        assert len(log) == 3
        assert log.texts == ["line 2", "line 3", "line 4"]

    def test_capacity_survives_round_trip(self) -> None:
        """Test a reloaded log stays bounded."""
        log = MessageLog(capacity=2)
        log.add("a", (1, 2, 3))
        log.add("b", (1, 2, 3))

        restored = MessageLog.model_validate_json(log.model_dump_json())
        restored.add("c", (1, 2, 3))

        assert restored.texts == ["b", "c"]
        assert restored.entries[0].color == (1, 2, 3)


class TestGame:
    """Tests for the game aggregate."""

    def test_equipped_in_slot(self) -> None:
        """Test finding the item worn in a slot."""
        shield = create_item(ItemKind.SHIELD, 0, 0)
        game = Game(map=TileGrid.filled(2, 2), inventory=[shield, create_dagger()])

        assert game.equipped_in_slot(Slot.LEFT_HAND) == 1
        assert game.equipped_in_slot(Slot.RIGHT_HAND) is None

    def test_defaults(self) -> None:
        """Test a new game starts on level 1 with an empty inventory."""
        game = Game(map=TileGrid.filled(2, 2))

        assert game.dungeon_level == 1
        assert game.inventory == []
        assert game.log.capacity == 6
