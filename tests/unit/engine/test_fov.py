"""Tests for the visibility field."""

from __future__ import annotations

from tombcrawl.engine.fov import (
    VisibilityField,
    bresenham_line,
    describe_position,
    line_of_sight,
    transparency,
)
from tombcrawl.models.entities import create_item, create_monster, create_stairs
from tombcrawl.models.enums import ItemKind
from tombcrawl.models.game_state import Tile, TileGrid


def _wall_at(grid: TileGrid, x: int, y: int) -> None:
    grid.tiles[x][y] = Tile.wall()


class TestBresenham:
    """Tests for the line rasterizer."""

    def test_includes_both_ends(self) -> None:
        """Test the line starts and ends on the given cells."""
        cells = list(bresenham_line(1, 1, 5, 3))

        assert cells[0] == (1, 1)
        assert cells[-1] == (5, 3)
        assert len(cells) == 5

    def test_single_cell(self) -> None:
        """Test a zero-length line yields its only cell."""
        assert list(bresenham_line(2, 2, 2, 2)) == [(2, 2)]


class TestTransparency:
    """Tests for the transparency array handed to libtcod."""

    def test_indexed_by_x_then_y(self, open_grid: TileGrid) -> None:
        """Test the array shape and that walls are opaque."""
        _wall_at(open_grid, 7, 5)

        array = transparency(open_grid)

        assert array.shape == (20, 15)
        assert not array[7, 5]
        assert not array[0, 0]
        assert array[5, 7]


class TestVisibilityField:
    """Tests for VisibilityField.compute."""

    def test_wall_hides_cells_behind_it(self, open_grid: TileGrid) -> None:
        """Test a cell behind a wall is not visible while open cells are."""
        _wall_at(open_grid, 7, 5)
        field = VisibilityField()

        visible = field.compute(open_grid, (5, 5), radius=10)

        assert (6, 5) in visible
        assert (7, 5) in visible  # the wall itself is lit
        assert (8, 5) not in visible
        assert (9, 5) not in visible
        assert (5, 8) in visible

    def test_unlit_walls(self, open_grid: TileGrid) -> None:
        """Test walls are hidden when light_walls is off."""
        _wall_at(open_grid, 7, 5)

        visible = VisibilityField().compute(open_grid, (5, 5), radius=10, light_walls=False)

        assert (7, 5) not in visible
        assert (6, 5) in visible

    def test_radius_limits_view(self, open_grid: TileGrid) -> None:
        """Test cells beyond the radius are not visible."""
        visible = VisibilityField().compute(open_grid, (5, 5), radius=3)

        assert (8, 5) in visible
        assert (9, 5) not in visible
        assert (8, 8) not in visible

    def test_unlimited_radius(self, open_grid: TileGrid) -> None:
        """Test a non-positive radius sees across the whole open room."""
        visible = VisibilityField().compute(open_grid, (1, 1), radius=0)

        assert (18, 13) in visible
        assert (0, 0) in visible

    def test_origin_always_visible(self, open_grid: TileGrid) -> None:
        """Test the viewer sees its own cell."""
        assert (5, 5) in VisibilityField().compute(open_grid, (5, 5), radius=1)

    def test_explored_is_permanent(self, open_grid: TileGrid) -> None:
        """Test cells stay explored after leaving view."""
        field = VisibilityField()
        field.compute(open_grid, (3, 3), radius=2)
        assert open_grid.is_explored(4, 3)

        field.compute(open_grid, (15, 10), radius=2)

        assert not field.is_visible(4, 3)
        assert open_grid.is_explored(4, 3)

    def test_needs_update_tracks_origin(self, open_grid: TileGrid) -> None:
        """Test recomputation is only needed when the origin moves."""
        field = VisibilityField()
        assert field.needs_update((5, 5))

        field.compute(open_grid, (5, 5), radius=10)

        assert not field.needs_update((5, 5))
        assert field.needs_update((5, 6))
        field.reset()
        assert field.needs_update((5, 5))

    def test_line_of_sight(self, open_grid: TileGrid) -> None:
        """Test only cells strictly between the ends block sight."""
        _wall_at(open_grid, 6, 5)

        assert not line_of_sight(open_grid, (5, 5), (7, 5))
        assert line_of_sight(open_grid, (5, 5), (6, 5))


class TestShows:
    """Tests for render gating."""

    def test_always_visible_after_explored(self, open_grid: TileGrid) -> None:
        """Test stairs stay drawn out of view once their cell is explored."""
        field = VisibilityField()
        stairs = create_stairs(4, 5)
        orc = create_monster("orc", 6, 5)
        field.compute(open_grid, (5, 5), radius=3)
        field.compute(open_grid, (15, 10), radius=3)

        assert field.shows(stairs, open_grid)
        assert not field.shows(orc, open_grid)

    def test_always_visible_needs_exploration(self, open_grid: TileGrid) -> None:
        """Test unexplored stairs are not drawn."""
        field = VisibilityField()
        field.compute(open_grid, (15, 10), radius=2)

        assert not field.shows(create_stairs(2, 2), open_grid)


class TestDescribePosition:
    """Tests for names under the pointer."""

    def test_lists_names_in_view(self, open_grid: TileGrid) -> None:
        """Test all entities on a visible cell are named."""
        field = VisibilityField()
        field.compute(open_grid, (5, 5), radius=5)
        entities = [create_monster("orc", 6, 6), create_item(ItemKind.HEAL, 6, 6)]

        assert describe_position(6, 6, entities, field) == "orc, healing potion"
        assert describe_position(7, 7, entities, field) == ""

    def test_hidden_cell_is_silent(self, open_grid: TileGrid) -> None:
        """Test nothing is named on a cell out of view."""
        field = VisibilityField()
        field.compute(open_grid, (2, 2), radius=2)

        assert describe_position(12, 12, [create_monster("orc", 12, 12)], field) == ""
