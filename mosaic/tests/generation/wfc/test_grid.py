"""Tests for the WFC grid and cells."""

import random

import pytest

from mosaic.core import Direction, EdgeLabel, Position, WorldPosition
from mosaic.generation.tileset import TileCatalog, TileDefinition
from mosaic.generation.wfc import Cell, Grid
from mosaic.scene import Scene


class TestGridIndexing:
    """Test conversion between linear indices and coordinates."""

    @pytest.mark.parametrize("size", [1, 3, 7])
    def test_index_round_trip(self, grass_catalog, size):
        """Every coordinate maps to an index and back."""
        grid = Grid(size, grass_catalog)
        for y in range(size):
            for x in range(size):
                assert grid.coords(grid.index(x, y)) == (x, y)

    def test_index_is_row_major(self, grass_catalog):
        grid = Grid(4, grass_catalog)
        assert grid.index(0, 0) == 0
        assert grid.index(3, 0) == 3
        assert grid.index(0, 1) == 4
        assert grid.index(3, 3) == 15

    def test_cells_know_their_position(self, grass_catalog):
        grid = Grid(3, grass_catalog)
        for index, cell in enumerate(grid.all_cells()):
            assert cell.position == grid.coords(index)

    def test_in_bounds(self, grass_catalog):
        grid = Grid(3, grass_catalog)
        assert grid.in_bounds(0, 0)
        assert grid.in_bounds(2, 2)
        assert not grid.in_bounds(-1, 0)
        assert not grid.in_bounds(0, 3)

    def test_get_cell_out_of_bounds(self, grass_catalog):
        grid = Grid(3, grass_catalog)
        assert grid.get_cell(1, 2) is grid[grid.index(1, 2)]
        assert grid.get_cell(3, 0) is None

    @pytest.mark.parametrize("size, expected", [(1, 0), (3, 4), (4, 10), (5, 12)])
    def test_center_index(self, grass_catalog, size, expected):
        assert Grid(size, grass_catalog).center_index() == expected

    def test_rejects_empty_grid(self, grass_catalog):
        with pytest.raises(ValueError):
            Grid(0, grass_catalog)


class TestGridNeighbors:
    """Test neighbour lookup."""

    def test_interior_cell_has_four_neighbors(self, grass_catalog):
        grid = Grid(3, grass_catalog)
        neighbors = dict(grid.neighbors(grid.index(1, 1)))
        assert neighbors == {
            Direction.UP: grid.index(1, 2),
            Direction.RIGHT: grid.index(2, 1),
            Direction.DOWN: grid.index(1, 0),
            Direction.LEFT: grid.index(0, 1),
        }

    def test_corner_skips_out_of_bounds(self, grass_catalog):
        grid = Grid(3, grass_catalog)
        neighbors = dict(grid.neighbors(grid.index(0, 0)))
        assert set(neighbors) == {Direction.UP, Direction.RIGHT}

    def test_single_cell_grid_has_no_neighbors(self, grass_catalog):
        assert list(Grid(1, grass_catalog).neighbors(0)) == []


class TestGridState:
    """Test the starting superposition and reset."""

    def test_cells_start_with_whole_catalog(self, road_catalog):
        grid = Grid(2, road_catalog)
        for cell in grid.all_cells():
            assert cell.candidates == road_catalog.indices()
            assert cell.resolved is None

    def test_cells_do_not_share_candidate_lists(self, road_catalog):
        grid = Grid(2, road_catalog)
        grid[0].candidates.pop()
        assert grid[1].entropy == len(road_catalog)

    def test_initial_candidates_subset(self, road_catalog):
        grid = Grid(2, road_catalog, initial_candidates=[0, 3])
        assert all(cell.candidates == [0, 3] for cell in grid.all_cells())

    def test_reset_restores_superposition(self, road_catalog):
        grid = Grid(2, road_catalog)
        grid[0].collapse(random.Random(1), Scene())
        grid.reset()
        assert grid.resolved_count() == 0
        assert grid[0].entropy == len(road_catalog)

    def test_counts(self, grass_catalog):
        grid = Grid(2, grass_catalog)
        grid[0].collapse(random.Random(1), Scene())
        grid[1].candidates = []
        assert grid.resolved_count() == 1
        assert grid.contradiction_count() == 1
        assert not grid.is_complete()


class TestCellCollapse:
    """Test collapsing a single cell."""

    def test_collapse_places_tile_at_world_position(self, grass_catalog):
        scene = Scene()
        cell = Cell(position=Position(2, 1), catalog=grass_catalog, candidates=[0])

        assert cell.collapse(random.Random(1), scene) is True

        assert cell.resolved == 0
        assert cell.candidates == []
        assert cell.tile.name == "grass"
        assert len(scene) == 1
        assert scene.placements[0].geometry == "grass"
        assert scene.placements[0].position == WorldPosition(2.0, 1.0, 0.0)

    def test_second_collapse_is_noop(self, grass_catalog):
        scene = Scene()
        cell = Cell(position=Position(0, 0), catalog=grass_catalog, candidates=[0])

        assert cell.collapse(random.Random(1), scene) is True
        assert cell.collapse(random.Random(1), scene) is False
        assert len(scene) == 1

    def test_collapse_without_candidates_is_noop(self, grass_catalog):
        scene = Scene()
        cell = Cell(position=Position(0, 0), catalog=grass_catalog, candidates=[])

        assert cell.collapse(random.Random(1), scene) is False
        assert cell.resolved is None
        assert cell.is_contradiction
        assert len(scene) == 0

    def test_weighted_draw_bias(self):
        """A weight-3 tile is picked about three times as often as a weight-1 tile."""
        catalog = TileCatalog([
            TileDefinition.uniform("light", "x", weight=1),
            TileDefinition.uniform("heavy", "x", weight=3),
        ])
        rng = random.Random(20240601)
        scene = Scene()

        counts = [0, 0]
        for _ in range(10_000):
            cell = Cell(position=Position(0, 0), catalog=catalog, candidates=[0, 1])
            cell.collapse(rng, scene)
            counts[cell.resolved] += 1

        ratio = counts[1] / counts[0]
        assert 2.6 < ratio < 3.4, f"ratio {ratio:.2f} from counts {counts}"


class TestCellRemoveOptions:
    """Test narrowing a cell's candidates."""

    def test_keeps_only_matching_edges(self, road_catalog):
        cell = Cell(position=Position(0, 0), catalog=road_catalog, candidates=road_catalog.indices())

        contradiction = cell.remove_options(Direction.DOWN, EdgeLabel("road"))

        assert contradiction is False
        assert [road_catalog[i].name for i in cell.candidates] == ["road_ns", "corner_sw"]

    def test_is_idempotent(self, road_catalog):
        cell = Cell(position=Position(0, 0), catalog=road_catalog, candidates=road_catalog.indices())
        cell.remove_options(Direction.UP, EdgeLabel("grass"))
        once = list(cell.candidates)
        cell.remove_options(Direction.UP, EdgeLabel("grass"))
        assert cell.candidates == once

    def test_candidates_only_shrink(self, road_catalog):
        """Candidate count never grows and reaches exactly zero on contradiction."""
        cell = Cell(position=Position(0, 0), catalog=road_catalog, candidates=road_catalog.indices())
        sizes = [cell.entropy]
        results = []
        for direction, label in [
            (Direction.UP, "road"),
            (Direction.RIGHT, "road"),
            (Direction.DOWN, "road"),
            (Direction.UP, "grass"),
        ]:
            results.append(cell.remove_options(direction, EdgeLabel(label)))
            sizes.append(cell.entropy)

        assert sizes == sorted(sizes, reverse=True)
        assert sizes[-1] == 0
        assert results == [False, False, True, True]
        assert cell.is_contradiction

    def test_suffix_blocks_same_family(self, tile_factory):
        catalog = TileCatalog([
            tile_factory("bend_a", "road:a", "grass", "grass", "grass"),
            tile_factory("bend_b", "road:b", "grass", "grass", "grass"),
        ])
        cell = Cell(position=Position(0, 0), catalog=catalog, candidates=[0, 1])

        cell.remove_options(Direction.UP, EdgeLabel("road", "a"))

        assert cell.candidates == [1]

    def test_resolved_cell_is_untouched(self, grass_catalog):
        cell = Cell(position=Position(0, 0), catalog=grass_catalog, candidates=[0])
        cell.collapse(random.Random(1), Scene())

        assert cell.remove_options(Direction.UP, EdgeLabel("stone")) is False
        assert cell.resolved == 0
