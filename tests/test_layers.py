"""Tests for tilestack/layers.py: Layer and LayerStack validation."""

from __future__ import annotations

import numpy as np
import pytest

from tilestack.errors import ErrorKind, TileCompileError
from tilestack.layers import Layer, build_layer_stack, layer_from_rows, occupancy_grid

from tests.grids import cells_layer, empty_layer, ring


# ---------------------------------------------------------------------------
# TestLayer
# ---------------------------------------------------------------------------

class TestLayer:
    def test_cells_coerced_to_frozenset(self):
        layer = Layer(z_index=0, cells={(1, 2)})
        assert isinstance(layer.cells, frozenset)
        assert layer.is_occupied(1, 2)
        assert not layer.is_occupied(2, 1)

    def test_layer_from_rows(self):
        layer = layer_from_rows(3, ["#.", ".#"], origin=(10, 20))
        assert layer.z_index == 3
        assert layer.cells == frozenset({(10, 20), (11, 21)})

    def test_layer_from_rows_custom_solid(self):
        layer = layer_from_rows(0, ["ab.", "..b"], solid="ab")
        assert layer.cells == frozenset({(0, 0), (1, 0), (2, 1)})

    def test_bounds(self):
        assert ring(size=4, origin=(2, 3)).bounds() == (2, 3, 5, 6)

    def test_empty_bounds(self):
        assert empty_layer(0).bounds() is None


# ---------------------------------------------------------------------------
# TestOccupancyGrid
# ---------------------------------------------------------------------------

class TestOccupancyGrid:
    def test_padding_and_origin(self):
        grid, origin = occupancy_grid(cells_layer(0, (5, 7)), pad=1)
        assert grid.shape == (3, 3)
        assert origin == (4, 6)
        assert grid[1, 1]
        assert grid.sum() == 1

    def test_grid_indexing_matches_cells(self):
        layer = layer_from_rows(0, ["##", ".#"], origin=(-2, 0))
        grid, (ox, oy) = occupancy_grid(layer)
        for row, col in np.argwhere(grid):
            assert layer.is_occupied(ox + int(col), oy + int(row))
        assert int(grid.sum()) == len(layer.cells)

    def test_empty_layer(self):
        grid, _ = occupancy_grid(empty_layer(0))
        assert not grid.any()


# ---------------------------------------------------------------------------
# TestBuildLayerStack
# ---------------------------------------------------------------------------

class TestBuildLayerStack:
    def test_dense_sequence(self):
        stack = build_layer_stack([empty_layer(i) for i in range(4)])
        assert len(stack) == 4
        assert stack.last().z_index == 3
        assert [layer.z_index for layer in stack] == [0, 1, 2, 3]

    def test_orders_by_z_index(self):
        stack = build_layer_stack([empty_layer(2), empty_layer(0), empty_layer(1)])
        assert [layer.z_index for layer in stack] == [0, 1, 2]
        assert stack.get(1).z_index == 1

    def test_layer_ids(self):
        stack = build_layer_stack([empty_layer(0), empty_layer(1)])
        assert list(stack.layer_ids()) == [0, 1]

    def test_missing_index(self):
        with pytest.raises(TileCompileError) as exc_info:
            build_layer_stack([empty_layer(0), empty_layer(2)])
        err = exc_info.value
        assert err.kind is ErrorKind.INDEXES_NOT_A_SEQUENCE
        assert err.index == 1
        assert err.recoverable
        assert "Missing index: 1" in str(err)

    def test_missing_zero(self):
        with pytest.raises(TileCompileError) as exc_info:
            build_layer_stack([empty_layer(1), empty_layer(2)])
        assert exc_info.value.index == 0

    def test_duplicate_index(self):
        with pytest.raises(TileCompileError) as exc_info:
            build_layer_stack([empty_layer(0), empty_layer(1), empty_layer(1)])
        err = exc_info.value
        assert err.kind is ErrorKind.INDEXES_NOT_A_SEQUENCE
        assert err.index == 1
        assert "Duplicate index: 1" in str(err)

    def test_duplicate_reported_before_gap(self):
        with pytest.raises(TileCompileError) as exc_info:
            build_layer_stack([empty_layer(0), empty_layer(0), empty_layer(3)])
        assert "Duplicate" in str(exc_info.value)

    def test_empty_layer_set(self):
        with pytest.raises(TileCompileError) as exc_info:
            build_layer_stack([])
        assert exc_info.value.index == 0

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            build_layer_stack([empty_layer(1)])

    def test_get_out_of_range(self):
        stack = build_layer_stack([empty_layer(0)])
        with pytest.raises(IndexError):
            stack.get(1)
        with pytest.raises(IndexError):
            stack.get(-1)
