"""Tests for tilestack/superimpose.py: copying ledges onto higher layers."""

from __future__ import annotations

from tilestack.config import CompileConfig
from tilestack.edges import Side, tile_edges
from tilestack.ledges import classify_ledges
from tilestack.perimeter import compile_perimeters
from tilestack.superimpose import is_occluded, superimpose_ledges

from tests.grids import cells_layer, empty_layer, single_cell, stack_of, strip


def _ledges(stack, config=None):
    config = config or CompileConfig()
    raw = classify_ledges(stack, compile_perimeters(stack), config)
    return superimpose_ledges(stack, raw, config)


# ---------------------------------------------------------------------------
# TestIsOccluded
# ---------------------------------------------------------------------------

class TestIsOccluded:
    def test_tile_directly_above(self):
        stack = stack_of(single_cell(0), single_cell(1))
        for edge in tile_edges((0, 0)):
            assert is_occluded(stack, edge, 0, 1)

    def test_tile_in_front(self):
        stack = stack_of(single_cell(0), cells_layer(1, (1, 0)))
        north, east, south, west = tile_edges((0, 0))
        assert is_occluded(stack, east, 0, 1)
        assert not is_occluded(stack, west, 0, 1)
        assert not is_occluded(stack, north, 0, 1)

    def test_tile_behind_does_not_occlude(self):
        stack = stack_of(single_cell(0), cells_layer(1, (-1, 0)))
        east = tile_edges((0, 0))[Side.EAST]
        assert not is_occluded(stack, east, 0, 1)

    def test_layer_offset(self):
        config = CompileConfig(layer_offset=(-1, -1))
        stack = stack_of(cells_layer(0, (5, 5)), cells_layer(1, (4, 4)))
        north = tile_edges((5, 5))[Side.NORTH]
        assert is_occluded(stack, north, 0, 1, config)
        assert not is_occluded(stack, north, 0, 1)


# ---------------------------------------------------------------------------
# TestSuperimposeLedges
# ---------------------------------------------------------------------------

class TestSuperimposeLedges:
    def test_copied_to_every_unoccluded_layer(self):
        stack = stack_of(single_cell(0), empty_layer(1), empty_layer(2))
        ledges = _ledges(stack)
        assert ledges.super_layers(0, 0, None) == [0, 1, 2]
        for super_layer in (1, 2):
            copy = ledges.ledge_collection(0, 0, None, 0, super_layer)
            assert copy == ledges.ledge_collection(0, 0, None, 0)

    def test_monotonic_stop(self):
        # Occluded at 2; layer 3 is clear but the ledge never reaches it
        stack = stack_of(
            single_cell(0),
            empty_layer(1),
            single_cell(2),
            cells_layer(3, (5, 5)),
        )
        ledges = _ledges(stack)
        assert ledges.max_ledge_groups(0, 0, None, super_layer=1) == 1
        assert ledges.max_ledge_groups(0, 0, None, super_layer=2) == 0
        assert ledges.max_ledge_groups(0, 0, None, super_layer=3) == 0
        assert ledges.super_layers(0, 0, None) == [0, 1]

    def test_raw_groups_kept(self):
        stack = stack_of(single_cell(0), single_cell(1))
        ledges = _ledges(stack)
        assert ledges.max_ledge_groups(0, 0, None) == 1
        assert len(ledges.ledge_collection(0, 0, None, 0)) == 4
        assert ledges.max_ledge_groups(0, 0, None, super_layer=1) == 0

    def test_partial_occlusion_splits_group(self):
        # Tiles in front of N(1,0) and S(1,0) cut the strip's loop in two
        stack = stack_of(strip(length=3), cells_layer(1, (1, -1), (1, 1)), empty_layer(2))
        ledges = _ledges(stack)
        assert ledges.max_ledge_groups(0, 0, None) == 1
        assert ledges.max_ledge_groups(0, 0, None, super_layer=1) == 2
        west = ledges.ledge_collection(0, 0, None, 0, super_layer=1)
        east = ledges.ledge_collection(0, 0, None, 1, super_layer=1)
        assert [(e.tile, e.side) for e in west] == [
            ((0, 0), Side.SOUTH), ((0, 0), Side.WEST), ((0, 0), Side.NORTH),
        ]
        assert [(e.tile, e.side) for e in east] == [
            ((2, 0), Side.NORTH), ((2, 0), Side.EAST), ((2, 0), Side.SOUTH),
        ]
        assert west.is_contiguous() and east.is_contiguous()

    def test_split_pieces_keep_propagating(self):
        stack = stack_of(strip(length=3), cells_layer(1, (1, -1), (1, 1)), empty_layer(2))
        ledges = _ledges(stack)
        assert ledges.max_ledge_groups(0, 0, None, super_layer=2) == 2
        assert (
            ledges.ledge_collection(0, 0, None, 1, super_layer=2)
            == ledges.ledge_collection(0, 0, None, 1, super_layer=1)
        )

    def test_single_edge_dropped_keeps_one_group(self):
        stack = stack_of(strip(length=3), cells_layer(1, (1, -1)))
        ledges = _ledges(stack)
        assert ledges.max_ledge_groups(0, 0, None, super_layer=1) == 1
        survivor = ledges.ledge_collection(0, 0, None, 0, super_layer=1)
        assert len(survivor) == 7
        assert survivor.is_contiguous()
        assert not survivor.is_closed()

    def test_copies_shifted_by_layer_offset(self):
        config = CompileConfig(layer_offset=(-1, -1))
        stack = stack_of(cells_layer(0, (5, 5)), empty_layer(1), empty_layer(2))
        ledges = _ledges(stack, config)
        raw = ledges.ledge_collection(0, 0, None, 0)
        assert raw[0].a == (5, 5)
        assert ledges.ledge_collection(0, 0, None, 0, super_layer=1)[0].a == (4, 4)
        assert ledges.ledge_collection(0, 0, None, 0, super_layer=2)[0].a == (3, 3)

    def test_upper_layers_keep_own_ledges(self):
        stack = stack_of(single_cell(0), single_cell(1, cell=(3, 3)))
        ledges = _ledges(stack)
        assert ledges.max_ledge_groups(1, 0, None) == 1
        keys = [key for key, _ in ledges.iter_ledges(super_layer=1)]
        assert [(k.layer, k.super_layer) for k in keys] == [(0, 1), (1, 1)]

    def test_deterministic(self):
        stack = stack_of(strip(length=3), cells_layer(1, (1, -1), (1, 1)), empty_layer(2))
        assert _ledges(stack) == _ledges(stack)
