"""tilestack/perimeter.py: tile groups and their outer/hole boundary loops.

For every layer, occupied cells are split into 4-connected tile groups. Each
group's padded bounding box is then split into 4-connected void regions: the
region touching the padding is the outside, every other region is a hole.
A loop is the set of group-cell sides facing one void region, chained vertex
to vertex. Ids follow row-major discovery order, so compiling the same layer
twice yields the same ids and the same edge order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np
from scipy import ndimage

from tilestack.edges import SIDE_VECTORS, Cell, EdgeCollection, TileEdge, Winding, tile_edges
from tilestack.errors import invariant_violation
from tilestack.keys import EdgeCollKey, HoleGroupKey, TileGroupKey
from tilestack.layers import Layer, LayerStack, occupancy_grid

log = logging.getLogger("tilestack.perimeter")

_STRUCTURE_4 = np.array([[0, 1, 0],
                         [1, 1, 1],
                         [0, 1, 0]], dtype=int)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TileGroupPerimeter:
    """Cells and boundary loops of one tile group."""

    cells: tuple[Cell, ...]  # row-major
    outer: EdgeCollection
    holes: tuple[EdgeCollection, ...]

    @property
    def loops(self) -> tuple[EdgeCollection, ...]:
        return (self.outer,) + self.holes


@dataclass(frozen=True)
class PerimeterData:
    """Perimeters of every tile group on every layer, indexed by layer id."""

    layers: tuple[tuple[TileGroupPerimeter, ...], ...]

    def max_tile_groups(self, layer: int) -> int:
        if not 0 <= layer < len(self.layers):
            raise invariant_violation(f"No perimeter data for layer {layer}")
        return len(self.layers[layer])

    def max_hole_groups(self, layer: int, tile_group: int) -> int:
        return len(self.tile_group(layer, tile_group).holes)

    def tile_group(self, layer: int, tile_group: int) -> TileGroupPerimeter:
        if not 0 <= tile_group < self.max_tile_groups(layer):
            raise invariant_violation(f"No tile group {tile_group} on layer {layer}")
        return self.layers[layer][tile_group]

    def edge_collection(
        self, layer: int, tile_group: int, hole_group: Optional[int] = None,
    ) -> EdgeCollection:
        """Outer loop when hole_group is None, otherwise that hole's loop."""
        group = self.tile_group(layer, tile_group)
        if hole_group is None:
            return group.outer
        if not 0 <= hole_group < len(group.holes):
            raise invariant_violation(
                f"No hole group {hole_group} in tile group {tile_group} on layer {layer}"
            )
        return group.holes[hole_group]

    def loops(self, layer: int, tile_group: int) -> tuple[EdgeCollection, ...]:
        return self.tile_group(layer, tile_group).loops

    def tile_group_cells(self, layer: int, tile_group: int) -> tuple[Cell, ...]:
        return self.tile_group(layer, tile_group).cells

    def layer_keys(self) -> Iterator[TileGroupKey]:
        """One key per layer; tile group ids hang off it."""
        for layer in range(len(self.layers)):
            yield TileGroupKey(layer)

    def tile_group_keys(self) -> Iterator[HoleGroupKey]:
        """One key per tile group; hole group ids hang off it."""
        for layer, groups in enumerate(self.layers):
            for tile_group in range(len(groups)):
                yield HoleGroupKey(layer, tile_group)

    def keys(self) -> Iterator[EdgeCollKey]:
        for layer, groups in enumerate(self.layers):
            for tile_group, group in enumerate(groups):
                yield EdgeCollKey(layer, tile_group, None)
                for hole_group in range(len(group.holes)):
                    yield EdgeCollKey(layer, tile_group, hole_group)


# ---------------------------------------------------------------------------
# Loop tracing
# ---------------------------------------------------------------------------

def _trace_loop(edges: list[TileEdge]) -> EdgeCollection:
    """Chain one region's boundary edges into a closed loop.

    Starts from the edge whose origin cell comes first in row-major order.
    """
    if not edges:
        raise invariant_violation("Boundary loop has no edges")
    by_start: dict[tuple[int, int], TileEdge] = {}
    for edge in edges:
        if edge.a in by_start:
            raise invariant_violation(f"Two boundary edges leave vertex {edge.a}")
        by_start[edge.a] = edge

    first = min(edges, key=lambda e: e.sort_key)
    loop = [first]
    current = first
    while True:
        nxt = by_start.get(current.b)
        if nxt is None:
            raise invariant_violation(f"Boundary loop is broken at vertex {current.b}")
        if nxt == first:
            break
        loop.append(nxt)
        if len(loop) > len(edges):
            raise invariant_violation("Boundary loop revisits an edge")
        current = nxt

    if len(loop) != len(edges):
        raise invariant_violation(
            f"Boundary loop covers {len(loop)} of {len(edges)} region edges"
        )
    return EdgeCollection(tuple(loop))


def _check_winding(loop: EdgeCollection, expected: Winding) -> EdgeCollection:
    if loop.winding() is not expected:
        raise invariant_violation(
            f"Loop starting at {loop[0].a} winds {loop.winding().name}, "
            f"expected {expected.name}"
        )
    return loop


# ---------------------------------------------------------------------------
# Per-layer compilation
# ---------------------------------------------------------------------------

def _compile_tile_group(mask: np.ndarray, origin: Cell) -> TileGroupPerimeter:
    """Trace the loops of the single group marked in ``mask``.

    ``mask`` must carry at least one row/column of padding around the group.
    """
    rows, cols = np.nonzero(mask)
    r0, r1 = int(rows.min()) - 1, int(rows.max()) + 1
    c0, c1 = int(cols.min()) - 1, int(cols.max()) + 1
    sub = mask[r0:r1 + 1, c0:c1 + 1]
    ox, oy = origin[0] + c0, origin[1] + r0

    void_labels, void_count = ndimage.label(~sub, structure=_STRUCTURE_4)
    outside = int(void_labels[0, 0])
    hole_ids: dict[int, int] = {}
    for label in range(1, void_count + 1):
        if label != outside:
            hole_ids[label] = len(hole_ids)

    cells: list[Cell] = []
    outer_edges: list[TileEdge] = []
    hole_edges: list[list[TileEdge]] = [[] for _ in hole_ids]
    for r, c in np.argwhere(sub):
        r, c = int(r), int(c)
        cell = (ox + c, oy + r)
        cells.append(cell)
        for edge in tile_edges(cell):
            dx, dy = SIDE_VECTORS[edge.side]
            label = int(void_labels[r + dy, c + dx])
            if label == 0:
                continue  # neighbour belongs to the group
            if label == outside:
                outer_edges.append(edge)
            else:
                hole_edges[hole_ids[label]].append(edge)

    outer = _check_winding(_trace_loop(outer_edges), Winding.CLOCKWISE)
    holes = tuple(
        _check_winding(_trace_loop(edges), Winding.COUNTER_CLOCKWISE)
        for edges in hole_edges
    )
    return TileGroupPerimeter(cells=tuple(cells), outer=outer, holes=holes)


def compile_layer_perimeters(layer: Layer) -> tuple[TileGroupPerimeter, ...]:
    """Tile groups of one layer, in row-major discovery order."""
    grid, origin = occupancy_grid(layer, pad=1)
    labels, count = ndimage.label(grid, structure=_STRUCTURE_4)
    return tuple(
        _compile_tile_group(labels == label, origin)
        for label in range(1, count + 1)
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compile_perimeters(stack: LayerStack) -> PerimeterData:
    """Find tile groups and trace outer and hole loops for every layer."""
    layers = []
    for layer_id in stack.layer_ids():
        groups = compile_layer_perimeters(stack.get(layer_id))
        log.debug(
            "Layer %d: %d tile groups, %d holes",
            layer_id, len(groups), sum(len(g.holes) for g in groups),
        )
        layers.append(groups)
    return PerimeterData(layers=tuple(layers))
