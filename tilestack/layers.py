"""tilestack/layers.py: tile layers and the validated, Z-ordered LayerStack.

A LayerStack holds one Layer per Z-index with no gaps: the layer at list
position i always has Z-index i. Ledge classification and superimposition
address layers by that index, so an invalid stack is rejected outright.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

import numpy as np

from tilestack.edges import Cell
from tilestack.errors import indexes_not_a_sequence

log = logging.getLogger("tilestack.layers")

# ---------------------------------------------------------------------------
# Layer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Layer:
    """One Z-indexed grid of tile occupancy."""

    z_index: int
    cells: frozenset[Cell] = field(default_factory=frozenset)
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.cells, frozenset):
            object.__setattr__(self, "cells", frozenset(self.cells))

    def is_occupied(self, tx: int, ty: int) -> bool:
        return (tx, ty) in self.cells

    def bounds(self) -> tuple[int, int, int, int] | None:
        """(min_x, min_y, max_x, max_y) of occupied cells, or None if empty."""
        if not self.cells:
            return None
        xs = [c[0] for c in self.cells]
        ys = [c[1] for c in self.cells]
        return min(xs), min(ys), max(xs), max(ys)


def layer_from_rows(
    z_index: int,
    rows: Sequence[str],
    origin: Cell = (0, 0),
    solid: str = "#",
    name: str = "",
) -> Layer:
    """Build a layer from ASCII rows; characters in ``solid`` are occupied.

    Row r, column c maps to cell (origin_x + c, origin_y + r).
    """
    ox, oy = origin
    cells = {
        (ox + tx, oy + ty)
        for ty, row in enumerate(rows)
        for tx, ch in enumerate(row)
        if ch in solid
    }
    return Layer(z_index=z_index, cells=frozenset(cells), name=name)


def occupancy_grid(layer: Layer, pad: int = 1) -> tuple[np.ndarray, Cell]:
    """Boolean occupancy array for a layer, padded with empty cells.

    Returns (grid, origin) where grid[row, col] is cell
    (origin_x + col, origin_y + row). An empty layer gives an all-False grid.
    """
    bounds = layer.bounds()
    if bounds is None:
        return np.zeros((2 * pad, 2 * pad), dtype=bool), (-pad, -pad)
    min_x, min_y, max_x, max_y = bounds
    width = max_x - min_x + 1 + 2 * pad
    height = max_y - min_y + 1 + 2 * pad
    grid = np.zeros((height, width), dtype=bool)
    for tx, ty in layer.cells:
        grid[ty - min_y + pad, tx - min_x + pad] = True
    return grid, (min_x - pad, min_y - pad)


# ---------------------------------------------------------------------------
# LayerStack
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LayerStack:
    """Layers in ascending Z order; position == Z-index == layer id."""

    layers: tuple[Layer, ...]

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    def get(self, i: int) -> Layer:
        if not 0 <= i < len(self.layers):
            raise IndexError(f"No layer with Z-index {i} (stack has {len(self.layers)})")
        return self.layers[i]

    def last(self) -> Layer:
        return self.layers[-1]

    def layer_ids(self) -> range:
        return range(len(self.layers))


def build_layer_stack(layers: Iterable[Layer]) -> LayerStack:
    """Validate and order layers by Z-index.

    Raises:
        TileCompileError: kind INDEXES_NOT_A_SEQUENCE if any Z-index in
            0..N-1 is duplicated or missing. Nothing is returned on failure.
    """
    layers = list(layers)
    counts = Counter(layer.z_index for layer in layers)
    duplicates = sorted(z for z, n in counts.items() if n > 1)
    if duplicates:
        raise indexes_not_a_sequence(
            f"LayerStack indices are not a sequence. Duplicate index: {duplicates[0]}",
            index=duplicates[0],
        )

    ordered = sorted(layers, key=lambda layer: layer.z_index)
    for expected, layer in enumerate(ordered):
        if layer.z_index != expected:
            raise indexes_not_a_sequence(
                f"LayerStack indices are not a sequence. Missing index: {expected}",
                index=expected,
            )
    if not ordered:
        raise indexes_not_a_sequence(
            "LayerStack indices are not a sequence. Missing index: 0", index=0,
        )

    log.debug("Built layer stack with %d layers", len(ordered))
    return LayerStack(layers=tuple(ordered))
