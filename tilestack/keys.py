"""tilestack/keys.py: composite addresses into PerimeterData and LedgeData.

Layers are addressed by their integer id (== Z-index). ``hole_group`` is
None for a tile group's outer loop and 0..n-1 for its holes.
"""

from __future__ import annotations

from typing import NamedTuple, Optional


class TileGroupKey(NamedTuple):
    layer: int


class HoleGroupKey(NamedTuple):
    layer: int
    tile_group: int


class EdgeCollKey(NamedTuple):
    layer: int
    tile_group: int
    hole_group: Optional[int]


class LedgeGroupKey(NamedTuple):
    layer: int
    tile_group: int
    hole_group: Optional[int]
    super_layer: int


class LedgeCollKey(NamedTuple):
    layer: int
    tile_group: int
    hole_group: Optional[int]
    super_layer: int
    ledge_group: int


def loop_index(hole_group: Optional[int]) -> int:
    """Position of a loop within a tile group's loops (outer first)."""
    return 0 if hole_group is None else hole_group + 1


def hole_group_of(loop: int) -> Optional[int]:
    return None if loop == 0 else loop - 1
