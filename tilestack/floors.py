"""tilestack/floors.py: floor-detection regions as shapely polygons.

Each tile group becomes one polygon whose shell is the group's outer loop
and whose interiors are its hole loops. A physics backend can register these
as floor areas; ``floor_at`` answers "which floor is this point on" directly.
"""

from __future__ import annotations

from typing import Optional, Sequence

from shapely.geometry import Point, Polygon

from tilestack.compiler import CompiledWorld
from tilestack.config import CompileConfig
from tilestack.edges import EdgeCollection
from tilestack.perimeter import PerimeterData


def _scaled_ring(coll: EdgeCollection, config: CompileConfig) -> list[tuple[float, float]]:
    sx, sy = config.tile_size
    return [(x * sx, y * sy) for x, y in coll.simplified_vertices()]


def tile_group_polygon(
    perimeter: PerimeterData,
    layer: int,
    tile_group: int,
    config: CompileConfig,
) -> Polygon:
    outer, *holes = perimeter.loops(layer, tile_group)
    return Polygon(
        _scaled_ring(outer, config),
        [_scaled_ring(hole, config) for hole in holes],
    )


def build_floor_polygons(world: CompiledWorld) -> tuple[tuple[Polygon, ...], ...]:
    """One polygon per tile group, indexed [layer][tile_group]."""
    return tuple(
        tuple(
            tile_group_polygon(world.perimeter, key.layer, tile_group, world.config)
            for tile_group in range(world.perimeter.max_tile_groups(key.layer))
        )
        for key in world.perimeter.layer_keys()
    )


def floor_at(
    floors: Sequence[Sequence[Polygon]],
    layer: int,
    x: float,
    y: float,
) -> Optional[int]:
    """Tile group on ``layer`` covering world point (x, y), if any.

    Points on a floor's boundary count as on the floor.
    """
    point = Point(x, y)
    for tile_group, polygon in enumerate(floors[layer]):
        if polygon.covers(point):
            return tile_group
    return None
