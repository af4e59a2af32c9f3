"""tilestack/segments.py: engine-neutral collision segments.

Turns compiled perimeters and ledges into the static segments a physics
backend registers:

    walls   one owner per layer: the loops of the layer above, projected
            down, so entities cannot walk into the side of a higher floor.
    ledges  one owner per (origin layer, super layer): wall runs that keep
            entities from walking off into the void.

Collinear edges are merged first, so a straight 10-cell wall is one segment.
"""

from __future__ import annotations

from dataclasses import dataclass

from tilestack.compiler import CompiledWorld
from tilestack.config import CompileConfig
from tilestack.edges import EdgeCollection

Point = tuple[float, float]


@dataclass(frozen=True)
class Segment:
    a: Point
    b: Point


@dataclass(frozen=True)
class CollisionPlan:
    walls: tuple[tuple[Segment, ...], ...]  # indexed by layer
    ledges: dict[tuple[int, int], tuple[Segment, ...]]  # (origin, super layer)

    def wall_segments(self, layer: int) -> tuple[Segment, ...]:
        return self.walls[layer]

    def ledge_segments(self, super_layer: int) -> list[Segment]:
        """Every ledge segment an entity on ``super_layer`` collides with."""
        segments: list[Segment] = []
        for (_, target), owned in sorted(self.ledges.items()):
            if target == super_layer:
                segments.extend(owned)
        return segments


def edge_collection_segments(
    coll: EdgeCollection,
    config: CompileConfig,
    shift: tuple[int, int] = (0, 0),
) -> list[Segment]:
    """Segments along ``coll`` after merging collinear edges, in world units."""
    sx, sy = config.tile_size
    verts = [
        ((x + shift[0]) * sx, (y + shift[1]) * sy)
        for x, y in coll.simplified_vertices()
    ]
    return [Segment(a, b) for a, b in zip(verts, verts[1:])]


def build_collision_plan(world: CompiledWorld) -> CollisionPlan:
    """Collect wall and ledge segments for every collision owner."""
    config = world.config
    perimeter = world.perimeter
    walls = []
    for layer in world.stack.layer_ids():
        segments: list[Segment] = []
        upper = layer + 1
        if upper < len(world.stack):
            shift = config.project((0, 0), upper, layer)
            for tile_group in range(perimeter.max_tile_groups(upper)):
                for loop in perimeter.loops(upper, tile_group):
                    segments.extend(edge_collection_segments(loop, config, shift))
        walls.append(tuple(segments))

    ledges: dict[tuple[int, int], list[Segment]] = {}
    for key, coll in world.ledges.iter_ledges():
        owner = (key.layer, key.super_layer)
        ledges.setdefault(owner, []).extend(edge_collection_segments(coll, config))

    return CollisionPlan(
        walls=tuple(walls),
        ledges={owner: tuple(segments) for owner, segments in ledges.items()},
    )
