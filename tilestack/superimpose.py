"""tilestack/superimpose.py: copy ledge walls onto every higher layer.

Entities only collide with walls registered on their own layer. Without
superimposition an entity could step off a tall pillar, drift sideways while
falling and pass over a lower island's ledge into the void. So every wall
edge of layer L is copied to layers L+1, L+2, ... until a higher layer
occludes it.

An edge is occluded on layer M when M has a tile either directly above the
edge's origin cell or next to that cell in the edge's direction. Occlusion is
permanent: an edge dropped at M is never tested or copied above M. When some
but not all edges of a ledge group are dropped, the survivors are regrouped
into contiguous runs, so the number of ledge groups can change from one
super layer to the next.
"""

from __future__ import annotations

import logging

from tilestack.config import DEFAULT_CONFIG, CompileConfig
from tilestack.edges import EdgeCollection, TileEdge, adjacent, split_contiguous
from tilestack.ledges import LedgeData, LoopLedges
from tilestack.layers import LayerStack

log = logging.getLogger("tilestack.superimpose")


def is_occluded(
    stack: LayerStack,
    edge: TileEdge,
    layer_id: int,
    super_layer: int,
    config: CompileConfig = DEFAULT_CONFIG,
) -> bool:
    """True if ``super_layer`` has a tile above or in front of ``edge``.

    ``edge`` is given in the coordinates of its origin layer ``layer_id``.
    """
    above = config.project(edge.tile, layer_id, super_layer)
    upper = stack.get(super_layer)
    return upper.is_occupied(*above) or upper.is_occupied(*adjacent(above, edge.side))


def _superimpose_loop(
    stack: LayerStack,
    layer_id: int,
    raw: tuple[EdgeCollection, ...],
    config: CompileConfig,
) -> LoopLedges:
    supers: list[tuple[EdgeCollection, ...]] = [raw]
    alive = [list(group) for group in raw]
    closed = [group.is_closed() for group in raw]

    for super_layer in range(layer_id + 1, len(stack)):
        dx, dy = config.project((0, 0), layer_id, super_layer)
        copies: list[EdgeCollection] = []
        for g, edges in enumerate(alive):
            if not edges:
                continue
            edges = [e for e in edges if not is_occluded(stack, e, layer_id, super_layer, config)]
            alive[g] = edges
            for run in split_contiguous(edges, wrap=closed[g]):
                copies.append(run.shifted(dx, dy))
        supers.append(tuple(copies))
    return tuple(supers)


def superimpose_ledges(
    stack: LayerStack,
    ledges: LedgeData,
    config: CompileConfig = DEFAULT_CONFIG,
) -> LedgeData:
    """Merge each layer's own ledge groups with their copies on higher layers.

    Only the super_layer == layer entries of ``ledges`` are read.
    """
    layers = []
    for layer_id in stack.layer_ids():
        groups = []
        copied = 0
        for tile_group in range(ledges.max_tile_groups(layer_id)):
            loops = []
            for supers in ledges.layers[layer_id][tile_group]:
                merged = _superimpose_loop(stack, layer_id, supers[0], config)
                copied += sum(len(c) for c in merged[1:])
                loops.append(merged)
            groups.append(tuple(loops))
        log.debug("Layer %d: %d ledge groups superimposed upward", layer_id, copied)
        layers.append(tuple(groups))
    return LedgeData(layers=tuple(layers))
