"""tilestack/ledges.py: wall/passable classification and ledge grouping.

Every boundary edge of a tile group either drops onto a lower layer
(PASSABLE) or borders the void (WALL). Walking each loop in order, maximal
runs of WALL edges become ledge groups; PASSABLE edges only separate runs.

Example: a lone tile with a lower tile to its east and another to its west
has two ledge groups (north and south), not one, because its walls are not
adjacent to each other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from tilestack.config import DEFAULT_CONFIG, CompileConfig
from tilestack.edges import EdgeCollection, TileEdge, adjacent
from tilestack.errors import invariant_violation
from tilestack.keys import LedgeCollKey, hole_group_of, loop_index
from tilestack.layers import LayerStack
from tilestack.perimeter import PerimeterData

log = logging.getLogger("tilestack.ledges")


class EdgeKind(Enum):
    WALL = "wall"
    PASSABLE = "passable"


LoopLedges = tuple[tuple[EdgeCollection, ...], ...]
"""Ledge groups of one loop, indexed by (super_layer - layer)."""


# ---------------------------------------------------------------------------
# LedgeData
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LedgeData:
    """Ledge groups keyed by (layer, tile group, hole group, super layer).

    ``layers[layer][tile_group][loop][super_layer - layer]`` holds the ledge
    collections, where loop 0 is the outer loop and loop h + 1 is hole h.
    Entries with super_layer == layer are the layer's own walls; the others
    are superimposed copies.
    """

    layers: tuple[tuple[tuple[LoopLedges, ...], ...], ...]

    def max_tile_groups(self, layer: int) -> int:
        if not 0 <= layer < len(self.layers):
            raise invariant_violation(f"No ledge data for layer {layer}")
        return len(self.layers[layer])

    def max_hole_groups(self, layer: int, tile_group: int) -> int:
        return len(self._tile_group(layer, tile_group)) - 1

    def max_ledge_groups(
        self,
        layer: int,
        tile_group: int,
        hole_group: Optional[int],
        super_layer: Optional[int] = None,
    ) -> int:
        supers = self._loop(layer, tile_group, hole_group)
        offset = self._super_offset(layer, super_layer)
        if offset >= len(supers):
            return 0
        return len(supers[offset])

    def ledge_collection(
        self,
        layer: int,
        tile_group: int,
        hole_group: Optional[int],
        ledge_group: int,
        super_layer: Optional[int] = None,
    ) -> EdgeCollection:
        supers = self._loop(layer, tile_group, hole_group)
        offset = self._super_offset(layer, super_layer)
        if offset >= len(supers) or not 0 <= ledge_group < len(supers[offset]):
            raise invariant_violation(
                f"No ledge group {LedgeCollKey(layer, tile_group, hole_group, layer + offset, ledge_group)}"
            )
        return supers[offset][ledge_group]

    def super_layers(self, layer: int, tile_group: int, hole_group: Optional[int]) -> list[int]:
        """Super layers that hold at least one ledge group of this loop."""
        supers = self._loop(layer, tile_group, hole_group)
        return [layer + offset for offset, groups in enumerate(supers) if groups]

    def iter_ledges(self, super_layer: Optional[int] = None) -> Iterator[tuple[LedgeCollKey, EdgeCollection]]:
        """Every ledge collection in key order, optionally for one super layer."""
        for layer, groups in enumerate(self.layers):
            for tile_group, loops in enumerate(groups):
                for loop, supers in enumerate(loops):
                    for offset, ledges in enumerate(supers):
                        if super_layer is not None and layer + offset != super_layer:
                            continue
                        for ledge_group, coll in enumerate(ledges):
                            key = LedgeCollKey(
                                layer, tile_group, hole_group_of(loop), layer + offset, ledge_group,
                            )
                            yield key, coll

    def _tile_group(self, layer: int, tile_group: int) -> tuple[LoopLedges, ...]:
        if not 0 <= tile_group < self.max_tile_groups(layer):
            raise invariant_violation(f"No tile group {tile_group} on layer {layer}")
        return self.layers[layer][tile_group]

    def _loop(self, layer: int, tile_group: int, hole_group: Optional[int]) -> LoopLedges:
        loops = self._tile_group(layer, tile_group)
        index = loop_index(hole_group)
        if hole_group is not None and not 0 <= hole_group < len(loops) - 1:
            raise invariant_violation(
                f"No hole group {hole_group} in tile group {tile_group} on layer {layer}"
            )
        return loops[index]

    def _super_offset(self, layer: int, super_layer: Optional[int]) -> int:
        if super_layer is None:
            return 0
        if not layer <= super_layer < len(self.layers):
            raise invariant_violation(
                f"Super layer {super_layer} is not between layer {layer} and the top layer"
            )
        return super_layer - layer


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify_edge(
    stack: LayerStack,
    layer_id: int,
    edge: TileEdge,
    config: CompileConfig = DEFAULT_CONFIG,
) -> EdgeKind:
    """PASSABLE if some lower layer has a tile next to the edge's origin cell.

    Lower layers are searched from the one just below down to layer 0, so an
    entity walking off the edge lands on the highest floor below it. The
    edge's own layer is never consulted.
    """
    for lower in range(layer_id - 1, -1, -1):
        below = config.project(edge.tile, layer_id, lower)
        target = adjacent(below, edge.side)
        if stack.get(lower).is_occupied(*target):
            return EdgeKind.PASSABLE
    return EdgeKind.WALL


def _wall_runs(loop: EdgeCollection, kinds: list[EdgeKind]) -> tuple[EdgeCollection, ...]:
    """Maximal runs of WALL edges, wrapping across the loop's start."""
    if EdgeKind.PASSABLE not in kinds:
        return (loop,)
    n = len(loop)
    first_passable = kinds.index(EdgeKind.PASSABLE)
    runs: list[EdgeCollection] = []
    current: list[TileEdge] = []
    # Ends on first_passable itself, which flushes the last run
    for step in range(1, n + 1):
        i = (first_passable + step) % n
        if kinds[i] is EdgeKind.WALL:
            current.append(loop[i])
        elif current:
            runs.append(EdgeCollection(tuple(current)))
            current = []
    return tuple(runs)


def classify_ledges(
    stack: LayerStack,
    perimeter: PerimeterData,
    config: CompileConfig = DEFAULT_CONFIG,
) -> LedgeData:
    """Group each loop's WALL edges into ledge groups, per layer only.

    The result holds only super_layer == layer entries; pass it to
    superimpose_ledges for the cross-layer copies.
    """
    layers = []
    for layer_id in stack.layer_ids():
        groups = []
        walls = passable = 0
        for tile_group in range(perimeter.max_tile_groups(layer_id)):
            loops = []
            for loop in perimeter.loops(layer_id, tile_group):
                kinds = [classify_edge(stack, layer_id, edge, config) for edge in loop]
                passable += kinds.count(EdgeKind.PASSABLE)
                walls += kinds.count(EdgeKind.WALL)
                loops.append((_wall_runs(loop, kinds),))
            groups.append(tuple(loops))
        log.debug("Layer %d: %d wall edges, %d passable edges", layer_id, walls, passable)
        layers.append(tuple(groups))
    return LedgeData(layers=tuple(layers))
