"""tilestack/edges.py: tile edges and ordered edge collections.

Grid conventions: cells are addressed by (tx, ty), vertices by integer grid
points, and y grows downward. Every edge is directed so that the cell it came
from lies on the right-hand side of travel. Perimeters traced with this rule
wind clockwise around tile groups and counter-clockwise around holes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, Iterator, Sequence

from tilestack.errors import invariant_violation

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

Cell = tuple[int, int]
Vertex = tuple[int, int]

QUAD_VERTICES = 4


class Side(IntEnum):
    """Side of a cell, in clockwise order starting north."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


class Orientation(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Winding(Enum):
    CLOCKWISE = "clockwise"  # tile group outer loops
    COUNTER_CLOCKWISE = "counter_clockwise"  # hole loops


SIDE_VECTORS: dict[Side, tuple[int, int]] = {
    Side.NORTH: (0, -1),
    Side.EAST: (1, 0),
    Side.SOUTH: (0, 1),
    Side.WEST: (-1, 0),
}

SIDE_ORIENTATION: dict[Side, Orientation] = {
    Side.NORTH: Orientation.HORIZONTAL,
    Side.EAST: Orientation.VERTICAL,
    Side.SOUTH: Orientation.HORIZONTAL,
    Side.WEST: Orientation.VERTICAL,
}


def adjacent(cell: Cell, side: Side) -> Cell:
    """Return the cell next to ``cell`` across ``side``."""
    dx, dy = SIDE_VECTORS[side]
    return (cell[0] + dx, cell[1] + dy)


# ---------------------------------------------------------------------------
# TileEdge
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TileEdge:
    """One side of one cell, directed with the cell on its right."""

    a: Vertex
    b: Vertex
    orientation: Orientation
    tile: Cell  # cell the edge came from
    side: Side  # side of that cell the edge lies on

    def __post_init__(self) -> None:
        dx = self.b[0] - self.a[0]
        dy = self.b[1] - self.a[1]
        if self.orientation is Orientation.HORIZONTAL:
            consistent = dy == 0 and dx != 0
        else:
            consistent = dx == 0 and dy != 0
        if not consistent or SIDE_ORIENTATION[self.side] is not self.orientation:
            raise invariant_violation(
                f"Edge {self.a}->{self.b} on {self.side.name} side of {self.tile} "
                f"is tagged {self.orientation.name}"
            )

    @property
    def direction(self) -> tuple[int, int]:
        dx = self.b[0] - self.a[0]
        dy = self.b[1] - self.a[1]
        return ((dx > 0) - (dx < 0), (dy > 0) - (dy < 0))

    @property
    def sort_key(self) -> tuple[int, int, int]:
        """Row-major position of the origin cell, then side."""
        return (self.tile[1], self.tile[0], int(self.side))

    def outward_cell(self) -> Cell:
        """The cell on the other side of this edge."""
        return adjacent(self.tile, self.side)

    def shifted(self, dx: int, dy: int) -> TileEdge:
        """Copy of this edge translated by (dx, dy) cells."""
        if dx == 0 and dy == 0:
            return self
        return TileEdge(
            a=(self.a[0] + dx, self.a[1] + dy),
            b=(self.b[0] + dx, self.b[1] + dy),
            orientation=self.orientation,
            tile=(self.tile[0] + dx, self.tile[1] + dy),
            side=self.side,
        )


def cell_quad(cell: Cell) -> list[Vertex]:
    """Corner vertices of a cell, clockwise from the top-left corner."""
    x, y = cell
    return [(x, y), (x + 1, y), (x + 1, y + 1), (x, y + 1)]


def edges_from_quad(vertices: Sequence[Vertex], cell: Cell) -> tuple[TileEdge, ...]:
    """Build the four clockwise edges of a cell from its corner vertices.

    Returned in Side order (N, E, S, W).
    """
    if len(vertices) != QUAD_VERTICES:
        raise invariant_violation(
            f"Cell {cell} quad has {len(vertices)} vertices, expected {QUAD_VERTICES}"
        )
    edges = []
    for side in Side:
        a = vertices[int(side)]
        b = vertices[(int(side) + 1) % QUAD_VERTICES]
        edges.append(TileEdge(a=a, b=b, orientation=SIDE_ORIENTATION[side], tile=cell, side=side))
    return tuple(edges)


def tile_edges(cell: Cell) -> tuple[TileEdge, ...]:
    return edges_from_quad(cell_quad(cell), cell)


# ---------------------------------------------------------------------------
# EdgeCollection
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EdgeCollection:
    """An ordered, immutable sequence of tile edges.

    Perimeters are closed loops. Ledge runs are contiguous and closed only
    when a run covers an entire loop.
    """

    edges: tuple[TileEdge, ...] = ()

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self) -> Iterator[TileEdge]:
        return iter(self.edges)

    def __getitem__(self, i: int) -> TileEdge:
        return self.edges[i]

    def is_contiguous(self) -> bool:
        return all(prev.b == cur.a for prev, cur in zip(self.edges, self.edges[1:]))

    def is_closed(self) -> bool:
        """True if non-empty, contiguous and ending where it starts."""
        if not self.edges:
            return False
        return self.is_contiguous() and self.edges[-1].b == self.edges[0].a

    def vertices(self) -> list[Vertex]:
        """Every vertex along the collection; a closed loop repeats its start."""
        if not self.edges:
            return []
        return [e.a for e in self.edges] + [self.edges[-1].b]

    def signed_area(self) -> int:
        """Shoelace area of a closed loop in y-down grid coordinates.

        Positive for clockwise (outer) loops, negative for hole loops.
        """
        if not self.is_closed():
            raise invariant_violation("Signed area requested for an open edge collection")
        twice = 0
        for e in self.edges:
            twice += e.a[0] * e.b[1] - e.b[0] * e.a[1]
        return twice // 2

    def winding(self) -> Winding:
        area = self.signed_area()
        if area == 0:
            raise invariant_violation("Closed edge collection encloses no area")
        return Winding.CLOCKWISE if area > 0 else Winding.COUNTER_CLOCKWISE

    def simplified_vertices(self) -> list[Vertex]:
        """Corner vertices only, with collinear edges merged.

        The last vertex equals the first iff the collection is closed.
        """
        if not self.edges:
            return []
        if not self.is_contiguous():
            raise invariant_violation("Cannot simplify a non-contiguous edge collection")
        n = len(self.edges)
        if not self.is_closed():
            verts = [self.edges[0].a]
            for i in range(1, n):
                if self.edges[i].direction != self.edges[i - 1].direction:
                    verts.append(self.edges[i].a)
            verts.append(self.edges[-1].b)
            return verts

        # Start from a corner so the first vertex is not mid-segment
        start = next(
            i for i in range(n) if self.edges[i].direction != self.edges[i - 1].direction
        )
        verts = []
        for j in range(n):
            i = (start + j) % n
            if self.edges[i].direction != self.edges[i - 1].direction:
                verts.append(self.edges[i].a)
        verts.append(verts[0])
        return verts

    def shifted(self, dx: int, dy: int) -> EdgeCollection:
        if dx == 0 and dy == 0:
            return self
        return EdgeCollection(tuple(e.shifted(dx, dy) for e in self.edges))


def split_contiguous(edges: Iterable[TileEdge], wrap: bool = False) -> list[EdgeCollection]:
    """Split ordered edges into maximal contiguous runs.

    With ``wrap``, a final run that ends where the first run starts is joined
    onto the front of it, so a run crossing the start of a loop stays whole.
    """
    runs: list[list[TileEdge]] = []
    for edge in edges:
        if runs and runs[-1][-1].b == edge.a:
            runs[-1].append(edge)
        else:
            runs.append([edge])
    if wrap and len(runs) > 1 and runs[-1][-1].b == runs[0][0].a:
        runs[0] = runs.pop() + runs[0]
    return [EdgeCollection(tuple(run)) for run in runs]
