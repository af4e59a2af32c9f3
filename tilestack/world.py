"""tilestack/world.py: world description files.

A world file is YAML (JSON works too, being valid YAML)::

    name: courtyard
    config:
      layer_offset: [0, 0]
      tile_size: [16, 16]
    layers:
      - z_index: 0
        rows:
          - "#####"
          - "#...#"
          - "#####"
      - z_index: 1
        cells: [[2, 1]]

A layer lists either ``rows`` (ASCII, with optional ``origin`` and ``solid``
characters) or explicit ``cells``. Stack validity (dense Z-indices) is not
checked here; that happens in build_layer_stack.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from tilestack.config import DEFAULT_CONFIG, CompileConfig, parse_config
from tilestack.layers import Layer, layer_from_rows

log = logging.getLogger("tilestack.world")


@dataclass
class WorldDescription:
    name: str
    layers: list[Layer]
    config: CompileConfig = field(default_factory=lambda: DEFAULT_CONFIG)


def _parse_cell(value, where: str) -> tuple[int, int]:
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    ):
        raise ValueError(f"{where}: cell {value!r} must be a pair of integers")
    return (value[0], value[1])


def _parse_layer(data: dict, i: int) -> Layer:
    """Parse one entry of the ``layers`` list."""
    where = f"Layer {i}"
    if not isinstance(data, dict):
        raise ValueError(f"{where}: must be a mapping")
    z_index = data.get("z_index")
    if not isinstance(z_index, int) or isinstance(z_index, bool):
        raise ValueError(f"{where}: 'z_index' must be an integer")
    name = str(data.get("name", ""))

    has_rows = "rows" in data
    has_cells = "cells" in data
    if has_rows == has_cells:
        raise ValueError(f"{where}: give exactly one of 'rows' or 'cells'")

    if has_rows:
        rows = data["rows"]
        if not isinstance(rows, list) or not all(isinstance(r, str) for r in rows):
            raise ValueError(f"{where}: 'rows' must be a list of strings")
        origin = _parse_cell(data.get("origin", [0, 0]), where)
        solid = data.get("solid", "#")
        if not isinstance(solid, str) or not solid:
            raise ValueError(f"{where}: 'solid' must be a non-empty string")
        return layer_from_rows(z_index, rows, origin=origin, solid=solid, name=name)

    cells = data["cells"]
    if not isinstance(cells, list):
        raise ValueError(f"{where}: 'cells' must be a list of [x, y] pairs")
    return Layer(
        z_index=z_index,
        cells=frozenset(_parse_cell(c, where) for c in cells),
        name=name,
    )


def parse_world(data: dict, default_name: str = "world") -> WorldDescription:
    """Parse a raw world dict into a WorldDescription."""
    if not isinstance(data, dict):
        raise ValueError("World description must be a mapping")
    layers = data.get("layers")
    if not isinstance(layers, list):
        raise ValueError("World description must contain a 'layers' list")
    return WorldDescription(
        name=str(data.get("name", default_name)),
        layers=[_parse_layer(entry, i) for i, entry in enumerate(layers)],
        config=parse_config(data.get("config")),
    )


def load_world(path: Path | str) -> WorldDescription:
    """Load a world description from a YAML or JSON file."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)
    world = parse_world(data, default_name=path.stem)
    log.info("Loaded world %r with %d layers from %s", world.name, len(world.layers), path)
    return world
