"""tilestack/output.py: console summary and JSON export of a compiled world."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path

from tilestack.compiler import CompiledWorld
from tilestack.edges import EdgeCollection

# ---------------------------------------------------------------------------
# TTY / color helpers
# ---------------------------------------------------------------------------

_GREEN = "\033[32m"
_RED = "\033[31m"
_RESET = "\033[0m"


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _colorize(text: str, color: str) -> str:
    if _is_tty():
        return f"{color}{text}{_RESET}"
    return text


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


def layer_summary(world: CompiledWorld, layer: int) -> dict:
    """Counts for one layer: tile groups, holes, own and inherited ledge groups."""
    perimeter = world.perimeter
    tile_groups = perimeter.max_tile_groups(layer)
    holes = sum(
        perimeter.max_hole_groups(*key)
        for key in perimeter.tile_group_keys()
        if key.layer == layer
    )
    own = inherited = 0
    for key, _ in world.ledges.iter_ledges(super_layer=layer):
        if key.layer == layer:
            own += 1
        else:
            inherited += 1
    return {
        "layer": layer,
        "tile_groups": tile_groups,
        "hole_groups": holes,
        "ledge_groups": own,
        "superimposed_ledge_groups": inherited,
    }


def print_summary(world: CompiledWorld, name: str = "world") -> None:
    """Print one line per layer, then a total line."""
    print(f"{name}: {len(world.stack)} layers")
    for layer in world.stack.layer_ids():
        s = layer_summary(world, layer)
        parts = [
            f"  z={layer:<3d}",
            f"{s['tile_groups']:>4d} tile groups",
            f"{s['hole_groups']:>4d} holes",
            f"{s['ledge_groups']:>4d} ledges",
            f"{s['superimposed_ledge_groups']:>4d} superimposed",
        ]
        print("  ".join(parts))
    total = sum(1 for _ in world.ledges.iter_ledges())
    print(_colorize(f"\ncompiled {total} ledge groups", _GREEN))


def print_error(message: str) -> None:
    print(_colorize(f"FAIL  {message}", _RED), file=sys.stderr)


# ---------------------------------------------------------------------------
# JSON serialization
# ---------------------------------------------------------------------------


def _coll_to_dict(coll: EdgeCollection) -> dict:
    return {
        "closed": coll.is_closed(),
        "edges": len(coll),
        "vertices": [list(v) for v in coll.simplified_vertices()],
    }


def compiled_to_dict(world: CompiledWorld, name: str = "world") -> dict:
    """Convert a compiled world to a JSON-serializable dict."""
    layers = []
    for layer in world.stack.layer_ids():
        groups = []
        for tg in range(world.perimeter.max_tile_groups(layer)):
            group = world.perimeter.tile_group(layer, tg)
            groups.append({
                "cells": [list(c) for c in group.cells],
                "outer": _coll_to_dict(group.outer),
                "holes": [_coll_to_dict(h) for h in group.holes],
            })
        layers.append({
            "z_index": layer,
            "name": world.stack.get(layer).name,
            "tile_groups": groups,
        })

    ledges = []
    for key, coll in world.ledges.iter_ledges():
        entry = key._asdict()
        entry.update(_coll_to_dict(coll))
        ledges.append(entry)

    return {
        "name": name,
        "config": asdict(world.config),
        "layers": layers,
        "ledges": ledges,
    }


def save_compiled(world: CompiledWorld, path: Path | str, name: str = "world") -> None:
    """Save a compiled world as a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(compiled_to_dict(world, name), indent=2) + "\n")
