"""tilestack/config.py: compile settings shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompileConfig:
    """Projection and scale settings.

    layer_offset: cell shift of a tile one layer up relative to the tile it
        sits on. (0, 0) keeps all layers on the same planar grid; isometric
        maps that draw each height one cell up-left use (-1, -1).
    tile_size: world units per cell along x and y, used when exporting
        segments and floor polygons.
    """

    layer_offset: tuple[int, int] = (0, 0)
    tile_size: tuple[float, float] = (1.0, 1.0)

    def project(self, cell: tuple[int, int], from_layer: int, to_layer: int) -> tuple[int, int]:
        """Cell on ``to_layer`` stacked directly above or below ``cell``."""
        steps = to_layer - from_layer
        return (cell[0] + steps * self.layer_offset[0], cell[1] + steps * self.layer_offset[1])


DEFAULT_CONFIG = CompileConfig()


def _int_pair(value, name: str) -> tuple[int, int]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"'{name}' must be a pair of integers")
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
        raise ValueError(f"'{name}' must be a pair of integers")
    return (value[0], value[1])


def _positive_pair(value, name: str) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"'{name}' must be a pair of positive numbers")
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) and v > 0 for v in value):
        raise ValueError(f"'{name}' must be a pair of positive numbers")
    return (float(value[0]), float(value[1]))


def parse_config(data: dict | None) -> CompileConfig:
    """Build a CompileConfig from a raw dict (the world file's ``config:``)."""
    if data is None:
        return DEFAULT_CONFIG
    if not isinstance(data, dict):
        raise ValueError("'config' must be a mapping")
    unknown = set(data) - {"layer_offset", "tile_size"}
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")
    return CompileConfig(
        layer_offset=_int_pair(data.get("layer_offset", [0, 0]), "layer_offset"),
        tile_size=_positive_pair(data.get("tile_size", [1, 1]), "tile_size"),
    )
