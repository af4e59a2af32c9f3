"""tilestack: compile Z-ordered tile layers into perimeters, ledges and collision data."""

from tilestack.compiler import CompiledWorld, compile_stack, compile_world
from tilestack.config import DEFAULT_CONFIG, CompileConfig, parse_config
from tilestack.edges import EdgeCollection, Orientation, Side, TileEdge, Winding
from tilestack.errors import ErrorKind, TileCompileError
from tilestack.keys import (
    EdgeCollKey,
    HoleGroupKey,
    LedgeCollKey,
    LedgeGroupKey,
    TileGroupKey,
)
from tilestack.layers import Layer, LayerStack, build_layer_stack, layer_from_rows
from tilestack.ledges import EdgeKind, LedgeData, classify_ledges
from tilestack.perimeter import PerimeterData, compile_perimeters
from tilestack.superimpose import superimpose_ledges
from tilestack.world import WorldDescription, load_world, parse_world

__all__ = [
    "CompiledWorld",
    "compile_stack",
    "compile_world",
    "CompileConfig",
    "DEFAULT_CONFIG",
    "parse_config",
    "EdgeCollection",
    "Orientation",
    "Side",
    "TileEdge",
    "Winding",
    "ErrorKind",
    "TileCompileError",
    "TileGroupKey",
    "HoleGroupKey",
    "EdgeCollKey",
    "LedgeGroupKey",
    "LedgeCollKey",
    "Layer",
    "LayerStack",
    "build_layer_stack",
    "layer_from_rows",
    "EdgeKind",
    "LedgeData",
    "classify_ledges",
    "PerimeterData",
    "compile_perimeters",
    "superimpose_ledges",
    "WorldDescription",
    "load_world",
    "parse_world",
]
