"""tilestack/compiler.py: the full tile compilation pipeline.

Runs the four stages strictly in order, once per world load:

    LayerStack -> PerimeterData -> raw LedgeData -> superimposed LedgeData

Every stage is a pure function of the previous stage's output, so compiling
the same layers twice produces equal results.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from tilestack.config import DEFAULT_CONFIG, CompileConfig
from tilestack.layers import Layer, LayerStack, build_layer_stack
from tilestack.ledges import LedgeData, classify_ledges
from tilestack.perimeter import PerimeterData, compile_perimeters
from tilestack.superimpose import superimpose_ledges

log = logging.getLogger("tilestack.compiler")


@dataclass(frozen=True)
class CompiledWorld:
    """Read-only output of one world compilation."""

    stack: LayerStack
    perimeter: PerimeterData
    ledges: LedgeData
    config: CompileConfig = DEFAULT_CONFIG


def compile_stack(stack: LayerStack, config: Optional[CompileConfig] = None) -> CompiledWorld:
    """Compile an already validated layer stack."""
    config = config or DEFAULT_CONFIG
    start = time.perf_counter()

    perimeter = compile_perimeters(stack)
    log.info(
        "Traced %d tile groups across %d layers",
        sum(1 for _ in perimeter.tile_group_keys()), len(stack),
    )

    raw = classify_ledges(stack, perimeter, config)
    log.info("Classified %d ledge groups", sum(1 for _ in raw.iter_ledges()))

    ledges = superimpose_ledges(stack, raw, config)
    log.info(
        "Superimposed to %d ledge groups in %.1fms",
        sum(1 for _ in ledges.iter_ledges()), (time.perf_counter() - start) * 1000,
    )
    return CompiledWorld(stack=stack, perimeter=perimeter, ledges=ledges, config=config)


def compile_world(layers: Iterable[Layer], config: Optional[CompileConfig] = None) -> CompiledWorld:
    """Validate ``layers`` into a LayerStack and compile it.

    Raises:
        TileCompileError: INDEXES_NOT_A_SEQUENCE if the Z-indices are not
            0..N-1; INVARIANT_VIOLATION if compilation produced
            inconsistent geometry.
    """
    return compile_stack(build_layer_stack(layers), config)
