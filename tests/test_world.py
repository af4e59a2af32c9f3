"""Tests for tilestack/world.py: world description parsing and loading."""

from __future__ import annotations

import json

import pytest

from tilestack.config import DEFAULT_CONFIG, CompileConfig
from tilestack.world import load_world, parse_world

COURTYARD_YAML = """\
name: courtyard
config:
  layer_offset: [-1, -1]
  tile_size: [16, 16]
layers:
  - z_index: 0
    rows:
      - "###"
      - "#.#"
      - "###"
  - z_index: 1
    name: pillar
    cells: [[1, 1]]
"""


class TestParseWorld:
    def test_rows_and_cells(self):
        world = parse_world({
            "layers": [
                {"z_index": 0, "rows": ["##"]},
                {"z_index": 1, "cells": [[4, 5]]},
            ],
        })
        assert world.name == "world"
        assert world.layers[0].cells == frozenset({(0, 0), (1, 0)})
        assert world.layers[1].cells == frozenset({(4, 5)})
        assert world.config is DEFAULT_CONFIG

    def test_rows_with_origin_and_solid(self):
        world = parse_world({
            "layers": [{"z_index": 0, "rows": ["x.x"], "origin": [2, 3], "solid": "x"}],
        })
        assert world.layers[0].cells == frozenset({(2, 3), (4, 3)})

    def test_indices_not_validated_here(self):
        world = parse_world({"layers": [{"z_index": 3, "cells": []}]})
        assert world.layers[0].z_index == 3

    def test_both_rows_and_cells(self):
        with pytest.raises(ValueError, match="exactly one"):
            parse_world({"layers": [{"z_index": 0, "rows": ["#"], "cells": [[0, 0]]}]})

    def test_neither_rows_nor_cells(self):
        with pytest.raises(ValueError, match="Layer 0"):
            parse_world({"layers": [{"z_index": 0}]})

    def test_missing_z_index(self):
        with pytest.raises(ValueError, match="z_index"):
            parse_world({"layers": [{"rows": ["#"]}]})

    def test_bool_z_index_rejected(self):
        with pytest.raises(ValueError, match="z_index"):
            parse_world({"layers": [{"z_index": True, "rows": ["#"]}]})

    def test_bad_cell(self):
        with pytest.raises(ValueError, match="Layer 1"):
            parse_world({
                "layers": [
                    {"z_index": 0, "cells": [[0, 0]]},
                    {"z_index": 1, "cells": [[0, 0, 0]]},
                ],
            })

    def test_missing_layers(self):
        with pytest.raises(ValueError, match="layers"):
            parse_world({"name": "empty"})

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            parse_world(["layers"])


class TestLoadWorld:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "courtyard.yaml"
        path.write_text(COURTYARD_YAML)
        world = load_world(path)
        assert world.name == "courtyard"
        assert len(world.layers) == 2
        assert world.layers[1].name == "pillar"
        assert world.config == CompileConfig(layer_offset=(-1, -1), tile_size=(16.0, 16.0))

    def test_load_json(self, tmp_path):
        path = tmp_path / "plain.json"
        path.write_text(json.dumps({"layers": [{"z_index": 0, "cells": [[0, 0]]}]}))
        world = load_world(path)
        assert world.name == "plain"
        assert world.layers[0].cells == frozenset({(0, 0)})

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_world(tmp_path / "nope.yaml")
