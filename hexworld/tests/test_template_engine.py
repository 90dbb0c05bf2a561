"""Tests for the rule engine."""

import pytest

from hexworld.errors import HexWorldError, TemplateError
from hexworld.grid import HexGrid
from hexworld.hex_coords import HexPosition
from hexworld.schemas import TerrainType
from hexworld.template_engine import TemplateEngine, parse_template


RAISE_PLAINS = """
name: "Raise Plains"
description: "Lift plain cells to elevation 5"
rules:
  - name: "Lift"
    priority: 10
    conditions:
      - type: TerrainType
        terrain: Plain
    actions:
      - type: SetElevation
        params:
          elevation: 5
"""


def template_doc(name: str, rules: list[dict]) -> dict:
    return {"name": name, "description": "test", "rules": rules}


def set_terrain(terrain: str) -> dict:
    return {"type": "SetTerrain", "params": {"terrain": terrain}}


@pytest.fixture
def grid():
    grid = HexGrid()
    grid.add_cell(HexPosition(0, 0), TerrainType.PLAIN, 0)
    grid.add_cell(HexPosition(1, 0), TerrainType.PLAIN, 0)
    grid.add_cell(HexPosition(0, 1), TerrainType.ROUGH, 2)
    return grid


@pytest.fixture
def engine():
    engine = TemplateEngine()
    engine.load_template(RAISE_PLAINS)
    return engine


class TestLoadTemplate:
    def test_registers_by_name(self, engine):
        assert engine.template_names() == ["Raise Plains"]
        assert engine.get_template("Raise Plains").rules[0].name == "Lift"

    def test_accepts_mapping(self):
        engine = TemplateEngine()
        template = engine.load_template(template_doc("Mapped", []))
        assert template.name == "Mapped"
        assert len(engine) == 1

    def test_same_name_overwrites(self, engine):
        engine.load_template(template_doc("Raise Plains", []))
        assert len(engine) == 1
        assert engine.get_template("Raise Plains").rules == []

    @pytest.mark.parametrize("document", [
        "name: [unclosed",
        "- just\n- a list\n",
        "42",
        "",
        "name: T\ndescription: d\n",
        "name: T\ndescription: d\nrules:\n  - name: r\n    priority: 1\n    conditions:\n      - type: Teleport\n    actions: []\n",
        "name: T\ndescription: d\nrules:\n  - name: r\n    priority: high\n    conditions: []\n    actions: []\n",
    ])
    def test_malformed_documents(self, document):
        engine = TemplateEngine()
        with pytest.raises(TemplateError):
            engine.load_template(document)
        assert len(engine) == 0

    def test_nested_aliases_rejected(self):
        lines = [
            "name: Nested",
            "description: d",
            "defs:",
            "  - &l0 {type: TerrainType, terrain: Plain}",
        ]
        for level in range(1, 8):
            refs = ", ".join([f"*l{level - 1}"] * 10)
            lines.append(f"  - &l{level} {{type: And, conditions: [{refs}]}}")
        lines += [
            "rules:",
            "  - name: r",
            "    priority: 1",
            "    conditions: [*l7]",
            "    actions: []",
        ]

        engine = TemplateEngine()
        with pytest.raises(TemplateError) as excinfo:
            engine.load_template("\n".join(lines) + "\n")
        assert "alias" in str(excinfo.value)
        assert len(engine) == 0

    def test_anchor_without_alias_loads(self):
        engine = TemplateEngine()
        template = engine.load_template(
            "name: &title Anchored\ndescription: d\nrules: []\n"
        )
        assert template.name == "Anchored"

    def test_error_names_source(self):
        with pytest.raises(TemplateError) as excinfo:
            parse_template("name: [", source="broken.yaml")
        assert "broken.yaml" in str(excinfo.value)
        assert excinfo.value.source == "broken.yaml"
        assert isinstance(excinfo.value, HexWorldError)

    def test_failed_load_keeps_previous_template(self, engine):
        with pytest.raises(TemplateError):
            engine.load_template("name: Raise Plains\nrules: nope\n")
        assert engine.get_template("Raise Plains").rules[0].name == "Lift"


class TestApplyTemplate:
    def test_sets_elevation_on_plain(self, engine, grid):
        neighbor_before = grid.get_cell(HexPosition(1, 0))
        rough_before = grid.get_cell(HexPosition(0, 1))

        assert engine.apply_template("Raise Plains", grid, HexPosition(0, 0, 0))

        cell = grid.get_cell(HexPosition(0, 0))
        assert cell.elevation == 5
        assert cell.terrain == TerrainType.PLAIN
        assert grid.get_cell(HexPosition(1, 0)) == neighbor_before
        assert grid.get_cell(HexPosition(0, 1)) == rough_before
        assert len(grid) == 3

    def test_rough_cell_unchanged(self, engine, grid):
        before = grid.get_cell(HexPosition(0, 1))
        assert not engine.apply_template("Raise Plains", grid, HexPosition(0, 1))
        assert grid.get_cell(HexPosition(0, 1)) == before

    def test_unknown_template(self, engine, grid):
        assert not engine.apply_template("Nope", grid, HexPosition(0, 0))

    def test_missing_cell_fails_terrain_condition(self, engine, grid):
        assert not engine.apply_template("Raise Plains", grid, HexPosition(3, 3))

    def test_set_terrain_keeps_elevation(self, grid):
        engine = TemplateEngine()
        engine.load_template(template_doc("Sand", [
            {"name": "s", "priority": 0, "conditions": [], "actions": [set_terrain("Sand")]},
        ]))
        assert engine.apply_template("Sand", grid, HexPosition(0, 1))
        cell = grid.get_cell(HexPosition(0, 1))
        assert cell.terrain == TerrainType.SAND
        assert cell.elevation == 2

    def test_actions_skip_missing_cell(self, grid):
        engine = TemplateEngine()
        engine.load_template(template_doc("Sand", [
            {"name": "s", "priority": 0, "conditions": [], "actions": [set_terrain("Sand")]},
        ]))
        assert engine.apply_template("Sand", grid, HexPosition(5, 5))
        assert grid.get_cell(HexPosition(5, 5)) is None

    def test_elevation_range_is_inclusive(self, grid):
        engine = TemplateEngine()
        engine.load_template(template_doc("Band", [{
            "name": "band",
            "priority": 0,
            "conditions": [{"type": "ElevationRange", "min": 2, "max": 2}],
            "actions": [set_terrain("Snow")],
        }]))
        assert engine.apply_template("Band", grid, HexPosition(0, 1))
        assert not engine.apply_template("Band", grid, HexPosition(0, 0))

    def test_actions_run_in_order(self, grid):
        engine = TemplateEngine()
        engine.load_template(template_doc("Two", [{
            "name": "both",
            "priority": 0,
            "conditions": [],
            "actions": [
                set_terrain("Swamp"),
                {"type": "SetElevation", "params": {"elevation": -3}},
                set_terrain("Water"),
            ],
        }]))
        engine.apply_template("Two", grid, HexPosition(0, 0))
        cell = grid.get_cell(HexPosition(0, 0))
        assert (cell.terrain, cell.elevation) == (TerrainType.WATER, -3)


class TestRuleOrdering:
    def test_highest_priority_wins(self, grid):
        engine = TemplateEngine()
        engine.load_template(template_doc("Order", [
            {"name": "low", "priority": 1, "conditions": [], "actions": [set_terrain("Sand")]},
            {"name": "high", "priority": 9, "conditions": [], "actions": [set_terrain("Snow")]},
        ]))
        assert engine.matching_rule("Order", grid, HexPosition(0, 0)).name == "high"
        engine.apply_template("Order", grid, HexPosition(0, 0))
        assert grid.get_cell(HexPosition(0, 0)).terrain == TerrainType.SNOW

    def test_ties_keep_document_order(self, grid):
        engine = TemplateEngine()
        engine.load_template(template_doc("Tie", [
            {"name": "first", "priority": 5, "conditions": [], "actions": [set_terrain("Sand")]},
            {"name": "second", "priority": 5, "conditions": [], "actions": [set_terrain("Snow")]},
        ]))
        engine.apply_template("Tie", grid, HexPosition(0, 0))
        assert grid.get_cell(HexPosition(0, 0)).terrain == TerrainType.SAND

    def test_only_first_match_applies(self, grid):
        engine = TemplateEngine()
        engine.load_template(template_doc("First", [
            {"name": "a", "priority": 2, "conditions": [], "actions": [
                {"type": "SetElevation", "params": {"elevation": 7}},
            ]},
            {"name": "b", "priority": 1, "conditions": [], "actions": [set_terrain("Sand")]},
        ]))
        engine.apply_template("First", grid, HexPosition(0, 0))
        cell = grid.get_cell(HexPosition(0, 0))
        assert (cell.terrain, cell.elevation) == (TerrainType.PLAIN, 7)

    def test_falls_through_to_lower_rule(self, grid):
        engine = TemplateEngine()
        engine.load_template(template_doc("Fall", [
            {"name": "water", "priority": 9, "conditions": [
                {"type": "TerrainType", "terrain": "Water"},
            ], "actions": [set_terrain("Sand")]},
            {"name": "any", "priority": 1, "conditions": [], "actions": [set_terrain("Rough")]},
        ]))
        assert engine.matching_rule("Fall", grid, HexPosition(0, 0)).name == "any"


class TestUnevaluatedKinds:
    @pytest.mark.parametrize("condition", [
        {"type": "NearWater", "distance": 3},
        {"type": "AdjacentTo", "structure_type": "civic"},
        {"type": "BiomeType", "biome": "Plains"},
        {"type": "TemplateExists", "template_name": "Raise Plains"},
        {"type": "And", "conditions": [{"type": "TerrainType", "terrain": "Plain"}]},
        {"type": "Or", "conditions": [{"type": "TerrainType", "terrain": "Plain"}]},
        {"type": "Not", "condition": {"type": "TerrainType", "terrain": "Water"}},
    ])
    def test_condition_never_matches(self, grid, condition):
        engine = TemplateEngine()
        engine.load_template(template_doc("C", [{
            "name": "c",
            "priority": 0,
            "conditions": [{"type": "TerrainType", "terrain": "Plain"}, condition],
            "actions": [set_terrain("Sand")],
        }]))
        assert not engine.apply_template("C", grid, HexPosition(0, 0))
        assert grid.get_cell(HexPosition(0, 0)).terrain == TerrainType.PLAIN

    @pytest.mark.parametrize("action", [
        {"type": "AddTag", "params": {"tag": "x"}},
        {"type": "GenerateWall", "params": {"height": 3, "material": "Wall"}},
        {"type": "ApplyTemplate", "params": {"template_name": "Raise Plains"}},
        {"type": "SpawnResource", "params": {"resource_type": "iron", "amount": 1, "spread": 0}},
        {"type": "SetBiome", "params": {"biome": "Desert"}},
        {"type": "ModifyTerrain", "params": {"radius": 2, "operation": {"type": "Raise", "amount": 3}}},
        {"type": "CreateWaterFeature", "params": {"feature_type": {"type": "River", "width": 2}, "size": 4}},
        {"type": "ApplyNoise", "params": {"noise_type": {"type": "Simplex"}, "amplitude": 1.0, "frequency": 0.5}},
        {"type": "PlaceStructure", "params": {"structure": {
            "name": "Hut", "structure_type": "residential",
            "footprint": [{"q": 0, "r": 0, "terrain": "Wall"}],
        }}},
    ])
    def test_action_leaves_grid_alone(self, grid, action):
        engine = TemplateEngine()
        engine.load_template(template_doc("A", [
            {"name": "a", "priority": 0, "conditions": [], "actions": [action]},
        ]))
        before = dict(grid.iter_cells())
        assert engine.apply_template("A", grid, HexPosition(0, 0))
        assert dict(grid.iter_cells()) == before
