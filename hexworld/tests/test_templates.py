"""Tests for the bundled rule documents and their loader."""

import logging

import pytest

from hexworld.errors import TemplateError
from hexworld.grid import HexGrid
from hexworld.hex_coords import HexPosition
from hexworld.schemas import TerrainType
from hexworld.template_engine import TemplateEngine
from hexworld.templates import TemplateLoader


BUNDLED = {"Riverside Town", "Mountain Castle", "Blacksmith Workshop"}


@pytest.fixture
def loader():
    return TemplateLoader()


@pytest.fixture
def engine(loader):
    engine = TemplateEngine()
    loader.load_into(engine)
    return engine


def single_cell(terrain: TerrainType, elevation: int) -> HexGrid:
    grid = HexGrid()
    grid.add_cell(HexPosition(0, 0), terrain, elevation)
    return grid


class TestTemplateLoader:
    def test_load_all_bundled(self, loader):
        templates = loader.load_all()
        assert set(templates) == BUNDLED
        for template in templates.values():
            assert template.rules

    def test_load_single(self, loader):
        template = loader.load_template("town")
        assert template.name == "Riverside Town"
        assert [rule.name for rule in template.rules][:2] == ["Town Hall", "Town Wall"]

    def test_missing_file(self, loader):
        with pytest.raises(FileNotFoundError):
            loader.load_template("no_such_template")

    def test_broken_file_skipped(self, tmp_path, caplog):
        (tmp_path / "good.yaml").write_text(
            "name: Good\ndescription: fine\nrules: []\n"
        )
        (tmp_path / "bad.yaml").write_text("name: [unclosed\n")
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "other.yaml").write_text(
            "name: Nested\ndescription: deeper\nrules: []\n"
        )

        with caplog.at_level(logging.WARNING):
            templates = TemplateLoader(tmp_path).load_all()

        assert set(templates) == {"Good", "Nested"}
        assert "bad.yaml" in caplog.text

    def test_load_template_reports_errors(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("- not\n- a mapping\n")
        with pytest.raises(TemplateError):
            TemplateLoader(tmp_path).load_template("bad")

    def test_empty_directory(self, tmp_path):
        assert TemplateLoader(tmp_path).load_all() == {}

    def test_load_into(self, loader):
        engine = TemplateEngine()
        names = loader.load_into(engine)
        assert set(names) == BUNDLED
        assert set(engine.template_names()) == BUNDLED


class TestBundledBehaviour:
    def test_town_levels_market_square(self, engine):
        grid = single_cell(TerrainType.PLAIN, 0)
        rule = engine.matching_rule("Riverside Town", grid, HexPosition(0, 0))
        assert rule.name == "Market Square"

        assert engine.apply_template("Riverside Town", grid, HexPosition(0, 0))
        cell = grid.get_cell(HexPosition(0, 0))
        assert (cell.terrain, cell.elevation) == (TerrainType.PLAIN, 1)

    def test_town_clears_scrub(self, engine):
        grid = single_cell(TerrainType.ROUGH, 3)
        assert engine.apply_template("Riverside Town", grid, HexPosition(0, 0))
        cell = grid.get_cell(HexPosition(0, 0))
        assert (cell.terrain, cell.elevation) == (TerrainType.PLAIN, 3)

    def test_town_ignores_water(self, engine):
        grid = single_cell(TerrainType.WATER, 0)
        assert not engine.apply_template("Riverside Town", grid, HexPosition(0, 0))
        assert grid.get_cell(HexPosition(0, 0)).terrain == TerrainType.WATER

    def test_castle_walls_high_ground(self, engine):
        grid = single_cell(TerrainType.ROUGH, 13)
        assert engine.apply_template("Mountain Castle", grid, HexPosition(0, 0))
        cell = grid.get_cell(HexPosition(0, 0))
        assert cell.terrain == TerrainType.WALL
        assert not cell.passable

    def test_castle_leaves_low_ground(self, engine):
        grid = single_cell(TerrainType.ROUGH, 3)
        assert not engine.apply_template("Mountain Castle", grid, HexPosition(0, 0))

    def test_blacksmith_levels_yard(self, engine):
        grid = single_cell(TerrainType.ROUGH, 3)
        assert engine.apply_template("Blacksmith Workshop", grid, HexPosition(0, 0))
        cell = grid.get_cell(HexPosition(0, 0))
        assert (cell.terrain, cell.elevation) == (TerrainType.ROUGH, 0)
