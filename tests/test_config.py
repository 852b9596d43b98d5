"""Tests for configuration loading."""

import tomllib
from pathlib import Path

import pytest
from pydantic import ValidationError

from foliage.config import (
    DecorationConfig,
    DensityRange,
    WaterPlantsMode,
    find_config,
    list_configs,
    load_config,
)


class TestLoadConfig:
    """Tests for load_config."""

    def test_load(self, config_file: Path):
        config = load_config(config_file)
        assert config.water_plants.mode == WaterPlantsMode.ALL_SEASONS
        assert config.terrain.detail_distance == 60.0
        assert config.density.water_plants_chance == 1.0
        # Unset sections keep their defaults
        assert config.density.grass == DensityRange(low=0.4, high=1.0)

    def test_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.toml"
        path.write_text("")
        config = load_config(path)
        assert config == DecorationConfig()
        assert config.water_plants_enabled
        assert config.winter_plants_enabled
        assert config.stones_enabled
        assert config.flowers_enabled

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_malformed(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[terrain\n")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_config(path)

    @pytest.mark.parametrize(
        "text",
        [
            "[terrain]\ndetail_distance = 5.0\n",
            "[terrain]\ndetail_density = 1.5\n",
            "[water_plants]\nmode = 3\n",
            "[density]\nnear_water_radius = 9\n",
            "[density.grass]\nlow = 0.9\nhigh = 0.1\n",
            "[density]\nflowers_chance = 2.0\n",
        ],
    )
    def test_out_of_range(self, tmp_path: Path, text: str):
        path = tmp_path / "bad.toml"
        path.write_text(text)
        with pytest.raises(ValidationError):
            load_config(path)


class TestFlags:
    """Tests for derived on/off flags."""

    @pytest.mark.parametrize(
        "mode,water,winter",
        [
            (WaterPlantsMode.OFF, False, False),
            (WaterPlantsMode.SUMMER, True, False),
            (WaterPlantsMode.ALL_SEASONS, True, True),
        ],
    )
    def test_water_plants_mode(self, make_config, mode, water, winter):
        config = make_config(mode=mode)
        assert config.water_plants_enabled is water
        assert config.winter_plants_enabled is winter

    def test_resolve_resources_dir(self, tmp_path: Path):
        assert DecorationConfig(resources_dir="res").resolve_resources_dir(tmp_path) == tmp_path / "res"
        absolute = str(tmp_path / "abs")
        assert DecorationConfig(resources_dir=absolute).resolve_resources_dir(Path("/x")) == Path(absolute)


class TestFindConfig:
    """Tests for config lookup."""

    def test_find_default(self):
        path = find_config("default")
        assert path.name == "default.toml"
        assert "default" in list_configs()
        assert list_configs() == sorted(list_configs())

    def test_default_config_is_valid(self):
        path = find_config("default")
        config = load_config(path)
        resources = config.resolve_resources_dir(path.parent)
        assert (resources / "grass_green.toml").is_file()

    def test_find_by_path(self, config_file: Path):
        assert find_config(str(config_file)) == config_file

    def test_not_found(self):
        with pytest.raises(FileNotFoundError, match="No decoration preset named 'does_not_exist'"):
            find_config("does_not_exist")
        with pytest.raises(FileNotFoundError):
            find_config("missing/path.toml")
