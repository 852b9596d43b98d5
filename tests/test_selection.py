"""Tests for climate/season role selection."""

import itertools

import pytest

from foliage.config import WaterPlantsMode
from foliage.selection import select_resolution
from foliage.types import Climate, ClimateBand, Resolution, Role, Season

VEGETATED = [
    Climate.MOUNTAIN,
    Climate.RAINFOREST,
    Climate.SWAMP,
    Climate.MOUNTAIN_WOODS,
    Climate.WOODLANDS,
    Climate.HAUNTED_WOODLANDS,
]
DESERTS = [Climate.DESERT, Climate.DESERT2, Climate.DESERT3]


class TestScenarios:
    """Documented climate/season/config combinations."""

    def test_temperate_summer_everything_on(self, make_config) -> None:
        selection = select_resolution(Climate.WOODLANDS, Season.SUMMER, make_config())
        assert selection.resolution == Resolution.SUMMER
        assert selection.band == ClimateBand.TEMPERATE
        assert selection.roles == (
            Role.GRASS,
            Role.WATER_PLANTS,
            Role.WATERLILIES,
            Role.STONES,
            Role.FLOWERS,
        )

    def test_temperate_winter_without_winter_plants(self, make_config) -> None:
        config = make_config(mode=WaterPlantsMode.SUMMER)
        selection = select_resolution(Climate.WOODLANDS, Season.WINTER, config)
        assert selection.resolution == Resolution.BASELINE
        assert selection.roles == (Role.GRASS,)

    @pytest.mark.parametrize("climate", DESERTS)
    @pytest.mark.parametrize("season", list(Season))
    def test_desert_without_water_plants(self, make_config, climate, season) -> None:
        config = make_config(mode=WaterPlantsMode.OFF)
        selection = select_resolution(climate, season, config)
        assert selection.roles == (Role.GRASS,)

    @pytest.mark.parametrize("climate", DESERTS)
    def test_desert_with_water_plants(self, make_config, climate) -> None:
        selection = select_resolution(climate, Season.WINTER, make_config())
        assert selection.resolution == Resolution.DESERT
        assert selection.band == ClimateBand.DESERT
        assert selection.roles == (Role.GRASS, Role.WATER_PLANTS)

    def test_winter_with_winter_plants(self, make_config) -> None:
        selection = select_resolution(Climate.MOUNTAIN, Season.WINTER, make_config())
        assert selection.resolution == Resolution.WINTER
        assert selection.roles == (Role.GRASS, Role.WATER_PLANTS, Role.STONES)

    @pytest.mark.parametrize("season", [Season.SPRING, Season.SUMMER, Season.FALL])
    def test_non_winter_seasons_are_summer(self, make_config, season) -> None:
        selection = select_resolution(Climate.SWAMP, season, make_config())
        assert selection.resolution == Resolution.SUMMER
        assert selection.band == ClimateBand.SWAMP

    def test_ocean_is_baseline(self, make_config) -> None:
        selection = select_resolution(Climate.OCEAN, Season.SUMMER, make_config())
        assert selection.resolution == Resolution.BASELINE
        assert selection.band == ClimateBand.NONE
        assert selection.roles == (Role.GRASS,)

    def test_unknown_vegetated_code(self, make_config) -> None:
        """Codes above the threshold but not listed still get summer rules."""
        selection = select_resolution(240, Season.SUMMER, make_config())
        assert selection.resolution == Resolution.SUMMER
        assert selection.band == ClimateBand.NONE

    def test_low_unknown_code(self, make_config) -> None:
        selection = select_resolution(10, Season.SUMMER, make_config())
        assert selection.resolution == Resolution.BASELINE

    def test_optional_roles_follow_flags(self, make_config) -> None:
        config = make_config(stones=False, flowers=False)
        selection = select_resolution(Climate.WOODLANDS, Season.SUMMER, config)
        assert selection.roles == (Role.GRASS, Role.WATER_PLANTS, Role.WATERLILIES)

        config = make_config(mode=WaterPlantsMode.OFF)
        selection = select_resolution(Climate.WOODLANDS, Season.SUMMER, config)
        assert selection.roles == (Role.GRASS, Role.STONES, Role.FLOWERS)


class TestTotality:
    """Exhaustive checks over zone x season x config."""

    CLIMATES = list(Climate) + [0, 225, 233, 255]

    @pytest.fixture
    def all_configs(self, make_config) -> list:
        return [
            make_config(mode=mode, stones=stones, flowers=flowers)
            for mode, stones, flowers in itertools.product(
                WaterPlantsMode, [True, False], [True, False]
            )
        ]

    def test_every_combination(self, all_configs) -> None:
        for config, climate, season in itertools.product(
            all_configs, self.CLIMATES, Season
        ):
            selection = select_resolution(int(climate), season, config)
            roles = selection.roles

            assert roles[0] == Role.GRASS
            assert list(roles) == sorted(set(roles))
            if not config.water_plants_enabled:
                assert Role.WATER_PLANTS not in roles
                assert Role.WATERLILIES not in roles
            if not config.stones_enabled:
                assert Role.STONES not in roles
            if not config.flowers_enabled:
                assert Role.FLOWERS not in roles
            if selection.resolution == Resolution.BASELINE:
                assert roles == (Role.GRASS,)
            if season == Season.WINTER:
                assert Role.FLOWERS not in roles
                assert Role.WATERLILIES not in roles

    def test_deterministic(self, all_configs) -> None:
        for config, climate, season in itertools.product(
            all_configs, self.CLIMATES, Season
        ):
            a = select_resolution(int(climate), season, config)
            b = select_resolution(int(climate), season, config)
            assert a == b

    def test_deserts_never_get_summer_rules(self, all_configs) -> None:
        for config, climate, season in itertools.product(all_configs, DESERTS, Season):
            selection = select_resolution(climate, season, config)
            assert selection.resolution in (Resolution.DESERT, Resolution.BASELINE)

    def test_vegetated_winter_requires_all_season_mode(self, all_configs) -> None:
        for config, climate in itertools.product(all_configs, VEGETATED):
            selection = select_resolution(climate, Season.WINTER, config)
            if config.winter_plants_enabled:
                assert selection.resolution == Resolution.WINTER
            else:
                assert selection.resolution == Resolution.BASELINE

    def test_winter_flag_follows_season(self, all_configs):
        for config, climate, season in itertools.product(
            all_configs, self.CLIMATES, Season
        ):
            selection = select_resolution(int(climate), season, config)
            assert selection.winter is (season == Season.WINTER)
            if season != Season.WINTER:
                assert not selection.winter_grass
