"""Shared test fixtures for decoration tests."""

from pathlib import Path
from typing import Callable

import numpy as np
import pytest
from numpy.typing import NDArray

from foliage.config import (
    DecorationConfig,
    DensityConfig,
    ToggleConfig,
    WaterPlantsConfig,
    WaterPlantsMode,
)
from foliage.host import FixedSeason, StreamingWorld, TerrainChunk
from foliage.controller import DecorationController
from foliage.types import Climate, Season, TileMaterial

ROOT = Path(__file__).parent.parent
RESOURCES_DIR = ROOT / "resources"


@pytest.fixture
def tile_map() -> NDArray[np.uint8]:
    """16x16 tile map with farmland, a pond and a road on grass.

    Rows/cols:
        0-3 x 0-3   farmland
        6-9 x 6-9   water
        row 14      road
        elsewhere   grass
    """
    tiles = np.full((16, 16), TileMaterial.GRASS, dtype=np.uint8)
    tiles[0:4, 0:4] = TileMaterial.FARMLAND
    tiles[6:10, 6:10] = TileMaterial.WATER
    tiles[14, :] = TileMaterial.ROAD
    return tiles


@pytest.fixture
def make_config() -> Callable[..., DecorationConfig]:
    """Factory for configs pointing at the shipped templates."""

    def _make(
        mode: WaterPlantsMode = WaterPlantsMode.ALL_SEASONS,
        stones: bool = True,
        flowers: bool = True,
        **density,
    ) -> DecorationConfig:
        return DecorationConfig(
            resources_dir=str(RESOURCES_DIR),
            water_plants=WaterPlantsConfig(mode=mode),
            terrain_stones=ToggleConfig(enable=stones),
            flowers=ToggleConfig(enable=flowers),
            density=DensityConfig(**density),
        )

    return _make


@pytest.fixture
def config_toml() -> str:
    """Decoration config as TOML string."""
    return f"""
resources_dir = "{RESOURCES_DIR.as_posix()}"

[water_plants]
mode = 2

[terrain_stones]
enable = true

[flowers]
enable = true

[terrain]
detail_distance = 60.0
detail_density = 0.5

[density]
near_water_radius = 2
water_plants_chance = 1.0
waterlilies_chance = 0.5
stones_chance = 0.5
flowers_chance = 0.5
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml: str) -> Path:
    """Write the config TOML to a temporary file."""
    config_path = tmp_path / "decoration.toml"
    config_path.write_text(config_toml)
    return config_path


@pytest.fixture
def season() -> FixedSeason:
    return FixedSeason(Season.SUMMER)


@pytest.fixture
def world() -> StreamingWorld:
    return StreamingWorld()


@pytest.fixture
def make_chunk(tile_map: NDArray[np.uint8]) -> Callable[..., TerrainChunk]:
    """Factory for chunks sharing the fixture tile map."""

    def _make(x: int = 0, y: int = 0, climate: int = Climate.WOODLANDS) -> TerrainChunk:
        return TerrainChunk(
            map_pixel_x=x, map_pixel_y=y, climate=int(climate), tile_map=tile_map.copy()
        )

    return _make


@pytest.fixture
def controller(
    world: StreamingWorld, season: FixedSeason, config_file: Path
) -> DecorationController:
    """Controller wired to the test world, not yet enabled."""
    return DecorationController(world, season, config_file)
