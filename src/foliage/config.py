"""Decoration configuration models and TOML loading."""

import tomllib
from enum import IntEnum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class WaterPlantsMode(IntEnum):
    """When water plants are placed."""

    OFF = 0
    SUMMER = 1
    ALL_SEASONS = 2


class WaterPlantsConfig(BaseModel):
    """Water plants settings."""

    mode: WaterPlantsMode = Field(
        default=WaterPlantsMode.ALL_SEASONS,
        description="0 = off, 1 = summer only, 2 = summer and winter",
    )


class ToggleConfig(BaseModel):
    """On/off switch for an optional detail."""

    enable: bool = True


MIN_DETAIL_DISTANCE = 10.0


class TerrainDetailConfig(BaseModel):
    """Renderer parameters installed on every decorated chunk."""

    detail_distance: float = Field(
        default=80.0,
        ge=MIN_DETAIL_DISTANCE,
        description="Details are rendered up to this distance",
    )
    detail_density: float = Field(
        default=0.4, ge=0.1, le=1.0, description="Renderer density multiplier"
    )


class DensityRange(BaseModel):
    """Value range for one role's density grid."""

    low: float = Field(default=0.0, ge=0.0)
    high: float = Field(default=1.0, ge=0.0)

    @model_validator(mode="after")
    def _check_order(self) -> "DensityRange":
        if self.low > self.high:
            raise ValueError(f"low ({self.low}) must not exceed high ({self.high})")
        return self


class DensityConfig(BaseModel):
    """Density grid tuning."""

    near_water_radius: int = Field(
        default=2, ge=1, le=8, description="Max tile distance from water for water plants"
    )
    winter_grass_scale: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Grass range multiplier in winter"
    )

    grass: DensityRange = Field(default_factory=lambda: DensityRange(low=0.4, high=1.0))
    water_plants: DensityRange = Field(
        default_factory=lambda: DensityRange(low=0.2, high=0.8)
    )
    waterlilies: DensityRange = Field(
        default_factory=lambda: DensityRange(low=0.1, high=0.5)
    )
    stones: DensityRange = Field(default_factory=lambda: DensityRange(low=0.1, high=0.4))
    flowers: DensityRange = Field(
        default_factory=lambda: DensityRange(low=0.1, high=0.6)
    )

    water_plants_chance: float = Field(default=0.6, ge=0.0, le=1.0)
    waterlilies_chance: float = Field(default=0.15, ge=0.0, le=1.0)
    stones_chance: float = Field(default=0.1, ge=0.0, le=1.0)
    flowers_chance: float = Field(default=0.05, ge=0.0, le=1.0)


class DecorationConfig(BaseModel):
    """Complete decoration configuration."""

    resources_dir: str = Field(
        default="resources", description="Directory holding prototype templates"
    )

    water_plants: WaterPlantsConfig = Field(default_factory=WaterPlantsConfig)
    terrain_stones: ToggleConfig = Field(default_factory=ToggleConfig)
    flowers: ToggleConfig = Field(default_factory=ToggleConfig)
    terrain: TerrainDetailConfig = Field(default_factory=TerrainDetailConfig)
    density: DensityConfig = Field(default_factory=DensityConfig)

    @property
    def water_plants_enabled(self) -> bool:
        return self.water_plants.mode != WaterPlantsMode.OFF

    @property
    def winter_plants_enabled(self) -> bool:
        return self.water_plants.mode == WaterPlantsMode.ALL_SEASONS

    @property
    def stones_enabled(self) -> bool:
        return self.terrain_stones.enable

    @property
    def flowers_enabled(self) -> bool:
        return self.flowers.enable

    def resolve_resources_dir(self, base: Path) -> Path:
        """Resolve resources_dir relative to base if it is not absolute."""
        path = Path(self.resources_dir)
        if path.is_absolute():
            return path
        return base / path


def load_config(config_path: Path) -> DecorationConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed DecorationConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values are out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return DecorationConfig.model_validate(data)


def find_config(name: str) -> Path:
    """Resolve a decoration settings file from a preset name or a path.

    A name that looks like a path (contains "/" or ends in ".toml") must
    point at an existing file. Any other name is looked up as a preset in
    the bundled configs directory, e.g. "default" -> configs/default.toml.

    Args:
        name: Preset name or path to a settings file.

    Returns:
        Path to the settings file.

    Raises:
        FileNotFoundError: If neither a file nor a preset matches.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.is_file():
            return path
        raise FileNotFoundError(f"Decoration settings file not found: {name}")

    preset = _configs_dir() / f"{name}.toml"
    if preset.is_file():
        return preset

    presets = ", ".join(list_configs()) or "none"
    raise FileNotFoundError(f"No decoration preset named '{name}' (available: {presets})")


def list_configs() -> list[str]:
    """Names of the bundled decoration presets, sorted."""
    configs_dir = _configs_dir()
    if not configs_dir.is_dir():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))


def _configs_dir() -> Path:
    return Path(__file__).parent.parent.parent / "configs"
