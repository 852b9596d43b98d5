"""Climate and season selection of active decoration roles."""

from dataclasses import dataclass

from .config import DecorationConfig
from .types import (
    VEGETATED_CLIMATE_THRESHOLD,
    Climate,
    ClimateBand,
    Resolution,
    Role,
    Season,
)


@dataclass(frozen=True)
class Selection:
    """Resolution and active roles for one chunk."""

    resolution: Resolution
    band: ClimateBand
    roles: tuple[Role, ...]
    winter: bool = False

    def is_active(self, role: Role) -> bool:
        return role in self.roles

    @property
    def winter_grass(self) -> bool:
        """Grass uses the winter template and scaled range.

        Follows the season alone outside deserts, so the water plants mode
        never decides whether winter terrain shows summer grass.
        """
        return self.resolution == Resolution.WINTER or (
            self.winter and self.band != ClimateBand.DESERT
        )


def select_resolution(
    climate: int,
    season: Season,
    config: DecorationConfig,
) -> Selection:
    """Resolve which roles and rule set apply to a chunk.

    Grass is always active. Water plants, waterlilies, stones and flowers
    only appear when the climate band and season match a branch below.

    Args:
        climate: Climate zone code of the chunk.
        season: Current world season.
        config: Decoration configuration flags.

    Returns:
        Selection for the chunk.
    """
    band = ClimateBand.from_climate(climate)
    winter = season == Season.WINTER

    if climate > VEGETATED_CLIMATE_THRESHOLD and climate != Climate.DESERT3:
        if season != Season.WINTER:
            roles = [Role.GRASS]
            if config.water_plants_enabled:
                roles += [Role.WATER_PLANTS, Role.WATERLILIES]
            if config.stones_enabled:
                roles.append(Role.STONES)
            if config.flowers_enabled:
                roles.append(Role.FLOWERS)
            return Selection(Resolution.SUMMER, band, tuple(roles), winter)

        if config.water_plants_enabled and config.winter_plants_enabled:
            roles = [Role.GRASS, Role.WATER_PLANTS]
            if config.stones_enabled:
                roles.append(Role.STONES)
            return Selection(Resolution.WINTER, band, tuple(roles), winter)

    elif config.water_plants_enabled and band == ClimateBand.DESERT:
        return Selection(
            Resolution.DESERT, band, (Role.GRASS, Role.WATER_PLANTS), winter
        )

    return Selection(Resolution.BASELINE, band, (Role.GRASS,), winter)
