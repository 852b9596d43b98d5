"""Core types for terrain decoration."""

from enum import Enum, IntEnum


class Season(str, Enum):
    """World seasons, as reported by the host clock."""

    FALL = "fall"
    SPRING = "spring"
    SUMMER = "summer"
    WINTER = "winter"


class Climate(IntEnum):
    """Climate zone codes attached to terrain chunks at generation time."""

    OCEAN = 223
    DESERT = 224
    DESERT2 = 225
    MOUNTAIN = 226
    RAINFOREST = 227
    SWAMP = 228
    DESERT3 = 229
    MOUNTAIN_WOODS = 230
    WOODLANDS = 231
    HAUNTED_WOODLANDS = 232


# Zones above this code are vegetated bands (except DESERT3)
VEGETATED_CLIMATE_THRESHOLD = 225


class ClimateBand(str, Enum):
    """Broad climate family used to pick plant species."""

    MOUNTAIN = "mountain"
    SWAMP = "swamp"
    TEMPERATE = "temperate"
    DESERT = "desert"
    NONE = "none"

    @classmethod
    def from_climate(cls, climate: int) -> "ClimateBand":
        """Map a climate zone code to its band. Unknown codes map to NONE."""
        return _CLIMATE_BANDS.get(climate, cls.NONE)


_CLIMATE_BANDS: dict[int, ClimateBand] = {
    Climate.DESERT: ClimateBand.DESERT,
    Climate.DESERT2: ClimateBand.DESERT,
    Climate.DESERT3: ClimateBand.DESERT,
    Climate.MOUNTAIN: ClimateBand.MOUNTAIN,
    Climate.MOUNTAIN_WOODS: ClimateBand.MOUNTAIN,
    Climate.RAINFOREST: ClimateBand.SWAMP,
    Climate.SWAMP: ClimateBand.SWAMP,
    Climate.WOODLANDS: ClimateBand.TEMPERATE,
    Climate.HAUNTED_WOODLANDS: ClimateBand.TEMPERATE,
}


class Resolution(str, Enum):
    """Concrete prototype/density rule set chosen for a chunk."""

    SUMMER = "summer"
    WINTER = "winter"
    DESERT = "desert"
    BASELINE = "baseline"


class Role(IntEnum):
    """Decoration categories, in layer priority order."""

    GRASS = 0
    WATER_PLANTS = 1
    WATERLILIES = 2
    STONES = 3
    FLOWERS = 4


# Number of detail layer slots a chunk can hold
MAX_LAYERS = len(Role)


class TileMaterial(IntEnum):
    """Material codes stored in a chunk tile map."""

    WATER = 0
    DIRT = 1
    GRASS = 2
    STONE = 3
    SHORE = 4
    FARMLAND = 5
    ROAD = 6
    SNOW = 7


class TileCategory(IntEnum):
    """Semantic zone of a tile, as needed by density computation."""

    WATER = 0
    CULTIVATED = 1
    PLAIN_GROUND = 2
    OTHER = 3
