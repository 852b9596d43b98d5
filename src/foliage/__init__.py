"""Procedural grass, water plants, stones and flowers for streamed terrain."""

from .classification import ClassifiedTiles, classify_tiles
from .config import DecorationConfig, WaterPlantsMode, find_config, load_config
from .controller import ControllerState, DecorationController
from .density import DensityGridBuilder
from .exceptions import (
    DecorationError,
    MissingTemplateError,
    SetupError,
    TileDataError,
)
from .host import (
    DetailStorage,
    FixedSeason,
    StreamingWorld,
    Subscription,
    TerrainChunk,
    TerrainEvents,
    WorldClock,
    terrain_key,
)
from .prototypes import DetailPrototype, PrototypeCatalog, PrototypeSet
from .selection import Selection, select_resolution
from .types import (
    Climate,
    ClimateBand,
    Resolution,
    Role,
    Season,
    TileCategory,
    TileMaterial,
)

__all__ = [
    # Types
    "Climate",
    "ClimateBand",
    "Resolution",
    "Role",
    "Season",
    "TileCategory",
    "TileMaterial",
    # Config
    "DecorationConfig",
    "WaterPlantsMode",
    "find_config",
    "load_config",
    # Pipeline
    "ClassifiedTiles",
    "classify_tiles",
    "Selection",
    "select_resolution",
    "DetailPrototype",
    "PrototypeCatalog",
    "PrototypeSet",
    "DensityGridBuilder",
    # Controller
    "ControllerState",
    "DecorationController",
    # Host
    "DetailStorage",
    "FixedSeason",
    "StreamingWorld",
    "Subscription",
    "TerrainChunk",
    "TerrainEvents",
    "WorldClock",
    "terrain_key",
    # Exceptions
    "DecorationError",
    "SetupError",
    "MissingTemplateError",
    "TileDataError",
]
