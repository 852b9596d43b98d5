"""In-memory terrain host: chunks, detail storage, events, season clock.

The decoration core only talks to the host through the small interfaces
defined here (TerrainChunk, DetailStorage, TerrainEvents, SeasonSource,
StreamingWorld). An engine integration supplies its own implementations;
the classes in this module back the CLI and the tests.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterator, Protocol, Sequence

import numpy as np
import structlog
from numpy.typing import NDArray

from .types import MAX_LAYERS, Season

logger = structlog.get_logger()

CHUNK_SIZE = 128


def terrain_key(map_pixel_x: int, map_pixel_y: int) -> int:
    """Deterministic non-negative seed for a chunk from its map pixel coordinates."""
    return ((map_pixel_y << 16) + map_pixel_x) & 0xFFFFFFFF


class DetailSink(Protocol):
    """Write-only view of a chunk's detail layer storage."""

    def set_detail_layer(self, index: int, grid: NDArray[np.float32]) -> None: ...

    def set_prototypes(self, prototypes: Sequence | None) -> None: ...

    def set_render_distance(self, distance: float) -> None: ...

    def set_render_density(self, density: float) -> None: ...


class SeasonSource(Protocol):
    """Read-only access to the current world season."""

    def current_season(self) -> Season: ...


@dataclass
class TerrainChunk:
    """One streamed unit of terrain."""

    map_pixel_x: int
    map_pixel_y: int
    climate: int
    tile_map: NDArray[np.uint8]  # Shape: (CHUNK_SIZE, CHUNK_SIZE) by default

    @property
    def key(self) -> tuple[int, int]:
        return (self.map_pixel_x, self.map_pixel_y)


@dataclass
class DetailStorage:
    """Mutable detail layers of a chunk, as the renderer would hold them."""

    layers: dict[int, NDArray[np.float32]] = field(default_factory=dict)
    prototypes: list | None = None
    render_distance: float = 0.0
    render_density: float = 0.0
    version: int = 0

    def set_detail_layer(self, index: int, grid: NDArray[np.float32]) -> None:
        if not 0 <= index < MAX_LAYERS:
            raise IndexError(f"Detail layer index {index} out of range 0..{MAX_LAYERS - 1}")
        self.layers[index] = np.array(grid, dtype=np.float32, copy=True)
        self.increment_version()

    def set_prototypes(self, prototypes: Sequence | None) -> None:
        self.prototypes = None if prototypes is None else list(prototypes)
        self.increment_version()

    def set_render_distance(self, distance: float) -> None:
        self.render_distance = distance

    def set_render_density(self, density: float) -> None:
        self.render_density = density

    def increment_version(self) -> None:
        """Increment version number (call on any change)."""
        self.version += 1

    def is_clear(self) -> bool:
        """True when no prototypes are set and every layer is zero."""
        return self.prototypes is None and all(
            not grid.any() for grid in self.layers.values()
        )


ChunkCallback = Callable[[TerrainChunk, DetailSink], None]


class Subscription:
    """Owned registration of a callback on a TerrainEvents hub.

    close() is idempotent. Usable as a context manager.
    """

    def __init__(self, events: "TerrainEvents", callback: ChunkCallback):
        self._events = events
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        if not self._active:
            return
        self._active = False
        self._events._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class TerrainEvents:
    """Chunk-ready notification hub."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, callback: ChunkCallback) -> Subscription:
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, chunk: TerrainChunk, storage: DetailSink) -> None:
        """Notify every subscriber that a chunk's terrain data is ready."""
        for subscription in list(self._subscriptions):
            subscription._callback(chunk, storage)

    def _remove(self, subscription: Subscription) -> None:
        self._subscriptions.remove(subscription)


class StreamingWorld:
    """Registry of loaded chunks and their detail storage.

    Provides the chunk-ready event that fires whenever a chunk is promoted.
    """

    def __init__(self, events: TerrainEvents | None = None):
        self.events = events or TerrainEvents()
        self._chunks: dict[tuple[int, int], tuple[TerrainChunk, DetailStorage]] = {}

    def promote(self, chunk: TerrainChunk) -> DetailStorage:
        """Load (or reload) a chunk with fresh storage and notify subscribers."""
        storage = DetailStorage()
        self._chunks[chunk.key] = (chunk, storage)
        logger.debug("chunk_promoted", map_pixel_x=chunk.map_pixel_x, map_pixel_y=chunk.map_pixel_y)
        self.events.publish(chunk, storage)
        return storage

    def unload(self, map_pixel_x: int, map_pixel_y: int) -> bool:
        """Drop a chunk. Returns False if it was not loaded."""
        return self._chunks.pop((map_pixel_x, map_pixel_y), None) is not None

    def get(self, map_pixel_x: int, map_pixel_y: int) -> tuple[TerrainChunk, DetailStorage] | None:
        return self._chunks.get((map_pixel_x, map_pixel_y))

    def loaded_chunks(self) -> Iterator[tuple[TerrainChunk, DetailStorage]]:
        """Snapshot of loaded chunks in load order."""
        return iter(list(self._chunks.values()))

    def __len__(self) -> int:
        return len(self._chunks)


# Month index (0 = first month of the year) -> season
_MONTH_SEASONS: tuple[Season, ...] = (
    Season.WINTER,
    Season.WINTER,
    Season.SPRING,
    Season.SPRING,
    Season.SPRING,
    Season.SUMMER,
    Season.SUMMER,
    Season.SUMMER,
    Season.FALL,
    Season.FALL,
    Season.FALL,
    Season.WINTER,
)


@dataclass
class WorldClock:
    """Calendar position of the world; the season follows the month."""

    month: int = 5

    def __post_init__(self) -> None:
        if not 0 <= self.month < len(_MONTH_SEASONS):
            raise ValueError(f"Month must be in 0..11, got {self.month}")

    def current_season(self) -> Season:
        return _MONTH_SEASONS[self.month]

    def advance_month(self) -> None:
        self.month = (self.month + 1) % len(_MONTH_SEASONS)


@dataclass
class FixedSeason:
    """Season source pinned to one season."""

    season: Season = Season.SUMMER

    def current_season(self) -> Season:
        return self.season
