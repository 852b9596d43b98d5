"""Decoration controller: per-chunk pipeline and enable/disable lifecycle."""

import asyncio
import tomllib
from enum import Enum
from pathlib import Path

import structlog
from numpy.typing import NDArray
from pydantic import ValidationError

from .classification import classify_tiles
from .config import MIN_DETAIL_DISTANCE, DecorationConfig, load_config
from .density import DensityGridBuilder
from .exceptions import DecorationError, SetupError
from .host import DetailSink, SeasonSource, StreamingWorld, Subscription, TerrainChunk, terrain_key
from .prototypes import PrototypeCatalog, PrototypeSet
from .selection import select_resolution
from .types import MAX_LAYERS

logger = structlog.get_logger()


class ControllerState(str, Enum):
    """Lifecycle states of the decoration controller."""

    DISABLED = "disabled"
    ENABLING = "enabling"
    ENABLED = "enabled"
    DISABLING = "disabling"
    RESTARTING = "restarting"


class DecorationController:
    """Decorates terrain chunks and owns the enable/disable lifecycle.

    Usage:
        world = StreamingWorld()
        controller = DecorationController(world, WorldClock(), config_path)
        controller.enable(decorate_loaded=False)

        # Every chunk promoted from now on is decorated.
        world.promote(chunk)

    Bulk decoration of chunks that were already loaded runs as an asyncio
    task on the running loop, one chunk per loop turn. disable() and
    restart() cancel it.
    """

    def __init__(
        self,
        world: StreamingWorld,
        seasons: SeasonSource,
        config_path: Path | None = None,
    ):
        self.world = world
        self.seasons = seasons
        self.config_path = config_path

        self._state = ControllerState.DISABLED
        self._config = DecorationConfig()
        self._catalog: PrototypeCatalog | None = None
        self._builder = DensityGridBuilder(self._config.density)
        self._detail_distance = self._config.terrain.detail_distance

        self._subscription: Subscription | None = None
        self._bulk_task: asyncio.Task | None = None

    def __repr__(self) -> str:
        return f"DecorationController(state={self._state.value}, config_path={self.config_path})"

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def is_enabled(self) -> bool:
        return self._state == ControllerState.ENABLED

    @property
    def config(self) -> DecorationConfig:
        return self._config

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    @property
    def bulk_task(self) -> asyncio.Task | None:
        """The running bulk decoration task, if any."""
        return self._bulk_task

    @property
    def detail_distance(self) -> float:
        """Details are rendered up to this distance; applies to chunks decorated later."""
        return self._detail_distance

    @detail_distance.setter
    def detail_distance(self, value: float) -> None:
        if not value >= MIN_DETAIL_DISTANCE:
            raise ValueError(
                f"Detail distance must be at least {MIN_DETAIL_DISTANCE:g}, got {value}"
            )
        self._detail_distance = float(value)
        logger.info("detail_distance_changed", detail_distance=self._detail_distance)

    # Lifecycle

    def enable(self, load_settings: bool = True, decorate_loaded: bool = True) -> None:
        """Start decorating chunks.

        Args:
            load_settings: Reload settings and rebuild the catalog and builder.
                Settings are always loaded on the first enable.
            decorate_loaded: Also decorate chunks that are already loaded.
                Requires a running event loop.

        Raises:
            SetupError: If settings or templates cannot be loaded. The
                controller stays disabled and holds no subscription.
        """
        if self._state == ControllerState.ENABLED:
            return

        self._state = ControllerState.ENABLING
        self._start(load_settings, decorate_loaded)
        self._state = ControllerState.ENABLED

    def disable(self) -> None:
        """Stop decorating and strip decorations from every loaded chunk.

        Safe to call repeatedly and on chunks that were never decorated.
        """
        self._state = ControllerState.DISABLING
        self._stop()
        self._state = ControllerState.DISABLED

    def toggle(self) -> bool:
        """Flip between enabled and disabled.

        Returns:
            New enabled status.
        """
        self.set_enabled(not self.is_enabled)
        return self.is_enabled

    def set_enabled(self, enable: bool) -> None:
        """Enable or disable; no-op when already in the requested state."""
        if enable == self.is_enabled:
            return
        if enable:
            self.enable(load_settings=False, decorate_loaded=True)
        else:
            self.disable()

    def restart(self) -> None:
        """Reload settings and redecorate every loaded chunk.

        Raises:
            RuntimeError: If no event loop is running. Nothing is torn
                down in that case.
            SetupError: If the new settings cannot be applied. The
                controller ends disabled with all chunks cleared.
        """
        # Fail before clearing chunks if the redecoration walk cannot run
        asyncio.get_running_loop()

        was_enabled = self.is_enabled
        self._state = ControllerState.RESTARTING
        if was_enabled:
            self._stop()
        self._start(load_settings=True, decorate_loaded=True)
        self._state = ControllerState.ENABLED

    async def wait_idle(self) -> None:
        """Wait until the current bulk decoration task, if any, has ended."""
        task = self._bulk_task
        if task is not None and not task.done():
            await asyncio.wait({task})

    def _start(self, load_settings: bool, decorate_loaded: bool) -> None:
        try:
            # Fail before subscribing if the walk cannot be scheduled
            loop = asyncio.get_running_loop() if decorate_loaded else None
            if load_settings or self._catalog is None:
                self._setup()

            self._subscription = self.world.events.subscribe(self.decorate_chunk)
            if loop is not None:
                self._bulk_task = loop.create_task(self._decorate_loaded_chunks())
        except Exception:
            self._unsubscribe()
            self._state = ControllerState.DISABLED
            raise

        logger.info(
            "decoration_enabled",
            water_plants=self._config.water_plants_enabled,
            winter_plants=self._config.winter_plants_enabled,
            stones=self._config.stones_enabled,
            flowers=self._config.flowers_enabled,
            decorate_loaded=decorate_loaded,
        )

    def _stop(self) -> None:
        # Unsubscribe first so no chunk is decorated while clearing
        self._unsubscribe()
        self._cancel_bulk_task()

        cleared = 0
        for chunk, storage in self.world.loaded_chunks():
            self._clear_chunk(chunk, storage)
            cleared += 1

        logger.info("decoration_disabled", cleared_chunks=cleared)

    def _setup(self) -> None:
        """Load settings and build the catalog and density builder."""
        try:
            config = self._load_settings()
            base = self.config_path.parent if self.config_path else Path.cwd()
            catalog = PrototypeCatalog(config.resolve_resources_dir(base), config)
            catalog.verify()
        except (OSError, tomllib.TOMLDecodeError, ValidationError, DecorationError) as e:
            logger.exception("decoration_setup_failed", config_path=str(self.config_path))
            raise SetupError(f"Failed to set up decorations from settings: {e}") from e

        self._config = config
        self._catalog = catalog
        self._builder = DensityGridBuilder(config.density)
        self._detail_distance = config.terrain.detail_distance

    def _load_settings(self) -> DecorationConfig:
        if self.config_path is None:
            return DecorationConfig()
        return load_config(self.config_path)

    def _unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def _cancel_bulk_task(self) -> None:
        if self._bulk_task is not None:
            if not self._bulk_task.done():
                self._bulk_task.cancel()
            self._bulk_task = None

    async def _decorate_loaded_chunks(self) -> None:
        """Decorate already loaded chunks, yielding to the loop after each."""
        decorated = failed = 0
        logger.debug("bulk_decoration_started", chunks=len(self.world))
        try:
            for chunk, storage in self.world.loaded_chunks():
                # Skip chunks unloaded or reloaded since the walk started
                loaded = self.world.get(*chunk.key)
                if loaded is None or loaded[1] is not storage:
                    continue
                if self.decorate_chunk(chunk, storage) is None:
                    failed += 1
                else:
                    decorated += 1
                await asyncio.sleep(0)
        except asyncio.CancelledError:
            logger.info("bulk_decoration_cancelled", decorated=decorated, failed=failed)
            raise

        logger.info("bulk_decoration_finished", decorated=decorated, failed=failed)

    # Per chunk

    def decorate_chunk(self, chunk: TerrainChunk, storage: DetailSink) -> PrototypeSet | None:
        """Decorate one chunk; also the chunk-ready callback.

        Failures are logged and leave the chunk's storage untouched.

        Returns:
            The installed prototypes, or None if the chunk was skipped.
        """
        try:
            return self._decorate(chunk, storage)
        except (DecorationError, ValueError) as e:
            logger.warning(
                "chunk_decoration_failed",
                map_pixel_x=chunk.map_pixel_x,
                map_pixel_y=chunk.map_pixel_y,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    def _decorate(self, chunk: TerrainChunk, storage: DetailSink) -> PrototypeSet:
        if self._catalog is None:
            raise DecorationError("Decorations are not set up; enable first")

        config = self._config
        tiles = classify_tiles(chunk.tile_map, config.density.near_water_radius)
        selection = select_resolution(chunk.climate, self.seasons.current_season(), config)
        prototypes = self._catalog.build_for_resolution(selection)

        builder = self._builder
        builder.init_layers(tiles.shape, terrain_key(chunk.map_pixel_x, chunk.map_pixel_y))
        builder.apply(selection, tiles)

        # Everything is computed; install in one pass
        storage.set_render_distance(self._detail_distance)
        storage.set_render_density(config.terrain.detail_density)
        storage.set_prototypes(prototypes.prototypes)
        for role, index in prototypes.indices.items():
            storage.set_detail_layer(index, builder.layer(role))
        for index in range(len(prototypes), MAX_LAYERS):
            storage.set_detail_layer(index, builder.empty)

        logger.debug(
            "chunk_decorated",
            map_pixel_x=chunk.map_pixel_x,
            map_pixel_y=chunk.map_pixel_y,
            resolution=selection.resolution.value,
            roles=[role.name for role in selection.roles],
        )
        return prototypes

    def _clear_chunk(self, chunk: TerrainChunk, storage: DetailSink) -> None:
        empty: NDArray = self._builder.empty_for(chunk.tile_map.shape[:2])
        for index in range(MAX_LAYERS):
            storage.set_detail_layer(index, empty)
        storage.set_prototypes(None)
