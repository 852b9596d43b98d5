"""Density grids for detail layers: grass, water plants, stones, flowers."""

import numpy as np
from numpy.typing import NDArray

from .classification import ClassifiedTiles
from .config import DensityConfig, DensityRange
from .selection import Selection
from .types import ClimateBand, Resolution, Role

# Water plant and waterlily placement chance multiplier per band
_BAND_WATER_SCALE: dict[ClimateBand, float] = {
    ClimateBand.SWAMP: 1.5,
    ClimateBand.MOUNTAIN: 0.75,
}


class DensityGridBuilder:
    """Computes one density grid per role for a single chunk at a time.

    Call init_layers() before each chunk; it allocates fresh zeroed grids
    and reseeds the random generators, so output depends only on the chunk
    and never on decoration order.
    """

    def __init__(self, config: DensityConfig):
        self.config = config
        self._shape: tuple[int, int] = (0, 0)
        self._layers: dict[Role, NDArray[np.float32]] = {}
        self._rngs: dict[Role, np.random.Generator] = {}
        self._empty: NDArray[np.float32] = _zeros_read_only((0, 0))

    @property
    def shape(self) -> tuple[int, int]:
        return self._shape

    @property
    def empty(self) -> NDArray[np.float32]:
        """Read-only all-zero grid used to clear layers."""
        return self._empty

    @property
    def grass(self) -> NDArray[np.float32]:
        return self._layers[Role.GRASS]

    @property
    def water_plants(self) -> NDArray[np.float32]:
        return self._layers[Role.WATER_PLANTS]

    @property
    def waterlilies(self) -> NDArray[np.float32]:
        return self._layers[Role.WATERLILIES]

    @property
    def stones(self) -> NDArray[np.float32]:
        return self._layers[Role.STONES]

    @property
    def flowers(self) -> NDArray[np.float32]:
        return self._layers[Role.FLOWERS]

    def layer(self, role: Role) -> NDArray[np.float32]:
        """Density grid for a role."""
        return self._layers[role]

    def empty_for(self, shape: tuple[int, int]) -> NDArray[np.float32]:
        """Cached zero grid at a shape, reallocated only when the shape changes."""
        shape = (int(shape[0]), int(shape[1]))
        if shape != self._empty.shape:
            self._empty = _zeros_read_only(shape)
        return self._empty

    def init_layers(self, shape: tuple[int, int], seed: int) -> None:
        """Reset every role grid to zeros at the given shape and reseed.

        Args:
            shape: (height, width) of the chunk tile grid.
            seed: Chunk seed, usually terrain_key() of the chunk.
        """
        shape = self.empty_for(shape).shape
        self._shape = shape
        self._layers = {role: np.zeros(shape, dtype=np.float32) for role in Role}

        # One independent stream per role: enabling flowers must not
        # change the grass pattern.
        children = np.random.SeedSequence(seed).spawn(len(Role))
        self._rngs = {role: np.random.default_rng(s) for role, s in zip(Role, children)}

    def apply(self, selection: Selection, tiles: ClassifiedTiles) -> None:
        """Fill the grids for a selection's resolution and active roles."""
        self._check_shape(tiles)
        if selection.resolution == Resolution.SUMMER:
            self.set_density_summer(tiles, selection.band, selection.roles)
        elif selection.resolution == Resolution.WINTER:
            self.set_density_winter(tiles, selection.band, selection.roles)
        elif selection.resolution == Resolution.DESERT:
            self.set_density_desert(tiles)
        elif selection.winter_grass:
            self._fill_grass(tiles, self._winter_grass_range())
        else:
            self._fill_grass(tiles, self.config.grass)

    def set_density_summer(
        self,
        tiles: ClassifiedTiles,
        band: ClimateBand,
        roles: tuple[Role, ...] = tuple(Role),
    ) -> None:
        """Grass, water plants, waterlilies, stones and flowers."""
        self._check_shape(tiles)
        self._fill_grass(tiles, self.config.grass)
        if Role.WATER_PLANTS in roles:
            self._fill_water_plants(tiles, band)
        if Role.WATERLILIES in roles:
            self._fill_waterlilies(tiles, band)
        if Role.STONES in roles:
            self._fill_chance(
                Role.STONES, tiles.cultivated, self.config.stones, self.config.stones_chance
            )
        if Role.FLOWERS in roles:
            self._fill_chance(
                Role.FLOWERS, tiles.plain_ground, self.config.flowers, self.config.flowers_chance
            )

    def set_density_winter(
        self,
        tiles: ClassifiedTiles,
        band: ClimateBand,
        roles: tuple[Role, ...] = (Role.GRASS, Role.WATER_PLANTS, Role.STONES),
    ) -> None:
        """Sparse grass, winter water plants and stones."""
        self._check_shape(tiles)
        self._fill_grass(tiles, self._winter_grass_range())
        if Role.WATER_PLANTS in roles:
            self._fill_water_plants(tiles, band)
        if Role.STONES in roles:
            self._fill_chance(
                Role.STONES, tiles.cultivated, self.config.stones, self.config.stones_chance
            )

    def set_density_desert(self, tiles: ClassifiedTiles) -> None:
        """Grass and desert water plants."""
        self._check_shape(tiles)
        self._fill_grass(tiles, self.config.grass)
        self._fill_water_plants(tiles, ClimateBand.DESERT)

    def _winter_grass_range(self) -> DensityRange:
        scale = self.config.winter_grass_scale
        grass = self.config.grass
        return DensityRange(low=grass.low * scale, high=grass.high * scale)

    def _fill_grass(self, tiles: ClassifiedTiles, value_range: DensityRange) -> None:
        rng = self._rngs[Role.GRASS]
        values = rng.uniform(value_range.low, value_range.high, self._shape)
        self._store(Role.GRASS, np.where(tiles.plain_ground, values, 0.0), value_range)

    def _fill_water_plants(self, tiles: ClassifiedTiles, band: ClimateBand) -> None:
        """Place water plants near the shore, thinning out with distance."""
        rng = self._rngs[Role.WATER_PLANTS]
        value_range = self.config.water_plants
        chance = min(1.0, self.config.water_plants_chance * _BAND_WATER_SCALE.get(band, 1.0))

        values = rng.uniform(value_range.low, value_range.high, self._shape)
        hits = rng.random(self._shape) < chance

        distance = tiles.water_distance.astype(np.float32)
        falloff = np.clip(1.0 - (distance - 1.0) / tiles.radius, 0.0, 1.0)

        mask = tiles.near_water & hits
        self._store(Role.WATER_PLANTS, np.where(mask, values * falloff, 0.0), value_range)

    def _fill_waterlilies(self, tiles: ClassifiedTiles, band: ClimateBand) -> None:
        chance = min(1.0, self.config.waterlilies_chance * _BAND_WATER_SCALE.get(band, 1.0))
        self._fill_chance(Role.WATERLILIES, tiles.water, self.config.waterlilies, chance)

    def _fill_chance(
        self,
        role: Role,
        eligible: NDArray[np.bool_],
        value_range: DensityRange,
        chance: float,
    ) -> None:
        rng = self._rngs[role]
        values = rng.uniform(value_range.low, value_range.high, self._shape)
        hits = rng.random(self._shape) < chance
        self._store(role, np.where(eligible & hits, values, 0.0), value_range)

    def _store(self, role: Role, values: NDArray, value_range: DensityRange) -> None:
        self._layers[role][...] = np.clip(values, 0.0, value_range.high)

    def _check_shape(self, tiles: ClassifiedTiles) -> None:
        if tiles.shape != self._shape:
            raise ValueError(
                f"Classified tiles shape {tiles.shape} does not match layers {self._shape}; "
                "call init_layers() first"
            )


def _zeros_read_only(shape: tuple[int, int]) -> NDArray[np.float32]:
    grid = np.zeros(shape, dtype=np.float32)
    grid.flags.writeable = False
    return grid
