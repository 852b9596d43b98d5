"""Tile classification: water, cultivated, plain ground, other."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from .exceptions import TileDataError
from .types import TileCategory, TileMaterial

# Lookup table indexed by material code; codes not listed fall to OTHER
_CATEGORY_LUT = np.full(256, TileCategory.OTHER, dtype=np.uint8)
_CATEGORY_LUT[TileMaterial.WATER] = TileCategory.WATER
_CATEGORY_LUT[TileMaterial.FARMLAND] = TileCategory.CULTIVATED
_CATEGORY_LUT[TileMaterial.GRASS] = TileCategory.PLAIN_GROUND

# Marks cells farther than the adjacency radius from any water
NOT_NEAR_WATER = -1


@dataclass(frozen=True)
class ClassifiedTiles:
    """Per-cell category and bounded distance to water for one chunk."""

    category: NDArray[np.uint8]
    water_distance: NDArray[np.int16]
    radius: int

    @property
    def shape(self) -> tuple[int, int]:
        return self.category.shape

    @property
    def water(self) -> NDArray[np.bool_]:
        return self.category == TileCategory.WATER

    @property
    def cultivated(self) -> NDArray[np.bool_]:
        return self.category == TileCategory.CULTIVATED

    @property
    def plain_ground(self) -> NDArray[np.bool_]:
        return self.category == TileCategory.PLAIN_GROUND

    @property
    def near_water(self) -> NDArray[np.bool_]:
        """Land cells within the adjacency radius of a water cell."""
        return self.water_distance > 0


def classify_tiles(tile_map: NDArray, near_water_radius: int = 2) -> ClassifiedTiles:
    """Classify each cell of a tile map.

    Args:
        tile_map: 2D array of TileMaterial codes.
        near_water_radius: Max chessboard distance from water counted as near.

    Returns:
        ClassifiedTiles with category grid and water distance grid.

    Raises:
        TileDataError: If the tile map is not a non-empty 2D integer array.
    """
    tiles = np.asarray(tile_map)
    if tiles.ndim != 2 or tiles.size == 0:
        raise TileDataError(f"Tile map must be a non-empty 2D array, got shape {tiles.shape}")
    if not np.issubdtype(tiles.dtype, np.integer):
        raise TileDataError(f"Tile map must hold integer codes, got {tiles.dtype}")
    if tiles.min() < 0 or tiles.max() > 255:
        raise TileDataError("Tile map codes must fit in 0..255")

    category = _CATEGORY_LUT[tiles.astype(np.uint8)]
    water_distance = compute_water_distance(
        category == TileCategory.WATER, near_water_radius
    )
    return ClassifiedTiles(
        category=category, water_distance=water_distance, radius=near_water_radius
    )


def compute_water_distance(
    water_mask: NDArray[np.bool_],
    radius: int,
) -> NDArray[np.int16]:
    """Compute bounded chessboard distance from each cell to water.

    Grows the water mask one 8-connected ring at a time, so the cost is
    proportional to grid size times radius.

    Args:
        water_mask: Boolean mask where True = water.
        radius: Number of rings to grow.

    Returns:
        Distance field: 0 on water, 1..radius near water, -1 beyond.
    """
    distance = np.full(water_mask.shape, NOT_NEAR_WATER, dtype=np.int16)
    distance[water_mask] = 0
    if not water_mask.any():
        return distance

    structure = ndimage.generate_binary_structure(2, 2)
    reached = water_mask.copy()
    for ring in range(1, radius + 1):
        grown = ndimage.binary_dilation(reached, structure=structure)
        distance[grown & ~reached] = ring
        reached = grown

    return distance
