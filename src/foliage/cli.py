"""Command-line interface: decorate a saved tile map."""

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for decorating a tile map."""
    parser = argparse.ArgumentParser(
        description="Compute detail prototypes and density layers for a tile map"
    )
    parser.add_argument("tilemap", type=str, help="Input .npz with a 'tiles' array")
    parser.add_argument(
        "--climate", type=int, default=231, help="Climate zone code (default: 231, woodlands)"
    )
    parser.add_argument(
        "--season",
        type=str,
        default="summer",
        choices=["fall", "spring", "summer", "winter"],
        help="World season (default: summer)",
    )
    parser.add_argument(
        "--config", type=str, default="default", help="Config name or path (default: default)"
    )
    parser.add_argument(
        "--output", "-o", type=str, default=None, help="Output .npz for density layers"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # Import here to avoid slow startup for --help
    from .config import find_config
    from .controller import DecorationController
    from .exceptions import SetupError
    from .host import FixedSeason, StreamingWorld
    from .types import Season

    try:
        config_path = find_config(args.config)
        chunk = load_tile_map(Path(args.tilemap), args.climate)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    world = StreamingWorld()
    controller = DecorationController(world, FixedSeason(Season(args.season)), config_path)
    try:
        controller.enable(decorate_loaded=False)
    except SetupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    storage = world.promote(chunk)
    if not storage.prototypes:
        print("Chunk could not be decorated, see log", file=sys.stderr)
        return 1

    height, width = chunk.tile_map.shape
    print(f"Decorated {width}x{height} chunk at ({chunk.map_pixel_x}, {chunk.map_pixel_y})")
    for index, prototype in enumerate(storage.prototypes):
        layer = storage.layers[index]
        covered = np.count_nonzero(layer) / layer.size * 100
        print(
            f"  layer {index} {prototype.role.name.lower():<13} {prototype.template:<26} "
            f"cover {covered:5.1f}%  max {layer.max():.2f}"
        )

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        save_layers(output_path, storage.layers, storage.prototypes)
        print(f"Saved to {output_path}")

    return 0


def load_tile_map(path: Path, climate: int):
    """Load a tile map chunk from an .npz file.

    The file must contain a 2D 'tiles' array and may contain scalar
    'map_pixel_x' and 'map_pixel_y' entries.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If the 'tiles' array is missing.
    """
    from .host import TerrainChunk

    if not path.exists():
        raise FileNotFoundError(f"Tile map not found: {path}")

    with np.load(path) as data:
        if "tiles" not in data:
            raise ValueError(f"{path} has no 'tiles' array")
        tiles = data["tiles"]
        map_pixel_x = int(data["map_pixel_x"]) if "map_pixel_x" in data else 0
        map_pixel_y = int(data["map_pixel_y"]) if "map_pixel_y" in data else 0

    return TerrainChunk(
        map_pixel_x=map_pixel_x,
        map_pixel_y=map_pixel_y,
        climate=climate,
        tile_map=tiles,
    )


def save_layers(path: Path, layers: dict, prototypes: list) -> None:
    """Save density layers and prototype metadata to a compressed .npz."""
    metadata = [
        {
            "index": index,
            "role": prototype.role.name.lower(),
            "template": prototype.template,
            **prototype.spec.model_dump(mode="json"),
        }
        for index, prototype in enumerate(prototypes)
    ]
    np.savez_compressed(
        path,
        prototypes=json.dumps(metadata).encode("utf-8"),
        **{f"layer_{index}": grid for index, grid in sorted(layers.items())},
    )


if __name__ == "__main__":
    sys.exit(main())
