"""Detail prototype catalog: templates and stable layer indices."""

import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

from .config import DecorationConfig
from .exceptions import MissingTemplateError
from .selection import Selection, select_resolution
from .types import Climate, ClimateBand, Resolution, Role, Season

logger = structlog.get_logger()

TEMPLATE_SUFFIX = ".toml"


class RenderMode(str, Enum):
    """How the renderer draws a prototype."""

    GRASS_BILLBOARD = "grass_billboard"
    GRASS = "grass"
    VERTEX_LIT = "vertex_lit"


class TemplateSpec(BaseModel, frozen=True):
    """Visual template as stored in a resources file."""

    texture: str
    render_mode: RenderMode = RenderMode.GRASS_BILLBOARD
    min_width: float = Field(default=1.0, gt=0)
    max_width: float = Field(default=1.0, gt=0)
    min_height: float = Field(default=1.0, gt=0)
    max_height: float = Field(default=1.0, gt=0)
    noise_spread: float = Field(default=0.4, ge=0)
    healthy_color: tuple[int, int, int] = (255, 255, 255)
    dry_color: tuple[int, int, int] = (255, 255, 255)


@dataclass(frozen=True)
class DetailPrototype:
    """A template bound to a decoration role."""

    role: Role
    template: str
    spec: TemplateSpec


@dataclass(frozen=True)
class PrototypeSet:
    """Ordered prototypes; position in the tuple is the layer index."""

    selection: Selection
    prototypes: tuple[DetailPrototype, ...]

    @property
    def indices(self) -> dict[Role, int]:
        """Layer index of each active role."""
        return {p.role: i for i, p in enumerate(self.prototypes)}

    def __len__(self) -> int:
        return len(self.prototypes)


def template_name(role: Role, selection: Selection) -> str:
    """Name of the template used for a role under a selection."""
    band = selection.band
    resolution = selection.resolution
    if band == ClimateBand.NONE:
        band = ClimateBand.TEMPERATE

    if role == Role.GRASS:
        if selection.winter_grass:
            return "grass_winter"
        if band in (ClimateBand.TEMPERATE, ClimateBand.SWAMP):
            return "grass_green"
        return "grass_brown"

    if role == Role.WATER_PLANTS:
        if resolution == Resolution.DESERT:
            return "water_plants_desert"
        season = "winter" if resolution == Resolution.WINTER else "summer"
        return f"water_plants_{band.value}_{season}"

    if role == Role.WATERLILIES:
        if band == ClimateBand.MOUNTAIN:
            return "grass_in_water_mountain"
        if band == ClimateBand.SWAMP:
            return "waterlilies_swamp"
        return "waterlilies"

    if role == Role.STONES:
        return "stones_winter" if resolution == Resolution.WINTER else "stones"

    return "flowers"


class PrototypeCatalog:
    """Builds prototype sets from templates stored in a resources directory.

    Loaded templates are cached for the catalog's lifetime; a new catalog is
    created whenever settings are reloaded.
    """

    def __init__(self, resources_dir: Path, config: DecorationConfig):
        self.resources_dir = resources_dir
        self.config = config
        self._templates: dict[str, TemplateSpec] = {}

    def build_for_resolution(self, selection: Selection) -> PrototypeSet:
        """Build prototypes for the active roles of a selection.

        Index 0 is always grass; the other active roles follow in Role order.
        Indices from an earlier build must not be reused after this call.

        Raises:
            MissingTemplateError: If a required template file is absent.
        """
        roles = sorted(set(selection.roles) | {Role.GRASS})
        prototypes = tuple(
            self._prototype(role, template_name(role, selection)) for role in roles
        )
        return PrototypeSet(selection=selection, prototypes=prototypes)

    def required_templates(self) -> set[str]:
        """Every template any chunk can need under the current settings."""
        names: set[str] = set()
        for climate in Climate:
            for season in Season:
                selection = select_resolution(int(climate), season, self.config)
                names.update(template_name(role, selection) for role in selection.roles)
        return names

    def verify(self) -> None:
        """Load every required template up front.

        Raises:
            MissingTemplateError: If any template file is absent.
            pydantic.ValidationError: If a template file is malformed.
        """
        if not self.resources_dir.is_dir():
            raise MissingTemplateError("*", str(self.resources_dir))
        names = sorted(self.required_templates())
        for name in names:
            self._load(name)
        logger.debug("templates_verified", count=len(names), resources_dir=str(self.resources_dir))

    def _prototype(self, role: Role, name: str) -> DetailPrototype:
        return DetailPrototype(role=role, template=name, spec=self._load(name))

    def _load(self, name: str) -> TemplateSpec:
        spec = self._templates.get(name)
        if spec is not None:
            return spec

        path = self.resources_dir / f"{name}{TEMPLATE_SUFFIX}"
        if not path.is_file():
            raise MissingTemplateError(name, str(self.resources_dir))
        with open(path, "rb") as f:
            spec = TemplateSpec.model_validate(tomllib.load(f))
        self._templates[name] = spec
        return spec
