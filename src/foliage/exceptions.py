"""Custom exceptions for terrain decoration."""


class DecorationError(Exception):
    """Base exception for decoration errors."""

    pass


class SetupError(DecorationError):
    """Raised when settings or assets cannot be loaded while enabling."""

    pass


class MissingTemplateError(DecorationError):
    """Raised when a prototype template is not present in the resources."""

    def __init__(self, template: str, resources_dir: str):
        super().__init__(f"Template '{template}' not found in {resources_dir}")
        self.template = template
        self.resources_dir = resources_dir


class TileDataError(DecorationError):
    """Raised when a chunk tile map cannot be classified."""

    pass
