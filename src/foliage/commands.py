"""Console commands bound to a decoration controller."""

import inspect
from typing import Callable

import structlog

from .controller import DecorationController
from .exceptions import SetupError

logger = structlog.get_logger()


class ConsoleCommands:
    """Text commands for toggling, restarting and tuning decorations.

    Every handler returns the message to print on the console.
    """

    TOGGLE = "foliage_toggle"
    RESTART = "foliage_restart"
    DISTANCE = "foliage_distance"

    def __init__(self, controller: DecorationController):
        self.controller = controller
        self._handlers: dict[str, Callable[..., str]] = {
            self.TOGGLE: self.toggle,
            self.RESTART: self.restart,
            self.DISTANCE: self.detail_distance,
        }

    @property
    def names(self) -> list[str]:
        return sorted(self._handlers)

    def execute(self, name: str, *args: str) -> str:
        """Run a command by name.

        Args:
            name: Command name, e.g. "foliage_toggle".
            *args: Raw string arguments.

        Returns:
            Message for the console.
        """
        handler = self._handlers.get(name)
        if handler is None:
            return f"Unknown command '{name}'. Available: {', '.join(self.names)}"
        try:
            inspect.signature(handler).bind(*args)
        except TypeError:
            return f"Wrong number of arguments for '{name}'"
        return handler(*args)

    def toggle(self) -> str:
        try:
            enabled = self.controller.toggle()
        except (SetupError, RuntimeError) as e:
            return f"Failed to enable decorations: {e}"
        return f"Decorations {'enabled' if enabled else 'disabled'}"

    def restart(self) -> str:
        try:
            self.controller.restart()
        except (SetupError, RuntimeError) as e:
            return f"Failed to restart decorations: {e}"
        return "Decorations restarted"

    def detail_distance(self, value: str | None = None) -> str:
        """Show or set the render distance for details."""
        if value is None:
            return f"Detail distance is {self.controller.detail_distance:g}"
        try:
            self.controller.detail_distance = float(value)
        except ValueError:
            return f"Invalid detail distance '{value}'"
        logger.debug("console_detail_distance", value=value)
        return f"Detail distance set to {self.controller.detail_distance:g} for newly loaded terrain"
