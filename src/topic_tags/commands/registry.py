"""Host command registration and dispatch."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

CommandHandler = Callable[[dict[str, object]], dict[str, object]]


@dataclass(slots=True, frozen=True)
class CommandError(Exception):
    """Dispatch or parameter failure reported with a stable error code."""

    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass(slots=True)
class CommandRegistry:
    """Named command handlers kept in registration order."""

    _handlers: dict[str, CommandHandler] = field(default_factory=dict)

    def register(self, name: str, handler: CommandHandler) -> None:
        if name in self._handlers:
            raise ValueError(f"Command already registered: {name}")
        self._handlers[name] = handler

    def get(self, name: str) -> CommandHandler | None:
        return self._handlers.get(name)

    def names(self) -> tuple[str, ...]:
        """Return command names in registration order."""
        return tuple(self._handlers.keys())

    def dispatch(self, name: str, arguments: dict[str, object]) -> dict[str, object]:
        """Run the handler registered under name."""
        handler = self.get(name)
        if handler is None:
            raise CommandError(code="UNKNOWN_COMMAND", message=f"Unknown command: {name}")
        return handler(arguments)
