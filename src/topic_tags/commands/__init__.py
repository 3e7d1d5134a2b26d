"""Host command registry and built-in commands."""

from .registry import CommandError, CommandHandler, CommandRegistry

__all__ = ["CommandError", "CommandHandler", "CommandRegistry"]
