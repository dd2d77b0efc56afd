"""Domain exports."""

from .commands import CommandName, UnknownCommandError
from .invocation import FlagValue, Invocation, parse_args

__all__ = [
    "CommandName",
    "FlagValue",
    "Invocation",
    "UnknownCommandError",
    "parse_args",
]
