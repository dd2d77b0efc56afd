"""Command registry and dispatch for monorun."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, List

from monorun.domain.commands import CommandName, UnknownCommandError
from monorun.domain.invocation import Invocation

Handler = Callable[[Invocation], Awaitable[None]]

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass(frozen=True)
class CommandDescriptor:
    name: CommandName
    handler: Handler
    summary: str = ""


class CommandRegistry:
    def __init__(self, descriptors: Iterable[CommandDescriptor]) -> None:
        self._descriptors: dict[CommandName, CommandDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._descriptors:
                raise ValueError(f"Command {descriptor.name} registered twice")
            self._descriptors[descriptor.name] = descriptor

    def get(self, name: CommandName) -> CommandDescriptor:
        if name not in self._descriptors:
            raise UnknownCommandError(str(name))
        return self._descriptors[name]

    def resolve(self, name: str | None) -> CommandDescriptor:
        """Map a raw command name to its descriptor; no name means ``help``."""

        if name is None:
            return self.get(CommandName.HELP)
        return self.get(CommandName.parse(name))

    def list_commands(self) -> List[CommandDescriptor]:
        return list(self._descriptors.values())

    async def invoke(self, name: CommandName, invocation: Invocation) -> None:
        await self.get(name).handler(invocation)


async def dispatch(registry: CommandRegistry, invocation: Invocation) -> int:
    try:
        descriptor = registry.resolve(invocation.command)
    except UnknownCommandError as exc:
        print(str(exc), file=sys.stderr)
        await registry.invoke(CommandName.HELP, invocation)
        return EXIT_FAILURE

    try:
        await descriptor.handler(invocation)
    except Exception as exc:
        print(f"\nError: {str(exc) or exc.__class__.__name__}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK
