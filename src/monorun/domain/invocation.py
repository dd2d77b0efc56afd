"""Parsed command line for a single monorun run."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence, Union

FLAG_PREFIX = "--"

FlagValue = Union[str, bool]


@dataclass(frozen=True)
class Invocation:
    """Command name, flags and positional arguments of one run.

    A flag maps to its string value, or to ``True`` when it was given without
    one. Unknown flags are kept; handlers simply never look at them.
    """

    command: str | None = None
    flags: Mapping[str, FlagValue] = field(default_factory=lambda: MappingProxyType({}))
    positional: tuple[str, ...] = ()

    def has_flag(self, name: str) -> bool:
        return name in self.flags

    def flag(self, name: str, default: FlagValue | None = None) -> FlagValue | None:
        return self.flags.get(name, default)

    def flag_value(self, name: str) -> str | None:
        """Return the flag's string value, ``None`` when absent or boolean."""

        value = self.flags.get(name)
        return value if isinstance(value, str) else None


def _is_flag(token: str) -> bool:
    return token.startswith(FLAG_PREFIX)


def parse_args(argv: Sequence[str]) -> Invocation:
    """Turn ``argv`` (without the program name) into an :class:`Invocation`."""

    if not argv:
        return Invocation()

    command, rest = argv[0], list(argv[1:])
    flags: dict[str, FlagValue] = {}
    positional: list[str] = []

    index = 0
    while index < len(rest):
        current = rest[index]
        index += 1
        if not _is_flag(current):
            positional.append(current)
            continue

        key, sep, inline_value = current[len(FLAG_PREFIX):].partition("=")
        if sep:
            flags[key] = inline_value
            continue

        if index < len(rest) and not _is_flag(rest[index]):
            flags[key] = rest[index]
            index += 1
        else:
            flags[key] = True

    return Invocation(
        command=command,
        flags=MappingProxyType(flags),
        positional=tuple(positional),
    )
