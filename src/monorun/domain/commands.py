"""Closed set of commands understood by monorun."""

from __future__ import annotations

from enum import Enum


class UnknownCommandError(RuntimeError):
    """Raised when a command name is not part of :class:`CommandName`."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command: {name}")
        self.name = name


class CommandName(str, Enum):
    HELP = "help"
    SETUP = "setup"
    SETUP_ENVS = "setup:envs"
    INSTALL = "install"
    DEV_SERVER = "dev:server"
    DEV_COLLECTOR = "dev:collector"
    DEV_FRONTEND = "dev:frontend"
    DEV_ALL = "dev:all"
    LINT = "lint"
    PROD_SERVER = "prod:server"
    PROD_FRONTEND = "prod:frontend"
    PRISMA_GENERATE = "prisma:generate"
    PRISMA_MIGRATE = "prisma:migrate"
    PRISMA_SEED = "prisma:seed"
    PRISMA_SETUP = "prisma:setup"
    PRISMA_RESET = "prisma:reset"
    TRANSLATIONS_VERIFY = "translations:verify"
    TRANSLATIONS_NORMALIZE = "translations:normalize"
    CLEAN_NODE_MODULES = "clean:node_modules"
    DOCTOR = "doctor"

    @classmethod
    def parse(cls, name: str) -> "CommandName":
        try:
            return cls(name)
        except ValueError:
            raise UnknownCommandError(name) from None

    def __str__(self) -> str:
        return self.value
