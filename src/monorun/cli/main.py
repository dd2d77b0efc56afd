#!/usr/bin/env python3
"""Entry point for the monorun CLI."""

from __future__ import annotations

import asyncio
import sys
from textwrap import dedent

from monorun import __version__
from monorun.adapters.process import run_group, run_process
from monorun.app.command_service import CommandDescriptor, CommandRegistry, dispatch
from monorun.app.doctor import DoctorService
from monorun.app.prisma import PrismaService
from monorun.app.translations import TranslationsService
from monorun.app.workspace import GroupRunner, Runner, WorkspaceService
from monorun.domain.commands import CommandName
from monorun.domain.invocation import Invocation, parse_args
from monorun.settings import ConfigError, WorkspaceSettings, load_settings
from monorun.utils.console import log_check_result, print_header

PROG = "monorun"

SETUP_COMPLETE = dedent(
    """
    Setup complete! Run `monorun dev:server`, `monorun dev:collector`, and `monorun dev:frontend`
    or `monorun dev:all` to start hacking.
    """
)


class WorkspaceCommands:
    """Async handlers bound to one :class:`WorkspaceSettings` value."""

    def __init__(
        self,
        settings: WorkspaceSettings,
        *,
        runner: Runner = run_process,
        group_runner: GroupRunner = run_group,
        doctor: DoctorService | None = None,
    ) -> None:
        self.settings = settings
        self.workspace = WorkspaceService(settings, runner=runner, group_runner=group_runner)
        self.prisma = PrismaService(settings, runner=runner)
        self.translations = TranslationsService(settings, runner=runner)
        self.doctor_service = doctor or DoctorService(settings)
        self._registry: CommandRegistry | None = None

    @property
    def registry(self) -> CommandRegistry:
        if self._registry is None:
            self._registry = CommandRegistry(self._descriptors())
        return self._registry

    def _descriptors(self) -> list[CommandDescriptor]:
        entries = [
            (CommandName.HELP, self.help, "Show this message."),
            (CommandName.SETUP, self.setup, "Install dependencies, copy .env files, and prime Prisma."),
            (CommandName.SETUP_ENVS, self.setup_envs, "Copy example environment files without overwriting existing ones."),
            (CommandName.INSTALL, self.install, "Install dependencies for frontend, server, and collector."),
            (CommandName.DEV_SERVER, self.dev_server, "Run the API server in development mode."),
            (CommandName.DEV_COLLECTOR, self.dev_collector, "Run the ingestion service in development mode."),
            (CommandName.DEV_FRONTEND, self.dev_frontend, "Run the web client in development mode."),
            (CommandName.DEV_ALL, self.dev_all, "Start server, frontend, and collector concurrently."),
            (CommandName.LINT, self.lint, "Run lint scripts for server, frontend, and collector."),
            (CommandName.PROD_SERVER, self.prod_server, "Start the API server in production mode."),
            (CommandName.PROD_FRONTEND, self.prod_frontend, "Build the production frontend."),
            (CommandName.PRISMA_GENERATE, self.prisma_generate, "Generate the Prisma client."),
            (CommandName.PRISMA_MIGRATE, self.prisma_migrate, "Apply Prisma migrations (use --dev for migrate dev)."),
            (CommandName.PRISMA_SEED, self.prisma_seed, "Seed the Prisma database."),
            (CommandName.PRISMA_SETUP, self.prisma_setup, "Run generate, migrate, and seed in sequence."),
            (CommandName.PRISMA_RESET, self.prisma_reset, "Reset the local SQLite database then re-run migrations."),
            (CommandName.TRANSLATIONS_VERIFY, self.translations_verify, "Verify locale files from the frontend package."),
            (
                CommandName.TRANSLATIONS_NORMALIZE,
                self.translations_normalize,
                "Sort and normalise translation catalogues, then verify them.",
            ),
            (CommandName.CLEAN_NODE_MODULES, self.clean_node_modules, "Remove per-package node_modules directories."),
            (CommandName.DOCTOR, self.doctor, "Run quick environment checks for common setup issues."),
        ]
        return [CommandDescriptor(name=name, handler=handler, summary=summary) for name, handler, summary in entries]

    async def help(self, invocation: Invocation) -> None:
        print_header(f"{PROG} {__version__}: monorepo project helper")
        print(f"Usage: {PROG} <command> [options]\n")
        print("Available commands:")
        for descriptor in self.registry.list_commands():
            print(f"  {descriptor.name.value:<24}{descriptor.summary}")

    async def setup(self, invocation: Invocation) -> None:
        print_header("Setting up the workspace")
        await self.workspace.install(force=invocation.has_flag("force-install"))
        await self.setup_envs(invocation)
        if invocation.flag("skip-prisma"):
            print("Skipped Prisma setup because --skip-prisma was provided.")
        else:
            await self.prisma_setup(invocation)
        print(SETUP_COMPLETE)

    async def install(self, invocation: Invocation) -> None:
        print_header("Installing package dependencies")
        await self.workspace.install(force=invocation.has_flag("force"))
        print("\nDependencies installed across packages.\n")

    async def setup_envs(self, invocation: Invocation) -> None:
        await self.workspace.setup_envs()

    async def dev_server(self, invocation: Invocation) -> None:
        await self.workspace.dev("server")

    async def dev_collector(self, invocation: Invocation) -> None:
        await self.workspace.dev("collector")

    async def dev_frontend(self, invocation: Invocation) -> None:
        await self.workspace.dev("frontend")

    async def dev_all(self, invocation: Invocation) -> None:
        await self.workspace.dev_all()

    async def lint(self, invocation: Invocation) -> None:
        await self.workspace.lint()

    async def prod_server(self, invocation: Invocation) -> None:
        await self.workspace.prod_server()

    async def prod_frontend(self, invocation: Invocation) -> None:
        await self.workspace.prod_frontend()

    async def prisma_generate(self, invocation: Invocation) -> None:
        await self.prisma.generate()

    async def prisma_migrate(self, invocation: Invocation) -> None:
        await self.prisma.migrate(dev=invocation.has_flag("dev"), name=invocation.flag_value("name"))

    async def prisma_seed(self, invocation: Invocation) -> None:
        await self.prisma.seed()

    async def prisma_setup(self, invocation: Invocation) -> None:
        await self.prisma_generate(invocation)
        await self.prisma_migrate(invocation)
        await self.prisma_seed(invocation)

    async def prisma_reset(self, invocation: Invocation) -> None:
        self.prisma.remove_database()
        await self.prisma_setup(invocation)

    async def translations_verify(self, invocation: Invocation) -> None:
        await self.translations.verify()

    async def translations_normalize(self, invocation: Invocation) -> None:
        await self.translations.normalize()
        await self.translations_verify(invocation)
        if not invocation.has_flag("no-lint"):
            await self.lint(invocation)
        print("\nLocales normalised and verified.\n")

    async def clean_node_modules(self, invocation: Invocation) -> None:
        self.workspace.clean_node_modules()

    async def doctor(self, invocation: Invocation) -> None:
        print_header("Running environment checks")
        report = self.doctor_service.diagnose(verbose=invocation.has_flag("verbose"))
        for check in report.checks:
            log_check_result(check.name, check.passed, check.detail)
        print("\nDoctor finished. Resolve ✖ checks before continuing.\n")


def build_registry(
    settings: WorkspaceSettings,
    *,
    runner: Runner = run_process,
    group_runner: GroupRunner = run_group,
) -> CommandRegistry:
    return WorkspaceCommands(settings, runner=runner, group_runner=group_runner).registry


def main(argv: list[str] | None = None) -> int:
    invocation = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return asyncio.run(dispatch(build_registry(settings), invocation))


if __name__ == "__main__":
    sys.exit(main())
