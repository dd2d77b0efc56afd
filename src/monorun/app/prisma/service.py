"""Prisma schema toolchain steps for the server package."""

from __future__ import annotations

from monorun.adapters.fs import exists, remove_if_exists
from monorun.adapters.process import ProcessSpec, run_process
from monorun.app.workspace.service import Runner
from monorun.settings import WorkspaceSettings
from monorun.utils.console import print_header, rel_path


class PrismaService:
    def __init__(self, settings: WorkspaceSettings, *, runner: Runner = run_process) -> None:
        self._settings = settings
        self._runner = runner

    def command(self, args: list[str], label: str) -> ProcessSpec:
        return ProcessSpec(
            executable=self._settings.prisma_runner,
            arguments=("prisma", *args),
            working_directory=self._settings.package_dir("server"),
            label=f"prisma {label}",
        )

    async def _run(self, args: list[str], label: str) -> None:
        print_header(f"Running Prisma {label}")
        await self._runner(self.command(args, label))

    async def generate(self) -> None:
        await self._run(["generate"], "generate")

    async def migrate(self, *, dev: bool = False, name: str | None = None) -> None:
        if not dev:
            await self._run(["migrate", "deploy"], "migrate deploy")
            return
        args = ["migrate", "dev"]
        if name:
            args.extend(["--name", name])
        await self._run(args, "migrate dev")

    async def seed(self) -> None:
        await self._run(["db", "seed"], "seed")

    async def setup(self, *, dev: bool = False, name: str | None = None) -> None:
        await self.generate()
        await self.migrate(dev=dev, name=name)
        await self.seed()

    def remove_database(self) -> bool:
        """Delete the local SQLite file; returns whether one was present."""

        database = self._settings.database_path
        print_header("Resetting Prisma SQLite database")
        if not exists(database):
            print("No SQLite database file found to remove. Skipping deletion step.")
            return False
        remove_if_exists(database)
        print(f"Removed existing database file at {rel_path(database, self._settings.root)}")
        return True
