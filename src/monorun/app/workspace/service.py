"""Package-level workflows: dependencies, env templates and dev/prod tasks."""

from __future__ import annotations

from typing import Awaitable, Callable, Sequence

from monorun.adapters.fs import copy_template_if_absent, exists, remove_tree
from monorun.adapters.process import ProcessSpec, run_group, run_process
from monorun.settings import EnvTemplate, WorkspaceSettings
from monorun.utils.console import print_header, rel_path, warn

Runner = Callable[[ProcessSpec], Awaitable[None]]
GroupRunner = Callable[[Sequence[ProcessSpec]], Awaitable[object]]

DEV_ALL_ORDER = ("server", "collector", "frontend")
LINT_ORDER = ("server", "frontend", "collector")
NODE_MODULES = "node_modules"


class WorkspaceService:
    """Run package manager tasks across the monorepo packages."""

    def __init__(
        self,
        settings: WorkspaceSettings,
        *,
        runner: Runner = run_process,
        group_runner: GroupRunner = run_group,
    ) -> None:
        self._settings = settings
        self._runner = runner
        self._group_runner = group_runner

    def package_task(self, label: str, script: str) -> ProcessSpec:
        return ProcessSpec(
            executable=self._settings.package_manager,
            arguments=(script,),
            working_directory=self._settings.package_dir(label),
            label=label,
        )

    async def install(self, *, force: bool = False) -> None:
        for label, cwd in self._settings.iter_node_packages():
            if not force and exists(cwd / NODE_MODULES):
                print(f"• {label}: dependencies already installed.")
                continue
            await self._runner(self.package_task(label, "install"))

    async def setup_envs(self) -> None:
        print_header("Copying example environment files")
        for template in self._settings.env_files:
            self.ensure_env_file(template)
        print("All environment templates copied. Review the new files before booting services.\n")

    def ensure_env_file(self, template: EnvTemplate) -> bool:
        root = self._settings.root
        if exists(template.target):
            print(f"• {template.label}: {rel_path(template.target, root)} already exists. Skipping.")
            return False
        if not exists(template.example):
            warn(f"• {template.label}: Missing example file at {rel_path(template.example, root)}.")
            return False
        created = copy_template_if_absent(template.example, template.target)
        if created:
            print(f"• {template.label}: created {rel_path(template.target, root)} from template.")
        else:
            print(f"• {template.label}: {rel_path(template.target, root)} appeared concurrently. Skipping.")
        return created

    async def dev(self, label: str) -> None:
        await self._runner(self.package_task(label, "dev"))

    async def dev_all(self) -> None:
        print_header("Starting all development servers")
        await self._group_runner([self.package_task(label, "dev") for label in DEV_ALL_ORDER])

    async def lint(self) -> None:
        print_header("Running lint tasks")
        for label in LINT_ORDER:
            await self._runner(self.package_task(label, "lint"))
        print("\nAll lint tasks completed.\n")

    async def prod_server(self) -> None:
        await self._runner(self.package_task("server", "start"))

    async def prod_frontend(self) -> None:
        await self._runner(self.package_task("frontend", "build"))

    def clean_node_modules(self) -> list[str]:
        print_header("Removing node_modules directories")
        removed: list[str] = []
        root = self._settings.root
        for label, cwd in self._settings.iter_node_packages():
            target = cwd / NODE_MODULES
            if not exists(target):
                print(f"• {label}: {rel_path(target, root)} already clean.")
                continue
            remove_tree(target)
            removed.append(label)
            print(f"• {label}: removed {rel_path(target, root)}")
        print(
            "\nnode_modules directories removed. "
            "Re-run `monorun install` or `monorun install --force` to reinstall dependencies.\n"
        )
        return removed
