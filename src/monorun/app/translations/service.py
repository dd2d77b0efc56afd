"""Locale catalogue scripts shipped with the frontend package."""

from __future__ import annotations

from monorun.adapters.process import ProcessSpec, run_process
from monorun.app.workspace.service import Runner
from monorun.settings import WorkspaceSettings
from monorun.utils.console import print_header

NODE = "node"
VERIFY_SCRIPT = "verifyTranslations.mjs"
NORMALIZE_SCRIPT = "normalizeEn.mjs"


class TranslationsService:
    def __init__(self, settings: WorkspaceSettings, *, runner: Runner = run_process) -> None:
        self._settings = settings
        self._runner = runner

    def _script(self, script: str, label: str) -> ProcessSpec:
        return ProcessSpec(
            executable=NODE,
            arguments=(script,),
            working_directory=self._settings.locales_dir,
            label=label,
        )

    async def verify(self) -> None:
        await self._runner(self._script(VERIFY_SCRIPT, "translations"))

    async def normalize(self) -> None:
        print_header("Normalising translation catalogues")
        await self._runner(self._script(NORMALIZE_SCRIPT, "normalize"))
