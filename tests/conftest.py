from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from monorun.adapters.process import ProcessFailure, ProcessSpec  # noqa: E402
from monorun.settings import WorkspaceSettings, load_settings  # noqa: E402

os.environ.pop("MONORUN_ROOT", None)


class RecordingRunner:
    """Stand-in for the process runner that records specs instead of spawning."""

    def __init__(self) -> None:
        self.calls: list[ProcessSpec] = []
        self.groups: list[list[ProcessSpec]] = []
        self.fail_on: dict[str, int] = {}

    async def __call__(self, spec: ProcessSpec) -> None:
        self.calls.append(spec)
        key = f"{spec.label}:{' '.join(spec.arguments)}"
        for pattern, code in self.fail_on.items():
            if pattern == key or pattern == spec.label:
                raise ProcessFailure(spec.display_label, code)

    async def group(self, specs: Sequence[ProcessSpec]) -> None:
        self.groups.append(list(specs))

    def commands(self) -> list[tuple[str | None, tuple[str, ...]]]:
        return [(spec.label, spec.arguments) for spec in self.calls]


@pytest.fixture()
def workspace_root(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    for package in ("server", "collector", "frontend", "docker"):
        package_dir = root / package
        package_dir.mkdir(parents=True)
        (package_dir / ".env.example").write_text(f"PACKAGE={package}\n", encoding="utf-8")
    (root / "frontend" / "src" / "locales").mkdir(parents=True)
    return root


@pytest.fixture()
def workspace_settings(workspace_root: Path) -> WorkspaceSettings:
    return load_settings(workspace_root)


@pytest.fixture()
def recorder() -> RecordingRunner:
    return RecordingRunner()
