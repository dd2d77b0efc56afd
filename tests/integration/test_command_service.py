from __future__ import annotations

import os
from pathlib import Path

import pytest

from monorun.cli import main as cli_main

pytestmark = pytest.mark.skipif(os.name == "nt", reason="uses a POSIX shell script as package manager")


def _fake_package_manager(tmp_path: Path, *, fail_in: str | None = None) -> Path:
    script = tmp_path / "bin" / "fake-yarn"
    script.parent.mkdir(parents=True, exist_ok=True)
    failure = f'if [ "$(basename "$(pwd -P)")" = "{fail_in}" ]; then exit 7; fi\n' if fail_in else ""
    script.write_text(
        "#!/bin/sh\n" + failure + 'echo "$1" >> ran.txt\n',
        encoding="utf-8",
    )
    os.chmod(script, 0o755)
    return script


def _configure(workspace_root: Path, package_manager: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (workspace_root / "monorun.yaml").write_text(f"package_manager: {package_manager}\n", encoding="utf-8")
    monkeypatch.setenv("MONORUN_ROOT", str(workspace_root))


def test_install_runs_real_processes(tmp_path: Path, workspace_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure(workspace_root, _fake_package_manager(tmp_path), monkeypatch)

    assert cli_main.main(["install"]) == 0

    for package in ("server", "collector", "frontend"):
        assert (workspace_root / package / "ran.txt").read_text(encoding="utf-8") == "install\n"
    assert not (workspace_root / "docker" / "ran.txt").exists()


def test_lint_failure_sets_exit_code(
    tmp_path: Path,
    workspace_root: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _configure(workspace_root, _fake_package_manager(tmp_path, fail_in="frontend"), monkeypatch)

    assert cli_main.main(["lint"]) == 1

    assert (workspace_root / "server" / "ran.txt").exists()
    assert not (workspace_root / "collector" / "ran.txt").exists()
    assert "Error: [frontend] exited with code 7" in capsys.readouterr().err


def test_missing_package_manager_is_reported(
    tmp_path: Path,
    workspace_root: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _configure(workspace_root, tmp_path / "bin" / "does-not-exist", monkeypatch)

    assert cli_main.main(["dev:server"]) == 1
    assert "could not be started" in capsys.readouterr().err
