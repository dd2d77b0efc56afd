from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from monorun.app.doctor import DoctorService
from monorun.app.doctor.service import CheckFailed, node_version, parse_major
from monorun.settings import WorkspaceSettings


def _which_all(binary: str) -> str | None:
    return f"/usr/bin/{binary}"


def _service(settings: WorkspaceSettings, *, version: str = "v20.11.0", which=_which_all) -> DoctorService:
    return DoctorService(settings, which=which, node_version_probe=lambda: version)


def _prepare_envs(settings: WorkspaceSettings) -> None:
    for template in settings.env_files:
        shutil.copyfile(template.example, template.target)


def test_doctor_all_checks_pass(workspace_settings: WorkspaceSettings) -> None:
    _prepare_envs(workspace_settings)
    report = _service(workspace_settings).diagnose()
    assert report.passed
    assert [check.name for check in report.checks] == [
        "Node version >= 18",
        "Yarn is available",
        "Prisma CLI is available",
        "Required directories exist",
        ".env files present",
    ]


def test_doctor_reports_old_node(workspace_settings: WorkspaceSettings) -> None:
    _prepare_envs(workspace_settings)
    report = _service(workspace_settings, version="v16.20.2").diagnose()
    assert [check.name for check in report.failed] == ["Node version >= 18"]
    assert report.failed[0].detail == "Found Node v16.20.2."


def test_doctor_missing_tools(workspace_settings: WorkspaceSettings) -> None:
    _prepare_envs(workspace_settings)
    report = _service(workspace_settings, which=lambda binary: None).diagnose()
    assert {check.name for check in report.failed} == {"Yarn is available", "Prisma CLI is available"}


def test_doctor_missing_directory(workspace_settings: WorkspaceSettings, workspace_root: Path) -> None:
    _prepare_envs(workspace_settings)
    shutil.rmtree(workspace_root / "collector")
    report = _service(workspace_settings).diagnose()
    failed = {check.name: check for check in report.failed}
    assert failed["Required directories exist"].detail == "collector is missing."


def test_doctor_env_files_verbose(workspace_settings: WorkspaceSettings) -> None:
    quiet = _service(workspace_settings).diagnose()
    env_check = quiet.checks[-1]
    assert env_check.passed is False
    assert env_check.detail is None

    verbose = _service(workspace_settings).diagnose(verbose=True)
    detail = verbose.checks[-1].detail or ""
    assert detail.startswith("Missing env files: frontend (frontend/.env)")
    assert "server (server/.env.development)" in detail


def test_doctor_probe_failure_is_reported(workspace_settings: WorkspaceSettings) -> None:
    def broken_probe() -> str:
        raise CheckFailed("node --version failed: not found")

    report = DoctorService(workspace_settings, which=_which_all, node_version_probe=broken_probe).diagnose()
    assert report.checks[0].passed is False
    assert "not found" in (report.checks[0].detail or "")


def test_parse_major() -> None:
    assert parse_major("v18.19.0") == 18
    assert parse_major("20.1.0\n") == 20


def test_node_version_times_out(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}

    def _hanging(cmd, **kwargs):
        seen.update(kwargs)
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr("monorun.app.doctor.service.subprocess.run", _hanging)
    with pytest.raises(CheckFailed, match="did not finish within 2s"):
        node_version(timeout=2)
    assert seen["timeout"] == 2
