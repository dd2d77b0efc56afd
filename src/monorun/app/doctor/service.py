"""Local environment checks for the monorepo toolchain."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from typing import Callable, List

from monorun.adapters.fs import exists
from monorun.adapters.which import locate
from monorun.settings import ConfigError, WorkspaceSettings
from monorun.utils.console import rel_path

MIN_NODE_MAJOR = 18
NODE_PROBE_TIMEOUT = 10.0
REQUIRED_PACKAGES = ("server", "collector", "frontend")


@dataclass(frozen=True)
class DoctorCheck:
    name: str
    passed: bool
    detail: str | None = None


@dataclass(frozen=True)
class DoctorReport:
    checks: List[DoctorCheck]

    @property
    def passed(self) -> bool:
        return all(check.passed for check in self.checks)

    @property
    def failed(self) -> List[DoctorCheck]:
        return [check for check in self.checks if not check.passed]


class CheckFailed(RuntimeError):
    """Raised by a check to report failure with a detail message."""


def node_version(timeout: float = NODE_PROBE_TIMEOUT) -> str:
    try:
        result = subprocess.run(
            ["node", "--version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            check=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise CheckFailed(f"node --version did not finish within {timeout:g}s") from exc
    except (OSError, subprocess.CalledProcessError) as exc:
        raise CheckFailed(f"node --version failed: {exc}") from exc
    return result.stdout.strip()


def parse_major(version: str) -> int:
    match = re.match(r"v?(\d+)", version.strip())
    if not match:
        raise CheckFailed(f"Unrecognised Node version string: {version!r}")
    return int(match.group(1))


class DoctorService:
    """Runs quick checks for common setup issues."""

    def __init__(
        self,
        settings: WorkspaceSettings,
        *,
        which: Callable[[str], str | None] = locate,
        node_version_probe: Callable[[], str] = node_version,
    ) -> None:
        self._settings = settings
        self._which = which
        self._node_version = node_version_probe

    def diagnose(self, *, verbose: bool = False) -> DoctorReport:
        checks: list[tuple[str, Callable[[], bool]]] = [
            (f"Node version >= {MIN_NODE_MAJOR}", self._check_node),
            (f"{self._settings.package_manager.capitalize()} is available", self._check_package_manager),
            ("Prisma CLI is available", self._check_prisma),
            ("Required directories exist", self._check_directories),
            (".env files present", lambda: self._check_env_files(verbose=verbose)),
        ]
        results: list[DoctorCheck] = []
        for name, action in checks:
            try:
                results.append(DoctorCheck(name=name, passed=bool(action())))
            except (CheckFailed, ConfigError, OSError) as exc:
                results.append(DoctorCheck(name=name, passed=False, detail=str(exc)))
        return DoctorReport(checks=results)

    def _check_node(self) -> bool:
        version = self._node_version()
        if parse_major(version) < MIN_NODE_MAJOR:
            raise CheckFailed(f"Found Node {version}.")
        return True

    def _check_package_manager(self) -> bool:
        return self._which(self._settings.package_manager) is not None

    def _check_prisma(self) -> bool:
        return self._which(self._settings.prisma_runner) is not None

    def _check_directories(self) -> bool:
        for label in REQUIRED_PACKAGES:
            path = self._settings.package_dir(label)
            if not exists(path):
                raise CheckFailed(f"{rel_path(path, self._settings.root)} is missing.")
        return True

    def _check_env_files(self, *, verbose: bool) -> bool:
        missing = [
            f"{template.label} ({rel_path(template.target, self._settings.root)})"
            for template in self._settings.env_files
            if not exists(template.target)
        ]
        if not missing:
            return True
        if verbose:
            raise CheckFailed(f"Missing env files: {', '.join(missing)}")
        return False
