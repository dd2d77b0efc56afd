"""Workspace settings for the monorun task runner."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

CONFIG_FILENAME = "monorun.yaml"
ROOT_ENV_VAR = "MONORUN_ROOT"

DEFAULT_PACKAGES: dict[str, str] = {
    "server": "server",
    "collector": "collector",
    "frontend": "frontend",
    "docker": "docker",
}
NODE_PACKAGES = ("server", "collector", "frontend")
DEFAULT_ENV_FILES: tuple[tuple[str, str, str], ...] = (
    ("frontend", "frontend/.env.example", "frontend/.env"),
    ("server", "server/.env.example", "server/.env.development"),
    ("collector", "collector/.env.example", "collector/.env"),
    ("docker", "docker/.env.example", "docker/.env"),
)
DEFAULT_DATABASE = "server/storage/anythingllm.db"


class ConfigError(RuntimeError):
    """Raised when monorun.yaml cannot be turned into settings."""


@dataclass(frozen=True)
class EnvTemplate:
    label: str
    example: Path
    target: Path


@dataclass(frozen=True)
class WorkspaceSettings:
    root: Path
    packages: Mapping[str, Path]
    env_files: tuple[EnvTemplate, ...]
    database_path: Path
    node_packages: tuple[str, ...] = NODE_PACKAGES
    package_manager: str = "yarn"
    prisma_runner: str = "npx"
    config_path: Path | None = field(default=None, compare=False)

    def package_dir(self, label: str) -> Path:
        try:
            return self.packages[label]
        except KeyError:
            raise ConfigError(f"Package '{label}' is not configured for {self.root}") from None

    @property
    def locales_dir(self) -> Path:
        return self.package_dir("frontend") / "src" / "locales"

    def iter_node_packages(self) -> list[tuple[str, Path]]:
        return [(label, self.package_dir(label)) for label in self.node_packages]


def _default_root() -> Path:
    configured = os.environ.get(ROOT_ENV_VAR, "").strip()
    if configured:
        return Path(configured).expanduser().resolve()
    return Path.cwd().resolve()


def _load_config(path: Path) -> dict[str, Any]:
    import yaml  # lazy import to keep import cost low

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"{path.name} could not be read: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path.name} is not valid YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the top level")
    return data


def _parse_packages(root: Path, raw: Any) -> dict[str, Path]:
    packages = {label: root / rel for label, rel in DEFAULT_PACKAGES.items()}
    if raw is None:
        return packages
    if not isinstance(raw, dict):
        raise ConfigError("packages must be a mapping of label to directory")
    for label, rel in raw.items():
        if not isinstance(rel, str) or not rel.strip():
            raise ConfigError(f"packages.{label} must be a non-empty string")
        packages[str(label)] = root / rel
    return packages


def _parse_env_files(root: Path, raw: Any) -> tuple[EnvTemplate, ...]:
    if raw is None:
        return tuple(
            EnvTemplate(label=label, example=root / example, target=root / target)
            for label, example, target in DEFAULT_ENV_FILES
        )
    if not isinstance(raw, list):
        raise ConfigError("env_files must be a list")
    templates: list[EnvTemplate] = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigError(f"env_files #{idx} must be a mapping")
        values = [entry.get(key) for key in ("label", "example", "target")]
        if not all(isinstance(value, str) and value for value in values):
            raise ConfigError(f"env_files #{idx} requires string label, example and target")
        label, example, target = values
        templates.append(EnvTemplate(label=label, example=root / example, target=root / target))
    return tuple(templates)


def _parse_string(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key} must be a non-empty string")
    return value


def load_settings(root: Path | None = None) -> WorkspaceSettings:
    base = root.expanduser().resolve() if root is not None else _default_root()
    config_path = base / CONFIG_FILENAME
    # present but unreadable (a directory, bad permissions) is an error, not "no config"
    data = _load_config(config_path) if config_path.exists() else {}
    return WorkspaceSettings(
        root=base,
        packages=MappingProxyType(_parse_packages(base, data.get("packages"))),
        env_files=_parse_env_files(base, data.get("env_files")),
        database_path=base / _parse_string(data, "database", DEFAULT_DATABASE),
        package_manager=_parse_string(data, "package_manager", "yarn"),
        prisma_runner=_parse_string(data, "prisma_runner", "npx"),
        config_path=config_path if config_path.exists() else None,
    )
