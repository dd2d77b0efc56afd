from __future__ import annotations

from pathlib import Path

import pytest

from monorun.settings import ConfigError, load_settings


def test_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path)
    assert settings.root == tmp_path.resolve()
    assert settings.package_dir("server") == tmp_path.resolve() / "server"
    assert settings.node_packages == ("server", "collector", "frontend")
    assert [(t.label, t.target.name) for t in settings.env_files] == [
        ("frontend", ".env"),
        ("server", ".env.development"),
        ("collector", ".env"),
        ("docker", ".env"),
    ]
    assert settings.database_path == tmp_path.resolve() / "server" / "storage" / "anythingllm.db"
    assert settings.locales_dir == tmp_path.resolve() / "frontend" / "src" / "locales"
    assert settings.config_path is None


def test_root_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONORUN_ROOT", str(tmp_path))
    assert load_settings().root == tmp_path.resolve()


def test_yaml_overrides(tmp_path: Path) -> None:
    (tmp_path / "monorun.yaml").write_text(
        """
        packages:
          server: apps/api
        env_files:
          - label: api
            example: apps/api/.env.sample
            target: apps/api/.env
        database: data/dev.db
        package_manager: pnpm
        """,
        encoding="utf-8",
    )
    settings = load_settings(tmp_path)
    root = tmp_path.resolve()
    assert settings.package_dir("server") == root / "apps" / "api"
    assert settings.package_dir("frontend") == root / "frontend"
    assert len(settings.env_files) == 1
    assert settings.env_files[0].example == root / "apps" / "api" / ".env.sample"
    assert settings.database_path == root / "data" / "dev.db"
    assert settings.package_manager == "pnpm"
    assert settings.prisma_runner == "npx"
    assert settings.config_path == root / "monorun.yaml"


def test_settings_are_immutable(tmp_path: Path) -> None:
    settings = load_settings(tmp_path)
    with pytest.raises(TypeError):
        settings.packages["server"] = tmp_path  # type: ignore[index]


@pytest.mark.parametrize(
    "content",
    [
        b"packages: [server]\n",
        b"env_files:\n  - label: api\n",
        b"env_files: {}\n",
        b"package_manager: ''\n",
        b"packages: {server: ''}\n",
        b"key: [unclosed\n",
        b"package_manager: \xff\xfe\n",
    ],
)
def test_invalid_config(tmp_path: Path, content: bytes) -> None:
    (tmp_path / "monorun.yaml").write_bytes(content)
    with pytest.raises(ConfigError):
        load_settings(tmp_path)


def test_unknown_package_label(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path).package_dir("mobile")


def test_config_path_that_is_a_directory(tmp_path: Path) -> None:
    (tmp_path / "monorun.yaml").mkdir()
    with pytest.raises(ConfigError, match="could not be read"):
        load_settings(tmp_path)
