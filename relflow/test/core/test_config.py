"""Tests for relflow.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from relflow.core.config import (
    CONFIG_ENV_VAR,
    Config,
    ConfigError,
    StateConfig,
    WorkflowConfig,
    load_config,
    resolve_config_path,
)
from relflow.core.result import Err, Ok


class TestWorkflowConfig:
    def test_defaults(self) -> None:
        config = WorkflowConfig()
        assert config.remote == "origin"
        assert config.stable_branch == "master"
        assert config.manifest == "package.json"
        assert config.default_build_command == "npm run build"
        assert config.allowed_runners == ("npm", "cnpm")

    def test_frozen(self) -> None:
        config = WorkflowConfig()
        with pytest.raises(AttributeError):
            config.remote = "upstream"  # type: ignore[misc]


class TestStateConfig:
    def test_home_path_expands_user(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert StateConfig(home="~/.relflow").home_path == tmp_path / ".relflow"


class TestFromDict:
    def test_empty_uses_defaults(self) -> None:
        assert Config.from_dict({}) == Config()

    def test_all_sections(self) -> None:
        config = Config.from_dict(
            {
                "workflow": {
                    "remote": "upstream",
                    "stable_branch": "main",
                    "allowed_runners": ["pnpm"],
                },
                "state": {"home": "/var/relflow"},
                "hosting": {"default_platform": "gitee"},
            }
        )
        assert config.workflow.remote == "upstream"
        assert config.workflow.stable_branch == "main"
        assert config.workflow.manifest == "package.json"
        assert config.workflow.allowed_runners == ("pnpm",)
        assert config.state.home == "/var/relflow"
        assert config.hosting.default_platform == "gitee"

    def test_empty_runner_list_rejected(self) -> None:
        with pytest.raises(ValueError, match="allowed_runners"):
            Config.from_dict({"workflow": {"allowed_runners": []}})


class TestLoadConfig:
    def test_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[workflow]\nstable_branch = "main"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.workflow.stable_branch == "main"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "missing.toml")
        assert isinstance(result, Err)
        assert isinstance(result.error, ConfigError)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[workflow\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_invalid_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[workflow]\nallowed_runners = []\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message


class TestResolveConfigPath:
    def test_explicit_wins(self, tmp_path: Path) -> None:
        explicit = tmp_path / "a.toml"
        env = {CONFIG_ENV_VAR: str(tmp_path / "b.toml")}
        assert resolve_config_path(explicit, env) == explicit

    def test_env_var(self, tmp_path: Path) -> None:
        env = {CONFIG_ENV_VAR: str(tmp_path / "b.toml")}
        assert resolve_config_path(None, env) == tmp_path / "b.toml"

    def test_default_home(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_config_path(None, {}) is None

        default = tmp_path / ".relflow" / "config.toml"
        default.parent.mkdir()
        default.write_text("", encoding="utf-8")
        assert resolve_config_path(None, {}) == default
