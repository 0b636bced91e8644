"""Typed configuration loading and access.

Configuration is explicit: the state directory, remote name and branch
conventions are passed into the workflow instead of being looked up from the
process environment deep inside a step.

Example config.toml:

    [workflow]
    remote = "origin"
    stable_branch = "main"
    manifest = "package.json"
    default_build_command = "npm run build"
    allowed_runners = ["npm", "cnpm"]

    [state]
    home = "~/.relflow"

    [hosting]
    default_platform = "gitee"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "HostingConfig",
    "StateConfig",
    "WorkflowConfig",
    "CONFIG_ENV_VAR",
    "DEFAULT_HOME",
    "load_config",
    "resolve_config_path",
]

CONFIG_ENV_VAR = "RELFLOW_CONFIG"
DEFAULT_HOME = "~/.relflow"

DEFAULT_REMOTE = "origin"
DEFAULT_STABLE_BRANCH = "master"
DEFAULT_MANIFEST = "package.json"
DEFAULT_BUILD_COMMAND = "npm run build"
DEFAULT_RUNNERS: tuple[str, ...] = ("npm", "cnpm")
DEFAULT_PLATFORM = "github"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class WorkflowConfig:
    """Branch, remote and build conventions."""

    remote: str = DEFAULT_REMOTE
    stable_branch: str = DEFAULT_STABLE_BRANCH
    manifest: str = DEFAULT_MANIFEST
    default_build_command: str = DEFAULT_BUILD_COMMAND
    allowed_runners: tuple[str, ...] = DEFAULT_RUNNERS


@dataclass(frozen=True, slots=True)
class StateConfig:
    """Where persisted choices (platform, token, owner) live."""

    home: str = DEFAULT_HOME

    @property
    def home_path(self) -> Path:
        return Path(os.path.expandvars(self.home)).expanduser()


@dataclass(frozen=True, slots=True)
class HostingConfig:
    default_platform: str = DEFAULT_PLATFORM


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    workflow: WorkflowConfig = field(default_factory=WorkflowConfig)
    state: StateConfig = field(default_factory=StateConfig)
    hosting: HostingConfig = field(default_factory=HostingConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        workflow: StrDict = get_table(data, "workflow") or {}
        state: StrDict = get_table(data, "state") or {}
        hosting: StrDict = get_table(data, "hosting") or {}

        runners = get_str_list(workflow, "allowed_runners")
        if "allowed_runners" in workflow and not runners:
            raise ValueError("workflow.allowed_runners must be a non-empty list of strings")

        return cls(
            workflow=WorkflowConfig(
                remote=get_str(workflow, "remote") or DEFAULT_REMOTE,
                stable_branch=get_str(workflow, "stable_branch") or DEFAULT_STABLE_BRANCH,
                manifest=get_str(workflow, "manifest") or DEFAULT_MANIFEST,
                default_build_command=get_str(workflow, "default_build_command")
                or DEFAULT_BUILD_COMMAND,
                allowed_runners=tuple(runners) if runners else DEFAULT_RUNNERS,
            ),
            state=StateConfig(home=get_str(state, "home") or DEFAULT_HOME),
            hosting=HostingConfig(
                default_platform=get_str(hosting, "default_platform") or DEFAULT_PLATFORM,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to config.toml file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def resolve_config_path(explicit: Path | None, env: Mapping[str, str]) -> Path | None:
    """Pick the config file: explicit option, then env var, then the default home."""
    if explicit is not None:
        return explicit.expanduser()

    from_env = env.get(CONFIG_ENV_VAR, "").strip()
    if from_env:
        return Path(from_env).expanduser()

    default = StateConfig().home_path / "config.toml"
    if default.is_file():
        return default
    return None
