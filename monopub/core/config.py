"""Typed configuration loading and access.

This module provides dataclasses for the optional `monopub.toml` file found
at the repository root.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitConfig",
    "PackagesConfig",
    "RegistryConfig",
    "CONFIG_FILE_NAME",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "monopub.toml"

DEFAULT_PACKAGES_DIR = "packages"
DEFAULT_MANIFEST_NAME = "package.json"
DEFAULT_REVISION = "HEAD"
DEFAULT_VIEW_COMMAND = ("npm", "view", "{name}", "version")
DEFAULT_PUBLISH_COMMAND = ("npm", "publish")
DEFAULT_RANGE_PREFIX = "^"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class PackagesConfig:
    """Where the packages live and what their manifest is called."""

    dir: str = DEFAULT_PACKAGES_DIR
    manifest: str = DEFAULT_MANIFEST_NAME


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Revision holding the previously released manifests."""

    revision: str = DEFAULT_REVISION


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Registry commands.

    `view` is formatted with `{name}` (the registry name) and must print the
    latest published version. `publish` runs inside the package directory.
    """

    view: tuple[str, ...] = DEFAULT_VIEW_COMMAND
    publish: tuple[str, ...] = DEFAULT_PUBLISH_COMMAND
    range_prefix: str = DEFAULT_RANGE_PREFIX

    def view_command(self, name: str) -> list[str]:
        return [part.format(name=name) for part in self.view]


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    packages: PackagesConfig = field(default_factory=PackagesConfig)
    git: GitConfig = field(default_factory=GitConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        packages: StrDict = get_table(data, "packages") or {}
        git: StrDict = get_table(data, "git") or {}
        registry: StrDict = get_table(data, "registry") or {}

        range_prefix = registry.get("range_prefix", DEFAULT_RANGE_PREFIX)
        if not isinstance(range_prefix, str):
            raise TypeError("registry.range_prefix must be a string")

        return cls(
            packages=PackagesConfig(
                dir=get_str(packages, "dir") or DEFAULT_PACKAGES_DIR,
                manifest=get_str(packages, "manifest") or DEFAULT_MANIFEST_NAME,
            ),
            git=GitConfig(revision=get_str(git, "revision") or DEFAULT_REVISION),
            registry=RegistryConfig(
                view=tuple(get_str_list(registry, "view") or DEFAULT_VIEW_COMMAND),
                publish=tuple(get_str_list(registry, "publish") or DEFAULT_PUBLISH_COMMAND),
                range_prefix=range_prefix,
            ),
        )

    def with_packages_dir(self, packages_dir: str | None) -> Config:
        """Return a copy with the packages directory overridden (CLI flag)."""
        if not packages_dir:
            return self
        return replace(self, packages=replace(self.packages, dir=packages_dir))


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
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
        path: Path to monopub.toml

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


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise use the defaults.

    A file that exists but is invalid is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
