"""
Install configuration for binfetch.

All ambient inputs (command-line overrides, environment variables and the
local package metadata file) are resolved once into an immutable
InstallConfig, which is then passed to the installer. Nothing below the
command line reads the environment.

Precedence, highest first:
1. explicit overrides (command-line flags)
2. environment: BINFETCH_<KEY>, then the bare names OWNER, REPO, VERSION,
   ASSET and GITHUB_TOKEN
3. metadata file: top-level 'version', plus an optional 'binfetch' table
4. defaults (version 'latest')
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from binfetch.core.exceptions import ConfigurationError
from binfetch.release.locator import DEFAULT_HOST, LATEST

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_DIR = Path("bin")
DEFAULT_TIMEOUT = 30.0
DEFAULT_METADATA_FILE = Path("package.json")

# Config key -> bare environment variable names accepted besides BINFETCH_<KEY>
_ENV_ALIASES = {
    "owner": ("OWNER",),
    "repo": ("REPO",),
    "version": ("VERSION",),
    "asset": ("ASSET",),
    "token": ("GITHUB_TOKEN",),
}

_KEYS = (
    "owner",
    "repo",
    "tool_name",
    "version",
    "base_name",
    "asset",
    "token",
    "install_dir",
    "host",
    "timeout",
)


@dataclass(frozen=True)
class InstallConfig:
    """
    Everything the installer needs to know, resolved once at startup.

    Attributes:
        owner: Release owner (user or organization)
        repo: Repository name
        tool_name: Installed executable name (bin/<tool_name>)
        version: Release tag, or 'latest'
        base_name: Asset base name; defaults to tool_name
        asset: Exact asset name, bypassing candidate generation
        token: Bearer token for authenticated requests
        install_dir: Directory the executable is installed into
        host: Release host
        timeout: Per-request timeout in seconds
    """

    owner: str
    repo: str
    tool_name: str
    version: str = LATEST
    base_name: Optional[str] = None
    asset: Optional[str] = None
    token: Optional[str] = None
    install_dir: Path = DEFAULT_INSTALL_DIR
    host: str = DEFAULT_HOST
    timeout: float = DEFAULT_TIMEOUT

    @property
    def artifact_base(self) -> str:
        return self.base_name or self.tool_name

    @property
    def destination(self) -> Path:
        return Path(self.install_dir) / self.tool_name

    def validate(self) -> "InstallConfig":
        """
        Check required fields.

        Returns:
            self, for chaining

        Raises:
            ConfigurationError: If a required field is missing or invalid
        """
        for key in ("owner", "repo", "tool_name", "version", "host"):
            if not getattr(self, key):
                raise ConfigurationError(f"Missing required setting: {key}")
        if "/" in self.tool_name or "\\" in self.tool_name:
            raise ConfigurationError(
                f"Tool name must be a plain file name: {self.tool_name!r}"
            )
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive: {self.timeout}")
        return self

    def __repr__(self) -> str:
        # Keep the token out of logs and tracebacks
        token = "***" if self.token else None
        return (
            f"InstallConfig(owner={self.owner!r}, repo={self.repo!r}, "
            f"tool_name={self.tool_name!r}, version={self.version!r}, "
            f"base_name={self.base_name!r}, asset={self.asset!r}, token={token!r}, "
            f"install_dir={str(self.install_dir)!r}, host={self.host!r}, "
            f"timeout={self.timeout!r})"
        )


def load_metadata(path: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load the local package metadata file.

    JSON is used for '.json' files (e.g. package.json); YAML otherwise.

    Args:
        path: Metadata file path
        required: If True, raise error if file doesn't exist

    Returns:
        Metadata dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required but missing, or cannot be
            parsed into a mapping
    """
    path = Path(path)
    if not path.exists():
        if required:
            raise ConfigurationError(f"Metadata file not found: {path}")
        logger.debug(f"Metadata file not found (optional): {path}")
        return {}

    logger.debug(f"Loading metadata from {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid metadata in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read metadata file {path}: {e}") from e

    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Metadata in {path} must be a mapping")
    return data


def _from_metadata(metadata: Mapping[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    section = metadata.get("binfetch") or {}
    if not isinstance(section, dict):
        raise ConfigurationError("'binfetch' metadata section must be a mapping")

    for key in _KEYS:
        if key in section:
            values[key] = section[key]
    if "tool_name" not in values and "tool" in section:
        values["tool_name"] = section["tool"]

    if "version" not in values and metadata.get("version"):
        values["version"] = metadata["version"]
    return values


def _from_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key in _KEYS:
        names = (f"BINFETCH_{key.upper()}",) + _ENV_ALIASES.get(key, ())
        for name in names:
            value = environ.get(name)
            if value:
                values[key] = value
                break
    return values


def load_config(
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    metadata_path: Optional[Path] = None,
) -> InstallConfig:
    """
    Resolve the install configuration from all sources.

    Args:
        overrides: Explicit values (None entries are ignored)
        environ: Environment mapping (defaults to os.environ)
        metadata_path: Metadata file (defaults to ./package.json, optional)

    Returns:
        Validated InstallConfig

    Raises:
        ConfigurationError: If required settings are missing or invalid

    Example:
        >>> config = load_config({"owner": "andrioid", "repo": "md-social",
        ...                       "tool_name": "md-social"}, environ={})
        >>> config.version
        'latest'
    """
    if environ is None:
        environ = os.environ

    required = metadata_path is not None
    metadata = load_metadata(metadata_path or DEFAULT_METADATA_FILE, required=required)

    values: Dict[str, Any] = {}
    values.update(_from_metadata(metadata))
    values.update(_from_environment(environ))
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    unknown = set(values) - set(_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")

    if "tool_name" not in values and values.get("repo"):
        values["tool_name"] = values["repo"]

    for key in ("owner", "repo", "tool_name"):
        if not values.get(key):
            raise ConfigurationError(f"Missing required setting: {key}")

    if "version" in values:
        values["version"] = str(values["version"])
    if "install_dir" in values:
        values["install_dir"] = Path(values["install_dir"])
    if "timeout" in values:
        try:
            values["timeout"] = float(values["timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid timeout: {values['timeout']!r}") from e

    config = InstallConfig(**values).validate()
    logger.debug(f"Resolved configuration: {config!r}")
    return config


__all__ = [
    "InstallConfig",
    "DEFAULT_INSTALL_DIR",
    "DEFAULT_METADATA_FILE",
    "load_metadata",
    "load_config",
]
