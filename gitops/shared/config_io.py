"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of GitopsConfig to/from TOML format.
"""

import os
import platform
import tomllib  # Built-in Python 3.11+
from pathlib import Path
from typing import Any

import tomli_w

from gitops.domain.config import GitopsConfig

LOCAL_CONFIG_NAME = "gitops.toml"


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/gitops/config.toml or ~/.config/gitops/config.toml
    - Windows: %APPDATA%/gitops/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        # Windows: use %APPDATA%
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "gitops" / "config.toml"
        # Fallback to home directory
        return Path.home() / ".config" / "gitops" / "config.toml"
    else:
        # Unix-like: respect XDG_CONFIG_HOME
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "gitops" / "config.toml"
        return Path.home() / ".config" / "gitops" / "config.toml"


def get_local_config_path(git_dir: Path) -> Path:
    """Get the repository-local config path (kept inside .git so status never sees it)."""
    return git_dir / LOCAL_CONFIG_NAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to a TOML config file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def load_config(path: Path) -> GitopsConfig:
    """Load configuration from a TOML file on top of the defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed or has invalid values
    """
    data = load_config_data(path)
    return GitopsConfig.from_partial(GitopsConfig.default(), data)


def config_to_data(config: GitopsConfig) -> dict[str, Any]:
    """Convert a GitopsConfig to a TOML-serializable dictionary."""
    return {
        "identity": {
            "name": config.identity.name,
            "email": config.identity.email,
        },
        "status": {
            "include_ignored": config.status.include_ignored,
        },
        "clone": {
            "verify_certificates": config.clone.verify_certificates,
            "username": config.clone.username,
        },
        "scaffold": {
            "path": config.scaffold.path,
            "message": config.scaffold.message,
        },
        "display": {
            "color_scheme": config.display.color_scheme,
        },
    }


def save_config(config: GitopsConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: GitopsConfig to save
        path: Destination path
    """
    data = config_to_data(config)

    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    # Write TOML
    with path.open("wb") as f:
        tomli_w.dump(data, f)
