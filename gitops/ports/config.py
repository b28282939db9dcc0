"""Configuration provider port.

Defines the interface for loading and accessing application configuration.
"""

from pathlib import Path
from typing import Protocol

from gitops.domain.config import GitopsConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, git_dir: Path | None = None) -> GitopsConfig:
        """Load configuration, optionally including a repository's local config.

        Args:
            git_dir: Path to the repository's .git directory holding
                     gitops.toml, or None outside a repository.

        Returns:
            GitopsConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config file is missing or invalid.
        """
        ...
