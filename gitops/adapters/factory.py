"""Factory classes for adapter instantiation.

This module centralizes the creation of engine adapters and config
providers, keeping the CLI layer free from direct adapter imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitops.adapters.git_cmd import GitAdapter
    from gitops.ports.config import ConfigProvider
    from gitops.ports.vcs import RepositoryCloner, RepositoryInitializer


class ConfigFactory:
    """Factory for creating configuration providers."""

    def create_config_provider(self) -> ConfigProvider:
        """Create the TOML config provider."""
        from gitops.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider()


class RepositoryFactory:
    """Factory for opening, creating and cloning repositories."""

    def open_git_adapter(self, path: Path) -> GitAdapter:
        """Open the repository containing path.

        Raises:
            RepositoryNotFoundError: If path is not inside a git repository.
        """
        from gitops.adapters.git_cmd import open_repository

        return open_repository(path)

    def repository_initializer(self) -> RepositoryInitializer:
        """Return the callable that opens-or-creates repositories."""
        from gitops.adapters.git_cmd import init_repository

        return init_repository

    def repository_cloner(self) -> RepositoryCloner:
        """Return the callable that clones remotes."""
        from gitops.adapters.git_cmd import clone_repository

        return clone_repository
