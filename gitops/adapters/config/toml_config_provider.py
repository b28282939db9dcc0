"""TOML-based configuration provider.

Loads configuration from a repository's .git/gitops.toml with global config fallback.

Config loading priority (highest to lowest):
1. Local: <repo>/.git/gitops.toml (repo-specific)
2. Global: ~/.config/gitops/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from gitops.domain.config import GitopsConfig
from gitops.shared.config_io import (
    get_global_config_path,
    get_local_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Implements config cascade:
    1. Load global config if present
    2. Load local config (inside the repository's git dir) if present
    3. Local values override global values (key-level merge per section)
    4. Missing values fall back to built-in defaults

    Gracefully handles missing or invalid configs with warnings.
    """

    def load(self, git_dir: Path | None = None) -> GitopsConfig:
        """Load configuration with global fallback.

        Args:
            git_dir: Repository .git directory, or None outside a repository.

        Returns:
            GitopsConfig instance with merged global/local values or defaults
        """
        global_path = get_global_config_path()

        # Start with built-in defaults
        config = GitopsConfig.default()

        # Apply global config overrides if exists
        if global_path.exists():
            try:
                global_data = load_config_data(global_path)
                config = GitopsConfig.from_partial(config, global_data)
                logger.debug("Loaded global config from %s", global_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse global config at %s: %s. Ignoring global config.",
                    global_path,
                    e,
                )

        if git_dir is None:
            return config

        # Apply local config overrides if exists
        local_path = get_local_config_path(git_dir)
        if local_path.exists():
            try:
                local_data = load_config_data(local_path)
                config = GitopsConfig.from_partial(config, local_data)
                logger.debug("Loaded local config from %s", local_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse %s: %s. Using global/default configuration.",
                    local_path,
                    e,
                )

        return config
