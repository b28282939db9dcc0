"""Config domain models for gitops.

Configuration is stored in TOML files (global and per-repository) and holds
the identity used for commits and tags, clone policy, and display defaults.
This module defines the domain models that represent validated configuration
state.
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Literal


@dataclass(frozen=True)
class IdentityConfig:
    """Author/committer identity for commits and annotated tags.

    Attributes:
        name: Person name recorded on commits. Empty means "not configured".
        email: Email address recorded on commits. Empty means "not configured".

    Raises:
        ValueError: If only one of name/email is set, or email has no '@'.
    """

    name: str = ""
    email: str = ""

    def __post_init__(self) -> None:
        """Validate identity config after initialization."""
        if bool(self.name) != bool(self.email):
            raise ValueError("identity name and email must be set together")
        if self.email and "@" not in self.email:
            raise ValueError(f"identity email is not an address: {self.email!r}")

    @property
    def is_configured(self) -> bool:
        return bool(self.name and self.email)


@dataclass(frozen=True)
class StatusConfig:
    """Configuration for working-tree status scans.

    Attributes:
        include_ignored: Report files matched by ignore rules (default: False)
    """

    include_ignored: bool = False


@dataclass(frozen=True)
class CloneConfig:
    """Configuration for cloning remotes.

    Attributes:
        verify_certificates: Verify TLS certificates of https remotes.
        username: Default username offered to https remotes. Passwords and
                  tokens are never stored in config.
    """

    verify_certificates: bool = True
    username: str = ""


@dataclass(frozen=True)
class ScaffoldConfig:
    """Configuration for the scaffold command.

    Attributes:
        path: Directory the scaffold repository is created in.
        message: Commit message for the scaffold commit.

    Raises:
        ValueError: If path or message is empty.
    """

    path: str = str(Path.home() / "gitops-scaffold")
    message: str = "message"

    def __post_init__(self) -> None:
        """Validate scaffold config after initialization."""
        if not self.path:
            raise ValueError("scaffold path cannot be empty")
        if not self.message.strip():
            raise ValueError("scaffold message cannot be empty")


@dataclass(frozen=True)
class DisplayConfig:
    """Configuration for output display and formatting.

    Attributes:
        color_scheme: Color output mode - "auto" (default), "always", or "never"
    """

    color_scheme: Literal["auto", "always", "never"] = "auto"

    def __post_init__(self) -> None:
        """Validate display config after initialization."""
        if self.color_scheme not in ("auto", "always", "never"):
            raise ValueError(
                f"color_scheme must be 'auto', 'always' or 'never', got {self.color_scheme!r}"
            )


_SECTIONS = ("identity", "status", "clone", "scaffold", "display")


@dataclass(frozen=True)
class GitopsConfig:
    """Complete gitops configuration.

    Attributes:
        identity: Commit/tag identity
        status: Status scan configuration
        clone: Clone policy configuration
        scaffold: Scaffold command configuration
        display: Display and formatting configuration
    """

    identity: IdentityConfig = field(default_factory=IdentityConfig)
    status: StatusConfig = field(default_factory=StatusConfig)
    clone: CloneConfig = field(default_factory=CloneConfig)
    scaffold: ScaffoldConfig = field(default_factory=ScaffoldConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @staticmethod
    def default() -> "GitopsConfig":
        """Create a config with all default values."""
        return GitopsConfig(
            identity=IdentityConfig(),
            status=StatusConfig(),
            clone=CloneConfig(),
            scaffold=ScaffoldConfig(),
            display=DisplayConfig(),
        )

    @staticmethod
    def from_partial(base: "GitopsConfig", data: dict[str, Any]) -> "GitopsConfig":
        """Overlay raw config data on top of an existing config.

        Keys present in a section override the base value; everything else is
        kept. Each section is rebuilt through its constructor so validation
        runs on the merged result.

        Args:
            base: Config to start from.
            data: Parsed TOML data (section name -> key/value mapping).

        Returns:
            New GitopsConfig with overrides applied.

        Raises:
            ValueError: If a section is not a table, has unknown keys, or the
                        merged values fail validation.
        """
        unknown_sections = set(data) - set(_SECTIONS)
        if unknown_sections:
            raise ValueError(f"Unknown config sections: {', '.join(sorted(unknown_sections))}")

        updates: dict[str, Any] = {}
        for section in _SECTIONS:
            if section not in data:
                continue
            section_data = data[section]
            if not isinstance(section_data, dict):
                raise ValueError(f"Config section [{section}] must be a table")

            current = getattr(base, section)
            allowed = {f.name for f in fields(current)}
            unknown_keys = set(section_data) - allowed
            if unknown_keys:
                raise ValueError(
                    f"Unknown keys in [{section}]: {', '.join(sorted(unknown_keys))}"
                )
            try:
                updates[section] = replace(current, **section_data)
            except TypeError as e:
                raise ValueError(f"Invalid value in [{section}]: {e}") from e

        return replace(base, **updates)
