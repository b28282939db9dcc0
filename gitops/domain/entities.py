"""Domain entities and value objects.

Core domain models representing the repository concepts gitops works with.
These are pure Python dataclasses with no dependencies on infrastructure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class FileChangeDescriptor:
    """Per-file change flags reported by a working-tree status scan.

    The flags are independent: a file can be renamed, staged and matched by
    an ignore rule at the same time.

    Attributes:
        path: Repository-relative path (the new path for renames).
        is_new: File is untracked or newly added to the index.
        is_modified: Content differs from the index or from HEAD.
        is_renamed: File was renamed in the index or working tree.
        is_ignored: File matches an ignore rule.
        is_deleted: File was removed from the index or working tree.
        is_conflicted: File has unresolved merge conflicts.
        in_index: Some change to the file is staged.
        original_path: Source path for renames and copies.
    """

    path: str
    is_new: bool = False
    is_modified: bool = False
    is_renamed: bool = False
    is_ignored: bool = False
    is_deleted: bool = False
    is_conflicted: bool = False
    in_index: bool = False
    original_path: str | None = None


@dataclass(frozen=True)
class StatusEntry:
    """A classified status line: status code plus path."""

    path: str
    status: str

    def format(self) -> str:
        """Render as '<status> <path>', the way status is printed to a console."""
        return f"{self.status} {self.path}"


@dataclass(frozen=True)
class Signature:
    """Identity and timestamp recorded on commits and annotated tags.

    Attributes:
        name: Person name.
        email: Email address.
        when: Timezone-aware timestamp.

    Raises:
        ValueError: If name or email is empty, or when is naive.
    """

    name: str
    email: str
    when: datetime = field(default_factory=lambda: datetime.now().astimezone())

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Signature name cannot be empty")
        if not self.email.strip():
            raise ValueError("Signature email cannot be empty")
        if self.when.tzinfo is None:
            raise ValueError("Signature timestamp must be timezone-aware")

    @classmethod
    def now(cls, name: str, email: str) -> Signature:
        """Create a signature stamped with the current local time."""
        return cls(name=name, email=email, when=datetime.now().astimezone())

    def to_git_date(self) -> str:
        """Format the timestamp in git's internal '<epoch> <+hhmm>' form."""
        return f"{int(self.when.timestamp())} {self.when.strftime('%z')}"


@dataclass(frozen=True)
class Credentials:
    """Username and password (or access token) for a remote."""

    username: str
    password: str = field(repr=False)
