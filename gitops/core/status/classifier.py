"""Short status codes for working-tree changes.

Each true flag on a FileChangeDescriptor contributes one character, always in
the same order: new/modified/renamed first, then the meta-states
ignored/deleted/conflicted/in-index.
"""

from collections.abc import Iterable

from gitops.domain.entities import FileChangeDescriptor, StatusEntry

# (descriptor attribute, status character), in output order
STATUS_CODES: tuple[tuple[str, str], ...] = (
    ("is_new", "A"),
    ("is_modified", "M"),
    ("is_renamed", "R"),
    ("is_ignored", "?"),
    ("is_deleted", "D"),
    ("is_conflicted", "C"),
    ("in_index", "I"),
)


def classify_file_status(descriptor: FileChangeDescriptor) -> str:
    """Build the status code for a single file.

    Args:
        descriptor: Change flags for one path.

    Returns:
        Concatenated codes of every true flag, e.g. "AI" for a newly staged
        file. Empty string when no flag is set.
    """
    return "".join(code for attr, code in STATUS_CODES if getattr(descriptor, attr))


def build_status_report(descriptors: Iterable[FileChangeDescriptor]) -> list[StatusEntry]:
    """Classify every descriptor, keeping the order they were enumerated in."""
    return [
        StatusEntry(path=descriptor.path, status=classify_file_status(descriptor))
        for descriptor in descriptors
    ]
