"""Parse `git status --porcelain=v1 -z` output into change descriptors.

Each record is "XY PATH" where X is the index column and Y the worktree
column. Renames and copies are followed by an extra NUL-terminated record
holding the source path. Flags follow libgit2 status semantics: a file is
"new" whether it was added to the index or is untracked, "in index" whenever
the index column reports a change, and unmerged pairs are only "conflicted".
"""

import logging

from gitops.domain.entities import FileChangeDescriptor

logger = logging.getLogger(__name__)

# Unmerged XY pairs (both sides touched the path)
_CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

# Index column -> descriptor flags set in addition to in_index
_INDEX_STATUS_MAP: dict[str, tuple[str, ...]] = {
    "A": ("is_new",),
    "C": ("is_new",),  # Copy: the destination is a new file
    "M": ("is_modified",),
    "D": ("is_deleted",),
    "R": ("is_renamed",),
    "T": (),  # Type change (e.g., file -> symlink)
}

# Worktree column -> descriptor flags
_WORKTREE_STATUS_MAP: dict[str, tuple[str, ...]] = {
    "A": ("is_new",),  # Intent-to-add
    "M": ("is_modified",),
    "D": ("is_deleted",),
    "R": ("is_renamed",),
    "T": (),
}

# Codes whose record is followed by the source path
_RENAME_CODES = frozenset({"R", "C"})


def _parse_status_code(
    code: str,
    path: str,
    original_path: str | None = None,
) -> FileChangeDescriptor | None:
    """Convert an XY status code into a descriptor.

    Args:
        code: Two-character porcelain status code.
        path: Path the record refers to (destination for renames).
        original_path: Source path for renames/copies.

    Returns:
        FileChangeDescriptor, or None if the code is unknown.
    """
    if code == "??":
        return FileChangeDescriptor(path=path, is_new=True)
    if code == "!!":
        return FileChangeDescriptor(path=path, is_ignored=True)
    if code in _CONFLICT_CODES:
        return FileChangeDescriptor(path=path, is_conflicted=True, original_path=original_path)

    index_code, worktree_code = code[0], code[1]
    if index_code != " " and index_code not in _INDEX_STATUS_MAP:
        return None
    if worktree_code != " " and worktree_code not in _WORKTREE_STATUS_MAP:
        return None

    flags: dict[str, bool] = {}
    if index_code != " ":
        flags["in_index"] = True
        for flag in _INDEX_STATUS_MAP[index_code]:
            flags[flag] = True
    if worktree_code != " ":
        for flag in _WORKTREE_STATUS_MAP[worktree_code]:
            flags[flag] = True

    if not flags:
        # "  " never appears in porcelain output
        return None

    return FileChangeDescriptor(path=path, original_path=original_path, **flags)


def parse_porcelain_status(output: str) -> list[FileChangeDescriptor]:
    """Parse NUL-separated porcelain v1 status output.

    Args:
        output: Decoded stdout of `git status --porcelain=v1 -z`.

    Returns:
        Descriptors in the order git listed them. Records with unknown
        status codes are logged and skipped.
    """
    records = output.split("\0")
    descriptors: list[FileChangeDescriptor] = []

    i = 0
    while i < len(records):
        record = records[i]
        i += 1
        if not record:
            continue

        if len(record) < 4 or record[2] != " ":
            logger.warning(f"Malformed git status record {record!r}. Skipping.")
            continue

        code, path = record[:2], record[3:]
        original_path = None
        if code[0] in _RENAME_CODES or code[1] in _RENAME_CODES:
            if i < len(records) and records[i]:
                original_path = records[i]
            i += 1

        descriptor = _parse_status_code(code, path, original_path)
        if descriptor is None:
            logger.warning(f"Unknown git status code '{code}' for path '{path}'. Skipping.")
            continue
        descriptors.append(descriptor)

    return descriptors
