"""Version Control System (VCS) port interface.

Defines the abstract interface gitops needs from a version-control engine.
The engine does all the real work (index, trees, commits, refs, transport);
gitops only sequences calls and formats output.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gitops.domain.entities import FileChangeDescriptor, Signature
from gitops.ports.credentials import CredentialProvider
from gitops.ports.progress import ProgressCallback


class VersionControl(Protocol):
    """Protocol for operations on an opened repository."""

    @property
    def workdir(self) -> Path:
        """Absolute path of the working tree (the repository path for bare repos)."""
        ...

    def add_to_index(self, path: str) -> None:
        """Stage a path into the index.

        Args:
            path: Path relative to repository root. Deleted files are staged
                  as removals.

        Raises:
            FileNotFoundError: If path matches nothing in the working tree or index.
            RuntimeError: If the engine fails.
        """
        ...

    def write_tree(self) -> str:
        """Serialize the index to a tree object.

        Returns:
            Tree id (40-char hex string).
        """
        ...

    def get_status(self, include_ignored: bool = False) -> list[FileChangeDescriptor]:
        """Scan the working tree against the index and HEAD.

        Args:
            include_ignored: Also report files matched by ignore rules.

        Returns:
            One descriptor per changed path, in engine order.
        """
        ...

    def create_commit(
        self,
        update_ref: str | None,
        author: Signature,
        committer: Signature,
        message: str,
        tree: str,
        parents: list[str],
    ) -> str:
        """Create a commit object.

        Args:
            update_ref: Reference to point at the new commit (e.g. "HEAD"),
                        or None to leave references untouched.
            author: Author signature.
            committer: Committer signature.
            message: Commit message.
            tree: Tree id the commit snapshots.
            parents: Parent commit ids (empty for a root commit). An existing
                     update_ref must currently point at the first one.

        Returns:
            Commit id.

        Raises:
            StaleReferenceError: If update_ref exists and does not point at
                parents[0].
        """
        ...

    def resolve_reference(self, name: str) -> str:
        """Resolve a reference name (branch, tag, HEAD, id prefix) to an object id.

        Raises:
            ReferenceNotFoundError: If the reference does not exist.
        """
        ...

    def create_tag(
        self,
        name: str,
        target: str,
        tagger: Signature,
        message: str,
        force: bool = False,
    ) -> str:
        """Create an annotated tag.

        Returns:
            Tag object id.

        Raises:
            ReferenceExistsError: If the tag exists and force is False.
            ReferenceNotFoundError: If target cannot be resolved.
        """
        ...

    def delete_tag(self, name: str) -> None:
        """Delete a tag.

        Raises:
            ReferenceNotFoundError: If the tag does not exist.
        """
        ...

    def create_branch(self, name: str, target: str, force: bool = False) -> str:
        """Create a branch pointing at target.

        Returns:
            Full reference name (refs/heads/<name>).

        Raises:
            ReferenceExistsError: If the branch exists and force is False.
            ReferenceNotFoundError: If target cannot be resolved.
        """
        ...

    def checkout_branch(self, name: str, force: bool = False) -> None:
        """Check out a branch.

        Args:
            name: Branch name.
            force: Discard local changes that would block the checkout.

        Raises:
            ReferenceNotFoundError: If the branch does not exist.
        """
        ...


@dataclass(frozen=True)
class CloneOptions:
    """Options for cloning a remote repository.

    Attributes:
        verify_certificates: Verify TLS certificates of https remotes.
        credentials: Called to resolve credentials for http(s) remotes.
        branch: Branch to check out instead of the remote's default.
        bare: Create a bare clone.
    """

    verify_certificates: bool = True
    credentials: CredentialProvider | None = None
    branch: str | None = None
    bare: bool = False


class RepositoryInitializer(Protocol):
    """Protocol for opening-or-creating a repository at a path."""

    def __call__(self, path: Path, bare: bool = False) -> VersionControl: ...


class RepositoryCloner(Protocol):
    """Protocol for cloning a remote into a local path."""

    def __call__(
        self,
        url: str,
        path: Path,
        options: CloneOptions,
        progress: ProgressCallback | None = None,
    ) -> VersionControl: ...
