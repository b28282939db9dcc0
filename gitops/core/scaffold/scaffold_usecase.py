"""Scaffold use case: create a repository, seed it and make the first commit.

Sequence:
1. Open the repository at the requested path, creating it if needed
2. Write the seed files into the working tree
3. Stage the seed files and capture a status report
4. Commit on HEAD (no parents when the repository has no commits yet)
5. Resolve HEAD
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from gitops.core.commit.commit_usecase import CommitRequest, CommitUseCase
from gitops.core.status.status_usecase import StatusRequest, StatusUseCase
from gitops.core.use_case_errors import error_hint, format_error_message, log_use_case_error
from gitops.domain.entities import Signature, StatusEntry
from gitops.domain.exceptions import GitopsDomainError
from gitops.ports.vcs import RepositoryInitializer

logger = logging.getLogger(__name__)

DEFAULT_SEED_FILES: dict[str, str] = {
    "src/index.js": 'console.log("hello world")\n',
}


@dataclass
class ScaffoldRequest:
    """Request to scaffold a repository.

    Attributes:
        path: Directory of the repository (created if missing).
        author: Author and committer signature.
        message: Commit message.
        files: Seed files as repository-relative POSIX path -> text content.
    """

    path: Path
    author: Signature
    message: str = "message"
    files: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SEED_FILES))


@dataclass
class ScaffoldResponse:
    """Response from scaffolding.

    Attributes:
        workdir: Working tree of the repository.
        entries: Status report taken after staging, before committing.
        tree_id: Tree written from the index.
        commit_id: Id of the new commit.
        head_id: Id HEAD resolves to after the commit.
        success: Whether scaffolding succeeded.
        error: Error message if scaffolding failed.
        hint: Optional actionable suggestion for the error.
    """

    workdir: Path | None = None
    entries: list[StatusEntry] = field(default_factory=list)
    tree_id: str | None = None
    commit_id: str | None = None
    head_id: str | None = None
    success: bool = True
    error: str | None = None
    hint: str | None = None

    @classmethod
    def create_error(cls, message: str, hint: str | None = None) -> "ScaffoldResponse":
        return cls(success=False, error=message, hint=hint)


class ScaffoldUseCase:
    """Use case composing repository creation, status and commit."""

    def __init__(self, init_repository: RepositoryInitializer) -> None:
        """Initialize scaffold use case.

        Args:
            init_repository: Opens-or-creates a repository at a path.
        """
        self.init_repository = init_repository

    def execute(self, request: ScaffoldRequest) -> ScaffoldResponse:
        """Execute scaffolding.

        Args:
            request: Scaffold request.

        Returns:
            ScaffoldResponse with status report, commit id and HEAD.
        """
        try:
            vcs = self.init_repository(request.path)
            workdir = vcs.workdir

            for rel_path, content in request.files.items():
                target = self._seed_path(workdir, rel_path)
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
                vcs.add_to_index(rel_path)

            status = StatusUseCase(vcs).execute(StatusRequest())
            if not status.success:
                raise GitopsDomainError(status.error or "Status check failed", status.hint)

            commit = CommitUseCase(vcs).execute(
                CommitRequest(message=request.message, author=request.author)
            )
            if not commit.success:
                raise GitopsDomainError(commit.error or "Commit failed", commit.hint)

            return ScaffoldResponse(
                workdir=workdir,
                entries=status.entries,
                tree_id=commit.tree_id,
                commit_id=commit.commit_id,
                head_id=commit.head_id,
            )
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "scaffold")
            return ScaffoldResponse.create_error(
                format_error_message(e, "scaffold"), hint=error_hint(e)
            )

    @staticmethod
    def _seed_path(workdir: Path, rel_path: str) -> Path:
        """Resolve a seed file path, refusing anything outside the working tree."""
        posix = PurePosixPath(rel_path)
        if posix.is_absolute() or ".." in posix.parts or not posix.parts:
            raise ValueError(f"Seed file path must stay inside the repository: {rel_path!r}")
        return workdir.joinpath(*posix.parts)
