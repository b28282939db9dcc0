"""Commit use case: stage paths, write the index tree and record a commit."""

import logging
from dataclasses import dataclass, field

from gitops.core.use_case_errors import error_hint, format_error_message, log_use_case_error
from gitops.domain.entities import Signature
from gitops.domain.exceptions import ReferenceNotFoundError
from gitops.ports.vcs import VersionControl

logger = logging.getLogger(__name__)


@dataclass
class CommitRequest:
    """Request to create a commit.

    Attributes:
        message: Commit message.
        author: Author signature.
        committer: Committer signature (defaults to author).
        paths: Repository-relative paths to stage before committing.
        update_ref: Reference advanced to the new commit. Its current target
                    (if any) becomes the only parent.
    """

    message: str
    author: Signature
    committer: Signature | None = None
    paths: list[str] = field(default_factory=list)
    update_ref: str = "HEAD"


@dataclass
class CommitResponse:
    """Response from a commit.

    Attributes:
        commit_id: Id of the new commit.
        tree_id: Id of the tree written from the index.
        parents: Parent commit ids (empty for the first commit).
        head_id: Id the update_ref resolves to after the commit.
        success: Whether the commit succeeded.
        error: Error message if the commit failed.
        hint: Optional actionable suggestion for the error.
    """

    commit_id: str | None = None
    tree_id: str | None = None
    parents: list[str] = field(default_factory=list)
    head_id: str | None = None
    success: bool = True
    error: str | None = None
    hint: str | None = None

    @property
    def is_root(self) -> bool:
        return self.success and not self.parents

    @classmethod
    def create_error(cls, message: str, hint: str | None = None) -> "CommitResponse":
        return cls(success=False, error=message, hint=hint)


class CommitUseCase:
    """Use case for staging files and committing the index."""

    def __init__(self, vcs: VersionControl) -> None:
        self.vcs = vcs

    def execute(self, request: CommitRequest) -> CommitResponse:
        """Execute the commit.

        Error handling contract:
            - KeyboardInterrupt/SystemExit are re-raised (user wants to exit)
            - All other exceptions are caught and converted to error responses

        Args:
            request: Commit request.

        Returns:
            CommitResponse with the new commit id.
        """
        try:
            for path in request.paths:
                self.vcs.add_to_index(path)
                logger.debug("Staged %s", path)

            tree_id = self.vcs.write_tree()
            parents = self._current_parents(request.update_ref)

            commit_id = self.vcs.create_commit(
                request.update_ref,
                request.author,
                request.committer or request.author,
                request.message,
                tree_id,
                parents,
            )
            head_id = self.vcs.resolve_reference(request.update_ref)
            logger.info("Created commit %s on %s", commit_id, request.update_ref)

            return CommitResponse(
                commit_id=commit_id,
                tree_id=tree_id,
                parents=parents,
                head_id=head_id,
            )
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "commit")
            return CommitResponse.create_error(
                format_error_message(e, "commit"), hint=error_hint(e)
            )

    def _current_parents(self, ref: str) -> list[str]:
        """Return [target of ref], or [] when ref does not exist yet (first commit)."""
        try:
            return [self.vcs.resolve_reference(ref)]
        except ReferenceNotFoundError:
            logger.debug("%s has no target yet; creating a root commit", ref)
            return []
