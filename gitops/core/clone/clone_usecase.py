"""Clone use case: copy a remote repository to a local path."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from gitops.core.use_case_errors import error_hint, format_error_message, log_use_case_error
from gitops.domain.exceptions import ReferenceNotFoundError
from gitops.ports.progress import ProgressCallback
from gitops.ports.vcs import CloneOptions, RepositoryCloner

logger = logging.getLogger(__name__)


@dataclass
class CloneRequest:
    """Request to clone a remote.

    Attributes:
        url: Remote URL or local path.
        path: Destination directory (must not exist or be empty).
        options: Certificate policy, credential callback, branch and bare flag.
    """

    url: str
    path: Path
    options: CloneOptions = field(default_factory=CloneOptions)


@dataclass
class CloneResponse:
    """Response from a clone.

    Attributes:
        workdir: Working tree of the new clone.
        head_id: Commit HEAD points at, or None when the remote was empty.
    """

    workdir: Path | None = None
    head_id: str | None = None
    success: bool = True
    error: str | None = None
    hint: str | None = None

    @classmethod
    def create_error(cls, message: str, hint: str | None = None) -> "CloneResponse":
        return cls(success=False, error=message, hint=hint)


class CloneUseCase:
    """Use case for cloning a remote repository."""

    def __init__(self, clone_repository: RepositoryCloner) -> None:
        self.clone_repository = clone_repository

    def execute(
        self,
        request: CloneRequest,
        progress: ProgressCallback | None = None,
    ) -> CloneResponse:
        """Execute the clone.

        Args:
            request: Clone request.
            progress: Optional callback receiving transfer progress.

        Returns:
            CloneResponse with the clone location and HEAD.
        """
        try:
            vcs = self.clone_repository(request.url, request.path, request.options, progress)
            try:
                head_id: str | None = vcs.resolve_reference("HEAD")
            except ReferenceNotFoundError:
                logger.info("Cloned an empty repository; HEAD is unborn")
                head_id = None
            return CloneResponse(workdir=vcs.workdir, head_id=head_id)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "clone")
            return CloneResponse.create_error(
                format_error_message(e, "clone"), hint=error_hint(e)
            )
