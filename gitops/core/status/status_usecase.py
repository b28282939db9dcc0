"""Status use case for reporting working-tree changes."""

import logging
from dataclasses import dataclass, field

from gitops.core.status.classifier import build_status_report
from gitops.core.use_case_errors import error_hint, format_error_message, log_use_case_error
from gitops.domain.entities import StatusEntry
from gitops.ports.vcs import VersionControl

logger = logging.getLogger(__name__)


@dataclass
class StatusRequest:
    """Request to scan the working tree.

    Attributes:
        include_ignored: Also report files matched by ignore rules.
    """

    include_ignored: bool = False


@dataclass
class StatusResponse:
    """Response containing classified working-tree changes.

    Attributes:
        entries: One entry per changed path, in engine order.
        success: Whether the scan succeeded.
        error: Error message if the scan failed.
        hint: Optional actionable suggestion for the error.
    """

    entries: list[StatusEntry] = field(default_factory=list)
    success: bool = True
    error: str | None = None
    hint: str | None = None

    @property
    def is_clean(self) -> bool:
        return self.success and not self.entries

    @classmethod
    def create_success(cls, entries: list[StatusEntry]) -> "StatusResponse":
        return cls(entries=entries)

    @classmethod
    def create_error(cls, message: str, hint: str | None = None) -> "StatusResponse":
        return cls(success=False, error=message, hint=hint)


class StatusUseCase:
    """Use case for classifying working-tree changes into status codes."""

    def __init__(self, vcs: VersionControl) -> None:
        """Initialize status use case.

        Args:
            vcs: Version control engine adapter for the repository.
        """
        self.vcs = vcs

    def execute(self, request: StatusRequest) -> StatusResponse:
        """Execute the status scan.

        Error handling contract:
            - KeyboardInterrupt/SystemExit are re-raised (user wants to exit)
            - All other exceptions are caught and converted to error responses

        Args:
            request: Status request.

        Returns:
            StatusResponse with one entry per changed path.
        """
        try:
            descriptors = self.vcs.get_status(include_ignored=request.include_ignored)
            entries = build_status_report(descriptors)
            logger.debug("Status scan found %d changed paths", len(entries))
            return StatusResponse.create_success(entries)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "status check")
            return StatusResponse.create_error(
                format_error_message(e, "status check"), hint=error_hint(e)
            )
