"""Branch use cases: create a branch and check one out."""

import logging
from dataclasses import dataclass

from gitops.core.use_case_errors import error_hint, format_error_message, log_use_case_error
from gitops.ports.vcs import VersionControl

logger = logging.getLogger(__name__)


@dataclass
class CreateBranchRequest:
    """Request to create a branch.

    Attributes:
        name: Branch name (without refs/heads/).
        target: Reference or commit id the branch should point at.
        force: Move the branch if it already exists instead of failing.
        checkout: Check the branch out after creating it.
    """

    name: str
    target: str = "HEAD"
    force: bool = False
    checkout: bool = False


@dataclass
class CreateBranchResponse:
    """Response from branch creation.

    Attributes:
        ref_name: Full reference name (refs/heads/<name>).
        commit_id: Commit the branch points at.
        checked_out: Whether the branch was checked out.
    """

    ref_name: str | None = None
    commit_id: str | None = None
    checked_out: bool = False
    success: bool = True
    error: str | None = None
    hint: str | None = None

    @classmethod
    def create_error(cls, message: str, hint: str | None = None) -> "CreateBranchResponse":
        return cls(success=False, error=message, hint=hint)


class CreateBranchUseCase:
    """Use case for creating (and optionally checking out) a branch."""

    def __init__(self, vcs: VersionControl) -> None:
        self.vcs = vcs

    def execute(self, request: CreateBranchRequest) -> CreateBranchResponse:
        try:
            ref_name = self.vcs.create_branch(request.name, request.target, force=request.force)
            commit_id = self.vcs.resolve_reference(ref_name)
            logger.info("Created %s at %s", ref_name, commit_id)

            if request.checkout:
                self.vcs.checkout_branch(request.name)

            return CreateBranchResponse(
                ref_name=ref_name,
                commit_id=commit_id,
                checked_out=request.checkout,
            )
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "branch creation")
            return CreateBranchResponse.create_error(
                format_error_message(e, "branch creation"), hint=error_hint(e)
            )


@dataclass
class CheckoutRequest:
    """Request to check out a branch.

    Attributes:
        name: Branch name.
        force: Discard working-tree changes that would block the checkout.
    """

    name: str
    force: bool = False


@dataclass
class CheckoutResponse:
    """Response from a checkout.

    Attributes:
        head_id: Commit HEAD points at after the checkout.
    """

    head_id: str | None = None
    success: bool = True
    error: str | None = None
    hint: str | None = None

    @classmethod
    def create_error(cls, message: str, hint: str | None = None) -> "CheckoutResponse":
        return cls(success=False, error=message, hint=hint)


class CheckoutUseCase:
    """Use case for switching the working tree to a branch."""

    def __init__(self, vcs: VersionControl) -> None:
        self.vcs = vcs

    def execute(self, request: CheckoutRequest) -> CheckoutResponse:
        try:
            self.vcs.checkout_branch(request.name, force=request.force)
            head_id = self.vcs.resolve_reference("HEAD")
            logger.info("Checked out %s (%s)", request.name, head_id)
            return CheckoutResponse(head_id=head_id)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "checkout")
            return CheckoutResponse.create_error(
                format_error_message(e, "checkout"), hint=error_hint(e)
            )
