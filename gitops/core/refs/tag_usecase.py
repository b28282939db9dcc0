"""Tag use cases: create and delete annotated tags."""

import logging
from dataclasses import dataclass

from gitops.core.use_case_errors import error_hint, format_error_message, log_use_case_error
from gitops.domain.entities import Signature
from gitops.ports.vcs import VersionControl

logger = logging.getLogger(__name__)


@dataclass
class CreateTagRequest:
    """Request to create an annotated tag.

    Attributes:
        name: Tag name (without refs/tags/).
        message: Tag message.
        tagger: Tagger signature.
        target: Reference or object id to tag.
        force: Replace an existing tag of the same name.
    """

    name: str
    message: str
    tagger: Signature
    target: str = "HEAD"
    force: bool = False


@dataclass
class CreateTagResponse:
    """Response from tag creation.

    Attributes:
        tag_id: Id of the annotated tag object.
        target_id: Id of the tagged object.
    """

    tag_id: str | None = None
    target_id: str | None = None
    success: bool = True
    error: str | None = None
    hint: str | None = None

    @classmethod
    def create_error(cls, message: str, hint: str | None = None) -> "CreateTagResponse":
        return cls(success=False, error=message, hint=hint)


class CreateTagUseCase:
    """Use case for creating an annotated tag."""

    def __init__(self, vcs: VersionControl) -> None:
        self.vcs = vcs

    def execute(self, request: CreateTagRequest) -> CreateTagResponse:
        try:
            target_id = self.vcs.resolve_reference(request.target)
            tag_id = self.vcs.create_tag(
                request.name,
                target_id,
                request.tagger,
                request.message,
                force=request.force,
            )
            logger.info("Created tag %s -> %s", request.name, target_id)
            return CreateTagResponse(tag_id=tag_id, target_id=target_id)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "tag creation")
            return CreateTagResponse.create_error(
                format_error_message(e, "tag creation"), hint=error_hint(e)
            )


@dataclass
class DeleteTagRequest:
    """Request to delete a tag."""

    name: str


@dataclass
class DeleteTagResponse:
    """Response from tag deletion."""

    success: bool = True
    error: str | None = None
    hint: str | None = None


class DeleteTagUseCase:
    """Use case for deleting a tag."""

    def __init__(self, vcs: VersionControl) -> None:
        self.vcs = vcs

    def execute(self, request: DeleteTagRequest) -> DeleteTagResponse:
        try:
            self.vcs.delete_tag(request.name)
            logger.info("Deleted tag %s", request.name)
            return DeleteTagResponse()
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "tag deletion")
            return DeleteTagResponse(
                success=False,
                error=format_error_message(e, "tag deletion"),
                hint=error_hint(e),
            )
