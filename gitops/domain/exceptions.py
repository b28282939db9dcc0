"""Domain exceptions for gitops.

These exceptions represent failures reported by the version-control engine
that callers can act on. They should be caught at the application boundary
(CLI) and converted to user-facing error messages.
"""


class GitopsDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class RepositoryNotFoundError(GitopsDomainError):
    """Raised when a path is not inside a git repository."""

    pass


class ReferenceNotFoundError(GitopsDomainError):
    """Raised when a branch, tag or other reference does not exist."""

    pass


class ReferenceExistsError(GitopsDomainError):
    """Raised when creating a branch or tag whose name is already taken."""

    pass


class StaleReferenceError(GitopsDomainError):
    """Raised when a reference no longer points at the parent a new commit was built on."""

    pass


class IdentityNotConfiguredError(GitopsDomainError):
    """Raised when a commit or tag needs an author identity that was not given."""

    def __init__(self) -> None:
        super().__init__(
            "No author identity configured",
            hint=(
                "Pass --author-name/--author-email or set [identity] name and email "
                "with 'gitops config init'"
            ),
        )


class CloneError(GitopsDomainError):
    """Raised when cloning a remote repository fails."""

    pass


class AuthenticationError(CloneError):
    """Raised when the remote rejects the supplied credentials."""

    pass
