"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all gitops CLI commands.
"""

from typing import NoReturn

import click


class GitopsCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise GitopsCliError(
            "Not a git repository: /tmp/x",
            hint="Run 'gitops init <path>' to create one"
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def use_case_failed(operation: str, error: str | None, hint: str | None = None) -> NoReturn:
    """Raise error for a use case that returned an error response.

    Raises:
        GitopsCliError: Always.
    """
    raise GitopsCliError(f"{operation} failed: {error or 'unknown error'}", hint=hint)
