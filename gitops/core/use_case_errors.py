"""Use case error handling utilities.

Provides consistent exception handling across all use cases. All use cases
should return error responses rather than raising exceptions (except for
KeyboardInterrupt/SystemExit).

Design principles:
1. KeyboardInterrupt and SystemExit are always re-raised (never caught)
2. GitopsDomainError subclasses carry user-friendly messages
3. Unexpected exceptions are logged and converted to generic error messages
4. All use cases return responses with success/error fields
"""

import logging

from gitops.domain.exceptions import GitopsDomainError

logger = logging.getLogger(__name__)


def format_error_message(exception: Exception, operation_name: str) -> str:
    """Format an exception into a user-friendly error message.

    Handles different exception types:
    - GitopsDomainError: Uses the error's message directly
    - FileNotFoundError: Reports the missing path
    - OSError: Adds context about permissions/disk space
    - ValueError/RuntimeError: Includes exception message with operation context
    - Other exceptions: Returns a generic "internal error" message

    Args:
        exception: The exception that was caught.
        operation_name: Name of the operation for error messages (e.g., "commit").

    Returns:
        User-friendly error message string.
    """
    if isinstance(exception, GitopsDomainError):
        return exception.message
    elif isinstance(exception, FileNotFoundError):
        return f"{operation_name.capitalize()} error: {exception}"
    elif isinstance(exception, OSError):
        return (
            f"I/O error: {exception}. "
            "Check file permissions, disk space, and filesystem access."
        )
    elif isinstance(exception, (ValueError, RuntimeError)):
        return f"{operation_name.capitalize()} error: {exception}"
    else:
        return f"Internal error during {operation_name}. Check logs for details."


def error_hint(exception: Exception) -> str | None:
    """Return the actionable hint attached to a domain error, if any."""
    if isinstance(exception, GitopsDomainError):
        return exception.hint
    return None


def log_use_case_error(exception: Exception, operation_name: str) -> None:
    """Log an exception from a use case with appropriate severity.

    - GitopsDomainError: ERROR level (expected domain errors)
    - OSError/ValueError/RuntimeError: ERROR level
    - Other exceptions: EXCEPTION level (includes traceback)

    Args:
        exception: The exception that was caught.
        operation_name: Name of the operation for log messages.
    """
    if isinstance(exception, GitopsDomainError):
        logger.error(str(exception))
    elif isinstance(exception, OSError):
        logger.error(f"I/O error during {operation_name}: {exception}")
    elif isinstance(exception, (ValueError, RuntimeError)):
        logger.error(f"Error during {operation_name}: {exception}")
    else:
        logger.exception(f"Unexpected error during {operation_name}")
