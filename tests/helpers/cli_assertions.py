"""CLI output assertion helpers for reducing test brittleness.

These helpers prioritize semantic assertions (exit codes, repository state)
over exact string matching. When output validation is necessary, they use
regex patterns to be resilient to cosmetic changes.
"""

import re

from click.testing import Result


def assert_command_success(result: Result, *, context: str = "") -> None:
    """Assert that a CLI command succeeded.

    Args:
        result: Click test runner Result object.
        context: Optional context string for error messages.

    Example:
        result = runner.invoke(cli, ["status"])
        assert_command_success(result, context="gitops status")
    """
    ctx = f" ({context})" if context else ""
    assert result.exit_code == 0, (
        f"Command failed{ctx}:\n"
        f"  Exit code: {result.exit_code}\n"
        f"  Output: {result.output[:500]}"
    )


def assert_command_failed(
    result: Result,
    *,
    expected_code: int = 1,
    context: str = "",
) -> None:
    """Assert that a CLI command failed with expected exit code.

    Args:
        result: Click test runner Result object.
        expected_code: Expected non-zero exit code (default: 1).
        context: Optional context string for error messages.
    """
    ctx = f" ({context})" if context else ""
    assert result.exit_code == expected_code, (
        f"Expected command to fail{ctx} with code {expected_code}, "
        f"but got {result.exit_code}:\n"
        f"  Output: {result.output[:500]}"
    )


def assert_output_matches(
    result: Result,
    pattern: str,
    *,
    flags: int = 0,
    context: str = "",
) -> re.Match[str]:
    """Assert that output matches a regex pattern.

    Returns:
        The regex Match object for further inspection if needed.

    Example:
        assert_output_matches(result, r"commit: [0-9a-f]{40}")
    """
    ctx = f" ({context})" if context else ""
    match = re.search(pattern, result.output, flags)
    assert match is not None, (
        f"Pattern not found{ctx}:\n"
        f"  Pattern: {pattern}\n"
        f"  Output: {result.output[:500]}"
    )
    return match


def assert_output_contains(
    result: Result,
    *substrings: str,
    case_sensitive: bool = True,
    context: str = "",
) -> None:
    """Assert that output contains all specified substrings."""
    ctx = f" ({context})" if context else ""
    output = result.output if case_sensitive else result.output.lower()

    for substring in substrings:
        check = substring if case_sensitive else substring.lower()
        assert check in output, (
            f"Substring not found{ctx}:\n"
            f"  Expected: {substring!r}\n"
            f"  Output: {result.output[:500]}"
        )


def assert_error_message(result: Result, *, hint: str | None = None) -> None:
    """Assert that output contains an error indication, and optionally a hint.

    Example:
        result = runner.invoke(cli, ["status"])  # Outside a repository
        assert_command_failed(result)
        assert_error_message(result, hint="gitops init")
    """
    has_error = re.search(r"error", result.output, re.IGNORECASE) is not None
    assert has_error, (
        f"Expected error message in output:\n"
        f"  Output: {result.output[:500]}"
    )

    if hint:
        assert hint in result.output, (
            f"Expected hint '{hint}' in error output:\n"
            f"  Output: {result.output[:500]}"
        )
