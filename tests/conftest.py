"""Pytest configuration and shared fixtures."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from gitops.domain.entities import Signature

# ============================================================================
# Config Isolation
# ============================================================================
# Tests must never read the developer's real ~/.config/gitops/config.toml.


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path: Path):
    """Point the global config path at a per-test location that does not exist.

    Yields:
        Path of the (initially missing) global config file.
    """
    global_path = tmp_path / "global_config" / "gitops" / "config.toml"
    with patch(
        "gitops.shared.config_io.get_global_config_path", return_value=global_path
    ), patch(
        "gitops.adapters.config.toml_config_provider.get_global_config_path",
        return_value=global_path,
    ):
        yield global_path


# ============================================================================
# Git Repository Helpers
# ============================================================================
# These helpers consolidate git setup code to avoid duplication across tests.


def run_git(path: Path, *args: str) -> str:
    """Run a git command in path and return stripped stdout.

    Raises:
        subprocess.CalledProcessError: If the git command fails.
    """
    result = subprocess.run(
        ["git", *args],
        cwd=path,
        check=True,
        capture_output=True,
        text=True,
        timeout=10,
    )
    return result.stdout.strip()


def init_git_repo(
    path: Path,
    user_name: str = "Test User",
    user_email: str = "test@example.com",
) -> None:
    """Initialize a git repository with user configuration.

    Args:
        path: Directory to initialize as a git repository.
        user_name: Git user.name configuration value.
        user_email: Git user.email configuration value.
    """
    run_git(path, "init", "-q")
    run_git(path, "config", "user.name", user_name)
    run_git(path, "config", "user.email", user_email)


def git_add_and_commit(
    path: Path,
    message: str = "Initial commit",
    add_all: bool = True,
) -> None:
    """Stage files and create a git commit.

    Args:
        path: Git repository root directory.
        message: Commit message.
        add_all: If True, stages all files with 'git add .'.
    """
    if add_all:
        run_git(path, "add", ".")
    run_git(path, "commit", "-q", "-m", message)


def create_test_files(path: Path, files: dict[str, str]) -> None:
    """Create multiple files in a directory.

    Args:
        path: Base directory for file creation.
        files: Mapping of relative file paths to file contents.
               Parent directories are created automatically.
    """
    for file_path, content in files.items():
        full_path = path / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)


def create_git_repo(
    path: Path,
    files: dict[str, str] | None = None,
    commit_message: str = "Initial commit",
) -> Path:
    """Create a complete git repository with optional files.

    Combines init_git_repo(), create_test_files() and git_add_and_commit().

    Returns:
        Path to the repository root.
    """
    path.mkdir(parents=True, exist_ok=True)
    init_git_repo(path)

    if files:
        create_test_files(path, files)
        git_add_and_commit(path, message=commit_message)

    return path


@pytest.fixture
def empty_git_repo(tmp_path: Path) -> Path:
    """Create a git repository with no commits.

    Returns:
        Path to the repository root.
    """
    return create_git_repo(tmp_path / "empty_repo")


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a git repository with one commit holding two files.

    Returns:
        Path to the repository root.
    """
    return create_git_repo(
        tmp_path / "test_repo",
        files={
            "README.md": "# Test\n",
            "src/app.py": "print('hello')\n",
        },
    )


@pytest.fixture
def signature() -> Signature:
    """A fixed identity for commits and tags."""
    return Signature.now("Test User", "test@example.com")
