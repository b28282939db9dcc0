"""Git adapter implementing the VersionControl protocol using subprocess git commands."""

import logging
import os
import subprocess
from pathlib import Path

from gitops.adapters.git_cmd.status_parser import parse_porcelain_status
from gitops.domain.entities import FileChangeDescriptor, Signature
from gitops.domain.exceptions import (
    ReferenceExistsError,
    ReferenceNotFoundError,
    RepositoryNotFoundError,
    StaleReferenceError,
)

logger = logging.getLogger(__name__)

# Stable, English, non-interactive git output regardless of the caller's locale
GIT_ENV: dict[str, str] = {
    "LC_ALL": "C",
    "GIT_TERMINAL_PROMPT": "0",
}


def git_environment(extra: dict[str, str] | None = None) -> dict[str, str]:
    """Build the environment for a git subprocess."""
    env = {**os.environ, **GIT_ENV}
    if extra:
        env.update(extra)
    return env


def _signature_env(role: str, signature: Signature) -> dict[str, str]:
    """Environment variables that make git record the given identity.

    Args:
        role: "AUTHOR" or "COMMITTER".
        signature: Identity and timestamp.
    """
    return {
        f"GIT_{role}_NAME": signature.name,
        f"GIT_{role}_EMAIL": signature.email,
        f"GIT_{role}_DATE": signature.to_git_date(),
    }


def _check_ref_name(name: str) -> None:
    """Reject names git would parse as options."""
    if not name or name.startswith("-"):
        raise ValueError(f"Invalid reference name: {name!r}")


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace").strip() if data else ""


class GitAdapter:
    """Git VCS adapter using subprocess calls to git CLI."""

    def __init__(self, repo_root: Path) -> None:
        """Open the git repository containing repo_root.

        Args:
            repo_root: Path to the repository (any directory inside the
                       working tree, or the repository itself when bare).

        Raises:
            RepositoryNotFoundError: If repo_root is not a git repository.
        """
        self.repo_root = repo_root.resolve()
        # Verify this is a git repo
        if not self._is_git_repo():
            raise RepositoryNotFoundError(
                f"Not a git repository: {self.repo_root}",
                hint="Run 'gitops init <path>' to create one",
            )

        self.is_bare = self._rev_parse("--is-bare-repository") == "true"
        if not self.is_bare:
            self.repo_root = Path(self._rev_parse("--show-toplevel")).resolve()
        self._git_dir: Path | None = None

    def _is_git_repo(self) -> bool:
        """Check if repo_root is a git repository."""
        if not self.repo_root.is_dir():
            return False
        try:
            self._run_git(["rev-parse", "--git-dir"], check=True)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    def _rev_parse(self, flag: str) -> str:
        return _decode(self._run_git(["rev-parse", flag]).stdout)

    def _run_git(
        self,
        args: list[str],
        check: bool = True,
        capture_output: bool = True,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess[bytes]:
        """Run a git command in the repository.

        Args:
            args: Git command arguments (without 'git' prefix).
            check: Whether to raise CalledProcessError on non-zero exit.
            capture_output: Whether to capture stdout/stderr.
            env: Extra environment variables for this command.

        Returns:
            CompletedProcess with command results.

        Raises:
            subprocess.CalledProcessError: If check=True and command fails.
        """
        cmd = ["git", "-C", str(self.repo_root)] + args
        logger.debug("Running %s", " ".join(cmd[3:]))
        result = subprocess.run(
            cmd,
            capture_output=capture_output,
            check=check,
            env=git_environment(env),
        )
        return result

    def _format_git_error(
        self,
        error: subprocess.CalledProcessError,
        context: str,
    ) -> str:
        """Format git error with full context.

        Args:
            error: The CalledProcessError from git command.
            context: Human-readable description of what was being done.

        Returns:
            Formatted error message with exit code and stderr.
        """
        stderr = _decode(error.stderr)

        msg = f"{context} (git exit code {error.returncode})"
        if stderr:
            msg += f": {stderr}"
        else:
            msg += " (no error output from git)"

        return msg

    @property
    def workdir(self) -> Path:
        """Working tree root (the repository directory itself when bare)."""
        return self.repo_root

    @property
    def git_dir(self) -> Path:
        """Absolute path of the .git directory."""
        if self._git_dir is None:
            self._git_dir = Path(self._rev_parse("--absolute-git-dir"))
        return self._git_dir

    def add_to_index(self, path: str) -> None:
        """Stage a path (new, modified or deleted) into the index.

        Raises:
            FileNotFoundError: If path matches nothing.
            RuntimeError: If git fails.
        """
        try:
            # -A: also stage removal when the path was deleted from the worktree
            self._run_git(["add", "-A", "--", path])
        except subprocess.CalledProcessError as e:
            stderr = _decode(e.stderr)
            if "did not match any files" in stderr:
                raise FileNotFoundError(f"Path '{path}' did not match any files") from e
            raise RuntimeError(self._format_git_error(e, f"Failed to stage '{path}'")) from e

    def write_tree(self) -> str:
        """Write the index as a tree object and return its id."""
        try:
            return _decode(self._run_git(["write-tree"]).stdout)
        except subprocess.CalledProcessError as e:
            raise RuntimeError(self._format_git_error(e, "Failed to write index tree")) from e

    def get_status(self, include_ignored: bool = False) -> list[FileChangeDescriptor]:
        """Scan the working tree and return one descriptor per changed path.

        Untracked directories are expanded to individual files. Output keeps
        git's ordering.
        """
        # --porcelain=v1: stable machine format
        # -z: NUL-terminated records, no path quoting
        # --untracked-files=all: list files inside untracked directories
        args = ["status", "--porcelain=v1", "-z", "--untracked-files=all"]
        if include_ignored:
            args.append("--ignored")

        try:
            result = self._run_git(args)
        except subprocess.CalledProcessError as e:
            raise RuntimeError(self._format_git_error(e, "Failed to read status")) from e

        output = result.stdout.decode("utf-8", errors="replace")
        return parse_porcelain_status(output)

    def create_commit(
        self,
        update_ref: str | None,
        author: Signature,
        committer: Signature,
        message: str,
        tree: str,
        parents: list[str],
    ) -> str:
        """Create a commit object and optionally advance a reference to it.

        When update_ref is "HEAD" and HEAD is a symbolic ref (the usual case),
        the branch HEAD points at is advanced, which also creates it on the
        first commit.

        An existing update_ref must currently point at parents[0]; a reference
        that does not exist yet accepts any parents. The update itself is a
        compare-and-swap against the target read beforehand.

        Raises:
            StaleReferenceError: If update_ref points somewhere other than the
                first parent, or moves while the commit is being written.
        """
        if not message.strip():
            raise ValueError("Commit message cannot be empty")

        current_target: str | None = None
        if update_ref:
            _check_ref_name(update_ref)
            current_target = self._ref_target(update_ref)
            expected = parents[0] if parents else None
            if current_target is not None and current_target != expected:
                raise StaleReferenceError(
                    f"Reference '{update_ref}' is at {current_target}, "
                    f"not at the first parent {expected or '(none)'}",
                    hint=f"Resolve '{update_ref}' again and commit on top of its current target",
                )

        args = ["commit-tree", tree]
        for parent in parents:
            args += ["-p", parent]
        args += ["-m", message]

        env = {**_signature_env("AUTHOR", author), **_signature_env("COMMITTER", committer)}
        try:
            commit_id = _decode(self._run_git(args, env=env).stdout)
        except subprocess.CalledProcessError as e:
            raise RuntimeError(self._format_git_error(e, "Failed to create commit")) from e

        if update_ref:
            summary = message.strip().splitlines()[0]
            reflog = f"commit{' (initial)' if not parents else ''}: {summary}"
            # An empty old value means the ref must not exist yet
            old_value = current_target or ""
            try:
                self._run_git(["update-ref", "-m", reflog, update_ref, commit_id, old_value])
            except subprocess.CalledProcessError as e:
                stderr = _decode(e.stderr).lower()
                if "expected" in stderr or "already exists" in stderr:
                    raise StaleReferenceError(
                        f"Reference '{update_ref}' moved while committing {commit_id}",
                        hint=f"Resolve '{update_ref}' again and retry the commit",
                    ) from e
                raise RuntimeError(
                    self._format_git_error(e, f"Failed to update '{update_ref}' to {commit_id}")
                ) from e

        return commit_id

    def _ref_target(self, name: str) -> str | None:
        """Object id name points at, or None when it does not exist (unborn HEAD)."""
        result = self._run_git(["rev-parse", "--verify", "--quiet", name], check=False)
        if result.returncode != 0:
            return None
        return _decode(result.stdout)

    def resolve_reference(self, name: str) -> str:
        """Resolve a reference or id prefix to a full object id.

        Raises:
            ReferenceNotFoundError: If name resolves to nothing.
        """
        _check_ref_name(name)
        result = self._run_git(["rev-parse", "--verify", "--quiet", name], check=False)
        if result.returncode != 0:
            hint = None
            if name == "HEAD":
                hint = "The repository has no commits yet. Make an initial commit first."
            raise ReferenceNotFoundError(f"Reference '{name}' not found", hint=hint)
        return _decode(result.stdout)

    def create_tag(
        self,
        name: str,
        target: str,
        tagger: Signature,
        message: str,
        force: bool = False,
    ) -> str:
        """Create an annotated tag and return the tag object id."""
        _check_ref_name(name)
        args = ["tag", "-a", "-m", message]
        if force:
            args.append("-f")
        args += [name, target]

        try:
            self._run_git(args, env=_signature_env("COMMITTER", tagger))
        except subprocess.CalledProcessError as e:
            stderr = _decode(e.stderr)
            if "already exists" in stderr:
                raise ReferenceExistsError(
                    f"Tag '{name}' already exists",
                    hint="Use --force to replace it",
                ) from e
            if "failed to resolve" in stderr.lower() or "not a valid" in stderr.lower():
                raise ReferenceNotFoundError(f"Cannot tag '{target}': no such object") from e
            raise RuntimeError(self._format_git_error(e, f"Failed to create tag '{name}'")) from e

        return self.resolve_reference(f"refs/tags/{name}")

    def delete_tag(self, name: str) -> None:
        """Delete a tag by name."""
        _check_ref_name(name)
        try:
            self._run_git(["tag", "-d", name])
        except subprocess.CalledProcessError as e:
            if "not found" in _decode(e.stderr):
                raise ReferenceNotFoundError(f"Tag '{name}' not found") from e
            raise RuntimeError(self._format_git_error(e, f"Failed to delete tag '{name}'")) from e

    def create_branch(self, name: str, target: str, force: bool = False) -> str:
        """Create a branch at target, overwriting an existing one only when forced."""
        _check_ref_name(name)
        args = ["branch"]
        if force:
            args.append("-f")
        args += [name, target]

        try:
            self._run_git(args)
        except subprocess.CalledProcessError as e:
            stderr = _decode(e.stderr)
            if "already exists" in stderr:
                raise ReferenceExistsError(
                    f"Branch '{name}' already exists",
                    hint="Use --force to move it",
                ) from e
            if "not a valid" in stderr.lower():
                raise ReferenceNotFoundError(f"Cannot branch from '{target}': no such commit") from e
            raise RuntimeError(
                self._format_git_error(e, f"Failed to create branch '{name}'")
            ) from e

        return f"refs/heads/{name}"

    def checkout_branch(self, name: str, force: bool = False) -> None:
        """Switch the working tree to a local branch."""
        _check_ref_name(name)
        probe = self._run_git(
            ["rev-parse", "--verify", "--quiet", f"refs/heads/{name}"], check=False
        )
        if probe.returncode != 0:
            raise ReferenceNotFoundError(f"Branch '{name}' not found")

        args = ["checkout", "-q"]
        if force:
            args.append("-f")
        args += [name, "--"]

        try:
            self._run_git(args)
        except subprocess.CalledProcessError as e:
            stderr = _decode(e.stderr)
            if "would be overwritten" in stderr:
                raise RuntimeError(
                    f"Checkout of '{name}' would overwrite local changes. "
                    "Commit them or check out with force."
                ) from e
            raise RuntimeError(self._format_git_error(e, f"Failed to check out '{name}'")) from e

    def set_remote_url(self, remote: str, url: str) -> None:
        """Point an existing remote at a new URL."""
        try:
            self._run_git(["remote", "set-url", remote, url])
        except subprocess.CalledProcessError as e:
            raise RuntimeError(
                self._format_git_error(e, f"Failed to update remote '{remote}'")
            ) from e


def open_repository(path: Path) -> GitAdapter:
    """Open an existing repository.

    Raises:
        RepositoryNotFoundError: If path is not inside a git repository.
    """
    return GitAdapter(path)


def init_repository(path: Path, bare: bool = False) -> GitAdapter:
    """Create a repository at path, or reopen the one already there.

    Args:
        path: Directory for the repository (created if missing).
        bare: Create a repository without a working tree.

    Returns:
        GitAdapter for the repository.

    Raises:
        RuntimeError: If git init fails.
    """
    path = path.resolve()
    path.mkdir(parents=True, exist_ok=True)

    cmd = ["git", "init", "-q"]
    if bare:
        cmd.append("--bare")
    cmd.append(str(path))

    try:
        subprocess.run(cmd, capture_output=True, check=True, env=git_environment())
    except subprocess.CalledProcessError as e:
        stderr = _decode(e.stderr)
        raise RuntimeError(
            f"Failed to initialize repository at {path} (git exit code {e.returncode})"
            + (f": {stderr}" if stderr else "")
        ) from e

    logger.info("Initialized %srepository at %s", "bare " if bare else "", path)
    return GitAdapter(path)
