"""Clone remotes with the git CLI, relaying transfer progress.

git writes transfer progress to stderr as carriage-return separated updates
("Receiving objects:  45% (450/1000)"). Each phase is forwarded to a
ProgressCallback as its own start/progress/complete sequence.
"""

import logging
import re
import subprocess
from pathlib import Path
from typing import NoReturn

from gitops.adapters.git_cmd.auth import (
    inject_credentials,
    is_http_url,
    mask_credentials,
    strip_credentials,
)
from gitops.adapters.git_cmd.git_adapter import GitAdapter, git_environment
from gitops.domain.entities import Credentials
from gitops.domain.exceptions import AuthenticationError, CloneError
from gitops.ports.progress import ProgressCallback
from gitops.ports.vcs import CloneOptions

logger = logging.getLogger(__name__)

_PROGRESS_RE = re.compile(
    r"^(?:remote:\s*)?(?P<phase>[A-Za-z][A-Za-z ]*?):\s+\d+%\s+\((?P<current>\d+)/(?P<total>\d+)\)"
)

# stderr fragments git prints when the remote rejects or requests credentials
_AUTH_FAILURE_MARKERS = (
    "Authentication failed",
    "could not read Username",
    "could not read Password",
    "Invalid username or password",
    "HTTP Basic: Access denied",
    "The requested URL returned error: 401",
    "The requested URL returned error: 403",
)

_CERTIFICATE_FAILURE_MARKERS = (
    "SSL certificate problem",
    "server certificate verification failed",
)


def parse_progress_line(line: str) -> tuple[str, int, int] | None:
    """Extract (phase, current, total) from a git progress line.

    Returns:
        Parsed progress, or None for lines that are not counted progress.
    """
    match = _PROGRESS_RE.match(line.strip())
    if match is None:
        return None
    return match.group("phase"), int(match.group("current")), int(match.group("total"))


class TransferProgressRelay:
    """Turns git progress lines into ProgressCallback calls."""

    def __init__(self, callback: ProgressCallback) -> None:
        self.callback = callback
        self.phase: str | None = None

    def feed(self, line: str) -> None:
        parsed = parse_progress_line(line)
        if parsed is None:
            return

        phase, current, total = parsed
        if phase != self.phase:
            if self.phase is not None:
                self.callback.on_complete()
            self.callback.on_start(total, phase)
            self.phase = phase
        self.callback.on_progress(current)

    def finish(self) -> None:
        if self.phase is not None:
            self.callback.on_complete()
            self.phase = None


def _read_stderr(process: subprocess.Popen[bytes], relay: TransferProgressRelay | None) -> str:
    """Drain stderr, relaying progress updates, and return the full text."""
    stream = process.stderr
    if stream is None:
        return ""
    lines: list[str] = []
    pending = ""

    for chunk in iter(lambda: stream.read1(4096), b""):
        pending += chunk.decode("utf-8", errors="replace")
        *complete, pending = re.split(r"[\r\n]", pending)
        for line in complete:
            if not line:
                continue
            lines.append(line)
            if relay is not None:
                relay.feed(line)

    if pending:
        lines.append(pending)
        if relay is not None:
            relay.feed(pending)

    # Progress updates repeat the same phase many times; keep only the
    # non-progress lines for error reporting
    return "\n".join(
        line
        for line in lines
        if parse_progress_line(line) is None and not line.startswith("Cloning into")
    )


def _is_auth_challenge(stderr: str) -> bool:
    return any(marker in stderr for marker in _AUTH_FAILURE_MARKERS)


def _raise_clone_failure(
    returncode: int,
    stderr: str,
    display_url: str,
    credentials: Credentials | None,
) -> NoReturn:
    stderr = mask_credentials(stderr, credentials)
    message = f"Failed to clone {display_url} (git exit code {returncode})"
    if stderr:
        message += f": {stderr}"

    if _is_auth_challenge(stderr):
        raise AuthenticationError(
            message,
            hint="Check the username and password/token, or pass --username/--password",
        )
    if any(marker in stderr for marker in _CERTIFICATE_FAILURE_MARKERS):
        raise CloneError(
            message,
            hint="Use --no-verify-certificates only if you trust this server",
        )
    raise CloneError(message)


def _run_clone(cmd: list[str], relay: TransferProgressRelay | None) -> tuple[int, str]:
    """Run one git clone attempt and return (exit code, non-progress stderr)."""
    process = subprocess.Popen(
        cmd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        env=git_environment(),
    )
    try:
        stderr = _read_stderr(process, relay)
        returncode = process.wait()
    finally:
        if relay is not None:
            relay.finish()
        if process.poll() is None:
            process.kill()
            process.wait()
    return returncode, stderr


def clone_repository(
    url: str,
    path: Path,
    options: CloneOptions,
    progress: ProgressCallback | None = None,
) -> GitAdapter:
    """Clone url into path.

    The first attempt uses url as given. The credential callback is only
    consulted when an http(s) remote answers that attempt with an
    authentication challenge; the clone is then retried once with the
    credentials it returns.

    Args:
        url: Remote URL or local repository path.
        path: Destination directory; must be missing or empty.
        options: Certificate policy, credential callback, branch, bare flag.
        progress: Optional callback receiving transfer progress.

    Returns:
        GitAdapter for the new clone.

    Raises:
        CloneError: If the destination is not empty or the transfer fails.
        AuthenticationError: If the remote requires credentials that were not
            provided, or rejects the ones that were.
    """
    path = path.resolve()
    if path.exists() and (not path.is_dir() or any(path.iterdir())):
        raise CloneError(f"Destination path '{path}' already exists and is not an empty directory")

    clean_url, username_from_url = strip_credentials(url)
    display_url = mask_credentials(url)

    base_cmd = ["git"]
    if not options.verify_certificates:
        logger.warning("TLS certificate verification disabled for %s", display_url)
        base_cmd += ["-c", "http.sslVerify=false"]
    base_cmd += ["clone", "--progress"]
    if options.branch:
        base_cmd += ["--branch", options.branch]
    if options.bare:
        base_cmd.append("--bare")

    logger.info("Cloning %s into %s", display_url, path)
    relay = TransferProgressRelay(progress) if progress is not None else None
    transfer_url = url
    credentials: Credentials | None = None
    returncode, stderr = _run_clone(base_cmd + ["--", transfer_url, str(path)], relay)

    if (
        returncode != 0
        and options.credentials is not None
        and is_http_url(url)
        and _is_auth_challenge(stderr)
    ):
        logger.debug("%s requires authentication", display_url)
        credentials = options.credentials(clean_url, username_from_url)
        if credentials is not None:
            transfer_url = inject_credentials(clean_url, credentials)
            logger.debug("Retrying clone as user %s", credentials.username)
            # git removes what it wrote on failure, so path is empty again
            returncode, stderr = _run_clone(base_cmd + ["--", transfer_url, str(path)], relay)

    if returncode != 0:
        _raise_clone_failure(returncode, stderr, display_url, credentials)

    repo = GitAdapter(path)
    if transfer_url != clean_url:
        # Keep credentials out of the clone's config
        repo.set_remote_url("origin", clean_url)

    return repo
