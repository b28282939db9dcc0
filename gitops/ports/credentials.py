"""Credential resolution port.

Remotes that need authentication ask a provider for credentials at clone
time instead of gitops reading them from the environment.
"""

from typing import Protocol

from gitops.domain.entities import Credentials


class CredentialProvider(Protocol):
    """Protocol for credential-resolution callbacks."""

    def __call__(self, url: str, username_from_url: str | None) -> Credentials | None:
        """Resolve credentials for a remote.

        Args:
            url: Remote URL with any embedded credentials removed.
            username_from_url: Username embedded in the URL, if any.

        Returns:
            Credentials to use, or None to try the remote anonymously.
        """
        ...
