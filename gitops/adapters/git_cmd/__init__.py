"""Version-control engine adapter backed by the git command line."""

from gitops.adapters.git_cmd.clone import clone_repository
from gitops.adapters.git_cmd.git_adapter import GitAdapter, init_repository, open_repository

__all__ = ["GitAdapter", "clone_repository", "init_repository", "open_repository"]
