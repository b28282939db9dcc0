"""In-memory VersionControl fake for use case tests.

Records every call so tests can assert on the sequence of engine operations
without touching git.
"""

from pathlib import Path

from gitops.domain.entities import FileChangeDescriptor, Signature
from gitops.domain.exceptions import (
    ReferenceExistsError,
    ReferenceNotFoundError,
    StaleReferenceError,
)


class FakeVersionControl:
    """Minimal engine: refs are a dict, ids are sequential fake hashes."""

    def __init__(
        self,
        workdir: Path = Path("/fake/repo"),
        status: list[FileChangeDescriptor] | None = None,
    ) -> None:
        self._workdir = workdir
        self.status = list(status or [])
        self.refs: dict[str, str] = {}
        self.branches: dict[str, str] = {}
        self.tags: dict[str, str] = {}
        self.staged: list[str] = []
        self.commits: list[dict] = []
        self.checked_out: list[tuple[str, bool]] = []
        self._counter = 0

    def _next_id(self) -> str:
        self._counter += 1
        return f"{self._counter:040x}"

    @property
    def workdir(self) -> Path:
        return self._workdir

    def add_to_index(self, path: str) -> None:
        self.staged.append(path)

    def write_tree(self) -> str:
        return self._next_id()

    def get_status(self, include_ignored: bool = False) -> list[FileChangeDescriptor]:
        if include_ignored:
            return list(self.status)
        return [d for d in self.status if not d.is_ignored]

    def create_commit(
        self,
        update_ref: str | None,
        author: Signature,
        committer: Signature,
        message: str,
        tree: str,
        parents: list[str],
    ) -> str:
        if update_ref and update_ref in self.refs:
            expected = parents[0] if parents else None
            if self.refs[update_ref] != expected:
                raise StaleReferenceError(f"Reference '{update_ref}' moved")
        commit_id = self._next_id()
        self.commits.append(
            {
                "id": commit_id,
                "update_ref": update_ref,
                "author": author,
                "committer": committer,
                "message": message,
                "tree": tree,
                "parents": list(parents),
            }
        )
        if update_ref:
            self.refs[update_ref] = commit_id
        return commit_id

    def resolve_reference(self, name: str) -> str:
        if name.startswith("refs/heads/") and name[len("refs/heads/"):] in self.branches:
            return self.branches[name[len("refs/heads/"):]]
        if name in self.refs:
            return self.refs[name]
        if name in self.branches:
            return self.branches[name]
        if name in self.tags:
            return self.tags[name]
        raise ReferenceNotFoundError(f"Reference '{name}' not found")

    def create_tag(
        self,
        name: str,
        target: str,
        tagger: Signature,
        message: str,
        force: bool = False,
    ) -> str:
        if name in self.tags and not force:
            raise ReferenceExistsError(f"Tag '{name}' already exists", hint="Use --force")
        tag_id = self._next_id()
        self.tags[name] = tag_id
        return tag_id

    def delete_tag(self, name: str) -> None:
        if name not in self.tags:
            raise ReferenceNotFoundError(f"Tag '{name}' not found")
        del self.tags[name]

    def create_branch(self, name: str, target: str, force: bool = False) -> str:
        if name in self.branches and not force:
            raise ReferenceExistsError(f"Branch '{name}' already exists", hint="Use --force")
        self.branches[name] = self.resolve_reference(target)
        return f"refs/heads/{name}"

    def checkout_branch(self, name: str, force: bool = False) -> None:
        if name not in self.branches:
            raise ReferenceNotFoundError(f"Branch '{name}' not found")
        self.checked_out.append((name, force))
        self.refs["HEAD"] = self.branches[name]
