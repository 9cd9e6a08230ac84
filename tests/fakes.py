"""In-memory stand-ins for the git facade and the repository backend."""

from pathlib import Path
from typing import Optional

from pygit_workspace import GitError, OperationResult, OperationType


class FakeGitRepository:
    """Fake git repository: branches map to (local hash, remote hash)."""

    def __init__(self, branches: dict[str, tuple[Optional[str], Optional[str]]] = None,
                 current: Optional[str] = "main", *, unstaged: bool = False,
                 staged: bool = False, untracked: bool = False,
                 urls: dict[str, str] = None,
                 origin_heads: dict[str, str] = None):
        self._path = Path("/tmp/fake-repo")
        self.branches = dict(branches or {})
        self._current = current
        self.unstaged = unstaged
        self.staged = staged
        self.untracked = untracked
        self.fetch_success = True
        self.fetch_updates = False
        self.ff_success = True
        self.calls: list[tuple[str, ...]] = []
        self.urls = dict(urls or {})
        # Branches on the remote whose tracking ref is not fetched yet
        self.origin_heads = dict(origin_heads or {})

    @property
    def path(self) -> Path:
        return self._path

    @property
    def current_branch(self) -> Optional[str]:
        return self._current

    def fetch(self, remote: str = "origin") -> OperationResult:
        self.calls.append(("fetch", remote))
        if not self.fetch_success:
            return OperationResult(False, OperationType.FETCH, "Fetch failed",
                                   GitError("fetch", self._path, "could not read from remote"))
        return OperationResult(True, OperationType.FETCH, "OK", updated=self.fetch_updates)

    def _advance(self, branch: str, op: OperationType) -> OperationResult:
        if not self.ff_success:
            return OperationResult(False, op, "Fast-forward failed",
                                   GitError("fetch", self._path, "non-fast-forward"))
        local, remote = self.branches[branch]
        target = self.origin_heads.get(branch, remote)
        if target is None:
            return OperationResult(False, op, "Fast-forward failed",
                                   GitError("fetch", self._path, f"couldn't find remote ref {branch}"))
        self.branches[branch] = (target, target)
        return OperationResult(True, op, "OK", updated=local != target)

    def fetch_branch_into(self, branch: str, remote: str = "origin") -> OperationResult:
        self.calls.append(("fetch_branch_into", branch))
        return self._advance(branch, OperationType.FETCH_BRANCH)

    def fast_forward_current(self, remote: str = "origin") -> OperationResult:
        self.calls.append(("fast_forward_current", self._current))
        return self._advance(self._current, OperationType.FAST_FORWARD)

    def add_remote(self, name: str, url: str) -> OperationResult:
        self.urls[name] = url
        return OperationResult(True, OperationType.ADD_REMOTE, "OK")

    def list_branches(self) -> list[tuple[str, bool]]:
        return [(name, name == self._current) for name in sorted(self.branches)]

    def has_unstaged_changes(self) -> bool:
        return self.unstaged

    def has_staged_changes(self) -> bool:
        return self.staged

    def has_untracked_files(self) -> bool:
        return self.untracked

    def local_commit(self, branch: str) -> Optional[str]:
        return self.branches.get(branch, (None, None))[0]

    def remote_commit(self, branch: str, remote: str = "origin") -> Optional[str]:
        return self.branches.get(branch, (None, None))[1]

    def remote_url(self, name: str) -> Optional[str]:
        return self.urls.get(name)

    def close(self) -> None:
        pass


class FakeBackend:
    """Hands out fake repositories by path and records clones."""

    def __init__(self, repos: dict[Path, FakeGitRepository] = None, failing_urls=()):
        self.repos = repos or {}
        self.failing_urls = set(failing_urls)
        self.cloned: list[tuple[str, Path]] = []

    def open(self, path: Path) -> FakeGitRepository:
        if path not in self.repos:
            raise GitError("open", path, "not a repository")
        return self.repos[path]

    def clone(self, url: str, dest: Path) -> OperationResult:
        self.cloned.append((url, dest))
        if url in self.failing_urls:
            return OperationResult(False, OperationType.CLONE, "Clone failed",
                                   GitError("clone", dest, "repository not found"))
        dest.mkdir(parents=True)
        self.repos[dest] = FakeGitRepository({"main": ("a", "a")}, urls={"origin": url})
        return OperationResult(True, OperationType.CLONE, "Cloned", updated=True)
