"""Concrete GitPython-based repository implementation."""

from __future__ import annotations

import logging
from pathlib import Path

from git import GitCommandError, Repo

from pygit_workspace.errors import GitError
from pygit_workspace.models import OperationResult, OperationType

logger = logging.getLogger(__name__)


def _git_error(operation: str, path: Path, exc: GitCommandError) -> GitError:
    """Convert a GitPython failure into a GitError carrying git's own message."""
    message = exc.stderr.strip() if isinstance(exc.stderr, str) and exc.stderr.strip() else str(exc)
    return GitError(operation, path, message)


class GitPythonRepository:
    """Concrete implementation using GitPython"""

    def __init__(self, repo_path: Path):
        """Open a git repository at the given path."""
        self._path = repo_path
        self._repo = Repo(repo_path)

    def close(self) -> None:
        """Release underlying git resources."""
        self._repo.close()

    @property
    def path(self) -> Path:
        """Absolute path to the repository root."""
        return self._path

    @property
    def current_branch(self) -> str | None:
        """Name of the checked-out branch, or None if HEAD is detached."""
        try:
            if self._repo.head.is_detached:
                return None
            return self._repo.active_branch.name
        except (TypeError, ValueError):
            return None

    def fetch(self, remote: str = 'origin') -> OperationResult:
        """Fetch from a remote. ``updated`` is False when git printed nothing."""
        logger.debug("git fetch %s in %s", remote, self._path)
        try:
            _status, stdout, stderr = self._repo.git.fetch(remote, with_extended_output=True)
        except GitCommandError as e:
            return OperationResult(False, OperationType.FETCH, "Fetch failed",
                                   _git_error('fetch', self._path, e))
        updated = bool(stdout.strip() or stderr.strip())
        return OperationResult(True, OperationType.FETCH, f"Fetched from {remote}", updated=updated)

    def fetch_branch_into(self, branch: str, remote: str = 'origin') -> OperationResult:
        """Fetch remote/branch straight onto the local branch ref, without a checkout."""
        before = self.local_commit(branch)
        logger.debug("git fetch %s %s:%s in %s", remote, branch, branch, self._path)
        try:
            self._repo.git.fetch(remote, f'{branch}:{branch}')
        except GitCommandError as e:
            return OperationResult(False, OperationType.FETCH_BRANCH, "Fast-forward failed",
                                   _git_error('fetch', self._path, e))
        updated = self.local_commit(branch) != before
        return OperationResult(True, OperationType.FETCH_BRANCH, f"Fetched {remote}/{branch}",
                               updated=updated)

    def fast_forward_current(self, remote: str = 'origin') -> OperationResult:
        """Pull the checked-out branch with --ff-only. Already up to date means updated=False."""
        branch = self.current_branch
        if branch is None:
            return OperationResult(False, OperationType.FAST_FORWARD, "HEAD is detached")

        before = self.local_commit(branch)
        logger.debug("git pull --ff-only %s %s in %s", remote, branch, self._path)
        try:
            self._repo.git.pull('--ff-only', remote, branch)
        except GitCommandError as e:
            return OperationResult(False, OperationType.FAST_FORWARD, "Fast-forward failed",
                                   _git_error('pull', self._path, e))
        updated = self.local_commit(branch) != before
        return OperationResult(True, OperationType.FAST_FORWARD, f"Pulled {remote}/{branch}",
                               updated=updated)

    def add_remote(self, name: str, url: str) -> OperationResult:
        """Declare an additional remote."""
        try:
            self._repo.create_remote(name, url)
            return OperationResult(True, OperationType.ADD_REMOTE, f"Added remote {name}")
        except GitCommandError as e:
            return OperationResult(False, OperationType.ADD_REMOTE, "Adding remote failed",
                                   _git_error('remote add', self._path, e))

    def list_branches(self) -> list[tuple[str, bool]]:
        """Return (name, is_current) for each local branch, in git's listing order."""
        try:
            output = self._repo.git.branch('--list', '--no-color')
        except GitCommandError as e:
            raise _git_error('branch', self._path, e) from e

        branches = []
        for line in output.splitlines():
            if not line.strip():
                continue
            marker, name = line[:2].strip(), line[2:].strip()
            if name.startswith('('):
                # "(HEAD detached at ...)"
                continue
            branches.append((name, marker == '*'))
        return branches

    def has_unstaged_changes(self) -> bool:
        """Return True if tracked files differ from the index."""
        try:
            return self._repo.is_dirty(index=False, working_tree=True, untracked_files=False)
        except GitCommandError as e:
            raise _git_error('diff', self._path, e) from e

    def has_staged_changes(self) -> bool:
        """Return True if the index differs from HEAD."""
        try:
            return self._repo.is_dirty(index=True, working_tree=False, untracked_files=False)
        except GitCommandError as e:
            raise _git_error('diff --cached', self._path, e) from e

    def has_untracked_files(self) -> bool:
        try:
            return bool(self._repo.untracked_files)
        except GitCommandError as e:
            raise _git_error('status', self._path, e) from e

    def local_commit(self, branch: str) -> str | None:
        return self._resolve(f'refs/heads/{branch}')

    def remote_commit(self, branch: str, remote: str = 'origin') -> str | None:
        return self._resolve(f'refs/remotes/{remote}/{branch}')

    def remote_url(self, name: str) -> str | None:
        """URL of the named remote, or None if it is not declared."""
        if name not in self._repo.remotes:
            return None
        return self._repo.remotes[name].url

    def _resolve(self, ref: str) -> str | None:
        """Resolve a ref to a commit hash, or None if it does not exist."""
        try:
            return self._repo.git.rev_parse('--verify', '--quiet', f'{ref}^{{commit}}')
        except GitCommandError:
            return None


class GitPythonBackend:
    """Opens and clones repositories through GitPython"""

    def open(self, path: Path) -> GitPythonRepository:
        return GitPythonRepository(path)

    def clone(self, url: str, dest: Path) -> OperationResult:
        """Clone url into dest."""
        logger.debug("git clone %s %s", url, dest)
        try:
            Repo.clone_from(url, dest).close()
        except GitCommandError as e:
            return OperationResult(False, OperationType.CLONE, "Clone failed",
                                   _git_error('clone', dest, e))
        return OperationResult(True, OperationType.CLONE, f"Cloned {url}", updated=True)
