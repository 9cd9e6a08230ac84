"""Protocols for dependency injection."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from pygit_workspace.models import OperationResult


class GitRepository(Protocol):
    """Protocol for the git operations the sync engine needs"""

    def fetch(self, remote: str = 'origin') -> OperationResult: ...
    def fetch_branch_into(self, branch: str, remote: str = 'origin') -> OperationResult: ...
    def fast_forward_current(self, remote: str = 'origin') -> OperationResult: ...
    def add_remote(self, name: str, url: str) -> OperationResult: ...
    def list_branches(self) -> list[tuple[str, bool]]: ...
    def has_unstaged_changes(self) -> bool: ...
    def has_staged_changes(self) -> bool: ...
    def has_untracked_files(self) -> bool: ...
    def local_commit(self, branch: str) -> str | None: ...
    def remote_commit(self, branch: str, remote: str = 'origin') -> str | None: ...
    def remote_url(self, name: str) -> str | None: ...
    def close(self) -> None: ...

    @property
    def path(self) -> Path: ...

    @property
    def current_branch(self) -> str | None: ...


class RepositoryBackend(Protocol):
    """Protocol for opening and cloning repositories"""

    def open(self, path: Path) -> GitRepository: ...
    def clone(self, url: str, dest: Path) -> OperationResult: ...


class OutputHandler(Protocol):
    """Protocol for handling output"""

    def info(self, message: str, indent: int = 0) -> None: ...
    def success(self, message: str, indent: int = 0) -> None: ...
    def warning(self, message: str, indent: int = 0) -> None: ...
    def error(self, message: str, indent: int = 0) -> None: ...
    def section(self, title: str) -> None: ...
    def debug(self, message: str) -> None: ...
