"""Domain models: enums, dataclasses, and configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from pygit_workspace.errors import GitError


class WorkingTreeState(Enum):
    """Working tree state of the checked-out branch, in detection priority order"""
    CLEAN = auto()
    DIRTY_UNSTAGED = auto()
    DIRTY_STAGED = auto()
    DIRTY_UNTRACKED = auto()


class SyncState(Enum):
    """Local branch compared to its remote-tracking counterpart"""
    IN_SYNC = auto()
    OUT_OF_SYNC = auto()
    NO_REMOTE = auto()
    UNKNOWN = auto()


class Mode(Enum):
    """Side effects performed before sync states are computed"""
    NONE = auto()
    FETCH = auto()
    FAST_FORWARD = auto()


class Classification(Enum):
    """Verification verdict for one path of the workspace"""
    KNOWN = auto()
    IGNORED = auto()
    UNKNOWN = auto()
    MISSING = auto()


class OperationType(Enum):
    """Types of git operations"""
    CLONE = auto()
    ADD_REMOTE = auto()
    FETCH = auto()
    FETCH_BRANCH = auto()
    FAST_FORWARD = auto()


@dataclass(frozen=True)
class Project:
    """One declared repository, identified by its workspace-relative path"""
    path: str
    origin_url: str
    upstream_url: str | None = None


@dataclass(frozen=True)
class ProjectClassification:
    """A path of the workspace and the verification verdict for it"""
    path: str
    classification: Classification

    def to_dict(self) -> dict[str, Any]:
        return {'path': self.path, 'classification': self.classification.name}


@dataclass(frozen=True)
class OperationResult:
    """Result of a single mutating git operation"""
    success: bool
    operation: OperationType
    message: str
    error: GitError | None = None
    updated: bool = False


@dataclass(frozen=True)
class BranchReport:
    """Sync verdict for one local branch"""
    name: str
    is_current: bool
    working_tree: WorkingTreeState | None = None
    sync: SyncState | None = None
    fast_forwarded: bool = False
    error: str | None = None

    @property
    def is_dirty(self) -> bool:
        return self.working_tree is not None and self.working_tree is not WorkingTreeState.CLEAN

    @property
    def has_problem(self) -> bool:
        """Return True if this branch prevents the workspace from being up to date."""
        return self.is_dirty or self.sync in (SyncState.OUT_OF_SYNC, SyncState.NO_REMOTE)

    def to_dict(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'current': self.is_current,
            'working_tree': self.working_tree.name if self.working_tree else None,
            'sync': self.sync.name if self.sync else None,
            'fast_forwarded': self.fast_forwarded,
            'error': self.error,
        }


@dataclass
class RepositoryReport:
    """Result of reconciling one repository, rebuilt on every run"""
    path: str
    exists: bool = True
    empty: bool = False
    branches: list[BranchReport] = field(default_factory=list)
    fetched: bool = False
    error: str | None = None
    working_tree: WorkingTreeState | None = None

    @property
    def current_branch(self) -> BranchReport | None:
        return next((b for b in self.branches if b.is_current), None)

    @property
    def is_dirty(self) -> bool:
        """Return True if the checkout is dirty, whether or not a branch is checked out."""
        if self.working_tree is not None and self.working_tree is not WorkingTreeState.CLEAN:
            return True
        return any(b.is_dirty for b in self.branches)

    @property
    def is_up_to_date(self) -> bool:
        """Return True if nothing about this repository needs attention."""
        if not self.exists or self.error or self.is_dirty:
            return False
        return not any(b.has_problem for b in self.branches)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            'path': self.path,
            'exists': self.exists,
            'empty': self.empty,
            'fetched': self.fetched,
            'error': self.error,
            'working_tree': self.working_tree.name if self.working_tree else None,
            'branches': [b.to_dict() for b in self.branches],
        }


@dataclass(frozen=True)
class WorkspaceVerdict:
    """Workspace-level outcome folded from every repository report"""
    up_to_date: bool = True
    missing: int = 0
    dirty: int = 0
    out_of_sync: int = 0
    no_remote: int = 0
    errors: int = 0

    @property
    def exit_code(self) -> int:
        return 0 if self.up_to_date else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            'up_to_date': self.up_to_date,
            'missing': self.missing,
            'dirty': self.dirty,
            'out_of_sync': self.out_of_sync,
            'no_remote': self.no_remote,
            'errors': self.errors,
        }


@dataclass(frozen=True)
class WorkspaceConfig:
    """Configuration for workspace operations"""
    projects_file: str = '.projects.gws'
    ignore_file: str = '.ignore.gws'
    separator: str = '|'
    remote_name: str = 'origin'
    upstream_name: str = 'upstream'
    parallel: bool = False
    max_workers: int = field(default_factory=lambda: min(os.cpu_count() or 4, 8))
    verbose: bool = False
    json_output: bool = False

    def with_updates(self, **kwargs) -> WorkspaceConfig:
        """Return a new WorkspaceConfig with the given fields replaced."""
        current = {f.name: getattr(self, f.name) for f in self.__dataclass_fields__.values()}
        current.update(kwargs)
        return WorkspaceConfig(**current)
