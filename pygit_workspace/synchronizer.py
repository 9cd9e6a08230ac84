"""BranchSynchronizer: classifies and optionally updates a single repository's branches."""

from __future__ import annotations

import logging

from pygit_workspace.models import (
    BranchReport,
    Mode,
    OperationResult,
    RepositoryReport,
    SyncState,
    WorkingTreeState,
    WorkspaceConfig,
)
from pygit_workspace.protocols import GitRepository, OutputHandler

logger = logging.getLogger(__name__)


def _failure_message(result: OperationResult) -> str:
    return result.error.message if result.error else result.message


class BranchSynchronizer:
    """Responsible for reconciling a single, existing repository"""

    def __init__(
        self,
        repo: GitRepository,
        output: OutputHandler,
        config: WorkspaceConfig
    ):
        """Create a synchronizer for a single repository."""
        self.repo = repo
        self.output = output
        self.config = config

    def sync(self, project_path: str, mode: Mode = Mode.NONE) -> RepositoryReport:
        """Classify the working tree and every local branch, fetching or fast-forwarding first if asked."""
        report = RepositoryReport(project_path)

        working_tree = self.working_tree_state()

        branches = self.repo.list_branches()
        if not branches:
            report.empty = True
            return report
        report.working_tree = working_tree

        if mode is Mode.FETCH:
            self._fetch(report)

        for name, is_current in branches:
            report.branches.append(self._sync_branch(name, is_current, working_tree, mode))
        return report

    def working_tree_state(self) -> WorkingTreeState:
        """Return the first matching dirty state, in priority order, or CLEAN."""
        if self.repo.has_unstaged_changes():
            return WorkingTreeState.DIRTY_UNSTAGED
        if self.repo.has_staged_changes():
            return WorkingTreeState.DIRTY_STAGED
        if self.repo.has_untracked_files():
            return WorkingTreeState.DIRTY_UNTRACKED
        return WorkingTreeState.CLEAN

    def sync_state(self, branch: str) -> SyncState:
        """Compare the local branch hash with its remote-tracking hash."""
        local = self.repo.local_commit(branch)
        if local is None:
            self.output.debug(f"{self.repo.path}: cannot resolve branch {branch}, skipping")
            return SyncState.UNKNOWN

        remote = self.repo.remote_commit(branch, self.config.remote_name)
        if remote is None:
            return SyncState.NO_REMOTE
        return SyncState.IN_SYNC if local == remote else SyncState.OUT_OF_SYNC

    def _fetch(self, report: RepositoryReport) -> None:
        self.output.debug(f"Fetching {report.path} from {self.config.remote_name}")
        result = self.repo.fetch(self.config.remote_name)
        if result.success:
            report.fetched = result.updated
        else:
            report.error = _failure_message(result)
            logger.debug("Fetch failed in %s: %s", report.path, report.error)

    def _sync_branch(
        self,
        name: str,
        is_current: bool,
        working_tree: WorkingTreeState,
        mode: Mode
    ) -> BranchReport:
        """Build the report of one branch. A dirty current branch is neither updated nor compared."""
        dirty = is_current and working_tree is not WorkingTreeState.CLEAN
        fast_forwarded = False
        error = None

        if mode is Mode.FAST_FORWARD and not dirty:
            if is_current:
                result = self.repo.fast_forward_current(self.config.remote_name)
            else:
                result = self.repo.fetch_branch_into(name, self.config.remote_name)
            if result.success:
                fast_forwarded = result.updated
            elif self.repo.remote_commit(name, self.config.remote_name) is not None:
                error = _failure_message(result)
            else:
                # Branch absent from the remote, reported as NO_REMOTE below
                logger.debug("No %s/%s to fast-forward from: %s",
                             self.config.remote_name, name, _failure_message(result))

        return BranchReport(
            name=name,
            is_current=is_current,
            working_tree=working_tree if is_current else None,
            sync=None if dirty else self.sync_state(name),
            fast_forwarded=fast_forwarded,
            error=error,
        )
