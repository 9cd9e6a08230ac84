"""StatusReporter: renders repository reports, verdicts and classifications."""

from __future__ import annotations

from collections import Counter

from pygit_workspace.models import (
    BranchReport,
    Classification,
    ProjectClassification,
    RepositoryReport,
    SyncState,
    WorkingTreeState,
    WorkspaceVerdict,
)
from pygit_workspace.protocols import OutputHandler

WORKING_TREE_LABELS = {
    WorkingTreeState.CLEAN: "Clean",
    WorkingTreeState.DIRTY_UNSTAGED: "Dirty (Uncached changes)",
    WorkingTreeState.DIRTY_STAGED: "Dirty (Uncommitted changes)",
    WorkingTreeState.DIRTY_UNTRACKED: "Dirty (Untracked files)",
}

CLASSIFICATION_LABELS = {
    Classification.KNOWN: "Known",
    Classification.IGNORED: "Ignored",
    Classification.UNKNOWN: "Unknown",
    Classification.MISSING: "Missing",
}


def sync_label(state: SyncState, remote_name: str = 'origin') -> str:
    """Human-readable label of a sync state."""
    return {
        SyncState.IN_SYNC: f"In sync with {remote_name}",
        SyncState.OUT_OF_SYNC: f"Not in sync with {remote_name}",
        SyncState.NO_REMOTE: f"Not on {remote_name}",
        SyncState.UNKNOWN: "Unknown",
    }[state]


class StatusReporter:
    """Generates and displays per-repository lines and summaries"""

    def __init__(self, output: OutputHandler, remote_name: str = 'origin', verbose: bool = False):
        """Create a reporter that writes to the given output handler."""
        self.output = output
        self.remote_name = remote_name
        self.verbose = verbose

    def print_repository(self, report: RepositoryReport) -> None:
        """Print one repository header followed by a line per branch worth showing."""
        if not report.exists:
            self.output.error(f"{report.path}: Missing repository")
            return

        self.output.info(f"{report.path}:")
        if report.error:
            self.output.error(f"Error: {report.error.splitlines()[0]}", indent=1)
        if report.empty:
            self.output.warning("Empty repository", indent=1)
            return
        if report.fetched:
            self.output.info("Fetched new commits", indent=1)
        if report.current_branch is None and report.is_dirty:
            self.output.error(f"Detached HEAD : {WORKING_TREE_LABELS[report.working_tree]}", indent=1)

        # Failed repositories carry no branches
        if not report.branches:
            return
        width = max(len(b.name) for b in report.branches)
        for branch in report.branches:
            self._print_branch(branch, width)

    def _print_branch(self, branch: BranchReport, width: int) -> None:
        labels = []
        emit = self.output.info

        if branch.is_current and branch.working_tree is not None:
            labels.append(WORKING_TREE_LABELS[branch.working_tree])
            emit = self.output.error if branch.is_dirty else self.output.success
        if branch.fast_forwarded:
            labels.append("Fast-forwarded")
        if branch.sync in (SyncState.OUT_OF_SYNC, SyncState.NO_REMOTE):
            labels.append(sync_label(branch.sync, self.remote_name))
            if emit is not self.output.error:
                emit = self.output.warning
        if branch.error:
            labels.append(f"Fast-forward failed: {branch.error.splitlines()[0]}")
            emit = self.output.error

        if not labels:
            if not self.verbose or branch.sync is None:
                return
            labels.append(sync_label(branch.sync, self.remote_name))

        emit(f"{branch.name:<{width}} : {', '.join(labels)}", indent=1)

    def print_summary(self, verdict: WorkspaceVerdict, repository_count: int) -> None:
        """Print the final verdict with a count per kind of problem."""
        self.output.section("Summary")
        self.output.info(f"Repositories checked: {repository_count}")

        if verdict.up_to_date:
            self.output.success("✓ Workspace is up to date")
            return

        self.output.warning("⚠ Workspace is not up to date")
        counts = [
            ("Missing repositories", verdict.missing),
            ("Dirty working trees", verdict.dirty),
            (f"Branches not in sync with {self.remote_name}", verdict.out_of_sync),
            (f"Branches not on {self.remote_name}", verdict.no_remote),
            ("Repositories with errors", verdict.errors),
        ]
        for title, count in counts:
            if count:
                self.output.info(f"{title}: {count}", indent=1)

    def print_classification(self, items: list[ProjectClassification]) -> None:
        """Print each path with its verification verdict, then the totals."""
        if not items:
            self.output.info("No repositories declared or found")
            return

        width = max(len(item.path) for item in items)
        for item in items:
            line = f"{item.path:<{width}} : {CLASSIFICATION_LABELS[item.classification]}"
            if item.classification is Classification.KNOWN:
                self.output.success(line)
            elif item.classification is Classification.IGNORED:
                self.output.info(line)
            elif item.classification is Classification.UNKNOWN:
                self.output.warning(line)
            else:
                self.output.error(line)

        totals = Counter(item.classification for item in items)
        self.output.section("Summary")
        for classification, label in CLASSIFICATION_LABELS.items():
            self.output.info(f"{label}: {totals.get(classification, 0)}")
