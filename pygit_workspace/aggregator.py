"""Folds repository reports into a single workspace verdict."""

from __future__ import annotations

from collections.abc import Iterable

from pygit_workspace.models import RepositoryReport, SyncState, WorkspaceVerdict


def aggregate(reports: Iterable[RepositoryReport]) -> WorkspaceVerdict:
    """Return the workspace verdict for a set of reports.

    The workspace is up to date unless a repository is missing or failed, a
    working tree is dirty, or a branch is out of sync or absent from the remote.
    Branches in the UNKNOWN state do not count.
    """
    missing = dirty = out_of_sync = no_remote = errors = 0
    for report in reports:
        if not report.exists:
            missing += 1
            continue
        if report.error:
            errors += 1
        if report.is_dirty:
            dirty += 1
        for branch in report.branches:
            if branch.sync is SyncState.OUT_OF_SYNC:
                out_of_sync += 1
            elif branch.sync is SyncState.NO_REMOTE:
                no_remote += 1

    return WorkspaceVerdict(
        up_to_date=not (missing or dirty or out_of_sync or no_remote or errors),
        missing=missing,
        dirty=dirty,
        out_of_sync=out_of_sync,
        no_remote=no_remote,
        errors=errors,
    )
