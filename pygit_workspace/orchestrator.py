"""WorkspaceOrchestrator: runs the status, update and check flows across a workspace."""

from __future__ import annotations

import concurrent.futures
import logging
from pathlib import Path

from git import InvalidGitRepositoryError, NoSuchPathError
from tqdm import tqdm

from pygit_workspace.errors import (
    CloneError,
    GitError,
    NoRepositoriesFoundError,
    ProjectListExistsError,
)
from pygit_workspace.models import (
    Mode,
    Project,
    ProjectClassification,
    RepositoryReport,
    WorkspaceConfig,
)
from pygit_workspace.output import BufferedOutputHandler
from pygit_workspace.protocols import OutputHandler, RepositoryBackend
from pygit_workspace.registry import format_project_line
from pygit_workspace.reporter import StatusReporter
from pygit_workspace.repository import GitPythonBackend
from pygit_workspace.scanner import RepositoryScanner
from pygit_workspace.synchronizer import BranchSynchronizer
from pygit_workspace.workspace import Workspace

logger = logging.getLogger(__name__)

MODE_DESCRIPTIONS = {
    Mode.NONE: "Checking",
    Mode.FETCH: "Fetching",
    Mode.FAST_FORWARD: "Fast-forwarding",
}


class WorkspaceOrchestrator:
    """Main orchestrator - coordinates all operations over the declared projects"""

    def __init__(
        self,
        workspace: Workspace,
        config: WorkspaceConfig,
        output: OutputHandler,
        backend: RepositoryBackend = None
    ):
        """Create an orchestrator for a loaded workspace."""
        self.workspace = workspace
        self.config = config
        self.output = output
        self.backend = backend or GitPythonBackend()

    def status(self, mode: Mode = Mode.NONE) -> list[RepositoryReport]:
        """Reconcile every active project, in path order, and print one block per repository."""
        projects = list(self.workspace.active)
        if not projects:
            self.output.warning(f"No projects declared in {self.workspace.root / self.config.projects_file}")
            return []

        if self.config.parallel:
            return self._status_parallel(projects, mode)
        return self._status_sequential(projects, mode)

    def _status_sequential(self, projects: list[Project], mode: Mode) -> list[RepositoryReport]:
        """Reconcile repositories one at a time with a progress bar."""
        reports = []
        reporter = self._reporter(self.output)

        with tqdm(total=len(projects), desc=MODE_DESCRIPTIONS[mode], unit="repo",
                  disable=self._progress_disabled(), leave=False) as pbar:
            for project in projects:
                pbar.set_postfix_str(project.path, refresh=True)
                report = self._sync_single_repo(project, mode, self.output)
                reporter.print_repository(report)
                reports.append(report)
                pbar.update(1)

        return reports

    def _status_parallel(self, projects: list[Project], mode: Mode) -> list[RepositoryReport]:
        """Reconcile repositories concurrently; output is flushed in path order."""
        reports: list[RepositoryReport | None] = [None] * len(projects)
        buffers: list[BufferedOutputHandler | None] = [None] * len(projects)
        next_to_flush = 0

        def _sync_with_buffer(project: Project) -> tuple[RepositoryReport, BufferedOutputHandler]:
            buf = BufferedOutputHandler()
            report = self._sync_single_repo(project, mode, buf)
            self._reporter(buf).print_repository(report)
            return report, buf

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {executor.submit(_sync_with_buffer, project): index
                       for index, project in enumerate(projects)}

            with tqdm(total=len(projects), desc=MODE_DESCRIPTIONS[mode], unit="repo",
                      disable=self._progress_disabled(), leave=False) as pbar:
                for future in concurrent.futures.as_completed(futures):
                    index = futures[future]
                    report, buf = future.result()
                    # Results are collected on this thread only
                    reports[index] = report
                    buffers[index] = buf
                    while next_to_flush < len(projects) and buffers[next_to_flush] is not None:
                        buffers[next_to_flush].flush_to(self.output)
                        next_to_flush += 1
                    pbar.update(1)

        return reports

    def _sync_single_repo(self, project: Project, mode: Mode, output: OutputHandler) -> RepositoryReport:
        """Open one repository and reconcile it. Failures are recorded on its report."""
        repo_path = self.workspace.path_of(project.path)
        if not repo_path.is_dir():
            return RepositoryReport(project.path, exists=False)

        repo = None
        try:
            repo = self.backend.open(repo_path)
            synchronizer = BranchSynchronizer(repo, output, self.config)
            return synchronizer.sync(project.path, mode)
        except (InvalidGitRepositoryError, NoSuchPathError):
            return RepositoryReport(project.path, error="Not a valid git repository")
        except GitError as e:
            return RepositoryReport(project.path, error=str(e))
        except Exception as e:
            logger.debug("Unexpected error in %s", repo_path, exc_info=True)
            return RepositoryReport(project.path, error=f"Unexpected error: {e}")
        finally:
            if repo is not None:
                repo.close()

    def update(self) -> list[str]:
        """Clone every active project missing on disk. Stops at the first clone failure."""
        cloned = []
        for project in self.workspace.active:
            dest = self.workspace.path_of(project.path)
            if dest.exists():
                continue

            self.output.info(f"{project.path}: Cloning {project.origin_url}")
            result = self.backend.clone(project.origin_url, dest)
            if not result.success:
                error = CloneError(project.path, project.origin_url, result.error)
                self.output.error(f"✗ {error}", indent=1)
                raise error
            self.output.success("✓ Cloned", indent=1)

            if project.upstream_url:
                self._add_upstream(project, dest)
            cloned.append(project.path)

        if not cloned:
            self.output.info("All projects are already present")
        return cloned

    def _add_upstream(self, project: Project, dest: Path) -> None:
        repo = self.backend.open(dest)
        try:
            result = repo.add_remote(self.config.upstream_name, project.upstream_url)
        finally:
            repo.close()
        if result.success:
            self.output.success(f"✓ Added remote {self.config.upstream_name}", indent=1)
        else:
            reason = result.error.message if result.error else result.message
            self.output.warning(f"⚠ Cannot add remote {self.config.upstream_name}: {reason}", indent=1)

    def check(self) -> list[ProjectClassification]:
        """Classify every declared or discovered repository of the workspace."""
        discovered = RepositoryScanner().find_repositories(self.workspace.root)
        return self.workspace.registry.classify(
            discovered, self.workspace.ignore_patterns, exists=self.workspace.exists
        )

    def _reporter(self, output: OutputHandler) -> StatusReporter:
        return StatusReporter(output, self.config.remote_name, self.config.verbose)

    def _progress_disabled(self) -> bool | None:
        # None lets tqdm disable itself when stderr is not a terminal
        return True if self.config.json_output else None


def initialize_workspace(
    root: Path,
    config: WorkspaceConfig,
    output: OutputHandler,
    backend: RepositoryBackend = None
) -> Path:
    """Write a project list describing every repository found under root."""
    backend = backend or GitPythonBackend()
    root = Path(root).resolve()
    list_path = root / config.projects_file
    if list_path.exists():
        raise ProjectListExistsError(list_path)

    paths = RepositoryScanner().find_repositories(root)
    if not paths:
        raise NoRepositoriesFoundError(root)

    projects = []
    for path in paths:
        try:
            repo = backend.open(root / path)
        except (InvalidGitRepositoryError, NoSuchPathError):
            output.warning(f"⚠ {path}: not a valid git repository, skipped")
            continue
        try:
            origin = repo.remote_url(config.remote_name)
            upstream = repo.remote_url(config.upstream_name)
        finally:
            repo.close()

        if not origin:
            output.warning(f"⚠ {path}: no {config.remote_name} remote, skipped")
            continue
        projects.append(Project(path, origin, upstream))
        output.info(f"{path}: {origin}")

    if not projects:
        raise NoRepositoriesFoundError(root)

    with open(list_path, 'w', encoding='utf-8') as f:
        for project in projects:
            f.write(format_project_line(project, config.separator) + "\n")
    output.success(f"✓ Wrote {len(projects)} projects to {list_path}")
    return list_path
