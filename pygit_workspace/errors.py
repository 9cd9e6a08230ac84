"""Exception hierarchy for workspace-level and git-level failures."""

from __future__ import annotations

from pathlib import Path


class WorkspaceError(Exception):
    """Base class for errors that stop a command."""


class NotAWorkspaceError(WorkspaceError):
    """No project list was found walking up to the filesystem root."""

    def __init__(self, start: Path, projects_file: str):
        self.start = start
        self.projects_file = projects_file
        super().__init__(f"Not in a workspace: no {projects_file} found from {start} upwards")


class ProjectListExistsError(WorkspaceError):
    """Raised by init when the project list is already present."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Project list already exists: {path}")


class NoRepositoriesFoundError(WorkspaceError):
    """Raised by init when discovery finds no repository."""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(f"No git repositories found under {root}")


class GitError(Exception):
    """A git toolchain invocation failed outside its modeled outcomes."""

    def __init__(self, operation: str, path: Path | str, message: str):
        self.operation = operation
        self.path = str(path)
        self.message = message
        super().__init__(f"git {operation} failed in {self.path}: {message}")


class CloneError(WorkspaceError):
    """Cloning a project failed; aborts the update flow."""

    def __init__(self, project_path: str, url: str, cause: GitError | None = None):
        self.project_path = project_path
        self.url = url
        self.cause = cause
        details = f": {cause.message}" if cause else ""
        super().__init__(f"Cannot clone {url} into {project_path}{details}")
