"""Workspace: locates the project list and loads the declared projects."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from pygit_workspace.errors import NotAWorkspaceError
from pygit_workspace.models import WorkspaceConfig
from pygit_workspace.paths import compile_patterns
from pygit_workspace.registry import ProjectRegistry, read_ignore_list, read_project_list


def find_workspace_root(start: Path, projects_file: str = '.projects.gws') -> Path:
    """Walk up from start to the first directory holding the project list."""
    start = Path(start).resolve()
    for directory in (start, *start.parents):
        if (directory / projects_file).is_file():
            return directory
    raise NotAWorkspaceError(start, projects_file)


@dataclass(frozen=True)
class Workspace:
    """A workspace root with its declared projects and ignore patterns"""
    root: Path
    registry: ProjectRegistry
    ignore_patterns: list[re.Pattern[str]] = field(default_factory=list)

    @classmethod
    def load(cls, start: Path, config: WorkspaceConfig) -> Workspace:
        """Find the enclosing workspace and read its project and ignore lists."""
        root = find_workspace_root(start, config.projects_file)
        projects = read_project_list(root / config.projects_file, config.separator)
        patterns = compile_patterns(read_ignore_list(root / config.ignore_file))
        return cls(root, ProjectRegistry(projects), patterns)

    @property
    def active(self) -> ProjectRegistry:
        """Declared projects that no ignore pattern excludes."""
        return self.registry.without(self.ignore_patterns)

    def path_of(self, project_path: str) -> Path:
        return self.root / project_path

    def exists(self, project_path: str) -> bool:
        return self.path_of(project_path).is_dir()
