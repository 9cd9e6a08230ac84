"""Project registry: project-list records and set algebra over declared paths."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from pygit_workspace.models import Classification, Project, ProjectClassification
from pygit_workspace.paths import exclude_matching, matches_any, normalize_path

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = '|'


def parse_project_line(line: str, separator: str = DEFAULT_SEPARATOR) -> Project | None:
    """Parse ``path | origin | upstream``. Returns None for blank, comment or malformed lines."""
    text = line.strip()
    if not text or text.startswith('#'):
        return None

    fields = [part.strip() for part in text.split(separator)]
    path = normalize_path(fields[0])
    origin = fields[1] if len(fields) > 1 else ''
    upstream = fields[2] if len(fields) > 2 else ''

    if not path or not origin:
        logger.debug("Skipping malformed project record: %r", line)
        return None
    return Project(path=path, origin_url=origin, upstream_url=upstream or None)


def parse_project_list(lines: Iterable[str], separator: str = DEFAULT_SEPARATOR) -> list[Project]:
    """Parse every well-formed record, in file order."""
    projects = []
    for line in lines:
        project = parse_project_line(line, separator)
        if project is not None:
            projects.append(project)
    return projects


def format_project_line(project: Project, separator: str = DEFAULT_SEPARATOR) -> str:
    """Render a project back into a project-list record."""
    fields = [project.path, project.origin_url]
    if project.upstream_url:
        fields.append(project.upstream_url)
    return f" {separator} ".join(fields)


def read_project_list(path: Path, separator: str = DEFAULT_SEPARATOR) -> list[Project]:
    """Read and parse a project-list file."""
    with open(path, encoding='utf-8') as f:
        return parse_project_list(f, separator)


def read_ignore_list(path: Path) -> list[str]:
    """Return the non-blank lines of an ignore file, or [] if it does not exist."""
    if not path.is_file():
        return []
    with open(path, encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip()]


class ProjectRegistry:
    """Immutable, path-sorted view over the declared projects"""

    def __init__(self, projects: Iterable[Project] = ()):
        """Index the given projects. Duplicate paths keep their first record."""
        index: dict[str, Project] = {}
        for project in projects:
            if project.path in index:
                logger.warning("Duplicate project %s ignored", project.path)
                continue
            index[project.path] = project
        self._projects = tuple(sorted(index.values(), key=lambda p: p.path))
        self._index = {p.path: p for p in self._projects}

    def __contains__(self, path: object) -> bool:
        return path in self._index

    def __iter__(self) -> Iterator[Project]:
        return iter(self._projects)

    def __len__(self) -> int:
        return len(self._projects)

    def __repr__(self) -> str:
        return f"ProjectRegistry({len(self)} projects)"

    @property
    def paths(self) -> list[str]:
        return [p.path for p in self._projects]

    def get(self, path: str) -> Project | None:
        return self._index.get(path)

    def origin_url(self, path: str) -> str | None:
        project = self._index.get(path)
        return project.origin_url if project else None

    def upstream_url(self, path: str) -> str | None:
        project = self._index.get(path)
        return project.upstream_url if project else None

    def without(self, patterns: Iterable[re.Pattern[str]]) -> ProjectRegistry:
        """Return the registry minus every project whose path matches a pattern."""
        kept = set(exclude_matching(self.paths, patterns))
        return ProjectRegistry(p for p in self._projects if p.path in kept)

    def classify(
        self,
        discovered: Iterable[str],
        patterns: Iterable[re.Pattern[str]],
        exists: Callable[[str], bool] | None = None,
    ) -> list[ProjectClassification]:
        """Classify every discovered or declared path as known, ignored, unknown or missing.

        Must run on the full registry: ignored projects are only distinguishable
        from unknown ones while they are still registered.
        """
        discovered = {normalize_path(p) for p in discovered}
        patterns = list(patterns)
        if exists is None:
            exists = discovered.__contains__

        result = []
        for path in sorted(discovered | set(self._index)):
            if path not in self._index:
                classification = Classification.UNKNOWN
            elif matches_any(path, patterns):
                classification = Classification.IGNORED
            elif exists(path):
                classification = Classification.KNOWN
            else:
                classification = Classification.MISSING
            result.append(ProjectClassification(path, classification))
        return result
