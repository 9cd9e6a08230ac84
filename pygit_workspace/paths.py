"""Path utilities: nested-path removal and pattern-based exclusion."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

logger = logging.getLogger(__name__)

SEPARATOR = '/'


def normalize_path(path: str) -> str:
    """Strip surrounding whitespace and trailing separators from a relative path."""
    return path.strip().rstrip(SEPARATOR)


def remove_nested_paths(paths: Iterable[str]) -> list[str]:
    """Keep only the paths that are not sub-directories of another path in the set.

    ``foo/bar`` is dropped when ``foo`` is present, but ``foobar`` is not: the
    prefix has to end on a separator boundary. The result is sorted and
    re-running on it is a no-op.
    """
    kept: list[str] = []
    for path in sorted({normalize_path(p) for p in paths if normalize_path(p)}):
        # Everything in ``kept`` sorts before ``path``; a dropped path always has
        # a kept ancestor, so checking ``kept`` is enough.
        if not any(path.startswith(parent + SEPARATOR) for parent in kept):
            kept.append(path)
    return kept


def compile_patterns(lines: Iterable[str]) -> list[re.Pattern[str]]:
    """Compile one unanchored regex per non-blank line.

    Lines that are not valid regular expressions are matched literally.
    """
    patterns = []
    for line in lines:
        text = line.strip()
        if not text:
            continue
        try:
            patterns.append(re.compile(text))
        except re.error as e:
            logger.warning("Invalid ignore pattern %r (%s), matching it literally", text, e)
            patterns.append(re.compile(re.escape(text)))
    return patterns


def matches_any(path: str, patterns: Iterable[re.Pattern[str]]) -> bool:
    """Return True if any pattern matches anywhere in the path."""
    return any(pattern.search(path) for pattern in patterns)


def exclude_matching(paths: Iterable[str], patterns: Iterable[re.Pattern[str]]) -> list[str]:
    """Drop every path matched by at least one pattern, preserving input order."""
    patterns = list(patterns)
    if not patterns:
        return list(paths)
    return [path for path in paths if not matches_any(path, patterns)]
