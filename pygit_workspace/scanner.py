"""Repository scanner: finds git repos under a workspace root."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pygit_workspace.paths import remove_nested_paths

logger = logging.getLogger(__name__)


class RepositoryScanner:
    """Responsible for finding git repositories"""

    def find_repositories(self, root: Path) -> list[str]:
        """Return root-relative paths of the outermost git repositories under root.

        Symlinks are not followed. The root itself is never reported.
        """
        root = Path(root)
        candidates = []
        for dirpath, dirnames, _filenames in os.walk(root, followlinks=False):
            current = Path(dirpath)
            if '.git' in dirnames:
                dirnames.remove('.git')
                if current != root:
                    candidates.append(current.relative_to(root).as_posix())

        repositories = remove_nested_paths(candidates)
        logger.debug("Found %d repositories (%d before removing nested ones)",
                     len(repositories), len(candidates))
        return repositories
