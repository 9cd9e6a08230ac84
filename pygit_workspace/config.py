"""Configuration: argument parser and config file loader."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

logger = logging.getLogger(__name__)

CONFIG_FILENAME = '.pygitwsrc.toml'

COMMANDS = {
    'init': "Create the project list from the repositories found below the current directory",
    'update': "Clone every declared project missing from the workspace",
    'status': "Show the working tree and sync state of every project",
    'fetch': "Fetch every project from origin, then show the status",
    'ff': "Fast-forward every branch to origin, then show the status",
    'check': "Classify repositories as known, ignored, unknown or missing",
    'version': "Show the version",
}


def create_argument_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all pygit-ws flags and commands."""
    # Lazy import to avoid circular dependency with __init__.py
    from pygit_workspace import __version__

    parser = argparse.ArgumentParser(
        prog='pygit-ws',
        description="Keep a workspace of git repositories in sync with a project list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s init                    # Declare the repositories found here
  %(prog)s update                  # Clone missing projects
  %(prog)s status                  # Report dirty or unsynced branches
  %(prog)s --parallel ff           # Fast-forward everything, 8 repos at a time
        """
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-C', '--directory', default='.',
                        help='Start in this directory instead of the current one')
    parser.add_argument('--config', type=str, default=None,
                        help=f'Path to config file (default: {CONFIG_FILENAME} in start dir or home)')
    parser.add_argument('--parallel', action='store_true',
                        help='Process repositories in parallel')
    parser.add_argument('--max-workers', type=int, default=min(os.cpu_count() or 4, 8),
                        help='Max parallel workers (default: min(cpu_count, 8))')
    parser.add_argument('--separator', default='|',
                        help='Field separator of the project list (default: |)')
    parser.add_argument('--verbose', action='store_true',
                        help='Verbose output')
    parser.add_argument('--json', dest='json_output', action='store_true',
                        help='Output results as JSON (suppresses normal output)')

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True
    for name, help_text in COMMANDS.items():
        subparsers.add_parser(name, help=help_text, description=help_text)

    return parser


def load_config_file(search_dir: Path, config_path: str | None = None) -> dict[str, Any]:
    """Load the TOML config from an explicit path, the search dir, or the home dir.

    Returns an empty dict if no file is found or it cannot be parsed.
    """
    candidates = [Path(config_path)] if config_path else [search_dir / CONFIG_FILENAME, Path.home() / CONFIG_FILENAME]
    for path in candidates:
        if path.is_file():
            try:
                with open(path, 'rb') as f:
                    return tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning("Failed to parse %s: %s", path, e)
                return {}
    if config_path:
        logger.warning("Config file '%s' not found. Ignoring.", config_path)
    return {}
