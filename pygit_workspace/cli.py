"""CLI entry point: main() function."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from colorama import Fore, Style

from pygit_workspace.aggregator import aggregate
from pygit_workspace.config import create_argument_parser, load_config_file
from pygit_workspace.errors import WorkspaceError
from pygit_workspace.models import Mode, WorkspaceConfig
from pygit_workspace.orchestrator import WorkspaceOrchestrator, initialize_workspace
from pygit_workspace.output import ConsoleOutputHandler, NullOutputHandler
from pygit_workspace.protocols import OutputHandler
from pygit_workspace.reporter import StatusReporter
from pygit_workspace.workspace import Workspace

STATUS_MODES = {
    'status': Mode.NONE,
    'fetch': Mode.FETCH,
    'ff': Mode.FAST_FORWARD,
}


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


def build_config(parser, args, argv: list[str], file_config: dict) -> WorkspaceConfig:
    """Merge CLI flags, config file keys and defaults (in that order of precedence)."""
    cli_explicit = set()
    for action in parser._actions:
        if action.dest in ('help', 'version'):
            continue
        for opt_string in action.option_strings:
            if any(arg == opt_string or arg.startswith(opt_string + '=') for arg in argv):
                cli_explicit.add(action.dest)
                break

    def effective(dest: str, toml_key: str):
        if dest in cli_explicit:
            return getattr(args, dest)
        if toml_key in file_config:
            return file_config[toml_key]
        return getattr(args, dest)

    defaults = WorkspaceConfig()
    return WorkspaceConfig(
        projects_file=file_config.get('projects_file', defaults.projects_file),
        ignore_file=file_config.get('ignore_file', defaults.ignore_file),
        separator=effective('separator', 'separator'),
        remote_name=file_config.get('remote_name', defaults.remote_name),
        upstream_name=file_config.get('upstream_name', defaults.upstream_name),
        parallel=effective('parallel', 'parallel'),
        max_workers=effective('max_workers', 'max_workers'),
        verbose=effective('verbose', 'verbose'),
        json_output=effective('json_output', 'json_output'),
    )


def run_command(command: str, start_dir: Path, config: WorkspaceConfig, output: OutputHandler) -> int:
    """Run one command and return the process exit status."""
    from pygit_workspace import __version__

    if command == 'version':
        if config.json_output:
            _print_json({'version': __version__})
        else:
            print(f"pygit-ws {__version__}")
        return 0

    if command == 'init':
        list_path = initialize_workspace(start_dir, config, output)
        if config.json_output:
            _print_json({'project_list': str(list_path)})
        return 0

    workspace = Workspace.load(start_dir, config)
    orchestrator = WorkspaceOrchestrator(workspace, config, output)
    reporter = StatusReporter(output, config.remote_name, config.verbose)

    if command == 'update':
        cloned = orchestrator.update()
        if config.json_output:
            _print_json({'cloned': cloned})
        return 0

    if command == 'check':
        items = orchestrator.check()
        if config.json_output:
            _print_json([item.to_dict() for item in items])
        else:
            reporter.print_classification(items)
        return 0

    reports = orchestrator.status(STATUS_MODES[command])
    verdict = aggregate(reports)
    if config.json_output:
        _print_json({
            'repositories': [r.to_dict() for r in reports],
            'verdict': verdict.to_dict(),
        })
    else:
        reporter.print_summary(verdict, len(reports))
    return verdict.exit_code


def run(argv: list[str] | None = None) -> int:
    """Parse arguments, run the selected command and return its exit status."""
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    start_dir = Path(args.directory).resolve()
    if not start_dir.is_dir():
        print(f"{Fore.RED}Error: Invalid directory '{start_dir}'{Style.RESET_ALL}")
        return 1

    config = build_config(parser, args, argv, load_config_file(start_dir, args.config))
    if config.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    output = NullOutputHandler() if config.json_output else ConsoleOutputHandler(verbose=config.verbose)

    try:
        return run_command(args.command, start_dir, config, output)
    except WorkspaceError as e:
        if config.json_output:
            _print_json({'error': str(e)})
        else:
            output.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        if not config.json_output:
            output.warning("\n\nInterrupted by user")
        return 130
    except Exception as e:
        if config.json_output:
            _print_json({'error': str(e)})
        else:
            output.error(f"\nUnexpected error: {e}")
            if config.verbose:
                import traceback
                traceback.print_exc()
        return 1


def main():
    """Main entry point"""
    sys.exit(run())
