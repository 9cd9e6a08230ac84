"""
pygit-workspace: Git Workspace Manager

Reconciles a declared list of git repositories against a workspace directory
and against their remotes, reporting or correcting divergence.
"""

from colorama import init as colorama_init

colorama_init(autoreset=True)

__version__ = "1.0.0"

# Re-export public API so `from pygit_workspace import X` keeps working.
from pygit_workspace.aggregator import aggregate  # noqa: E402
from pygit_workspace.cli import main, run  # noqa: E402
from pygit_workspace.config import create_argument_parser, load_config_file  # noqa: E402
from pygit_workspace.errors import (  # noqa: E402
    CloneError,
    GitError,
    NoRepositoriesFoundError,
    NotAWorkspaceError,
    ProjectListExistsError,
    WorkspaceError,
)
from pygit_workspace.models import (  # noqa: E402
    BranchReport,
    Classification,
    Mode,
    OperationResult,
    OperationType,
    Project,
    ProjectClassification,
    RepositoryReport,
    SyncState,
    WorkingTreeState,
    WorkspaceConfig,
    WorkspaceVerdict,
)
from pygit_workspace.orchestrator import WorkspaceOrchestrator, initialize_workspace  # noqa: E402
from pygit_workspace.output import (  # noqa: E402
    SECTION_WIDTH,
    BufferedOutputHandler,
    ConsoleOutputHandler,
    NullOutputHandler,
)
from pygit_workspace.paths import (  # noqa: E402
    compile_patterns,
    exclude_matching,
    matches_any,
    remove_nested_paths,
)
from pygit_workspace.protocols import GitRepository, OutputHandler, RepositoryBackend  # noqa: E402
from pygit_workspace.registry import (  # noqa: E402
    ProjectRegistry,
    format_project_line,
    parse_project_line,
    parse_project_list,
    read_ignore_list,
    read_project_list,
)
from pygit_workspace.reporter import StatusReporter  # noqa: E402
from pygit_workspace.repository import GitPythonBackend, GitPythonRepository  # noqa: E402
from pygit_workspace.scanner import RepositoryScanner  # noqa: E402
from pygit_workspace.synchronizer import BranchSynchronizer  # noqa: E402
from pygit_workspace.workspace import Workspace, find_workspace_root  # noqa: E402

__all__ = [
    "__version__",
    # Models
    "BranchReport",
    "Classification",
    "Mode",
    "OperationResult",
    "OperationType",
    "Project",
    "ProjectClassification",
    "RepositoryReport",
    "SyncState",
    "WorkingTreeState",
    "WorkspaceConfig",
    "WorkspaceVerdict",
    # Errors
    "CloneError",
    "GitError",
    "NoRepositoriesFoundError",
    "NotAWorkspaceError",
    "ProjectListExistsError",
    "WorkspaceError",
    # Protocols
    "GitRepository",
    "OutputHandler",
    "RepositoryBackend",
    # Implementations
    "GitPythonBackend",
    "GitPythonRepository",
    "BufferedOutputHandler",
    "ConsoleOutputHandler",
    "NullOutputHandler",
    "SECTION_WIDTH",
    # Engine
    "BranchSynchronizer",
    "ProjectRegistry",
    "RepositoryScanner",
    "StatusReporter",
    "Workspace",
    "WorkspaceOrchestrator",
    "aggregate",
    "initialize_workspace",
    "find_workspace_root",
    # Parsing and paths
    "compile_patterns",
    "exclude_matching",
    "format_project_line",
    "matches_any",
    "parse_project_line",
    "parse_project_list",
    "read_ignore_list",
    "read_project_list",
    "remove_nested_paths",
    # Config and entry points
    "create_argument_parser",
    "load_config_file",
    "main",
    "run",
]
