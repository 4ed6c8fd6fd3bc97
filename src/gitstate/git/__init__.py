"""Git interface layer: adapter, porcelain parsing, status interpretation."""

from gitstate.git.adapter import GitError, GitResult, get_git_version, get_repo_root, run_git
from gitstate.git.capabilities import GitCapabilities, GitContext, parse_git_version
from gitstate.git.models import (
    AheadBehind,
    AppFileStatus,
    FileChange,
    PorcelainStatus,
    StatusEntry,
    StatusHeader,
    StatusResult,
)
from gitstate.git.porcelain import PorcelainParser, parse_porcelain_status
from gitstate.git.status import (
    StatusClassificationError,
    compute_status,
    get_status,
    interpret_status,
    map_status,
)

__all__ = [
    "AheadBehind",
    "AppFileStatus",
    "FileChange",
    "GitCapabilities",
    "GitContext",
    "GitError",
    "GitResult",
    "PorcelainParser",
    "PorcelainStatus",
    "StatusClassificationError",
    "StatusEntry",
    "StatusHeader",
    "StatusResult",
    "compute_status",
    "get_git_version",
    "get_repo_root",
    "get_status",
    "interpret_status",
    "map_status",
    "parse_git_version",
    "parse_porcelain_status",
    "run_git",
]
