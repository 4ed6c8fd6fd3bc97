"""Status interpretation: porcelain records to an ordered list of file changes.

Each entry's two-letter status code is classified through a lookup table
covering every code porcelain v2 can emit. An entry produces one staged
record when the index side changed, one unstaged record when the working
tree side changed, or a single unstaged record when neither did (untracked
and ignored paths).
"""

from __future__ import annotations

import re
from itertools import product
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from gitstate.errors import GitStateError
from gitstate.git.adapter import get_git_version, run_git
from gitstate.git.capabilities import GitContext
from gitstate.git.models import (
    AheadBehind,
    AppFileStatus,
    ConflictedEntry,
    CopiedEntry,
    FileChange,
    FileEntry,
    GitStatusEntry,
    OrdinaryEntry,
    RenamedEntry,
    StatusEntry,
    StatusHeader,
    StatusRecord,
    StatusResult,
    UnmergedAction,
    UntrackedEntry,
)
from gitstate.git.porcelain import parse_porcelain_status


class StatusClassificationError(GitStateError, ValueError):
    """A status code fell outside the classification table."""

    def __init__(self, status: object) -> None:
        super().__init__(f"Unknown file status {status!r}")
        self.status = status


# --- Classification table ---

_SIDE_STATES: Dict[str, GitStatusEntry] = {
    ".": GitStatusEntry.UNCHANGED,
    "M": GitStatusEntry.MODIFIED,
    "T": GitStatusEntry.TYPE_CHANGED,
    "A": GitStatusEntry.ADDED,
    "D": GitStatusEntry.DELETED,
    "R": GitStatusEntry.RENAMED,
    "C": GitStatusEntry.COPIED,
    "U": GitStatusEntry.UPDATED_BUT_UNMERGED,
}

_UNMERGED_ACTIONS: Dict[str, UnmergedAction] = {
    "DD": UnmergedAction.BOTH_DELETED,
    "AU": UnmergedAction.ADDED_BY_US,
    "UD": UnmergedAction.DELETED_BY_THEM,
    "UA": UnmergedAction.ADDED_BY_THEM,
    "DU": UnmergedAction.DELETED_BY_US,
    "AA": UnmergedAction.BOTH_ADDED,
    "UU": UnmergedAction.BOTH_MODIFIED,
}

_ADDED_CODES = frozenset({"A.", ".A", "AM", "AD", "AT"})
_DELETED_CODES = frozenset({"D.", ".D"})


def _classify(code: str) -> FileEntry:
    if code in _UNMERGED_ACTIONS:
        return ConflictedEntry(action=_UNMERGED_ACTIONS[code])
    if "U" in code:
        return ConflictedEntry(action=UnmergedAction.BOTH_MODIFIED)

    index = _SIDE_STATES[code[0]]
    working_tree = _SIDE_STATES[code[1]]
    if "R" in code:
        return RenamedEntry(index=index, working_tree=working_tree)
    if "C" in code:
        return CopiedEntry(index=index, working_tree=working_tree)
    if code in _ADDED_CODES:
        return OrdinaryEntry(type="added", index=index, working_tree=working_tree)
    if code in _DELETED_CODES:
        return OrdinaryEntry(type="deleted", index=index, working_tree=working_tree)
    return OrdinaryEntry(type="modified", index=index, working_tree=working_tree)


STATUS_TABLE: Dict[str, FileEntry] = {
    x + y: _classify(x + y) for x, y in product(_SIDE_STATES, repeat=2)
}
STATUS_TABLE["??"] = UntrackedEntry()
STATUS_TABLE["!!"] = UntrackedEntry()


def map_status(status_code: str) -> FileEntry:
    """Classify a two-letter porcelain status code."""
    try:
        return STATUS_TABLE[status_code]
    except KeyError:
        raise StatusClassificationError(status_code) from None


_ORDINARY_APP_STATUS: Dict[str, AppFileStatus] = {
    "added": AppFileStatus.NEW,
    "modified": AppFileStatus.MODIFIED,
    "deleted": AppFileStatus.DELETED,
}

_KIND_APP_STATUS: Dict[str, AppFileStatus] = {
    "copied": AppFileStatus.COPIED,
    "renamed": AppFileStatus.RENAMED,
    "conflicted": AppFileStatus.CONFLICTED,
    "untracked": AppFileStatus.NEW,
}


def to_app_status(entry: FileEntry) -> AppFileStatus:
    """Map a classified entry to the status shown to callers."""
    kind = getattr(entry, "kind", None)
    if kind == "ordinary":
        status = _ORDINARY_APP_STATUS.get(getattr(entry, "type", None))
    else:
        status = _KIND_APP_STATUS.get(kind)
    if status is None:
        raise StatusClassificationError(entry)
    return status


# See: https://git-scm.com/docs/git-status#_short_format
_INDEX_CHANGES = frozenset("MADURC")
_WORKTREE_CHANGES = frozenset("MADU")


def is_change_in_index(status_code: str) -> bool:
    return status_code[:1] in _INDEX_CHANGES


def is_change_in_work_tree(status_code: str) -> bool:
    return status_code[1:2] in _WORKTREE_CHANGES


# --- Branch headers ---

# Does not match "branch.oid (initial)"
_BRANCH_OID_RE = re.compile(r"^branch\.oid ([a-f0-9]+)$")
_BRANCH_HEAD_RE = re.compile(r"^branch\.head (.*)")
_BRANCH_UPSTREAM_RE = re.compile(r"^branch\.upstream (.*)")
_BRANCH_AB_RE = re.compile(r"^branch\.ab \+(\d+) -(\d+)$")


def _apply_header(result: StatusResult, value: str) -> None:
    if m := _BRANCH_OID_RE.match(value):
        result.current_tip = m.group(1)
    elif m := _BRANCH_HEAD_RE.match(value):
        if m.group(1) != "(detached)":
            result.current_branch = m.group(1)
    elif m := _BRANCH_UPSTREAM_RE.match(value):
        result.current_upstream_branch = m.group(1)
    elif m := _BRANCH_AB_RE.match(value):
        result.ahead_behind = AheadBehind(ahead=int(m.group(1)), behind=int(m.group(2)))


# --- Interpreter ---


def interpret_status(records: Iterable[StatusRecord], truncated: bool = False) -> StatusResult:
    """Build a StatusResult from parsed porcelain records, in stream order."""
    result = StatusResult(truncated=truncated)
    files: List[FileChange] = []
    seen_paths: Set[str] = set()

    for record in records:
        if isinstance(record, StatusHeader):
            _apply_header(result, record.value)
            continue
        if not isinstance(record, StatusEntry):
            continue

        entry = map_status(record.status_code)

        # Added to the index then deleted from the working tree: nothing
        # would be committed, so there is nothing to show
        if (
            isinstance(entry, OrdinaryEntry)
            and entry.index == GitStatusEntry.ADDED
            and entry.working_tree == GitStatusEntry.DELETED
        ):
            continue

        # A staged delete plus an untracked file at the same path: keep one
        # row for the path. Only the first earlier row is dropped.
        if isinstance(entry, UntrackedEntry) and record.path in seen_paths:
            for idx, existing in enumerate(files):
                if existing.path == record.path:
                    del files[idx]
                    break

        status = to_app_status(entry)
        in_index = is_change_in_index(record.status_code)
        in_work_tree = is_change_in_work_tree(record.status_code)

        if in_index:
            files.append(FileChange(record.path, status, record.old_path, is_staged=True))
        if in_work_tree:
            files.append(FileChange(record.path, status, record.old_path, is_staged=False))
        if not in_index and not in_work_tree:
            files.append(FileChange(record.path, status, record.old_path, is_staged=False))
        seen_paths.add(record.path)

    result.files = files
    return result


def compute_status(raw: Union[bytes, str], entry_limit: Optional[int] = None) -> StatusResult:
    """Parse and interpret ``git status --porcelain=2 -z`` output."""
    parsed = parse_porcelain_status(raw, limit=entry_limit)
    return interpret_status(parsed.records, truncated=parsed.truncated)


def build_status_args(no_optional_locks: bool) -> List[str]:
    args: List[str] = []
    if no_optional_locks:
        args.append("--no-optional-locks")
    args.extend(["status", "--untracked-files=all", "--branch", "--porcelain=2", "-z"])
    return args


def get_status(
    repo_root: Path,
    *,
    no_optional_locks: bool = True,
    limit: Optional[int] = None,
    context: Optional[GitContext] = None,
) -> StatusResult:
    """Run ``git status`` in *repo_root* and interpret its output.

    ``--no-optional-locks`` is only passed when requested and the git
    executable is recent enough; the version is probed once per context.
    """
    context = context or GitContext()
    use_flag = no_optional_locks and context.capabilities.can_use_no_optional_locks(
        lambda: get_git_version(context)
    )
    result = run_git(build_status_args(use_flag), cwd=repo_root, context=context)
    return compute_status(result.stdout, entry_limit=limit)
