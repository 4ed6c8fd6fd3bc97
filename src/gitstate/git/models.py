"""Data models for porcelain status parsing and interpretation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal, Optional, Union


class GitStatusEntry(str, Enum):
    """State of a file on one side (index or working tree) of a status code."""

    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UNCHANGED = "unchanged"
    UPDATED_BUT_UNMERGED = "updated_but_unmerged"
    TYPE_CHANGED = "type_changed"


class UnmergedAction(str, Enum):
    BOTH_DELETED = "both_deleted"
    ADDED_BY_US = "added_by_us"
    DELETED_BY_THEM = "deleted_by_them"
    ADDED_BY_THEM = "added_by_them"
    DELETED_BY_US = "deleted_by_us"
    BOTH_ADDED = "both_added"
    BOTH_MODIFIED = "both_modified"


class AppFileStatus(str, Enum):
    """Status of a file as shown to callers."""

    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    COPIED = "copied"
    RENAMED = "renamed"
    CONFLICTED = "conflicted"


# --- Parser output ---


@dataclass(frozen=True)
class StatusHeader:
    """A ``# ...`` line, e.g. ``branch.head main``."""

    value: str
    kind: Literal["header"] = "header"


@dataclass(frozen=True)
class StatusEntry:
    """A changed, renamed, unmerged, untracked or ignored path."""

    status_code: str  # two chars: index state, worktree state
    path: str
    old_path: Optional[str] = None  # set on renames and copies
    entry_type: str = "1"  # porcelain marker: 1 | 2 | u | ? | !
    submodule: Optional[str] = None
    kind: Literal["entry"] = "entry"


StatusRecord = Union[StatusHeader, StatusEntry]


@dataclass(frozen=True)
class PorcelainStatus:
    records: List[StatusRecord] = field(default_factory=list)
    truncated: bool = False

    @property
    def entries(self) -> List[StatusEntry]:
        return [r for r in self.records if isinstance(r, StatusEntry)]

    @property
    def headers(self) -> List[StatusHeader]:
        return [r for r in self.records if isinstance(r, StatusHeader)]


# --- Classified status ---


@dataclass(frozen=True)
class OrdinaryEntry:
    type: Literal["added", "modified", "deleted"]
    index: Optional[GitStatusEntry] = None
    working_tree: Optional[GitStatusEntry] = None
    kind: Literal["ordinary"] = "ordinary"


@dataclass(frozen=True)
class RenamedEntry:
    index: Optional[GitStatusEntry] = None
    working_tree: Optional[GitStatusEntry] = None
    kind: Literal["renamed"] = "renamed"


@dataclass(frozen=True)
class CopiedEntry:
    index: Optional[GitStatusEntry] = None
    working_tree: Optional[GitStatusEntry] = None
    kind: Literal["copied"] = "copied"


@dataclass(frozen=True)
class ConflictedEntry:
    action: UnmergedAction
    kind: Literal["conflicted"] = "conflicted"


@dataclass(frozen=True)
class UntrackedEntry:
    kind: Literal["untracked"] = "untracked"


FileEntry = Union[OrdinaryEntry, RenamedEntry, CopiedEntry, ConflictedEntry, UntrackedEntry]


# --- Interpreter output ---


@dataclass(frozen=True)
class FileChange:
    """One staged or unstaged view of a changed path."""

    path: str
    status: AppFileStatus
    old_path: Optional[str] = None
    is_staged: bool = False


@dataclass(frozen=True)
class AheadBehind:
    ahead: int
    behind: int


@dataclass
class StatusResult:
    """Branch metadata plus the ordered list of file changes."""

    current_branch: Optional[str] = None
    current_tip: Optional[str] = None
    current_upstream_branch: Optional[str] = None
    ahead_behind: Optional[AheadBehind] = None
    files: List[FileChange] = field(default_factory=list)
    truncated: bool = False

    @property
    def staged_files(self) -> List[FileChange]:
        return [f for f in self.files if f.is_staged]

    @property
    def unstaged_files(self) -> List[FileChange]:
        return [f for f in self.files if not f.is_staged]

    @property
    def is_clean(self) -> bool:
        return not self.files
