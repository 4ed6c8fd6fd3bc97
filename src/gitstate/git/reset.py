"""``git reset`` wrappers."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional

from gitstate.git.adapter import run_git
from gitstate.git.capabilities import GitContext


class GitResetMode(str, Enum):
    # Resets the index and working tree; tracked changes are discarded
    HARD = "hard"
    # Moves HEAD only; index and working tree are untouched
    SOFT = "soft"
    # Resets the index but keeps the working tree (git's default)
    MIXED = "mixed"


_MODE_FLAGS = {
    GitResetMode.HARD: "--hard",
    GitResetMode.SOFT: "--soft",
    GitResetMode.MIXED: "--mixed",
}


def reset_mode_to_flag(mode: GitResetMode) -> str:
    try:
        return _MODE_FLAGS[GitResetMode(mode)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown reset mode: {mode}") from None


def reset(repo_root: Path, mode: GitResetMode, ref: str, *, context: Optional[GitContext] = None) -> None:
    """Reset HEAD to *ref* with the given mode."""
    run_git(["reset", reset_mode_to_flag(mode), ref, "--"], cwd=repo_root, context=context)


def reset_paths(
    repo_root: Path,
    mode: GitResetMode,
    ref: str,
    paths: List[str],
    *,
    context: Optional[GitContext] = None,
) -> None:
    """Update the index entries for *paths* from the tree at *ref*.

    Does nothing when *paths* is empty.
    """
    if not paths:
        return
    run_git(
        ["reset", reset_mode_to_flag(mode), ref, "--", *paths],
        cwd=repo_root,
        context=context,
    )


def unstage_all(repo_root: Path, *, context: Optional[GitContext] = None) -> None:
    run_git(["reset", "--", "."], cwd=repo_root, context=context)
