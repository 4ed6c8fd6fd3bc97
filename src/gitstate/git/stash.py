"""``git stash`` wrappers."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from gitstate.git.adapter import run_git
from gitstate.git.capabilities import GitContext


def push(repo_root: Path, message: Optional[str] = None, *, context: Optional[GitContext] = None) -> None:
    """Stash the current changes, optionally with a message."""
    args = ["stash", "push"]
    if message:
        args.extend(["-m", message])
    run_git(args, cwd=repo_root, context=context)


def list_stashes(repo_root: Path, *, context: Optional[GitContext] = None) -> List[str]:
    """Return one ``stash@{n}: ...`` line per stash, newest first."""
    output = run_git(["stash", "list"], cwd=repo_root, context=context).text
    return output.strip().split("\n") if output.strip() else []


def _stash_op(op: str, repo_root: Path, stash_id: Optional[str], context: Optional[GitContext]) -> None:
    args = ["stash", op]
    if stash_id:
        args.append(stash_id)
    run_git(args, cwd=repo_root, context=context)


def apply(repo_root: Path, stash_id: Optional[str] = None, *, context: Optional[GitContext] = None) -> None:
    """Apply the latest stash, or *stash_id* (``stash@{n}``), keeping it."""
    _stash_op("apply", repo_root, stash_id, context)


def pop(repo_root: Path, stash_id: Optional[str] = None, *, context: Optional[GitContext] = None) -> None:
    """Apply and remove the latest stash, or *stash_id*."""
    _stash_op("pop", repo_root, stash_id, context)


def drop(repo_root: Path, stash_id: Optional[str] = None, *, context: Optional[GitContext] = None) -> None:
    _stash_op("drop", repo_root, stash_id, context)


def clear(repo_root: Path, *, context: Optional[GitContext] = None) -> None:
    run_git(["stash", "clear"], cwd=repo_root, context=context)
