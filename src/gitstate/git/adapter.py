"""Git subprocess wrapper: command execution, repo root, version probe."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from loguru import logger

from gitstate.errors import GitStateError
from gitstate.git.capabilities import GitContext


class GitError(GitStateError):
    """Raised when git is unavailable or returns an unexpected error."""

    def __init__(
        self,
        message: str,
        *,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


@dataclass(frozen=True)
class GitResult:
    """Result of a git command. ``stdout`` is kept as raw bytes."""

    command: List[str]
    returncode: int
    stdout: bytes
    stderr: str

    @property
    def text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def success(self) -> bool:
        return self.returncode == 0


def run_git(
    args: List[str],
    cwd: Optional[Path] = None,
    *,
    context: Optional[GitContext] = None,
    check: bool = True,
) -> GitResult:
    """Run a git command. Raises GitError on failure when *check* is set."""
    context = context or GitContext()
    command = [context.executable, *args]
    logger.debug(f"Running {' '.join(command)} in {cwd or Path.cwd()}")
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            timeout=context.timeout,
        )
    except FileNotFoundError:
        raise GitError(
            f"{context.executable} is not installed or not on PATH", command=command
        )
    except subprocess.TimeoutExpired:
        raise GitError(
            f"git command timed out after {context.timeout}s: git {' '.join(args)}",
            command=command,
        )

    stderr = result.stderr.decode("utf-8", errors="replace")
    if check and result.returncode != 0:
        raise GitError(
            f"git error: {stderr.strip() or f'exit code {result.returncode}'}",
            command=command,
            returncode=result.returncode,
            stderr=stderr,
        )
    return GitResult(
        command=command,
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=stderr,
    )


def get_repo_root(cwd: Optional[Path] = None, *, context: Optional[GitContext] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = run_git(["rev-parse", "--show-toplevel"], cwd=cwd, context=context)
    return Path(out.text.strip())


def get_git_version(context: Optional[GitContext] = None) -> str:
    """Return the raw ``git --version`` output, e.g. ``git version 2.43.0``."""
    return run_git(["--version"], context=context).text.strip()
