"""Shared test fixtures: porcelain v2 streams, temp git repos."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable

import pytest
from loguru import logger

from helpers import HASH_A, changed, renamed, stream, unmerged


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop loguru sinks bound to streams captured by earlier tests."""
    yield
    logger.remove()


@pytest.fixture
def sample_status_mixed() -> bytes:
    """Branch headers plus one of every entry kind."""
    return stream(
        f"# branch.oid {HASH_A}",
        "# branch.head main",
        "# branch.upstream origin/main",
        "# branch.ab +2 -1",
        changed("MM", "A.txt"),
        changed(".M", "B.txt"),
        changed("A.", "C.txt"),
        renamed("R.", "new name.txt"),
        "old name.txt",
        unmerged("UU", "conflict.txt"),
        "? untracked.txt",
    )


@pytest.fixture
def sample_status_clean() -> bytes:
    return stream(
        f"# branch.oid {HASH_A}",
        "# branch.head main",
    )


@pytest.fixture
def sample_status_three_entries() -> bytes:
    return stream(
        "# branch.head main",
        changed(".M", "one.txt"),
        changed(".M", "two.txt"),
        changed(".M", "three.txt"),
    )


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=True)


@pytest.fixture
def git() -> Callable[..., None]:
    """Run a git command in a directory, failing the test on error."""
    return _git


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one commit (README.md, A.txt)."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    (tmp_path / "README.md").write_text("# Test\n")
    (tmp_path / "A.txt").write_text("A\n")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-m", "init")
    return tmp_path
