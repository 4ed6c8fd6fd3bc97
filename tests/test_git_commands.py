"""Integration tests against a real temporary repository: adapter, status, stash, reset."""

import subprocess
from pathlib import Path

import pytest

from gitstate.git import reset as git_reset
from gitstate.git import stash
from gitstate.git.adapter import GitError, GitResult, get_git_version, get_repo_root, run_git
from gitstate.git.capabilities import GitContext
from gitstate.git.models import AppFileStatus
from gitstate.git.reset import GitResetMode, reset_mode_to_flag
from gitstate.git.status import get_status


def _head(repo: Path) -> str:
    out = subprocess.run(
        ["git", "rev-parse", "HEAD"], cwd=repo, capture_output=True, text=True, check=True
    )
    return out.stdout.strip()


class TestAdapter:
    def test_repo_root(self, tmp_git_repo: Path):
        sub = tmp_git_repo / "sub"
        sub.mkdir()
        assert get_repo_root(sub).resolve() == tmp_git_repo.resolve()

    def test_not_a_repo(self, tmp_path: Path):
        with pytest.raises(GitError):
            get_repo_root(tmp_path)

    def test_git_version(self):
        assert get_git_version().startswith("git version")

    def test_missing_executable(self, tmp_path: Path):
        context = GitContext(executable="definitely-not-git-4c1f")
        with pytest.raises(GitError, match="not installed"):
            run_git(["status"], cwd=tmp_path, context=context)

    def test_error_carries_details(self, tmp_git_repo: Path):
        with pytest.raises(GitError) as exc_info:
            run_git(["rev-parse", "no-such-ref-xyz"], cwd=tmp_git_repo)
        assert exc_info.value.returncode != 0
        assert exc_info.value.command[1:] == ["rev-parse", "no-such-ref-xyz"]

    def test_unchecked_returns_result(self, tmp_git_repo: Path):
        result = run_git(["rev-parse", "no-such-ref-xyz"], cwd=tmp_git_repo, check=False)
        assert not result.success

    def test_stdout_is_bytes(self, tmp_git_repo: Path):
        result = run_git(["status", "--porcelain=2", "-z"], cwd=tmp_git_repo)
        assert isinstance(result, GitResult)
        assert isinstance(result.stdout, bytes)


class TestGetStatus:
    def test_clean(self, tmp_git_repo: Path):
        result = get_status(tmp_git_repo)
        assert result.is_clean
        assert result.current_branch is not None
        assert result.current_tip == _head(tmp_git_repo)
        assert result.current_upstream_branch is None

    def test_modified_unstaged(self, tmp_git_repo: Path):
        (tmp_git_repo / "A.txt").write_text("A modified\n")
        result = get_status(tmp_git_repo)
        assert len(result.files) == 1
        change = result.files[0]
        assert change.path == "A.txt"
        assert change.status == AppFileStatus.MODIFIED
        assert change.is_staged is False

    def test_staged_and_unstaged(self, tmp_git_repo: Path, git):
        (tmp_git_repo / "A.txt").write_text("staged\n")
        git(tmp_git_repo, "add", "A.txt")
        (tmp_git_repo / "A.txt").write_text("staged then edited\n")
        result = get_status(tmp_git_repo)
        assert [(f.path, f.is_staged) for f in result.files] == [
            ("A.txt", True),
            ("A.txt", False),
        ]

    def test_untracked_in_subdirectory(self, tmp_git_repo: Path):
        (tmp_git_repo / "dir").mkdir()
        (tmp_git_repo / "dir" / "new file.txt").write_text("x\n")
        result = get_status(tmp_git_repo)
        assert [(f.path, f.status) for f in result.files] == [
            ("dir/new file.txt", AppFileStatus.NEW)
        ]

    def test_rename(self, tmp_git_repo: Path, git):
        git(tmp_git_repo, "mv", "A.txt", "B.txt")
        result = get_status(tmp_git_repo)
        assert len(result.files) == 1
        assert result.files[0].status == AppFileStatus.RENAMED
        assert result.files[0].path == "B.txt"
        assert result.files[0].old_path == "A.txt"

    def test_added_then_deleted_hidden(self, tmp_git_repo: Path, git):
        (tmp_git_repo / "temp.txt").write_text("x\n")
        git(tmp_git_repo, "add", "temp.txt")
        (tmp_git_repo / "temp.txt").unlink()
        assert get_status(tmp_git_repo).is_clean

    def test_staged_delete_with_untracked_replacement(self, tmp_git_repo: Path, git):
        git(tmp_git_repo, "rm", "--cached", "A.txt")
        result = get_status(tmp_git_repo)
        assert [(f.path, f.status, f.is_staged) for f in result.files] == [
            ("A.txt", AppFileStatus.NEW, False)
        ]

    def test_limit(self, tmp_git_repo: Path):
        for name in ("x.txt", "y.txt", "z.txt"):
            (tmp_git_repo / name).write_text(name)
        result = get_status(tmp_git_repo, limit=1)
        assert len(result.files) == 1
        assert result.truncated is True
        assert get_status(tmp_git_repo, limit=3).truncated is False

    def test_without_optional_locks_flag(self, tmp_git_repo: Path):
        (tmp_git_repo / "A.txt").write_text("changed\n")
        result = get_status(tmp_git_repo, no_optional_locks=False)
        assert len(result.files) == 1


class TestStash:
    def test_push_and_list(self, tmp_git_repo: Path):
        (tmp_git_repo / "A.txt").write_text("A modified\n")
        assert len(get_status(tmp_git_repo).files) == 1

        stash.push(tmp_git_repo, "work in progress")

        assert get_status(tmp_git_repo).is_clean
        entries = stash.list_stashes(tmp_git_repo)
        assert len(entries) == 1
        assert "work in progress" in entries[0]

    def test_list_empty(self, tmp_git_repo: Path):
        assert stash.list_stashes(tmp_git_repo) == []

    def test_apply_latest_keeps_stash(self, tmp_git_repo: Path):
        (tmp_git_repo / "A.txt").write_text("first\n")
        stash.push(tmp_git_repo)
        (tmp_git_repo / "A.txt").write_text("second\n")
        stash.push(tmp_git_repo)

        stash.apply(tmp_git_repo)

        assert (tmp_git_repo / "A.txt").read_text() == "second\n"
        assert len(stash.list_stashes(tmp_git_repo)) == 2

    def test_pop_by_id(self, tmp_git_repo: Path):
        (tmp_git_repo / "A.txt").write_text("first\n")
        stash.push(tmp_git_repo)
        (tmp_git_repo / "A.txt").write_text("second\n")
        stash.push(tmp_git_repo)

        stash.pop(tmp_git_repo, "stash@{1}")

        assert (tmp_git_repo / "A.txt").read_text() == "first\n"
        assert len(stash.list_stashes(tmp_git_repo)) == 1

    def test_drop_and_clear(self, tmp_git_repo: Path):
        for text in ("one\n", "two\n", "three\n"):
            (tmp_git_repo / "A.txt").write_text(text)
            stash.push(tmp_git_repo)

        stash.drop(tmp_git_repo)
        assert len(stash.list_stashes(tmp_git_repo)) == 2

        stash.clear(tmp_git_repo)
        assert stash.list_stashes(tmp_git_repo) == []

    def test_pop_without_stash_fails(self, tmp_git_repo: Path):
        with pytest.raises(GitError):
            stash.pop(tmp_git_repo)


class TestReset:
    def test_mode_flags(self):
        assert reset_mode_to_flag(GitResetMode.HARD) == "--hard"
        assert reset_mode_to_flag(GitResetMode.SOFT) == "--soft"
        assert reset_mode_to_flag(GitResetMode.MIXED) == "--mixed"

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown reset mode"):
            reset_mode_to_flag("keep")  # type: ignore[arg-type]

    def test_hard_discards_changes(self, tmp_git_repo: Path):
        (tmp_git_repo / "A.txt").write_text("changed\n")
        git_reset.reset(tmp_git_repo, GitResetMode.HARD, "HEAD")
        assert get_status(tmp_git_repo).is_clean
        assert (tmp_git_repo / "A.txt").read_text() == "A\n"

    def test_soft_keeps_changes_staged(self, tmp_git_repo: Path, git):
        (tmp_git_repo / "A.txt").write_text("second\n")
        git(tmp_git_repo, "commit", "-am", "second")

        git_reset.reset(tmp_git_repo, GitResetMode.SOFT, "HEAD~1")

        result = get_status(tmp_git_repo)
        assert [(f.path, f.is_staged) for f in result.files] == [("A.txt", True)]

    def test_unstage_all(self, tmp_git_repo: Path, git):
        (tmp_git_repo / "A.txt").write_text("changed\n")
        (tmp_git_repo / "new.txt").write_text("new\n")
        git(tmp_git_repo, "add", ".")
        assert all(f.is_staged for f in get_status(tmp_git_repo).files)

        git_reset.unstage_all(tmp_git_repo)

        result = get_status(tmp_git_repo)
        assert result.staged_files == []
        assert sorted(f.path for f in result.files) == ["A.txt", "new.txt"]

    def test_reset_paths_args(self, monkeypatch, tmp_path: Path):
        calls = []
        monkeypatch.setattr(
            git_reset, "run_git", lambda args, cwd=None, *, context=None: calls.append(args)
        )
        git_reset.reset_paths(tmp_path, GitResetMode.MIXED, "HEAD", ["a.txt", "b.txt"])
        assert calls == [["reset", "--mixed", "HEAD", "--", "a.txt", "b.txt"]]

    def test_reset_paths_empty_is_noop(self, monkeypatch, tmp_path: Path):
        calls = []
        monkeypatch.setattr(
            git_reset, "run_git", lambda args, cwd=None, *, context=None: calls.append(args)
        )
        git_reset.reset_paths(tmp_path, GitResetMode.HARD, "HEAD", [])
        assert calls == []

    def test_reset_to_unknown_ref_fails(self, tmp_git_repo: Path):
        with pytest.raises(GitError):
            git_reset.reset(tmp_git_repo, GitResetMode.MIXED, "no-such-ref-xyz")
