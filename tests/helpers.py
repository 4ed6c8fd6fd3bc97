"""Builders for porcelain v2 status lines."""

from __future__ import annotations

HASH_A = "3b18e512dba79e4c8300dd08aeb37f8e728b8dad"
HASH_B = "8ab686eafeb1f44702738c8b0f24f2567c36da6d"


def changed(xy: str, path: str) -> str:
    """A type '1' (ordinary) porcelain v2 line."""
    return f"1 {xy} N... 100644 100644 100644 {HASH_A} {HASH_B} {path}"


def renamed(xy: str, path: str, score: str = "R100") -> str:
    """The primary token of a type '2' (rename/copy) line."""
    return f"2 {xy} N... 100644 100644 100644 {HASH_A} {HASH_B} {score} {path}"


def unmerged(xy: str, path: str) -> str:
    """A type 'u' (unmerged) porcelain v2 line."""
    return f"u {xy} N... 100644 100644 100644 100644 {HASH_A} {HASH_B} {HASH_A} {path}"


def stream(*tokens: str) -> bytes:
    """Join tokens the way ``git status -z`` does: NUL-terminated."""
    return "".join(f"{t}\0" for t in tokens).encode("utf-8")
