"""Exception hierarchy shared by the git, config and status layers."""

from __future__ import annotations


class GitStateError(Exception):
    """Base error for the project."""
