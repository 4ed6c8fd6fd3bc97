"""Git feature detection, memoized per context."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from loguru import logger

# --no-optional-locks was added in git 2.15.0
NO_OPTIONAL_LOCKS_MIN_VERSION: Tuple[int, int] = (2, 15)

_VERSION_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


def parse_git_version(text: str) -> Optional[Tuple[int, int, int]]:
    """Extract ``(major, minor, patch)`` from ``git --version`` output.

    Accepts vendor suffixes such as ``2.39.3 (Apple Git-145)`` or
    ``2.42.0.windows.2``. Returns None when no version is found.
    """
    text = text.strip()
    if text.startswith("git version "):
        text = text[len("git version "):]
    m = _VERSION_RE.match(text)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)


class GitCapabilities:
    """Lazily probed git capabilities.

    Each flag is computed at most once per instance and reused afterwards.
    Share one instance (through a :class:`GitContext`) to probe once per
    process; create a fresh one to reprobe, e.g. in tests.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._no_optional_locks: Optional[bool] = None

    @property
    def probed(self) -> bool:
        return self._no_optional_locks is not None

    def can_use_no_optional_locks(self, probe: Callable[[], str]) -> bool:
        """Return True if ``--no-optional-locks`` is supported.

        *probe* returns the output of ``git --version``; it is only called on
        the first request. A failing probe disables the flag.
        """
        if self._no_optional_locks is not None:
            return self._no_optional_locks

        with self._lock:
            if self._no_optional_locks is None:
                self._no_optional_locks = self._probe_no_optional_locks(probe)
        return self._no_optional_locks

    @staticmethod
    def _probe_no_optional_locks(probe: Callable[[], str]) -> bool:
        min_version = ".".join(str(p) for p in NO_OPTIONAL_LOCKS_MIN_VERSION)
        logger.info(
            f"Checking whether '--no-optional-locks' can be used with the current "
            f"git executable. Minimum required version is '{min_version}.0'."
        )
        try:
            raw = probe()
        except Exception as exc:
            logger.warning(
                f"Cannot determine the git version ({exc}). "
                "Disabling '--no-optional-locks' for all subsequent calls."
            )
            return False

        version = parse_git_version(raw)
        if version is None:
            logger.warning(
                f"Unrecognised git version {raw.strip()!r}. "
                "Disabling '--no-optional-locks' for all subsequent calls."
            )
            return False

        supported = version[:2] >= NO_OPTIONAL_LOCKS_MIN_VERSION
        pretty = ".".join(str(p) for p in version)
        if supported:
            logger.info(f"'--no-optional-locks' is supported by git {pretty}.")
        else:
            logger.warning(
                f"git version was {pretty}. "
                "Disabling '--no-optional-locks' for all subsequent calls."
            )
        return supported


@dataclass
class GitContext:
    """How to invoke git, plus the capability cache shared by every call."""

    executable: str = "git"
    timeout: int = 30
    capabilities: GitCapabilities = field(default_factory=GitCapabilities)
