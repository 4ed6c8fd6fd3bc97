"""Porcelain v2 status parser for ``git status --porcelain=2 -z`` output.

Splits the NUL-delimited stream into header and entry records. Handles the
two-token rename/copy records, the entry limit with truncation detection,
and skips tokens it does not recognise so that newer git versions emitting
new line kinds do not break parsing.
"""

from __future__ import annotations

import re
from typing import List, Optional, Union

from loguru import logger

from gitstate.git.models import PorcelainStatus, StatusEntry, StatusHeader, StatusRecord

# --- Entry markers ---

HEADER_MARKER = "#"
CHANGED_MARKER = "1"
RENAMED_OR_COPIED_MARKER = "2"
UNMERGED_MARKER = "u"
UNTRACKED_MARKER = "?"
IGNORED_MARKER = "!"

_ENTRY_MARKERS = frozenset(
    {CHANGED_MARKER, RENAMED_OR_COPIED_MARKER, UNMERGED_MARKER, UNTRACKED_MARKER, IGNORED_MARKER}
)

# --- Regex patterns for entry lines ---

_XY = r"(?P<xy>[.MTADRCU]{2})"
_SUB = r"(?P<sub>N\.\.\.|S[C.][M.][U.])"
_PATH = r"(?P<path>.+)"

# 1 <XY> <sub> <mH> <mI> <mW> <hH> <hI> <path>
_CHANGED_RE = re.compile(rf"^1 {_XY} {_SUB} \d+ \d+ \d+ [a-f0-9]+ [a-f0-9]+ {_PATH}$", re.DOTALL)
# 2 <XY> <sub> <mH> <mI> <mW> <hH> <hI> <X><score> <path>  (original path in the next token)
_RENAMED_OR_COPIED_RE = re.compile(
    rf"^2 {_XY} {_SUB} \d+ \d+ \d+ [a-f0-9]+ [a-f0-9]+ [RC]\d+[ \t]{_PATH}$", re.DOTALL
)
# u <XY> <sub> <m1> <m2> <m3> <mW> <h1> <h2> <h3> <path>
_UNMERGED_RE = re.compile(
    rf"^u (?P<xy>[DAU]{{2}}) {_SUB} \d+ \d+ \d+ \d+ [a-f0-9]+ [a-f0-9]+ [a-f0-9]+ {_PATH}$",
    re.DOTALL,
)


def normalize_path(path: str) -> str:
    """Return *path* with forward slashes and no leading ``./``."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def _decode(output: Union[bytes, str]) -> str:
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def _parse_changed(token: str) -> Optional[StatusEntry]:
    m = _CHANGED_RE.match(token)
    if not m:
        return None
    return StatusEntry(
        status_code=m.group("xy"),
        path=normalize_path(m.group("path")),
        entry_type=CHANGED_MARKER,
        submodule=m.group("sub"),
    )


def _parse_renamed_or_copied(token: str, old_path: Optional[str]) -> Optional[StatusEntry]:
    m = _RENAMED_OR_COPIED_RE.match(token)
    if not m or old_path is None:
        return None
    return StatusEntry(
        status_code=m.group("xy"),
        path=normalize_path(m.group("path")),
        old_path=normalize_path(old_path),
        entry_type=RENAMED_OR_COPIED_MARKER,
        submodule=m.group("sub"),
    )


def _parse_unmerged(token: str) -> Optional[StatusEntry]:
    m = _UNMERGED_RE.match(token)
    if not m:
        return None
    return StatusEntry(
        status_code=m.group("xy"),
        path=normalize_path(m.group("path")),
        entry_type=UNMERGED_MARKER,
        submodule=m.group("sub"),
    )


def _parse_untracked_or_ignored(token: str) -> Optional[StatusEntry]:
    marker = token[0]
    path = token[2:]
    if token[1:2] != " " or not path:
        return None
    return StatusEntry(
        status_code=marker * 2,  # '??' or '!!'
        path=normalize_path(path),
        entry_type=marker,
    )


class PorcelainParser:
    """Parse ``git status --porcelain=2 -z`` output into status records.

    Usage::

        status = PorcelainParser(stdout, limit=500).parse()
        for record in status.records:
            if isinstance(record, StatusHeader):
                ...
            elif isinstance(record, StatusEntry):
                ...

    *limit* caps the number of entry records kept. Once it is reached the
    parser only looks far enough ahead to find another well-formed entry,
    which sets ``truncated``.
    """

    def __init__(self, output: Union[bytes, str], limit: Optional[int] = None) -> None:
        tokens = _decode(output).split("\0")
        # Terminal NUL leaves an empty trailing token
        if tokens and tokens[-1] == "":
            tokens.pop()
        self._tokens = tokens
        self._limit = limit

    def parse(self) -> PorcelainStatus:
        records: List[StatusRecord] = []
        entry_count = 0
        truncated = False
        idx = 0
        total = len(self._tokens)

        while idx < total:
            token = self._tokens[idx]
            idx += 1

            if not token:
                continue

            # --- Header ---
            if token.startswith(HEADER_MARKER):
                value = token[2:] if token.startswith("# ") else token[1:]
                if value:
                    records.append(StatusHeader(value=value))
                continue

            marker = token[0]
            if marker not in _ENTRY_MARKERS:
                logger.debug(f"Skipping unrecognised porcelain token: {token!r}")
                continue

            # Rename/copy records always own the following token
            old_path: Optional[str] = None
            if marker == RENAMED_OR_COPIED_MARKER and idx < total:
                old_path = self._tokens[idx]
                idx += 1

            if marker == CHANGED_MARKER:
                entry = _parse_changed(token)
            elif marker == RENAMED_OR_COPIED_MARKER:
                entry = _parse_renamed_or_copied(token, old_path)
            elif marker == UNMERGED_MARKER:
                entry = _parse_unmerged(token)
            else:
                entry = _parse_untracked_or_ignored(token)

            if entry is None:
                logger.debug(f"Skipping malformed porcelain entry: {token!r}")
                continue

            # Only a well-formed entry past the limit marks the stream truncated
            if self._limit is not None and entry_count >= self._limit:
                truncated = True
                break

            records.append(entry)
            entry_count += 1

        return PorcelainStatus(records=records, truncated=truncated)


def parse_porcelain_status(
    output: Union[bytes, str], limit: Optional[int] = None
) -> PorcelainStatus:
    """Parse porcelain v2 ``-z`` output. ``limit=None`` keeps every entry."""
    return PorcelainParser(output, limit=limit).parse()
