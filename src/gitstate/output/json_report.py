"""JSON reporter for scripts and CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from gitstate.git.models import StatusResult


def to_dict(result: StatusResult) -> Dict[str, Any]:
    """Convert StatusResult to a JSON-serialisable dict."""
    files: List[Dict[str, Any]] = []
    for f in result.files:
        files.append({
            "path": f.path,
            "status": f.status.value,
            "staged": f.is_staged,
            **({"old_path": f.old_path} if f.old_path else {}),
        })

    ahead_behind = result.ahead_behind
    return {
        "branch": result.current_branch,
        "tip": result.current_tip,
        "upstream": result.current_upstream_branch,
        "ahead": ahead_behind.ahead if ahead_behind else None,
        "behind": ahead_behind.behind if ahead_behind else None,
        "truncated": result.truncated,
        "clean": result.is_clean,
        "files": files,
    }


def render(result: StatusResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
