"""JSON reporter for scripts and downstream tooling."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from diffsense.analysis.models import ContextAnalysis


def to_dict(analysis: ContextAnalysis) -> Dict[str, Any]:
    """Convert a ContextAnalysis to a JSON-serialisable dict."""
    files_list: List[Dict[str, Any]] = []
    for f in analysis.files:
        files_list.append({
            "path": f.path,
            "status": f.status.value,
            "additions": f.additions,
            "deletions": f.deletions,
            "magnitude": f.magnitude.value,
            "keywords": list(f.keywords),
            "summary": f.summary,
            **({"old_path": f.old_path} if f.old_path else {}),
        })

    return {
        "version": "1.0",
        "files": files_list,
        "type": {
            "type": analysis.type.type.value,
            "confidence": round(analysis.type.confidence, 3),
            "reasons": analysis.type.reasons,
        },
        "scope": {
            "scopes": analysis.scope.scopes,
            "confidence": round(analysis.scope.confidence, 3),
            "reasons": analysis.scope.reasons,
        },
        "breaking": analysis.breaking,
        "summary": analysis.summary,
        "total_additions": analysis.total_additions,
        "total_deletions": analysis.total_deletions,
    }


def render(analysis: ContextAnalysis) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(analysis), indent=2)
