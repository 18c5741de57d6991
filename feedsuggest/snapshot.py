"""
Flat JSON snapshots of the social graph.

A snapshot is what the feed client has already read from the ledger:
{"users": [...], "follows": [...], "posts": [...]}, each a list of
camelCase records.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .models import FollowEdge, Post, User


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or parsed."""
    pass


@dataclass
class Snapshot:
    users: List[User] = field(default_factory=list)
    follows: List[FollowEdge] = field(default_factory=list)
    posts: List[Post] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        return cls(
            users=[User.from_dict(u) for u in data.get("users") or [] if isinstance(u, dict)],
            follows=[FollowEdge.from_dict(f) for f in data.get("follows") or [] if isinstance(f, dict)],
            posts=[Post.from_dict(p) for p in data.get("posts") or [] if isinstance(p, dict)],
        )


def read_snapshot_data(path: Path) -> Dict[str, Any]:
    """Read the raw snapshot dict. An empty file is an empty snapshot."""
    if not path.exists():
        raise SnapshotError(f"Snapshot not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
    if not content:
        return {"users": [], "follows": [], "posts": []}
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot {path} must contain a JSON object")
    return data


def load_snapshot(path: Path) -> Snapshot:
    return Snapshot.from_dict(read_snapshot_data(path))
