"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

NOW = 1_700_000_000.0
DAY = 24 * 60 * 60

VIEWER = "0xaaaa000000000000000000000000000000000001"
ALICE = "0xaaaa000000000000000000000000000000000002"
BOB = "0xaaaa000000000000000000000000000000000003"


class FakeClock:
    """Controllable clock returning seconds since epoch."""

    def __init__(self, start: float = NOW):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def snapshot_data() -> Dict[str, Any]:
    """Small social graph: viewer follows alice; bob shares the viewer's interests."""
    carol = "0xaaaa000000000000000000000000000000000004"
    return {
        "users": [
            {"address": VIEWER, "displayName": "Viewer", "bio": "solidity developer building decentralized social apps"},
            {"address": ALICE, "displayName": "Alice", "bio": "photographer"},
            {"address": BOB, "displayName": "Bob", "bio": "solidity developer building decentralized social apps"},
            {"address": carol, "displayName": "Carol", "bio": "gardening and cooking"},
        ],
        "follows": [
            {"follower": VIEWER, "following": ALICE},
            {"follower": carol, "following": VIEWER},
            {"follower": carol, "following": BOB},
        ],
        "posts": [
            {"id": 1, "author": BOB, "content": "Shipping a new solidity contract", "timestamp": NOW - DAY, "likes": [VIEWER]},
            {"id": 2, "author": VIEWER, "content": "Reading about solidity gas costs", "timestamp": NOW - 2 * DAY, "likes": [BOB]},
        ],
    }


@pytest.fixture
def snapshot_file(tmp_path, snapshot_data) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_data, indent=2))
    return path
