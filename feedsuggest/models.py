"""
Data model for the recommendation engine.

Records arrive as flat, ledger-shaped dicts (camelCase keys, as the feed
client reads them from the contract) and are converted into frozen
dataclasses. The engine never mutates them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .normalize import normalize_identity


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_timestamp(value: Any) -> float:
    """Seconds since epoch. Anything unparseable counts as 0 (never recent)."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return 0.0
    return 0.0


@dataclass(frozen=True)
class User:
    address: str
    display_name: str = ""
    bio: str = ""

    @property
    def key(self) -> str:
        return normalize_identity(self.address)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        name = data.get("displayName", data.get("username", data.get("display_name")))
        return cls(
            address=_as_str(data.get("address")),
            display_name=_as_str(name),
            bio=_as_str(data.get("bio")),
        )


@dataclass(frozen=True)
class FollowEdge:
    follower: str
    following: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FollowEdge":
        return cls(
            follower=_as_str(data.get("follower")),
            following=_as_str(data.get("following")),
        )


@dataclass(frozen=True)
class Post:
    author: str
    content: str = ""
    timestamp: float = 0.0
    likes: Tuple[str, ...] = ()
    id: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Post":
        likes = data.get("likes") or ()
        if not isinstance(likes, (list, tuple)):
            likes = ()
        return cls(
            author=_as_str(data.get("author")),
            content=_as_str(data.get("content")),
            timestamp=_as_timestamp(data.get("timestamp")),
            likes=tuple(_as_str(liker) for liker in likes),
            id=data.get("id"),
        )


@dataclass(frozen=True)
class SignalBreakdown:
    """Per-signal scores behind a composite, kept for explanation."""

    mutual_connections: float = 0.0
    shared_interests: float = 0.0
    engagement: float = 0.0
    content_similarity: float = 0.0
    activity: float = 0.0
    reputation: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            "mutual_connections": self.mutual_connections,
            "shared_interests": self.shared_interests,
            "engagement": self.engagement,
            "content_similarity": self.content_similarity,
            "activity": self.activity,
            "reputation": self.reputation,
        }


@dataclass(frozen=True)
class ScoredCandidate:
    user: User
    score: float
    mutual_followers: int = 0
    post_count: int = 0
    breakdown: SignalBreakdown = field(default_factory=SignalBreakdown)

    @property
    def address(self) -> str:
        return self.user.address

    @property
    def display_name(self) -> str:
        return self.user.display_name

    @property
    def bio(self) -> str:
        return self.user.bio

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.user.address,
            "displayName": self.user.display_name,
            "bio": self.user.bio,
            "score": round(self.score, 4),
            "mutualFollowers": self.mutual_followers,
            "postCount": self.post_count,
            "breakdown": self.breakdown.as_dict(),
        }


def posts_by_author(posts: List[Post]) -> Dict[str, List[Post]]:
    """Group posts by normalized author, keeping input order within a group."""
    grouped: Dict[str, List[Post]] = {}
    for post in posts:
        grouped.setdefault(normalize_identity(post.author), []).append(post)
    return grouped
