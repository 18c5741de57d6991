"""
Signal scorers for user recommendations.

Each scorer is a pure function returning a normalized score in [0, 1] for a
single dimension of affinity between a viewer and a candidate. Identities
are compared case-insensitively. Missing data scores 0, never raises.
"""

from typing import Any, Iterable, List, Set

from .keywords import extract_keywords
from .models import FollowEdge, Post
from .normalize import normalize_identity

MUTUAL_SATURATION = 10
ACTIVITY_SATURATION = 20
ACTIVITY_WINDOW_SECONDS = 30 * 24 * 60 * 60


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def following_of(identity: str, edges: Iterable[FollowEdge]) -> Set[str]:
    """Outbound follow set of an identity."""
    key = normalize_identity(identity)
    return {
        normalize_identity(edge.following)
        for edge in edges
        if normalize_identity(edge.follower) == key
    }


def followers_of(identity: str, edges: Iterable[FollowEdge]) -> List[str]:
    """Inbound followers of an identity, one entry per edge."""
    key = normalize_identity(identity)
    return [
        normalize_identity(edge.follower)
        for edge in edges
        if normalize_identity(edge.following) == key
    ]


def mutual_connections(viewer: str, candidate: str, edges: List[FollowEdge]) -> float:
    """Shared outbound follows; ten or more is maximal affinity."""
    shared = following_of(viewer, edges) & following_of(candidate, edges)
    return min(len(shared) / MUTUAL_SATURATION, 1.0)


def shared_interests(viewer_bio: str | None, candidate_bio: str | None) -> float:
    if not viewer_bio or not candidate_bio:
        return 0.0
    return jaccard(extract_keywords(viewer_bio), extract_keywords(candidate_bio))


def _post_key(post: Post, position: int) -> Any:
    return post.id if post.id is not None else position


def liked_post_ids(identity: str, posts: List[Post]) -> Set[Any]:
    key = normalize_identity(identity)
    liked = set()
    for position, post in enumerate(posts):
        if any(normalize_identity(liker) == key for liker in post.likes or ()):
            liked.add(_post_key(post, position))
    return liked


def engagement_overlap(viewer: str, candidate: str, posts: List[Post]) -> float:
    """Posts liked by both, relative to the larger of the two like sets."""
    viewer_likes = liked_post_ids(viewer, posts)
    candidate_likes = liked_post_ids(candidate, posts)
    denominator = max(len(viewer_likes), len(candidate_likes))
    if denominator == 0:
        return 0.0
    return len(viewer_likes & candidate_likes) / denominator


def content_similarity(viewer_posts: List[Post], candidate_posts: List[Post]) -> float:
    if not viewer_posts or not candidate_posts:
        return 0.0
    viewer_topics = [kw for post in viewer_posts for kw in extract_keywords(post.content)]
    candidate_topics = [kw for post in candidate_posts for kw in extract_keywords(post.content)]
    return jaccard(viewer_topics, candidate_topics)


def activity_level(candidate_posts: List[Post], now: float) -> float:
    """Posts in the trailing 30 days; twenty or more is maximal."""
    cutoff = now - ACTIVITY_WINDOW_SECONDS
    recent = sum(1 for post in candidate_posts if (post.timestamp or 0) > cutoff)
    return min(recent / ACTIVITY_SATURATION, 1.0)
