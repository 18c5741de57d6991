"""
"People you may want to follow" ranking.

Combines graph, text, engagement and activity signals into a weighted
composite, with an optional on-ledger reputation bonus:

    base  = 0.25*mutual + 0.30*interests + 0.20*engagement
          + 0.15*content + 0.10*activity
    final = min(base + 0.10*reputation, 1.0)

Ties on the composite are broken by lower-cased address, ascending, so the
ordering never depends on input order.
"""

import time
from typing import Any, Callable, Iterable, List, Optional, Type, Union

from .cache import SuggestionCache
from .filters import rejection_reason
from .logger import get_logger
from .models import FollowEdge, Post, ScoredCandidate, SignalBreakdown, User, posts_by_author
from .normalize import format_address, normalize_identity
from .reputation import ProbeFn, reputation_score, safe_probe
from .signals import (
    activity_level,
    content_similarity,
    engagement_overlap,
    followers_of,
    following_of,
    mutual_connections,
    shared_interests,
)

logger = get_logger()

WEIGHT_MUTUAL = 0.25
WEIGHT_INTERESTS = 0.30
WEIGHT_ENGAGEMENT = 0.20
WEIGHT_CONTENT = 0.15
WEIGHT_ACTIVITY = 0.10
WEIGHT_REPUTATION = 0.10

DEFAULT_LIMIT = 5


def mutual_followers(a: str, b: str, edges: Iterable[FollowEdge]) -> List[str]:
    """
    Identities following both a and b, for display.

    Compares inbound followers, unlike the mutual-connections signal which
    compares outbound follows. Duplicate edges are not collapsed.
    """
    edges = list(edges)
    b_followers = set(followers_of(b, edges))
    return [f for f in followers_of(a, edges) if f in b_followers]


def suggestion_reason(candidate: ScoredCandidate) -> str:
    if candidate.mutual_followers > 0:
        plural = "s" if candidate.mutual_followers > 1 else ""
        return f"{candidate.mutual_followers} mutual follower{plural}"
    if candidate.score > 0.7:
        return "Shared interests"
    if candidate.post_count > 10:
        return "Active user"
    return "Suggested for you"


def composite_score(breakdown: SignalBreakdown) -> float:
    base = (
        WEIGHT_MUTUAL * breakdown.mutual_connections
        + WEIGHT_INTERESTS * breakdown.shared_interests
        + WEIGHT_ENGAGEMENT * breakdown.engagement
        + WEIGHT_CONTENT * breakdown.content_similarity
        + WEIGHT_ACTIVITY * breakdown.activity
    )
    return min(max(base + WEIGHT_REPUTATION * breakdown.reputation, 0.0), 1.0)


def _coerce(items: Optional[Iterable[Any]], cls: Type) -> List[Any]:
    """Accept dataclass instances or raw ledger-shaped dicts; drop anything else."""
    coerced = []
    for item in items or ():
        if isinstance(item, cls):
            coerced.append(item)
        elif isinstance(item, dict):
            coerced.append(cls.from_dict(item))
    return coerced


class RankingEngine:
    """
    Ranks candidate users for a viewer.

    The cache is injected so callers control its TTL and lifetime; each
    engine without an explicit cache gets its own.
    """

    def __init__(
        self,
        cache: Optional[SuggestionCache] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.cache = cache if cache is not None else SuggestionCache(clock=clock)
        self._clock = clock

    def rank(
        self,
        viewer: Union[str, User, None],
        known_users: Optional[Iterable[Any]],
        follow_edges: Optional[Iterable[Any]],
        posts: Optional[Iterable[Any]],
        reputation_probe: Optional[ProbeFn] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> List[ScoredCandidate]:
        """
        Return at most `limit` suggestions for the viewer, best first.

        Never raises for bad input: a missing viewer yields an empty list
        and missing bios, posts or edges count as zero signal.

        Within the cache TTL a hit returns the stored list sliced to
        `limit`. A larger `limit` than the call that filled the entry
        therefore cannot return more results until the entry expires or
        is invalidated.
        """
        viewer_address = viewer.address if isinstance(viewer, User) else viewer
        viewer_key = normalize_identity(viewer_address)
        if not viewer_key:
            logger.warning("Ranking skipped: no viewer identity")
            return []
        if limit <= 0:
            return []

        cached = self.cache.get(viewer_key)
        if cached is not None:
            logger.record_cache_hit()
            logger.debug("Suggestion cache hit", viewer=format_address(viewer_key))
            return cached[:limit]
        logger.record_cache_miss()

        users = _coerce(known_users, User)
        edges = _coerce(follow_edges, FollowEdge)
        all_posts = _coerce(posts, Post)
        now = self._clock()

        if isinstance(viewer, User):
            viewer_profile = viewer
        else:
            viewer_profile = next((u for u in users if u.key == viewer_key), User(address=viewer_key))

        already_following = following_of(viewer_key, edges)
        grouped = posts_by_author(all_posts)
        viewer_posts = grouped.get(viewer_key, [])

        scored: List[ScoredCandidate] = []
        seen = set()
        for user in users:
            key = user.key
            if not key or key in seen or key == viewer_key or key in already_following:
                continue
            seen.add(key)

            user_posts = grouped.get(key, [])
            reason = rejection_reason(user, user_posts, now)
            if reason is not None:
                logger.record_rejection(reason)
                logger.debug("Candidate filtered", candidate=format_address(key), reason=reason)
                continue

            breakdown = SignalBreakdown(
                mutual_connections=mutual_connections(viewer_key, key, edges),
                shared_interests=shared_interests(viewer_profile.bio, user.bio),
                engagement=engagement_overlap(viewer_key, key, all_posts),
                content_similarity=content_similarity(viewer_posts, user_posts),
                activity=activity_level(user_posts, now),
                reputation=(
                    reputation_score(safe_probe(reputation_probe, user.address))
                    if reputation_probe is not None else 0.0
                ),
            )
            scored.append(ScoredCandidate(
                user=user,
                score=composite_score(breakdown),
                mutual_followers=len(mutual_followers(viewer_key, key, edges)),
                post_count=len(user_posts),
                breakdown=breakdown,
            ))

        scored.sort(key=lambda c: (-c.score, c.user.key))
        suggestions = scored[:limit]

        self.cache.put(viewer_key, suggestions)
        logger.record_ranking()
        logger.info(
            "Suggestions ranked",
            viewer=format_address(viewer_key),
            known_users=len(users),
            eligible=len(scored),
            returned=len(suggestions),
        )
        return suggestions
