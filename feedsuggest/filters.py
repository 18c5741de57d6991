"""
Candidate filtering ahead of scoring.

Rejects accounts that look like bots or spam, or that carry no signal at
all. Only the candidate's own posts are inspected.
"""

from typing import List, Optional

from .models import Post, User

BOT_WINDOW_SECONDS = 60 * 60
BOT_MAX_POSTS_PER_WINDOW = 20
MIN_UNIQUE_CONTENT_RATIO = 0.5

REASON_NO_NAME = "no_display_name"
REASON_BOT = "bot_like_posting_rate"
REASON_SPAM = "duplicate_content"
REASON_NO_SIGNAL = "no_signal"


def rejection_reason(user: User, user_posts: List[Post], now: float) -> Optional[str]:
    """
    Return why a candidate is rejected, or None if it passes.

    Args:
        user: Candidate profile
        user_posts: Posts authored by the candidate
        now: Scoring instant, seconds since epoch

    Returns:
        One of the REASON_* constants, or None
    """
    if not user.display_name or not user.display_name.strip():
        return REASON_NO_NAME

    window_start = now - BOT_WINDOW_SECONDS
    last_hour = sum(1 for post in user_posts if (post.timestamp or 0) > window_start)
    if last_hour > BOT_MAX_POSTS_PER_WINDOW:
        return REASON_BOT

    if user_posts:
        unique_content = {(post.content or "").lower().strip() for post in user_posts}
        if len(unique_content) / len(user_posts) < MIN_UNIQUE_CONTENT_RATIO:
            return REASON_SPAM

    if not user.bio and not user_posts:
        return REASON_NO_SIGNAL

    return None


def passes_filters(user: User, user_posts: List[Post], now: float) -> bool:
    return rejection_reason(user, user_posts, now) is None
