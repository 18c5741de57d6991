"""
Tests for bot and spam filtering of candidates.
"""

from feedsuggest.filters import (
    REASON_BOT,
    REASON_NO_NAME,
    REASON_NO_SIGNAL,
    REASON_SPAM,
    passes_filters,
    rejection_reason,
)
from feedsuggest.models import Post, User

from conftest import DAY, NOW

ADDR = "0xcandidate"


def posts_at(timestamps, content=None):
    return [Post(ADDR, content or f"post number {i}", ts) for i, ts in enumerate(timestamps)]


class TestRejectionReason:

    def test_healthy_candidate_passes(self):
        user = User(ADDR, "Dana", "on-chain artist")
        posts = posts_at([NOW - DAY, NOW - 2 * DAY])
        assert rejection_reason(user, posts, NOW) is None
        assert passes_filters(user, posts, NOW)

    def test_missing_display_name(self):
        assert rejection_reason(User(ADDR, "", "bio"), [], NOW) == REASON_NO_NAME

    def test_whitespace_display_name(self):
        assert rejection_reason(User(ADDR, "   ", "bio"), [], NOW) == REASON_NO_NAME

    def test_twenty_five_posts_in_last_hour_is_bot(self):
        user = User(ADDR, "Speedy", "very interesting bio")
        posts = posts_at([NOW - i * 60 for i in range(25)])
        assert rejection_reason(user, posts, NOW) == REASON_BOT

    def test_twenty_posts_in_last_hour_is_allowed(self):
        user = User(ADDR, "Busy", "bio")
        posts = posts_at([NOW - i * 60 for i in range(20)])
        assert rejection_reason(user, posts, NOW) is None

    def test_mostly_duplicate_content_is_spam(self):
        user = User(ADDR, "Spammer", "buy my token")
        posts = [Post(ADDR, "Buy $TOKEN now!!!", NOW - (i + 1) * DAY) for i in range(9)]
        posts.append(Post(ADDR, "something else", NOW - 20 * DAY))
        # 2 unique contents / 10 posts = 0.2
        assert rejection_reason(user, posts, NOW) == REASON_SPAM

    def test_duplicates_ignore_case_and_surrounding_space(self):
        user = User(ADDR, "Echo", "bio")
        posts = [
            Post(ADDR, "Hello", NOW - DAY),
            Post(ADDR, " hello ", NOW - 2 * DAY),
            Post(ADDR, "HELLO", NOW - 3 * DAY),
        ]
        assert rejection_reason(user, posts, NOW) == REASON_SPAM

    def test_half_unique_is_allowed(self):
        user = User(ADDR, "Twin", "bio")
        posts = [
            Post(ADDR, "same", NOW - DAY),
            Post(ADDR, "same", NOW - 2 * DAY),
            Post(ADDR, "other", NOW - 3 * DAY),
            Post(ADDR, "other", NOW - 4 * DAY),
        ]
        assert rejection_reason(user, posts, NOW) is None

    def test_no_bio_and_no_posts(self):
        assert rejection_reason(User(ADDR, "Ghost", ""), [], NOW) == REASON_NO_SIGNAL

    def test_posts_without_bio_pass(self):
        user = User(ADDR, "Quiet", "")
        assert rejection_reason(user, posts_at([NOW - DAY]), NOW) is None
