"""
Keyword extraction for bios and post bodies.

Produces the term lists that the interest and content similarity signals
compare.
"""

import re
from typing import List

STOP_WORDS = frozenset(
    {"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}
)
MIN_KEYWORD_LENGTH = 4
MAX_KEYWORDS = 20

# Word characters are ASCII letters, digits and underscore; '#' survives for hashtags.
# Any Unicode whitespace is kept so it still separates words.
_PUNCTUATION = re.compile(r"[^0-9A-Za-z_\s#]")


def extract_keywords(text: str | None) -> List[str]:
    """
    Tokenize free text into salient terms.

    Lower-cases, strips punctuation except '#', splits on whitespace and drops
    short tokens and stop words. Returns at most the first 20 survivors in
    their original order; duplicates are kept.
    """
    if not text or not text.strip():
        return []
    cleaned = _PUNCTUATION.sub("", text.lower())
    keywords = [
        word
        for word in cleaned.split()
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    ]
    return keywords[:MAX_KEYWORDS]
