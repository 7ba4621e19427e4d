import re
from collections import Counter
from typing import List

from shared.config import settings

STOP_WORDS = frozenset([
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "being", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "can", "this", "that", "these", "those",
])

# Word characters are ASCII only, whitespace is any Unicode space
_NON_WORD_RE = re.compile(r"[^A-Za-z0-9_\s]")


def combine_text(title: str, content: str) -> str:
    """Lower-cased `title content`, the text every scorer works on."""
    return f"{title or ''} {content or ''}".lower()


def tokenize(text: str) -> List[str]:
    """Strip punctuation and split on whitespace. Input is expected lower-cased."""
    return _NON_WORD_RE.sub("", text or "").split()


class KeywordExtractor:
    def __init__(self, max_keywords: int = None, min_length: int = None, stop_words=STOP_WORDS):
        self.max_keywords = settings.MAX_KEYWORDS if max_keywords is None else max_keywords
        self.min_length = settings.MIN_KEYWORD_LENGTH if min_length is None else min_length
        self.stop_words = stop_words

    def is_candidate(self, token: str) -> bool:
        return len(token) >= self.min_length and token not in self.stop_words

    def extract(self, tokens: List[str]) -> List[str]:
        # Counter keeps first-seen order and sorted() is stable, so equal
        # counts stay in order of first appearance.
        counts = Counter(t for t in tokens if self.is_candidate(t))
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [word for word, _ in ranked[: self.max_keywords]]

    def extract_from_text(self, title: str, content: str) -> List[str]:
        return self.extract(tokenize(combine_text(title, content)))

# Singleton
keyword_extractor = KeywordExtractor()
