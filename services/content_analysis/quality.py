import math
import re

_SENTENCE_RE = re.compile(r"[.!?]+")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ContentQualityScorer:
    """
    Blend of content length and keyword density, 0-100.

      length  = min(words / 1000, 1) * 50       (0-50)
      density = min(keywords / words * 1000, 50) (0-50)
    """

    def score(self, word_count: int, keyword_count: int) -> int:
        if word_count <= 0:
            return 0
        length_score = min(word_count / 1000, 1) * 50
        density_score = min((keyword_count / word_count) * 1000, 50)
        return max(0, min(100, _round_half_up(length_score + density_score)))

    @staticmethod
    def word_count(text: str) -> int:
        """Pieces between single spaces, as shown in insights."""
        return len((text or "").split(" "))

    def readability(self, text: str) -> float:
        """Lower average sentence length scores higher. Informational only."""
        text = text or ""
        sentences = len(_SENTENCE_RE.split(text))
        words = self.word_count(text)
        return max(0.0, 100 - (words / sentences) * 2)

# Singleton
quality_scorer = ContentQualityScorer()
