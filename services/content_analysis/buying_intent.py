import re
from dataclasses import dataclass, field
from typing import Dict, List

from shared.config import settings
from shared.models import IntentSignal

# Declaration order matters: intent signals are reported in this order.
BUYING_KEYWORDS = [
    "best", "review", "compare", "buy", "purchase", "deal", "discount", "price",
    "cheap", "affordable", "recommend", "vs", "versus", "alternative", "guide",
    "how to choose", "top", "rating", "recommendation", "shopping", "sale",
]

KEYWORD_WEIGHTS: Dict[str, int] = {
    "buy": 10, "purchase": 10, "best": 8, "review": 7, "compare": 6,
    "deal": 8, "discount": 7, "recommend": 6, "vs": 5, "guide": 4,
}
DEFAULT_WEIGHT = 1

PRODUCT_PATTERNS = [
    re.compile(r"\b\w+\s+(?:phone|laptop|camera|headphones|watch|tablet|speaker)\b", re.IGNORECASE | re.ASCII),
    re.compile(r"\b(?:iphone|samsung|apple|sony|nike|adidas)\s+\w+", re.IGNORECASE | re.ASCII),
    re.compile(r"\$\d+"),  # price mentions
]


@dataclass
class BuyingIntent:
    score: float
    products: List[str] = field(default_factory=list)
    signals: List[IntentSignal] = field(default_factory=list)

    @property
    def has_high_intent(self) -> bool:
        return self.score > settings.HIGH_INTENT_THRESHOLD


class BuyingIntentScorer:
    def __init__(self, keywords: List[str] = None, weights: Dict[str, int] = None):
        self.keywords = keywords or BUYING_KEYWORDS
        self.weights = weights or KEYWORD_WEIGHTS

    def weight_for(self, keyword: str) -> int:
        return self.weights.get(keyword, DEFAULT_WEIGHT)

    def score(self, text: str) -> BuyingIntent:
        """
        Score purchase intent of lower-cased text.

        Occurrences are raw substring counts, so "deal" also counts inside
        "ordeal". Stored scores depend on this; keep it.
        """
        text = text or ""
        raw = 0
        signals = []
        for keyword in self.keywords:
            hits = text.count(keyword)
            if hits:
                raw += hits * self.weight_for(keyword)
                signals.append(IntentSignal(keyword=keyword, frequency=hits))

        normalized = min(raw / settings.INTENT_SCORE_DIVISOR, 1.0)
        return BuyingIntent(score=normalized, products=self.find_products(text), signals=signals)

    def find_products(self, text: str) -> List[str]:
        # dict.fromkeys de-duplicates while keeping first occurrence
        found = []
        for pattern in PRODUCT_PATTERNS:
            found.extend(m.group(0) for m in pattern.finditer(text or ""))
        return list(dict.fromkeys(found))

# Singleton
buying_intent_scorer = BuyingIntentScorer()
