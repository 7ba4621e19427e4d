from typing import Dict

from shared.models import Sentiment

POSITIVE_WORDS = ["good", "great", "excellent", "amazing", "love", "best", "awesome", "fantastic"]
NEGATIVE_WORDS = ["bad", "terrible", "awful", "hate", "worst", "horrible", "disappointing"]


class SentimentAnalyzer:
    def __init__(self, positive=None, negative=None):
        self.positive = positive or POSITIVE_WORDS
        self.negative = negative or NEGATIVE_WORDS

    def counts(self, text: str) -> Dict[str, int]:
        text = (text or "").lower()
        return {
            "pos": sum(text.count(w) for w in self.positive),
            "neg": sum(text.count(w) for w in self.negative),
        }

    def analyze(self, text: str) -> Sentiment:
        c = self.counts(text)
        if c["pos"] > c["neg"]:
            return Sentiment.POSITIVE
        if c["neg"] > c["pos"]:
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL

# Singleton
sentiment_analyzer = SentimentAnalyzer()
