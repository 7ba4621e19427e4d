from typing import List, Sequence
import logging

from shared.config import settings
from shared.models import ProductCandidate, RankedRecommendation

logger = logging.getLogger("ProductRecommender")


class ProductRecommender:
    def __init__(self, limit: int = None):
        self.limit = settings.MAX_RECOMMENDATIONS if limit is None else limit
        self.weights = {
            "keyword": settings.KEYWORD_MATCH_WEIGHT,
            "category": settings.CATEGORY_MATCH_WEIGHT,
            "commission": settings.COMMISSION_WEIGHT,
        }

    @staticmethod
    def _search_text(product: ProductCandidate) -> str:
        return f"{product.name} {product.description}".lower()

    def matching_keywords(self, product: ProductCandidate, keywords: Sequence[str]) -> List[str]:
        text = self._search_text(product)
        return [kw for kw in keywords if kw and kw.lower() in text]

    def relevance(self, product: ProductCandidate, keywords: Sequence[str], category: str) -> float:
        """
        keyword overlap + category match + commission bonus.
        """
        score = self.weights["keyword"] * len(self.matching_keywords(product, keywords))
        if category is not None and product.category is not None and category.lower() in product.category.lower():
            score += self.weights["category"]
        score += self.weights["commission"] * (product.commission_rate or 0.0)
        return score

    def recommend(
        self,
        keywords: Sequence[str],
        category: str,
        candidates: Sequence[ProductCandidate],
    ) -> List[RankedRecommendation]:
        # 1. Keep products sharing at least one keyword
        relevant = [p for p in candidates if self.matching_keywords(p, keywords)]
        if not relevant:
            logger.debug(f"No candidate matched {len(keywords)} keywords")
            return []

        # 2. Score
        scored = [
            RankedRecommendation(**p.model_dump(exclude={"relevance_score"}), relevance_score=self.relevance(p, keywords, category))
            for p in relevant
        ]

        # 3. Rank (stable, so ties keep catalog order)
        scored.sort(key=lambda r: r.relevance_score, reverse=True)
        return scored[: self.limit]

# Singleton
product_recommender = ProductRecommender()
