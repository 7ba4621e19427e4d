from typing import Dict, List, Tuple

DEFAULT_CATEGORY = "general"

CATEGORIES: Dict[str, List[str]] = {
    "technology": ["tech", "software", "computer", "phone", "app", "digital", "internet"],
    "health": ["health", "fitness", "medical", "wellness", "exercise", "nutrition"],
    "fashion": ["fashion", "clothing", "style", "outfit", "dress", "shoes"],
    "home": ["home", "kitchen", "furniture", "decor", "garden", "cleaning"],
    "travel": ["travel", "vacation", "trip", "hotel", "flight", "destination"],
    "food": ["food", "recipe", "cooking", "restaurant", "meal", "ingredient"],
    "finance": ["money", "finance", "investment", "budget", "savings", "credit"],
    "education": ["education", "learning", "course", "study", "school", "training"],
}


class ContentCategorizer:
    def __init__(self, categories: Dict[str, List[str]] = None):
        self.categories = categories or CATEGORIES

    def category_scores(self, text: str) -> Dict[str, int]:
        text = text or ""
        return {
            category: sum(text.count(kw) for kw in keywords)
            for category, keywords in self.categories.items()
        }

    def categorize(self, text: str) -> Tuple[str, Dict[str, int]]:
        scores = self.category_scores(text)
        best, highest = DEFAULT_CATEGORY, 0
        # strict > keeps the first-declared category on ties
        for category, score in scores.items():
            if score > highest:
                best, highest = category, score
        return best, scores

# Singleton
content_categorizer = ContentCategorizer()
