"""
Content Analysis Pipeline
=========================
Pure, stateless composition of the scorers:

  (title, content) -> tokens -> keywords
                   -> buying intent + product mentions
                   -> category
                   -> sentiment
                   -> quality score
  content          -> fingerprint

No I/O happens here. Persistence and catalog lookups live in service.py.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from shared.models import AnalysisResult, ContentInsights, ProductCandidate, RankedRecommendation

from services.content_analysis.buying_intent import buying_intent_scorer
from services.content_analysis.categorizer import content_categorizer
from services.content_analysis.fingerprint import content_fingerprint
from services.content_analysis.keywords import combine_text, keyword_extractor, tokenize
from services.content_analysis.quality import quality_scorer
from services.content_analysis.recommender import product_recommender
from services.content_analysis.sentiment import sentiment_analyzer

logger = logging.getLogger("content_pipeline")


def analyze_with_insights(
    title: str,
    content: str,
    website_id: Optional[str] = None,
    content_url: Optional[str] = None,
) -> Tuple[AnalysisResult, ContentInsights]:
    text = combine_text(title, content)
    tokens = tokenize(text)

    keywords = keyword_extractor.extract(tokens)
    intent = buying_intent_scorer.score(text)
    category, category_scores = content_categorizer.categorize(text)
    sentiment = sentiment_analyzer.analyze(text)
    quality = quality_scorer.score(len(tokens), len(keywords))

    result = AnalysisResult(
        website_id=website_id,
        content_url=content_url,
        content_hash=content_fingerprint(content),
        keywords=keywords,
        product_mentions=intent.products,
        quality_score=quality,
        category=category,
        buying_intent_score=intent.score,
        sentiment=sentiment,
    )
    insights = ContentInsights(
        word_count=quality_scorer.word_count(text),
        readability_score=quality_scorer.readability(text),
        intent_signals=intent.signals,
        category_scores=category_scores,
    )
    logger.debug(
        f"Analyzed {content_url or '<no url>'}: category={category} "
        f"intent={intent.score:.2f} quality={quality} keywords={len(keywords)}"
    )
    return result, insights


def analyze(
    title: str,
    content: str,
    website_id: Optional[str] = None,
    content_url: Optional[str] = None,
) -> AnalysisResult:
    result, _ = analyze_with_insights(title, content, website_id, content_url)
    return result


def recommend(
    keywords: Sequence[str],
    category: str,
    candidates: Sequence[ProductCandidate],
) -> List[RankedRecommendation]:
    return product_recommender.recommend(keywords, category, candidates)
