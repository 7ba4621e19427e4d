from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict
from enum import Enum


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

class WebsiteStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


# Website Registry
class Website(BaseModel):
    id: str
    user_id: str
    domain: str = ""
    integration_key: str
    status: WebsiteStatus = WebsiteStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == WebsiteStatus.ACTIVE


# Product Catalog
class ProductCandidate(CamelModel):
    id: str
    name: str
    description: str = ""
    category: Optional[str] = ""
    commission_rate: float = 0.0

class RankedRecommendation(ProductCandidate):
    relevance_score: float


# Analysis
class IntentSignal(BaseModel):
    keyword: str
    frequency: int

class AnalysisResult(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    website_id: Optional[str] = None
    content_url: Optional[str] = None
    content_hash: str
    keywords: List[str] = []
    product_mentions: List[str] = []
    quality_score: int = Field(..., ge=0, le=100)
    category: str = "general"
    buying_intent_score: float = Field(..., ge=0.0, le=1.0)
    sentiment: Sentiment = Sentiment.NEUTRAL

    def to_record(self) -> "ContentAnalysisRecord":
        return ContentAnalysisRecord(
            website_id=self.website_id or "",
            content_url=self.content_url,
            content_hash=self.content_hash,
            keywords=list(self.keywords),
            products_identified=list(self.product_mentions),
            analysis_score=self.quality_score,
            category=self.category,
            buying_intent_score=self.buying_intent_score,
            sentiment=self.sentiment,
        )

class ContentInsights(CamelModel):
    """
    Explainability data. Returned to the caller, never persisted.

    word_count splits the combined text on single spaces, so it can differ
    from the token count used by the quality score.
    """

    word_count: int = 0
    readability_score: float = 0.0
    intent_signals: List[IntentSignal] = []
    category_scores: Dict[str, int] = {}


# Record Store row, one per (website_id, content_hash)
class ContentAnalysisRecord(BaseModel):
    website_id: str
    content_url: Optional[str] = None
    content_hash: str
    keywords: List[str] = []
    products_identified: List[str] = []
    analysis_score: int = 0
    category: str = "general"
    buying_intent_score: float = 0.0
    sentiment: Sentiment = Sentiment.NEUTRAL

    @property
    def key(self) -> tuple:
        return (self.website_id, self.content_hash)

    def to_analysis(self) -> AnalysisResult:
        return AnalysisResult(
            website_id=self.website_id,
            content_url=self.content_url,
            content_hash=self.content_hash,
            keywords=self.keywords,
            product_mentions=self.products_identified,
            quality_score=self.analysis_score,
            category=self.category,
            buying_intent_score=self.buying_intent_score,
            sentiment=self.sentiment,
        )


# API contract
class AnalyzeContentRequest(CamelModel):
    url: Optional[str] = None
    title: Optional[str] = ""
    content: Optional[str] = None
    integration_key: Optional[str] = None
    user_id: Optional[str] = None
    session_id: Optional[str] = None

class AnalyzeContentResponse(CamelModel):
    success: bool = True
    analysis: AnalysisResult
    recommendations: List[RankedRecommendation] = []
    should_create_popup: bool = False
    insights: Optional[ContentInsights] = None

class RecommendRequest(CamelModel):
    keywords: List[str]
    category: str = "general"
    candidates: List[ProductCandidate] = []
