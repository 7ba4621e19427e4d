"""Tests for shared/models.py: Pydantic model validations."""
import pytest
from pydantic import ValidationError
from shared.models import (
    AnalysisResult,
    AnalyzeContentRequest,
    ContentAnalysisRecord,
    ProductCandidate,
    RankedRecommendation,
    Sentiment,
    Website,
    WebsiteStatus,
)


def _analysis(**overrides):
    data = dict(
        website_id="site-1",
        content_url="https://blog.example/post",
        content_hash="abc123",
        keywords=["laptop", "budget"],
        product_mentions=["$499"],
        quality_score=51,
        category="finance",
        buying_intent_score=0.27,
        sentiment=Sentiment.POSITIVE,
    )
    data.update(overrides)
    return AnalysisResult(**data)


class TestEnums:
    def test_sentiment_values(self):
        assert Sentiment.POSITIVE == "positive"
        assert Sentiment.NEGATIVE == "negative"
        assert Sentiment.NEUTRAL == "neutral"

    def test_website_status_values(self):
        assert set(WebsiteStatus) == {WebsiteStatus.ACTIVE, WebsiteStatus.INACTIVE, WebsiteStatus.PENDING}


class TestWebsite:
    def test_active_by_default(self):
        w = Website(id="w1", user_id="u1", integration_key="key")
        assert w.is_active is True

    def test_inactive(self):
        w = Website(id="w1", user_id="u1", integration_key="key", status="inactive")
        assert w.is_active is False


class TestAnalysisResult:
    def test_camel_case_serialization(self):
        d = _analysis().model_dump(by_alias=True)
        assert d["websiteId"] == "site-1"
        assert d["contentHash"] == "abc123"
        assert d["buyingIntentScore"] == 0.27
        assert d["productMentions"] == ["$499"]

    def test_accepts_camel_case_input(self):
        a = AnalysisResult(contentHash="x", qualityScore=10, buyingIntentScore=0.1)
        assert a.content_hash == "x"
        assert a.category == "general"
        assert a.sentiment == Sentiment.NEUTRAL

    def test_immutable(self):
        a = _analysis()
        with pytest.raises(ValidationError):
            a.category = "travel"

    def test_intent_bounds(self):
        with pytest.raises(ValidationError):
            _analysis(buying_intent_score=1.5)

    def test_quality_bounds(self):
        with pytest.raises(ValidationError):
            _analysis(quality_score=101)

    def test_record_round_trip(self):
        a = _analysis()
        record = a.to_record()
        assert record.products_identified == ["$499"]
        assert record.analysis_score == 51
        assert record.key == ("site-1", "abc123")
        assert record.to_analysis() == a


class TestRecordLayout:
    def test_row_fields(self):
        expected = {
            "website_id", "content_url", "content_hash", "keywords", "products_identified",
            "analysis_score", "category", "buying_intent_score", "sentiment",
        }
        assert set(ContentAnalysisRecord.model_fields) == expected


class TestProducts:
    def test_candidate_from_snake_case(self):
        p = ProductCandidate(id="1", name="Laptop", commission_rate=4.5)
        assert p.commission_rate == 4.5
        assert p.model_dump(by_alias=True)["commissionRate"] == 4.5

    def test_ranked_recommendation(self):
        r = RankedRecommendation(id="1", name="Laptop", relevance_score=9.4)
        assert r.model_dump(by_alias=True)["relevanceScore"] == 9.4


class TestRequest:
    def test_camel_case_request(self):
        req = AnalyzeContentRequest(
            url="https://blog.example", title="T", content="C", integrationKey="k", sessionId="s"
        )
        assert req.integration_key == "k"
        assert req.session_id == "s"
        assert req.user_id is None

    def test_missing_fields_allowed_at_model_level(self):
        req = AnalyzeContentRequest()
        assert req.content is None
        assert req.integration_key is None
