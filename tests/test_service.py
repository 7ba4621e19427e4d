"""
Tests for services/content_analysis/service.py: request orchestration.
Uses in-memory collaborators so failures and timeouts can be injected.
"""
import asyncio
from typing import Dict, List, Optional

import pytest

from shared.collaborators import Collaborators, ProductCatalog, RecordStore, WebsiteRegistry
from shared.config import GlobalConfig
from shared.errors import AuthError, CollaboratorError, InternalError, ValidationError
from shared.models import AnalyzeContentRequest, ContentAnalysisRecord, ProductCandidate, Website
from services.content_analysis.service import ContentAnalysisService

HIGH_INTENT_PAGE = "Best deal! Buy now, buy today, purchase the best discount. Review: best buy deal. " * 3


class MemoryRegistry(WebsiteRegistry):
    def __init__(self, websites: List[Website]):
        self.websites = {w.integration_key: w for w in websites}
        self.calls = 0

    async def resolve(self, integration_key: str) -> Optional[Website]:
        self.calls += 1
        return self.websites.get(integration_key)


class MemoryCatalog(ProductCatalog):
    def __init__(self, products: Dict[str, List[ProductCandidate]], delay: float = 0.0, fail: bool = False):
        self.products = products
        self.delay = delay
        self.fail = fail
        self.limits = []

    async def products_for_user(self, user_id: str, limit: int = 20) -> List[ProductCandidate]:
        self.limits.append(limit)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("catalog exploded")
        return self.products.get(user_id, [])[:limit]


class MemoryStore(RecordStore):
    def __init__(self, fail: bool = False):
        self.rows: Dict[tuple, ContentAnalysisRecord] = {}
        self.fail = fail
        self.saves = 0

    async def get(self, website_id: str, content_hash: str) -> Optional[ContentAnalysisRecord]:
        return self.rows.get((website_id, content_hash))

    async def save(self, record: ContentAnalysisRecord) -> ContentAnalysisRecord:
        if self.fail:
            raise CollaboratorError("record_store", "disk full")
        self.saves += 1
        return self.rows.setdefault(record.key, record)


WEBSITES = [
    Website(id="site-1", user_id="u1", domain="blog.example", integration_key="key-1"),
    Website(id="site-2", user_id="u2", domain="old.example", integration_key="key-2", status="inactive"),
]

PRODUCTS = {
    "u1": [
        ProductCandidate(id="p1", name="Budget Laptop", description="Student laptop deal", category="Technology", commission_rate=4),
        ProductCandidate(id="p2", name="Espresso Machine", description="Coffee", category="Kitchen", commission_rate=9),
    ],
    "u2": [ProductCandidate(id="p9", name="Budget Laptop", category="Technology")],
}


def _service(catalog=None, store=None, timeout=1.0):
    collaborators = Collaborators(
        registry=MemoryRegistry(WEBSITES),
        catalog=catalog or MemoryCatalog(PRODUCTS),
        store=store or MemoryStore(),
    )
    return ContentAnalysisService(collaborators, GlobalConfig(COLLABORATOR_TIMEOUT_SECONDS=timeout))


def _request(**overrides):
    data = dict(
        url="https://blog.example/laptops",
        title="Budget laptop guide",
        content="This is the best budget laptop deal, buy now for $499",
        integration_key="key-1",
    )
    data.update(overrides)
    return AnalyzeContentRequest(**data)


class TestValidationAndAuth:
    @pytest.mark.asyncio
    async def test_missing_content(self):
        service = _service()
        with pytest.raises(ValidationError):
            await service.analyze_content(_request(content=None))
        assert service.registry.calls == 0

    @pytest.mark.asyncio
    async def test_empty_content(self):
        with pytest.raises(ValidationError):
            await _service().analyze_content(_request(content=""))

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(ValidationError):
            await _service().analyze_content(_request(integration_key=None))

    @pytest.mark.asyncio
    async def test_unknown_key(self):
        store = MemoryStore()
        with pytest.raises(AuthError):
            await _service(store=store).analyze_content(_request(integration_key="bogus"))
        assert store.rows == {}

    @pytest.mark.asyncio
    async def test_inactive_website(self):
        with pytest.raises(AuthError):
            await _service().analyze_content(_request(integration_key="key-2"))


class TestAnalyzeContent:
    @pytest.mark.asyncio
    async def test_success(self):
        store = MemoryStore()
        catalog = MemoryCatalog(PRODUCTS)
        response = await _service(catalog=catalog, store=store).analyze_content(_request())

        assert response.success is True
        assert response.analysis.website_id == "site-1"
        assert response.analysis.content_url == "https://blog.example/laptops"
        assert response.analysis.buying_intent_score > 0
        assert response.should_create_popup is False
        assert [r.id for r in response.recommendations] == ["p1"]
        assert response.insights.word_count > 0
        assert catalog.limits == [20]
        assert len(store.rows) == 1

    @pytest.mark.asyncio
    async def test_high_intent_creates_popup(self):
        response = await _service().analyze_content(_request(content=HIGH_INTENT_PAGE))
        assert response.analysis.buying_intent_score > 0.6
        assert response.should_create_popup is True

    @pytest.mark.asyncio
    async def test_repeat_page_reuses_record(self):
        store = MemoryStore()
        service = _service(store=store)
        first = await service.analyze_content(_request())
        second = await service.analyze_content(_request(title="A different title", url="https://blog.example/other"))
        assert store.saves == 1
        assert second.analysis == first.analysis

    @pytest.mark.asyncio
    async def test_persist_failure_fails_request(self):
        with pytest.raises(CollaboratorError):
            await _service(store=MemoryStore(fail=True)).analyze_content(_request())

    @pytest.mark.asyncio
    async def test_catalog_failure_degrades(self):
        store = MemoryStore()
        response = await _service(catalog=MemoryCatalog(PRODUCTS, fail=True), store=store).analyze_content(_request())
        assert response.recommendations == []
        assert len(store.rows) == 1

    @pytest.mark.asyncio
    async def test_catalog_timeout_degrades(self):
        store = MemoryStore()
        service = _service(catalog=MemoryCatalog(PRODUCTS, delay=0.5), store=store, timeout=0.05)
        response = await service.analyze_content(_request())
        assert response.recommendations == []
        assert len(store.rows) == 1

    @pytest.mark.asyncio
    async def test_registry_timeout(self):
        class SlowRegistry(MemoryRegistry):
            async def resolve(self, integration_key):
                await asyncio.sleep(0.5)
                return await super().resolve(integration_key)

        service = _service(timeout=0.05)
        service.registry = SlowRegistry(WEBSITES)
        with pytest.raises(CollaboratorError) as exc:
            await service.analyze_content(_request())
        assert exc.value.timed_out is True

    @pytest.mark.asyncio
    async def test_scoring_failure_is_internal(self, monkeypatch):
        def boom(*args, **kwargs):
            raise ZeroDivisionError("bad math")

        monkeypatch.setattr("services.content_analysis.service.analyze_with_insights", boom)
        store = MemoryStore()
        with pytest.raises(InternalError) as exc:
            await _service(store=store).analyze_content(_request())
        assert "bad math" not in exc.value.public_message
        assert store.rows == {}


class TestGetRecord:
    @pytest.mark.asyncio
    async def test_read_back(self):
        service = _service()
        response = await service.analyze_content(_request())
        record = await service.get_record("site-1", response.analysis.content_hash)
        assert record.analysis_score == response.analysis.quality_score
        assert await service.get_record("site-1", "missing") is None
