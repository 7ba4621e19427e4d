"""
Request orchestration for content analysis.

  validate -> resolve integration key -> analyze (pure)
           -> { persist analysis , fetch catalog + rank }   (concurrently)

A persist failure fails the request. A catalog failure only empties the
recommendations.
"""

import asyncio
import logging
from typing import List, Optional

from shared.collaborators import Collaborators
from shared.config import GlobalConfig, settings as default_settings
from shared.errors import AuthError, CollaboratorError, InternalError, PipelineError, ValidationError
from shared.models import (
    AnalysisResult,
    AnalyzeContentRequest,
    AnalyzeContentResponse,
    ContentAnalysisRecord,
    RankedRecommendation,
    Website,
)

from services.content_analysis.pipeline import analyze_with_insights, recommend

logger = logging.getLogger("ContentAnalysisService")


class ContentAnalysisService:
    def __init__(self, collaborators: Collaborators, config: GlobalConfig = None):
        self.registry = collaborators.registry
        self.catalog = collaborators.catalog
        self.store = collaborators.store
        self.config = config or default_settings

    async def _call(self, collaborator: str, coro):
        """Await a collaborator call, bounded by the configured timeout."""
        try:
            return await asyncio.wait_for(coro, timeout=self.config.COLLABORATOR_TIMEOUT_SECONDS)
        except asyncio.TimeoutError as e:
            raise CollaboratorError(collaborator, f"{collaborator} timed out", timed_out=True) from e
        except PipelineError:
            raise
        except Exception as e:
            raise CollaboratorError(collaborator, f"{collaborator} failed: {e}") from e

    # ── Steps ─────────────────────────────────────────────────────

    @staticmethod
    def validate(request: AnalyzeContentRequest) -> None:
        if not request.integration_key or not request.content:
            raise ValidationError()

    async def authenticate(self, integration_key: str) -> Website:
        website = await self._call(self.registry.name, self.registry.resolve(integration_key))
        if website is None or not website.is_active:
            raise AuthError()
        return website

    async def persist(self, analysis: AnalysisResult) -> AnalysisResult:
        """Store the analysis unless this page was already analyzed. Returns the stored version."""
        existing = await self._call(
            self.store.name, self.store.get(analysis.website_id, analysis.content_hash)
        )
        if existing is not None:
            logger.info(f"Reusing stored analysis {analysis.website_id}:{analysis.content_hash}")
            return existing.to_analysis()
        stored = await self._call(self.store.name, self.store.save(analysis.to_record()))
        return stored.to_analysis()

    async def recommendations_for(
        self, user_id: str, keywords: List[str], category: str
    ) -> List[RankedRecommendation]:
        try:
            candidates = await self._call(
                self.catalog.name,
                self.catalog.products_for_user(user_id, limit=self.config.CATALOG_FETCH_LIMIT),
            )
            return recommend(keywords, category, candidates)
        except Exception as e:
            logger.warning(f"Recommendations unavailable for user {user_id}: {e}")
            return []

    async def get_record(self, website_id: str, content_hash: str) -> Optional[ContentAnalysisRecord]:
        return await self._call(self.store.name, self.store.get(website_id, content_hash))

    # ── Entry point ───────────────────────────────────────────────

    async def analyze_content(self, request: AnalyzeContentRequest) -> AnalyzeContentResponse:
        self.validate(request)
        website = await self.authenticate(request.integration_key)

        try:
            analysis, insights = analyze_with_insights(
                request.title, request.content, website_id=website.id, content_url=request.url
            )
        except Exception as e:
            logger.exception(f"Scoring failed for website {website.id}")
            raise InternalError() from e

        stored, recommendations = await asyncio.gather(
            self.persist(analysis),
            self.recommendations_for(website.user_id, analysis.keywords, analysis.category),
        )

        logger.info(
            f"Analyzed {request.url or '<no url>'} for website {website.id}: "
            f"intent={stored.buying_intent_score:.2f} category={stored.category} "
            f"recommendations={len(recommendations)}"
        )
        return AnalyzeContentResponse(
            success=True,
            analysis=stored,
            recommendations=recommendations,
            should_create_popup=stored.buying_intent_score > self.config.HIGH_INTENT_THRESHOLD,
            insights=insights,
        )
