from functools import lru_cache
import logging
import time

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.collaborators import build_collaborators
from shared.config import settings
from shared.errors import InternalError, PipelineError
from shared.models import (
    AnalyzeContentRequest,
    AnalyzeContentResponse,
    ContentAnalysisRecord,
    RankedRecommendation,
    RecommendRequest,
)

from services.content_analysis.pipeline import recommend
from services.content_analysis.service import ContentAnalysisService

app = FastAPI(title=f"{settings.PLATFORM_NAME} Content Analysis Service", version="1.0.0")
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger("ContentAnalysis")

# Page-load beacons come from arbitrary customer sites
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@lru_cache
def get_service() -> ContentAnalysisService:
    return ContentAnalysisService(build_collaborators(settings), settings)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Malformed request", "details": jsonable_encoder(exc.errors())})


@app.get("/health")
async def health():
    return {"status": "healthy", "timestamp": time.time()}


@app.post("/analyze", response_model=AnalyzeContentResponse)
async def analyze_content(
    request: AnalyzeContentRequest,
    service: ContentAnalysisService = Depends(get_service),
):
    try:
        return await service.analyze_content(request)
    except PipelineError:
        raise
    except Exception as e:
        logger.exception("Unexpected error analyzing content")
        raise InternalError() from e


@app.get("/analysis/{website_id}/{content_hash}", response_model=ContentAnalysisRecord)
async def get_analysis(
    website_id: str,
    content_hash: str,
    service: ContentAnalysisService = Depends(get_service),
):
    record = await service.get_record(website_id, content_hash)
    if record is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return record


@app.post("/recommendations", response_model=list[RankedRecommendation])
async def rank_products(request: RecommendRequest):
    return recommend(request.keywords, request.category, request.candidates)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.CONTENT_ANALYSIS_PORT)
