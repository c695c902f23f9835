"""
Admin maintenance endpoints
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging

from app.api.deps import admin_only, get_cache, get_settings
from app.config import Settings
from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.report import AllQuizHistory, TopperResults
from app.schemas.seed import SeedDocument, SeedResult
from app.services.auth_service import RequestContext
from app.services.report_service import OVERVIEW_CACHE_KEY, SKILL_GAPS_CACHE_KEY, ReportService
from app.services.seed_service import SeedService
from app.utils.cache import CacheService

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.post("/seed", response_model=ApiResponse[SeedResult])
async def import_seed(
    payload: SeedDocument,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache)
):
    """
    Import skills and questions from a seed document

    - Existing skills are matched by name and reused
    - Questions already present under a skill are skipped
    """
    result = SeedService(db).import_document(payload)

    # Cached reports count skills and questions
    cache.delete(SKILL_GAPS_CACHE_KEY)
    cache.delete(OVERVIEW_CACHE_KEY)

    logger.info(f"Seed imported by admin {context.user_id}")
    return {"success": True, "message": "Seed data imported", "data": result}


@router.get("/all-quiz-history", response_model=ApiResponse[AllQuizHistory])
async def all_quiz_history(
    limit: int = Query(100, ge=1, le=500),
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Latest completed attempts across every user"""
    return {"success": True, "data": ReportService(db, settings).get_all_quiz_history(limit)}


@router.get("/topper-quiz-results", response_model=ApiResponse[TopperResults])
async def topper_quiz_results(
    limit: int = Query(20, ge=1, le=100),
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Latest perfect-score attempts"""
    return {"success": True, "data": ReportService(db, settings).get_toppers(limit)}
