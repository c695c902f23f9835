"""
Reporting endpoints: leaderboard, user reports and admin analytics
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Literal, Optional
import logging

from app.api.deps import admin_only, current_user, get_cache, get_settings
from app.config import Settings
from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.report import (
    LeaderboardData,
    OverviewReport,
    QuizUsageReport,
    SkillGapReport,
    UserReport,
    UserSkillUsage,
)
from app.services.auth_service import RequestContext
from app.services.report_service import ReportService
from app.utils.cache import CacheService

router = APIRouter(prefix="/api/reports", tags=["reports"])
logger = logging.getLogger(__name__)

Period = Literal["all", "week", "month"]


def get_report_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    cache: CacheService = Depends(get_cache)
) -> ReportService:
    return ReportService(db, settings, cache)


@router.get("/leaderboard", response_model=ApiResponse[LeaderboardData])
async def leaderboard(
    period: Period = Query("all"),
    skill_id: Optional[int] = Query(None, alias="skillId"),
    limit: int = Query(10, ge=1, le=100),
    context: RequestContext = Depends(current_user),
    service: ReportService = Depends(get_report_service)
):
    """
    Rank users by average score

    - Ties on average score go to the user with more completed quizzes
    - Only users with at least one completed attempt in the period appear
    """
    return {"success": True, "data": service.get_leaderboard(period, skill_id, limit)}


@router.get("/user/{user_id}", response_model=ApiResponse[UserReport])
async def user_report(
    user_id: int,
    period: Period = Query("all"),
    context: RequestContext = Depends(current_user),
    service: ReportService = Depends(get_report_service)
):
    return {"success": True, "data": service.get_user_report(context, user_id, period)}


@router.get("/quiz-usage", response_model=ApiResponse[QuizUsageReport])
async def quiz_usage(
    context: RequestContext = Depends(admin_only),
    service: ReportService = Depends(get_report_service)
):
    return {"success": True, "data": service.get_quiz_usage()}


@router.get("/skill-gaps", response_model=ApiResponse[SkillGapReport])
async def skill_gaps(
    context: RequestContext = Depends(admin_only),
    service: ReportService = Depends(get_report_service)
):
    """Skill gap analysis (cached)"""
    return {"success": True, "data": service.get_skill_gaps()}


@router.get("/overview", response_model=ApiResponse[OverviewReport])
async def overview(
    context: RequestContext = Depends(admin_only),
    service: ReportService = Depends(get_report_service)
):
    """System overview (cached)"""
    return {"success": True, "data": service.get_overview()}


@router.get("/user/{user_id}/skill-usage", response_model=ApiResponse[UserSkillUsage])
async def user_skill_usage(
    user_id: int,
    context: RequestContext = Depends(current_user),
    service: ReportService = Depends(get_report_service)
):
    """Attempts and best score per skill for one user, most-used skills first"""
    return {"success": True, "data": service.get_user_skill_usage(context, user_id)}
