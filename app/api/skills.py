"""
Skill catalogue endpoints
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.api.deps import PageParams, admin_only, current_user, get_page_params
from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.skill import (
    CategoryListData,
    SkillCreate,
    SkillData,
    SkillListData,
    SkillUpdate,
    SkillWithQuestionsCreate,
    SkillWithQuestionsData,
)
from app.services.auth_service import RequestContext
from app.services.skill_service import SkillService

router = APIRouter(prefix="/api/skills", tags=["skills"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ApiResponse[SkillListData])
async def list_skills(
    paging: PageParams = Depends(get_page_params),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    data = SkillService(db).list_skills(
        page=paging.page,
        limit=paging.limit,
        search=search,
        category=category,
        is_active=is_active,
    )
    return {"success": True, "data": data}


@router.get("/categories/list", response_model=ApiResponse[CategoryListData])
async def list_categories(
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    return {"success": True, "data": {"categories": SkillService(db).list_categories()}}


@router.post("/with-questions", response_model=ApiResponse[SkillWithQuestionsData], status_code=201)
async def create_skill_with_questions(
    payload: SkillWithQuestionsCreate,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    """Create a skill together with its initial questions"""
    data = SkillService(db).create_with_questions(payload)
    return {
        "success": True,
        "message": f"Skill created with {data['questions_count']} questions",
        "data": data,
    }


@router.get("/{skill_id}", response_model=ApiResponse[SkillData])
async def get_skill(
    skill_id: int,
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    return {"success": True, "data": {"skill": SkillService(db).get_skill(skill_id)}}


@router.post("", response_model=ApiResponse[SkillData], status_code=201)
async def create_skill(
    payload: SkillCreate,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    skill = SkillService(db).create_skill(payload)
    return {"success": True, "message": "Skill created successfully", "data": {"skill": skill}}


@router.put("/{skill_id}", response_model=ApiResponse[SkillData])
async def update_skill(
    skill_id: int,
    payload: SkillUpdate,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    skill = SkillService(db).update_skill(skill_id, payload)
    return {"success": True, "message": "Skill updated successfully", "data": {"skill": skill}}


@router.delete("/{skill_id}", response_model=ApiResponse[None])
async def delete_skill(
    skill_id: int,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    SkillService(db).delete_skill(skill_id)
    return {"success": True, "message": "Skill deleted successfully"}
