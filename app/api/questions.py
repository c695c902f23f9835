"""
Question bank endpoints
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.api.deps import PageParams, admin_only, current_user, get_page_params
from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.question import (
    Difficulty,
    QuestionCreate,
    QuestionData,
    QuestionListData,
    QuestionUpdate,
    QuizQuestionsData,
)
from app.services.auth_service import RequestContext
from app.services.question_service import QuestionService

router = APIRouter(prefix="/api/questions", tags=["questions"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ApiResponse[QuestionListData])
async def list_questions(
    paging: PageParams = Depends(get_page_params),
    skill_id: Optional[int] = Query(None, alias="skillId"),
    difficulty: Optional[Difficulty] = Query(None),
    search: Optional[str] = Query(None),
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    data = QuestionService(db).list_questions(
        page=paging.page,
        limit=paging.limit,
        skill_id=skill_id,
        difficulty=difficulty,
        search=search,
    )
    return {"success": True, "data": data}


@router.get("/quiz/{skill_id}", response_model=ApiResponse[QuizQuestionsData])
async def get_quiz_questions(
    skill_id: int,
    limit: int = Query(10, ge=1, le=50),
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    """
    Questions for taking a quiz

    - Active questions only, in random order
    - Correct answers are never included
    """
    questions = QuestionService(db).get_quiz_questions(skill_id, limit)
    return {"success": True, "data": {"questions": questions}}


@router.get("/{question_id}", response_model=ApiResponse[QuestionData])
async def get_question(
    question_id: int,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    return {"success": True, "data": {"question": QuestionService(db).get_question(question_id)}}


@router.post("", response_model=ApiResponse[QuestionData], status_code=201)
async def create_question(
    payload: QuestionCreate,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    question = QuestionService(db).create_question(payload)
    return {"success": True, "message": "Question created successfully", "data": {"question": question}}


@router.put("/{question_id}", response_model=ApiResponse[QuestionData])
async def update_question(
    question_id: int,
    payload: QuestionUpdate,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    question = QuestionService(db).update_question(question_id, payload)
    return {"success": True, "message": "Question updated successfully", "data": {"question": question}}


@router.delete("/{question_id}", response_model=ApiResponse[None])
async def delete_question(
    question_id: int,
    context: RequestContext = Depends(admin_only),
    db: Session = Depends(get_db)
):
    QuestionService(db).delete_question(question_id)
    return {"success": True, "message": "Question deleted successfully"}
