"""
Quiz-taking endpoints: start, answer, complete, history and review
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.api.deps import PageParams, current_user, get_page_params
from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.quiz import (
    AnswerResult,
    AnswerSubmission,
    AttemptDetailData,
    QuizCompletion,
    QuizCompletionData,
    QuizHistoryData,
    QuizStartData,
    QuizStartRequest,
)
from app.services.auth_service import RequestContext
from app.services.quiz_service import QuizService

router = APIRouter(prefix="/api/quiz", tags=["quiz"])
logger = logging.getLogger(__name__)


@router.post("/start", response_model=ApiResponse[QuizStartData], status_code=201)
async def start_quiz(
    payload: QuizStartRequest,
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    """
    Start a quiz attempt

    - Skill must be active and have at least one active question
    - totalQuestions is fixed at the active question count
    """
    attempt = QuizService(db).start_quiz(context.user_id, payload.skill_id)
    return {
        "success": True,
        "message": "Quiz started successfully",
        "data": {"quiz_attempt": attempt},
    }


@router.post("/answer", response_model=ApiResponse[AnswerResult])
async def submit_answer(
    payload: AnswerSubmission,
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    """
    Submit one answer

    - Each question can be answered once per attempt
    - Completed attempts accept no more answers
    """
    result = QuizService(db).submit_answer(
        context.user_id,
        payload.quiz_attempt_id,
        payload.question_id,
        payload.selected_answer,
        payload.time_taken,
    )
    return {"success": True, "message": "Answer submitted successfully", "data": result}


@router.post("/complete", response_model=ApiResponse[QuizCompletionData])
async def complete_quiz(
    payload: QuizCompletion,
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    score = QuizService(db).complete_quiz(
        context.user_id, payload.quiz_attempt_id, payload.time_taken
    )
    return {
        "success": True,
        "message": "Quiz completed successfully",
        "data": {"score": score},
    }


@router.get("/history", response_model=ApiResponse[QuizHistoryData])
async def quiz_history(
    paging: PageParams = Depends(get_page_params),
    skill_id: Optional[int] = Query(None, alias="skillId"),
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    data = QuizService(db).get_history(
        context.user_id, page=paging.page, limit=paging.limit, skill_id=skill_id
    )
    return {"success": True, "data": data}


@router.get("/{attempt_id}", response_model=ApiResponse[AttemptDetailData])
async def get_attempt(
    attempt_id: int,
    context: RequestContext = Depends(current_user),
    db: Session = Depends(get_db)
):
    """Attempt detail with every answer; owner or admin only"""
    attempt = QuizService(db).get_attempt_detail(context, attempt_id)
    return {"success": True, "data": {"quiz_attempt": attempt}}
