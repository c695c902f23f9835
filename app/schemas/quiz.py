"""
Pydantic schemas for the quiz-attempt lifecycle
"""
from datetime import datetime
from pydantic import Field
from typing import Dict, List, Optional

from app.schemas.common import CamelModel, Pagination
from app.schemas.question import AnswerLetter


class QuizStartRequest(CamelModel):
    """Request schema for starting an attempt"""
    skill_id: int = Field(..., gt=0, description="Skill to be assessed")


class AnswerSubmission(CamelModel):
    """Schema for a single answer"""
    quiz_attempt_id: int = Field(..., gt=0)
    question_id: int = Field(..., gt=0)
    selected_answer: AnswerLetter
    time_taken: int = Field(0, ge=0, description="Seconds spent on the question")


class QuizCompletion(CamelModel):
    quiz_attempt_id: int = Field(..., gt=0)
    time_taken: int = Field(0, ge=0, description="Total seconds spent on the quiz")


class StartedAttempt(CamelModel):
    id: int
    user_id: int
    skill_id: int
    skill_name: str
    total_questions: int
    started_at: datetime


class QuizStartData(CamelModel):
    quiz_attempt: StartedAttempt


class AnswerResult(CamelModel):
    """Correctness is disclosed right after submission"""
    is_correct: bool
    correct_answer: str


class QuizScore(CamelModel):
    total_questions: int
    correct_answers: int
    score_percentage: float
    time_taken: int


class QuizCompletionData(CamelModel):
    score: QuizScore


class HistoryItem(CamelModel):
    id: int
    skill_id: int
    skill_name: Optional[str] = None
    total_questions: int
    correct_answers: int
    score_percentage: float
    time_taken: Optional[int] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class QuizHistoryData(CamelModel):
    quiz_history: List[HistoryItem]
    pagination: Pagination


class AnswerDetail(CamelModel):
    question_id: int
    question_text: Optional[str] = None
    options: Dict[str, Optional[str]]
    selected_answer: str
    correct_answer: Optional[str] = None
    is_correct: bool
    time_taken: Optional[int] = None


class AttemptDetail(HistoryItem):
    user_id: int
    answers: List[AnswerDetail]


class AttemptDetailData(CamelModel):
    quiz_attempt: AttemptDetail
