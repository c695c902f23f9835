"""
Pydantic schemas for question management
"""
from datetime import datetime
from pydantic import Field
from typing import Dict, List, Literal, Optional

from app.schemas.common import CamelModel, Pagination

AnswerLetter = Literal["A", "B", "C", "D"]
Difficulty = Literal["easy", "medium", "hard"]


class QuestionDraft(CamelModel):
    """Question fields without the owning skill (nested inside a skill payload)"""
    question_text: str = Field(..., min_length=1)
    option_a: str = Field(..., min_length=1, max_length=500)
    option_b: str = Field(..., min_length=1, max_length=500)
    option_c: str = Field(..., min_length=1, max_length=500)
    option_d: str = Field(..., min_length=1, max_length=500)
    correct_answer: AnswerLetter
    difficulty: Difficulty = "medium"
    points: int = Field(1, ge=1, le=10)


class QuestionCreate(QuestionDraft):
    """Schema for creating a question"""
    skill_id: int = Field(..., gt=0)
    question_text: str = Field(..., min_length=10)


class QuestionUpdate(CamelModel):
    """Partial update; omitted fields are left untouched"""
    skill_id: Optional[int] = Field(None, gt=0)
    question_text: Optional[str] = Field(None, min_length=10)
    option_a: Optional[str] = Field(None, min_length=1, max_length=500)
    option_b: Optional[str] = Field(None, min_length=1, max_length=500)
    option_c: Optional[str] = Field(None, min_length=1, max_length=500)
    option_d: Optional[str] = Field(None, min_length=1, max_length=500)
    correct_answer: Optional[AnswerLetter] = None
    difficulty: Optional[Difficulty] = None
    points: Optional[int] = Field(None, ge=1, le=10)
    is_active: Optional[bool] = None


class QuestionOut(CamelModel):
    """Full question, including the correct answer (admin view)"""
    id: int
    skill_id: int
    skill_name: Optional[str] = None
    question_text: str
    options: Dict[str, str]
    correct_answer: str
    difficulty: str
    points: int
    is_active: bool
    created_at: Optional[datetime] = None


class QuizQuestionOut(CamelModel):
    """Question as shown to a quiz taker: no correct answer"""
    id: int
    question_text: str
    options: Dict[str, str]
    difficulty: str
    points: int


class QuestionData(CamelModel):
    question: QuestionOut


class QuestionListData(CamelModel):
    items: List[QuestionOut]
    pagination: Pagination


class QuizQuestionsData(CamelModel):
    questions: List[QuizQuestionOut]
