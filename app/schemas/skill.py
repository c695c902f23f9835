"""
Pydantic schemas for skill management
"""
from datetime import datetime
from pydantic import Field
from typing import List, Optional

from app.schemas.common import CamelModel, Pagination
from app.schemas.question import QuestionDraft


class SkillCreate(CamelModel):
    """Schema for creating a skill"""
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    category: Optional[str] = Field(None, max_length=100)


class SkillUpdate(CamelModel):
    """Partial update; omitted fields are left untouched"""
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    category: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class SkillWithQuestionsCreate(SkillCreate):
    questions: List[QuestionDraft] = Field(..., min_length=1)


class SkillOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    question_count: Optional[int] = None


class SkillData(CamelModel):
    skill: SkillOut


class SkillListData(CamelModel):
    items: List[SkillOut]
    pagination: Pagination


class CategoryListData(CamelModel):
    categories: List[str]


class SkillWithQuestionsData(CamelModel):
    skill: SkillOut
    questions_count: int
