"""
Declarative seed document

Seed data is plain JSON validated against these models; nothing in a seed
file is ever executed.
"""
from pydantic import Field
from typing import List, Optional

from app.schemas.common import CamelModel
from app.schemas.question import QuestionDraft


class SeedQuestion(QuestionDraft):
    is_active: bool = True


class SeedSkill(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    category: Optional[str] = Field(None, max_length=100)
    is_active: bool = True
    questions: List[SeedQuestion] = Field(default_factory=list)


class SeedDocument(CamelModel):
    skills: List[SeedSkill] = Field(..., min_length=1)


class SeedResult(CamelModel):
    skills_created: int
    skills_reused: int
    questions_created: int
    questions_skipped: int
