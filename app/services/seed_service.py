"""
Declarative seed import

Seed documents are JSON validated by app.schemas.seed. Skills are matched by
name so re-running an import is safe: an existing skill is reused and a
question whose text already exists under that skill is skipped.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError
from app.models import Question, Skill
from app.schemas.seed import SeedDocument

logger = logging.getLogger(__name__)


def load_seed_file(path: Union[str, Path]) -> SeedDocument:
    """
    Parse a seed file from disk

    Raises:
        BadRequestError: if the file is not valid JSON or fails validation
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return SeedDocument.model_validate(raw)
    except (json.JSONDecodeError, ValidationError) as e:
        raise BadRequestError(f"Invalid seed file {path}: {e}") from e


class SeedService:
    def __init__(self, db: Session):
        self.db = db

    def import_document(self, document: SeedDocument) -> Dict[str, Any]:
        """Import every skill and question in one transaction"""
        result = {
            "skills_created": 0,
            "skills_reused": 0,
            "questions_created": 0,
            "questions_skipped": 0,
        }

        try:
            for seed_skill in document.skills:
                skill = self.db.query(Skill).filter(Skill.name == seed_skill.name).first()

                if skill:
                    result["skills_reused"] += 1
                else:
                    skill = Skill(
                        name=seed_skill.name,
                        description=seed_skill.description,
                        category=seed_skill.category,
                        is_active=seed_skill.is_active,
                    )
                    self.db.add(skill)
                    self.db.flush()
                    result["skills_created"] += 1

                existing_texts = {
                    text for (text,) in self.db.query(Question.question_text).filter(
                        Question.skill_id == skill.id
                    )
                }

                for seed_question in seed_skill.questions:
                    if seed_question.question_text in existing_texts:
                        result["questions_skipped"] += 1
                        continue

                    self.db.add(Question(skill_id=skill.id, **seed_question.model_dump()))
                    existing_texts.add(seed_question.question_text)
                    result["questions_created"] += 1

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Seed import finished: %(skills_created)s skills created, %(skills_reused)s reused, "
            "%(questions_created)s questions created, %(questions_skipped)s skipped",
            result,
        )
        return result
