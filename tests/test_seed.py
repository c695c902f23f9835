"""
Pytest tests for declarative seed imports
"""

import json
from pathlib import Path

import pytest

from app import seed as seed_cli
from app.exceptions import BadRequestError
from app.models import Question, Skill
from app.services.seed_service import SeedService, load_seed_file

SAMPLE_SEED = Path(__file__).resolve().parent.parent / "seed" / "skills.json"


def seed_document(question_texts, name="Docker"):
    return {
        "skills": [
            {
                "name": name,
                "description": "Containers",
                "category": "DevOps",
                "questions": [
                    {
                        "questionText": text,
                        "optionA": "one",
                        "optionB": "two",
                        "optionC": "three",
                        "optionD": "four",
                        "correctAnswer": "B",
                    }
                    for text in question_texts
                ],
            }
        ]
    }


class TestSeedEndpoint:

    @pytest.fixture(autouse=True)
    def setup(self, client, admin_headers, user, db):
        self.client = client
        self.admin_headers = admin_headers
        self.user_headers = user[1]
        self.db = db

    def _import(self, document, headers=None):
        return self.client.post("/api/admin/seed", json=document, headers=headers or self.admin_headers)

    def test_import_creates_skills_and_questions(self):
        response = self._import(seed_document(["What is an image?", "What is a container?"]))

        assert response.status_code == 200
        assert response.json()["data"] == {
            "skillsCreated": 1,
            "skillsReused": 0,
            "questionsCreated": 2,
            "questionsSkipped": 0,
        }
        skill = self.db.query(Skill).filter(Skill.name == "Docker").one()
        assert skill.category == "DevOps"
        assert self.db.query(Question).filter(Question.skill_id == skill.id).count() == 2

    def test_reimport_is_idempotent(self):
        self._import(seed_document(["What is an image?"]))

        response = self._import(seed_document(["What is an image?", "What is a volume?"]))

        assert response.json()["data"] == {
            "skillsCreated": 0,
            "skillsReused": 1,
            "questionsCreated": 1,
            "questionsSkipped": 1,
        }
        assert self.db.query(Question).count() == 2

    def test_invalid_document_imports_nothing(self):
        document = seed_document(["What is an image?"])
        document["skills"][0]["questions"][0]["correctAnswer"] = "Z"

        response = self._import(document)

        assert response.status_code == 400
        assert self.db.query(Skill).count() == 0

    def test_admin_only(self):
        response = self._import(seed_document(["What is an image?"]), headers=self.user_headers)

        assert response.status_code == 403

    def test_seeded_skill_can_be_quizzed(self):
        self._import(seed_document(["What is an image?"]))
        skill_id = self.db.query(Skill.id).filter(Skill.name == "Docker").scalar()

        response = self.client.post("/api/quiz/start", json={"skillId": skill_id}, headers=self.user_headers)

        assert response.status_code == 201
        assert response.json()["data"]["quizAttempt"]["totalQuestions"] == 1


class TestSeedFiles:

    def test_sample_seed_file_is_valid(self):
        document = load_seed_file(SAMPLE_SEED)

        assert {skill.name for skill in document.skills} == {"SQL", "JavaScript", "Project Management"}
        assert all(skill.questions for skill in document.skills)

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(BadRequestError):
            load_seed_file(path)

    def test_service_import(self, db):
        result = SeedService(db).import_document(load_seed_file(SAMPLE_SEED))

        assert result["skills_created"] == 3
        assert result["questions_created"] == db.query(Question).count()

    def test_cli(self, tmp_path, capsys):
        seed_path = tmp_path / "docker.json"
        seed_path.write_text(json.dumps(seed_document(["What is an image?"])), encoding="utf-8")
        database_url = f"sqlite:///{tmp_path / 'cli.db'}"

        exit_code = seed_cli.main([str(seed_path), "--database-url", database_url])

        assert exit_code == 0
        assert "1 skills created" in capsys.readouterr().out

    def test_cli_reports_invalid_files(self, tmp_path):
        seed_path = tmp_path / "empty.json"
        seed_path.write_text(json.dumps({"skills": []}), encoding="utf-8")

        exit_code = seed_cli.main([str(seed_path), "--database-url", f"sqlite:///{tmp_path / 'cli.db'}"])

        assert exit_code == 1
