"""
Pytest tests for skill and question administration
"""

import pytest

from helpers import make_skill


class TestSkills:

    @pytest.fixture(autouse=True)
    def setup(self, client, admin_headers, user):
        self.client = client
        self.admin_headers = admin_headers
        self.user_headers = user[1]

    def _create(self, name, category="Programming"):
        return self.client.post(
            "/api/skills",
            json={"name": name, "description": f"{name} basics", "category": category},
            headers=self.admin_headers,
        )

    def test_create_and_get(self):
        created = self._create("Python")
        skill_id = created.json()["data"]["skill"]["id"]

        response = self.client.get(f"/api/skills/{skill_id}", headers=self.user_headers)

        assert created.status_code == 201
        assert response.status_code == 200
        skill = response.json()["data"]["skill"]
        assert skill["name"] == "Python"
        assert skill["isActive"] is True
        assert skill["questionCount"] == 0

    def test_duplicate_name_is_rejected(self):
        self._create("Python")

        response = self._create("Python")

        assert response.status_code == 400
        assert response.json()["message"] == "Skill with this name already exists"

    def test_users_cannot_create(self):
        response = self.client.post(
            "/api/skills", json={"name": "Python"}, headers=self.user_headers
        )

        assert response.status_code == 403

    def test_list_filters_and_paginates(self):
        self._create("Python")
        self._create("PostgreSQL", category="Databases")
        self._create("Rust")

        everything = self.client.get("/api/skills", params={"limit": 2}, headers=self.user_headers)
        search = self.client.get("/api/skills", params={"search": "post"}, headers=self.user_headers)
        category = self.client.get(
            "/api/skills", params={"category": "Databases"}, headers=self.user_headers
        )

        assert everything.json()["data"]["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
        assert len(everything.json()["data"]["items"]) == 2
        assert [item["name"] for item in search.json()["data"]["items"]] == ["PostgreSQL"]
        assert [item["name"] for item in category.json()["data"]["items"]] == ["PostgreSQL"]

    def test_list_filters_on_active_flag(self):
        skill_id = self._create("Python").json()["data"]["skill"]["id"]
        self._create("Rust")
        self.client.put(f"/api/skills/{skill_id}", json={"isActive": False}, headers=self.admin_headers)

        response = self.client.get("/api/skills", params={"isActive": "false"}, headers=self.user_headers)

        assert [item["name"] for item in response.json()["data"]["items"]] == ["Python"]

    def test_page_size_is_capped(self):
        response = self.client.get("/api/skills", params={"limit": 1000}, headers=self.user_headers)

        assert response.json()["data"]["pagination"]["limit"] == 100

    def test_categories(self):
        self._create("Python")
        self._create("PostgreSQL", category="Databases")
        self._create("Rust")

        response = self.client.get("/api/skills/categories/list", headers=self.user_headers)

        assert response.json()["data"]["categories"] == ["Databases", "Programming"]

    def test_update(self):
        skill_id = self._create("Python").json()["data"]["skill"]["id"]
        self._create("Rust")

        renamed = self.client.put(
            f"/api/skills/{skill_id}", json={"name": "Python 3"}, headers=self.admin_headers
        )
        clash = self.client.put(
            f"/api/skills/{skill_id}", json={"name": "Rust"}, headers=self.admin_headers
        )
        empty = self.client.put(f"/api/skills/{skill_id}", json={}, headers=self.admin_headers)

        assert renamed.json()["data"]["skill"]["name"] == "Python 3"
        assert clash.status_code == 400
        assert empty.status_code == 400

    def test_delete_refused_while_questions_exist(self):
        skill_id, _ = make_skill(self.client, self.admin_headers, name="Python", questions=["A"])
        empty_id = self._create("Rust").json()["data"]["skill"]["id"]

        refused = self.client.delete(f"/api/skills/{skill_id}", headers=self.admin_headers)
        deleted = self.client.delete(f"/api/skills/{empty_id}", headers=self.admin_headers)
        missing = self.client.get(f"/api/skills/{empty_id}", headers=self.user_headers)

        assert refused.status_code == 400
        assert deleted.status_code == 200
        assert missing.status_code == 404

    def test_create_with_questions(self):
        skill_id, question_ids = make_skill(self.client, self.admin_headers, questions=["A", "B", "C"])

        response = self.client.get(f"/api/skills/{skill_id}", headers=self.user_headers)

        assert len(question_ids) == 3
        assert response.json()["data"]["skill"]["questionCount"] == 3

    def test_create_with_questions_needs_questions(self):
        response = self.client.post(
            "/api/skills/with-questions",
            json={"name": "Python", "questions": []},
            headers=self.admin_headers,
        )

        assert response.status_code == 400


class TestQuestions:

    @pytest.fixture(autouse=True)
    def setup(self, client, admin_headers, user):
        self.client = client
        self.admin_headers = admin_headers
        self.user_headers = user[1]
        self.skill_id, self.question_ids = make_skill(client, admin_headers, questions=["A", "B", "C"])

    def _payload(self, **overrides):
        payload = {
            "skillId": self.skill_id,
            "questionText": "What does PEP 8 describe?",
            "optionA": "Style guide",
            "optionB": "Packaging",
            "optionC": "Typing",
            "optionD": "Async",
            "correctAnswer": "A",
            "difficulty": "easy",
            "points": 2,
        }
        payload.update(overrides)
        return payload

    def test_create_and_get(self):
        created = self.client.post("/api/questions", json=self._payload(), headers=self.admin_headers)
        question_id = created.json()["data"]["question"]["id"]

        response = self.client.get(f"/api/questions/{question_id}", headers=self.admin_headers)

        assert created.status_code == 201
        question = response.json()["data"]["question"]
        assert question["skillName"] == "Python"
        assert question["options"] == {"A": "Style guide", "B": "Packaging", "C": "Typing", "D": "Async"}
        assert question["correctAnswer"] == "A"
        assert question["points"] == 2

    def test_create_validates_payload(self):
        bad_letter = self.client.post(
            "/api/questions", json=self._payload(correctAnswer="E"), headers=self.admin_headers
        )
        short_text = self.client.post(
            "/api/questions", json=self._payload(questionText="Why?"), headers=self.admin_headers
        )
        no_skill = self.client.post(
            "/api/questions", json=self._payload(skillId=9999), headers=self.admin_headers
        )

        assert bad_letter.status_code == 400
        assert short_text.status_code == 400
        assert no_skill.status_code == 404

    def test_list_filters(self):
        by_difficulty = self.client.get(
            "/api/questions", params={"difficulty": "easy"}, headers=self.admin_headers
        )
        by_search = self.client.get(
            "/api/questions", params={"search": "number 2"}, headers=self.admin_headers
        )

        assert [item["difficulty"] for item in by_difficulty.json()["data"]["items"]] == ["easy"]
        assert [item["id"] for item in by_search.json()["data"]["items"]] == [self.question_ids[1]]

    def test_list_is_admin_only(self):
        response = self.client.get("/api/questions", headers=self.user_headers)

        assert response.status_code == 403

    def test_quiz_questions_hide_answers(self):
        self.client.put(
            f"/api/questions/{self.question_ids[0]}", json={"isActive": False}, headers=self.admin_headers
        )

        response = self.client.get(f"/api/questions/quiz/{self.skill_id}", headers=self.user_headers)

        questions = response.json()["data"]["questions"]
        assert sorted(item["id"] for item in questions) == self.question_ids[1:]
        assert all("correctAnswer" not in item for item in questions)

    def test_update_and_delete(self):
        question_id = self.question_ids[0]

        updated = self.client.put(
            f"/api/questions/{question_id}",
            json={"correctAnswer": "D", "difficulty": "hard"},
            headers=self.admin_headers,
        )
        deleted = self.client.delete(f"/api/questions/{question_id}", headers=self.admin_headers)
        missing = self.client.get(f"/api/questions/{question_id}", headers=self.admin_headers)

        assert updated.json()["data"]["question"]["correctAnswer"] == "D"
        assert updated.json()["data"]["question"]["difficulty"] == "hard"
        assert deleted.status_code == 200
        assert missing.status_code == 404
