"""
API helpers shared by the test modules
"""


def register(client, email, role="user", first_name="Test", last_name="User", password="secret123"):
    """Register an account and return (user_id, auth headers)"""
    payload = {
        "email": email,
        "password": password,
        "firstName": first_name,
        "lastName": last_name,
        "role": role,
    }
    if role == "admin":
        payload["adminPasscode"] = "let-me-in"

    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return data["user"]["id"], {"Authorization": f"Bearer {data['token']}"}


def make_skill(client, admin_headers, name="Python", questions=None, category="Programming"):
    """
    Create a skill with questions through the admin API

    `questions` is a list of correct-answer letters; one question is created
    per letter. Returns (skill_id, [question_id, ...]).
    """
    letters = questions if questions is not None else ["A", "B", "C"]
    payload = {
        "name": name,
        "description": f"{name} fundamentals",
        "category": category,
        "questions": [
            {
                "questionText": f"{name} question number {index + 1}?",
                "optionA": "first",
                "optionB": "second",
                "optionC": "third",
                "optionD": "fourth",
                "correctAnswer": letter,
                "difficulty": ["easy", "medium", "hard"][index % 3],
            }
            for index, letter in enumerate(letters)
        ],
    }

    if not letters:
        response = client.post(
            "/api/skills",
            json={"name": name, "description": payload["description"], "category": category},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]["skill"]["id"], []

    response = client.post("/api/skills/with-questions", json=payload, headers=admin_headers)
    assert response.status_code == 201, response.text
    skill_id = response.json()["data"]["skill"]["id"]

    listing = client.get(
        "/api/questions", params={"skillId": skill_id, "limit": 100}, headers=admin_headers
    )
    question_ids = sorted(item["id"] for item in listing.json()["data"]["items"])
    return skill_id, question_ids


def take_quiz(client, headers, skill_id, answers):
    """
    Start, answer and complete a quiz

    `answers` maps question id to the selected letter. Returns the attempt id.
    """
    started = client.post("/api/quiz/start", json={"skillId": skill_id}, headers=headers)
    assert started.status_code == 201, started.text
    attempt_id = started.json()["data"]["quizAttempt"]["id"]

    for question_id, letter in answers.items():
        response = client.post(
            "/api/quiz/answer",
            json={"quizAttemptId": attempt_id, "questionId": question_id, "selectedAnswer": letter},
            headers=headers,
        )
        assert response.status_code == 200, response.text

    completed = client.post(
        "/api/quiz/complete", json={"quizAttemptId": attempt_id, "timeTaken": 30}, headers=headers
    )
    assert completed.status_code == 200, completed.text
    return attempt_id


class FakeRedis:
    """Dict-backed stand-in for the handful of redis calls CacheService makes"""

    def __init__(self):
        self.store = {}
        self.setex_calls = []

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.setex_calls.append((key, ttl))
        self.store[key] = value

    def delete(self, key):
        self.store.pop(key, None)
