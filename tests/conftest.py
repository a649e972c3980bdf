import json

import pytest
from fastapi.testclient import TestClient

from quizgen.main import app
from quizgen.models.generation import GenerationRequest
from quizgen.services.session_store import SessionRegistry, get_session_registry


def make_question(text="Q", correct=0, options=None):
    return {
        "question": text,
        "options": options if options is not None else ["a", "b", "c", "d"],
        "correctAnswer": correct,
    }


def completion_text(questions, prose=True):
    """Completion content with the JSON array wrapped in chatty prose"""
    body = json.dumps(questions, ensure_ascii=False)
    if prose:
        return f"Voici vos questions :\n{body}\nBonne chance !"
    return body


class FakeCompletion:
    """Async stand-in for request_completion that records its calls"""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def __call__(self, prompt, api_key):
        self.calls.append((prompt, api_key))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def topic_request():
    return GenerationRequest(
        sourceMode="topic",
        topic="Photosynthesis",
        studyLevel="seconde",
        difficulty="facile",
        numberOfQuestions=3,
        apiKey="sk-test",
    )


@pytest.fixture
def three_questions():
    return [make_question(f"Q{i}", correct=i) for i in range(1, 4)]


@pytest.fixture
def fake_completion():
    return FakeCompletion()


@pytest.fixture
def registry(fake_completion):
    return SessionRegistry(max_sessions=10, completion_func=fake_completion)


@pytest.fixture
def client(registry):
    app.dependency_overrides[get_session_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
