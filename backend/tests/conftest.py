import json

import pytest

from studyquiz.models.quiz_models import Level, QuizQuestion, QuizRequest
from studyquiz.storage.memory import MemoryDocumentStore


def make_items(n=10, answer_slot=0):
    return [
        {
            "question": f"Question {i}?",
            "options": [f"Q{i} option {j}" for j in range(4)],
            "answer": f"Q{i} option {answer_slot}",
            "explanation": f"Because option {answer_slot} is right for question {i}.",
        }
        for i in range(n)
    ]


class FakeTextService:
    """Stands in for the model: replies with canned text and records prompts."""

    def __init__(self, reply):
        self.reply = reply
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


class FailingStore(MemoryDocumentStore):
    def create(self, collection, record):
        raise RuntimeError("store unavailable")


@pytest.fixture
def quiz_request():
    return QuizRequest(course="Databases", topic="Normalization", level=Level.BEGINNER)


@pytest.fixture
def questions(quiz_request):
    return [QuizQuestion(**item) for item in make_items()]


@pytest.fixture
def model_reply():
    return "Sure! Here are your questions:\n" + json.dumps(make_items()) + "\nGood luck!"


@pytest.fixture
def store():
    return MemoryDocumentStore()
