"""
Shared fixtures: sample model output and a backend that never hits the network.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.ai_generation_service import (
    CoverLetterGenerationService,
    QuestionGenerationService,
    get_cover_letter_generator,
    get_question_generator,
)
from app.services.llm_client import LLMClient

BACKEND_URL = "http://localhost:11434/v1/chat/completions"


def make_question(n: int) -> dict:
    return {
        "question": f"React question number {n}?",
        "options": [f"Option {n}-A", f"Option {n}-B", f"Option {n}-C", f"Option {n}-D"],
        "answer": f"Option {n}-B",
    }


def make_questions(count: int) -> list:
    return [make_question(n) for n in range(1, count + 1)]


def fenced(payload) -> str:
    """Wrap a payload the way chatty models do."""
    return (
        "Sure! Here are your questions:\n\n"
        "```json\n"
        f"{json.dumps(payload, indent=2)}\n"
        "```\n\n"
        "Good luck with the interview!"
    )


def make_cover_letter(words: int = 300) -> str:
    sentence = "I have built and shipped production services with Python and React for years. "
    body_words = []
    while len(body_words) < words:
        body_words.extend(sentence.split())
    body = " ".join(body_words[:words])
    return (
        "[Your Name]\n"
        "[Your Address]\n"
        "[Date]\n\n"
        "Dear Hiring Manager,\n\n"
        f"{body}\n\n"
        "Sincerely,\n"
        "[Your Name]"
    )


def chat_completion(content):
    """Minimal stand-in for an openai ChatCompletion."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def backend_request():
    return httpx.Request("POST", BACKEND_URL)


@pytest.fixture
def openai_client():
    """Mocked openai.OpenAI instance."""
    return MagicMock()


@pytest.fixture
def llm_client(openai_client):
    return LLMClient(client=openai_client)


@pytest.fixture
def fake_ai():
    """An LLMClient stand-in whose generate() is scripted per test."""
    return MagicMock(spec=LLMClient)


@pytest.fixture
def api_client(fake_ai):
    app.dependency_overrides[get_question_generator] = lambda: QuestionGenerationService(ai_client=fake_ai)
    app.dependency_overrides[get_cover_letter_generator] = lambda: CoverLetterGenerationService(ai_client=fake_ai)
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
