"""
Shared fixtures.

Tests always run on the keyword backend so they never reach the network,
whatever the local .env says.
"""

import os
from types import SimpleNamespace

os.environ["MODEL_BACKEND"] = "rules"

import pytest
from fastapi.testclient import TestClient

from app.config import get_settings

get_settings.cache_clear()

from app.main import app  # noqa: E402
from app.models.schemas import Speech  # noqa: E402
from app.services.analysis import KeywordArgumentClassifier  # noqa: E402


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def classifier():
    return KeywordArgumentClassifier()


@pytest.fixture
def plastics_round():
    """A short round on a prohibition motion where the user is LO."""
    return [
        Speech(
            role="PM",
            content="We define the ban as covering all single-use plastics. The harm to oceans is severe.",
            is_ai=True,
        ),
        Speech(
            role="LO",
            content="However, the government's evidence is weak and the ban cannot work in practice.",
            is_ai=False,
        ),
        Speech(
            role="DPM",
            content="Enforcement will work through retailer fines because shops are easy to inspect.",
            is_ai=True,
        ),
    ]


class FakeCompletions:
    """Stands in for client.chat.completions; replies with fixed content or raises."""

    def __init__(self, content: str | None = None, error: Exception | None = None, empty: bool = False):
        self.content = content
        self.error = error
        self.empty = empty
        self.calls = 0

    async def create(self, **kwargs):
        self.calls += 1
        if self.error:
            raise self.error
        if self.empty:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def fake_openai():
    """Factory returning (client, completions) for a canned chat response."""
    def make(content: str | None = None, error: Exception | None = None, empty: bool = False):
        completions = FakeCompletions(content=content, error=error, empty=empty)
        return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions
    return make
