"""
Shared fixtures: a fake LLM client and an app wired to it.
"""
import pytest
from fastapi.testclient import TestClient

from cybersentry.core.errors import ConfigError
from cybersentry.main import create_app
from cybersentry.services.gemini_service import ClientSlot
from cybersentry.services.prompts import render_skeleton


class FakeLLM:
    """Stands in for GeminiClient: returns a canned reply or raises."""

    model = "fake-model"

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []
        self.close_count = 0

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    async def aclose(self) -> None:
        self.close_count += 1


@pytest.fixture
def fake_llm():
    return FakeLLM(reply=render_skeleton(5, "Nothing conclusive.", "Mixed signals.", ["Stay alert"]))


@pytest.fixture
def used_keys():
    return []


@pytest.fixture
def slot(fake_llm, used_keys):
    """Client slot whose factory hands out the fake instead of a Gemini client."""
    def factory(api_key: str) -> FakeLLM:
        if not api_key or not api_key.strip():
            raise ConfigError("API key is required")
        used_keys.append(api_key)
        return fake_llm

    return ClientSlot(factory=factory)


@pytest.fixture
def app(slot):
    return create_app(slot)


@pytest.fixture
def client(app):
    """Test client for an app with no key configured."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def configured_client(client, slot):
    """Test client for an app whose key slot is already filled."""
    slot.set("test-key")
    return client
