"""
Tests for the Gemini adapter and the client slot
"""
import asyncio
from types import SimpleNamespace

import httpx
import pytest

from cybersentry.core.errors import ConfigError, LLMError, NetworkError
from cybersentry.services import gemini_service
from cybersentry.services.gemini_service import ClientSlot, GeminiClient

from conftest import FakeLLM


class StubModels:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return SimpleNamespace(text=self.outcome)


@pytest.fixture
def stub_genai(monkeypatch):
    """Replace genai.Client; returns a setter for the next call's outcome."""
    created = []
    closed = []

    def install(outcome):
        models = StubModels(outcome)

        def fake_client(api_key, http_options):
            async def aclose():
                closed.append(("async", api_key))

            created.append(SimpleNamespace(api_key=api_key, http_options=http_options))
            return SimpleNamespace(
                aio=SimpleNamespace(models=models, aclose=aclose),
                close=lambda: closed.append(("sync", api_key)),
            )

        monkeypatch.setattr(gemini_service.genai, "Client", fake_client)
        return models

    install.created = created
    install.closed = closed
    return install


def _using(slot, api_key=None):
    """Run a lease to completion and return the client it handed out."""
    async def use():
        async with slot.lease(api_key) as client:
            return client

    return asyncio.run(use())


@pytest.mark.parametrize("key", ["", "   ", None])
def test_empty_key_rejected(key):
    with pytest.raises(ConfigError):
        GeminiClient(key)


def test_generate_returns_text(stub_genai):
    models = stub_genai("Risk Score: 3")
    client = GeminiClient("secret-key", model="gemini-test", timeout=30)

    assert asyncio.run(client.generate("prompt")) == "Risk Score: 3"
    assert models.calls[0]["model"] == "gemini-test"
    assert models.calls[0]["contents"] == "prompt"
    assert stub_genai.created[0].api_key == "secret-key"
    assert stub_genai.created[0].http_options.timeout == 30000


def test_aclose_releases_both_pools(stub_genai):
    stub_genai("Risk Score: 3")
    client = GeminiClient("secret-key")

    asyncio.run(client.aclose())

    assert stub_genai.closed == [("async", "secret-key"), ("sync", "secret-key")]


def test_timeout_maps_to_network_error(stub_genai):
    stub_genai(httpx.ReadTimeout("read timed out"))
    client = GeminiClient("secret-key")

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(client.generate("prompt"))
    assert excinfo.value.message == "timeout"


def test_connection_failure_maps_to_network_error(stub_genai):
    stub_genai(httpx.ConnectError("connection refused"))

    with pytest.raises(NetworkError, match="connection refused"):
        asyncio.run(GeminiClient("secret-key").generate("prompt"))


def test_unexpected_failure_maps_to_llm_error(stub_genai):
    stub_genai(RuntimeError("quota exhausted"))

    with pytest.raises(LLMError, match="quota exhausted"):
        asyncio.run(GeminiClient("secret-key").generate("prompt"))


def test_empty_reply_is_an_error(stub_genai):
    stub_genai("")

    with pytest.raises(LLMError):
        asyncio.run(GeminiClient("secret-key").generate("prompt"))


def test_slot_starts_unconfigured():
    slot = ClientSlot(factory=lambda key: FakeLLM())

    assert slot.get() is None
    assert not slot.is_configured
    with pytest.raises(ConfigError, match="API key not configured"):
        _using(slot)


def test_slot_last_writer_wins():
    slot = ClientSlot(factory=lambda key: FakeLLM(reply=key))

    first = slot.set("key-one")
    second = slot.set("key-two")

    assert first is not second
    assert slot.get() is second
    assert _using(slot) is second


def test_request_key_does_not_touch_slot():
    slot = ClientSlot(factory=lambda key: FakeLLM(reply=key))
    configured = slot.set("global-key")

    scoped = _using(slot, "request-key")

    assert scoped is not configured
    assert scoped.reply == "request-key"
    assert slot.get() is configured
    assert _using(slot, "  ") is configured


def test_request_scoped_client_closed_after_lease():
    slot = ClientSlot(factory=lambda key: FakeLLM(reply=key))
    configured = slot.set("global-key")

    scoped = _using(slot, "request-key")

    assert scoped.close_count == 1
    assert configured.close_count == 0


def test_request_scoped_client_closed_on_failure():
    scoped = FakeLLM()
    slot = ClientSlot(factory=lambda key: scoped)

    async def fail():
        async with slot.lease("request-key"):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(fail())
    assert scoped.close_count == 1


def test_replaced_client_closed_when_idle():
    slot = ClientSlot(factory=lambda key: FakeLLM(reply=key))
    first = slot.set("key-one")

    slot.set("key-two")
    asyncio.run(slot.close_idle())

    assert first.close_count == 1


def test_replaced_client_kept_open_while_leased():
    slot = ClientSlot(factory=lambda key: FakeLLM(reply=key))
    first = slot.set("key-one")

    async def rotate_during_request():
        async with slot.lease() as client:
            slot.set("key-two")
            await slot.close_idle()
            assert client.close_count == 0
        return client

    assert asyncio.run(rotate_during_request()) is first
    assert first.close_count == 1
    assert slot.get().close_count == 0


def test_slot_aclose_closes_everything():
    slot = ClientSlot(factory=lambda key: FakeLLM(reply=key))
    first = slot.set("key-one")
    second = slot.set("key-two")

    asyncio.run(slot.aclose())

    assert (first.close_count, second.close_count) == (1, 1)
    assert not slot.is_configured


def test_slot_status_hides_key():
    slot = ClientSlot(factory=lambda key: FakeLLM())
    slot.set("super-secret-value")

    status = slot.status()
    assert status == {"configured": True, "model": "fake-model"}
