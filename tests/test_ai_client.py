from types import SimpleNamespace

import pytest

from smarttraffic.services.ai import client as ai_client
from smarttraffic.services.errors import AIServiceError


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    instances: list["FakeOpenAI"] = []
    reply = "  Traffic is light.  "

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.chat = SimpleNamespace(completions=FakeCompletions(self.reply))
        FakeOpenAI.instances.append(self)


@pytest.fixture(autouse=True)
def fake_sdk(monkeypatch):
    FakeOpenAI.instances = []
    FakeOpenAI.reply = "  Traffic is light.  "
    monkeypatch.setattr(ai_client, "OpenAI", FakeOpenAI)
    monkeypatch.setattr(ai_client.settings, "llm_api_key", "default-key")
    monkeypatch.setattr(ai_client.settings, "llm_routing_api_key", None)
    ai_client.get_openai_client.cache_clear()
    yield
    ai_client.get_openai_client.cache_clear()


def test_completion_returns_stripped_content():
    assert ai_client.get_chat_completion("How is traffic?") == "Traffic is light."

    sdk = FakeOpenAI.instances[0]
    assert sdk.kwargs["api_key"] == "default-key"
    assert sdk.kwargs["default_headers"]["X-Title"] == ai_client.settings.site_title
    request = sdk.chat.completions.kwargs
    assert request["messages"] == [{"role": "user", "content": "How is traffic?"}]
    assert request["model"] == ai_client.settings.llm_model
    assert "response_format" not in request


def test_json_mode_requests_json_object():
    ai_client.get_chat_completion("{}", json_mode=True)

    assert FakeOpenAI.instances[0].chat.completions.kwargs["response_format"] == {"type": "json_object"}


def test_clients_are_cached_per_key_type(monkeypatch):
    monkeypatch.setattr(ai_client.settings, "llm_routing_api_key", "routing-key")

    first = ai_client.get_openai_client("default")
    assert ai_client.get_openai_client("default") is first
    routing = ai_client.get_openai_client("routing")

    assert routing is not first
    assert routing.kwargs["api_key"] == "routing-key"


def test_routing_key_falls_back_to_default():
    assert ai_client.get_openai_client("routing").kwargs["api_key"] == "default-key"


def test_missing_key_raises(monkeypatch):
    monkeypatch.setattr(ai_client.settings, "llm_api_key", None)

    with pytest.raises(AIServiceError):
        ai_client.get_chat_completion("hello")


def test_empty_reply_raises():
    FakeOpenAI.reply = ""

    with pytest.raises(AIServiceError):
        ai_client.get_chat_completion("hello")
