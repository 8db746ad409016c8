from types import SimpleNamespace

import pytest
import requests

from resume_intake.core.config import settings
from resume_intake.core.errors import ModelUnavailable
from resume_intake.services.common import llm_client
from resume_intake.services.common.llm_client import LLMClient, load_prompt

MESSAGES = [{"role": "system", "content": "s"}, {"role": "user", "content": "u"}]


def test_load_prompt_by_relative_path():
    text = load_prompt("resumes/resume_extraction.prompt.txt")
    assert text.startswith("You are a resume parsing engine.")


def test_load_prompt_missing_file():
    with pytest.raises(FileNotFoundError):
        load_prompt("nope/missing.prompt.txt")


def test_provider_selection(monkeypatch):
    monkeypatch.setattr(settings, "LLM_CHAT_MODEL", None)
    assert LLMClient().provider == "openai"
    monkeypatch.setattr(settings, "LLM_CHAT_MODEL", "llama3.2")
    client = LLMClient()
    assert client.provider == "ollama"
    assert client.model == "llama3.2"


def test_missing_api_key_is_model_unavailable(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    client = LLMClient(provider="openai")
    with pytest.raises(ModelUnavailable) as exc:
        client.chat_text(MESSAGES)
    assert "OPENAI_API_KEY" in exc.value.message


def test_openai_call_is_deterministic_and_has_no_json_mode(monkeypatch):
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        message = SimpleNamespace(content='{"full_name": "x"}')
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    fake = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    client = LLMClient(model="test-model", provider="openai")
    monkeypatch.setattr(client, "_get_openai", lambda: fake)

    assert client.chat_text(MESSAGES, timeout=5) == '{"full_name": "x"}'
    assert captured["temperature"] == 0
    assert captured["model"] == "test-model"
    assert captured["messages"] == MESSAGES
    assert "response_format" not in captured


def test_openai_empty_content_is_model_unavailable(monkeypatch):
    def create(**kwargs):
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=None))])

    fake = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    client = LLMClient(provider="openai")
    monkeypatch.setattr(client, "_get_openai", lambda: fake)
    with pytest.raises(ModelUnavailable):
        client.chat_text(MESSAGES)


class _OllamaResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}", response=self)

    def json(self):
        return self._payload


def test_ollama_chat_text(monkeypatch):
    captured = {}

    def post(url, json=None, timeout=None):
        captured.update(url=url, payload=json, timeout=timeout)
        return _OllamaResponse(payload={"message": {"content": "{}"}})

    monkeypatch.setattr(settings, "OLLAMA_BASE_URL", "http://ollama.test/")
    monkeypatch.setattr(llm_client.requests, "post", post)

    client = LLMClient(model="llama3.2", provider="ollama")
    assert client.chat_text(MESSAGES, timeout=7) == "{}"
    assert captured["url"] == "http://ollama.test/api/chat"
    assert captured["payload"]["options"]["temperature"] == 0
    assert captured["payload"]["stream"] is False
    assert "format" not in captured["payload"]
    assert captured["timeout"] == 7


def test_ollama_http_error_carries_upstream_status(monkeypatch):
    monkeypatch.setattr(settings, "OLLAMA_BASE_URL", "http://ollama.test")
    monkeypatch.setattr(
        llm_client.requests, "post",
        lambda *a, **k: _OllamaResponse(status_code=503, text="overloaded"),
    )
    client = LLMClient(provider="ollama")
    with pytest.raises(ModelUnavailable) as exc:
        client.chat_text(MESSAGES)
    assert exc.value.upstream_status == 503
    assert exc.value.status_code == 502


def test_ollama_without_base_url(monkeypatch):
    monkeypatch.setattr(settings, "OLLAMA_BASE_URL", None)
    with pytest.raises(ModelUnavailable):
        LLMClient(provider="ollama").chat_text(MESSAGES)


@pytest.mark.parametrize("payload", [{"message": "plain text"}, {"message": ["a"]}, {}, ["not", "a", "dict"]])
def test_ollama_malformed_message_is_model_unavailable(monkeypatch, payload):
    monkeypatch.setattr(settings, "OLLAMA_BASE_URL", "http://ollama.test")
    monkeypatch.setattr(llm_client.requests, "post", lambda *a, **k: _OllamaResponse(payload=payload))
    with pytest.raises(ModelUnavailable) as exc:
        LLMClient(provider="ollama").chat_text(MESSAGES)
    assert exc.value.status_code == 502
