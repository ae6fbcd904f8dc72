"""Tests for LLM settings and call wiring."""

from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from pocketgraph.tools import llm
from pocketgraph.tools.llm import LLMConfigError, LLMSettings, call_llm, call_llm_async


@pytest.fixture
def no_dotenv(monkeypatch):
    """Keep a developer's .env file out of the environment."""
    monkeypatch.setattr(llm, "load_dotenv", lambda: False)


def fake_call(model, client=None, call_params=None):
    """Stand-in for the provider decorator: echoes model and prompt."""

    def decorator(prompt_fn):
        def wrapped(prompt):
            return SimpleNamespace(content=f"{model}|{call_params['temperature']}|{prompt_fn(prompt)}")

        async def wrapped_async(prompt):
            return SimpleNamespace(content=f"{model}|{call_params['temperature']}|{await prompt_fn(prompt)}")

        return wrapped_async if prompt_fn is llm._user_prompt_async else wrapped

    return decorator


class TestLLMSettings:
    def test_from_env(self, monkeypatch, no_dotenv):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
        monkeypatch.delenv("OPENAI_EMBEDDING_MODEL", raising=False)
        settings = LLMSettings.from_env()
        assert settings.api_key == "sk-env"
        assert settings.model == "gpt-test"
        assert settings.embedding_model == "text-embedding-3-small"

    def test_missing_key(self, monkeypatch, no_dotenv):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(LLMConfigError, match="OPENAI_API_KEY"):
            LLMSettings.from_env().require_api_key()

    def test_api_key_hidden_from_repr(self):
        assert "sk-secret" not in repr(LLMSettings(api_key="sk-secret"))

    def test_temperature_bounds(self):
        with pytest.raises(ValidationError):
            LLMSettings(temperature=3)


class TestCallLLM:
    def test_call_requires_key(self):
        with pytest.raises(LLMConfigError):
            call_llm("hello", LLMSettings())

    def test_call_returns_content(self, monkeypatch):
        monkeypatch.setattr(llm.openai, "call", fake_call)
        settings = LLMSettings(api_key="sk-test", model="gpt-test", temperature=0.5)
        assert call_llm("hello", settings) == "gpt-test|0.5|hello"

    async def test_async_call_returns_content(self, monkeypatch):
        monkeypatch.setattr(llm.openai, "call", fake_call)
        settings = LLMSettings(api_key="sk-test", model="gpt-test")
        assert await call_llm_async("hello", settings) == "gpt-test|0.3|hello"
