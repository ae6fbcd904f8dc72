"""LLM calls through Mirascope's OpenAI provider.

The engine treats these as ordinary fallible ``exec`` bodies: wrap them in a
Node/AsyncNode with ``max_retries`` to get retries and a fallback.

Settings come from the environment (a ``.env`` file is honoured):
- OPENAI_API_KEY (required)
- OPENAI_MODEL (default gpt-4o-mini)
- OPENAI_EMBEDDING_MODEL (default text-embedding-3-small)
"""

import os
from typing import Optional

from dotenv import load_dotenv
from mirascope.core import openai
from openai import AsyncOpenAI, OpenAI
from pydantic import BaseModel, Field

from pocketgraph.core.logging import LogComponent, get_logger

class LLMConfigError(RuntimeError):
    """Raised when the LLM provider is not configured."""

class LLMSettings(BaseModel):
    """Provider settings for LLM and embedding calls."""
    api_key: Optional[str] = Field(default=None, repr=False)
    model: str = Field(default="gpt-4o-mini")
    embedding_model: str = Field(default="text-embedding-3-small")
    temperature: float = Field(default=0.3, ge=0, le=2)

    @classmethod
    def from_env(cls) -> "LLMSettings":
        load_dotenv()
        return cls(
            api_key=os.getenv("OPENAI_API_KEY"),
            model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            embedding_model=os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"),
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise LLMConfigError("OPENAI_API_KEY not found in environment variables")
        return self.api_key

def _user_prompt(prompt: str) -> str:
    return prompt

async def _user_prompt_async(prompt: str) -> str:
    return prompt

def call_llm(prompt: str, settings: Optional[LLMSettings] = None) -> str:
    """Send a single user prompt and return the generated text."""
    settings = settings or LLMSettings.from_env()
    api_key = settings.require_api_key()

    logger = get_logger(LogComponent.TOOLS)
    logger.debug(f"LLM call ({settings.model}): {prompt[:80]!r}")

    call = openai.call(
        settings.model,
        client=OpenAI(api_key=api_key),
        call_params={"temperature": settings.temperature},
    )(_user_prompt)
    response = call(prompt)
    return response.content

async def call_llm_async(prompt: str, settings: Optional[LLMSettings] = None) -> str:
    """Async variant of :func:`call_llm`."""
    settings = settings or LLMSettings.from_env()
    api_key = settings.require_api_key()

    logger = get_logger(LogComponent.TOOLS)
    logger.debug(f"LLM call ({settings.model}): {prompt[:80]!r}")

    call = openai.call(
        settings.model,
        client=AsyncOpenAI(api_key=api_key),
        call_params={"temperature": settings.temperature},
    )(_user_prompt_async)
    response = await call(prompt)
    return response.content
