"""
Conversational Chatbot Workflow

    build_context -> respond

The same flow is run once per user message over one persistent shared
store, so every turn sees the conversation so far.

Shared store keys:
    current_message       the user's message for this turn (input, cleared after)
    conversation_history  list of ChatTurn, most recent last, capped
    context               prompt context built from history and the message
    bot_response          reply for this turn
"""

from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from pydantic import BaseModel, Field

from pocketgraph.core.graph import AsyncFlow, AsyncNode, SharedStore
from pocketgraph.core.logging import LogComponent, get_logger
from pocketgraph.tools.llm import call_llm_async

Generator = Callable[[str], Awaitable[str]]

RESPONSE_PROMPT = """You are a helpful and friendly chatbot. Respond naturally to the user's message.

Context: {context}

Provide a helpful, conversational response:"""

FALLBACK_REPLY = (
    "I'm sorry, I'm having trouble processing your request right now. "
    "Could you try again?"
)

class ChatTurn(BaseModel):
    """One exchange in the conversation."""
    user: str
    bot: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

def format_context(history: List[ChatTurn], message: str) -> str:
    context = ""
    if history:
        context = "Previous conversation:\n"
        for turn in history:
            context += f"User: {turn.user}\nBot: {turn.bot}\n\n"
    return context + f"Current message: {message}"

class BuildContext(AsyncNode):
    async def prep_async(self, shared: SharedStore) -> str:
        return format_context(
            shared.get("conversation_history", []), shared.get("current_message", "")
        )

    async def post_async(self, shared: SharedStore, prep_res: str, exec_res: str) -> str:
        shared["context"] = exec_res
        return "default"

class Respond(AsyncNode):
    """Ask the LLM for a reply and append the turn to the history."""

    generator: Generator = Field(default=call_llm_async, repr=False)
    history_limit: int = Field(default=10, ge=1)

    async def prep_async(self, shared: SharedStore) -> str:
        return shared.get("context", "")

    async def exec_async(self, context: str) -> str:
        return await self.generator(RESPONSE_PROMPT.format(context=context))

    async def exec_fallback_async(self, context: str, exc: Exception) -> str:
        get_logger(LogComponent.WORKFLOW).warning(f"Reply generation failed: {exc!r}")
        return FALLBACK_REPLY

    async def post_async(self, shared: SharedStore, prep_res: str, exec_res: str) -> Optional[str]:
        shared["bot_response"] = exec_res
        history = shared.setdefault("conversation_history", [])
        history.append(ChatTurn(user=shared.get("current_message", ""), bot=exec_res))
        del history[:-self.history_limit]
        shared["current_message"] = ""
        return "default"

def create_chatbot_flow(generator: Generator = call_llm_async, history_limit: int = 10) -> AsyncFlow:
    context = BuildContext(id="build_context")
    respond = Respond(
        id="respond", generator=generator, history_limit=history_limit, max_retries=3, wait=1
    )
    context.then(respond)
    return AsyncFlow(start=context, id="chatbot")
