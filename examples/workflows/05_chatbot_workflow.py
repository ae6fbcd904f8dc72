"""
Conversational Chatbot Example

This example demonstrates:
1. Running one flow repeatedly over a persistent shared store
2. Conversation history carried between turns
3. A friendly fallback reply when the LLM is unavailable

Usage:
    python examples/workflows/05_chatbot_workflow.py
"""

import asyncio

from pocketgraph.core.logging import LogComponent, LogLevel, configure_logging, get_logger
from pocketgraph.workflows import create_chatbot_flow

configure_logging(
    default_level=LogLevel.WARNING,
    component_levels={
        LogComponent.WORKFLOW: LogLevel.INFO,
    },
)

logger = get_logger(LogComponent.WORKFLOW)

async def main() -> None:
    flow = create_chatbot_flow()
    shared = {"conversation_history": []}
    logger.info("Starting chat session. Type 'exit' or 'quit' to stop.")

    while True:
        try:
            message = input("\nYou: ")
        except (EOFError, KeyboardInterrupt):
            break
        if message.strip().lower() in ("exit", "quit"):
            break
        if not message.strip():
            continue

        shared["current_message"] = message
        await flow.run_async(shared)
        print(f"\nBot: {shared['bot_response']}")

    logger.info(f"Chat session ended after {len(shared['conversation_history'])} turns.")

if __name__ == "__main__":
    asyncio.run(main())
