"""
Content Writer Example

This example demonstrates:
1. Outlining a piece from a structured request
2. Drafting every section concurrently, with templated fallbacks
3. SEO scoring and tone adaptation before rendering markdown

Usage:
    python examples/workflows/07_writer_workflow.py
"""

import asyncio

from pocketgraph.core.logging import LogComponent, LogLevel, configure_logging, get_logger
from pocketgraph.workflows import create_writer_flow
from pocketgraph.workflows.writer import ContentRequest, ContentType, Length, Tone

configure_logging(
    default_level=LogLevel.INFO,
    component_levels={
        LogComponent.NODES: LogLevel.INFO,
        LogComponent.WORKFLOW: LogLevel.INFO,
    },
)

logger = get_logger(LogComponent.WORKFLOW)

REQUESTS = [
    ContentRequest(
        topic="Machine Learning Basics",
        type=ContentType.TUTORIAL,
        target_audience="beginners",
        tone=Tone.CONVERSATIONAL,
        length=Length.MEDIUM,
        keywords=["machine learning", "AI", "tutorial"],
    ),
    ContentRequest(
        topic="Web Development Trends",
        type=ContentType.BLOG,
        target_audience="developers",
        tone=Tone.CASUAL,
        length=Length.SHORT,
        keywords=["web development", "trends"],
    ),
]

async def main() -> None:
    flow = create_writer_flow()
    shared = {}
    for request in REQUESTS:
        logger.info(f"🚀 Writing: {request.topic} ({request.type.value}, {request.tone.value})")
        shared["content_request"] = request
        await flow.run_async(shared)
        print("\n" + shared["final_output"])

if __name__ == "__main__":
    asyncio.run(main())
