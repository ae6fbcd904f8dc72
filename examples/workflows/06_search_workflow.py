"""
Search Agent Example

This example demonstrates:
1. A linear search -> extract -> answer pipeline
2. Rate-limited calls to a search backend
3. Fallbacks on both the search and the answer step

The bundled backend returns canned results; pass any coroutine
``query -> List[SearchResult]`` to ``create_search_flow(backend=...)`` to
search for real.

Usage:
    python examples/workflows/06_search_workflow.py "What is grid-scale storage?"
"""

import asyncio
import sys

from pocketgraph.core.logging import LogComponent, LogLevel, configure_logging, get_logger
from pocketgraph.workflows import create_search_flow

configure_logging(
    default_level=LogLevel.INFO,
    component_levels={
        LogComponent.WORKFLOW: LogLevel.INFO,
    },
)

logger = get_logger(LogComponent.WORKFLOW)

async def main(query: str) -> None:
    shared = {"search_query": query}
    await create_search_flow().run_async(shared)

    for result in shared["search_results"]:
        logger.info(f"Source: {result.link}")
    print(f"\n{shared['answer']}")

if __name__ == "__main__":
    asyncio.run(main(" ".join(sys.argv[1:]) or "artificial intelligence"))
