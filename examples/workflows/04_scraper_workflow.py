"""
Concurrent Scraper Example

This example demonstrates:
1. Fetching many URLs concurrently with per-URL retries
2. Recording failed URLs instead of aborting the batch
3. LLM summaries with a keyword-based fallback

Usage:
    python examples/workflows/04_scraper_workflow.py https://example.com https://www.python.org
"""

import asyncio
import sys

from pocketgraph.core.logging import LogComponent, LogLevel, configure_logging, get_logger
from pocketgraph.workflows import create_scraper_flow

configure_logging(
    default_level=LogLevel.INFO,
    component_levels={
        LogComponent.TOOLS: LogLevel.INFO,
        LogComponent.WORKFLOW: LogLevel.INFO,
    },
)

logger = get_logger(LogComponent.WORKFLOW)

async def main(urls) -> None:
    shared = {"urls": urls}
    await create_scraper_flow().run_async(shared)

    for url, summary in shared["summaries"].items():
        print(f"\n{url}\n  {summary}")
    for url, error in shared["errors"].items():
        logger.warning(f"Skipped {url}: {error}")

if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:] or ["https://example.com"]))
