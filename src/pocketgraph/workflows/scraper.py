"""
Concurrent Scraper Workflow

    fetch_pages (all URLs concurrently) -> summarize

A page that still fails after its retries is recorded with its error instead
of aborting the batch.

Shared store keys:
    urls      list of URLs (input)
    pages     list of PageContent, or None for failed URLs, in URL order
    errors    {url: error message}
    summaries {url: summary}
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import Field

from pocketgraph.core.graph import AsyncFlow, AsyncNode, AsyncParallelBatchNode, SharedStore
from pocketgraph.core.logging import LogComponent, get_logger
from pocketgraph.tools.fetch import PageContent, clean_content, extract_key_info, fetch_url
from pocketgraph.tools.llm import call_llm_async

Fetcher = Callable[[str], Awaitable[PageContent]]
Generator = Callable[[str], Awaitable[str]]

class FetchPages(AsyncParallelBatchNode):
    fetcher: Fetcher = Field(default=fetch_url, repr=False)

    async def prep_async(self, shared: SharedStore) -> List[str]:
        return shared.get("urls", [])

    async def exec_async(self, url: str) -> PageContent:
        return await self.fetcher(url)

    async def exec_fallback_async(self, url: str, exc: Exception) -> Dict[str, str]:
        return {"url": url, "error": str(exc)}

    async def post_async(self, shared: SharedStore, prep_res: List[str], exec_res: List[Any]) -> str:
        shared["pages"] = [page if isinstance(page, PageContent) else None for page in exec_res]
        shared["errors"] = {
            item["url"]: item["error"] for item in exec_res if isinstance(item, dict)
        }
        get_logger(LogComponent.WORKFLOW).info(
            f"Fetched {len(prep_res) - len(shared['errors'])}/{len(prep_res)} pages"
        )
        return "default"

class SummarizePages(AsyncNode):
    """Summarize every fetched page with the LLM, falling back to key facts."""

    generator: Generator = Field(default=call_llm_async, repr=False)

    async def prep_async(self, shared: SharedStore) -> List[PageContent]:
        return [page for page in shared.get("pages", []) if page is not None]

    async def exec_async(self, pages: List[PageContent]) -> Dict[str, str]:
        summaries = {}
        for page in pages:
            text = clean_content(page.content)
            summaries[page.url] = await self.generator(
                f"Summarize this article in two sentences.\n\nTitle: {page.title}\n\n{text}"
            )
        return summaries

    async def exec_fallback_async(self, pages: List[PageContent], exc: Exception) -> Dict[str, str]:
        get_logger(LogComponent.WORKFLOW).warning(f"LLM summaries unavailable: {exc!r}")
        summaries = {}
        for page in pages:
            info = extract_key_info(page.content)
            summaries[page.url] = (
                f"{page.title or page.url}: {info['word_count']} words; "
                f"keywords: {', '.join(info['keywords'])}"
            )
        return summaries

    async def post_async(
        self, shared: SharedStore, prep_res: Any, exec_res: Dict[str, str]
    ) -> Optional[str]:
        shared["summaries"] = exec_res
        return "default"

def create_scraper_flow(
    fetcher: Fetcher = fetch_url, generator: Generator = call_llm_async
) -> AsyncFlow:
    fetch = FetchPages(id="fetch_pages", fetcher=fetcher, max_retries=2, wait=0.5)
    summarize = SummarizePages(id="summarize", generator=generator, max_retries=2, wait=1)
    fetch.then(summarize)
    return AsyncFlow(start=fetch, id="scraper")
