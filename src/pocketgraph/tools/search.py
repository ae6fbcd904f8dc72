"""Web search helpers.

Features:
- A deterministic offline search backend for demos and tests
- An async rate limiter that spaces out calls to any search backend
- Formatting results into prompt context
"""

import asyncio
from typing import Awaitable, Callable, List, Optional
from urllib.parse import quote

from pydantic import BaseModel

from pocketgraph.core.logging import LogComponent, get_logger

class SearchResult(BaseModel):
    """One hit returned by a search backend."""
    title: str
    link: str
    snippet: str = ""

SearchBackend = Callable[[str], Awaitable[List[SearchResult]]]

async def mock_search(query: str, delay: float = 0.0) -> List[SearchResult]:
    """Return three canned results for ``query`` without touching the network."""
    if delay:
        await asyncio.sleep(delay)
    quoted = quote(query)
    return [
        SearchResult(
            title=f"Search results for: {query}",
            link=f"https://example.com/search?q={quoted}",
            snippet=f'This is a mock search result for "{query}".',
        ),
        SearchResult(
            title=f"Information about {query}",
            link=f"https://wikipedia.org/wiki/{quoted}",
            snippet=f"Encyclopedia article about {query}.",
        ),
        SearchResult(
            title=f"Latest news on {query}",
            link=f"https://news.example.com/{quoted}",
            snippet=f"Recent news and updates about {query}.",
        ),
    ]

class RateLimitedSearch:
    """Wrap a search backend so calls start at least ``min_interval`` seconds apart.

    Example:
        search = RateLimitedSearch(mock_search, min_interval=1.0)
        results = await search("solar storage")
    """

    def __init__(self, backend: SearchBackend = mock_search, min_interval: float = 1.0):
        self.backend = backend
        self.min_interval = min_interval
        self._lock = asyncio.Lock()
        self._last_call: Optional[float] = None

    async def __call__(self, query: str) -> List[SearchResult]:
        async with self._lock:
            loop = asyncio.get_running_loop()
            if self._last_call is not None:
                remaining = self.min_interval - (loop.time() - self._last_call)
                if remaining > 0:
                    get_logger(LogComponent.TOOLS).debug(
                        f"Rate limiting search for {remaining:.2f}s"
                    )
                    await asyncio.sleep(remaining)
            self._last_call = loop.time()
        return await self.backend(query)

def format_results(results: List[SearchResult]) -> str:
    """Render results as prompt context, separated by ``---`` lines."""
    return "\n---\n".join(
        f"Title: {r.title}\nURL: {r.link}\nContent: {r.snippet}\n" for r in results
    )
