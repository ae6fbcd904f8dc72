"""
Search Agent Workflow

    search -> extract -> answer

Shared store keys:
    search_query       question to answer (input)
    search_results     list of SearchResult
    extracted_content  top results rendered as prompt context
    answer             generated answer, or an apology on failure
"""

from typing import Awaitable, Callable, List

from pydantic import Field

from pocketgraph.core.graph import AsyncFlow, AsyncNode, Node, SharedStore
from pocketgraph.core.logging import LogComponent, get_logger
from pocketgraph.tools.llm import call_llm_async
from pocketgraph.tools.search import (
    RateLimitedSearch,
    SearchBackend,
    SearchResult,
    format_results,
    mock_search,
)

Generator = Callable[[str], Awaitable[str]]

ANSWER_PROMPT = """Based on the search results below, provide a comprehensive and accurate answer to the user's question. Include relevant details and cite sources when possible.

Search Query and Results:
{query}

{content}

Please provide a well-structured answer that directly addresses the user's question:"""

FALLBACK_ANSWER = (
    "I'm sorry, I couldn't generate a proper answer based on the search results. "
    "Please try rephrasing your question or try again later."
)

class SearchWeb(AsyncNode):
    """Run the query against the search backend; degrade to a placeholder hit."""

    backend: SearchBackend = Field(default=mock_search, repr=False)

    async def prep_async(self, shared: SharedStore) -> str:
        return shared.get("search_query", "")

    async def exec_async(self, query: str) -> List[SearchResult]:
        if not query.strip():
            raise ValueError("Search query cannot be empty")
        get_logger(LogComponent.WORKFLOW).info(f"🔍 Searching for: {query}")
        return await self.backend(query)

    async def exec_fallback_async(self, query: str, exc: Exception) -> List[SearchResult]:
        get_logger(LogComponent.WORKFLOW).error(f"Search failed, using fallback: {exc}")
        return [
            SearchResult(
                title="Search unavailable",
                link="https://example.com",
                snippet="Search service is currently unavailable. Please try again later.",
            )
        ]

    async def post_async(
        self, shared: SharedStore, prep_res: str, exec_res: List[SearchResult]
    ) -> str:
        shared["search_results"] = exec_res
        get_logger(LogComponent.WORKFLOW).info(f"📊 Found {len(exec_res)} search results")
        return "default"

class ExtractContent(Node):
    limit: int = Field(default=5, ge=1)

    def prep(self, shared: SharedStore) -> List[SearchResult]:
        return shared.get("search_results", [])

    def exec(self, results: List[SearchResult]) -> str:
        return format_results(results[: self.limit])

    def post(self, shared: SharedStore, prep_res: List[SearchResult], exec_res: str) -> str:
        shared["extracted_content"] = exec_res
        return "default"

class AnswerQuestion(AsyncNode):
    generator: Generator = Field(default=call_llm_async, repr=False)

    async def prep_async(self, shared: SharedStore) -> str:
        return ANSWER_PROMPT.format(
            query=shared.get("search_query", ""),
            content=shared.get("extracted_content", ""),
        )

    async def exec_async(self, prompt: str) -> str:
        return await self.generator(prompt)

    async def exec_fallback_async(self, prompt: str, exc: Exception) -> str:
        get_logger(LogComponent.WORKFLOW).error(f"Answer generation failed: {exc!r}")
        return FALLBACK_ANSWER

    async def post_async(self, shared: SharedStore, prep_res: str, exec_res: str) -> str:
        shared["answer"] = exec_res
        return "default"

def create_search_flow(
    backend: SearchBackend = mock_search,
    generator: Generator = call_llm_async,
    limit: int = 5,
    min_interval: float = 1.0,
) -> AsyncFlow:
    search = SearchWeb(
        id="search",
        backend=RateLimitedSearch(backend, min_interval=min_interval),
        max_retries=2,
        wait=2,
    )
    extract = ExtractContent(id="extract", limit=limit)
    answer = AnswerQuestion(id="answer", generator=generator, max_retries=3, wait=1)
    search.then(extract).then(answer)
    return AsyncFlow(start=search, id="search_agent")
