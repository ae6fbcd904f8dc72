"""Tests for the concurrent scraper pipeline."""

import asyncio
from typing import Dict, List

from pocketgraph.tools.fetch import FetchError, PageContent
from pocketgraph.workflows.scraper import SummarizePages, create_scraper_flow

PAGES = {
    "https://example.com/solar": "Solar panels convert sunlight into electricity.",
    "https://example.com/wind": "Turbines harvest wind energy offshore.",
}
BROKEN = "https://example.com/broken"


class FakeFetcher:
    def __init__(self):
        self.calls: Dict[str, int] = {}

    async def __call__(self, url: str) -> PageContent:
        self.calls[url] = self.calls.get(url, 0) + 1
        await asyncio.sleep(0.01 if url.endswith("solar") else 0)
        if url == BROKEN:
            raise FetchError(url, status=503)
        return PageContent(url=url, title=url.rsplit("/", 1)[-1], content=PAGES[url])


async def summarize(prompt: str) -> str:
    return f"summary of {len(prompt)} chars"


async def unavailable(prompt: str) -> str:
    raise ConnectionError("no provider")


class TestScraperFlow:
    async def test_failed_url_does_not_abort(self, shared):
        fetcher = FakeFetcher()
        urls: List[str] = ["https://example.com/solar", BROKEN, "https://example.com/wind"]
        shared["urls"] = urls

        await create_scraper_flow(fetcher=fetcher, generator=summarize).run_async(shared)

        assert [page.url if page else None for page in shared["pages"]] == [
            urls[0], None, urls[2]
        ]
        assert shared["errors"] == {BROKEN: f"Failed to fetch {BROKEN}: HTTP 503"}
        # the broken URL used both attempts; the others succeeded first time
        assert fetcher.calls == {urls[0]: 1, BROKEN: 2, urls[2]: 1}
        assert set(shared["summaries"]) == {urls[0], urls[2]}
        assert shared["summaries"][urls[0]].startswith("summary of")

    async def test_summary_fallback_uses_key_facts(self, shared):
        shared["pages"] = [
            PageContent(url="https://example.com/solar", title="solar", content=PAGES["https://example.com/solar"]),
            None,
        ]
        await SummarizePages(generator=unavailable).run_async(shared)
        assert shared["summaries"] == {
            "https://example.com/solar": (
                "solar: 6 words; keywords: Solar, panels, convert, sunlight, into, electricity."
            )
        }
