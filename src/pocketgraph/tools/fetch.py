"""Content fetching over HTTP.

Features:
- Async page retrieval with aiohttp
- Title extraction
- Whitespace/character cleanup and light keyword extraction
"""

import re
from datetime import datetime
from typing import Dict, List, Optional

import aiohttp
from pydantic import BaseModel, Field

from pocketgraph.core.logging import LogComponent, get_logger

STOP_WORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of',
    'with', 'by', 'is', 'are', 'was', 'were', 'be', 'been', 'have', 'has',
    'had', 'do', 'does', 'did', 'will', 'would', 'could', 'should', 'may',
    'might', 'can', 'this', 'that', 'these', 'those',
})

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")

class FetchError(RuntimeError):
    """Raised when a URL cannot be fetched."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        detail = f"HTTP {status}" if status is not None else reason
        super().__init__(f"Failed to fetch {url}: {detail}")

class PageContent(BaseModel):
    """A fetched page."""
    url: str
    title: str = ""
    content: str
    fetched_at: datetime = Field(default_factory=datetime.now)

async def fetch_url(url: str, timeout: float = 10.0) -> PageContent:
    """Fetch ``url`` and return its title and text content.

    Raises:
        FetchError: On a non-2xx status or a transport error
    """
    logger = get_logger(LogComponent.TOOLS)
    logger.info(f"Fetching {url}")

    try:
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=timeout)
        ) as session:
            async with session.get(url) as response:
                if response.status >= 300:
                    raise FetchError(url, status=response.status)
                raw = await response.text()
    except aiohttp.ClientError as e:
        logger.error(f"HTTP error fetching {url}: {e}")
        raise FetchError(url, reason=str(e)) from e

    match = _TITLE_RE.search(raw)
    title = match.group(1).strip() if match else ""
    body = _TAG_RE.sub(" ", _TITLE_RE.sub(" ", raw))
    return PageContent(url=url, title=title, content=" ".join(body.split()))

def clean_content(content: str) -> str:
    """Normalize whitespace and drop characters other than words and punctuation."""
    content = re.sub(r"\s+", " ", content)
    content = re.sub(r"[^\w\s.,!?-]", "", content)
    return content.strip()

def extract_key_info(content: str) -> Dict[str, object]:
    """Count words, sentences and paragraphs and pick up to ten keywords."""
    words = content.split()
    sentences = [s for s in re.split(r"[.!?]+", content) if s.strip()]
    paragraphs = [p for p in re.split(r"\n\s*\n", content) if p.strip()]

    keywords: List[str] = []
    for word in words:
        if len(keywords) == 10:
            break
        if len(word) > 3 and word.lower() not in STOP_WORDS and word not in keywords:
            keywords.append(word)

    return {
        "word_count": len(words),
        "sentences": len(sentences),
        "paragraphs": len(paragraphs),
        "keywords": keywords,
    }
