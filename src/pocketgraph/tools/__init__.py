"""Collaborators that workflow nodes call from their exec hooks.

Importing this package pulls in the provider SDKs (mirascope/openai, aiohttp,
numpy); the core engine does not depend on it.
"""

from pocketgraph.tools.documents import chunk_text, read_text
from pocketgraph.tools.embedding import (
    EMBEDDING_DIM,
    VectorIndex,
    cosine_similarity,
    get_embedding,
    mock_embedding,
)
from pocketgraph.tools.fetch import (
    FetchError,
    PageContent,
    clean_content,
    extract_key_info,
    fetch_url,
)
from pocketgraph.tools.llm import LLMConfigError, LLMSettings, call_llm, call_llm_async
from pocketgraph.tools.search import (
    RateLimitedSearch,
    SearchResult,
    format_results,
    mock_search,
)
from pocketgraph.tools.tabular import (
    TableData,
    calculate_stats,
    filter_rows,
    parse_csv,
    read_csv_file,
)

__all__ = [
    'chunk_text',
    'read_text',
    'EMBEDDING_DIM',
    'VectorIndex',
    'cosine_similarity',
    'get_embedding',
    'mock_embedding',
    'FetchError',
    'PageContent',
    'clean_content',
    'extract_key_info',
    'fetch_url',
    'LLMConfigError',
    'LLMSettings',
    'call_llm',
    'call_llm_async',
    'RateLimitedSearch',
    'SearchResult',
    'format_results',
    'mock_search',
    'TableData',
    'calculate_stats',
    'filter_rows',
    'parse_csv',
    'read_csv_file',
]
