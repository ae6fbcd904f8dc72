"""
Retrieval-Augmented Generation Example

This example demonstrates:
1. Chunking documents and embedding the chunks concurrently
2. Nesting an indexing flow and an answering flow in one run
3. Falling back to the retrieved context when the LLM is unavailable

Usage:
    python examples/workflows/02_rag_workflow.py "How do batteries help the grid?"
    python examples/workflows/02_rag_workflow.py --offline "How do batteries help the grid?"

``--offline`` swaps in deterministic mock embeddings and skips the LLM, so no
API key is needed.
"""

import asyncio
import sys
from typing import List

from pocketgraph.core.logging import LogComponent, LogLevel, configure_logging, get_logger
from pocketgraph.tools.embedding import get_embedding, mock_embedding
from pocketgraph.tools.llm import call_llm_async
from pocketgraph.workflows import create_rag_flow

configure_logging(default_level=LogLevel.INFO)

logger = get_logger(LogComponent.WORKFLOW)

DOCUMENTS = [
    "Solar panels convert sunlight into electricity. Output peaks around midday "
    "and drops to zero at night.",
    "Grid batteries store surplus energy when demand is low. They release it in the "
    "evening peak, smoothing out the supply from solar farms.",
    "Pumped hydro moves water uphill when power is cheap. It is the oldest form of "
    "grid-scale storage and still the largest by capacity.",
]

async def offline_embedding(text: str) -> List[float]:
    return mock_embedding(text)

async def offline_answer(prompt: str) -> str:
    raise ConnectionError("LLM disabled in offline mode")

async def main(question: str, offline: bool) -> None:
    flow = create_rag_flow(
        embedder=offline_embedding if offline else get_embedding,
        generator=offline_answer if offline else call_llm_async,
    )
    shared = {"documents": DOCUMENTS, "question": question}

    logger.info(f"🔎 Question: {question}")
    await flow.run_async(shared)

    print(f"\nRetrieved: {shared['retrieved_chunk']}")
    print(f"Answer: {shared['answer']}")

if __name__ == "__main__":
    args = sys.argv[1:]
    offline = "--offline" in args
    question = " ".join(a for a in args if a != "--offline") or "How do batteries help the grid?"
    asyncio.run(main(question, offline))
