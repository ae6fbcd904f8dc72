"""Tests for the retrieval-augmented generation pipeline."""

import asyncio
from typing import List

import pytest

from pocketgraph.tools.embedding import mock_embedding
from pocketgraph.workflows.rag import (
    GenerateAnswer,
    RetrieveDocs,
    create_offline_flow,
    create_rag_flow,
)

DOCUMENTS = [
    "Solar panels convert sunlight into electricity. They work best in direct sun.",
    "Batteries store energy for later use. Lithium cells dominate the market.",
]


async def embed(text: str) -> List[float]:
    # uneven delays so concurrent embeddings finish out of order
    await asyncio.sleep(0.001 * (len(text) % 3))
    return mock_embedding(text, dim=32)


class RecordingGenerator:
    def __init__(self, reply: str = "Batteries."):
        self.reply = reply
        self.prompts: List[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


async def failing_generator(prompt: str) -> str:
    raise ConnectionError("provider down")


class TestOfflineFlow:
    async def test_indexes_every_chunk(self, shared):
        shared["documents"] = DOCUMENTS
        await create_offline_flow(embedder=embed, chunk_size=60).run_async(shared)

        assert shared["all_chunks"] == [
            "Solar panels convert sunlight into electricity",
            "They work best in direct sun",
            "Batteries store energy for later use",
            "Lithium cells dominate the market",
        ]
        assert shared["all_embeddings"] == [
            mock_embedding(chunk, dim=32) for chunk in shared["all_chunks"]
        ]
        assert len(shared["index"]) == 4


class TestRagFlow:
    async def test_answers_from_best_chunk(self, shared):
        generator = RecordingGenerator()
        shared["documents"] = DOCUMENTS
        shared["question"] = "Batteries store energy for later use"

        flow = create_rag_flow(embedder=embed, generator=generator, chunk_size=60)
        action = await flow.run_async(shared)

        assert action == "default"
        assert shared["retrieved_chunk"] == "Batteries store energy for later use"
        assert shared["answer"] == "Batteries."
        assert len(generator.prompts) == 1
        assert "Context: Batteries store energy for later use" in generator.prompts[0]
        assert "Question: Batteries store energy for later use" in generator.prompts[0]


class TestRagNodes:
    def test_retrieve_without_index(self, shared):
        shared["query_embedding"] = [0.1, 0.2]
        with pytest.raises(ValueError, match="No index"):
            RetrieveDocs().run(shared)

    async def test_generation_fallback(self, shared):
        shared["question"] = "What stores energy?"
        shared["retrieved_chunk"] = "Batteries store energy for later use"

        await GenerateAnswer(generator=failing_generator, max_retries=2).run_async(shared)
        assert shared["answer"] == (
            "Could not generate an answer. Most relevant context: "
            "Batteries store energy for later use"
        )
