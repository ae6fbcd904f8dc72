"""Tests for embeddings and the vector index."""

from types import SimpleNamespace

import pytest

from pocketgraph.tools import embedding
from pocketgraph.tools.embedding import (
    EMBEDDING_DIM,
    VectorIndex,
    cosine_similarity,
    get_embedding,
    mock_embedding,
)
from pocketgraph.tools.llm import LLMConfigError, LLMSettings


class TestMockEmbedding:
    def test_deterministic(self):
        assert mock_embedding("solar") == mock_embedding("solar")
        assert mock_embedding("solar") != mock_embedding("wind")

    def test_dimension(self):
        assert len(mock_embedding("solar")) == EMBEDDING_DIM
        assert len(mock_embedding("solar", dim=8)) == 8


class TestCosineSimilarity:
    def test_identical_and_orthogonal(self):
        assert cosine_similarity([1.0, 0.0], [2.0, 0.0]) == pytest.approx(1.0)
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_zero_vector(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            cosine_similarity([1.0], [1.0, 2.0])


class TestVectorIndex:
    def test_search_orders_by_similarity(self):
        index = VectorIndex.build([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        assert len(index) == 3
        hits = index.search([1.0, 0.1], top_k=2)
        assert [position for position, _ in hits] == [0, 2]
        assert hits[0][1] > hits[1][1]

    def test_search_agrees_with_cosine(self):
        vectors = [mock_embedding(t, dim=16) for t in ("a", "b", "c")]
        query = mock_embedding("b", dim=16)
        (position, score), = VectorIndex.build(vectors).search(query)
        assert position == 1
        assert score == pytest.approx(cosine_similarity(vectors[1], query))

    def test_empty_index(self):
        assert VectorIndex().search([1.0, 2.0]) == []

    def test_dimension_mismatch(self):
        with pytest.raises(ValueError, match="dimensions"):
            VectorIndex.build([[1.0, 0.0]]).search([1.0, 0.0, 0.0])


class FakeEmbeddings:
    def __init__(self):
        self.requests = []

    async def create(self, model, input):
        self.requests.append((model, input))
        return SimpleNamespace(data=[SimpleNamespace(embedding=(0.5, 0.25))])


class TestGetEmbedding:
    async def test_uses_configured_model(self, monkeypatch):
        fake = FakeEmbeddings()
        keys = []

        def client_factory(api_key):
            keys.append(api_key)
            return SimpleNamespace(embeddings=fake)

        monkeypatch.setattr(embedding, "AsyncOpenAI", client_factory)
        settings = LLMSettings(api_key="sk-test", embedding_model="embed-small")

        assert await get_embedding("grid storage", settings) == [0.5, 0.25]
        assert keys == ["sk-test"]
        assert fake.requests == [("embed-small", "grid storage")]

    async def test_requires_api_key(self):
        with pytest.raises(LLMConfigError):
            await get_embedding("text", LLMSettings())
