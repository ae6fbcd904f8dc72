"""Embeddings and a small in-memory vector index."""

import hashlib
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from pocketgraph.core.logging import LogComponent, get_logger
from pocketgraph.tools.llm import LLMSettings

EMBEDDING_DIM = 384

async def get_embedding(text: str, settings: Optional[LLMSettings] = None) -> List[float]:
    """Embed ``text`` with the configured OpenAI embedding model."""
    settings = settings or LLMSettings.from_env()
    client = AsyncOpenAI(api_key=settings.require_api_key())
    response = await client.embeddings.create(model=settings.embedding_model, input=text)
    get_logger(LogComponent.TOOLS).debug(
        f"Embedded {len(text)} chars with {settings.embedding_model}"
    )
    return list(response.data[0].embedding)

def mock_embedding(text: str, dim: int = EMBEDDING_DIM) -> List[float]:
    """Deterministic stand-in embedding for offline runs and tests."""
    seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:4], "big")
    return [math.sin(seed + i) * 0.1 for i in range(dim)]

def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors (0.0 if either is zero)."""
    if len(a) != len(b):
        raise ValueError(f"Vectors must have the same length ({len(a)} != {len(b)})")
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    norm = np.linalg.norm(va) * np.linalg.norm(vb)
    if norm == 0:
        return 0.0
    return float(np.dot(va, vb) / norm)

class VectorIndex(BaseModel):
    """Flat cosine-similarity index over embedding vectors.

    Attributes:
        vectors: Stored embeddings, addressed by insertion position
    """
    vectors: List[List[float]] = Field(default_factory=list)

    @classmethod
    def build(cls, embeddings: Sequence[Sequence[float]]) -> "VectorIndex":
        return cls(vectors=[list(e) for e in embeddings])

    def __len__(self) -> int:
        return len(self.vectors)

    def search(self, query: Sequence[float], top_k: int = 1) -> List[Tuple[int, float]]:
        """Return ``(position, similarity)`` pairs, best first."""
        if not self.vectors:
            return []
        matrix = np.asarray(self.vectors, dtype=float)
        q = np.asarray(query, dtype=float)
        if matrix.shape[1] != q.shape[0]:
            raise ValueError(
                f"Query has {q.shape[0]} dimensions, index has {matrix.shape[1]}"
            )
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(q)
        scores = np.divide(matrix @ q, norms, out=np.zeros(len(matrix)), where=norms != 0)
        order = np.argsort(-scores, kind="stable")[:top_k]
        return [(int(i), float(scores[i])) for i in order]
