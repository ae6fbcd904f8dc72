"""Text chunking for retrieval pipelines."""

import re
from pathlib import Path
from typing import List

_SENTENCE_END = re.compile(r"[.!?]+")

def chunk_text(text: str, chunk_size: int = 1000) -> List[str]:
    """Split ``text`` into chunks of whole sentences no longer than ``chunk_size``.

    Sentences are rejoined with ". ". A sentence longer than ``chunk_size`` is
    cut into ``chunk_size`` pieces.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    chunks: List[str] = []
    current = ""
    for sentence in (s.strip() for s in _SENTENCE_END.split(text)):
        if not sentence:
            continue
        if current and len(current) + len(sentence) + 2 > chunk_size:
            chunks.append(current)
            current = ""
        while len(sentence) > chunk_size:
            chunks.append(sentence[:chunk_size])
            sentence = sentence[chunk_size:].strip()
        if sentence:
            current = f"{current}. {sentence}" if current else sentence

    if current:
        chunks.append(current)
    return chunks

def read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")
