"""
Retrieval-Augmented Generation Workflow

Offline (indexing):  chunk_docs -> embed_docs -> store_index
Online (answering):  embed_query -> retrieve -> generate_answer

``create_rag_flow`` nests both flows inside one AsyncFlow. Embedding and LLM
collaborators are injectable so the pipeline can run offline.

Shared store keys:
    documents        list of raw document texts (input)
    question         user question (input)
    all_chunks       chunk texts, in index order
    all_embeddings   chunk embeddings
    index            VectorIndex
    query_embedding  embedding of the question
    retrieved_chunk  best matching chunk
    answer           generated answer
"""

from typing import Any, Awaitable, Callable, List, Optional, Tuple

from pydantic import Field

from pocketgraph.core.graph import AsyncFlow, AsyncNode, AsyncParallelBatchNode, BatchNode, Node, SharedStore
from pocketgraph.core.logging import LogComponent, get_logger
from pocketgraph.tools.documents import chunk_text
from pocketgraph.tools.embedding import VectorIndex, get_embedding
from pocketgraph.tools.llm import call_llm_async

Embedder = Callable[[str], Awaitable[List[float]]]
Generator = Callable[[str], Awaitable[str]]

ANSWER_PROMPT = """Based on the following context, answer the question.

Context: {context}

Question: {question}

Answer:"""

###################################################################
# Offline nodes
###################################################################

class ChunkDocs(BatchNode):
    """Split every document into chunks."""

    chunk_size: int = Field(default=200, ge=1)

    def prep(self, shared: SharedStore) -> List[str]:
        return shared.get("documents", [])

    def exec(self, document: str) -> List[str]:
        return chunk_text(document, self.chunk_size)

    def post(self, shared: SharedStore, prep_res: List[str], exec_res: List[List[str]]) -> str:
        shared["all_chunks"] = [chunk for chunks in exec_res for chunk in chunks]
        get_logger(LogComponent.WORKFLOW).info(
            f"Created {len(shared['all_chunks'])} chunks from {len(prep_res)} documents"
        )
        return "default"

class EmbedDocs(AsyncParallelBatchNode):
    """Embed all chunks concurrently."""

    embedder: Embedder = Field(default=get_embedding, repr=False)

    async def prep_async(self, shared: SharedStore) -> List[str]:
        return shared.get("all_chunks", [])

    async def exec_async(self, chunk: str) -> List[float]:
        return await self.embedder(chunk)

    async def post_async(
        self, shared: SharedStore, prep_res: List[str], exec_res: List[List[float]]
    ) -> str:
        shared["all_embeddings"] = exec_res
        return "default"

class StoreIndex(Node):
    """Build the vector index from chunk embeddings."""

    def prep(self, shared: SharedStore) -> List[List[float]]:
        return shared.get("all_embeddings", [])

    def exec(self, embeddings: List[List[float]]) -> VectorIndex:
        return VectorIndex.build(embeddings)

    def post(self, shared: SharedStore, prep_res: Any, exec_res: VectorIndex) -> str:
        shared["index"] = exec_res
        get_logger(LogComponent.WORKFLOW).info(f"Vector index created with {len(exec_res)} entries")
        return "default"

###################################################################
# Online nodes
###################################################################

class EmbedQuery(AsyncNode):
    embedder: Embedder = Field(default=get_embedding, repr=False)

    async def prep_async(self, shared: SharedStore) -> str:
        return shared.get("question", "")

    async def exec_async(self, question: str) -> List[float]:
        return await self.embedder(question)

    async def post_async(self, shared: SharedStore, prep_res: str, exec_res: List[float]) -> str:
        shared["query_embedding"] = exec_res
        return "default"

class RetrieveDocs(Node):
    """Pick the chunk closest to the query embedding."""

    def prep(self, shared: SharedStore) -> Tuple[List[float], Optional[VectorIndex], List[str]]:
        return shared.get("query_embedding", []), shared.get("index"), shared.get("all_chunks", [])

    def exec(self, inputs: Tuple[List[float], Optional[VectorIndex], List[str]]) -> str:
        query, index, chunks = inputs
        if index is None or not chunks:
            raise ValueError("No index or chunks available")
        hits = index.search(query, top_k=1)
        return chunks[hits[0][0]] if hits else "No relevant content found"

    def post(self, shared: SharedStore, prep_res: Any, exec_res: str) -> str:
        shared["retrieved_chunk"] = exec_res
        return "default"

class GenerateAnswer(AsyncNode):
    """Answer the question from the retrieved chunk."""

    generator: Generator = Field(default=call_llm_async, repr=False)

    async def prep_async(self, shared: SharedStore) -> Tuple[str, str]:
        return shared.get("question", ""), shared.get("retrieved_chunk", "")

    async def exec_async(self, inputs: Tuple[str, str]) -> str:
        question, context = inputs
        return await self.generator(ANSWER_PROMPT.format(context=context, question=question))

    async def exec_fallback_async(self, prep_res: Tuple[str, str], exc: Exception) -> str:
        get_logger(LogComponent.WORKFLOW).error(f"Answer generation failed: {exc!r}")
        _, context = prep_res
        return f"Could not generate an answer. Most relevant context: {context}"

    async def post_async(self, shared: SharedStore, prep_res: Any, exec_res: str) -> str:
        shared["answer"] = exec_res
        return "default"

###################################################################
# Flows
###################################################################

def create_offline_flow(embedder: Embedder = get_embedding, chunk_size: int = 200) -> AsyncFlow:
    chunk = ChunkDocs(id="chunk_docs", chunk_size=chunk_size)
    embed = EmbedDocs(id="embed_docs", embedder=embedder, max_retries=3, wait=1)
    store = StoreIndex(id="store_index")
    chunk.then(embed).then(store)
    return AsyncFlow(start=chunk, id="rag_offline")

def create_online_flow(
    embedder: Embedder = get_embedding, generator: Generator = call_llm_async
) -> AsyncFlow:
    embed = EmbedQuery(id="embed_query", embedder=embedder, max_retries=3, wait=1)
    retrieve = RetrieveDocs(id="retrieve")
    answer = GenerateAnswer(id="generate_answer", generator=generator, max_retries=3, wait=1)
    embed.then(retrieve).then(answer)
    return AsyncFlow(start=embed, id="rag_online")

def create_rag_flow(
    embedder: Embedder = get_embedding,
    generator: Generator = call_llm_async,
    chunk_size: int = 200,
) -> AsyncFlow:
    """Index the documents, then answer the question, in one run."""
    offline = create_offline_flow(embedder, chunk_size)
    online = create_online_flow(embedder, generator)
    offline.then(online)
    return AsyncFlow(start=offline, id="rag")
