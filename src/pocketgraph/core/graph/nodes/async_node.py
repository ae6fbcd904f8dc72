"""
Suspension-capable nodes.

Same lifecycle as Node, but every hook is a coroutine and the wait between
retries is an ``asyncio.sleep``. These nodes must be driven with
``run_async`` or from an AsyncFlow.
"""

import asyncio
from typing import Any, ClassVar, List, Optional

from tenacity import AsyncRetrying

from pocketgraph.core.graph.nodes.base.node import Node, attempt_index
from pocketgraph.core.graph.state import DEFAULT_ACTION, Action, NodeKind, SharedStore
from pocketgraph.core.logging import LogComponent, get_logger

async def gather_settled(*aws: Any) -> List[Any]:
    """Await every awaitable, then re-raise the first failure in input order.

    A failing awaitable never cancels its siblings; results keep input order.
    """
    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return list(outcomes)

class AsyncNode(Node):
    """
    Node whose hooks may suspend without blocking other in-flight work.

    Example:
        ```python
        class FetchPage(AsyncNode):
            async def prep_async(self, shared):
                return shared["url"]

            async def exec_async(self, url):
                return await fetch_url(url)

            async def post_async(self, shared, prep_res, exec_res):
                shared["page"] = exec_res

        await FetchPage(max_retries=3, wait=0.5).run_async(shared)
        ```
    """
    kind: ClassVar[NodeKind] = NodeKind.ASYNC_NODE

    async def prep_async(self, shared: SharedStore) -> Any:
        return None

    async def exec_async(self, prep_res: Any) -> Any:
        return prep_res

    async def exec_fallback_async(self, prep_res: Any, exc: Exception) -> Any:
        """Handle exhausted retries. Re-raises by default."""
        raise exc

    async def post_async(
        self, shared: SharedStore, prep_res: Any, exec_res: Any
    ) -> Optional[Action]:
        return DEFAULT_ACTION

    async def _exec_async(self, prep_res: Any) -> Any:
        token = attempt_index.set(0)
        try:
            async for attempt in AsyncRetrying(sleep=asyncio.sleep, **self._retry_options()):
                with attempt:
                    attempt_index.set(attempt.retry_state.attempt_number - 1)
                    return await self.exec_async(prep_res)
        except Exception as exc:
            return await self.exec_fallback_async(prep_res, exc)
        finally:
            attempt_index.reset(token)

    async def _run_async(self, shared: SharedStore) -> Optional[Action]:
        prep_res = await self.prep_async(shared)
        exec_res = await self._exec_async(prep_res)
        return await self.post_async(shared, prep_res, exec_res)

    async def run_async(self, shared: SharedStore) -> Optional[Action]:
        """Run this node once, ignoring successors."""
        if self.successors:
            get_logger(LogComponent.NODES).warning(
                f"{self.display_name} won't run successors. Use an AsyncFlow."
            )
        return await self._run_async(shared)

    def _run(self, shared: SharedStore) -> Optional[Action]:
        raise RuntimeError(f"{self.display_name} is an async node. Use run_async.")

class AsyncBatchNode(AsyncNode):
    """Async batch node that awaits items one at a time, in order."""
    kind: ClassVar[NodeKind] = NodeKind.ASYNC_BATCH

    async def _exec_async(self, items: Optional[List[Any]]) -> List[Any]:
        results = []
        for item in items or []:
            results.append(await super()._exec_async(item))
        return results

class AsyncParallelBatchNode(AsyncNode):
    """Async batch node that runs every item concurrently and joins.

    Each item keeps its own retry loop. Results keep input order no matter
    which item finishes first; if an item's fallback raises, the first such
    error (by input order) surfaces once all items have settled.
    """
    kind: ClassVar[NodeKind] = NodeKind.ASYNC_PARALLEL_BATCH

    async def _exec_async(self, items: Optional[List[Any]]) -> List[Any]:
        single = super()._exec_async
        return await gather_settled(*(single(item) for item in items or []))
