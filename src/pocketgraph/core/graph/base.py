"""Flow Classes

This module defines the orchestrators that walk a node graph:
1. Flow: visits nodes one at a time, routing on the action each returns
2. BatchFlow: repeats a full traversal once per parameter override
3. AsyncFlow / AsyncBatchFlow / AsyncParallelBatchFlow: the same over
   suspension-capable nodes, with the parallel variant joining concurrent
   traversals

Every visit runs on a fresh clone of the visited node, so one constructed
graph can be driven through any number of runs (and revisited through cycles)
without leaking params or retry counters between visits. The shared store is
never copied.

Example:
    ```python
    decide = DecideAction()
    execute = ExecuteStep()
    finish = CompleteTask()

    analyze.then(decide)
    decide.branch("execute", execute)
    decide.branch("complete", finish)
    execute.then(decide)

    shared = {"task": "research solar storage"}
    await AsyncFlow(start=analyze).run_async(shared)
    ```
"""

from typing import Any, ClassVar, List, Optional

from pydantic import Field

from pocketgraph.core.graph.nodes.async_node import gather_settled
from pocketgraph.core.graph.nodes.base.node import BaseNode
from pocketgraph.core.graph.state import Action, NodeKind, Params, SharedStore
from pocketgraph.core.logging import (
    FlowLoggingConfig,
    LogComponent,
    get_logger,
    log_state,
    log_verbose,
)

class Flow(BaseNode):
    """A node that drives a graph of nodes from a start node.

    The traversal stops at the first action with no registered successor;
    that action becomes the flow's exec result, and the default ``post``
    returns it so the flow can itself be routed when nested in another flow.

    Attributes:
        start_node: First node visited by each traversal
        logging_config: Controls transition logging
    """
    kind: ClassVar[NodeKind] = NodeKind.FLOW

    start_node: Optional[BaseNode] = Field(default=None, repr=False)
    logging_config: FlowLoggingConfig = Field(
        default_factory=FlowLoggingConfig, repr=False
    )

    def __init__(self, start: Optional[BaseNode] = None, **data):
        if start is not None:
            data["start_node"] = start
        super().__init__(**data)

    def start(self, node: BaseNode) -> BaseNode:
        """Set the start node and return it for chaining."""
        self.start_node = node
        return node

    def _first_visit(self) -> BaseNode:
        if self.start_node is None:
            raise ValueError(f"{self.display_name} has no start node")
        return self.start_node.clone()

    def _next_visit(self, current: BaseNode, action: Optional[Action]) -> Optional[BaseNode]:
        logger = get_logger(LogComponent.FLOW)
        nxt = current.get_next_node(action)
        if nxt is None:
            if current.successors:
                logger.warning(
                    f"Flow ends: '{action}' not found in {list(current.successors)} "
                    f"of {current.display_name}"
                )
            else:
                log_verbose(logger, f"Reached terminal node: {current.display_name}")
            return None

        message = f"Transitioning {current.display_name} --[{action}]--> {nxt.display_name}"
        if self.logging_config.show_node_transitions:
            logger.info(message)
        else:
            log_verbose(logger, message)
        return nxt.clone()

    def _merged_params(self, params: Optional[Params]) -> Params:
        return dict(params) if params is not None else dict(self.params)

    def _finish(self, shared: SharedStore, last_action: Optional[Action]) -> Optional[Action]:
        if self.logging_config.show_final_state:
            logger = get_logger(LogComponent.FLOW)
            logger.debug(f"{self.display_name} finished with action '{last_action}'")
            log_state(logger, shared, prefix="  ")
        return last_action

    def _orchestrate(self, shared: SharedStore, params: Optional[Params] = None) -> Optional[Action]:
        current: Optional[BaseNode] = self._first_visit()
        merged = self._merged_params(params)
        last_action: Optional[Action] = None

        while current is not None:
            current.set_params(merged)
            try:
                last_action = current._run(shared)
            except Exception as e:
                get_logger(LogComponent.FLOW).error(
                    f"Error in node {current.display_name}: {e!r}"
                )
                raise
            current = self._next_visit(current, last_action)

        return self._finish(shared, last_action)

    def _run(self, shared: SharedStore) -> Optional[Action]:
        prep_res = self.prep(shared)
        exec_res = self._orchestrate(shared)
        return self.post(shared, prep_res, exec_res)

    def post(self, shared: SharedStore, prep_res: Any, exec_res: Any) -> Optional[Action]:
        return exec_res

class BatchFlow(Flow):
    """Flow that runs one traversal per parameter override returned by prep.

    Overrides are merged over the flow's own params. The shared store is
    not reset between traversals, so later ones see earlier writes.
    """
    kind: ClassVar[NodeKind] = NodeKind.BATCH_FLOW

    def _run(self, shared: SharedStore) -> Optional[Action]:
        overrides: List[Params] = self.prep(shared) or []
        for override in overrides:
            self._orchestrate(shared, {**self.params, **override})
        return self.post(shared, overrides, None)

class AsyncFlow(Flow):
    """Flow over a graph that may contain suspension-capable nodes.

    Async nodes are awaited; plain nodes run inline on the event loop.
    """
    kind: ClassVar[NodeKind] = NodeKind.ASYNC_FLOW

    async def prep_async(self, shared: SharedStore) -> Any:
        """Defaults to the sync ``prep`` so batch subclasses may override either."""
        return self.prep(shared)

    async def post_async(
        self, shared: SharedStore, prep_res: Any, exec_res: Any
    ) -> Optional[Action]:
        return self.post(shared, prep_res, exec_res)

    async def _orchestrate_async(
        self, shared: SharedStore, params: Optional[Params] = None
    ) -> Optional[Action]:
        current: Optional[BaseNode] = self._first_visit()
        merged = self._merged_params(params)
        last_action: Optional[Action] = None

        while current is not None:
            current.set_params(merged)
            try:
                if current.kind.is_async:
                    last_action = await current._run_async(shared)
                else:
                    last_action = current._run(shared)
            except Exception as e:
                get_logger(LogComponent.FLOW).error(
                    f"Error in node {current.display_name}: {e!r}"
                )
                raise
            current = self._next_visit(current, last_action)

        return self._finish(shared, last_action)

    async def _run_async(self, shared: SharedStore) -> Optional[Action]:
        prep_res = await self.prep_async(shared)
        exec_res = await self._orchestrate_async(shared)
        return await self.post_async(shared, prep_res, exec_res)

    async def run_async(self, shared: SharedStore) -> Optional[Action]:
        """Run the whole graph and return the flow's final action."""
        if self.successors:
            get_logger(LogComponent.FLOW).warning(
                f"{self.display_name} won't run successors. Nest it in an AsyncFlow."
            )
        return await self._run_async(shared)

    def _run(self, shared: SharedStore) -> Optional[Action]:
        raise RuntimeError(f"{self.display_name} is an async flow. Use run_async.")

class AsyncBatchFlow(AsyncFlow):
    """AsyncFlow that runs one traversal per override, one after another."""
    kind: ClassVar[NodeKind] = NodeKind.ASYNC_BATCH_FLOW

    async def _run_async(self, shared: SharedStore) -> Optional[Action]:
        overrides: List[Params] = await self.prep_async(shared) or []
        for override in overrides:
            await self._orchestrate_async(shared, {**self.params, **override})
        return await self.post_async(shared, overrides, None)

class AsyncParallelBatchFlow(AsyncFlow):
    """AsyncFlow that runs all override traversals concurrently and joins.

    Writes to the shared store from different traversals may land in any
    order; use distinct keys or order-insensitive aggregation.
    """
    kind: ClassVar[NodeKind] = NodeKind.ASYNC_PARALLEL_BATCH_FLOW

    async def _run_async(self, shared: SharedStore) -> Optional[Action]:
        overrides: List[Params] = await self.prep_async(shared) or []
        await gather_settled(
            *(self._orchestrate_async(shared, {**self.params, **override})
              for override in overrides)
        )
        return await self.post_async(shared, overrides, None)
