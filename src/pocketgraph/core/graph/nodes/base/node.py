"""Base node classes for the graph system.

A node is one unit of work with a three-hook lifecycle:

    prep(shared)                   -> prep_res   read what the step needs
    exec(prep_res)                 -> exec_res   do the work, no shared access
    post(shared, prep_res, exec_res) -> action   write results, pick a label

Nodes also carry a successor table mapping action labels to the next node.
The table is only honoured by a Flow; running a node directly executes it once.

Typical Usage:
    - Subclass Node and override prep/exec/post
    - Wire successors with then()/branch()/connect()
    - Hand the start node to a Flow
"""

import time
from contextvars import ContextVar
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from tenacity import RetryCallState, Retrying, stop_after_attempt, wait_fixed

from pocketgraph.core.graph.state import (
    DEFAULT_ACTION,
    Action,
    NodeKind,
    Params,
    SharedStore,
)
from pocketgraph.core.logging import LogComponent, get_logger

# Attempt index of the retry loop running in the current context. Concurrent
# items of one node each run in their own task and see their own value.
attempt_index: ContextVar[int] = ContextVar("pocketgraph_attempt_index", default=0)

class BaseNode(BaseModel):
    """
    Unit of work with params and a successor table.

    Attributes:
        id: Optional name used in log lines
        params: Per-visit configuration assigned by the owning flow
        successors: Mapping of action labels to next nodes

    Nodes compare and hash by identity because graphs may be cyclic.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: ClassVar[NodeKind] = NodeKind.NODE

    id: Optional[str] = Field(default=None, description="Optional node name for logs")
    params: Params = Field(default_factory=dict)
    successors: Dict[str, "BaseNode"] = Field(default_factory=dict, repr=False)

    def __eq__(self, other: object) -> bool:
        return self is other

    __hash__ = object.__hash__

    @property
    def display_name(self) -> str:
        return self.id or type(self).__name__

    def set_params(self, params: Params) -> None:
        """Assign params for the next execution (stored as a copy)."""
        self.params = dict(params)

    # Graph building
    def connect(self, node: "BaseNode", action: Action = DEFAULT_ACTION) -> "BaseNode":
        """Register ``node`` as the successor for ``action`` and return it."""
        if not isinstance(action, str) or not action:
            raise TypeError(f"Action must be a non-empty string, got {action!r}")
        if action in self.successors:
            get_logger(LogComponent.NODES).warning(
                f"Overwriting successor for action '{action}' on {self.display_name}"
            )
        self.successors[action] = node
        return node

    def then(self, node: "BaseNode") -> "BaseNode":
        """Sequence ``node`` after this one on the default action.

        Example:
            load.then(clean).then(report)
        """
        return self.connect(node)

    def branch(self, action: Action, node: "BaseNode") -> "BaseNode":
        """Route ``action`` to ``node``."""
        return self.connect(node, action)

    def get_next_node(self, action: Optional[Action]) -> Optional["BaseNode"]:
        return self.successors.get(action or DEFAULT_ACTION)

    # Lifecycle hooks
    def prep(self, shared: SharedStore) -> Any:
        return None

    def exec(self, prep_res: Any) -> Any:
        return prep_res

    def post(self, shared: SharedStore, prep_res: Any, exec_res: Any) -> Optional[Action]:
        return DEFAULT_ACTION

    def _exec(self, prep_res: Any) -> Any:
        return self.exec(prep_res)

    def _run(self, shared: SharedStore) -> Optional[Action]:
        prep_res = self.prep(shared)
        exec_res = self._exec(prep_res)
        return self.post(shared, prep_res, exec_res)

    def run(self, shared: SharedStore) -> Optional[Action]:
        """Run this node once, ignoring successors."""
        if self.successors:
            get_logger(LogComponent.NODES).warning(
                f"{self.display_name} won't run successors. Use a Flow."
            )
        return self._run(shared)

    def clone(self) -> "BaseNode":
        """Copy this node for one traversal visit.

        The copy shares hooks, successors and field values with the template;
        params are fresh.
        """
        node = self.model_copy()
        node.params = {}
        return node

class Node(BaseNode):
    """
    Node with bounded retries and a fallback hook.

    Attributes:
        max_retries: Total attempts of exec before falling back (>= 1)
        wait: Seconds to sleep between failed attempts (>= 0)

    Example:
        ```python
        class Summarize(Node):
            def prep(self, shared):
                return shared["text"]

            def exec(self, text):
                return call_llm(f"Summarize: {text}")

            def exec_fallback(self, prep_res, exc):
                return "summary unavailable"

            def post(self, shared, prep_res, exec_res):
                shared["summary"] = exec_res

        Summarize(max_retries=3, wait=1).run(shared)
        ```
    """
    max_retries: int = Field(default=1, ge=1, description="Attempts before fallback")
    wait: float = Field(default=0.0, ge=0, description="Seconds between attempts")

    @property
    def cur_retry(self) -> int:
        """Zero-based index of the attempt currently executing.

        Read from a context variable, so items of a concurrent batch each
        see their own attempt. Outside exec it is 0.
        """
        return attempt_index.get()

    def exec_fallback(self, prep_res: Any, exc: Exception) -> Any:
        """Handle exhausted retries. Re-raises by default."""
        raise exc

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        get_logger(LogComponent.NODES).warning(
            f"{self.display_name} attempt {retry_state.attempt_number}/{self.max_retries} "
            f"failed: {exc!r}; retrying in {self.wait}s"
        )

    def _retry_options(self) -> Dict[str, Any]:
        return dict(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_fixed(self.wait),
            reraise=True,
            before_sleep=self._log_retry,
        )

    def _exec(self, prep_res: Any) -> Any:
        token = attempt_index.set(0)
        try:
            for attempt in Retrying(sleep=time.sleep, **self._retry_options()):
                with attempt:
                    attempt_index.set(attempt.retry_state.attempt_number - 1)
                    return self.exec(prep_res)
        except Exception as exc:
            return self.exec_fallback(prep_res, exc)
        finally:
            attempt_index.reset(token)

class BatchNode(Node):
    """Node whose prep returns a list; exec runs per item, in order.

    Each item goes through its own retry/fallback chain before the next
    starts. post receives the full input list and the result list.
    """
    kind: ClassVar[NodeKind] = NodeKind.BATCH

    def _exec(self, items: Optional[List[Any]]) -> List[Any]:
        return [super(BatchNode, self)._exec(item) for item in (items or [])]
