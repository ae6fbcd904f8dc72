"""Graph package initialization.

Exposes nodes, flows and the shared types used to build workflows.
"""

from pocketgraph.core.graph.base import (
    AsyncBatchFlow,
    AsyncFlow,
    AsyncParallelBatchFlow,
    BatchFlow,
    Flow,
)
from pocketgraph.core.graph.nodes import (
    AsyncBatchNode,
    AsyncNode,
    AsyncParallelBatchNode,
    BaseNode,
    BatchNode,
    Node,
)
from pocketgraph.core.graph.state import (
    DEFAULT_ACTION,
    Action,
    NodeKind,
    Params,
    SharedStore,
)

__all__ = [
    # Flows
    "Flow",
    "BatchFlow",
    "AsyncFlow",
    "AsyncBatchFlow",
    "AsyncParallelBatchFlow",

    # Nodes
    "BaseNode",
    "Node",
    "BatchNode",
    "AsyncNode",
    "AsyncBatchNode",
    "AsyncParallelBatchNode",

    # Types
    "NodeKind",
    "SharedStore",
    "Params",
    "Action",
    "DEFAULT_ACTION",
]
