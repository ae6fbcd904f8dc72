"""Node package initialization.

Exposes node types for building workflows.
"""

from pocketgraph.core.graph.nodes.base.node import BaseNode, BatchNode, Node
from pocketgraph.core.graph.nodes.async_node import (
    AsyncBatchNode,
    AsyncNode,
    AsyncParallelBatchNode,
    gather_settled,
)

__all__ = [
    # Sync node types
    "BaseNode",
    "Node",
    "BatchNode",

    # Suspension-capable node types
    "AsyncNode",
    "AsyncBatchNode",
    "AsyncParallelBatchNode",

    # Helpers
    "gather_settled",
]
