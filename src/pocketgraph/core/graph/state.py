"""Shared types for the graph system.

This module provides:
1. SharedStore / Params / Action: the plain-data aliases nodes exchange
2. NodeKind: the closed set of node variants the flows dispatch on
"""

from enum import Enum
from typing import Any, Dict

SharedStore = Dict[str, Any]
Params = Dict[str, Any]
Action = str

DEFAULT_ACTION: Action = "default"

class NodeKind(str, Enum):
    """Node variant tag."""
    NODE = "node"
    BATCH = "batch"
    ASYNC_NODE = "async_node"
    ASYNC_BATCH = "async_batch"
    ASYNC_PARALLEL_BATCH = "async_parallel_batch"
    FLOW = "flow"
    BATCH_FLOW = "batch_flow"
    ASYNC_FLOW = "async_flow"
    ASYNC_BATCH_FLOW = "async_batch_flow"
    ASYNC_PARALLEL_BATCH_FLOW = "async_parallel_batch_flow"

    @property
    def is_async(self) -> bool:
        """Whether nodes of this kind must be driven through ``run_async``."""
        return self.value.startswith("async")
