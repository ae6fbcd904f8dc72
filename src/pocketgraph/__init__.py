"""pocketgraph - minimal graph workflow engine."""

from pocketgraph.core.graph import (
    DEFAULT_ACTION,
    Action,
    AsyncBatchFlow,
    AsyncBatchNode,
    AsyncFlow,
    AsyncNode,
    AsyncParallelBatchFlow,
    AsyncParallelBatchNode,
    BaseNode,
    BatchFlow,
    BatchNode,
    Flow,
    Node,
    NodeKind,
    Params,
    SharedStore,
)
from pocketgraph.core.logging import (
    FlowLoggingConfig,
    LogComponent,
    LogLevel,
    configure_logging,
    log_scope,
)

__all__ = [
    'BaseNode',
    'Node',
    'BatchNode',
    'AsyncNode',
    'AsyncBatchNode',
    'AsyncParallelBatchNode',
    'Flow',
    'BatchFlow',
    'AsyncFlow',
    'AsyncBatchFlow',
    'AsyncParallelBatchFlow',
    'NodeKind',
    'SharedStore',
    'Params',
    'Action',
    'DEFAULT_ACTION',
    'configure_logging',
    'log_scope',
    'FlowLoggingConfig',
    'LogLevel',
    'LogComponent'
]
