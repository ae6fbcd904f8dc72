"""Base node types."""

from pocketgraph.core.graph.nodes.base.node import BaseNode, BatchNode, Node

__all__ = ["BaseNode", "Node", "BatchNode"]
