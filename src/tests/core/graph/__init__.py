"""Test suite for the pocketgraph graph engine.

Organized as:

1. Flow Tests (test_base.py)
   - Traversal order and action routing
   - Decision loops over cyclic graphs
   - Clone-per-visit isolation between runs
   - Error propagation and misuse

2. Batch Flow Tests (test_batch_flow.py)
   - Sequential and concurrent parameter overrides
   - Shared store accumulation

3. Node Tests (nodes/)
   - Lifecycle hooks, successors and retries
   - Batch nodes
   - Suspension-capable and concurrent batch nodes
"""
