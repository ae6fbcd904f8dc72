"""Tests for batch flows.

This module tests:
- One traversal per parameter override, merged over flow params
- Sequential async batch flows
- Concurrent async batch flows and their join semantics
"""

import asyncio
from typing import Any, Dict, List

import pytest

from pocketgraph.core.graph import (
    AsyncBatchFlow,
    AsyncNode,
    AsyncParallelBatchFlow,
    BatchFlow,
    Node,
    Params,
)


class RecordX(Node):
    """Appends ``params['x']`` (and the merged params) to the shared store."""

    def prep(self, shared: Dict[str, Any]) -> Any:
        shared.setdefault("xs", []).append(self.params["x"])
        shared.setdefault("params_seen", []).append(dict(self.params))
        return None


class Overrides(BatchFlow):
    def prep(self, shared: Dict[str, Any]) -> List[Params]:
        return shared["overrides"]

    def post(self, shared: Dict[str, Any], prep_res: List[Params], exec_res: Any) -> str:
        shared["post_saw"] = prep_res
        return "batched"


class AsyncRecordX(AsyncNode):
    async def prep_async(self, shared: Dict[str, Any]) -> Any:
        shared.setdefault("started", []).append(self.params["x"])
        await asyncio.sleep(self.params.get("delay", 0))
        if self.params.get("fail"):
            raise ValueError(f"failed x={self.params['x']}")
        shared.setdefault("xs", []).append(self.params["x"])
        return None


class AsyncOverrides(AsyncBatchFlow):
    async def prep_async(self, shared: Dict[str, Any]) -> List[Params]:
        return shared["overrides"]


class ParallelOverrides(AsyncParallelBatchFlow):
    async def prep_async(self, shared: Dict[str, Any]) -> List[Params]:
        return shared["overrides"]

    async def post_async(self, shared: Dict[str, Any], prep_res: Any, exec_res: Any) -> str:
        shared["joined"] = True
        return "default"


class SyncHookOverrides(AsyncBatchFlow):
    """Overrides only the sync hooks; the async flow still honours them."""

    def prep(self, shared: Dict[str, Any]) -> List[Params]:
        return shared["overrides"]

    def post(self, shared: Dict[str, Any], prep_res: List[Params], exec_res: Any) -> str:
        shared["post_saw"] = prep_res
        return "batched"


class TestBatchFlow:
    """Test suite for BatchFlow."""

    def test_one_traversal_per_override(self, shared):
        shared["overrides"] = [{"x": 1}, {"x": 2}]
        action = Overrides(start=RecordX(), params={"base": "b"}).run(shared)
        assert shared["xs"] == [1, 2]
        assert shared["params_seen"] == [{"base": "b", "x": 1}, {"base": "b", "x": 2}]
        assert shared["post_saw"] == [{"x": 1}, {"x": 2}]
        assert action == "batched"

    def test_override_wins_over_flow_params(self, shared):
        shared["overrides"] = [{"x": 5}]
        Overrides(start=RecordX(), params={"x": 0}).run(shared)
        assert shared["xs"] == [5]

    def test_empty_overrides(self, shared):
        shared["overrides"] = []
        assert Overrides(start=RecordX()).run(shared) == "batched"
        assert "xs" not in shared

    def test_each_traversal_walks_whole_graph(self, shared):
        first, second = RecordX(), RecordX()
        first.then(second)
        shared["overrides"] = [{"x": "a"}, {"x": "b"}]
        Overrides(start=first).run(shared)
        assert shared["xs"] == ["a", "a", "b", "b"]


class TestAsyncBatchFlows:
    """Test suite for AsyncBatchFlow and AsyncParallelBatchFlow."""

    async def test_sequential_traversals(self, shared):
        shared["overrides"] = [{"x": 1, "delay": 0.02}, {"x": 2}]
        await AsyncOverrides(start=AsyncRecordX()).run_async(shared)
        assert shared["xs"] == [1, 2]

    async def test_sync_prep_and_post_drive_async_batch(self, shared):
        shared["overrides"] = [{"x": 1}, {"x": 2}]
        action = await SyncHookOverrides(start=AsyncRecordX()).run_async(shared)
        assert shared["xs"] == [1, 2]
        assert shared["post_saw"] == [{"x": 1}, {"x": 2}]
        assert action == "batched"

    async def test_parallel_traversals(self, shared):
        shared["overrides"] = [{"x": 1, "delay": 0.02}, {"x": 2}]
        action = await ParallelOverrides(start=AsyncRecordX()).run_async(shared)
        assert sorted(shared["xs"]) == [1, 2]
        # the faster traversal finishes first
        assert shared["xs"] == [2, 1]
        assert shared["joined"] is True
        assert action == "default"

    async def test_parallel_failure_waits_for_siblings(self, shared):
        shared["overrides"] = [{"x": 1, "fail": True}, {"x": 2, "delay": 0.02}]
        with pytest.raises(ValueError, match="failed x=1"):
            await ParallelOverrides(start=AsyncRecordX()).run_async(shared)
        assert shared["started"] == [1, 2]
        assert shared["xs"] == [2]
        assert "joined" not in shared
