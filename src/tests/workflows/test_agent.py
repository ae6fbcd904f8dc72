"""Tests for the task agent decision loop."""

import pytest

from pocketgraph.core.graph import AsyncFlow
from pocketgraph.workflows.agent import (
    AgentAction,
    DecideAction,
    ExecuteStep,
    TaskContext,
    TaskStatus,
    create_agent_flow,
    plan_steps,
)


class CountingExecute(ExecuteStep):
    """Records every step the executor is handed."""

    async def prep_async(self, shared):
        step = await super().prep_async(shared)
        shared.setdefault("executed", []).append(step)
        return step


def test_plan_steps_by_keyword():
    assert plan_steps("Research solar storage")[0] == "Define research scope"
    assert plan_steps("plan a launch")[0] == "Identify objectives"
    assert plan_steps("water the plants") == [
        "Understand requirements", "Execute task", "Review results", "Finalize output"
    ]


class TestDecideAction:
    @pytest.mark.parametrize(
        "context, expected",
        [
            (TaskContext(steps=["a"]), "start"),
            (TaskContext(steps=["a"], current_step=1, status=TaskStatus.COMPLETED), "complete"),
            (TaskContext(steps=["a", "b"], current_step=1, status=TaskStatus.IN_PROGRESS), "execute"),
            (TaskContext(steps=["a"], status=TaskStatus.FAILED), "error"),
        ],
    )
    async def test_decisions(self, context, expected):
        action = await DecideAction().exec_async(context)
        assert isinstance(action, AgentAction)
        assert action.action == expected


class TestAgentFlow:
    async def test_two_step_task(self, shared):
        """start, execute, complete: the executor runs exactly twice."""
        flow = create_agent_flow(max_steps=2)
        decide = flow.start_node.successors["default"]
        counting = CountingExecute(id="execute")
        decide.branch("start", counting)
        decide.branch("execute", counting)
        counting.then(decide)

        shared["task"] = "Research solar storage"
        action = await flow.run_async(shared)

        assert action == "done"
        assert shared["executed"] == ["Define research scope", "Gather information"]
        context = shared["task_context"]
        assert context.status == TaskStatus.COMPLETED
        assert context.current_step == 2
        assert context.results["Gather information"]["type"] == "information"
        assert 'Task "Research solar storage" completed.' in shared["final_summary"]

    async def test_full_task(self, shared):
        shared["task"] = "Analyze quarterly sales"
        assert await create_agent_flow().run_async(shared) == "done"
        context = shared["task_context"]
        assert context.current_step == len(context.steps) == 4
        assert "Steps completed: 4" in shared["final_summary"]

    async def test_error_route_recovers(self, shared):
        """An unknown status routes through the error handler back into the loop."""
        decide = create_agent_flow().start_node.successors["default"]
        shared["task_context"] = TaskContext(
            task="recover", steps=["Collect data"], status=TaskStatus.FAILED
        )

        assert await AsyncFlow(start=decide).run_async(shared) == "done"
        assert len(shared["recoveries"]) == 1
        assert "Unknown state: failed" in shared["recoveries"][0]
        assert shared["task_context"].status == TaskStatus.COMPLETED
