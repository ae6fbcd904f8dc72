"""
Task Agent Workflow

A decision loop that breaks a task into steps and executes them one by one:

    analyze ──> decide ──start/execute──> execute ──┐
                  ▲  └──complete──> complete        │
                  │  └──error────> handle_error ──┐ │
                  └───────────────────────────────┴─┘

Shared store keys:
    task          input task description
    task_context  TaskContext, updated after every step
    current_action AgentAction chosen by the last decision
    final_summary text written by the complete node
"""

import asyncio
import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from pocketgraph.core.graph import AsyncFlow, AsyncNode, SharedStore
from pocketgraph.core.logging import LogComponent, get_logger

###################################################################
# Models
###################################################################

class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

class TaskContext(BaseModel):
    """Progress of the task through its steps."""
    task: str = ""
    steps: List[str] = Field(default_factory=list)
    current_step: int = 0
    results: Dict[str, Any] = Field(default_factory=dict)
    status: TaskStatus = TaskStatus.PENDING

class AgentAction(BaseModel):
    """A routing decision plus the reason behind it."""
    action: str
    reason: str
    parameters: Dict[str, Any] = Field(default_factory=dict)

_STEP_TEMPLATES = {
    "research": ["Define research scope", "Gather information", "Analyze findings", "Create summary"],
    "plan": ["Identify objectives", "List requirements", "Create timeline", "Assign resources"],
    "analyze": ["Collect data", "Process information", "Identify patterns", "Draw conclusions"],
}
_DEFAULT_STEPS = ["Understand requirements", "Execute task", "Review results", "Finalize output"]

def plan_steps(task: str) -> List[str]:
    """Pick a step template by keyword."""
    lowered = task.lower()
    for keyword, steps in _STEP_TEMPLATES.items():
        if keyword in lowered:
            return list(steps)
    return list(_DEFAULT_STEPS)

def _context(shared: SharedStore) -> TaskContext:
    return shared.get("task_context") or TaskContext()

###################################################################
# Nodes
###################################################################

class AnalyzeTask(AsyncNode):
    """Break the task into steps."""

    max_steps: Optional[int] = Field(default=None, ge=1)

    async def prep_async(self, shared: SharedStore) -> str:
        return shared.get("task", "")

    async def exec_async(self, task: str) -> List[str]:
        steps = plan_steps(task)
        return steps[:self.max_steps] if self.max_steps else steps

    async def post_async(self, shared: SharedStore, prep_res: str, exec_res: List[str]) -> str:
        shared["task_context"] = TaskContext(task=prep_res, steps=exec_res)
        get_logger(LogComponent.WORKFLOW).info(f"Task broken down into {len(exec_res)} steps")
        return "default"

class DecideAction(AsyncNode):
    """Choose start / execute / complete / error from the task context."""

    async def prep_async(self, shared: SharedStore) -> TaskContext:
        return _context(shared)

    async def exec_async(self, context: TaskContext) -> AgentAction:
        if context.status == TaskStatus.PENDING:
            return AgentAction(
                action="start",
                reason="Task is ready to begin",
                parameters={"step": context.steps[context.current_step] if context.steps else ""},
            )
        if context.current_step >= len(context.steps):
            return AgentAction(action="complete", reason="All steps completed")
        if context.status == TaskStatus.IN_PROGRESS:
            return AgentAction(
                action="execute",
                reason="Continue with current step",
                parameters={"step": context.steps[context.current_step]},
            )
        return AgentAction(action="error", reason=f"Unknown state: {context.status.value}")

    async def post_async(
        self, shared: SharedStore, prep_res: TaskContext, exec_res: AgentAction
    ) -> str:
        shared["current_action"] = exec_res
        return exec_res.action

class ExecuteStep(AsyncNode):
    """Execute the current step and advance the context."""

    step_delay: float = Field(default=0.0, ge=0, description="Simulated work time")

    async def prep_async(self, shared: SharedStore) -> str:
        action: Optional[AgentAction] = shared.get("current_action")
        return action.parameters.get("step", "") if action else ""

    async def exec_async(self, step: str) -> Dict[str, Any]:
        if self.step_delay:
            await asyncio.sleep(self.step_delay)

        lowered = step.lower()
        if "research" in lowered or "gather" in lowered:
            return {"type": "information", "content": f"Research findings for: {step}"}
        if "analyze" in lowered or "process" in lowered:
            return {"type": "analysis", "insights": [f"Key insight from {step}"]}
        if "create" in lowered or "generate" in lowered:
            return {"type": "output", "content": f"Generated content for: {step}"}
        return {"type": "general", "status": "completed", "notes": f'Step "{step}" executed'}

    async def post_async(
        self, shared: SharedStore, prep_res: str, exec_res: Dict[str, Any]
    ) -> str:
        context = _context(shared)
        context.results[prep_res] = exec_res
        context.current_step += 1
        context.status = (
            TaskStatus.COMPLETED
            if context.current_step >= len(context.steps)
            else TaskStatus.IN_PROGRESS
        )
        shared["task_context"] = context
        get_logger(LogComponent.WORKFLOW).info(f"Completed step: {prep_res}")
        return "default"

class CompleteTask(AsyncNode):
    """Summarize the results."""

    async def prep_async(self, shared: SharedStore) -> TaskContext:
        return _context(shared)

    async def exec_async(self, context: TaskContext) -> str:
        lines = [
            f'Task "{context.task}" completed.',
            f"Steps completed: {len(context.steps)}",
            f"Final status: {context.status.value}",
            "",
            "Summary of results:",
        ]
        lines += [
            f"- {step}: {json.dumps(result)[:100]}"
            for step, result in context.results.items()
        ]
        return "\n".join(lines)

    async def post_async(self, shared: SharedStore, prep_res: TaskContext, exec_res: str) -> str:
        shared["final_summary"] = exec_res
        return "done"

class HandleError(AsyncNode):
    """Record a recovery note and put the task back in progress."""

    async def prep_async(self, shared: SharedStore) -> AgentAction:
        return shared.get("current_action") or AgentAction(action="error", reason="Unknown error")

    async def exec_async(self, action: AgentAction) -> str:
        return f"Error encountered: {action.reason}. Resuming with the next pending step."

    async def post_async(self, shared: SharedStore, prep_res: AgentAction, exec_res: str) -> str:
        context = _context(shared)
        context.status = TaskStatus.IN_PROGRESS
        shared["task_context"] = context
        shared.setdefault("recoveries", []).append(exec_res)
        get_logger(LogComponent.WORKFLOW).warning(exec_res)
        return "default"

###################################################################
# Flow
###################################################################

def create_agent_flow(step_delay: float = 0.0, max_steps: Optional[int] = None) -> AsyncFlow:
    """Build the task agent decision loop."""
    analyze = AnalyzeTask(id="analyze", max_steps=max_steps)
    decide = DecideAction(id="decide")
    execute = ExecuteStep(id="execute", step_delay=step_delay)
    complete = CompleteTask(id="complete")
    handle_error = HandleError(id="handle_error")

    analyze.then(decide)
    decide.branch("start", execute)
    decide.branch("execute", execute)
    decide.branch("complete", complete)
    decide.branch("error", handle_error)
    execute.then(decide)
    handle_error.then(decide)

    return AsyncFlow(start=analyze, id="task_agent")
