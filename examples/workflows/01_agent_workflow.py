"""
Task Agent Example

This example demonstrates:
1. A decision loop that revisits the same node until the task is done
2. Routing on action labels (start / execute / complete / error)
3. Transition logging from the flow

Usage:
    python examples/workflows/01_agent_workflow.py "Research solar storage"
"""

import asyncio
import sys

from pocketgraph.core.logging import (
    FlowLoggingConfig,
    LogComponent,
    LogLevel,
    configure_logging,
    get_logger,
)
from pocketgraph.workflows import create_agent_flow

configure_logging(
    default_level=LogLevel.INFO,
    component_levels={
        LogComponent.FLOW: LogLevel.INFO,
        LogComponent.NODES: LogLevel.INFO,
        LogComponent.WORKFLOW: LogLevel.INFO,
    },
)

logger = get_logger(LogComponent.WORKFLOW)

async def main(task: str) -> None:
    flow = create_agent_flow(step_delay=0.2)
    flow.logging_config = FlowLoggingConfig(show_node_transitions=True)

    shared = {"task": task}
    logger.info(f"🤖 Starting task: {task}")
    await flow.run_async(shared)

    print("\n" + shared["final_summary"])

if __name__ == "__main__":
    asyncio.run(main(" ".join(sys.argv[1:]) or "Research renewable energy storage"))
