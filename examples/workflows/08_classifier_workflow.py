"""
Document Classifier Example

This example demonstrates:
1. A chain of batch nodes over a document set
2. Metrics against documents that carry an expected label
3. Routing single documents to handlers by predicted category

Usage:
    python examples/workflows/08_classifier_workflow.py
"""

from pocketgraph.core.logging import (
    FlowLoggingConfig,
    LogComponent,
    LogLevel,
    configure_logging,
    get_logger,
)
from pocketgraph.workflows import create_classifier_flow, create_routing_flow
from pocketgraph.workflows.classifier import TextDocument

configure_logging(
    default_level=LogLevel.INFO,
    component_levels={
        LogComponent.FLOW: LogLevel.INFO,
        LogComponent.WORKFLOW: LogLevel.INFO,
    },
)

logger = get_logger(LogComponent.WORKFLOW)

DOCUMENTS = [
    TextDocument(
        id="doc1",
        text="The new algorithm improves data processing in our software system.",
        metadata={"label": "technical"},
    ),
    TextDocument(
        id="doc2",
        text="Our market strategy focuses on customer growth and revenue.",
        metadata={"label": "business"},
    ),
    TextDocument(
        id="doc3",
        text="This research study tests the hypothesis with a new methodology.",
        metadata={"label": "academic"},
    ),
    TextDocument(
        id="doc4",
        text="Hello! Thanks so much, this is awesome and really cool.",
        metadata={"label": "casual"},
    ),
]

def main() -> None:
    shared = {"documents": DOCUMENTS}
    create_classifier_flow().run(shared)
    print(shared["final_report"])

    router = create_routing_flow()
    router.logging_config = FlowLoggingConfig(show_node_transitions=True)
    for document in DOCUMENTS:
        shared["document"] = document
        router.run(shared)
    for queue, ids in shared["queues"].items():
        logger.info(f"{queue}: {', '.join(ids)}")

if __name__ == "__main__":
    main()
