"""Tests for the document classifier pipelines.

This module tests:
- Keyword heuristics for category and sentiment
- The batch classification flow and its labelled-document metrics
- Routing one document to its category's handler
"""

from typing import Any, Dict

import pytest

from pocketgraph.core.graph import Node
from pocketgraph.workflows.classifier import (
    TextDocument,
    analyze_sentiment,
    classify,
    create_classifier_flow,
    create_routing_flow,
    extract_features,
    preprocess_text,
    score_predictions,
)

TECH = TextDocument(
    id="tech",
    text="The algorithm fixes an ERROR in the software system.",
    metadata={"label": "technical"},
)
CASUAL = TextDocument(
    id="casual",
    text="Hello, this is great and I love it",
    metadata={"label": "casual"},
)
BUSINESS = TextDocument(
    id="biz",
    text="Our market strategy drives revenue growth and customer sales.",
    metadata={"label": "academic"},
)


class Escalate(Node):
    """Custom handler that records the routed document."""

    def prep(self, shared: Dict[str, Any]) -> str:
        return shared["document"].id

    def post(self, shared: Dict[str, Any], prep_res: str, exec_res: str) -> str:
        shared["escalated"] = exec_res
        return "escalated"


class TestHeuristics:
    def test_preprocess_text(self):
        assert preprocess_text("  Hello,\n  WORLD! #tags @here ") == "hello, world! tags here"

    @pytest.mark.parametrize(
        "document, category",
        [(TECH, "technical"), (CASUAL, "casual"), (BUSINESS, "business")],
    )
    def test_classify(self, document, category):
        cleaned = document.model_copy(update={"text": preprocess_text(document.text)})
        assert classify(extract_features(cleaned)).category == category

    def test_confidence_is_share_of_total_score(self):
        cleaned = TECH.model_copy(update={"text": preprocess_text(TECH.text)})
        result = classify(extract_features(cleaned))
        # technical 6, academic 1 (diverse vocabulary), casual 2 (short text)
        assert result.confidence == pytest.approx(6 / 9)
        assert result.keywords == ["technical: 3"]

    def test_empty_document(self):
        result = classify(extract_features(TextDocument(id="empty", text="")))
        assert result.category == "casual"
        assert result.confidence == 1.0

    def test_sentiment(self):
        assert analyze_sentiment(CASUAL).sentiment == "positive"
        assert analyze_sentiment(CASUAL).score == pytest.approx(2 / 3)
        assert analyze_sentiment(TECH).sentiment == "negative"
        neutral = analyze_sentiment(TextDocument(id="n", text="the sky is blue"))
        assert (neutral.sentiment, neutral.score, neutral.confidence) == ("neutral", 0.5, 0.0)

    def test_score_predictions(self):
        metrics = score_predictions([("a", "a"), ("a", "b"), ("b", "b")])
        assert metrics.accuracy == pytest.approx(2 / 3)
        assert metrics.precision == {"a": 1.0, "b": 0.5}
        assert metrics.recall == {"a": 0.5, "b": 1.0}
        assert metrics.confusion_matrix == {"a": {"a": 1, "b": 1}, "b": {"a": 0, "b": 1}}


class TestClassifierFlow:
    def test_batch_classification(self, shared):
        shared["documents"] = [TECH, CASUAL, BUSINESS]
        create_classifier_flow().run(shared)

        assert [d.text for d in shared["processed_documents"]][0] == (
            "the algorithm fixes an error in the software system."
        )
        assert [c.category for c in shared["classifications"]] == ["technical", "casual", "business"]
        assert [s.sentiment for s in shared["sentiments"]] == ["negative", "positive", "neutral"]

        metrics = shared["metrics"]
        assert metrics.evaluated == 3
        assert metrics.accuracy == pytest.approx(2 / 3)
        assert metrics.recall["academic"] == 0.0
        assert metrics.precision["technical"] == 1.0

        report = shared["final_report"]
        assert "Total Documents: 3" in report
        assert "Accuracy: 66.7% over 3 labelled documents" in report
        assert "   business: 1 (33.3%)" in report
        assert "Performance Metrics" in report

    def test_unlabelled_documents_skip_metrics(self, shared):
        shared["documents"] = [TextDocument(id="x", text="hello there")]
        create_classifier_flow().run(shared)
        assert shared["metrics"] is None
        assert "Accuracy" not in shared["final_report"]
        assert "Performance Metrics" not in shared["final_report"]


class TestRoutingFlow:
    def test_routes_to_default_queue(self, shared):
        flow = create_routing_flow()
        for document in [TECH, CASUAL]:
            shared["document"] = document
            flow.run(shared)
        assert shared["queues"] == {"technical": ["tech"], "casual": ["casual"]}
        assert shared["classification"].category == "casual"

    def test_custom_handler(self, shared):
        shared["document"] = BUSINESS
        action = create_routing_flow({"business": Escalate()}).run(shared)
        assert action == "escalated"
        assert shared["escalated"] == "biz"
        assert "queues" not in shared
