"""
Document Classifier Workflow

Two flows share the same keyword heuristics.

Batch classification, one BatchNode per stage:

    preprocess -> features -> classify -> sentiment -> metrics -> report

Routing, one document at a time, where the predicted category is the action
label that picks the handler:

    route --technical--> handler
          --business---> handler
          --academic---> handler
          --casual-----> handler

Shared store keys (batch):
    documents            list of TextDocument (input); metadata["label"] is
                         the expected category when known
    processed_documents  cleaned documents
    features             list of DocumentFeatures
    classifications      list of Classification
    sentiments           list of Sentiment
    metrics              ClassificationMetrics, or None without labelled documents
    final_report         text report

Shared store keys (routing):
    document        TextDocument (input)
    classification  Classification
    queues          {category: [document ids]}
"""

import re
from collections import Counter
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from pocketgraph.core.graph import BaseNode, BatchNode, Flow, Node, SharedStore
from pocketgraph.core.logging import LogComponent, get_logger

CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "technical": ["algorithm", "code", "programming", "software", "system", "data", "analysis"],
    "business": ["strategy", "market", "customer", "revenue", "growth", "management", "sales"],
    "academic": ["research", "study", "analysis", "methodology", "theory", "hypothesis", "conclusion"],
    "casual": ["hello", "thanks", "great", "awesome", "cool", "nice", "good"],
}
CATEGORIES = list(CATEGORY_KEYWORDS)

POSITIVE_WORDS = ["good", "great", "excellent", "amazing", "wonderful", "fantastic", "love", "like", "happy", "success"]
NEGATIVE_WORDS = ["bad", "terrible", "awful", "hate", "dislike", "problem", "issue", "error", "fail", "poor"]

###################################################################
# Models
###################################################################

class TextDocument(BaseModel):
    id: str
    text: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

class DocumentFeatures(BaseModel):
    document: TextDocument
    keyword_hits: Dict[str, int]
    word_count: int
    unique_words: int
    avg_word_length: float
    vocabulary_diversity: float

class Classification(BaseModel):
    document_id: str
    category: str
    confidence: float
    keywords: List[str] = Field(default_factory=list)
    reasoning: str = ""

class Sentiment(BaseModel):
    document_id: str
    sentiment: str
    score: float
    confidence: float
    key_phrases: List[str] = Field(default_factory=list)

class ClassificationMetrics(BaseModel):
    """Scores against the documents' expected labels."""
    evaluated: int
    accuracy: float
    precision: Dict[str, float]
    recall: Dict[str, float]
    f1_score: Dict[str, float]
    confusion_matrix: Dict[str, Dict[str, int]]

###################################################################
# Heuristics
###################################################################

def preprocess_text(text: str) -> str:
    """Lowercase, drop symbols other than basic punctuation, collapse whitespace."""
    text = re.sub(r"[^\w\s.,!?-]", "", text.lower())
    return re.sub(r"\s+", " ", text).strip()

def extract_features(document: TextDocument) -> DocumentFeatures:
    words = document.text.split()
    word_count = len(words)
    unique = len(set(words))
    return DocumentFeatures(
        document=document,
        keyword_hits={
            category: sum(1 for keyword in keywords if keyword in document.text)
            for category, keywords in CATEGORY_KEYWORDS.items()
        },
        word_count=word_count,
        unique_words=unique,
        avg_word_length=sum(len(w) for w in words) / word_count if word_count else 0.0,
        vocabulary_diversity=unique / word_count if word_count else 0.0,
    )

def classify(features: DocumentFeatures) -> Classification:
    """Score each category and keep the highest; ties go to the earlier category."""
    hits = features.keyword_hits
    scores = {
        "technical": hits["technical"] * 2 + (1 if features.avg_word_length > 6 else 0),
        "business": hits["business"] * 2 + (1 if features.word_count > 100 else 0),
        "academic": hits["academic"] * 2 + (1 if features.vocabulary_diversity > 0.8 else 0),
        "casual": hits["casual"] * 3 + (2 if features.word_count < 50 else 0),
    }
    category = max(scores, key=scores.get)
    total = sum(scores.values())
    confidence = scores[category] / total if total > 0 else 0.25
    return Classification(
        document_id=features.document.id,
        category=category,
        confidence=confidence,
        keywords=[f"{c}: {n}" for c, n in hits.items() if n > 0][:3],
        reasoning=(
            f"Classified as {category} based on keyword presence and text "
            f"characteristics. Confidence: {confidence * 100:.1f}%"
        ),
    )

def analyze_sentiment(document: TextDocument) -> Sentiment:
    words = set(document.text.lower().split())
    positive = sum(1 for w in POSITIVE_WORDS if w in words)
    negative = sum(1 for w in NEGATIVE_WORDS if w in words)

    if positive > negative:
        label, score = "positive", positive / (positive + negative + 1)
    elif negative > positive:
        label, score = "negative", negative / (positive + negative + 1)
    else:
        label, score = "neutral", 0.5

    return Sentiment(
        document_id=document.id,
        sentiment=label,
        score=score,
        confidence=abs(positive - negative) / (positive + negative + 1),
        key_phrases=[w for w in POSITIVE_WORDS + NEGATIVE_WORDS if w in words][:5],
    )

def score_predictions(pairs: List[tuple]) -> ClassificationMetrics:
    """Compute accuracy and per-category precision/recall/F1 from (actual, predicted) pairs."""
    labels = sorted({label for pair in pairs for label in pair})
    matrix = {actual: {predicted: 0 for predicted in labels} for actual in labels}
    for actual, predicted in pairs:
        matrix[actual][predicted] += 1

    precision, recall, f1 = {}, {}, {}
    for label in labels:
        tp = matrix[label][label]
        fp = sum(row[label] for row in matrix.values()) - tp
        fn = sum(matrix[label].values()) - tp
        precision[label] = tp / (tp + fp) if tp + fp else 0.0
        recall[label] = tp / (tp + fn) if tp + fn else 0.0
        p, r = precision[label], recall[label]
        f1[label] = 2 * p * r / (p + r) if p + r else 0.0

    correct = sum(1 for actual, predicted in pairs if actual == predicted)
    return ClassificationMetrics(
        evaluated=len(pairs),
        accuracy=correct / len(pairs) if pairs else 0.0,
        precision=precision,
        recall=recall,
        f1_score=f1,
        confusion_matrix=matrix,
    )

def _share(count: int, total: int) -> str:
    return f"{count / total * 100:.1f}%" if total else "0.0%"

def render_report(
    classifications: List[Classification],
    sentiments: List[Sentiment],
    metrics: Optional[ClassificationMetrics],
) -> str:
    lines = ["📊 Classification Report", "=" * 24, "", "📈 Overall Statistics:"]
    lines.append(f"   Total Documents: {len(classifications)}")
    if metrics:
        lines.append(
            f"   Accuracy: {metrics.accuracy * 100:.1f}% over {metrics.evaluated} labelled documents"
        )
    lines += ["", "🏷️  Category Distribution:"]
    for category, count in Counter(c.category for c in classifications).items():
        lines.append(f"   {category}: {count} ({_share(count, len(classifications))})")
    lines += ["", "😊 Sentiment Analysis:"]
    for label, count in Counter(s.sentiment for s in sentiments).items():
        lines.append(f"   {label}: {count} ({_share(count, len(sentiments))})")
    if metrics:
        lines += ["", "📊 Performance Metrics:"]
        for category in metrics.precision:
            lines += [
                f"   {category}:",
                f"     Precision: {metrics.precision[category] * 100:.1f}%",
                f"     Recall: {metrics.recall[category] * 100:.1f}%",
                f"     F1-Score: {metrics.f1_score[category] * 100:.1f}%",
            ]
    return "\n".join(lines) + "\n"

###################################################################
# Batch classification nodes
###################################################################

class PreprocessDocuments(BatchNode):
    def prep(self, shared: SharedStore) -> List[TextDocument]:
        return shared.get("documents", [])

    def exec(self, document: TextDocument) -> TextDocument:
        return document.model_copy(update={"text": preprocess_text(document.text)})

    def post(self, shared: SharedStore, prep_res, exec_res: List[TextDocument]) -> str:
        shared["processed_documents"] = exec_res
        get_logger(LogComponent.WORKFLOW).info(f"🧹 Preprocessed {len(exec_res)} documents")
        return "default"

class ExtractFeatures(BatchNode):
    def prep(self, shared: SharedStore) -> List[TextDocument]:
        return shared.get("processed_documents", [])

    def exec(self, document: TextDocument) -> DocumentFeatures:
        return extract_features(document)

    def post(self, shared: SharedStore, prep_res, exec_res: List[DocumentFeatures]) -> str:
        shared["features"] = exec_res
        return "default"

class ClassifyDocuments(BatchNode):
    def prep(self, shared: SharedStore) -> List[DocumentFeatures]:
        return shared.get("features", [])

    def exec(self, features: DocumentFeatures) -> Classification:
        return classify(features)

    def post(self, shared: SharedStore, prep_res, exec_res: List[Classification]) -> str:
        shared["classifications"] = exec_res
        get_logger(LogComponent.WORKFLOW).info(f"🏷️  Classified {len(exec_res)} documents")
        return "default"

class AnalyzeSentiment(BatchNode):
    def prep(self, shared: SharedStore) -> List[TextDocument]:
        return shared.get("processed_documents", [])

    def exec(self, document: TextDocument) -> Sentiment:
        return analyze_sentiment(document)

    def post(self, shared: SharedStore, prep_res, exec_res: List[Sentiment]) -> str:
        shared["sentiments"] = exec_res
        return "default"

class CalculateMetrics(Node):
    """Score classifications against documents that carry an expected label."""

    def prep(self, shared: SharedStore) -> List[tuple]:
        expected = {
            doc.id: doc.metadata["label"]
            for doc in shared.get("documents", [])
            if "label" in doc.metadata
        }
        return [
            (expected[c.document_id], c.category)
            for c in shared.get("classifications", [])
            if c.document_id in expected
        ]

    def exec(self, pairs: List[tuple]) -> Optional[ClassificationMetrics]:
        return score_predictions(pairs) if pairs else None

    def post(self, shared: SharedStore, prep_res, exec_res: Optional[ClassificationMetrics]) -> str:
        shared["metrics"] = exec_res
        if exec_res is None:
            get_logger(LogComponent.WORKFLOW).info("No labelled documents; skipping metrics")
        return "default"

class GenerateReport(Node):
    def prep(self, shared: SharedStore):
        return (
            shared.get("classifications", []),
            shared.get("sentiments", []),
            shared.get("metrics"),
        )

    def exec(self, inputs) -> str:
        return render_report(*inputs)

    def post(self, shared: SharedStore, prep_res, exec_res: str) -> None:
        shared["final_report"] = exec_res

###################################################################
# Routing nodes
###################################################################

class RouteDocument(Node):
    """Classify one document and return its category as the action."""

    def prep(self, shared: SharedStore) -> TextDocument:
        return shared["document"]

    def exec(self, document: TextDocument) -> Classification:
        cleaned = document.model_copy(update={"text": preprocess_text(document.text)})
        return classify(extract_features(cleaned))

    def post(self, shared: SharedStore, prep_res: TextDocument, exec_res: Classification) -> str:
        shared["classification"] = exec_res
        return exec_res.category

class QueueDocument(Node):
    """Default handler: file the document id under its queue."""

    queue: str

    def prep(self, shared: SharedStore) -> str:
        return shared["document"].id

    def post(self, shared: SharedStore, prep_res: str, exec_res: str) -> None:
        shared.setdefault("queues", {}).setdefault(self.queue, []).append(exec_res)

###################################################################
# Flows
###################################################################

def create_classifier_flow() -> Flow:
    preprocess = PreprocessDocuments(id="preprocess")
    (
        preprocess.then(ExtractFeatures(id="features"))
        .then(ClassifyDocuments(id="classify"))
        .then(AnalyzeSentiment(id="sentiment"))
        .then(CalculateMetrics(id="metrics"))
        .then(GenerateReport(id="report"))
    )
    return Flow(start=preprocess, id="classifier")

def create_routing_flow(handlers: Optional[Dict[str, BaseNode]] = None) -> Flow:
    """Route a document to the handler registered for its category.

    Categories without a handler get a QueueDocument filing into a queue
    of the same name.
    """
    handlers = handlers or {}
    route = RouteDocument(id="route")
    for category in CATEGORIES:
        handler = handlers.get(category)
        if handler is None:
            handler = QueueDocument(id=f"queue_{category}", queue=category)
        route.branch(category, handler)
    return Flow(start=route, id="document_router")
