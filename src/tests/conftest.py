"""Shared test fixtures."""

import logging
import uuid
from typing import Any, Dict, List

import pytest

from pocketgraph.core.logging import log_scope


class ListHandler(logging.Handler):
    """Handler that keeps every record it receives."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: int = logging.DEBUG) -> List[str]:
        return [r.getMessage() for r in self.records if r.levelno >= level]


@pytest.fixture
def shared() -> Dict[str, Any]:
    """Fixture providing an empty shared store."""
    return {}


@pytest.fixture
def log_sink():
    """Route engine logging to a private sink for the duration of a test."""
    sink = logging.getLogger(f"pocketgraph-tests.{uuid.uuid4().hex}")
    sink.setLevel(logging.DEBUG)
    handler = ListHandler()
    sink.addHandler(handler)
    with log_scope(sink):
        yield handler
    sink.removeHandler(handler)
