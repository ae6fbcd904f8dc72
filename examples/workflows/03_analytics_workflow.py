"""
CSV Analytics Example

This example demonstrates:
1. A BatchFlow that repeats the load -> stats -> filter pipeline per file
2. Params telling each traversal which file it is working on
3. A report node that aggregates everything the batches wrote

Usage:
    python examples/workflows/03_analytics_workflow.py data/sales.csv data/staff.csv

Without arguments a small built-in dataset is used.
"""

import sys
from pathlib import Path

from pocketgraph.core.logging import LogComponent, LogLevel, configure_logging, get_logger
from pocketgraph.workflows import create_analytics_flow

configure_logging(default_level=LogLevel.INFO)

logger = get_logger(LogComponent.WORKFLOW)

SAMPLE_SOURCES = {
    "sales.csv": "region,units,price\nnorth,10,2.5\nsouth,20,3.5\nnorth,30,4.5\n",
    "staff.csv": "name,team,tenure\nada,north,4\nbob,south,2\ncyd,north,7\n",
}

def main(paths) -> None:
    sources = (
        {Path(p).name: Path(p).read_text(encoding="utf-8") for p in paths}
        if paths
        else SAMPLE_SOURCES
    )
    shared = {"sources": sources, "filters": {}}

    logger.info(f"📊 Analyzing {len(sources)} files")
    create_analytics_flow().run(shared)

    print("\n" + shared["report"])

if __name__ == "__main__":
    main(sys.argv[1:])
