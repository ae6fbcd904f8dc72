"""CSV parsing and simple column statistics for analytics pipelines."""

import csv
import io
import statistics
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field

Cell = Union[str, float]

class TableData(BaseModel):
    """Parsed CSV content.

    Attributes:
        headers: Column names in file order
        rows: One dict per data row; numeric cells are floats
        file_name: Source name, for reporting
    """
    headers: List[str]
    rows: List[Dict[str, Cell]] = Field(default_factory=list)
    file_name: str = ""

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

def _coerce(value: str) -> Cell:
    value = value.strip()
    try:
        return float(value)
    except ValueError:
        return value

def parse_csv(content: str, file_name: str = "") -> TableData:
    """Parse CSV text with a header row.

    Raises:
        ValueError: If ``content`` has no header row
    """
    lines = [line for line in content.splitlines() if line.strip()]
    if not lines:
        raise ValueError(f"Empty CSV content{f' in {file_name}' if file_name else ''}")

    reader = csv.DictReader(io.StringIO("\n".join(lines)), skipinitialspace=True)
    headers = [h.strip() for h in reader.fieldnames or []]
    rows = [
        {header: _coerce(raw.get(name) or "") for header, name in zip(headers, reader.fieldnames)}
        for raw in reader
    ]
    return TableData(headers=headers, rows=rows, file_name=file_name)

def read_csv_file(path: str) -> TableData:
    source = Path(path)
    return parse_csv(source.read_text(encoding="utf-8"), source.name)

def calculate_stats(data: TableData) -> Dict[str, Dict[str, Any]]:
    """Per-column summary: numeric stats for all-numeric columns, else categorical."""
    stats: Dict[str, Dict[str, Any]] = {}
    for header in data.headers:
        values = [row.get(header, "") for row in data.rows]
        numbers = [v for v in values if isinstance(v, float)]
        if numbers and len(numbers) == len(values):
            stats[header] = {
                "type": "numeric",
                "count": len(numbers),
                "sum": sum(numbers),
                "mean": round(statistics.fmean(numbers), 2),
                "median": round(statistics.median(numbers), 2),
                "min": min(numbers),
                "max": max(numbers),
                "range": max(numbers) - min(numbers),
            }
        else:
            unique = list(dict.fromkeys(values))
            stats[header] = {
                "type": "categorical",
                "unique_count": len(unique),
                "unique_values": unique[:10],
            }
    return stats

def filter_rows(data: TableData, filters: Dict[str, Any]) -> TableData:
    """Keep rows matching every filter.

    A filter value is either an exact match or a ``{"min": x, "max": y}``
    range (either bound optional).
    """
    def matches(row: Dict[str, Cell]) -> bool:
        for column, condition in filters.items():
            value = row.get(column)
            if isinstance(condition, dict):
                if "min" in condition and (not isinstance(value, float) or value < condition["min"]):
                    return False
                if "max" in condition and (not isinstance(value, float) or value > condition["max"]):
                    return False
            elif value != condition:
                return False
        return True

    return data.model_copy(update={"rows": [row for row in data.rows if matches(row)]})
