"""Tests for CSV parsing and statistics."""

import pytest

from pocketgraph.tools.tabular import (
    TableData,
    calculate_stats,
    filter_rows,
    parse_csv,
    read_csv_file,
)

PEOPLE_CSV = """name, age, city
Alice, 30, Paris
Bob,25,Lyon

Cara,35,Paris
"""


@pytest.fixture
def people() -> TableData:
    return parse_csv(PEOPLE_CSV, "people.csv")


class TestParseCSV:
    def test_headers_and_rows(self, people):
        assert people.headers == ["name", "age", "city"]
        assert people.row_count == 3
        assert people.column_count == 3
        assert people.file_name == "people.csv"

    def test_numeric_cells_are_floats(self, people):
        assert people.rows[0] == {"name": "Alice", "age": 30.0, "city": "Paris"}

    def test_short_row_fills_blank(self):
        table = parse_csv("a,b\n1\n")
        assert table.rows == [{"a": 1.0, "b": ""}]

    def test_empty_content_rejected(self):
        with pytest.raises(ValueError, match="empty.csv"):
            parse_csv("\n  \n", "empty.csv")

    def test_read_csv_file(self, tmp_path):
        path = tmp_path / "sales.csv"
        path.write_text("region,total\nnorth,10\n", encoding="utf-8")
        table = read_csv_file(str(path))
        assert table.file_name == "sales.csv"
        assert table.rows == [{"region": "north", "total": 10.0}]


class TestStatistics:
    def test_numeric_column(self, people):
        stats = calculate_stats(people)["age"]
        assert stats == {
            "type": "numeric",
            "count": 3,
            "sum": 90.0,
            "mean": 30.0,
            "median": 30.0,
            "min": 25.0,
            "max": 35.0,
            "range": 10.0,
        }

    def test_categorical_column(self, people):
        stats = calculate_stats(people)["city"]
        assert stats["type"] == "categorical"
        assert stats["unique_count"] == 2
        assert stats["unique_values"] == ["Paris", "Lyon"]

    def test_mixed_column_is_categorical(self):
        table = parse_csv("score\n1\nn/a\n3\n")
        assert calculate_stats(table)["score"]["type"] == "categorical"

    def test_unique_values_capped(self):
        table = parse_csv("id\n" + "\n".join(f"item-{i}" for i in range(15)))
        stats = calculate_stats(table)["id"]
        assert stats["unique_count"] == 15
        assert len(stats["unique_values"]) == 10


class TestFilterRows:
    def test_exact_match(self, people):
        filtered = filter_rows(people, {"city": "Paris"})
        assert [row["name"] for row in filtered.rows] == ["Alice", "Cara"]
        assert people.row_count == 3

    def test_range(self, people):
        filtered = filter_rows(people, {"age": {"min": 26, "max": 34}})
        assert [row["name"] for row in filtered.rows] == ["Alice"]

    def test_range_skips_non_numeric(self, people):
        assert filter_rows(people, {"name": {"min": 0}}).rows == []

    def test_no_filters_keeps_everything(self, people):
        assert filter_rows(people, {}).rows == people.rows
