"""
CSV Analytics Workflow

Runs the per-file pipeline ``load -> stats -> filter`` once per source with a
BatchFlow, then writes one combined report:

    AnalyzeSources(BatchFlow: load -> stats -> filter) -> report

Shared store keys:
    sources   {file_name: csv text} (input)
    filters   optional row filters applied to every table (input)
    tables    {file_name: TableData}
    stats     {file_name: column stats}
    filtered  {file_name: row count after filters}
    report    final text report
"""

from typing import Any, Dict, List

from pocketgraph.core.graph import BatchFlow, Flow, Node, Params, SharedStore
from pocketgraph.core.logging import LogComponent, get_logger
from pocketgraph.tools.tabular import TableData, calculate_stats, filter_rows, parse_csv

class LoadCSV(Node):
    """Parse the source named by the ``file_name`` param."""

    def prep(self, shared: SharedStore) -> Dict[str, str]:
        name = self.params["file_name"]
        return {"name": name, "content": shared["sources"][name]}

    def exec(self, source: Dict[str, str]) -> TableData:
        return parse_csv(source["content"], source["name"])

    def post(self, shared: SharedStore, prep_res: Dict[str, str], exec_res: TableData) -> str:
        shared.setdefault("tables", {})[exec_res.file_name] = exec_res
        get_logger(LogComponent.WORKFLOW).info(
            f"Loaded {exec_res.file_name}: {exec_res.row_count} rows x {exec_res.column_count} columns"
        )
        return "default"

class ComputeStats(Node):
    def prep(self, shared: SharedStore) -> TableData:
        return shared["tables"][self.params["file_name"]]

    def exec(self, table: TableData) -> Dict[str, Dict[str, Any]]:
        return calculate_stats(table)

    def post(self, shared: SharedStore, prep_res: TableData, exec_res: Dict[str, Any]) -> str:
        shared.setdefault("stats", {})[prep_res.file_name] = exec_res
        return "default"

class FilterTable(Node):
    def prep(self, shared: SharedStore) -> Dict[str, Any]:
        return {
            "table": shared["tables"][self.params["file_name"]],
            "filters": shared.get("filters") or {},
        }

    def exec(self, inputs: Dict[str, Any]) -> TableData:
        return filter_rows(inputs["table"], inputs["filters"])

    def post(self, shared: SharedStore, prep_res: Dict[str, Any], exec_res: TableData) -> str:
        shared.setdefault("filtered", {})[exec_res.file_name] = exec_res.row_count
        return "default"

class AnalyzeSources(BatchFlow):
    """One traversal per source file."""

    def prep(self, shared: SharedStore) -> List[Params]:
        return [{"file_name": name} for name in shared.get("sources", {})]

class BuildReport(Node):
    def prep(self, shared: SharedStore) -> Dict[str, Any]:
        return {"stats": shared.get("stats", {}), "filtered": shared.get("filtered", {})}

    def exec(self, inputs: Dict[str, Any]) -> str:
        sections = []
        for name, columns in inputs["stats"].items():
            lines = [f"## {name} ({inputs['filtered'].get(name, 0)} rows after filters)"]
            for column, summary in columns.items():
                if summary["type"] == "numeric":
                    lines.append(
                        f"- {column}: mean={summary['mean']} median={summary['median']} "
                        f"min={summary['min']} max={summary['max']}"
                    )
                else:
                    lines.append(f"- {column}: {summary['unique_count']} unique values")
            sections.append("\n".join(lines))
        return "\n\n".join(sections)

    def post(self, shared: SharedStore, prep_res: Any, exec_res: str) -> str:
        shared["report"] = exec_res
        return "default"

def create_analytics_flow() -> Flow:
    load = LoadCSV(id="load_csv")
    stats = ComputeStats(id="compute_stats")
    filtered = FilterTable(id="filter_table")
    load.then(stats).then(filtered)

    per_source = AnalyzeSources(start=load, id="analyze_sources")
    per_source.then(BuildReport(id="build_report"))
    return Flow(start=per_source, id="analytics")
