"""qt-plan parse — show the normalized plan tree and stats."""

from __future__ import annotations

import click

from ._common import plan_options


@click.command("parse")
@plan_options
@click.option("--json", "output_json", is_flag=True, help="Output the execution record as JSON.")
def parse_cmd(plan_file, dialect, title, sql_file, source, output_json: bool) -> None:
    """Parse PLAN_FILE (use - for stdin) and print the plan tree.

    Examples:
        qt-plan parse plan.json
        psql -c "EXPLAIN ANALYZE ..." | qt-plan parse - --sql query.sql
    """
    from rich.panel import Panel

    from ..parsers import detect_format
    from ._common import build_tree, console, load_execution, print_json

    execution = load_execution(plan_file, dialect, title, sql_file, source)

    if output_json:
        print_json(execution.to_dict())
        return

    summary = execution.summary
    stats = execution.stats
    fmt = detect_format(execution.plan_source)
    console.print(Panel(
        f"Dialect: {summary.dialect.value} | Format: {fmt.value} | "
        f"Fingerprint: {summary.sql_fingerprint}\n"
        f"Nodes: {stats.node_count} | Depth: {stats.depth} | "
        f"Time: {stats.total_time_ms} ms | Memory: {stats.total_memory_mb} MB",
        title="Plan Summary",
    ))
    console.print(build_tree(execution))
