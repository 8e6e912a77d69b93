"""qt-plan insights — rule-based findings for a plan."""

from __future__ import annotations

import click

from ._common import plan_options


@click.command()
@plan_options
@click.option("--json", "output_json", is_flag=True, help="Output insights as JSON.")
@click.option("--fail-on-critical", is_flag=True, help="Exit 1 when a critical insight fires.")
def insights(plan_file, dialect, title, sql_file, source, output_json: bool, fail_on_critical: bool) -> None:
    """Evaluate PLAN_FILE against runtime, row-skew and memory rules."""
    import sys

    from rich.markup import escape
    from rich.table import Table

    from ..insights import evaluate
    from ..schemas import Severity
    from ._common import SEVERITY_COLORS, console, load_execution, print_json

    execution = load_execution(plan_file, dialect, title, sql_file, source)
    found = evaluate(execution)

    if output_json:
        print_json([insight.to_dict() for insight in found])
    elif not found:
        console.print("[green]No issues detected.[/green]")
    else:
        table = Table(title="Plan Insights", show_header=True, header_style="bold")
        table.add_column("Severity", style="bold", width=10)
        table.add_column("Title", width=30)
        table.add_column("Node")
        table.add_column("Details")
        for insight in found:
            color = SEVERITY_COLORS.get(insight.severity.value, "white")
            table.add_row(
                f"[{color}]{insight.severity.value.upper()}[/{color}]",
                escape(insight.title),
                _node_cell(execution, insight.node_ref),
                escape(insight.details),
            )
        console.print(table)

    if fail_on_critical and any(i.severity == Severity.CRITICAL for i in found):
        sys.exit(1)


def _node_cell(execution, node_ref) -> str:
    """Executor and timing of the node an insight points at; "plan" for plan-level ones."""
    from rich.markup import escape

    node = execution.find_node(node_ref) if node_ref else None
    if node is None:
        return "[dim]plan[/dim]"
    where = escape(node.metrics.executor_id or "-")
    return f"{where}\n[dim]{node.metrics.actual_time_ms:.0f}ms[/dim]"
