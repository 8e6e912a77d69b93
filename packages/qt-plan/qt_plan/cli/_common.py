"""Shared CLI helpers: plan loading, shared options, Rich output."""

from __future__ import annotations

import json
from typing import IO, Any, Callable, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from ..builder import ParseOptions
from ..errors import PlanParseError
from ..ingest import parse
from ..schemas import PlanDialect, PlanExecution, PlanNode, PlanSource

console = Console()


def plan_options(func: Callable) -> Callable:
    """Attach the PLAN argument and the ingestion options to a command."""
    decorators = [
        click.argument("plan_file", type=click.File("r", encoding="utf-8")),
        click.option(
            "--dialect",
            type=click.Choice([d.value for d in PlanDialect]),
            default=None,
            help="Override dialect detection.",
        ),
        click.option("--title", default=None, help="Title for the imported plan."),
        click.option(
            "--sql", "sql_file",
            type=click.File("r", encoding="utf-8"),
            default=None,
            help="File holding the query the plan belongs to.",
        ),
        click.option(
            "--source",
            type=click.Choice([s.value for s in PlanSource]),
            default=PlanSource.MANUAL_IMPORT.value,
            show_default=True,
            help="Provenance of the plan text.",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def load_execution(
    plan_file: IO[str],
    dialect: Optional[str] = None,
    title: Optional[str] = None,
    sql_file: Optional[IO[str]] = None,
    source: str = PlanSource.MANUAL_IMPORT.value,
) -> PlanExecution:
    """Read and parse a plan file, turning import errors into ClickException."""
    options = ParseOptions(
        dialect_hint=PlanDialect(dialect) if dialect else None,
        title=title,
        source=PlanSource(source),
        sql_text=sql_file.read() if sql_file else None,
    )
    try:
        return parse(plan_file.read(), options)
    except PlanParseError as e:
        raise click.ClickException(f"Import failed: {e}")


def print_json(payload: Any) -> None:
    """Plain JSON on stdout (no Rich highlighting) so output can be piped."""
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _node_label(node: PlanNode) -> str:
    m = node.metrics
    parts = [
        f"[bold]{escape(node.name)}[/bold]",
        f"rows={m.actual_rows:,}/{m.estimated_rows:,}",
        f"time={m.actual_time_ms:.1f}ms",
    ]
    if m.memory_mb is not None:
        parts.append(f"mem={m.memory_mb:g}MB")
    if m.executor_id:
        parts.append(f"[dim]{escape(m.executor_id)}[/dim]")
    if node.warnings:
        parts.append(f"[yellow]⚠ {len(node.warnings)}[/yellow]")
    return "  ".join(parts)


def build_tree(execution: PlanExecution) -> Tree:
    tree = Tree(f"[bold cyan]{escape(execution.summary.title)}[/bold cyan]")

    def add(branch: Tree, node: PlanNode) -> None:
        child_branch = branch.add(_node_label(node))
        for child in node.children:
            add(child_branch, child)

    for root in execution.nodes:
        add(tree, root)
    return tree


SEVERITY_COLORS = {
    "critical": "red",
    "warn": "yellow",
    "info": "dim",
}
