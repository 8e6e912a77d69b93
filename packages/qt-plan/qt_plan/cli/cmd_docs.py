"""qt-plan docs — operator documentation table."""

from __future__ import annotations

import click


@click.command()
@click.argument("key", required=False)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
def docs(key: str | None, output_json: bool) -> None:
    """List documented operators, or show one by KEY or operator name.

    KEY may be a doc key (hash_join) or an operator name ("Hash Join").
    """
    from rich.markup import escape
    from rich.panel import Panel
    from rich.table import Table

    from ..node_docs import doc_key_for, list_docs, lookup_doc_entry
    from ._common import console, print_json

    if key is None:
        entries = list_docs()
        if output_json:
            print_json([entry.to_dict() for entry in entries])
            return
        table = Table(title="Operator Docs", show_header=True, header_style="bold")
        table.add_column("Key", style="cyan")
        table.add_column("Title")
        table.add_column("Source", style="dim")
        for entry in entries:
            table.add_row(entry.key, entry.title, entry.source_url)
        console.print(table)
        return

    entry = lookup_doc_entry(key) or lookup_doc_entry(doc_key_for(key))
    if entry is None:
        raise click.ClickException(f"No documentation for '{key}'")

    if output_json:
        print_json(entry.to_dict())
        return

    body = escape(entry.summary)
    if entry.optimization:
        body += "\n\n[bold]Optimization[/bold]\n" + "\n".join(
            f"- {escape(tip)}" for tip in entry.optimization
        )
    body += f"\n\n[dim]{escape(entry.source_url)}[/dim]"
    console.print(Panel(body, title=escape(entry.title)))
