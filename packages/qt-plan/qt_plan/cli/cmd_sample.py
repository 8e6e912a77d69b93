"""qt-plan sample — print a bundled demo plan."""

from __future__ import annotations

import click


@click.command()
@click.option(
    "--format", "fmt",
    type=click.Choice(["json", "text", "table"]),
    default="json",
    show_default=True,
    help="Plan text shape.",
)
@click.option("--sql", "show_sql", is_flag=True, help="Print the demo query instead.")
def sample(fmt: str, show_sql: bool) -> None:
    """Print a demo plan, ready to pipe into other commands.

    Example:
        qt-plan sample --format table | qt-plan insights -
    """
    from ..samples import SAMPLE_SQL, get_sample

    click.echo(SAMPLE_SQL if show_sql else get_sample(fmt).rstrip("\n"))
