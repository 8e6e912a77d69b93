"""qt-plan digest — bounded JSON summary of a plan."""

from __future__ import annotations

import click

from ._common import plan_options


@click.command()
@plan_options
def digest(plan_file, dialect, title, sql_file, source) -> None:
    """Print the compact digest of PLAN_FILE as JSON.

    This is the exact payload sent for external analysis.
    """
    from ..digest import compact
    from ._common import load_execution, print_json

    execution = load_execution(plan_file, dialect, title, sql_file, source)
    print_json(compact(execution).to_dict())
