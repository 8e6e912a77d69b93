"""QueryTorque Plan CLI — inspect and analyze execution plans.

Usage: qt-plan <command> [options]

Commands:
    qt-plan parse <plan.txt>        Plan tree and rolled-up stats
    qt-plan insights <plan.txt>     Rule-based findings
    qt-plan digest <plan.txt>       Bounded JSON digest
    qt-plan analyze <plan.txt>      External AI analysis of the digest
    qt-plan docs [KEY]              Operator documentation
    qt-plan sample                  Print a demo plan
"""

from __future__ import annotations

import click


@click.group()
@click.version_option(version="0.1.0", prog_name="qt-plan")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """QueryTorque Plan — execution plan ingestion and analysis."""
    import logging

    from qt_shared.config import get_settings

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s")
    elif quiet:
        logging.basicConfig(level=logging.WARNING)
    else:
        level = getattr(logging, get_settings().log_level.upper(), logging.INFO)
        logging.basicConfig(level=level, format="%(message)s")


# --- Lazy command registration (keeps `qt-plan --help` fast) ---

def _register_commands() -> None:
    """Import and register all sub-commands."""
    from .cmd_parse import parse_cmd
    from .cmd_insights import insights
    from .cmd_digest import digest
    from .cmd_analyze import analyze
    from .cmd_docs import docs
    from .cmd_sample import sample

    main.add_command(parse_cmd)
    main.add_command(insights)
    main.add_command(digest)
    main.add_command(analyze)
    main.add_command(docs)
    main.add_command(sample)


_register_commands()
