"""qt-plan analyze — external AI analysis of a plan digest.

Usage:
    qt-plan analyze plan.json --sql query.sql
    qt-plan analyze plan.json --locale zh --json
    qt-plan analyze plan.json --base-url https://gateway.local --model my-model --api-key ...
"""

from __future__ import annotations

import click

from ._common import plan_options


@click.command()
@plan_options
@click.option("--locale", default=None, help="Reply language (en or zh). Defaults to QT_AI_LOCALE.")
@click.option("--base-url", default=None, help="OpenAI-compatible endpoint (QT_AI_BASE_URL).")
@click.option("--model", default=None, help="Model name (QT_AI_MODEL).")
@click.option("--api-key", default=None, help="Bearer credential (QT_AI_API_KEY).")
@click.option("--json", "output_json", is_flag=True, help="Output the normalized result as JSON.")
def analyze(
    plan_file,
    dialect,
    title,
    sql_file,
    source,
    locale: str | None,
    base_url: str | None,
    model: str | None,
    api_key: str | None,
    output_json: bool,
) -> None:
    """Send the compact digest of PLAN_FILE for AI analysis."""
    from rich.markup import escape
    from rich.panel import Panel

    from qt_shared.config import get_settings
    from qt_shared.llm import create_llm_client

    from ..ai_insights import AiConfigurationError, analyze_plan_with_ai
    from ._common import SEVERITY_COLORS, console, load_execution, print_json

    execution = load_execution(plan_file, dialect, title, sql_file, source)
    client = create_llm_client(base_url=base_url, model=model, api_key=api_key)
    locale = locale or get_settings().ai_locale

    try:
        outcome = analyze_plan_with_ai(execution, client, locale=locale)
    except AiConfigurationError as e:
        raise click.ClickException(str(e))
    except Exception as e:
        raise click.ClickException(f"AI analysis failed: {e}")

    if outcome.result is None:
        click.echo(outcome.raw)
        raise click.ClickException("AI reply did not contain a JSON object")

    result = outcome.result
    if output_json:
        print_json(result.model_dump())
        return

    quality = result.planQuality
    color = {"good": "green", "critical": "red"}.get(quality.rating, "yellow")
    body = escape(result.summary or "(no summary)")
    if quality.rationale:
        body += "\n\n" + "\n".join(f"- {escape(r)}" for r in quality.rationale)
    console.print(Panel(body, title=f"Plan quality: [{color}]{quality.rating}[/{color}]"))

    if result.findings:
        console.print("\n[bold]Findings[/bold]")
        for f in result.findings:
            sev_color = SEVERITY_COLORS.get(f.severity, "white")
            console.print(f"  [{sev_color}]{f.severity.upper():8s}[/{sev_color}] {escape(f.title)}")
            if f.detail:
                console.print(f"           {escape(f.detail)}")
            if f.evidence:
                console.print(f"           [dim]{escape(f.evidence)}[/dim]")

    if result.recommendations:
        console.print("\n[bold]Recommendations[/bold]")
        for rec in result.recommendations:
            line = f"  • {escape(rec.action)}"
            if rec.impact:
                line += f" [dim]({escape(rec.impact)})[/dim]"
            console.print(line)
            if rec.rationale:
                console.print(f"    {escape(rec.rationale)}")

    if result.indexHints:
        console.print("\n[bold]Index hints[/bold]")
        for hint in result.indexHints:
            target = f"{hint.table}({', '.join(hint.columns)})" if hint.table else ", ".join(hint.columns)
            console.print(f"  {escape(target)}: {escape(hint.reason)}")

    if result.followUps:
        console.print("\n[bold]Follow-ups[/bold]")
        for item in result.followUps:
            console.print(f"  - {escape(item)}")

    if result.sources:
        console.print("\n[bold]Sources[/bold]")
        for src in result.sources:
            console.print(f"  {escape(src.title)} [dim]{escape(src.url)}[/dim]")
