# ABOUTME: Provides a CLI that prints a student's performance dashboard and remediation plan.
# ABOUTME: Reads attempts from a JSON export so the analytics can be inspected without the web layer.

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from src.performance.config import AnalyticsConfig, load_config
from src.performance.errors import ConfigError, InternalLoadError
from src.performance.loader import json_stores, load_all_attempts_sync
from src.performance.log import configure_logging
from src.performance.service import analyze_bundle, plan_bundle
from src.performance.weak_topics import classify_weaknesses

console = Console()
app = typer.Typer(help="Inspect trend, weak topics, and recommendation plans for one student.")


def _load_config(config: Optional[Path]) -> AnalyticsConfig:
    try:
        return load_config(config)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


@app.command()
def dashboard(
    user_id: str = typer.Option(..., "--user-id", help="Student identifier in the attempt export."),
    attempts: Path = typer.Option(..., "--attempts", exists=True, dir_okay=False, help="JSON export of attempts."),
    config: Optional[Path] = typer.Option(None, "--config", help="Analytics config YAML."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw dashboard payload."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for diagnostics on stderr."),
) -> None:
    """
    Show the exam trend, predicted score, pass probability, and weakest topics.
    """
    configure_logging(log_level)
    cfg = _load_config(config)
    try:
        bundle = load_all_attempts_sync(user_id, json_stores(attempts))
    except InternalLoadError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    payload = analyze_bundle(bundle, cfg)
    if as_json:
        typer.echo(json.dumps(payload.to_dict(), sort_keys=True))
        return

    console.rule("[bold blue]Performance Dashboard[/bold blue]")
    console.print(f"[bold]Student:[/] {user_id}")
    console.print(f"[bold]Trend:[/] slope {payload.model.slope:.2f}, intercept {payload.model.intercept:.2f}")
    console.print(f"[bold]Predicted next score:[/] {payload.predicted_score:.1f}")
    console.print(f"[bold]Pass probability:[/] {payload.pass_probability:.1f}%")
    if payload.learning_pattern is not None:
        pattern = payload.learning_pattern
        console.print(
            f"[bold]Pattern:[/] {pattern.direction}, consistency {pattern.consistency}, speed {pattern.learning_speed}"
        )
    console.print()

    topic_table = Table(show_header=True, header_style="bold magenta")
    topic_table.add_column("Domain")
    topic_table.add_column("Topic")
    topic_table.add_column("Accuracy")
    topic_table.add_column("Questions")
    for entry in payload.weak_topics:
        topic_table.add_row(entry.domain, entry.topic, f"{entry.accuracy}%", str(entry.sample_count))
    console.print("[bold yellow]Weak Topics[/bold yellow]")
    console.print(topic_table)

    summary = classify_weaknesses(payload.weak_topics)
    if summary.critical:
        console.print(f"[red]Critical:[/red] {', '.join(summary.critical)}")
    if summary.moderate:
        console.print(f"[orange3]Moderate:[/orange3] {', '.join(summary.moderate)}")
    if summary.strengths:
        console.print(f"[green]Strengths:[/green] {', '.join(summary.strengths)}")

    for domain, score in payload.category_scores.items():
        console.print(f"  {domain}: {score}")


@app.command()
def plan(
    user_id: str = typer.Option(..., "--user-id", help="Student identifier in the attempt export."),
    attempts: Path = typer.Option(..., "--attempts", exists=True, dir_okay=False, help="JSON export of attempts."),
    config: Optional[Path] = typer.Option(None, "--config", help="Analytics config YAML."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw recommendation path."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for diagnostics on stderr."),
) -> None:
    """
    Build the remediation plan targeting the weakest topics first.
    """
    configure_logging(log_level)
    cfg = _load_config(config)
    try:
        bundle = load_all_attempts_sync(user_id, json_stores(attempts))
    except InternalLoadError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    path = plan_bundle(bundle, cfg)
    if as_json:
        typer.echo(json.dumps(path.to_dict(), sort_keys=True))
        return

    if not path.steps:
        console.print(f"[green]✅ Nothing diagnosed as weak yet for {user_id}[/green]")
        return

    console.rule(f"[bold blue]{path.name}[/bold blue]")
    console.print(f"[bold]Goal:[/] {path.goal}")
    console.print(f"[bold]Duration:[/] {path.estimated_duration} days (target {path.target_completion_date:%Y-%m-%d})")
    step_table = Table(show_header=True, header_style="bold magenta")
    step_table.add_column("#")
    step_table.add_column("Title")
    step_table.add_column("Status")
    step_table.add_column("Days")
    step_table.add_column("Difficulty")
    for i, step in enumerate(path.steps, start=1):
        step_table.add_row(str(i), step.title, step.status, str(step.estimated_days), step.difficulty)
    console.print(step_table)


if __name__ == "__main__":
    app()
