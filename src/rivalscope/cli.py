"""
RivalScope CLI - Command-line interface for competitive-intelligence missions.

Commands:
- init: Write a default rivalscope.toml
- run: Run one mission from a MissionContext JSON file
- serve: Start the HTTP API (mission trigger, recurring jobs, scheduler)
- schedule: Run the recurring-mission scheduler on its own
- next-run: Show when a recurring frequency fires next
"""

import asyncio
import json
from pathlib import Path
from typing import Optional
from uuid import uuid4

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import AppConfig, create_default_config, load_config_or_default
from .mission.models import MissionContext
from .scheduling.models import Frequency
from .scheduling.schedule import calculate_next_run
from .utils.logging import setup_logging

app = typer.Typer(
    name="rivalscope",
    help="Autonomous competitive-intelligence missions",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()

CONFIG_OPTION_HELP = "Config file path"


@app.command()
def init(
    path: Path = typer.Option(Path.cwd(), "--path", "-p", help="Project directory"),
    gateway_url: str = typer.Option(
        "http://localhost:8080/mcp", "--gateway-url", "-g", help="Tool gateway endpoint"
    ),
) -> None:
    """
    Create rivalscope.toml with default settings.

    Example:
        rivalscope init --gateway-url https://gateway.example.com/mcp
    """
    path.mkdir(parents=True, exist_ok=True)
    config_path = path / "rivalscope.toml"

    if config_path.exists():
        console.print(f"[yellow]Warning:[/yellow] {config_path} already exists.")
        raise typer.Exit(1)

    create_default_config(config_path, gateway_url)
    console.print(Panel.fit(
        f"[green]Created[/green] {config_path}\n\n"
        "Set API keys in the environment:\n"
        "  GROQ_API_KEY, XAI_API_KEY, RESEND_API_KEY, GATEWAY_TOKEN",
        title="RivalScope",
    ))


def load_mission_context(context_file: Path) -> MissionContext:
    """
    Read a MissionContext from JSON (camelCase or snake_case keys).

    Raises:
        ValueError: If the file is not a valid mission context
    """
    try:
        return MissionContext.model_validate(json.loads(context_file.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ValueError(f"Invalid mission context in {context_file}: {e}") from e


@app.command()
def run(
    context_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="MissionContext JSON"),
    minutes: Optional[float] = typer.Option(None, "--minutes", "-m", help="Research budget"),
    no_send: bool = typer.Option(False, "--no-send", help="Do not email the report"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the HTML report here"),
    config: Path = typer.Option(Path("rivalscope.toml"), "--config", "-c", help=CONFIG_OPTION_HELP),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Log level"),
) -> None:
    """
    Run one mission to completion.

    Example:
        rivalscope run context.json --minutes 10 --no-send --out dossier.html
    """
    setup_logging(level=log_level)

    try:
        app_config = load_config_or_default(config)
        context = load_mission_context(context_file)
        asyncio.run(_run_mission(app_config, context, minutes, not no_send, out))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(0)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


async def _run_mission(
    config: AppConfig,
    context: MissionContext,
    minutes: Optional[float],
    send: bool,
    out: Optional[Path],
) -> None:
    from .mission.services import create_executor

    executor = create_executor(config)
    duration = minutes or config.mission.default_duration_minutes
    result = await executor.execute(f"cli-{uuid4().hex[:8]}", context, duration, send=send)

    if out:
        out.write_text(result.report_html, encoding="utf-8")

    metrics = result.state.metrics
    table = Table(title=f"Mission {result.mission_id}")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Findings", str(len(result.state.findings)))
    table.add_row("Iterations", str(result.state.iteration_count))
    table.add_row("Tool calls", str(metrics.total_tool_calls))
    for tool_id, count in sorted(metrics.calls_by_tool.items()):
        table.add_row(f"  {tool_id}", str(count))
    table.add_row("Graph writes", str(metrics.graph_writes))
    table.add_row("Stale findings dropped", str(metrics.recency_filtered))
    table.add_row("Recommendations", str(len(result.analysis.recommendations)))
    table.add_row("Delivered", "yes" if result.delivered else "no")
    console.print(table)

    if out:
        console.print(f"[green]✓[/green] Report written to {out}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),
    port: int = typer.Option(4000, "--port", help="Port"),
    no_scheduler: bool = typer.Option(False, "--no-scheduler", help="Do not sweep recurring jobs"),
    config: Path = typer.Option(Path("rivalscope.toml"), "--config", "-c", help=CONFIG_OPTION_HELP),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Log level"),
) -> None:
    """
    Start the HTTP API.

    Example:
        rivalscope serve --port 4000
    """
    import uvicorn

    from .mission.services import create_executor
    from .web.server import create_app

    setup_logging(level=log_level)

    try:
        app_config = load_config_or_default(config)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    api = create_app(app_config, create_executor(app_config), run_scheduler=not no_scheduler)
    uvicorn.run(api, host=host, port=port, log_level=log_level.lower())


@app.command()
def schedule(
    config: Path = typer.Option(Path("rivalscope.toml"), "--config", "-c", help=CONFIG_OPTION_HELP),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Log level"),
) -> None:
    """Run the recurring-mission scheduler without the HTTP API."""
    setup_logging(level=log_level)

    try:
        asyncio.run(_run_scheduler(load_config_or_default(config)))
    except KeyboardInterrupt:
        console.print("\n[yellow]Scheduler stopped[/yellow]")
        raise typer.Exit(0)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


async def _run_scheduler(config: AppConfig) -> None:
    from .mission.services import create_executor
    from .scheduling.store import JobStore
    from .scheduling.sweeper import RecurringMissionSweeper

    store = JobStore(config.storage.jobs_db_path)
    await store.initialize()
    try:
        sweeper = RecurringMissionSweeper(
            store, create_executor(config), config.scheduler.mission_duration_minutes
        )
        await sweeper.run_forever(config.scheduler.sweep_interval_seconds)
    finally:
        await store.close()


@app.command("next-run")
def next_run(
    frequency: Frequency = typer.Argument(..., help="Recurring frequency"),
) -> None:
    """
    Print the next run time for a frequency.

    Example:
        rivalscope next-run WEEKLY_FRIDAY
    """
    console.print(calculate_next_run(frequency))


if __name__ == "__main__":
    app()
