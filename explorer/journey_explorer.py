#!/usr/bin/env python3
"""
Journey Explorer - Staged exploration of a question

Usage:
    python journey_explorer.py run "<question>" [--stages N]   # Run a journey
    python journey_explorer.py status <journey_id>             # Show a journey and its stages
    python journey_explorer.py pause <journey_id>              # Pause after the current stage
    python journey_explorer.py stop <journey_id>               # Stop with a final summary
    python journey_explorer.py list                            # Recent journeys
    python journey_explorer.py help                            # Show this help
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

# Make the repository root importable when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from explorer.src.config import ExplorationConfig, load_config
from explorer.src.models import JourneyStatus
from llm.src.models import ChunkType
from shared.logging import configure_logging

console = Console(force_terminal=True, legacy_windows=False)


def _load():
    raw = load_config()
    logging_config = raw.get("logging", {}) or {}
    configure_logging(
        level=logging_config.get("level", "INFO"),
        json_output=logging_config.get("json", False),
    )
    return ExplorationConfig.from_dict(raw)


def _open_db(config: ExplorationConfig):
    from explorer.src.storage.db import JourneyDatabase

    return JourneyDatabase(config.database_path)


def _journey_id_arg() -> str:
    if len(sys.argv) < 3:
        console.print("[red]A journey id is required.[/red]")
        sys.exit(1)
    return sys.argv[2]


def parse_run_args(args: list[str]) -> tuple[str, Optional[int]]:
    """Split ``run`` arguments into the question and an optional --stages value."""
    stages = None
    words = []
    i = 0
    while i < len(args):
        if args[i] == "--stages" and i + 1 < len(args):
            stages = int(args[i + 1])
            i += 2
            continue
        words.append(args[i])
        i += 1
    return " ".join(words).strip(), stages


def cmd_run():
    """Run a journey to completion (or until paused/stopped)."""
    from explorer.src.orchestrator import StageOrchestrator
    from llm.src.client import GenerativeClient

    question, stages = parse_run_args(sys.argv[2:])
    if not question:
        console.print("[red]Usage: journey_explorer.py run \"<question>\" [--stages N][/red]")
        sys.exit(1)

    config = _load()
    if stages is not None:
        config.max_stages = stages

    db = _open_db(config)
    client = GenerativeClient(max_tokens=config.max_tokens)
    orchestrator = StageOrchestrator(config, client, store=db)

    def show(event):
        if event.type == ChunkType.CONTENT:
            console.print(event.text, end="", markup=False, highlight=False)

    orchestrator.add_observer(show)

    console.print(Panel(f"[bold]Journey:[/bold] {orchestrator.journey_id}\n{question}"))
    console.print("Press Ctrl+C to stop.\n")

    async def run():
        await orchestrator.start(question)
        await orchestrator.wait_until_idle()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        db.set_journey_status(orchestrator.journey_id, JourneyStatus.PAUSED)

    console.print()
    console.print(Panel(orchestrator.get_summary()))


def cmd_status():
    """Show one journey and its stages."""
    journey_id = _journey_id_arg()
    db = _open_db(_load())

    journey = db.get_journey(journey_id)
    if journey is None:
        console.print(f"[red]Journey not found: {journey_id}[/red]")
        return

    console.print(Panel(
        f"[bold]{journey['id']}[/bold]\n"
        f"  Input: {journey['input']}\n"
        f"  Status: {journey['status']}\n"
        f"  Stages: {journey['stage_count']}/{journey['max_stages'] or '∞'}"
    ))

    table = Table()
    table.add_column("#", style="cyan")
    table.add_column("Stage")
    table.add_column("Status")
    table.add_column("Quality")
    for stage in db.get_stages(journey_id):
        style = "green" if stage.status.value == "complete" else "red"
        quality = f"{stage.quality_score:.1f}" if stage.quality_score is not None else "-"
        table.add_row(
            str(stage.stage_number),
            stage.label,
            f"[{style}]{stage.status.value}[/{style}]",
            quality,
        )
    console.print(table)


def _set_status(status: JourneyStatus):
    journey_id = _journey_id_arg()
    db = _open_db(_load())
    if db.get_journey(journey_id) is None:
        console.print(f"[red]Journey not found: {journey_id}[/red]")
        return
    db.set_journey_status(journey_id, status)
    console.print(f"[green]✓[/green] {journey_id}: {status.value}")


def cmd_pause():
    """Pause a running journey after its current stage."""
    _set_status(JourneyStatus.PAUSED)


def cmd_stop():
    """Stop a running journey; it ends with a summary stage."""
    _set_status(JourneyStatus.STOPPED)


def cmd_list():
    """List recent journeys."""
    db = _open_db(_load())
    journeys = db.list_journeys()
    if not journeys:
        console.print("[yellow]No journeys yet.[/yellow]")
        return

    table = Table()
    table.add_column("Journey", style="cyan")
    table.add_column("Status")
    table.add_column("Stages")
    table.add_column("Input")
    for journey in journeys:
        table.add_row(
            journey["id"],
            journey["status"],
            str(journey["stage_count"]),
            (journey["input"] or "")[:60],
        )
    console.print(table)


def cmd_help():
    """Show help."""
    console.print(__doc__)


COMMANDS = {
    "run": cmd_run,
    "status": cmd_status,
    "pause": cmd_pause,
    "stop": cmd_stop,
    "list": cmd_list,
    "help": cmd_help,
    "--help": cmd_help,
    "-h": cmd_help,
}


def main():
    if len(sys.argv) < 2:
        cmd_help()
        return

    cmd = sys.argv[1].lower()

    if cmd in COMMANDS:
        COMMANDS[cmd]()
    else:
        console.print(f"[red]Unknown command: {cmd}[/red]")
        cmd_help()


if __name__ == "__main__":
    main()
