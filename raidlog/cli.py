#!/usr/bin/env python3
"""
Command-line interface for the raid combat log parser.
"""

import sys
import json
import click
import logging
from pathlib import Path
from datetime import datetime
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn
from rich.logging import RichHandler
from rich.markup import escape

from .config.loader import load_and_apply_config
from .config.settings import get_settings
from .parser.errors import RaidLogError
from .parser.parser import CombatLogParser
from .processing.encounter_processor import EncounterProcessor
from .processing.log_indexer import STRATEGIES, LogIndexer


# Set up rich consoles: results on stdout, logs and progress on stderr
console = Console()
err_console = Console(stderr=True)

# Configure logging
get_settings().setup_logging(handlers=[RichHandler(console=err_console, rich_tracebacks=True)])
logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose):
    """Raid Combat Log Parser - encounter segmentation and actor classification"""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def read_log(log_path: Path):
    """Read and tokenize a log file with a progress bar."""
    parser = CombatLogParser()
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=err_console,
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Reading log...", total=1.0)
        lines = parser.read_lines(
            str(log_path),
            progress_callback=lambda fraction, _read, _size: progress.update(task, completed=fraction),
        )
    return parser.tokenize(lines)


def fail(error: Exception):
    console.print(f"[red]Error: {error}[/red]")
    sys.exit(1)


@cli.command()
@click.argument("log_file", type=click.Path(exists=True))
@click.option("--strategy", type=click.Choice(STRATEGIES), default="pull", help="Segmentation strategy")
@click.option("--idle-gap-ms", type=int, default=None, help="Idle gap threshold for the idle strategy")
@click.option("--format", type=click.Choice(["summary", "json"]), default="summary")
@click.option("--output", "-o", help="Output file for JSON results")
@click.option("--config", "config_path", type=click.Path(exists=True), help="YAML configuration file")
@click.option("--trace", is_flag=True, help="Print the segmentation trace")
def index(log_file, strategy, idle_gap_ms, format, output, config_path, trace):
    """Find the encounters in a combat log."""
    log_path = Path(log_file)
    if format == "summary":
        console.print(f"[bold green]Indexing combat log:[/bold green] {log_path.name}")

    start_time = datetime.now()
    try:
        config = load_and_apply_config(config_path)
        if logger.isEnabledFor(logging.DEBUG):
            config.settings.log_configuration()
        lines = read_log(log_path)
        result = LogIndexer.from_config(config).index(lines, strategy=strategy, idle_gap_ms=idle_gap_ms)
    except (RaidLogError, ValueError) as e:
        fail(e)
    processing_time = (datetime.now() - start_time).total_seconds()

    if format == "json":
        write_json(result.to_dict(), output)
        return

    display_index_summary(result, processing_time)
    if trace:
        for entry in result.debug_log:
            console.print(f"[dim]{escape(entry)}[/dim]", highlight=False)


@cli.command()
@click.argument("log_file", type=click.Path(exists=True))
@click.option("--number", "-n", type=int, required=True, help="Encounter number (1-based, as listed by index)")
@click.option("--strategy", type=click.Choice(STRATEGIES), default="pull", help="Segmentation strategy")
@click.option("--format", type=click.Choice(["summary", "json"]), default="summary")
@click.option("--output", "-o", help="Output file for JSON results")
@click.option("--config", "config_path", type=click.Path(exists=True), help="YAML configuration file")
def encounter(log_file, number, strategy, format, output, config_path):
    """Parse one encounter in detail: actors, classification and DPS."""
    log_path = Path(log_file)
    try:
        config = load_and_apply_config(config_path)
        lines = read_log(log_path)
        result = LogIndexer.from_config(config).index(lines, strategy=strategy)
        if not 1 <= number <= len(result.encounters):
            console.print(
                f"[red]Encounter {number} not found; the log has {len(result.encounters)} encounters[/red]"
            )
            sys.exit(1)

        selected = result.encounters[number - 1]
        local_player = result.roster[0] if result.roster else None
        detail = EncounterProcessor.from_config(config).process(lines, selected, local_player=local_player)
    except (RaidLogError, ValueError) as e:
        fail(e)

    if format == "json":
        write_json(detail.to_dict(), output)
        return

    display_encounter_detail(number, detail)


def write_json(data, output_file):
    """Write JSON to a file, or to stdout when no file is given."""
    text = json.dumps(data, indent=2, default=str)
    if output_file:
        Path(output_file).write_text(text, encoding="utf-8")
        console.print(f"[green]Wrote {output_file}[/green]")
    else:
        click.echo(text)


def display_index_summary(result, processing_time):
    """Display the indexed encounters."""
    console.print("\n[bold cyan]═══ Indexing Complete ═══[/bold cyan]")

    stats_table = Table(title="Log Statistics", show_header=False)
    stats_table.add_column("Metric", style="cyan")
    stats_table.add_column("Value", style="white")

    stats_table.add_row("Lines", f"{result.line_count:,}")
    stats_table.add_row("Processing Time", f"{processing_time:.2f}s")
    stats_table.add_row("Strategy", result.strategy)
    stats_table.add_row("Instance", result.instance)
    stats_table.add_row("Boss", result.boss)
    stats_table.add_row("Party", ", ".join(result.roster) or "-")
    stats_table.add_row("Encounters", str(len(result.encounters)))
    stats_table.add_row("Kills", str(len(result.kills)))

    console.print(stats_table)

    if not result.encounters:
        console.print("[yellow]No encounters found[/yellow]")
        return

    enc_table = Table(title=f"\n[bold]Encounters ({len(result.encounters)})[/bold]")
    enc_table.add_column("#", style="dim", width=3)
    enc_table.add_column("Boss", width=28)
    enc_table.add_column("Start", width=12)
    enc_table.add_column("Duration", width=8)
    enc_table.add_column("Lines", width=9)
    enc_table.add_column("Boss HP", width=8)
    enc_table.add_column("Result", width=6)

    for i, enc in enumerate(result.encounters, 1):
        result_color = "green" if enc.is_kill else "red"
        hp = f"{enc.lowest_boss_hp_pct}%" if enc.lowest_boss_hp_pct is not None else "-"
        enc_table.add_row(
            str(i),
            enc.boss[:28],
            enc.start_time.strftime("%H:%M:%S"),
            enc.get_duration_str(),
            f"{enc.start_line}-{enc.end_line}",
            hp,
            f"[{result_color}]{enc.encounter_type.value.title()}[/{result_color}]",
        )

    console.print(enc_table)


def display_encounter_detail(number, detail):
    """Display actors, classification and DPS for one encounter."""
    enc = detail.encounter
    classification = detail.classification
    result_color = "green" if enc.is_kill else "red"

    console.print(
        f"\n[bold cyan]═══ Encounter {number}: {enc.boss} ═══[/bold cyan] "
        f"[{result_color}]{enc.encounter_type.value.title()}[/{result_color}] "
        f"({enc.get_duration_str()}, {len(detail.events)} damage events)"
    )

    actor_table = Table(title="Actors")
    actor_table.add_column("Name", style="green")
    actor_table.add_column("Class", style="cyan")
    actor_table.add_column("Job", width=5)
    actor_table.add_column("Role", width=7)
    actor_table.add_column("Damage Dealt", justify="right")
    actor_table.add_column("Damage Taken", justify="right")
    actor_table.add_column("Hits Taken", justify="right")

    ordered = ([classification.boss] if classification.boss else []) + classification.adds + classification.party_members
    for actor in ordered:
        actor_table.add_row(
            actor.name,
            actor.classification.value if actor.classification else "-",
            actor.job or "-",
            actor.role or "-",
            f"{actor.total_damage_dealt:,}",
            f"{actor.total_damage_taken:,}",
            str(actor.hit_count),
        )
    console.print(actor_table)

    rankings = detail.metrics and sorted(detail.metrics.values(), key=lambda m: m.dps, reverse=True)
    if not rankings:
        console.print("[yellow]No damage events in this encounter[/yellow]")
        return

    dps_table = Table(title=f"\n[bold]DPS ({detail.duration_seconds}s)[/bold]")
    dps_table.add_column("Actor", style="green")
    dps_table.add_column("Total Damage", style="red", justify="right")
    dps_table.add_column("DPS", justify="right")

    for metrics in rankings:
        dps_table.add_row(metrics.actor_name, f"{metrics.total_damage:,}", f"{metrics.dps:,.1f}")
    console.print(dps_table)


def main():
    """Entry point for the raidlog command."""
    cli()


if __name__ == "__main__":
    main()
