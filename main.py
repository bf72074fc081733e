#!/usr/bin/env python3
"""
factorbench - CLI Entry Point

Usage:
    python main.py run find_element --sample-size 20
    python main.py run two_sum --baseline reports/20251224_host/results_two_sum.json
    python main.py keys find_element
    python main.py list-experiments
"""

import sys
import logging
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import click
from rich.console import Console
from rich.table import Table
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from factorbench import __version__
from factorbench.config import Config
from factorbench.errors import ExperimentError, KeyTooLong
from factorbench.experiments import EXPERIMENTS, get_experiment, list_experiments
from factorbench.factors.keys import treatment_key, treatment_key_short
from factorbench.benchmark.grid import TreatmentGrid
from factorbench.benchmark.metrics import SimpleHarness
from factorbench.benchmark.runner import ExperimentRunner, RunnerConfig
from factorbench.benchmark.reporter import Reporter, load_baseline

logger = logging.getLogger(__name__)

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging level."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure root logger
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )

    logging.getLogger("factorbench").setLevel(level)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output (INFO level, shows treatment progress)')
@click.option('--debug', is_flag=True, help='Enable debug output (DEBUG level, shows state transitions)')
@click.pass_context
def cli(ctx, verbose, debug):
    """
    factorbench

    Full-factorial micro-benchmarks: every algorithm variant is timed on
    every input, each input is built once, and each treatment is validated
    once outside of timing.

    Use -v for progress logs, --debug for detailed logs.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['debug'] = debug
    setup_logging(verbose, debug)


@cli.command()
@click.argument('experiment')
@click.option('--name', '-n', default=None, help='Benchmark name used in reports (default: experiment name)')
@click.option('--sample-size', '-s', default=None, type=int, help='Samples per treatment')
@click.option('--warmup', '-w', default=None, type=float, help='Warm-up time per treatment in seconds')
@click.option('--measurement-time', '-m', default=None, type=float, help='Target measurement time per treatment in seconds')
@click.option('--max-key-length', default=None, type=int, help='Limit for short treatment keys')
@click.option('--baseline', '-b', default=None, type=click.Path(exists=True), help='JSON results of a previous run to compare with')
@click.option('--validate/--no-validate', default=True, help='Validate each treatment once before timing')
@click.option('--format', '-f', 'fmt', type=click.Choice(['md', 'json', 'csv', 'all']), default='all', help='Report format')
@click.option('--output-dir', '-o', default=None, type=click.Path(), help='Report base directory (default: REPORT_DIR)')
def run(experiment, name, sample_size, warmup, measurement_time, max_key_length, baseline, validate, fmt, output_dir):
    """
    Run a full-factorial experiment.

    Example:
        python main.py run find_element -s 10 -m 1.0
    """
    console.print(f"\n[bold blue]factorbench[/bold blue]")
    console.print(f"Experiment: [cyan]{experiment}[/cyan]")

    try:
        exp = get_experiment(experiment)
    except ExperimentError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    input_levels, alg_levels = exp.default_levels()
    total = len(input_levels) * len(alg_levels)
    console.print(
        f"Grid: [cyan]{len(input_levels)}[/cyan] data points x "
        f"[cyan]{len(alg_levels)}[/cyan] variants => [cyan]{total}[/cyan] treatments"
    )
    console.print("")

    settings = Config.harness_settings()
    if sample_size is not None:
        settings["sample_size"] = sample_size
    if warmup is not None:
        settings["warmup_time"] = warmup
    if measurement_time is not None:
        settings["measurement_time"] = measurement_time

    runner = ExperimentRunner(
        exp,
        harness=SimpleHarness(**settings),
        config=RunnerConfig(max_key_length=max_key_length, validate=validate),
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
    ) as progress:
        task = progress.add_task("Running treatments...", total=total)
        runner.on_progress(lambda completed, _total: progress.update(task, completed=completed))

        try:
            result = runner.run(input_levels, alg_levels, name=name)
        except ExperimentError as e:
            progress.stop()
            console.print(f"\n[red]❌ {e}[/red]")
            sys.exit(1)

    # Generate reports
    reporter = Reporter(Path(output_dir) if output_dir else None)

    changes = None
    if baseline:
        changes = reporter.compare_with_baseline(result, load_baseline(baseline))
        console.print(f"Compared {len(changes)} treatments with baseline [cyan]{baseline}[/cyan]")

    if fmt in ['md', 'all']:
        md_path = reporter.generate_markdown(result, baseline_changes=changes)
        console.print(f"📄 Markdown summary: [green]{md_path}[/green]")

    if fmt in ['json', 'all']:
        json_path = reporter.generate_json(result)
        console.print(f"📊 JSON results: [green]{json_path}[/green]")

    if fmt in ['csv', 'all']:
        csv_path = reporter.generate_csv(result)
        prompt_path = reporter.generate_ai_prompt(result, csv_path)
        console.print(f"📈 CSV summary: [green]{csv_path}[/green]")
        console.print(f"📝 Analysis prompt: [green]{prompt_path}[/green]")

    reporter.print_summary(result, baseline_changes=changes, console=console)


@cli.command()
@click.argument('experiment')
@click.option('--max-key-length', default=None, type=int, help='Limit for short treatment keys')
def keys(experiment, max_key_length):
    """
    Show the full and short key of every treatment.

    Example:
        python main.py keys find_element --max-key-length 32
    """
    try:
        exp = get_experiment(experiment)
    except ExperimentError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    limit = Config.MAX_KEY_LENGTH if max_key_length is None else max_key_length
    input_levels, alg_levels = exp.default_levels()

    table = Table(title=f"{exp.name} treatments (short key limit: {limit})")
    table.add_column("#", justify="right")
    table.add_column("Full Key", style="cyan")
    table.add_column("Short Key")
    table.add_column("Length", justify="right")

    too_long = 0
    for position in TreatmentGrid(input_levels, alg_levels):
        full = treatment_key(position.input_level, position.alg_level)
        try:
            short = treatment_key_short(position.input_level, position.alg_level, max_length=limit)
            table.add_row(position.label, full, short, str(len(short)))
        except KeyTooLong as e:
            too_long += 1
            table.add_row(position.label, full, f"[red]{e.key}[/red]", f"[red]{e.length}[/red]")

    console.print(table)

    if too_long:
        console.print(f"\n[red]❌ {too_long} short keys exceed {limit} characters[/red]")
        sys.exit(1)
    console.print(f"\n[green]✅ All short keys fit in {limit} characters[/green]")


@cli.command('list-experiments')
def list_experiments_cmd():
    """List available experiments."""
    console.print("\n[bold]Available Experiments:[/bold]\n")

    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("Display Name")
    table.add_column("Description")
    table.add_column("Treatments", justify="right")

    for name in list_experiments():
        exp = EXPERIMENTS[name]()
        input_levels, alg_levels = exp.default_levels()
        table.add_row(
            name,
            exp.display_name,
            exp.description,
            f"{len(input_levels)} x {len(alg_levels)}",
        )

    console.print(table)
    console.print("\nUse: python main.py run <experiment>")


@cli.command('init')
def init():
    """Initialize output directories."""
    console.print("\n[bold blue]Initializing factorbench[/bold blue]\n")

    Config.ensure_directories()
    console.print(f"✅ Created reports directory: {Config.REPORT_DIR}")

    env_file = Path(".env")
    if not env_file.exists():
        console.print("\n[yellow]⚠️  No .env file found, using defaults.[/yellow]")
        console.print("Harness settings can be set with FACTORBENCH_* variables in .env")
    else:
        console.print("✅ .env file exists")

    console.print("\n[bold]Next steps:[/bold]")
    console.print("1. List experiments: python main.py list-experiments")
    console.print("2. Check keys: python main.py keys find_element")
    console.print("3. Run: python main.py run find_element")


if __name__ == "__main__":
    cli()
