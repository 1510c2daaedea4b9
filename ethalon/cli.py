"""CLI entry point for the ethalon harness."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ethalon.comparator.chunked import DEFAULT_BLOCK_SIZE, compare_buffers
from ethalon.models.config import FramePolicy, HarnessConfig
from ethalon.orchestrator import Orchestrator

console = Console()

_RESULT_STYLES = {"pass": "green", "fail": "red", "error": "red", "skip": "yellow"}


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config: str) -> HarnessConfig:
    try:
        return HarnessConfig.load(config)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config}[/red]")
        console.print("Run 'ethalon init' to create a default config.")
        sys.exit(2)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Golden-reference regression harness for decoded pixel output"""
    setup_logging(verbose)


@cli.command()
@click.option("--config", "-c", default="ethalon-config.json", help="Config file path")
@click.option(
    "--policy",
    type=click.Choice([p.value for p in FramePolicy]),
    default=None,
    help="Frame policy for container scenarios",
)
@click.option("--block-size", type=click.IntRange(min=1), default=None, help="Comparison block size in bytes")
@click.option("--stream", is_flag=True, help="Stream ethalons from disk block by block")
def run(config: str, policy: str | None, block_size: int | None, stream: bool) -> None:
    """Decode every configured sample and compare it with its ethalon."""
    cfg = _load_config(config)
    if policy is not None:
        cfg.frame_policy = FramePolicy(policy)
    if block_size is not None:
        cfg.block_size = block_size
    if stream:
        cfg.stream_references = True

    orchestrator = Orchestrator(cfg)
    results = orchestrator.run()
    run_result = results["run_result"]

    table = Table(title=f"Ethalon Run {run_result.run_id}")
    table.add_column("Scenario", style="bold")
    table.add_column("Category")
    table.add_column("Result")
    table.add_column("Details")
    for r in run_result.scenario_results:
        style = _RESULT_STYLES.get(r.result, "white")
        table.add_row(
            r.scenario_id, r.category,
            f"[{style}]{r.result.upper()}[/{style}]",
            r.failure_reason or f"{len(r.frames)} buffer(s) matched",
        )
    console.print(table)
    console.print(results["summary"])

    for fmt, path in results["reports"].items():
        console.print(f"  {fmt.upper()} report: [blue]{path}[/blue]")

    if run_result.failed or run_result.errors:
        sys.exit(1)


@cli.command()
@click.argument("actual", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("expected", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--block-size", type=click.IntRange(min=1), default=DEFAULT_BLOCK_SIZE, help="Comparison block size in bytes")
def compare(actual: Path, expected: Path, block_size: int) -> None:
    """Compare a raw pixel dump with an ethalon blob."""
    result = compare_buffers(actual.read_bytes(), expected.read_bytes(), block_size)
    if result.passed:
        console.print(f"[green]PASS[/green] {result.describe()}")
        return
    console.print(f"[red]FAIL[/red] {result.describe()}")
    sys.exit(1)


@cli.command()
@click.option("--config", "-c", default="ethalon-config.json", help="Config file path")
def scenarios(config: str) -> None:
    """List the configured scenarios."""
    cfg = _load_config(config)
    if not cfg.scenarios:
        console.print("[yellow]No scenarios configured[/yellow]")
        return
    table = Table(title="Scenarios")
    table.add_column("Sample", style="bold")
    table.add_column("Category")
    table.add_column("Frames")
    table.add_column("Pixel format")
    for spec in cfg.scenarios:
        fmt = spec.pixel_format or cfg.pixel_format
        table.add_row(spec.sample, spec.category, "yes" if spec.frames else "no", fmt.value)
    console.print(table)


@cli.command()
@click.option("--samples", default="TestsData/samples", help="Samples directory")
@click.option("--ethalons", default="TestsData/ethalons", help="Ethalons directory")
@click.option("--config", "-c", default="ethalon-config.json", help="Config file path")
def init(samples: str, ethalons: str, config: str) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    cfg = HarnessConfig(samples_dir=samples, ethalons_dir=ethalons)
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nYou can now customize this file and run:")
    console.print("  [blue]ethalon run[/blue]")


if __name__ == "__main__":
    cli()
