"""Mosaic - Wave Function Collapse tile placement."""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console

from . import __version__
from .config import DEFAULT_CONFIG_PATH, PlacementStrategy, load_run_config
from .core import MosaicError
from .generation import PlacementReport, WFCSolver
from .logging_config import setup_logging
from .preview import render_layout, render_legend
from .scene import Scene


def print_report(console: Console, report: PlacementReport, scene: Scene) -> None:
    """Print a short summary of a placement run."""
    console.print(f"Strategy: {report.strategy.value}")
    console.print(f"Grid: {report.size}x{report.size} ({report.total_cells} cells)")
    console.print(f"Iterations: {report.iterations}")
    console.print(f"Placed: {len(scene)} tiles ({report.resolved} cells resolved)")
    if report.contradictions:
        console.print(f"Contradictions: {report.contradictions}", style="red")
    if report.unresolved:
        console.print(f"Not reached: {report.unresolved}", style="yellow")
    console.print(f"Time: {report.duration_ms}ms")


def run(
    config_path: Path,
    strategy: str | None = None,
    seed: int | None = None,
    preview: bool = False,
    console: Console | None = None,
) -> int:
    """Load a config, place tiles, and print the result.

    Args:
        config_path: Run configuration file
        strategy: Overrides placement_strategy from the config
        seed: Overrides seed from the config
        preview: Also print the layout as text
        console: Where to print (default: stdout)

    Returns:
        Exit code
    """
    console = console or Console()

    try:
        config = load_run_config(config_path).with_overrides(
            placement_strategy=strategy,
            seed=seed,
        )
        scene = Scene()
        solver = WFCSolver.from_config(config, sink=scene)
    except MosaicError as err:
        console.print(f"Error: {err}", style="bold red", markup=False)
        return 1

    console.print(f"Tile set: {config.tile_set} ({len(solver.catalog)} tiles)")
    report = solver.place_tiles()
    print_report(console, report, scene)

    if preview:
        console.print()
        console.print(render_layout(solver.grid))
        console.print()
        console.print(render_legend(solver.catalog))

    return 0


def main() -> int:
    """Main entry point for Mosaic."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Mosaic - Wave Function Collapse tile placement",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mosaic                              # Use ./config.txt (or $MOSAIC_CONFIG)
  mosaic --config maps/roads.txt      # Use another config file
  mosaic --strategy growing --seed 7  # Override the config
  mosaic --preview                    # Print the layout
        """,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(os.environ.get("MOSAIC_CONFIG", DEFAULT_CONFIG_PATH)),
        help="Run configuration file (default: $MOSAIC_CONFIG or config.txt)",
    )
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in PlacementStrategy],
        help="Placement strategy (overrides the config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed, 0 for entropy (overrides the config)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Print the placed layout as text",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path("logs"),
        help="Log directory (default: logs/)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )

    args = parser.parse_args()

    console_level = logging.DEBUG if args.debug else logging.WARNING
    log_path = setup_logging(args.log_dir, console_level=console_level)

    print(f"Mosaic v{__version__}")
    print(f"Config: {args.config}")
    print(f"Log file: {log_path}")
    print()

    return run(args.config, strategy=args.strategy, seed=args.seed, preview=args.preview)


if __name__ == "__main__":
    sys.exit(main())
