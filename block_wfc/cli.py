#!/usr/bin/env python3
"""
blockwfc CLI - Command-line interface for the block placement solver.

This module provides the entry point for the 'blockwfc' command installed via pip.

Usage:
    blockwfc                                # Solve the default 3x3x1 grid
    blockwfc --size 4x3x2 --palette walls   # Pick grid size and palette
    blockwfc --gravity --deterministic      # Supported blocks, reproducible choice
    blockwfc --seed 7 --progress            # Seeded random run with a progress bar
"""

import logging
import sys
from typing import Callable, Iterable, List, Optional, Tuple, Union

import click

from block_wfc.src.common.constants import DEFAULT_CONFIG, PALETTE_NAMES, SolverConfig
from block_wfc.src.common.diagnostics import SolverDiagnostics
from block_wfc.src.core.block import PlaceableBlock, SimpleBlock
from block_wfc.src.core.palettes import get_palette
from block_wfc.src.wfc.errors import WFCError
from block_wfc.src.wfc.graph import WFCGraph
from block_wfc.src.wfc.heuristics import FirstStateHeuristic, Heuristic, WeightedRandomHeuristic
from block_wfc.src.wfc.invariants import GravityInvariant, Invariant
from block_wfc.src.wfc.observer import Observer, ProgressObserver
from block_wfc.src.wfc.solver import WFCSolver


def validate_size(ctx, param, value):
    """Parse a WxHxD grid size."""
    if value is None:
        return None

    parts = value.lower().split("x")
    if len(parts) != 3:
        raise click.BadParameter("expected WIDTHxHEIGHTxDEPTH, e.g. 3x3x1")
    try:
        dimensions = tuple(int(part) for part in parts)
    except ValueError:
        raise click.BadParameter("dimensions must be integers") from None
    if any(d < 1 for d in dimensions):
        raise click.BadParameter("dimensions must be at least 1")

    return dimensions


def solve_grid(
    dimensions: Tuple[int, int, int],
    palette: Union[str, Iterable[PlaceableBlock]],
    *,
    gravity: bool = False,
    seed: Optional[int] = None,
    deterministic: bool = False,
    observers: Optional[List[Observer]] = None,
    diagnostics: Optional[SolverDiagnostics] = None,
    config: SolverConfig = DEFAULT_CONFIG,
    block_factory: Callable[[], PlaceableBlock] = SimpleBlock,
) -> WFCSolver:
    """
    Build a grid graph, solve it and return the solver holding the result.

    Args:
        dimensions: (width, height, depth) of the grid
        palette: Preset palette name or an iterable of blocks
        gravity: Require every block above the floor to rest on a placed block
        seed: Seed for the weighted random heuristic
        deterministic: Use the first-state heuristic instead of random choice
        observers: Extra observers notified during the solve
        diagnostics: Diagnostics collector (a fresh one by default)
        config: Solver configuration settings
        block_factory: Placeholder block constructor for unresolved cells

    Raises:
        WFCError: if the grid cannot be solved
    """
    blocks = get_palette(palette) if isinstance(palette, str) else frozenset(palette)
    graph = WFCGraph.grid_graph(*dimensions, block_factory=block_factory)

    invariants: List[Invariant] = [GravityInvariant()] if gravity else []
    heuristic: Heuristic = (
        FirstStateHeuristic() if deterministic else WeightedRandomHeuristic(seed)
    )

    solver = WFCSolver(
        graph,
        blocks,
        invariants,
        heuristic,
        observers or [],
        diagnostics=diagnostics or SolverDiagnostics(),
        config=config,
    )
    solver.solve()
    return solver


def setup_logging(level: str) -> None:
    """Setup logging configuration."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format="%(levelname)s: %(message)s")


@click.command()
@click.option(
    "--size",
    "dimensions",
    type=str,
    callback=validate_size,
    default="x".join(str(d) for d in DEFAULT_CONFIG.default_dimensions),
    show_default=True,
    help="Grid size as WIDTHxHEIGHTxDEPTH",
)
@click.option(
    "--palette",
    type=click.Choice(PALETTE_NAMES, case_sensitive=False),
    default=DEFAULT_CONFIG.default_palette,
    show_default=True,
    help="Preset block palette",
)
@click.option("--gravity", is_flag=True, help="Blocks above the floor must rest on a placed block")
@click.option("--seed", type=int, default=None, help="Random seed for reproducible runs")
@click.option(
    "--deterministic",
    is_flag=True,
    help="Always pick the first valid state instead of a weighted random one",
)
@click.option("--progress", is_flag=True, help="Show a progress bar while collapsing")
@click.option(
    "--max-steps",
    type=int,
    default=None,
    help="Give up after this many traversal steps",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Set the logging level",
)
def main(dimensions, palette, gravity, seed, deterministic, progress, max_steps, log_level):
    """Fill a 3D grid with blocks and print the layout layer by layer."""
    setup_logging(log_level)
    verbose = log_level in ["debug", "info"]

    config = SolverConfig(max_steps=max_steps) if max_steps is not None else DEFAULT_CONFIG
    diagnostics = SolverDiagnostics(log_level=log_level)

    observers: List[Observer] = []
    progress_observer = None
    if progress:
        width, height, depth = dimensions
        progress_observer = ProgressObserver(total=width * height * depth)
        observers.append(progress_observer)

    if verbose:
        click.echo(f"Solving {'x'.join(map(str, dimensions))} grid with '{palette}' palette...")

    try:
        solver = solve_grid(
            dimensions,
            palette,
            gravity=gravity,
            seed=seed,
            deterministic=deterministic,
            observers=observers,
            diagnostics=diagnostics,
            config=config,
        )
    except WFCError as e:
        click.echo(f"Solve failed: {e}", err=True)
        if diagnostics.has_errors():
            click.echo(diagnostics.format_for_user(), err=True)
        sys.exit(1)
    finally:
        if progress_observer is not None:
            progress_observer.close()

    click.echo(solver.render_layers())

    if verbose:
        click.echo(
            f"Solved {len(solver.collapsed)} node(s) with {solver.backtrack_count} backtrack(s).",
            err=True,
        )


if __name__ == "__main__":
    main()
