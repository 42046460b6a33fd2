"""
Collapse one cell and push its edges onto its neighbours.

Propagation is one hop deep: only the four direct neighbours of the
collapsed cell are narrowed. Constraints reach further cells later, when
those neighbours collapse in turn.
"""

from __future__ import annotations

import random

from ...logging_config import get_logger, log_contradiction
from ...scene import SceneSink
from .frontier import Frontier
from .grid import Grid

logger = get_logger(__name__)


def collapse_and_propagate(
    grid: Grid,
    cell_index: int,
    rng: random.Random,
    sink: SceneSink,
    frontier: Frontier,
) -> bool:
    """
    Collapse a cell, then narrow each in-bounds neighbour to fit it.

    A neighbour keeps only the tiles whose edge facing back toward the
    collapsed cell fits the collapsed tile's edge facing the neighbour. A
    neighbour left with no candidates is dropped from the frontier; it stays
    unresolved for the rest of the run.

    Args:
        grid: The grid being solved
        cell_index: Linear index of the cell to collapse
        rng: Source of the weighted draw
        sink: Receives the placed tile
        frontier: Indices still eligible for collapse (updated in place)

    Returns:
        True if the cell collapsed, False if it was already resolved or
        had no candidates (nothing is changed in that case)
    """
    cell = grid[cell_index]
    if not cell.collapse(rng, sink):
        return False

    frontier.discard(cell_index)
    tile = cell.tile

    for direction, neighbor_index in grid.neighbors(cell_index):
        neighbor = grid[neighbor_index]
        if neighbor.is_resolved or neighbor.is_contradiction:
            continue

        edge = tile.edge(direction)
        if neighbor.remove_options(direction.opposite, edge):
            frontier.discard(neighbor_index)
            log_contradiction(
                logger, neighbor_index, cell_index,
                details=f"no tile fits {edge} on its {direction.opposite.value} edge",
            )

    return True
