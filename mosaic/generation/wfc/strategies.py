"""
Placement strategies: which cell to collapse next, and when to stop.

Every strategy shares the same collapse and propagation step and the same
stopping rule: stop when the frontier is empty or the iteration budget is
spent. They differ only in how the next cell is picked:

    random         uniform pick from the frontier, after seeding the center
    growing        breadth-first wavefront outward from the center
    ordered        row by row, from index 0 upward
    least_entropy  frontier cell with the fewest candidates, after seeding
                   the center
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections import deque
from typing import ClassVar

from ...config import PlacementStrategy
from ...logging_config import get_logger, log_collapse
from ...scene import SceneSink
from .frontier import Frontier
from .grid import Grid
from .propagator import collapse_and_propagate

logger = get_logger(__name__)


class Scheduler(ABC):
    """Picks cells to collapse until the frontier or the budget runs out."""

    strategy: ClassVar[PlacementStrategy]

    @abstractmethod
    def run(
        self,
        grid: Grid,
        frontier: Frontier,
        rng: random.Random,
        sink: SceneSink,
        max_iterations: int,
    ) -> int:
        """
        Collapse cells of ``grid`` in this strategy's order.

        Args:
            grid: The grid being solved
            frontier: Indices still eligible for collapse (updated in place)
            rng: Shared random source for picks and weighted draws
            sink: Receives each placed tile
            max_iterations: Budget of counted collapse attempts

        Returns:
            Number of iterations consumed
        """

    def _collapse(
        self,
        grid: Grid,
        cell_index: int,
        rng: random.Random,
        sink: SceneSink,
        frontier: Frontier,
        iteration: int,
    ) -> bool:
        placed = collapse_and_propagate(grid, cell_index, rng, sink, frontier)
        if placed:
            log_collapse(logger, iteration, cell_index, grid[cell_index].tile.name)
        return placed

    def _collapse_center(
        self,
        grid: Grid,
        rng: random.Random,
        sink: SceneSink,
        frontier: Frontier,
    ) -> None:
        """Collapse the center cell. Not counted against the budget."""
        center = grid.center_index()
        self._collapse(grid, center, rng, sink, frontier, iteration=0)
        frontier.discard(center)


class RandomScheduler(Scheduler):
    """Collapse the center, then pick frontier cells uniformly at random."""

    strategy = PlacementStrategy.RANDOM

    def run(self, grid, frontier, rng, sink, max_iterations):
        self._collapse_center(grid, rng, sink, frontier)

        iterations = 0
        while iterations < max_iterations and frontier:
            cell_index = frontier.sample(rng)
            self._collapse(grid, cell_index, rng, sink, frontier, iterations)
            iterations += 1

        return iterations


class GrowingScheduler(Scheduler):
    """
    Breadth-first from the center.

    Each popped cell is collapsed and its unresolved neighbours are queued.
    A cell can be queued several times; only its first pop does anything.
    Every first pop costs one iteration, including the pop of a
    contradiction cell, which is passed through so the wavefront keeps
    growing around it.
    """

    strategy = PlacementStrategy.GROWING

    def run(self, grid, frontier, rng, sink, max_iterations):
        queue: deque[int] = deque([grid.center_index()])
        expanded: set[int] = set()

        iterations = 0
        while queue and iterations < max_iterations and frontier:
            cell_index = queue.popleft()
            if cell_index in expanded:
                continue
            expanded.add(cell_index)

            if cell_index in frontier:
                self._collapse(grid, cell_index, rng, sink, frontier, iterations)
            iterations += 1

            for _, neighbor_index in grid.neighbors(cell_index):
                if neighbor_index not in expanded and not grid[neighbor_index].is_resolved:
                    queue.append(neighbor_index)

        return iterations


class OrderedScheduler(Scheduler):
    """Sweep cells in index order: left to right, bottom row first."""

    strategy = PlacementStrategy.ORDERED

    def run(self, grid, frontier, rng, sink, max_iterations):
        iterations = 0
        for cell_index in range(len(grid)):
            if iterations >= max_iterations or not frontier:
                break

            self._collapse(grid, cell_index, rng, sink, frontier, iterations)
            iterations += 1

        return iterations


class LeastEntropyScheduler(Scheduler):
    """
    Collapse the center, then always the most constrained frontier cell.

    Ties go to the lowest cell index.
    """

    strategy = PlacementStrategy.LEAST_ENTROPY

    def run(self, grid, frontier, rng, sink, max_iterations):
        self._collapse_center(grid, rng, sink, frontier)

        iterations = 0
        while iterations < max_iterations and frontier:
            cell_index = min(frontier, key=lambda index: (grid[index].entropy, index))
            self._collapse(grid, cell_index, rng, sink, frontier, iterations)
            iterations += 1

        return iterations


SCHEDULERS: dict[PlacementStrategy, type[Scheduler]] = {
    scheduler.strategy: scheduler
    for scheduler in (RandomScheduler, GrowingScheduler, OrderedScheduler, LeastEntropyScheduler)
}


def get_scheduler(strategy: PlacementStrategy | str) -> Scheduler:
    """Create the scheduler for a strategy, given as enum or its config name."""
    return SCHEDULERS[PlacementStrategy(strategy)]()
