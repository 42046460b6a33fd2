"""
Wave Function Collapse solver.

The solver wires a tile catalog, a grid, a placement strategy, a random
source and a scene together, and runs one placement:

1. Build one cell per grid position, each able to become any tile
2. Let the strategy pick cells to collapse (weighted random choice)
3. After each collapse, narrow the four neighbours to tiles that fit
4. Stop when every cell is resolved or a contradiction, or the budget
   runs out

Loading the catalog can fail. Placement itself never raises: cells that end
up with no possible tile are left empty, and there is no backtracking.
"""

from __future__ import annotations

import random
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ...config import PlacementStrategy, RunConfig
from ...core import WorldPosition
from ...logging_config import get_logger, log_run
from ...scene import FileModelLoader, ModelLoader, Scene, SceneSink
from ..tileset import TileCatalog, load_tileset
from .frontier import Frontier
from .grid import Grid
from .strategies import Scheduler, get_scheduler

logger = get_logger(__name__)


DEFAULT_MAX_ITERATIONS = 100


def create_rng(seed: int = 0) -> random.Random:
    """Random source for a run. A seed of 0 means seed from system entropy."""
    if seed == 0:
        return random.Random()
    return random.Random(seed)


@dataclass(frozen=True)
class PlacementReport:
    """
    Outcome of one placement run.

    Attributes:
        strategy: Strategy that chose the cells
        size: Grid side length
        iterations: Budget consumed by the strategy
        resolved: Cells holding a tile
        contradictions: Unresolved cells with no possible tile left
        unresolved: Cells never reached (budget ran out or cut off)
        collapses: (cell index, catalog index) in the order tiles were placed
        duration_ms: Wall time of the run
    """
    strategy: PlacementStrategy
    size: int
    iterations: int
    resolved: int
    contradictions: int
    unresolved: int
    collapses: tuple[tuple[int, int], ...]
    duration_ms: int = 0

    @property
    def total_cells(self) -> int:
        return self.size * self.size

    @property
    def complete(self) -> bool:
        """True when every cell holds a tile."""
        return self.resolved == self.total_cells


class RecordingSink:
    """Scene sink that notes which cell got which tile, then forwards the call."""

    def __init__(self, grid: Grid, inner: SceneSink):
        self.grid = grid
        self.inner = inner
        self.collapses: list[tuple[int, int]] = []

    def place(self, geometry: Any, world_position: WorldPosition) -> None:
        cell_index = self.grid.index(int(world_position.x), int(world_position.y))
        self.collapses.append((cell_index, self.grid[cell_index].resolved))
        self.inner.place(geometry, world_position)


class WFCSolver:
    """
    Runs one placement of a tile catalog over a square grid.

    Usage:
        solver = WFCSolver(catalog, size=10, scheduler=get_scheduler("growing"),
                           rng=create_rng(42), sink=scene)
        report = solver.place_tiles(max_iterations=500)

    Or straight from a run configuration:
        solver = WFCSolver.from_config(load_run_config("config.txt"), sink=scene)
        report = solver.place_tiles()
    """

    def __init__(
        self,
        catalog: TileCatalog,
        size: int,
        scheduler: Scheduler,
        rng: random.Random | None = None,
        sink: SceneSink | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        initial_candidates: Sequence[int] | None = None,
    ):
        """
        Initialize the solver.

        Args:
            catalog: Tiles to place (must not be empty)
            size: Grid side length
            scheduler: Placement strategy
            rng: Random source (default: entropy seeded)
            sink: Scene receiving placed tiles (default: a new in-memory Scene)
            max_iterations: Default budget for place_tiles()
            initial_candidates: Catalog indices every cell starts with
                                (default: the whole catalog)
        """
        if not len(catalog):
            raise ValueError("Cannot place tiles from an empty catalog")

        self.catalog = catalog
        self.scheduler = scheduler
        self.rng = rng if rng is not None else create_rng()
        self.sink = sink if sink is not None else Scene()
        self.max_iterations = max_iterations
        self.grid = Grid(size, catalog, initial_candidates)
        self.frontier = self._initial_frontier()

    @classmethod
    def from_config(
        cls,
        config: RunConfig,
        sink: SceneSink | None = None,
        model_loader: ModelLoader | None = None,
    ) -> WFCSolver:
        """
        Load the configured tile set and build a solver for it.

        Raises:
            TilesetError: If the tile set cannot be loaded
        """
        catalog = load_tileset(config.tile_set, model_loader or FileModelLoader())
        return cls(
            catalog,
            size=config.map_size,
            scheduler=get_scheduler(config.placement_strategy),
            rng=create_rng(config.seed),
            sink=sink,
            max_iterations=config.max_iterations,
        )

    def _initial_frontier(self) -> Frontier:
        return Frontier(
            index for index, cell in enumerate(self.grid.cells)
            if not cell.is_contradiction
        )

    def place_tiles(self, max_iterations: int | None = None) -> PlacementReport:
        """
        Run the placement strategy until it stops.

        Args:
            max_iterations: Budget for this run (default: the solver's budget)

        Returns:
            Summary of the run, including the collapse order
        """
        budget = self.max_iterations if max_iterations is None else max_iterations
        strategy = self.scheduler.strategy
        recorder = RecordingSink(self.grid, self.sink)

        log_run(
            logger, strategy.value, "START",
            details=f"size={self.grid.size} tiles={len(self.catalog)} budget={budget}",
        )
        started = time.perf_counter()

        iterations = self.scheduler.run(self.grid, self.frontier, self.rng, recorder, budget)

        duration_ms = int((time.perf_counter() - started) * 1000)
        resolved = self.grid.resolved_count()
        contradictions = self.grid.contradiction_count()
        report = PlacementReport(
            strategy=strategy,
            size=self.grid.size,
            iterations=iterations,
            resolved=resolved,
            contradictions=contradictions,
            unresolved=len(self.grid) - resolved - contradictions,
            collapses=tuple(recorder.collapses),
            duration_ms=duration_ms,
        )

        log_run(
            logger, strategy.value, "DONE", duration_ms,
            details=(
                f"iterations={iterations} resolved={resolved}/{report.total_cells} "
                f"contradictions={contradictions}"
            ),
        )
        if not report.complete:
            logger.warning(
                f"Placement left {report.total_cells - resolved} of {report.total_cells} cells empty "
                f"({contradictions} contradictions, {report.unresolved} not reached)"
            )

        return report

    def reset(self):
        """Reset the grid and frontier for a new placement with the same catalog."""
        self.grid.reset()
        self.frontier = self._initial_frontier()
