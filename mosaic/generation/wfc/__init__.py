"""Wave Function Collapse algorithm for tile placement."""

from .frontier import Frontier
from .grid import Grid, Cell
from .propagator import collapse_and_propagate
from .strategies import (
    Scheduler,
    RandomScheduler,
    GrowingScheduler,
    OrderedScheduler,
    LeastEntropyScheduler,
    get_scheduler,
)
from .solver import WFCSolver, PlacementReport, create_rng

__all__ = [
    "Frontier",
    "Grid",
    "Cell",
    "collapse_and_propagate",
    "Scheduler",
    "RandomScheduler",
    "GrowingScheduler",
    "OrderedScheduler",
    "LeastEntropyScheduler",
    "get_scheduler",
    "WFCSolver",
    "PlacementReport",
    "create_rng",
]
