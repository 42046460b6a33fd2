"""Tile placement for Mosaic."""

from .tileset import TileDefinition, TileCatalog, TilesetError, load_tileset
from .wfc import WFCSolver, PlacementReport, get_scheduler, create_rng

__all__ = [
    "TileDefinition",
    "TileCatalog",
    "TilesetError",
    "load_tileset",
    "WFCSolver",
    "PlacementReport",
    "get_scheduler",
    "create_rng",
]
