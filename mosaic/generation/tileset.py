"""
Tile catalog for Wave Function Collapse.

A tile set is a directory holding model files and a ``tiles_config.txt``
catalog. Each catalog record describes one tile:

    # model, weight, up, right, down, left, rotations
    road_straight.glb, 4, grass, road, grass, road, 2
    road_corner.glb,   2, grass, road, road, grass, 4
    grass.glb,         8, grass, grass, grass, grass, 1

A record with 2 or 4 rotations registers one tile per quarter turn, with its
edge labels rotated to match. Edge labels may carry a suffix (``road:a``);
see EdgeLabel for how suffixes affect matching.

The catalog is an append-only arena. Cells refer to tiles by their index in
it, never by object reference.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..config import ConfigError
from ..core import Direction, EdgeLabel
from ..logging_config import get_logger, log_config
from ..scene import ModelLoadError, ModelLoader

logger = get_logger(__name__)


TILESET_FILE_NAME = "tiles_config.txt"
RECORD_FIELD_COUNT = 7
ALLOWED_ROTATIONS = ("1", "2", "4")


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class TilesetError(ConfigError):
    """The tile catalog file is missing, malformed, or references a bad model."""

    pass


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------


class TileDefinition(BaseModel):
    """
    One placeable tile variant.

    Attributes:
        name: Readable identifier, e.g. "road_corner@90" for a rotated variant
        geometry: Opaque handle from the model loader
        weight: Placement weight. A candidate is drawn with probability
                weight / (sum of candidate weights).
        edges: Edge label on each side of the tile
        rotation: Quarter turns applied to the source record (0-3)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    geometry: Any = None
    weight: int = Field(default=1, gt=0)
    edges: dict[Direction, EdgeLabel]
    rotation: int = Field(default=0, ge=0, le=3)

    def edge(self, direction: Direction) -> EdgeLabel:
        """Get the edge label on the given side."""
        return self.edges[direction]

    def check_edge(self, direction: Direction, edge: EdgeLabel) -> bool:
        """Check whether this tile's edge on the given side fits against ``edge``."""
        return self.edges[direction].matches(edge)

    @classmethod
    def uniform(cls, name: str, label: str, weight: int = 1, geometry: Any = None) -> TileDefinition:
        """Create a tile with the same label on all four edges."""
        return cls(
            name=name,
            geometry=geometry,
            weight=weight,
            edges={direction: EdgeLabel(label) for direction in Direction},
        )


class TileCatalog(Sequence[TileDefinition]):
    """Append-only list of tile definitions, addressed by index."""

    def __init__(self, tiles: list[TileDefinition] | None = None):
        self._tiles: list[TileDefinition] = []
        for tile in tiles or []:
            self.add(tile)

    def add(self, tile: TileDefinition) -> int:
        """Append a tile and return its index."""
        self._tiles.append(tile)
        return len(self._tiles) - 1

    def __getitem__(self, index: int) -> TileDefinition:
        return self._tiles[index]

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[TileDefinition]:
        return iter(self._tiles)

    def indices(self) -> list[int]:
        """All tile indices, in catalog order."""
        return list(range(len(self._tiles)))

    def weight(self, index: int) -> int:
        return self._tiles[index].weight

    def names(self) -> list[str]:
        return [tile.name for tile in self._tiles]


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------


def rotate_edges(edges: Sequence[EdgeLabel], quarter_turns: int) -> dict[Direction, EdgeLabel]:
    """
    Edge labels for a record rotated by ``quarter_turns``.

    ``edges`` is in record order (up, right, down, left). The k-th rotation
    takes its up edge from position k, its right edge from k + 1, and so on,
    wrapping around.
    """
    directions = list(Direction)
    return {
        direction: edges[(quarter_turns + offset) % 4]
        for offset, direction in enumerate(directions)
    }


def parse_record(line: str, path: Path, line_number: int) -> tuple[str, int, list[EdgeLabel], int]:
    """
    Split and validate one catalog line.

    Returns:
        (model_path, weight, edges in up/right/down/left order, rotation_count)

    Raises:
        TilesetError: On a wrong field count, bad weight, or bad rotation count
    """
    values = [value.strip() for value in line.split(",")]
    if len(values) != RECORD_FIELD_COUNT or any(not value for value in values):
        raise TilesetError.at(
            path, line_number, line,
            f"\"{line}\" does not contain all {RECORD_FIELD_COUNT} values required",
        )

    model_path, weight_text, *edge_texts, rotation_text = values

    try:
        weight = int(weight_text)
    except ValueError:
        weight = 0
    if weight <= 0:
        raise TilesetError.at(
            path, line_number, weight_text,
            f"{weight_text} is not a valid weight. The weight can only be a positive integer",
        )

    if rotation_text not in ALLOWED_ROTATIONS:
        raise TilesetError.at(
            path, line_number, rotation_text,
            f"{rotation_text} is not a valid rotation count. It can only be 1, 2 or 4",
        )

    edges = [EdgeLabel.parse(text) for text in edge_texts]
    return model_path, weight, edges, int(rotation_text)


def load_tileset(tileset_dir: Path | str, model_loader: ModelLoader) -> TileCatalog:
    """
    Load the tile catalog of a tile set directory.

    Args:
        tileset_dir: Directory containing tiles_config.txt and the model files
        model_loader: Loads the geometry of each tile rotation

    Returns:
        Catalog with one entry per tile rotation, in file order

    Raises:
        TilesetError: If the catalog is missing, undecodable, malformed, empty, or a model
            fails to load
    """
    tileset_dir = Path(tileset_dir)
    path = tileset_dir / TILESET_FILE_NAME

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as err:
        raise TilesetError(f"Could not read config file {path}: not valid UTF-8 text", path=path) from err
    except OSError as err:
        raise TilesetError(f"Could not find config file {path}", path=path) from err

    catalog = TileCatalog()
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        model_path, weight, edges, rotation_count = parse_record(line, path, line_number)

        for quarter_turns in range(rotation_count):
            try:
                geometry = model_loader.load(tileset_dir / model_path, quarter_turns * 90)
            except ModelLoadError as err:
                raise TilesetError.at(
                    path, line_number, model_path,
                    f"Could not load model {model_path} (rotation {quarter_turns * 90}): {err}",
                ) from err

            stem = Path(model_path).stem
            name = stem if quarter_turns == 0 else f"{stem}@{quarter_turns * 90}"
            catalog.add(TileDefinition(
                name=name,
                geometry=geometry,
                weight=weight,
                edges=rotate_edges(edges, quarter_turns),
                rotation=quarter_turns,
            ))

    if not catalog:
        raise TilesetError.at(path, None, None, "The tile set does not define any tiles")

    log_config(logger, "load_tileset", path, details=f"{len(catalog)} tiles")
    return catalog
