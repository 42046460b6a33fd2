"""Scene and model loading capabilities consumed by the solver.

The solver never looks inside tile geometry. It receives opaque handles from
a ModelLoader while the tileset is loaded, and hands them back to a SceneSink
each time a cell collapses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .core import MosaicError, WorldPosition


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class ModelLoadError(MosaicError):
    """A model file could not be loaded."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


# -----------------------------------------------------------------------------
# Capabilities
# -----------------------------------------------------------------------------


class SceneSink(Protocol):
    """Receives one call per successful collapse."""

    def place(self, geometry: Any, world_position: WorldPosition) -> None: ...


class ModelLoader(Protocol):
    """Loads the geometry for a tile, rotated by a multiple of 90 degrees."""

    def load(self, path: Path, rotation: int) -> Any: ...


# -----------------------------------------------------------------------------
# Implementations
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ModelHandle:
    """Opaque geometry reference: a model file plus its rotation in degrees."""

    path: Path
    rotation: int = 0


class FileModelLoader:
    """Model loader that resolves model files on disk.

    Mesh parsing belongs to the renderer. This loader only checks that the
    file exists and returns a handle the renderer can load later.
    """

    def load(self, path: Path, rotation: int) -> ModelHandle:
        path = Path(path)
        if not path.is_file():
            raise ModelLoadError(f"Model file {path} does not exist", path=path)
        return ModelHandle(path=path, rotation=rotation % 360)


@dataclass(frozen=True)
class Placement:
    """A tile instantiated in the scene."""

    geometry: Any
    position: WorldPosition


@dataclass
class Scene:
    """In-memory scene that records every placed tile, in placement order."""

    placements: list[Placement] = field(default_factory=list)

    def place(self, geometry: Any, world_position: WorldPosition) -> None:
        self.placements.append(Placement(geometry, world_position))

    def __len__(self) -> int:
        return len(self.placements)

    def clear(self) -> None:
        self.placements.clear()
