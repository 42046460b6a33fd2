"""Shared test fixtures for Mosaic."""

import tempfile
from pathlib import Path

import pytest

from mosaic.core import Direction, EdgeLabel
from mosaic.generation.tileset import TileCatalog, TileDefinition
from mosaic.scene import ModelLoadError


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def make_tile(name: str, up: str, right: str, down: str, left: str, weight: int = 1) -> TileDefinition:
    """Create a tile from four edge strings (``label`` or ``label:suffix``)."""
    return TileDefinition(
        name=name,
        geometry=name,
        weight=weight,
        edges={
            Direction.UP: EdgeLabel.parse(up),
            Direction.RIGHT: EdgeLabel.parse(right),
            Direction.DOWN: EdgeLabel.parse(down),
            Direction.LEFT: EdgeLabel.parse(left),
        },
    )


class StubModelLoader:
    """Model loader that returns (file name, rotation) and records every call."""

    def __init__(self, missing: set[str] | None = None):
        self.calls: list[tuple[Path, int]] = []
        self.missing = missing or set()

    def load(self, path: Path, rotation: int):
        self.calls.append((path, rotation))
        if path.name in self.missing:
            raise ModelLoadError(f"Model file {path} does not exist", path=path)
        return (path.name, rotation)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="mosaic_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_tileset(temp_data_dir: Path):
    """Factory writing a tile set directory with tiles_config.txt and empty model files."""

    def _write(lines: list[str], name: str = "tiles", models: list[str] | None = None) -> Path:
        tileset_dir = temp_data_dir / name
        tileset_dir.mkdir(parents=True, exist_ok=True)
        (tileset_dir / "tiles_config.txt").write_text("\n".join(lines) + "\n", encoding="utf-8")
        for model in models or []:
            (tileset_dir / model).write_bytes(b"")
        return tileset_dir

    return _write


@pytest.fixture
def write_config(temp_data_dir: Path):
    """Factory writing a run config file and returning its path."""

    def _write(lines: list[str], name: str = "config.txt") -> Path:
        path = temp_data_dir / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def grass_catalog() -> TileCatalog:
    """A single tile whose four edges all read "grass"."""
    return TileCatalog([TileDefinition.uniform("grass", "grass", geometry="grass")])


@pytest.fixture
def road_catalog() -> TileCatalog:
    """Grass plus straight and corner road pieces (roads meet roads, grass meets grass)."""
    return TileCatalog([
        make_tile("grass", "grass", "grass", "grass", "grass", weight=4),
        make_tile("road_ns", "road", "grass", "road", "grass", weight=2),
        make_tile("road_ew", "grass", "road", "grass", "road", weight=2),
        make_tile("corner_ne", "road", "road", "grass", "grass", weight=1),
        make_tile("corner_sw", "grass", "grass", "road", "road", weight=1),
    ])


@pytest.fixture
def clashing_catalog() -> TileCatalog:
    """Two tiles whose edges never match anything, including themselves."""
    return TileCatalog([
        make_tile("red", "r-up", "r-right", "r-down", "r-left"),
        make_tile("blue", "b-up", "b-right", "b-down", "b-left"),
    ])


@pytest.fixture
def tile_factory():
    """The make_tile helper, for tests that build their own catalogs."""
    return make_tile


@pytest.fixture
def stub_loader() -> StubModelLoader:
    return StubModelLoader()


@pytest.fixture
def failing_loader() -> StubModelLoader:
    """Loader that cannot find "broken.glb"."""
    return StubModelLoader(missing={"broken.glb"})
