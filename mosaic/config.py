"""Run configuration for Mosaic.

A run is configured by a small KEY=VALUE text file:

    # Tiles and grid
    tile_set = tilesets/roads
    map_size = 12
    max_iterations = 500
    seed = 42
    placement_strategy = growing

Lines are parsed by hand so errors can point at a line number; the values
themselves are validated by the RunConfig pydantic model.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .core import MosaicError
from .logging_config import get_logger, log_config

logger = get_logger(__name__)


DEFAULT_CONFIG_PATH = Path("config.txt")


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class ConfigError(MosaicError):
    """A config file is missing, malformed, or holds an invalid value.

    The message names the file, the 1-based line number when there is one,
    and the offending text.
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        line: int | None = None,
        value: str | None = None,
    ):
        super().__init__(message)
        self.path = path
        self.line = line
        self.value = value

    @classmethod
    def at(cls, path: Path, line: int | None, value: str | None, detail: str) -> ConfigError:
        """Build an error in the 'Error in <file> on line <n>. <detail>' format."""
        where = f"Error in {path}" if line is None else f"Error in {path} on line {line}"
        return cls(f"{where}. {detail}", path=path, line=line, value=value)


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------


class PlacementStrategy(Enum):
    """Order in which cells are chosen for collapse."""

    RANDOM = "random"
    GROWING = "growing"
    ORDERED = "ordered"
    LEAST_ENTROPY = "least_entropy"


class RunConfig(BaseModel):
    """Validated settings for one placement run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tile_set: Path
    map_size: int = Field(default=10, ge=1, le=100)
    max_iterations: int = Field(default=100, ge=100, le=10000)
    seed: int = Field(default=0, ge=0, le=2**64 - 1)  # 0 = seed from entropy
    placement_strategy: PlacementStrategy = PlacementStrategy.LEAST_ENTROPY

    @property
    def tileset_file(self) -> Path:
        """The catalog file inside the tile set directory."""
        return self.tile_set / "tiles_config.txt"

    def with_overrides(self, **overrides: object) -> RunConfig:
        """Return a new config with some values replaced and re-validated.

        None values are ignored, so CLI flags that were not given pass through.
        """
        update = {key: value for key, value in overrides.items() if value is not None}
        if not update:
            return self
        try:
            return RunConfig.model_validate({**self.model_dump(), **update})
        except ValidationError as err:
            first = err.errors()[0]
            key = str(first["loc"][0]) if first["loc"] else "?"
            raise ConfigError(
                f"Invalid override {key}={update.get(key)!r}: {first['msg']}",
                value=str(update.get(key)),
            ) from err


OPTION_NAMES: frozenset[str] = frozenset(RunConfig.model_fields)


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------


def read_key_values(path: Path) -> dict[str, tuple[str, int]]:
    """Read KEY=VALUE lines into {key: (value, line_number)}.

    Blank lines and lines starting with '#' are skipped. A repeated key keeps
    its last value.

    Raises:
        ConfigError: If the file is missing or not UTF-8, a line is malformed, or a key is
            not a known option
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as err:
        raise ConfigError(f"Could not read config file {path}: not valid UTF-8 text", path=path) from err
    except OSError as err:
        raise ConfigError(f"Could not find config file {path}", path=path) from err

    entries: dict[str, tuple[str, int]] = {}
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        parts = [part.strip() for part in line.split("=")]
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise ConfigError.at(
                path, line_number, line,
                "The config file accepts lines in the format of KEY=VALUE",
            )

        key, value = parts
        if key not in OPTION_NAMES:
            raise ConfigError.at(path, line_number, key, f"{key} is not an option")

        entries[key] = (value, line_number)

    return entries


def load_run_config(path: Path | str = DEFAULT_CONFIG_PATH) -> RunConfig:
    """Load and validate a run configuration file.

    A relative tile_set path is resolved against the config file's directory.

    Raises:
        ConfigError: On any missing, malformed, or out-of-range setting
    """
    path = Path(path)
    entries = read_key_values(path)

    values: dict[str, object] = {key: value for key, (value, _) in entries.items()}
    if "tile_set" in values:
        tile_set = Path(str(values["tile_set"]))
        if not tile_set.is_absolute():
            tile_set = path.parent / tile_set
        values["tile_set"] = tile_set

    try:
        config = RunConfig.model_validate(values)
    except ValidationError as err:
        log_config(logger, "load_run_config", path, success=False, details=str(err.errors()[0]))
        raise _translate_validation_error(err, path, entries) from err

    log_config(
        logger, "load_run_config", path,
        details=(
            f"tile_set={config.tile_set} map_size={config.map_size} "
            f"max_iterations={config.max_iterations} seed={config.seed} "
            f"strategy={config.placement_strategy.value}"
        ),
    )
    return config


def _translate_validation_error(
    err: ValidationError,
    path: Path,
    entries: dict[str, tuple[str, int]],
) -> ConfigError:
    """Turn the first pydantic error into a ConfigError pointing at its line."""
    first = err.errors()[0]
    key = str(first["loc"][0]) if first["loc"] else ""

    if first["type"] == "missing" or key not in entries:
        return ConfigError.at(path, None, None, f"Option {key} has not been set")

    value, line_number = entries[key]
    if key == "placement_strategy":
        choices = ", ".join(strategy.value for strategy in PlacementStrategy)
        detail = f"{value} is not a placement strategy. It has to be one of {choices}"
    elif first["type"].startswith("int_"):
        detail = f"{value} is not a valid number"
    else:
        bounds = RunConfig.model_fields[key].metadata
        low = next((m.ge for m in bounds if hasattr(m, "ge")), None)
        high = next((m.le for m in bounds if hasattr(m, "le")), None)
        if low is not None and high is not None:
            detail = f"{value} is not an accepted number. It has to be between {low} and {high}"
        else:
            detail = f"{value} is not an accepted value: {first['msg']}"

    return ConfigError.at(path, line_number, value, detail)
