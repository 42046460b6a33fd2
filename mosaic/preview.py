"""Text preview of a placed grid.

Renders one glyph per cell, colored per tile, so a layout can be checked in
a terminal without the 3D renderer. The top row of the output is the
highest y, matching the scene's y-up axis.
"""

from __future__ import annotations

from rich.text import Text

from .generation.tileset import TileCatalog
from .generation.wfc import Grid


UNRESOLVED_RENDER: tuple[str, str] = ("?", "bright_black")
CONTRADICTION_RENDER: tuple[str, str] = ("x", "bold red")

TILE_COLORS: tuple[str, ...] = (
    "green",
    "yellow",
    "cyan",
    "magenta",
    "blue",
    "bright_green",
    "bright_yellow",
    "bright_cyan",
    "rgb(160,64,0)",
    "white",
)


def tile_glyphs(catalog: TileCatalog) -> list[tuple[str, str]]:
    """
    Assign a (symbol, color) to every catalog entry.

    Rotations of the same model share a symbol (the model's first letter)
    and differ by color.
    """
    renders: list[tuple[str, str]] = []
    for index, tile in enumerate(catalog):
        base = tile.name.split("@", 1)[0]
        symbol = base[:1].upper() or "#"
        renders.append((symbol, TILE_COLORS[index % len(TILE_COLORS)]))
    return renders


def render_layout(grid: Grid) -> Text:
    """Render the grid as rich Text, one line per row."""
    glyphs = tile_glyphs(grid.catalog)
    text = Text()

    for y in reversed(range(grid.size)):
        for x in range(grid.size):
            cell = grid.cells[grid.index(x, y)]
            if cell.resolved is not None:
                symbol, style = glyphs[cell.resolved]
            elif cell.is_contradiction:
                symbol, style = CONTRADICTION_RENDER
            else:
                symbol, style = UNRESOLVED_RENDER
            text.append(symbol, style=style)
        if y > 0:
            text.append("\n")

    return text


def render_legend(catalog: TileCatalog) -> Text:
    """One line per tile: glyph, name and weight."""
    text = Text()
    for (symbol, style), tile in zip(tile_glyphs(catalog), catalog):
        text.append(symbol, style=style)
        text.append(f"  {tile.name} (weight {tile.weight})\n")
    text.append(UNRESOLVED_RENDER[0], style=UNRESOLVED_RENDER[1])
    text.append("  not reached\n")
    text.append(CONTRADICTION_RENDER[0], style=CONTRADICTION_RENDER[1])
    text.append("  contradiction")
    return text
