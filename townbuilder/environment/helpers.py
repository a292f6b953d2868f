"""Debug and query utilities for map grids."""

from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from townbuilder.schemas import TerrainType

from .grid import MapGrid


_DEFAULT_TERRAIN_SYMBOLS: Dict[TerrainType, str] = {
    TerrainType.GRASS: ".",
    TerrainType.WATER: "~",
    TerrainType.MOUNTAIN: "^",
    TerrainType.FOREST: "T",
    TerrainType.STONE_DEPOSIT: "s",
    TerrainType.IRON_DEPOSIT: "i",
}
_ANCHOR_SYMBOL = "#"
_OCCUPIED_SYMBOL = "+"


def render_ascii(
    grid: MapGrid,
    *,
    symbols: Optional[Dict[TerrainType, str]] = None,
) -> str:
    """Render the whole grid, one character per tile, top row first.

    Anchor tiles show ``#``, other occupied footprint tiles show ``+``.
    """

    mapping = {**_DEFAULT_TERRAIN_SYMBOLS}
    if symbols:
        mapping.update(symbols)

    lines: List[str] = []
    for row in grid.tiles:
        chars: List[str] = []
        for tile in row:
            if tile.building is not None:
                chars.append(_ANCHOR_SYMBOL)
            elif tile.occupied:
                chars.append(_OCCUPIED_SYMBOL)
            else:
                chars.append(mapping.get(tile.terrain, "?"))
        lines.append("".join(chars))

    return "\n".join(lines)


def find_placement(
    grid: MapGrid,
    width: int,
    height: int,
    required_terrain: Optional[Set[TerrainType]] = None,
) -> Optional[Tuple[int, int]]:
    """First anchor (row-major) where a width×height footprint fits, or None."""
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.can_place(x, y, width, height, required_terrain):
                return x, y
    return None
