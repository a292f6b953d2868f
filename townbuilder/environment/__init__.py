"""Terrain grid, procedural generation and grid helpers."""

from .grid import MapGrid, Tile
from .schemas import MapGridState, TileState
from .generation import generate_map
from .helpers import find_placement, render_ascii

__all__ = [
    "MapGrid",
    "Tile",
    "MapGridState",
    "TileState",
    "generate_map",
    "find_placement",
    "render_ascii",
]
