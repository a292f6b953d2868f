"""Seeded procedural map generation.

Phases run in a fixed order and draw from one ``SeededRandom`` stream, so the
same (width, height, seed) always yields the same grid:

1. Fill every tile with grass.
2. Keep a central disc (radius ``min(width, height) / 3``) as grass.
3. Stamp resource deposit clusters (forest, stone, iron) with spacing rules.
4. Scatter a few small mountain ranges.
5. Flood some edge tiles and drop inland lakes away from the center.

Draw order matters: a phase only consumes a number when its condition calls
for one, and that pattern has to be kept for maps to stay reproducible.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from townbuilder.rng import SeededRandom
from townbuilder.schemas import TerrainType

from .grid import MapGrid


@dataclass(frozen=True)
class DepositRule:
    terrain: TerrainType
    count: int
    min_distance: float
    cluster_size: int


DEPOSIT_RULES: Tuple[DepositRule, ...] = (
    DepositRule(TerrainType.FOREST, count=8, min_distance=3, cluster_size=3),
    DepositRule(TerrainType.STONE_DEPOSIT, count=4, min_distance=4, cluster_size=2),
    DepositRule(TerrainType.IRON_DEPOSIT, count=5, min_distance=4, cluster_size=2),
)
DEPOSIT_ATTEMPTS = 50
DEPOSIT_EDGE_MARGIN = 2

MOUNTAIN_COUNT = 3
MOUNTAIN_SPREAD_CHANCE = 0.5

EDGE_WATER_THRESHOLD = 0.6
LAKE_COUNT = 2
LAKE_SPREAD_CHANCE = 0.5
LAKE_MIN_CENTER_DISTANCE = 8

ORTHOGONAL: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def _center(grid: MapGrid) -> Tuple[int, int]:
    return grid.width // 2, grid.height // 2


def _distance(ax: float, ay: float, bx: float, by: float) -> float:
    return math.sqrt((ax - bx) ** 2 + (ay - by) ** 2)


def ensure_buildable_core(grid: MapGrid) -> None:
    cx, cy = _center(grid)
    radius = min(grid.width, grid.height) / 3
    for tile in grid.iter_tiles():
        if _distance(tile.x, tile.y, cx, cy) <= radius:
            tile.terrain = TerrainType.GRASS


def stamp_cluster(grid: MapGrid, cx: int, cy: int, terrain: TerrainType, size: int) -> None:
    """Convert grass tiles around (cx, cy) to ``terrain``.

    The cluster spans ``size // 2`` tiles either side of the center.
    """
    half = size // 2
    for dy in range(-half, half + 1):
        for dx in range(-half, half + 1):
            tile = grid.tile(cx + dx, cy + dy)
            if tile is not None and tile.terrain == TerrainType.GRASS:
                tile.terrain = terrain


def place_deposits(grid: MapGrid, rng: SeededRandom) -> None:
    for rule in DEPOSIT_RULES:
        placed: List[Tuple[int, int]] = []
        for _ in range(rule.count):
            for _attempt in range(DEPOSIT_ATTEMPTS):
                x = rng.next_int(grid.width)
                y = rng.next_int(grid.height)

                too_close = any(
                    _distance(x, y, px, py) < rule.min_distance for px, py in placed
                )
                near_edge = (
                    x < DEPOSIT_EDGE_MARGIN
                    or x >= grid.width - DEPOSIT_EDGE_MARGIN
                    or y < DEPOSIT_EDGE_MARGIN
                    or y >= grid.height - DEPOSIT_EDGE_MARGIN
                )
                if too_close or near_edge or grid.tiles[y][x].terrain != TerrainType.GRASS:
                    continue

                stamp_cluster(grid, x, y, rule.terrain, rule.cluster_size)
                placed.append((x, y))
                break


def place_mountains(grid: MapGrid, rng: SeededRandom) -> None:
    for _ in range(MOUNTAIN_COUNT):
        x = rng.next_int(grid.width)
        y = rng.next_int(grid.height)
        if grid.tiles[y][x].terrain != TerrainType.GRASS:
            continue

        grid.tiles[y][x].terrain = TerrainType.MOUNTAIN
        for dx, dy in ORTHOGONAL:
            neighbor = grid.tile(x + dx, y + dy)
            # Out-of-bounds neighbors consume no draw
            if neighbor is None or rng.next() <= MOUNTAIN_SPREAD_CHANCE:
                continue
            if neighbor.terrain == TerrainType.GRASS:
                neighbor.terrain = TerrainType.MOUNTAIN


def place_water(grid: MapGrid, rng: SeededRandom) -> None:
    # Column-major walk; only edge tiles draw
    for x in range(grid.width):
        for y in range(grid.height):
            is_edge = x == 0 or x == grid.width - 1 or y == 0 or y == grid.height - 1
            if is_edge and rng.next() > EDGE_WATER_THRESHOLD:
                grid.tiles[y][x].terrain = TerrainType.WATER

    cx, cy = _center(grid)
    for _ in range(LAKE_COUNT):
        x = rng.next_int(grid.width - 4) + 2
        y = rng.next_int(grid.height - 4) + 2
        if _distance(x, y, cx, cy) <= LAKE_MIN_CENTER_DISTANCE:
            continue
        if not grid.is_valid_position(x, y):
            continue

        grid.tiles[y][x].terrain = TerrainType.WATER
        if rng.next() > LAKE_SPREAD_CHANCE and grid.is_valid_position(x + 1, y):
            grid.tiles[y][x + 1].terrain = TerrainType.WATER
        if rng.next() > LAKE_SPREAD_CHANCE and grid.is_valid_position(x, y + 1):
            grid.tiles[y + 1][x].terrain = TerrainType.WATER


def generate_map(width: int, height: int, seed: int) -> MapGrid:
    """Generate a fully deterministic width×height grid from ``seed``."""
    if width <= 0 or height <= 0:
        raise ValueError(f"map dimensions must be positive (got {width}x{height})")
    rng = SeededRandom(seed)
    grid = MapGrid(width, height, seed=seed)

    ensure_buildable_core(grid)
    place_deposits(grid, rng)
    place_mountains(grid, rng)
    place_water(grid, rng)

    return grid
