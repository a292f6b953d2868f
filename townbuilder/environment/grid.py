"""Terrain and occupancy grid.

The grid owns every tile of the map. Buildings occupy a rectangular footprint
anchored at their position (top-left); every footprint tile is marked occupied
but only the anchor tile carries the back-reference to the building instance.
Occupancy changes only through ``place`` and ``remove``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from townbuilder.schemas import BuildingInstance, TerrainType

from .schemas import MapGridState, TileState


@dataclass
class Tile:
    """A single grid cell."""

    x: int
    y: int
    terrain: TerrainType = TerrainType.GRASS
    occupied: bool = False
    building: Optional[BuildingInstance] = None


class MapGrid:
    """Width×height tile grid with placement validation."""

    def __init__(self, width: int, height: int, seed: int = 0):
        if width < 0 or height < 0:
            raise ValueError(f"map dimensions must be non-negative (got {width}x{height})")
        self.width = width
        self.height = height
        self.seed = seed
        self.tiles: List[List[Tile]] = [
            [Tile(x=x, y=y) for x in range(width)] for y in range(height)
        ]

    @classmethod
    def generate(cls, width: int, height: int, seed: int) -> "MapGrid":
        """Build a procedurally generated grid; see ``generation.generate_map``."""
        from .generation import generate_map

        return generate_map(width, height, seed)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, x: int, y: int) -> Optional[Tile]:
        if self.is_valid_position(x, y):
            return self.tiles[y][x]
        return None

    def iter_tiles(self) -> Iterable[Tile]:
        """All tiles in row-major order."""
        for row in self.tiles:
            yield from row

    def footprint(self, x: int, y: int, width: int, height: int) -> List[Tuple[int, int]]:
        return [(x + dx, y + dy) for dy in range(height) for dx in range(width)]

    def can_place(
        self,
        x: int,
        y: int,
        width: int,
        height: int,
        required_terrain: Optional[Iterable[TerrainType]] = None,
    ) -> bool:
        """True only if every covered tile is in bounds, free and (optionally) on allowed terrain."""
        allowed = set(required_terrain) if required_terrain is not None else None
        for fx, fy in self.footprint(x, y, width, height):
            tile = self.tile(fx, fy)
            if tile is None or tile.occupied:
                return False
            if allowed is not None and tile.terrain not in allowed:
                return False
        return True

    def place(self, building: BuildingInstance, width: int, height: int) -> bool:
        """Occupy the footprint anchored at ``building.position``.

        Fails without mutating anything when the footprint is not free.
        """
        x, y = building.position.x, building.position.y
        if not self.can_place(x, y, width, height):
            return False

        for fx, fy in self.footprint(x, y, width, height):
            tile = self.tiles[fy][fx]
            tile.occupied = True
            if (fx, fy) == (x, y):
                tile.building = building
        return True

    def remove(self, x: int, y: int, width: int, height: int) -> bool:
        """Clear occupancy and references for the footprint anchored at (x, y)."""
        if not self.is_valid_position(x, y):
            return False

        for fx, fy in self.footprint(x, y, width, height):
            tile = self.tile(fx, fy)
            if tile is not None:
                tile.occupied = False
                tile.building = None
        return True

    def building_at(self, x: int, y: int) -> Optional[BuildingInstance]:
        """Building anchored at (x, y); non-anchor footprint tiles return None."""
        tile = self.tile(x, y)
        return tile.building if tile else None

    def buildings(self) -> List[BuildingInstance]:
        """Anchored buildings in row-major order."""
        return [tile.building for tile in self.iter_tiles() if tile.building is not None]

    def neighbors(self, x: int, y: int, radius: int = 1) -> List[Tile]:
        """In-bounds tiles within a square radius of (x, y), excluding the center."""
        result: List[Tile] = []
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                if dx == 0 and dy == 0:
                    continue
                tile = self.tile(x + dx, y + dy)
                if tile is not None:
                    result.append(tile)
        return result

    def terrain_counts(self) -> Dict[TerrainType, int]:
        return dict(Counter(tile.terrain for tile in self.iter_tiles()))

    def terrain_grid(self) -> List[List[TerrainType]]:
        return [[tile.terrain for tile in row] for row in self.tiles]

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_state(self) -> MapGridState:
        return MapGridState(
            width=self.width,
            height=self.height,
            seed=self.seed,
            tiles=[
                [
                    TileState(
                        x=tile.x,
                        y=tile.y,
                        terrain=tile.terrain,
                        occupied=tile.occupied,
                        building_id=tile.building.id if tile.building else None,
                    )
                    for tile in row
                ]
                for row in self.tiles
            ],
        )

    @classmethod
    def from_state(
        cls,
        state: MapGridState,
        buildings: Optional[Dict[str, BuildingInstance]] = None,
    ) -> "MapGrid":
        """Rebuild a grid, re-linking anchor references from ``buildings`` by id.

        Rows or tiles missing from ``state`` keep their grass defaults; anchor ids
        with no matching building keep the occupied flag but drop the reference.
        """
        grid = cls(state.width, state.height, seed=state.seed)
        lookup = buildings or {}
        for row in state.tiles:
            for saved in row:
                tile = grid.tile(saved.x, saved.y)
                if tile is None:
                    continue
                tile.terrain = saved.terrain
                tile.occupied = saved.occupied
                if saved.building_id is not None:
                    tile.building = lookup.get(saved.building_id)
        return grid
