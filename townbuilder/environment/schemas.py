"""Pydantic schemas for the terrain grid.

These models mirror the dataclasses in ``grid.py`` but keep map snapshots
serializable. The anchor tile of a footprint stores the occupying building's
id; the live object reference is re-linked by the caller after loading.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from townbuilder.schemas import TerrainType


class TileState(BaseModel):
    """Serialized form of a single tile."""

    x: int
    y: int
    terrain: TerrainType = TerrainType.GRASS
    occupied: bool = False
    building_id: Optional[str] = Field(
        None, description="Id of the building anchored here, if any",
    )


class MapGridState(BaseModel):
    """Dense row-major representation: ``tiles[y][x]``."""

    width: int = Field(0, ge=0)
    height: int = Field(0, ge=0)
    seed: int = 0
    tiles: List[List[TileState]] = Field(default_factory=list)
