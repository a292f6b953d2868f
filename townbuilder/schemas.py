"""
Pydantic schemas for the Townbuilder settlement simulation.

All data structures shared between the engine components are defined here.

Design Philosophy:
- Closed enumerations for every kind (resources, terrain, buildings) so resource
  bags are fixed maps keyed by ResourceType instead of open-ended strings
- Static catalog entries (BuildingDefinition) are separate from placed instances
  (BuildingInstance)
- Pydantic validation keeps snapshots consistent across the persistence boundary
"""

from enum import Enum
from typing import Dict, Optional, Set

from pydantic import BaseModel, Field


# ============================================================================
# Enumerations
# ============================================================================


class ResourceType(str, Enum):
    """Every stock tracked by the resource ledger."""

    WOOD = "wood"
    FOOD = "food"
    STONE = "stone"
    IRON = "iron"
    GOLD = "gold"
    WATER = "water"
    POPULATION = "population"


class TerrainType(str, Enum):
    """Terrain carried by a single map tile."""

    GRASS = "grass"
    WATER = "water"
    MOUNTAIN = "mountain"
    FOREST = "forest"
    STONE_DEPOSIT = "stone_deposit"
    IRON_DEPOSIT = "iron_deposit"


class BuildingType(str, Enum):
    """Building kinds available in the catalog."""

    HOUSE = "house"
    FARM = "farm"
    LUMBERJACK = "lumberjack"
    QUARRY = "quarry"
    MINE = "mine"
    WELL = "well"
    MARKET = "market"
    WAREHOUSE = "warehouse"


class BuildingStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    UNDER_CONSTRUCTION = "under_construction"


class GameMode(str, Enum):
    """Coarse session state gating the tick loop and placement commands."""

    MENU = "menu"
    PLAYING = "playing"
    COMPLETED = "completed"


class GoalTier(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"


ResourceAmount = Dict[ResourceType, float]


# ============================================================================
# Buildings
# ============================================================================


class Position(BaseModel):
    """Tile coordinate; x grows to the right, y grows downwards."""

    x: int
    y: int


class Footprint(BaseModel):
    width: int = Field(1, ge=1)
    height: int = Field(1, ge=1)


class UnlockRequirement(BaseModel):
    """Prerequisites gating whether a building kind may be placed.

    Either part may be absent. ``buildings`` maps a kind to the minimum number of
    active instances of that kind that must already exist.
    """

    population: Optional[int] = Field(None, description="Minimum current population")
    buildings: Dict[BuildingType, int] = Field(
        default_factory=dict, description="Minimum active counts per building kind"
    )


class BuildingDefinition(BaseModel):
    """Static catalog entry, one per building kind."""

    kind: BuildingType
    name: str
    icon: str = ""
    description: str = ""
    size: Footprint = Field(default_factory=Footprint)
    cost: ResourceAmount = Field(default_factory=dict)
    # Rates are units per second
    produces: ResourceAmount = Field(default_factory=dict)
    consumes: ResourceAmount = Field(default_factory=dict)
    population_effect: int = 0
    # None means the building may be placed on any terrain
    required_terrain: Optional[Set[TerrainType]] = None
    unlock_requirement: Optional[UnlockRequirement] = None


class BuildingInstance(BaseModel):
    """A placed building. Owned exclusively by the BuildingRegistry."""

    id: str
    kind: BuildingType
    position: Position
    status: BuildingStatus = BuildingStatus.ACTIVE
    level: int = Field(1, ge=1)
    last_production_time: float = 0.0
    # Reserved per-instance storage; no engine logic reads it yet
    storage: ResourceAmount = Field(default_factory=dict)


# ============================================================================
# Goals
# ============================================================================


class GoalRequirements(BaseModel):
    """Any subset of requirements; absent parts are not checked."""

    population: Optional[float] = None
    resources: ResourceAmount = Field(default_factory=dict)
    buildings: Dict[BuildingType, int] = Field(default_factory=dict)
    time_limit: Optional[float] = Field(None, description="Seconds since game start")


class Goal(BaseModel):
    id: str
    tier: GoalTier
    title: str
    description: str = ""
    requirements: GoalRequirements = Field(default_factory=GoalRequirements)
    reward: Optional[ResourceAmount] = None
    completed: bool = False


class GoalSnapshot(BaseModel):
    """Read-only view of the session handed to the goal evaluator."""

    population: float = 0.0
    resources: ResourceAmount = Field(default_factory=dict)
    building_counts: Dict[BuildingType, int] = Field(default_factory=dict)
    elapsed_ms: float = 0.0


# ============================================================================
# Session state
# ============================================================================


class PopulationState(BaseModel):
    current: float = 0.0
    capacity: float = 0.0
    # Per-millisecond growth rate applied while below capacity
    growth: float = 0.0

