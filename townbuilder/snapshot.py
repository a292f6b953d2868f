"""
Snapshot schemas for the save blob and the read-only session view.

The save blob is an opaque JSON document stored under one fixed key:

    { "resources": {"resources": {...}, "capacity": {...}},
      "map": {"width", "height", "seed", "tiles": [[...], ...]},
      "buildings": [[id, instance], ...],
      "gameState": {"population", "gameTime", "goals", "currentTier", "seed"} }

Loading validates the blob against SaveData. Unknown keys are ignored at every
level; each top-level section (and each gameState field) is optional, and an
absent one leaves the session's defaults in place.
"""

from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .buildings import BuildingRegistry
from .clock import GameClock
from .environment.grid import MapGrid
from .environment.schemas import MapGridState
from .resources import ResourceLedger, ResourceLedgerState
from .schemas import (
    BuildingInstance,
    BuildingType,
    GameMode,
    Goal,
    GoalTier,
    PopulationState,
    ResourceAmount,
)


class SavedGameState(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    population: Optional[PopulationState] = None
    game_time: Optional[GameClock] = Field(None, alias="gameTime")
    goals: Optional[List[Goal]] = None
    current_tier: Optional[GoalTier] = Field(None, alias="currentTier")
    seed: Optional[int] = None


class SaveData(BaseModel):
    """Top-level save blob."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    resources: Optional[ResourceLedgerState] = None
    map: Optional[MapGridState] = None
    buildings: Optional[List[Tuple[str, BuildingInstance]]] = None
    game_state: Optional[SavedGameState] = Field(None, alias="gameState")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, blob: str) -> "SaveData":
        """Parse and validate a blob; raises ``pydantic.ValidationError``."""
        return cls.model_validate_json(blob)


class GameState(BaseModel):
    """Defensive copy of a session returned to UI collaborators.

    Nothing in here aliases live engine state; mutating it has no effect on the
    running simulation.
    """

    mode: GameMode
    resources: ResourceAmount = Field(default_factory=dict)
    capacity: ResourceAmount = Field(default_factory=dict)
    population: PopulationState = Field(default_factory=PopulationState)
    buildings: List[BuildingInstance] = Field(default_factory=list)
    map: MapGridState = Field(default_factory=MapGridState)
    clock: GameClock = Field(default_factory=GameClock)
    goals: List[Goal] = Field(default_factory=list)
    selected_building_type: Optional[BuildingType] = None
    current_tier: GoalTier = GoalTier.BRONZE
    seed: int = 0


def build_save_data(
    ledger: ResourceLedger,
    grid: MapGrid,
    registry: BuildingRegistry,
    population: PopulationState,
    clock: GameClock,
    goals: Sequence[Goal],
    tier: GoalTier,
    seed: int,
) -> SaveData:
    """Capture every section of a running session."""
    return SaveData(
        resources=ledger.serialize(),
        map=grid.to_state(),
        buildings=[(building.id, building.model_copy(deep=True)) for building in registry.all()],
        game_state=SavedGameState(
            population=population.model_copy(),
            game_time=clock.model_copy(),
            goals=[goal.model_copy(deep=True) for goal in goals],
            current_tier=tier,
            seed=seed,
        ),
    )


def apply_save_data(
    data: SaveData,
    ledger: ResourceLedger,
    registry: BuildingRegistry,
) -> Optional[MapGrid]:
    """Restore the resources, buildings and map sections that are present.

    The ledger and registry are updated in place. The map is rebuilt with its
    anchor tiles re-linked to the restored registry instances; ``None`` is
    returned when the blob carries no map. The gameState section is left to the
    caller.
    """
    if data.resources is not None:
        ledger.deserialize(data.resources)

    if data.buildings is not None:
        registry.deserialize(building for _, building in data.buildings)

    if data.map is None:
        return None

    lookup = {building.id: building for building in registry.all()}
    return MapGrid.from_state(data.map, lookup)
