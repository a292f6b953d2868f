"""
Townbuilder - tick-driven settlement economy simulation.

Seeded terrain generation, building placement, a clamped resource ledger,
population growth and tiered goals, driven one tick at a time.

No rendering, no input handling, no global session.
Storage, rules and time source are injected by the caller.
"""

__version__ = "0.1.0"

# Main simulation components
from .orchestrator import Orchestrator

# Core interfaces
from .simulation_rules import SimulationRules, EconomyRules, format_resources_generic
from .persistence import SaveStore, InMemorySaveStore, JsonFileSaveStore
from .resources import ResourceLedger, ResourceLedgerState
from .buildings import BuildingRegistry
from .goals import is_complete, is_expired, goals_for_tier, all_goals
from .clock import GameClock
from .rng import SeededRandom
from .environment import (
    MapGrid,
    MapGridState,
    Tile,
    TileState,
    generate_map,
    find_placement,
    render_ascii,
)

# Core schemas
from .schemas import (
    ResourceType,
    TerrainType,
    BuildingType,
    BuildingStatus,
    GameMode,
    GoalTier,
    Position,
    Footprint,
    UnlockRequirement,
    BuildingDefinition,
    BuildingInstance,
    GoalRequirements,
    Goal,
    GoalSnapshot,
    PopulationState,
)
from .snapshot import GameState, SaveData

__all__ = [
    # Main class
    "Orchestrator",
    # Core interfaces
    "SimulationRules",
    "EconomyRules",
    "SaveStore",
    "InMemorySaveStore",
    "JsonFileSaveStore",
    "ResourceLedger",
    "ResourceLedgerState",
    "BuildingRegistry",
    "GameClock",
    "SeededRandom",
    # Goals
    "is_complete",
    "is_expired",
    "goals_for_tier",
    "all_goals",
    # Environment
    "MapGrid",
    "MapGridState",
    "Tile",
    "TileState",
    "generate_map",
    "find_placement",
    "render_ascii",
    # Schemas
    "ResourceType",
    "TerrainType",
    "BuildingType",
    "BuildingStatus",
    "GameMode",
    "GoalTier",
    "Position",
    "Footprint",
    "UnlockRequirement",
    "BuildingDefinition",
    "BuildingInstance",
    "GoalRequirements",
    "Goal",
    "GoalSnapshot",
    "PopulationState",
    "GameState",
    "SaveData",
    # Utilities
    "format_resources_generic",
]
