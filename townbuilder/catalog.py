"""Static game data: building catalog, goal tiers and ledger tables."""

from typing import Dict, List

from .schemas import (
    BuildingDefinition,
    BuildingType,
    Footprint,
    Goal,
    GoalRequirements,
    GoalTier,
    ResourceAmount,
    ResourceType,
    TerrainType,
    UnlockRequirement,
)

R = ResourceType
B = BuildingType


STARTING_RESOURCES: ResourceAmount = {
    R.WOOD: 80,
    R.FOOD: 50,
    R.STONE: 40,
    R.IRON: 20,
    R.GOLD: 0,
    R.WATER: 20,
    R.POPULATION: 0,
}

BASE_CAPACITY: ResourceAmount = {
    R.WOOD: 2000,
    R.FOOD: 1500,
    R.STONE: 1500,
    R.IRON: 800,
    R.GOLD: 1000,
    R.WATER: 1000,
    R.POPULATION: 0,
}

# Added to capacity per active warehouse
WAREHOUSE_BONUS: ResourceAmount = {
    R.WOOD: 200,
    R.FOOD: 150,
    R.STONE: 200,
    R.IRON: 100,
    R.GOLD: 100,
    R.WATER: 100,
}

# Share of the original cost returned when a building is removed
REFUND_RATIO = 0.5


BUILDING_DEFINITIONS: Dict[BuildingType, BuildingDefinition] = {
    B.HOUSE: BuildingDefinition(
        kind=B.HOUSE,
        name="House",
        icon="🏠",
        description="Provides housing; needs food and water",
        size=Footprint(width=1, height=1),
        cost={R.WOOD: 15, R.STONE: 8},
        consumes={R.FOOD: 0.5, R.WATER: 0.3},
        population_effect=4,
        required_terrain={TerrainType.GRASS},
    ),
    B.FARM: BuildingDefinition(
        kind=B.FARM,
        name="Farm",
        icon="🌾",
        description="Grows food",
        size=Footprint(width=2, height=2),
        cost={R.WOOD: 25, R.STONE: 3},
        produces={R.FOOD: 2.0},
        consumes={R.WATER: 0.5},
        required_terrain={TerrainType.GRASS},
    ),
    B.LUMBERJACK: BuildingDefinition(
        kind=B.LUMBERJACK,
        name="Lumberjack",
        icon="🪓",
        description="Fells timber",
        size=Footprint(width=1, height=1),
        cost={R.WOOD: 10, R.STONE: 3},
        produces={R.WOOD: 1.5},
        required_terrain={TerrainType.FOREST},
    ),
    B.QUARRY: BuildingDefinition(
        kind=B.QUARRY,
        name="Quarry",
        icon="⛏️",
        description="Cuts stone",
        size=Footprint(width=2, height=2),
        cost={R.WOOD: 20, R.STONE: 5},
        produces={R.STONE: 1.2},
        required_terrain={TerrainType.STONE_DEPOSIT, TerrainType.MOUNTAIN},
    ),
    B.MINE: BuildingDefinition(
        kind=B.MINE,
        name="Mine",
        icon="⚒️",
        description="Extracts iron ore",
        size=Footprint(width=2, height=2),
        cost={R.WOOD: 40, R.STONE: 20},
        produces={R.IRON: 0.8},
        required_terrain={TerrainType.IRON_DEPOSIT},
        unlock_requirement=UnlockRequirement(population=15),
    ),
    B.WELL: BuildingDefinition(
        kind=B.WELL,
        name="Well",
        icon="🚰",
        description="Draws water",
        size=Footprint(width=1, height=1),
        cost={R.WOOD: 20, R.STONE: 15},
        produces={R.WATER: 2.0},
        required_terrain={TerrainType.GRASS},
    ),
    B.MARKET: BuildingDefinition(
        kind=B.MARKET,
        name="Market",
        icon="🏪",
        description="Trades surplus for gold",
        size=Footprint(width=2, height=2),
        cost={R.WOOD: 50, R.STONE: 30, R.IRON: 5},
        produces={R.GOLD: 1.0},
        consumes={R.FOOD: 0.2},
        population_effect=2,
        required_terrain={TerrainType.GRASS},
        unlock_requirement=UnlockRequirement(population=35),
    ),
    B.WAREHOUSE: BuildingDefinition(
        kind=B.WAREHOUSE,
        name="Warehouse",
        icon="🏬",
        description="Raises storage capacity",
        size=Footprint(width=2, height=2),
        cost={R.WOOD: 60, R.STONE: 40, R.IRON: 8},
        required_terrain={TerrainType.GRASS},
        unlock_requirement=UnlockRequirement(population=25),
    ),
}


def _goal(
    goal_id: str,
    tier: GoalTier,
    title: str,
    description: str,
    reward: ResourceAmount,
    **requirements,
) -> Goal:
    return Goal(
        id=goal_id,
        tier=tier,
        title=title,
        description=description,
        requirements=GoalRequirements(**requirements),
        reward=reward,
    )


GOAL_CATALOG: Dict[GoalTier, List[Goal]] = {
    GoalTier.BRONZE: [
        _goal(
            "bronze_1",
            GoalTier.BRONZE,
            "First Settlement",
            "Build the basic survival facilities",
            {R.WOOD: 50, R.STONE: 30},
            population=10,
            buildings={B.HOUSE: 2, B.FARM: 1, B.WELL: 1},
        ),
        _goal(
            "bronze_2",
            GoalTier.BRONZE,
            "Gatherer",
            "Stockpile the basic resources",
            {R.GOLD: 20},
            resources={R.WOOD: 100, R.FOOD: 80, R.STONE: 60, R.WATER: 50},
        ),
        _goal(
            "bronze_3",
            GoalTier.BRONZE,
            "Rapid Growth",
            "Reach population 20 within 30 minutes",
            {R.WOOD: 100, R.STONE: 100},
            population=20,
            time_limit=1800,
        ),
    ],
    GoalTier.SILVER: [
        _goal(
            "silver_1",
            GoalTier.SILVER,
            "Industrial Revolution",
            "Unlock and build industry",
            {R.IRON: 50, R.GOLD: 50},
            population=50,
            buildings={B.LUMBERJACK: 2, B.QUARRY: 1, B.MINE: 1},
        ),
        _goal(
            "silver_2",
            GoalTier.SILVER,
            "Trade Magnate",
            "Establish a trading network",
            {R.GOLD: 100},
            buildings={B.MARKET: 2, B.WAREHOUSE: 1},
            resources={R.GOLD: 200},
        ),
        _goal(
            "silver_3",
            GoalTier.SILVER,
            "Efficiency Expert",
            "Reach population 50 within 45 minutes",
            {R.GOLD: 150},
            population=50,
            time_limit=2700,
        ),
    ],
    GoalTier.GOLD: [
        _goal(
            "gold_1",
            GoalTier.GOLD,
            "Thriving City",
            "Grow a large city",
            {R.GOLD: 500},
            population=100,
            buildings={B.HOUSE: 10, B.MARKET: 3, B.WAREHOUSE: 2},
        ),
        _goal(
            "gold_2",
            GoalTier.GOLD,
            "Resource Empire",
            "Amass vast stockpiles",
            {R.GOLD: 1000},
            resources={
                R.WOOD: 1000,
                R.FOOD: 800,
                R.STONE: 600,
                R.IRON: 400,
                R.GOLD: 300,
                R.WATER: 500,
            },
        ),
        _goal(
            "gold_3",
            GoalTier.GOLD,
            "Speed King",
            "Reach population 100 within 60 minutes",
            {R.GOLD: 2000},
            population=100,
            time_limit=3600,
        ),
    ],
}
