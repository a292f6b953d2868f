"""
SimulationRules interface for the per-tick economy of a Townbuilder session.

The orchestrator owns the tick order (clock, production, population,
capacities, goals); a SimulationRules implementation supplies what each
economic step does. EconomyRules is the default and the only ruleset the game
ships with.

Key responsibilities:
- Apply building production and consumption for one tick's delta
- Grow population toward housing capacity
- Recompute storage capacities from base values plus building bonuses
"""

from abc import ABC, abstractmethod

from .buildings import BuildingRegistry
from .catalog import BASE_CAPACITY
from .logging_utils import log_debug
from .resources import ResourceLedger
from .schemas import BuildingInstance, PopulationState, ResourceType

# Population gained per millisecond of unpaused play while below capacity
POPULATION_GROWTH_PER_MS = 0.001


def format_resources_generic(ledger: ResourceLedger) -> str:
    """Format ledger stock as a one-line summary (``Wood=65/2000, ...``).

    Floats >= 10 show 1 decimal place, smaller floats show 2.
    """
    parts: list[str] = []
    for kind, amount in ledger.all_resources().items():
        label = kind.value.replace("_", " ").title()
        formatted = f"{amount:.1f}" if abs(amount) >= 10 else f"{amount:.2f}"
        parts.append(f"{label}={formatted}/{ledger.capacity(kind):.0f}")
    return ", ".join(parts)


class SimulationRules(ABC):
    """Abstract base class for the economic steps of a tick.

    Each method mutates the components it is handed in place. Rules never touch
    the clock, the grid or goals; those stay with the orchestrator.
    """

    @abstractmethod
    def apply_production(
        self,
        ledger: ResourceLedger,
        registry: BuildingRegistry,
        delta_ms: float,
        now: float,
    ) -> None:
        """Apply every building's production and consumption for ``delta_ms``."""

    @abstractmethod
    def grow_population(
        self,
        population: PopulationState,
        ledger: ResourceLedger,
        registry: BuildingRegistry,
        delta_ms: float,
    ) -> None:
        """Advance population toward capacity and mirror it into the ledger."""

    @abstractmethod
    def recompute_capacities(self, ledger: ResourceLedger, registry: BuildingRegistry) -> None:
        """Reset every capacity to its base value plus building bonuses."""

    def on_shortfall(self, building: BuildingInstance, kind: ResourceType, amount: float) -> None:
        """Hook called when a building's consumption cannot be debited.

        The building keeps running and nothing is debited. Override to react.
        """
        return None

    def format_resource_summary(self, ledger: ResourceLedger) -> str:
        return format_resources_generic(ledger)


class EconomyRules(SimulationRules):
    """Default settlement economy."""

    def apply_production(
        self,
        ledger: ResourceLedger,
        registry: BuildingRegistry,
        delta_ms: float,
        now: float,
    ) -> None:
        for building in registry.all():
            for kind, amount in registry.production_for(building, delta_ms).items():
                ledger.add(kind, amount)

            for kind, amount in registry.consumption_for(building, delta_ms).items():
                if not ledger.remove(kind, amount):
                    self.on_shortfall(building, kind, amount)

            building.last_production_time = now

    def grow_population(
        self,
        population: PopulationState,
        ledger: ResourceLedger,
        registry: BuildingRegistry,
        delta_ms: float,
    ) -> None:
        capacity = registry.total_population_capacity()
        current = population.current

        if current < capacity:
            population.current = min(float(capacity), current + POPULATION_GROWTH_PER_MS * delta_ms)

        population.capacity = capacity
        population.growth = POPULATION_GROWTH_PER_MS if capacity > current else 0.0

        ledger.set_capacity(ResourceType.POPULATION, capacity)
        ledger.set(ResourceType.POPULATION, population.current)

    def recompute_capacities(self, ledger: ResourceLedger, registry: BuildingRegistry) -> None:
        bonus = registry.warehouse_bonus()
        for kind in ResourceType:
            capacity = BASE_CAPACITY.get(kind, 0) + bonus.get(kind, 0)
            if kind == ResourceType.POPULATION:
                capacity += registry.total_population_capacity()
            ledger.set_capacity(kind, capacity)
        log_debug(f"[Capacity] {self.format_resource_summary(ledger)}")
