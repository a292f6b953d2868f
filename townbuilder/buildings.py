"""Building registry: placed instances plus catalog-driven queries."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional
from uuid import uuid4

from .catalog import BUILDING_DEFINITIONS, WAREHOUSE_BONUS
from .schemas import (
    BuildingDefinition,
    BuildingInstance,
    BuildingStatus,
    BuildingType,
    Position,
    ResourceAmount,
)


class BuildingRegistry:
    """Owns every placed BuildingInstance, keyed by id.

    The catalog is read-only; it defaults to ``BUILDING_DEFINITIONS`` but can be
    swapped for tests or alternative rulesets.
    """

    def __init__(self, catalog: Optional[Mapping[BuildingType, BuildingDefinition]] = None):
        self.catalog: Mapping[BuildingType, BuildingDefinition] = catalog or BUILDING_DEFINITIONS
        self._buildings: Dict[str, BuildingInstance] = {}

    def definition(self, kind: BuildingType) -> BuildingDefinition:
        return self.catalog[kind]

    def create(self, kind: BuildingType, position: Position, now: float = 0.0) -> BuildingInstance:
        """Register a new active level-1 instance stamped with ``now``."""
        building = BuildingInstance(
            id=uuid4().hex,
            kind=kind,
            position=position.model_copy(),
            status=BuildingStatus.ACTIVE,
            level=1,
            last_production_time=now,
        )
        self._buildings[building.id] = building
        return building

    def add(self, building: BuildingInstance) -> None:
        """Register an existing instance (used when restoring snapshots)."""
        self._buildings[building.id] = building

    def get(self, building_id: str) -> Optional[BuildingInstance]:
        return self._buildings.get(building_id)

    def all(self) -> List[BuildingInstance]:
        return list(self._buildings.values())

    def by_kind(self, kind: BuildingType) -> List[BuildingInstance]:
        return [b for b in self._buildings.values() if b.kind == kind]

    def remove(self, building_id: str) -> bool:
        return self._buildings.pop(building_id, None) is not None

    def upgrade(self, building_id: str) -> bool:
        building = self.get(building_id)
        if building is None:
            return False
        building.level += 1
        return True

    def set_status(self, building_id: str, status: BuildingStatus) -> bool:
        building = self.get(building_id)
        if building is None:
            return False
        building.status = status
        return True

    def __len__(self) -> int:
        return len(self._buildings)

    def __iter__(self):
        return iter(list(self._buildings.values()))

    # ------------------------------------------------------------------
    # Unlocks and rates
    # ------------------------------------------------------------------

    def is_unlocked(
        self,
        kind: BuildingType,
        population: float,
        existing: Optional[Iterable[BuildingInstance]] = None,
    ) -> bool:
        """Check the kind's unlock requirement against population and active counts.

        ``existing`` defaults to the registry's own instances.
        """
        requirement = self.definition(kind).unlock_requirement
        if requirement is None:
            return True

        if requirement.population is not None and population < requirement.population:
            return False

        if requirement.buildings:
            counts = _active_counts(self.all() if existing is None else existing)
            for required_kind, required_count in requirement.buildings.items():
                if counts.get(required_kind, 0) < required_count:
                    return False

        return True

    def production_for(self, building: BuildingInstance, delta_ms: float) -> ResourceAmount:
        if building.status != BuildingStatus.ACTIVE:
            return {}
        scale = delta_ms / 1000
        return {kind: rate * scale for kind, rate in self.definition(building.kind).produces.items()}

    def consumption_for(self, building: BuildingInstance, delta_ms: float) -> ResourceAmount:
        if building.status != BuildingStatus.ACTIVE:
            return {}
        scale = delta_ms / 1000
        return {kind: rate * scale for kind, rate in self.definition(building.kind).consumes.items()}

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def total_population_capacity(self) -> int:
        total = sum(
            self.definition(b.kind).population_effect
            for b in self._buildings.values()
            if b.status == BuildingStatus.ACTIVE
        )
        return max(0, total)

    def counts_by_kind(self) -> Dict[BuildingType, int]:
        """Active-instance counts for every kind (zero included)."""
        counts = {kind: 0 for kind in BuildingType}
        counts.update(_active_counts(self._buildings.values()))
        return counts

    def warehouse_bonus(self) -> ResourceAmount:
        """Capacity bonus summed over active warehouses."""
        active = sum(
            1
            for b in self._buildings.values()
            if b.kind == BuildingType.WAREHOUSE and b.status == BuildingStatus.ACTIVE
        )
        if active == 0:
            return {}
        return {kind: bonus * active for kind, bonus in WAREHOUSE_BONUS.items()}

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def serialize(self) -> List[List]:
        """``[[id, instance], ...]`` pairs in insertion order."""
        return [[building_id, building] for building_id, building in self._buildings.items()]

    def deserialize(self, entries: Iterable[BuildingInstance]) -> None:
        self._buildings.clear()
        for building in entries:
            self._buildings[building.id] = building


def _active_counts(buildings: Iterable[BuildingInstance]) -> Dict[BuildingType, int]:
    counts: Dict[BuildingType, int] = {}
    for building in buildings:
        if building.status == BuildingStatus.ACTIVE:
            counts[building.kind] = counts.get(building.kind, 0) + 1
    return counts
