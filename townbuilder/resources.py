"""
Resource ledger: per-kind stock and storage capacity.

Every ResourceType has exactly one entry. The invariant
``0 <= amount <= capacity`` holds after every mutation; operations that would
break it either clamp (add/set/set_capacity) or refuse (remove/consume).

Key responsibilities:
- Clamp additions to capacity and report the delta actually applied
- Refuse partial withdrawals
- Debit multi-resource costs atomically
- Destroy excess stock when capacity shrinks
"""

from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field

from .catalog import BASE_CAPACITY, STARTING_RESOURCES
from .schemas import ResourceAmount, ResourceType


class ResourceLedgerState(BaseModel):
    """Serialized ledger: current amounts and capacities keyed by kind."""

    resources: Dict[ResourceType, float] = Field(default_factory=dict)
    capacity: Dict[ResourceType, float] = Field(default_factory=dict)


class ResourceLedger:
    """Bookkeeping for amounts and capacities of every resource kind."""

    def __init__(
        self,
        amounts: Optional[Mapping[ResourceType, float]] = None,
        capacities: Optional[Mapping[ResourceType, float]] = None,
    ):
        """Start from the catalog defaults, overridden by ``amounts``/``capacities``.

        Initial amounts are clamped to their capacities.
        """
        self._capacity: Dict[ResourceType, float] = {
            kind: float(BASE_CAPACITY.get(kind, 0)) for kind in ResourceType
        }
        self._amounts: Dict[ResourceType, float] = {kind: 0.0 for kind in ResourceType}

        for kind, value in (capacities or {}).items():
            self._capacity[kind] = max(0.0, float(value))

        initial = STARTING_RESOURCES if amounts is None else amounts
        for kind, value in initial.items():
            self.set(kind, value)

    def get(self, kind: ResourceType) -> float:
        return self._amounts[kind]

    def capacity(self, kind: ResourceType) -> float:
        return self._capacity[kind]

    def all_resources(self) -> ResourceAmount:
        return dict(self._amounts)

    def all_capacities(self) -> ResourceAmount:
        return dict(self._capacity)

    def set(self, kind: ResourceType, amount: float) -> None:
        self._amounts[kind] = self._clamp(kind, float(amount))

    def add(self, kind: ResourceType, amount: float) -> float:
        """Add ``amount`` (clamped to capacity); return the delta actually applied."""
        current = self._amounts[kind]
        updated = self._clamp(kind, current + amount)
        self._amounts[kind] = updated
        return updated - current

    def remove(self, kind: ResourceType, amount: float) -> bool:
        """Withdraw ``amount``; refuse without mutation if the stock is short."""
        current = self._amounts[kind]
        if current < amount:
            return False
        self._amounts[kind] = self._clamp(kind, current - amount)
        return True

    def add_many(self, amounts: Mapping[ResourceType, float]) -> ResourceAmount:
        return {kind: self.add(kind, value) for kind, value in amounts.items()}

    def has_enough(self, cost: Mapping[ResourceType, float]) -> bool:
        return all(self._amounts[kind] >= amount for kind, amount in cost.items())

    def consume(self, cost: Mapping[ResourceType, float]) -> bool:
        """Debit every kind in ``cost`` or nothing at all."""
        if not self.has_enough(cost):
            return False
        for kind, amount in cost.items():
            self.remove(kind, amount)
        return True

    def set_capacity(self, kind: ResourceType, capacity: float) -> None:
        """Change capacity; stock above the new capacity is destroyed."""
        self._capacity[kind] = max(0.0, float(capacity))
        if self._amounts[kind] > self._capacity[kind]:
            self._amounts[kind] = self._capacity[kind]

    def add_capacity(self, kind: ResourceType, amount: float) -> None:
        self.set_capacity(kind, self._capacity[kind] + amount)

    def usage_ratio(self, kind: ResourceType) -> float:
        """Fill level in [0, 1]; 0 when capacity is 0."""
        capacity = self._capacity[kind]
        return self._amounts[kind] / capacity if capacity > 0 else 0.0

    def _clamp(self, kind: ResourceType, value: float) -> float:
        return max(0.0, min(value, self._capacity[kind]))

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def serialize(self) -> ResourceLedgerState:
        return ResourceLedgerState(
            resources=self.all_resources(),
            capacity=self.all_capacities(),
        )

    def deserialize(self, state: ResourceLedgerState) -> None:
        """Apply a saved ledger; kinds missing from ``state`` keep their values.

        Capacities are applied before amounts so restored amounts are clamped
        against restored capacities.
        """
        for kind, value in state.capacity.items():
            self._capacity[kind] = max(0.0, float(value))
        for kind, value in state.resources.items():
            self.set(kind, value)
        for kind in ResourceType:
            if self._amounts[kind] > self._capacity[kind]:
                self._amounts[kind] = self._capacity[kind]
