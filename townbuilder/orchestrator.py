"""
Main simulation orchestrator.

Owns one settlement session and every mutable component of it. Storage,
economic rules and the time source are injected, so independent sessions can
run side by side.

Coordinates each tick, in this order:
1. Advance the pause-aware game clock
2. Apply building production and consumption for the clamped delta
3. Grow population toward housing capacity
4. Recompute storage capacities from base values plus building bonuses
5. Re-check outstanding goals against the tick's final state and update mode
"""

import math
import random
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from .buildings import BuildingRegistry
from .catalog import REFUND_RATIO
from .clock import GameClock
from .config import Config
from .environment import MapGrid, generate_map
from .goals import goals_for_tier, is_complete
from .logging_utils import log_debug, log_deterministic, log_error, log_info, log_success
from .persistence import InMemorySaveStore, SaveStore
from .resources import ResourceLedger
from .schemas import (
    BuildingType,
    GameMode,
    Goal,
    GoalSnapshot,
    GoalTier,
    PopulationState,
    Position,
)
from .simulation_rules import EconomyRules, SimulationRules
from .snapshot import GameState, SaveData, apply_save_data, build_save_data

# Upper bound (exclusive) for seeds drawn when a new game is started without one
RANDOM_SEED_LIMIT = 1_000_000


def wall_clock_ms() -> float:
    return time.time() * 1000


class Orchestrator:
    """
    Settlement session: mode state machine, tick loop and command surface.

    Fully decoupled - accepts storage, rules and time source as parameters.
    Every command returns a bool (or nothing); rejected commands leave the
    session untouched.
    """

    def __init__(
        self,
        store: Optional[SaveStore] = None,
        rules: Optional[SimulationRules] = None,
        clock: Optional[Callable[[], float]] = None,
        map_width: Optional[int] = None,
        map_height: Optional[int] = None,
        max_tick_ms: Optional[float] = None,
        save_key: Optional[str] = None,
    ):
        """Initialize an empty session in menu mode.

        Args:
            store: Save-game backend (defaults to InMemorySaveStore)
            rules: Economic rules applied each tick (defaults to EconomyRules)
            clock: Zero-argument callable returning milliseconds
                (defaults to wall-clock time)
            map_width: Width of generated maps (defaults to Config.MAP_WIDTH)
            map_height: Height of generated maps (defaults to Config.MAP_HEIGHT)
            max_tick_ms: Clamp on a single tick's delta (defaults to Config.MAX_TICK_MS)
            save_key: Key the single save is stored under (defaults to Config.SAVE_KEY)
        """
        self.store = store or InMemorySaveStore()
        self.rules = rules or EconomyRules()
        self.now = clock or wall_clock_ms
        self.map_width = map_width if map_width is not None else Config.MAP_WIDTH
        self.map_height = map_height if map_height is not None else Config.MAP_HEIGHT
        self.max_tick_ms = max_tick_ms if max_tick_ms is not None else Config.MAX_TICK_MS
        self.save_key = save_key or Config.SAVE_KEY

        self.mode = GameMode.MENU
        self.ledger = ResourceLedger()
        self.registry = BuildingRegistry()
        self.grid = MapGrid(0, 0)
        self.population = PopulationState()
        self.clock = GameClock()
        self.goals: List[Goal] = []
        self.current_tier = GoalTier.BRONZE
        self.seed = 0
        self.selected_building_type: Optional[BuildingType] = None

        self.last_update_time = self.now()
        self._running = False

    # ------------------------------------------------------------------
    # Mode transitions
    # ------------------------------------------------------------------

    def start_new_game(self, tier: GoalTier = GoalTier.BRONZE, seed: Optional[int] = None) -> None:
        """Discard the current session and start a fresh one in playing mode.

        Args:
            tier: Goal tier to play
            seed: Map seed; a random one is drawn when omitted. 0 is a
                valid seed and is used as given, not replaced by a random one.

        Raises:
            ValueError: If ``seed`` is negative
        """
        if seed is None:
            seed = random.randrange(RANDOM_SEED_LIMIT)
        elif seed < 0:
            raise ValueError(f"seed must be non-negative (got {seed})")

        now = self.now()
        self.ledger = ResourceLedger()
        self.registry = BuildingRegistry()
        self.grid = generate_map(self.map_width, self.map_height, seed)
        self.population = PopulationState()
        self.clock = GameClock()
        self.clock.start(now)
        self.goals = goals_for_tier(tier)
        self.current_tier = tier
        self.seed = seed
        self.selected_building_type = None
        self.last_update_time = now
        self.mode = GameMode.PLAYING

        self.rules.recompute_capacities(self.ledger, self.registry)
        log_info(f"New game started: tier={tier.value}, seed={seed}, map={self.map_width}x{self.map_height}")

    def return_to_menu(self) -> None:
        self.stop()
        self.mode = GameMode.MENU
        log_info("Returned to menu")

    def toggle_pause(self) -> None:
        """Pause or resume the clock; ignored outside playing mode."""
        if self.mode != GameMode.PLAYING:
            return

        now = self.now()
        if self.clock.is_paused:
            self.clock.resume(now)
            self.last_update_time = now
            log_info(f"Resumed at {self.formatted_game_time()}")
        else:
            self.clock.pause(now)
            log_info(f"Paused at {self.formatted_game_time()}")

    def is_in_menu(self) -> bool:
        return self.mode == GameMode.MENU

    def is_playing(self) -> bool:
        return self.mode == GameMode.PLAYING

    # ------------------------------------------------------------------
    # Loop driver
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Mark the loop as running; the external driver polls ``is_running``."""
        if self._running or self.mode != GameMode.PLAYING:
            return
        self._running = True

    def stop(self) -> None:
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def run(self, num_ticks: int, step_ms: float = 16.0) -> int:
        """Run up to ``num_ticks`` ticks on simulated time, ``step_ms`` apart.

        Time starts from the last update, so a run continues where the previous
        tick left off regardless of the injected clock. Stops early when the
        session leaves playing mode (all goals completed, or returned to menu).

        Returns:
            Number of ticks actually run
        """
        ticks = 0
        now = self.last_update_time
        for _ in range(num_ticks):
            if self.mode != GameMode.PLAYING:
                break
            now += step_ms
            self.tick(now)
            ticks += 1
        return ticks

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, now: Optional[float] = None) -> None:
        """Advance the session by one step ending at ``now`` (defaults to the clock).

        Outside playing mode nothing happens. While paused only the clock's pause
        bookkeeping moves.
        """
        if self.mode != GameMode.PLAYING:
            return

        if now is None:
            now = self.now()
        delta = min(max(now - self.last_update_time, 0.0), self.max_tick_ms)

        # 1. Clock
        self.clock.advance(now)
        self.last_update_time = now
        if self.clock.is_paused:
            return

        # 2-4. Economy
        self.rules.apply_production(self.ledger, self.registry, delta, now)
        self.rules.grow_population(self.population, self.ledger, self.registry, delta)
        self.rules.recompute_capacities(self.ledger, self.registry)

        # 5. Goals and mode
        self._update_goals()

        log_debug(
            f"[Tick] t={self.clock.elapsed:.0f}ms delta={delta:.1f}ms "
            f"pop={self.population.current:.2f}/{self.population.capacity:.0f}"
        )

    def _goal_snapshot(self) -> GoalSnapshot:
        # Building requirements count active instances only; inactive and
        # under-construction buildings do not satisfy a goal.
        return GoalSnapshot(
            population=self.population.current,
            resources=self.ledger.all_resources(),
            building_counts=self.registry.counts_by_kind(),
            elapsed_ms=self.clock.elapsed,
        )

    def _update_goals(self) -> None:
        snapshot = self._goal_snapshot()
        for goal in self.goals:
            if goal.completed or not is_complete(goal, snapshot):
                continue
            goal.completed = True
            if goal.reward:
                self.ledger.add_many(goal.reward)
            log_success(f"Goal completed: {goal.title}")

        if all(goal.completed for goal in self.goals) and self.mode == GameMode.PLAYING:
            self.mode = GameMode.COMPLETED
            self.stop()
            log_success(f"All {self.current_tier.value} goals completed at {self.formatted_game_time()}")

    # ------------------------------------------------------------------
    # Placement transactions
    # ------------------------------------------------------------------

    def place_building(self, kind: BuildingType, x: int, y: int) -> bool:
        """Validate, debit, create and place a building anchored at (x, y).

        Rejections (wrong mode, locked kind, missing resources, blocked or
        unsuitable footprint) mutate nothing.
        """
        if self.mode != GameMode.PLAYING:
            log_debug(f"[Place] {kind.value} rejected: not playing")
            return False

        definition = self.registry.definition(kind)

        if not self.registry.is_unlocked(kind, self.population.current):
            log_debug(f"[Place] {kind.value} rejected: locked")
            return False

        if not self.ledger.has_enough(definition.cost):
            log_debug(f"[Place] {kind.value} rejected: insufficient resources")
            return False

        width, height = definition.size.width, definition.size.height
        if not self.grid.can_place(x, y, width, height, definition.required_terrain):
            log_debug(f"[Place] {kind.value} rejected: cannot place at ({x}, {y})")
            return False

        if not self.ledger.consume(definition.cost):
            return False

        building = self.registry.create(kind, Position(x=x, y=y), now=self.last_update_time)
        if not self.grid.place(building, width, height):
            self.ledger.add_many(definition.cost)
            self.registry.remove(building.id)
            log_error(f"[Place] {kind.value} at ({x}, {y}) failed after debit; cost refunded")
            return False

        log_deterministic(f"[Place] {definition.name} at ({x}, {y})")
        return True

    def remove_building(self, x: int, y: int) -> bool:
        """Demolish the building anchored at (x, y) and refund half its cost (floored)."""
        if self.mode != GameMode.PLAYING:
            return False

        building = self.grid.building_at(x, y)
        if building is None:
            log_debug(f"[Remove] no building anchored at ({x}, {y})")
            return False

        definition = self.registry.definition(building.kind)
        self.grid.remove(x, y, definition.size.width, definition.size.height)
        self.registry.remove(building.id)

        refund = {kind: float(math.floor(amount * REFUND_RATIO)) for kind, amount in definition.cost.items()}
        self.ledger.add_many(refund)

        log_deterministic(f"[Remove] {definition.name} at ({x}, {y})")
        return True

    def set_selected_building_type(self, kind: Optional[BuildingType]) -> None:
        self.selected_building_type = kind

    def is_building_available(self, kind: BuildingType) -> bool:
        return self.registry.is_unlocked(kind, self.population.current)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_game_state(self) -> GameState:
        """Defensive copy of the whole session."""
        return GameState(
            mode=self.mode,
            resources=self.ledger.all_resources(),
            capacity=self.ledger.all_capacities(),
            population=self.population.model_copy(),
            buildings=[building.model_copy(deep=True) for building in self.registry.all()],
            map=self.grid.to_state(),
            clock=self.clock.model_copy(),
            goals=[goal.model_copy(deep=True) for goal in self.goals],
            selected_building_type=self.selected_building_type,
            current_tier=self.current_tier,
            seed=self.seed,
        )

    def formatted_game_time(self) -> str:
        return self.clock.formatted()

    def resource_summary(self) -> str:
        return self.rules.format_resource_summary(self.ledger)

    # ------------------------------------------------------------------
    # Save / load
    # ------------------------------------------------------------------

    def save_game(self) -> bool:
        """Write the session to the store; only while playing.

        Raises:
            OSError: If the store cannot persist the blob
        """
        if self.mode != GameMode.PLAYING:
            return False

        data = build_save_data(
            self.ledger,
            self.grid,
            self.registry,
            self.population,
            self.clock,
            self.goals,
            self.current_tier,
            self.seed,
        )
        self.store.write(self.save_key, data.to_json())
        log_success(f"Game saved ({self.save_key})")
        return True

    def load_game(self) -> bool:
        """Replace the session with the stored save and switch to playing.

        Missing or invalid saves return False and leave the session untouched.
        Sections absent from the save keep fresh-session defaults.
        """
        try:
            blob = self.store.read(self.save_key)
        except UnicodeDecodeError as exc:
            log_error(f"Failed to load game: save is not valid UTF-8 ({exc.reason})")
            return False
        if blob is None:
            log_error(f"No saved game under {self.save_key}")
            return False

        try:
            data = SaveData.from_json(blob)
        except ValidationError as exc:
            log_error(f"Failed to load game: {exc.error_count()} validation error(s)")
            return False

        ledger = ResourceLedger()
        registry = BuildingRegistry()
        grid = apply_save_data(data, ledger, registry)

        saved = data.game_state
        tier = saved.current_tier if saved and saved.current_tier is not None else GoalTier.BRONZE
        seed = saved.seed if saved and saved.seed is not None else None
        if grid is None:
            if seed is None:
                seed = random.randrange(RANDOM_SEED_LIMIT)
            grid = generate_map(self.map_width, self.map_height, seed)
        if seed is None:
            seed = grid.seed

        now = self.now()
        clock = saved.game_time if saved and saved.game_time is not None else GameClock(start_time=now)
        clock.rebase(now)

        self.ledger = ledger
        self.registry = registry
        self.grid = grid
        self.population = saved.population if saved and saved.population is not None else PopulationState()
        self.clock = clock
        self.goals = saved.goals if saved and saved.goals is not None else goals_for_tier(tier)
        self.current_tier = tier
        self.seed = seed
        self.selected_building_type = None
        self.last_update_time = now
        self.mode = GameMode.PLAYING

        log_success(
            f"Game loaded: tier={tier.value}, seed={seed}, "
            f"buildings={len(self.registry)}, time={self.formatted_game_time()}"
        )
        return True

    def has_save_game(self) -> bool:
        return self.store.exists(self.save_key)

    def delete_save(self) -> None:
        self.store.delete(self.save_key)
        log_info(f"Deleted save {self.save_key}")
