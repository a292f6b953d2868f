"""Tests for save stores and save/load round trips through the orchestrator."""

import json

from townbuilder.orchestrator import Orchestrator
from townbuilder.persistence import InMemorySaveStore, JsonFileSaveStore
from townbuilder.schemas import BuildingType, GameMode, GoalTier, ResourceType, TerrainType
from townbuilder.snapshot import SaveData

R = ResourceType
B = BuildingType


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


def make_game(store=None, clock=None) -> Orchestrator:
    game = Orchestrator(
        store=store or InMemorySaveStore(),
        clock=clock or FakeClock(),
        map_width=12,
        map_height=10,
    )
    return game


def start_with_buildings(game: Orchestrator) -> None:
    game.start_new_game(GoalTier.SILVER, seed=99)
    for tile in game.grid.iter_tiles():
        tile.terrain = TerrainType.GRASS
    game.grid.tile(6, 6).terrain = TerrainType.FOREST
    assert game.place_building(B.HOUSE, 1, 1)
    assert game.place_building(B.FARM, 3, 1)
    assert game.place_building(B.LUMBERJACK, 6, 6)


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


def test_in_memory_store_round_trip():
    store = InMemorySaveStore()

    assert store.read("slot") is None
    assert store.exists("slot") is False

    store.write("slot", "{}")
    assert store.read("slot") == "{}"
    assert store.exists("slot") is True

    store.delete("slot")
    store.delete("slot")
    assert store.exists("slot") is False


def test_json_file_store_writes_key_file(tmp_path):
    store = JsonFileSaveStore(tmp_path / "saves")

    assert store.read("townGameSave") is None
    store.write("townGameSave", '{"a": 1}')

    path = tmp_path / "saves" / "townGameSave.json"
    assert path.read_text("utf-8") == '{"a": 1}'
    assert store.exists("townGameSave") is True
    assert [p.name for p in (tmp_path / "saves").iterdir()] == ["townGameSave.json"]

    store.write("townGameSave", '{"a": 2}')
    assert store.read("townGameSave") == '{"a": 2}'

    store.delete("townGameSave")
    store.delete("townGameSave")
    assert store.exists("townGameSave") is False


# ---------------------------------------------------------------------------
# Save / load
# ---------------------------------------------------------------------------


def test_save_requires_playing_mode():
    game = make_game()
    assert game.save_game() is False
    assert game.has_save_game() is False


def test_save_blob_has_expected_sections():
    game = make_game()
    start_with_buildings(game)
    game.save_game()

    blob = json.loads(game.store.read(game.save_key))

    assert set(blob) == {"resources", "map", "buildings", "gameState"}
    assert set(blob["resources"]) == {"resources", "capacity"}
    assert blob["map"]["width"] == 12
    assert len(blob["map"]["tiles"]) == 10
    assert len(blob["buildings"]) == 3
    assert blob["buildings"][0][0] == blob["buildings"][0][1]["id"]
    assert blob["gameState"]["currentTier"] == "silver"
    assert blob["gameState"]["seed"] == 99
    assert "gameTime" in blob["gameState"]


def test_round_trip_reproduces_session():
    store = InMemorySaveStore()
    clock = FakeClock()
    game = make_game(store, clock)
    start_with_buildings(game)
    for _ in range(30):
        game.tick(clock.advance(100))
    game.goals[1].completed = True
    assert game.save_game() is True
    assert game.has_save_game() is True

    restored = make_game(store, FakeClock(1_000_000))
    assert restored.load_game() is True

    assert restored.mode == GameMode.PLAYING
    assert restored.ledger.all_resources() == game.ledger.all_resources()
    assert restored.ledger.all_capacities() == game.ledger.all_capacities()
    assert [b.model_dump() for b in restored.registry.all()] == [b.model_dump() for b in game.registry.all()]
    assert restored.grid.to_state() == game.grid.to_state()
    assert [g.completed for g in restored.goals] == [g.completed for g in game.goals]
    assert restored.population == game.population
    assert restored.current_tier == GoalTier.SILVER
    assert restored.seed == 99
    assert restored.clock.elapsed == game.clock.elapsed


def test_load_relinks_anchor_references():
    store = InMemorySaveStore()
    game = make_game(store)
    start_with_buildings(game)
    game.save_game()

    restored = make_game(store)
    restored.load_game()

    farm = restored.grid.building_at(3, 1)
    assert farm is not None
    assert farm is restored.registry.get(farm.id)
    assert restored.remove_building(3, 1) is True
    assert restored.grid.tile(4, 2).occupied is False


def test_loaded_clock_does_not_count_offline_time():
    store = InMemorySaveStore()
    clock = FakeClock()
    game = make_game(store, clock)
    game.start_new_game(seed=5)
    for _ in range(20):
        game.tick(clock.advance(100))
    game.save_game()

    later = FakeClock(50_000_000)
    restored = make_game(store, later)
    restored.load_game()
    restored.tick(later.advance(100))

    assert restored.clock.elapsed == 2_100


def test_missing_save_returns_false():
    game = make_game()
    assert game.load_game() is False
    assert game.is_in_menu() is True


def test_corrupt_save_leaves_session_untouched():
    store = InMemorySaveStore()
    game = make_game(store)
    game.start_new_game(seed=4)
    game.place_building(B.WELL, *next(
        (t.x, t.y) for t in game.grid.iter_tiles() if t.terrain == TerrainType.GRASS
    ))
    before = game.get_game_state()

    store.write(game.save_key, "{not json")
    assert game.load_game() is False

    store.write(game.save_key, json.dumps({"resources": {"resources": {"wood": "lots"}}}))
    assert game.load_game() is False

    store.write(game.save_key, json.dumps({"buildings": [["x", {"kind": "castle"}]]}))
    assert game.load_game() is False

    assert game.get_game_state() == before


def test_undecodable_save_file_returns_false(tmp_path):
    game = make_game(JsonFileSaveStore(tmp_path))
    (tmp_path / f"{game.save_key}.json").write_bytes(b"\xff\xfe{garbage")

    assert game.load_game() is False
    assert game.mode == GameMode.MENU

    game.start_new_game(seed=4)
    before = game.get_game_state()
    assert game.load_game() is False
    assert game.get_game_state() == before


def test_partial_save_keeps_defaults_for_missing_sections():
    store = InMemorySaveStore()
    store.write(
        "townGameSave",
        json.dumps({"resources": {"resources": {"gold": 42}}, "futureSection": {"x": 1}}),
    )
    game = Orchestrator(store=store, clock=FakeClock(), map_width=12, map_height=10, save_key="townGameSave")

    assert game.load_game() is True

    assert game.mode == GameMode.PLAYING
    assert game.ledger.get(R.GOLD) == 42
    assert game.ledger.get(R.WOOD) == 80
    assert len(game.registry) == 0
    assert game.grid.size == (12, 10)
    assert [goal.id for goal in game.goals] == ["bronze_1", "bronze_2", "bronze_3"]


def test_saved_game_state_fields_are_optional():
    data = SaveData.from_json(json.dumps({"gameState": {"seed": 8}}))

    assert data.resources is None
    assert data.game_state.seed == 8
    assert data.game_state.goals is None


def test_delete_save():
    game = make_game()
    game.start_new_game(seed=1)
    game.save_game()

    game.delete_save()
    assert game.has_save_game() is False


def test_file_store_round_trip(tmp_path):
    store = JsonFileSaveStore(tmp_path)
    game = make_game(store)
    start_with_buildings(game)
    game.save_game()

    restored = make_game(JsonFileSaveStore(tmp_path))
    assert restored.load_game() is True
    assert len(restored.registry) == 3
