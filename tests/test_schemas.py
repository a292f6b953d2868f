"""Tests for schemas, the static catalog and configuration."""

import pytest
from pydantic import ValidationError

from townbuilder.catalog import BUILDING_DEFINITIONS, STARTING_RESOURCES, WAREHOUSE_BONUS
from townbuilder.config import Config
from townbuilder.schemas import (
    BuildingInstance,
    BuildingType,
    Footprint,
    Position,
    ResourceType,
    TerrainType,
)

R = ResourceType
B = BuildingType


def test_catalog_covers_every_building_kind():
    assert set(BUILDING_DEFINITIONS) == set(BuildingType)
    for kind, definition in BUILDING_DEFINITIONS.items():
        assert definition.kind == kind
        assert definition.size.width >= 1 and definition.size.height >= 1


def test_house_definition():
    house = BUILDING_DEFINITIONS[B.HOUSE]

    assert house.cost == {R.WOOD: 15, R.STONE: 8}
    assert house.population_effect == 4
    assert house.required_terrain == {TerrainType.GRASS}
    assert house.unlock_requirement is None


def test_unlock_thresholds():
    assert BUILDING_DEFINITIONS[B.MINE].unlock_requirement.population == 15
    assert BUILDING_DEFINITIONS[B.WAREHOUSE].unlock_requirement.population == 25
    assert BUILDING_DEFINITIONS[B.MARKET].unlock_requirement.population == 35


def test_quarry_accepts_stone_or_mountain():
    assert BUILDING_DEFINITIONS[B.QUARRY].required_terrain == {
        TerrainType.STONE_DEPOSIT,
        TerrainType.MOUNTAIN,
    }


def test_starting_stock_and_warehouse_table():
    assert set(STARTING_RESOURCES) == set(ResourceType)
    assert WAREHOUSE_BONUS[R.STONE] == 200
    assert R.POPULATION not in WAREHOUSE_BONUS


def test_enums_serialize_as_strings():
    instance = BuildingInstance(id="abc", kind=B.WELL, position=Position(x=1, y=2))
    dumped = instance.model_dump(mode="json")

    assert dumped["kind"] == "well"
    assert dumped["status"] == "active"
    assert BuildingInstance.model_validate(dumped) == instance


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        Footprint(width=0, height=1)
    with pytest.raises(ValidationError):
        BuildingInstance(id="x", kind="castle", position=Position(x=0, y=0))
    with pytest.raises(ValidationError):
        BuildingInstance(id="x", kind=B.HOUSE, position=Position(x=0, y=0), level=0)


def test_config_validate_rejects_bad_values(monkeypatch):
    Config.validate()

    monkeypatch.setattr(Config, "MAP_WIDTH", 0)
    with pytest.raises(ValueError):
        Config.validate()

    monkeypatch.setattr(Config, "MAP_WIDTH", 30)
    monkeypatch.setattr(Config, "MAX_TICK_MS", -5)
    with pytest.raises(ValueError):
        Config.validate()


def test_config_display_lists_settings():
    text = Config.display()
    assert "Map Size" in text
    assert "Save Key" in text
