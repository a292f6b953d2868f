"""Tests for the terrain grid, map generation and grid helpers."""

import math

import pytest

from townbuilder.environment import (
    MapGrid,
    find_placement,
    generate_map,
    render_ascii,
)
from townbuilder.environment.generation import stamp_cluster
from townbuilder.schemas import BuildingInstance, BuildingType, Position, TerrainType

DEPOSIT_TERRAIN = {TerrainType.FOREST, TerrainType.STONE_DEPOSIT, TerrainType.IRON_DEPOSIT}


def make_building(x: int, y: int, building_id: str = "b1") -> BuildingInstance:
    return BuildingInstance(id=building_id, kind=BuildingType.HOUSE, position=Position(x=x, y=y))


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def test_generation_is_deterministic():
    first = generate_map(30, 20, 42)
    second = generate_map(30, 20, 42)

    assert first.terrain_grid() == second.terrain_grid()
    assert first.seed == 42


def test_generation_differs_between_seeds():
    assert generate_map(30, 20, 1).terrain_grid() != generate_map(30, 20, 2).terrain_grid()


def test_generated_map_has_requested_size_and_no_occupancy():
    grid = generate_map(30, 20, 7)

    assert grid.size == (30, 20)
    assert len(grid.tiles) == 20
    assert all(len(row) == 30 for row in grid.tiles)
    assert not any(tile.occupied for tile in grid.iter_tiles())


@pytest.mark.parametrize("seed", [0, 1, 99, 2024, 123456])
def test_deposits_stay_off_the_border(seed):
    grid = generate_map(30, 20, seed)

    for tile in grid.iter_tiles():
        if tile.terrain in DEPOSIT_TERRAIN:
            assert 1 <= tile.x <= grid.width - 2
            assert 1 <= tile.y <= grid.height - 2


@pytest.mark.parametrize("seed", [0, 5, 77, 4242, 999999])
def test_inland_water_stays_away_from_center(seed):
    grid = generate_map(30, 20, seed)
    cx, cy = grid.width // 2, grid.height // 2

    for tile in grid.iter_tiles():
        on_edge = tile.x in (0, grid.width - 1) or tile.y in (0, grid.height - 1)
        if tile.terrain == TerrainType.WATER and not on_edge:
            assert math.dist((tile.x, tile.y), (cx, cy)) > 7


def test_generation_rejects_empty_dimensions():
    with pytest.raises(ValueError):
        generate_map(0, 10, 1)


def test_stamp_cluster_only_overwrites_grass():
    grid = MapGrid(5, 5)
    grid.tiles[2][3].terrain = TerrainType.WATER

    stamp_cluster(grid, 2, 2, TerrainType.FOREST, 3)

    counts = grid.terrain_counts()
    assert counts[TerrainType.FOREST] == 8
    assert counts[TerrainType.WATER] == 1
    assert grid.tiles[0][0].terrain == TerrainType.GRASS


def test_stamp_cluster_clips_at_edges():
    grid = MapGrid(3, 3)
    stamp_cluster(grid, 0, 0, TerrainType.IRON_DEPOSIT, 2)
    assert grid.terrain_counts()[TerrainType.IRON_DEPOSIT] == 4


# ---------------------------------------------------------------------------
# Grid operations
# ---------------------------------------------------------------------------


def test_can_place_checks_bounds_occupancy_and_terrain():
    grid = MapGrid(6, 6)
    grid.tiles[1][1].terrain = TerrainType.FOREST

    assert grid.can_place(0, 0, 2, 2) is True
    assert grid.can_place(5, 5, 2, 1) is False  # out of bounds
    assert grid.can_place(-1, 0, 1, 1) is False
    assert grid.can_place(0, 0, 2, 2, {TerrainType.GRASS}) is False  # forest at (1, 1)
    assert grid.can_place(1, 1, 1, 1, {TerrainType.FOREST}) is True

    assert grid.place(make_building(3, 3), 2, 2) is True
    assert grid.can_place(4, 4, 1, 1) is False  # occupied
    assert grid.can_place(2, 2, 2, 2) is False  # overlaps
    assert grid.can_place(2, 2, 1, 1) is True


def test_place_marks_footprint_and_anchors_reference():
    grid = MapGrid(5, 5)
    building = make_building(1, 1)

    assert grid.place(building, 2, 2) is True

    occupied = {(tile.x, tile.y) for tile in grid.iter_tiles() if tile.occupied}
    assert occupied == {(1, 1), (2, 1), (1, 2), (2, 2)}
    assert grid.building_at(1, 1) is building
    assert grid.building_at(2, 2) is None
    assert grid.buildings() == [building]


def test_failed_place_mutates_nothing():
    grid = MapGrid(3, 3)
    assert grid.place(make_building(2, 2), 2, 2) is False
    assert not any(tile.occupied for tile in grid.iter_tiles())


def test_remove_clears_footprint():
    grid = MapGrid(4, 4)
    grid.place(make_building(0, 0), 2, 2)

    assert grid.remove(0, 0, 2, 2) is True
    assert not any(tile.occupied for tile in grid.iter_tiles())
    assert grid.building_at(0, 0) is None
    assert grid.remove(9, 9, 1, 1) is False


def test_neighbors_square_radius():
    grid = MapGrid(5, 5)

    assert len(grid.neighbors(2, 2)) == 8
    assert len(grid.neighbors(0, 0)) == 3
    assert len(grid.neighbors(2, 2, radius=2)) == 24
    assert (2, 2) not in {(tile.x, tile.y) for tile in grid.neighbors(2, 2)}


def test_negative_dimensions_rejected():
    with pytest.raises(ValueError):
        MapGrid(-1, 3)


def test_state_round_trip_relinks_anchor():
    grid = generate_map(12, 10, 3)
    building = make_building(4, 4, "anchor")
    grid.tiles[4][4].terrain = TerrainType.GRASS
    grid.place(building, 1, 1)

    restored = MapGrid.from_state(grid.to_state(), {"anchor": building})

    assert restored.terrain_grid() == grid.terrain_grid()
    assert restored.building_at(4, 4) is building
    assert restored.seed == 3


def test_from_state_drops_unknown_anchor_reference():
    grid = MapGrid(3, 3)
    grid.place(make_building(1, 1, "ghost"), 1, 1)

    restored = MapGrid.from_state(grid.to_state(), {})

    assert restored.tile(1, 1).occupied is True
    assert restored.building_at(1, 1) is None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_render_ascii_outputs_symbols():
    grid = MapGrid(4, 2)
    grid.tiles[0][3].terrain = TerrainType.WATER
    grid.tiles[1][0].terrain = TerrainType.MOUNTAIN
    grid.tiles[1][3].terrain = TerrainType.FOREST
    grid.place(make_building(1, 0), 2, 1)

    assert render_ascii(grid) == ".#+~\n^..T"
    assert render_ascii(grid, symbols={TerrainType.GRASS: ","}) == ",#+~\n^,,T"


def test_find_placement_scans_row_major():
    grid = MapGrid(4, 4)
    grid.place(make_building(0, 0), 1, 1)
    grid.tiles[3][3].terrain = TerrainType.FOREST

    assert find_placement(grid, 1, 1) == (1, 0)
    assert find_placement(grid, 1, 1, {TerrainType.FOREST}) == (3, 3)
    assert find_placement(grid, 5, 5) is None
