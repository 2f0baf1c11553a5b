"""
Shared terrain fixtures for the tilenav tests.

All maps are written north first (the first row is the highest y).
"""

import os
import sys

import pytest

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tilenav.movement import MoveValidator
from tilenav.terrain import GridTerrain


# Ground (elevation 0) for y < 5, cliff row at y = 5 with one stair at (3, 5),
# plateau (elevation 1) for y >= 6
CLIFF_FEATURES = [
    "........",
    "........",
    "........",
    "........",
    "###S####",
    "........",
    "........",
    "........",
    "........",
    "........",
]
CLIFF_ELEVATIONS = ["11111111"] * 4 + ["00000000"] * 6

# Same layout, 10 wide, with stairs at (2, 5) and (7, 5)
TWO_STAIR_FEATURES = [
    "..........",
    "..........",
    "..........",
    "..........",
    "##S####S##",
    "..........",
    "..........",
    "..........",
    "..........",
    "..........",
]
TWO_STAIR_ELEVATIONS = ["1111111111"] * 4 + ["0000000000"] * 6

# Ground corridor at x = 3 between two plateaus, reached by a stair at (3, 5)
# and crossed at (3, 3) by a bridge with ground underneath
CORRIDOR_FEATURES = [
    ".......",
    "...S...",
    ".......",
    "...H...",
    ".......",
    ".......",
    ".......",
]
CORRIDOR_ELEVATIONS = [
    "1111111",
    "1110111",
    "1110111",
    "1110111",
    "1110111",
    "1110111",
    "1110111",
]


def build_bridge_terrain(bridge_length: int = 3) -> GridTerrain:
    """
    Plateau banks (elevation 1) north and south of a gap, joined by a bridge.

    The bridge covers (5, 5) .. (5, 5 + bridge_length). The gap floor is
    void except for an elevation-0 ground strip along y = 6, x = 0..4.
    """
    gap_rows = range(5, 5 + bridge_length + 1)
    height = 5 + bridge_length + 1 + 5
    terrain = GridTerrain.flat(11, height, elevation=1)
    gap_tiles = [(x, y) for x in range(11) for y in gap_rows]
    terrain.set_ground(gap_tiles, False)
    terrain.set_elevation(gap_tiles, 0)
    terrain.set_bridge([(5, y) for y in gap_rows])
    terrain.set_ground([(x, 6) for x in range(5)])
    return terrain


def assert_route_valid(terrain, route, start, start_elevation, goal, goal_elevation):
    """Check start/goal fidelity, adjacency and planned elevations by replaying the route."""
    validator = MoveValidator(terrain)
    assert route.start == tuple(start)
    assert route[0].elevation == start_elevation
    assert route.goal == tuple(goal)
    assert route.final_elevation == goal_elevation

    elevation = start_elevation
    for prev, curr in zip(route, route[1:]):
        assert prev.tile.manhattan(curr.tile) == 1, f"teleport {prev.tile} -> {curr.tile}"
        allowed, elevation = validator.can_step(prev.tile, elevation, curr.tile)
        assert allowed, f"illegal step {prev} -> {curr.tile}"
        assert elevation == curr.elevation
    assert elevation == goal_elevation


@pytest.fixture
def cliff_terrain():
    return GridTerrain.from_ascii(CLIFF_FEATURES, CLIFF_ELEVATIONS)


@pytest.fixture
def two_stair_terrain():
    return GridTerrain.from_ascii(TWO_STAIR_FEATURES, TWO_STAIR_ELEVATIONS)


@pytest.fixture
def corridor_terrain():
    return GridTerrain.from_ascii(CORRIDOR_FEATURES, CORRIDOR_ELEVATIONS)


@pytest.fixture
def bridge_terrain():
    return build_bridge_terrain()


@pytest.fixture
def flat_terrain():
    return GridTerrain.flat(5, 5)
