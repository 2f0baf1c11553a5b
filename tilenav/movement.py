"""
Single-step move legality across elevation layers.

Rules are evaluated in a fixed order and the first one that applies
decides the move:

1. out of bounds            -> blocked
2. wall                     -> blocked
3. no ground/bridge/stair   -> blocked (void)
4. stair ascent             -> allowed, elevation + 1
5. stair descent            -> allowed, elevation - 1
6. bridge                   -> deck stays on deck; below only with ground underneath
7. level ground             -> allowed, elevation unchanged
8. anything else            -> blocked (cliff)
"""

import logging
from typing import Tuple

from .terrain import TerrainQuery
from .types import BRIDGE_LEVEL, Elevation, TransitionFeature, as_tile

logger = logging.getLogger(__name__)


class MoveValidator:
    """
    Pure move checks against a TerrainQuery.

    Holds no state besides the terrain reference, so one validator can be
    shared between any number of concurrent searches.
    """

    def __init__(self, terrain: TerrainQuery):
        self.terrain = terrain

    def is_standable(self, tile: Tuple[int, int], elevation: Elevation) -> bool:
        """
        Check whether an agent at ``elevation`` could stand on ``tile``.

        The tile must be in bounds, wall-free, and offer a surface at that
        elevation: ground whose data elevation matches, or a bridge deck.
        """
        x, y = tile
        terrain = self.terrain
        if not terrain.in_bounds(x, y) or terrain.has_wall(tile):
            return False
        if terrain.has_bridge(tile) and elevation == BRIDGE_LEVEL:
            return True
        return terrain.has_ground(tile) and terrain.elevation_at(x, y) == elevation

    def can_step(
        self,
        from_tile: Tuple[int, int],
        from_elevation: Elevation,
        to_tile: Tuple[int, int],
    ) -> Tuple[bool, Elevation]:
        """
        Decide whether one N/S/E/W step is legal.

        Args:
            from_tile: Tile the agent stands on (already known to be walkable)
            from_elevation: Elevation the agent is at on ``from_tile``
            to_tile: Candidate neighbour tile

        Returns:
            (allowed, to_elevation). When the move is blocked the elevation
            is returned unchanged.
        """
        terrain = self.terrain
        from_tile = as_tile(from_tile)
        to_tile = as_tile(to_tile)
        blocked = (False, from_elevation)

        if from_tile.manhattan(to_tile) != 1:
            return blocked

        # 1. Bounds
        if not terrain.in_bounds(to_tile.x, to_tile.y):
            return blocked

        # 2. Walls block at every elevation
        if terrain.has_wall(to_tile):
            return blocked

        has_ground = terrain.has_ground(to_tile)
        has_bridge = terrain.has_bridge(to_tile)
        stair = terrain.stair_feature_at(to_tile)

        # 3. Void
        if not (has_ground or has_bridge or stair is not None):
            return blocked

        target_elevation = terrain.elevation_at(to_tile.x, to_tile.y)

        if stair is not None:
            # 4. Climbing onto the stair from its low side
            if (from_elevation == target_elevation
                    and from_tile == stair.low_access_tile
                    and self.is_standable(stair.high_access_tile, target_elevation + 1)):
                return True, target_elevation + 1

            # 5. Stepping down onto the stair from its high side
            if (from_elevation == target_elevation + 1
                    and from_tile == stair.high_access_tile):
                return True, target_elevation

        # 6. Bridges
        if has_bridge:
            if from_elevation == BRIDGE_LEVEL:
                return True, BRIDGE_LEVEL
            if has_ground and target_elevation == from_elevation:
                return True, from_elevation
            return blocked

        # 7. Level ground
        if has_ground and target_elevation == from_elevation:
            return True, from_elevation

        # 8. Cliff
        return blocked

    def crosses_feature(self, feature: TransitionFeature, ascending: bool) -> bool:
        """Check that the access -> stair -> exit steps of a feature are legal."""
        low_level = self.terrain.elevation_at(*feature.feature_tile)
        if ascending:
            access, exit_tile, start_level = feature.low_access_tile, feature.high_access_tile, low_level
        else:
            access, exit_tile, start_level = feature.high_access_tile, feature.low_access_tile, low_level + 1

        allowed, on_stair = self.can_step(access, start_level, feature.feature_tile)
        if not allowed:
            return False
        allowed, _ = self.can_step(feature.feature_tile, on_stair, exit_tile)
        return allowed
