"""
Locating stairs that connect two elevations near an agent.
"""

import logging
from typing import Optional, Tuple

from .movement import MoveValidator
from .terrain import TerrainQuery
from .types import Elevation, FeatureCrossing, TransitionFeature, as_tile

logger = logging.getLogger(__name__)


class FeatureLocator:
    """Scans a square window of the terrain for usable stairs."""

    def __init__(self, terrain: TerrainQuery, validator: Optional[MoveValidator] = None):
        self.terrain = terrain
        self.validator = validator or MoveValidator(terrain)

    def is_well_formed(self, feature: TransitionFeature) -> bool:
        """
        Check a stair's access tiles.

        The low side must sit directly south of the stair at the stair's
        own data elevation, the high side directly north at one level
        above, and both must be standable. Anything else is an authoring
        problem and the stair is ignored.
        """
        tile = as_tile(feature.feature_tile)
        if feature.low_access_tile != tile.offset(0, -1) or feature.high_access_tile != tile.offset(0, 1):
            return False
        if not self.terrain.in_bounds(tile.x, tile.y):
            return False
        low_level = self.terrain.elevation_at(tile.x, tile.y)
        return (self.validator.is_standable(feature.low_access_tile, low_level)
                and self.validator.is_standable(feature.high_access_tile, low_level + 1))

    def crossing_for(
        self,
        feature: TransitionFeature,
        from_elevation: Elevation,
        to_elevation: Elevation,
    ) -> Optional[FeatureCrossing]:
        """Bind a feature to a direction, or None if it does not join these levels."""
        low_level = self.terrain.elevation_at(*feature.feature_tile)
        if from_elevation == low_level and to_elevation == low_level + 1:
            return FeatureCrossing(feature, feature.low_access_tile, from_elevation,
                                   feature.high_access_tile, to_elevation)
        if from_elevation == low_level + 1 and to_elevation == low_level:
            return FeatureCrossing(feature, feature.high_access_tile, from_elevation,
                                   feature.low_access_tile, to_elevation)
        return None

    def find_nearest_transition(
        self,
        from_tile: Tuple[int, int],
        from_elevation: Elevation,
        to_elevation: Elevation,
        search_radius: int,
    ) -> Optional[FeatureCrossing]:
        """
        Find the closest stair that takes an agent from one elevation to another.

        Args:
            from_tile: Tile the search is centred on
            from_elevation: Elevation the agent is at now
            to_elevation: Elevation the agent needs to reach
            search_radius: Half-width of the square window to scan

        Returns:
            FeatureCrossing for the stair whose tile is nearest ``from_tile``
            (squared Euclidean distance, first in row-major scan order on
            ties), or None if nothing usable is in range
        """
        from_tile = as_tile(from_tile)
        if abs(to_elevation - from_elevation) != 1:
            logger.debug(
                f"No single stair joins elevation {from_elevation} and {to_elevation}"
            )
            return None

        best: Optional[FeatureCrossing] = None
        best_distance = None
        rejected = 0

        for y in range(from_tile.y - search_radius, from_tile.y + search_radius + 1):
            for x in range(from_tile.x - search_radius, from_tile.x + search_radius + 1):
                if not self.terrain.in_bounds(x, y):
                    continue
                feature = self.terrain.stair_feature_at((x, y))
                if feature is None:
                    continue
                crossing = self.crossing_for(feature, from_elevation, to_elevation)
                if crossing is None:
                    continue
                if not self.is_well_formed(feature) or not self.validator.crosses_feature(
                        feature, ascending=crossing.ascending):
                    rejected += 1
                    continue
                distance = from_tile.distance_sq(feature.feature_tile)
                if best_distance is None or distance < best_distance:
                    best = crossing
                    best_distance = distance

        if rejected:
            logger.debug(f"Skipped {rejected} malformed stair(s) within {search_radius} of {from_tile}")
        if best is None:
            logger.debug(
                f"No stair from elevation {from_elevation} to {to_elevation} within {search_radius} of {from_tile}"
            )
        else:
            logger.debug(f"Nearest stair at {best.feature_tile}: access {best.access_tile}, exit {best.exit_tile}")
        return best
