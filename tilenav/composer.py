"""
Top-level route planning across elevations.

Same-elevation requests go straight to the bounded A*. Requests that
change elevation are split into three pieces: walk to the nearest usable
stair, cross it, then walk from the stair's exit to the goal. The pieces
are stitched into one continuous Route or the whole request fails.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .config import DEFAULT_CONFIG, PathfindingConfig
from .features import FeatureLocator
from .movement import MoveValidator
from .pathfinding import Pathfinder, SearchStats
from .terrain import TerrainQuery
from .types import Elevation, FeatureCrossing, Route, RouteStep, as_tile

logger = logging.getLogger(__name__)


def stitch_routes(routes: Iterable[Route]) -> Route:
    """
    Concatenate consecutive route segments into one Route.

    A segment whose first step repeats the previous segment's last step has
    that step dropped, and any remaining back-to-back repeats of the same
    tile are collapsed (the later elevation wins).
    """
    steps: List[RouteStep] = []
    for route in routes:
        segment = list(route)
        if steps and segment and segment[0] == steps[-1]:
            segment = segment[1:]
        steps.extend(segment)

    collapsed: List[RouteStep] = []
    for step in steps:
        if collapsed and collapsed[-1].tile == step.tile:
            collapsed[-1] = step
            continue
        collapsed.append(step)
    return Route(collapsed)


class PathComposer:
    """
    Primary entry point for agent controllers.

    Holds only read-only collaborators, so one composer can serve many
    agents and concurrent callers.
    """

    def __init__(self, terrain: Optional[TerrainQuery], config: Optional[PathfindingConfig] = None):
        """
        Initialize the composer.

        Args:
            terrain: Map oracle. A missing or incomplete terrain is a
                configuration error; every request then returns None.
            config: Search bounds (defaults to DEFAULT_CONFIG)
        """
        self.terrain = terrain
        self.config = config or DEFAULT_CONFIG
        self._configuration_error = self._check_terrain(terrain)
        self._configuration_error_reported = False

        if self._configuration_error is None:
            self.validator = MoveValidator(terrain)
            self.pathfinder = Pathfinder(terrain, self.config, self.validator)
            self.locator = FeatureLocator(terrain, self.validator)
        else:
            self.validator = None
            self.pathfinder = None
            self.locator = None

    @staticmethod
    def _check_terrain(terrain) -> Optional[str]:
        if terrain is None:
            return "no terrain bound"
        if not isinstance(terrain, TerrainQuery):
            missing = [name for name in ('in_bounds', 'elevation_at', 'has_wall', 'has_ground',
                                         'has_bridge', 'stair_feature_at')
                       if not callable(getattr(terrain, name, None))]
            return f"terrain {type(terrain).__name__} is missing {', '.join(missing)}"
        return None

    @property
    def is_configured(self) -> bool:
        return self._configuration_error is None

    def _ready(self) -> bool:
        if self._configuration_error is None:
            return True
        if not self._configuration_error_reported:
            logger.error(f"PathComposer: {self._configuration_error}; all path requests will fail")
            self._configuration_error_reported = True
        return False

    def find_path(
        self,
        start: Tuple[int, int],
        start_elevation: Elevation,
        goal: Tuple[int, int],
        goal_elevation: Elevation,
        stats: Optional[SearchStats] = None,
    ) -> Optional[Route]:
        """Single search bounded around the start, without stair planning."""
        if not self._ready():
            return None
        return self.pathfinder.find_path(start, start_elevation, goal, goal_elevation, stats=stats)

    def find_overall_path(
        self,
        start: Tuple[int, int],
        start_elevation: Elevation,
        goal: Tuple[int, int],
        goal_elevation: Elevation,
    ) -> Optional[Route]:
        """
        Plan a full route, climbing or descending a stair when needed.

        Args:
            start: Agent's current tile
            start_elevation: Agent's current elevation
            goal: Target tile
            goal_elevation: Elevation the agent must arrive at

        Returns:
            Route from start to goal, or None when no complete route exists
        """
        if not self._ready():
            return None

        start = as_tile(start)
        goal = as_tile(goal)
        config = self.config

        if start_elevation == goal_elevation:
            route = self.pathfinder.find_path(
                start, start_elevation, goal, goal_elevation,
                focus=goal, max_distance=config.direct_max_distance,
            )
            self._log_outcome(start, start_elevation, goal, goal_elevation, route)
            return route

        crossing = self.locator.find_nearest_transition(
            start, start_elevation, goal_elevation, config.feature_search_radius
        )
        if crossing is None:
            logger.info(
                f"No stair from elevation {start_elevation} to {goal_elevation} near {start}"
            )
            return None

        approach = self.pathfinder.find_path(
            start, start_elevation, crossing.access_tile, start_elevation,
            focus=start, max_distance=config.approach_max_distance,
        )
        if approach is None:
            logger.info(f"Stair at {crossing.feature_tile} found but its access tile {crossing.access_tile} is unreachable")
            return None

        stair_steps = self._cross(crossing)
        if stair_steps is None:
            logger.warning(f"Stair at {crossing.feature_tile} could not be crossed")
            return None

        departure = self.pathfinder.find_path(
            crossing.exit_tile, crossing.exit_elevation, goal, goal_elevation,
            focus=goal, max_distance=config.direct_max_distance,
        )
        if departure is None:
            logger.info(f"Goal {goal} unreachable from stair exit {crossing.exit_tile}")
            return None

        route = stitch_routes((approach, stair_steps, departure))
        self._log_outcome(start, start_elevation, goal, goal_elevation, route)
        return route

    def _cross(self, crossing: FeatureCrossing) -> Optional[Route]:
        """Access tile -> stair -> exit tile, with the elevation after each step."""
        allowed, on_stair = self.validator.can_step(
            crossing.access_tile, crossing.access_elevation, crossing.feature_tile
        )
        if not allowed:
            return None
        allowed, on_exit = self.validator.can_step(crossing.feature_tile, on_stair, crossing.exit_tile)
        if not allowed or on_exit != crossing.exit_elevation:
            return None
        return Route([
            RouteStep(crossing.access_tile, crossing.access_elevation),
            RouteStep(crossing.feature_tile, on_stair),
            RouteStep(crossing.exit_tile, on_exit),
        ])

    def _log_outcome(self, start, start_elevation, goal, goal_elevation, route: Optional[Route]) -> None:
        if route is None:
            logger.info(f"No path: {start}@{start_elevation} -> {goal}@{goal_elevation}")
            return
        logger.info(f"Path found: {len(route)} tiles from {start}@{start_elevation} to {goal}@{goal_elevation}")
        # Warn if the route is much longer than the straight-line distance
        manhattan_dist = start.manhattan(goal)
        if manhattan_dist and len(route) - 1 > manhattan_dist * 3:
            logger.debug(f"Long detour: {len(route) - 1} steps for Manhattan distance {manhattan_dist}")


# Convenience function
def find_overall_path(
    terrain: TerrainQuery,
    start: Tuple[int, int],
    start_elevation: Elevation,
    goal: Tuple[int, int],
    goal_elevation: Elevation,
    config: Optional[PathfindingConfig] = None,
) -> Optional[Route]:
    """
    Plan a route between two (tile, elevation) states on ``terrain``.

    Returns:
        Route, or None if no complete route exists
    """
    return PathComposer(terrain, config).find_overall_path(start, start_elevation, goal, goal_elevation)
