"""
Route following for a single chasing agent.

The navigator asks the composer for a fresh route on a fixed refresh
interval and hands out one move at a time. The elevation an agent holds
after each move comes straight from the planned Route, so the agent's
tracked elevation cannot drift from what the search assumed.
"""

import logging
import time
from typing import Callable, Optional, Tuple

from .composer import PathComposer
from .types import DIRECTION_NAMES, Elevation, Route, RouteStep, as_tile

logger = logging.getLogger(__name__)


class Navigator:
    """Throttled route requests plus step-by-step progress along the route."""

    def __init__(self, composer: PathComposer, refresh_interval: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            composer: Planner used for every route request
            refresh_interval: Seconds between route requests
                (default: ``composer.config.refresh_interval``)
            clock: Monotonic time source, injectable for tests
        """
        self.composer = composer
        self.refresh_interval = refresh_interval if refresh_interval is not None else composer.config.refresh_interval
        self.clock = clock
        self.route: Optional[Route] = None
        self.route_index = 0
        self._last_request: Optional[float] = None

    @property
    def is_moving(self) -> bool:
        return self.route is not None and self.route_index < len(self.route)

    def refresh_due(self, now: float) -> bool:
        return self._last_request is None or now - self._last_request >= self.refresh_interval

    def request_route(self, position: Tuple[int, int], elevation: Elevation,
                      target: Tuple[int, int], target_elevation: Elevation) -> bool:
        """Plan a new route right away; returns False (and stops) when there is none."""
        self._last_request = self.clock()
        route = self.composer.find_overall_path(position, elevation, target, target_elevation)
        if route is not None and len(route) > 1:
            self.route = route
            self.route_index = 1
            return True
        self.stop()
        return False

    def stop(self) -> None:
        self.route = None
        self.route_index = 0

    def next_step(self) -> Optional[RouteStep]:
        if not self.is_moving:
            return None
        return self.route[self.route_index]

    def advance(self) -> Optional[RouteStep]:
        """
        Mark the next step as reached.

        Returns:
            The step just reached, including the elevation the agent now has,
            or None when there was nothing left to follow
        """
        step = self.next_step()
        if step is None:
            return None
        self.route_index += 1
        if self.route_index >= len(self.route):
            logger.debug(f"Route complete at {step.tile}@{step.elevation}")
            self.stop()
        return step

    def update(self, position: Tuple[int, int], elevation: Elevation,
               target: Tuple[int, int], target_elevation: Elevation) -> Optional[str]:
        """
        One controller tick.

        Re-plans when the refresh interval has passed or the agent has left
        its route, then returns the direction of the next move (UP/DOWN/
        LEFT/RIGHT), or None to stay put.
        """
        position = as_tile(position)
        off_route = self.is_moving and not self._on_route(position, elevation)
        if off_route or self.refresh_due(self.clock()):
            self.request_route(position, elevation, target, target_elevation)

        step = self.next_step()
        if step is None:
            return None
        delta = (step.tile.x - position.x, step.tile.y - position.y)
        direction = DIRECTION_NAMES.get(delta)
        if direction is None:
            logger.debug(f"Next step {step.tile} is not adjacent to {position}; staying put")
        return direction

    def _on_route(self, position, elevation: Elevation) -> bool:
        current = self.route[self.route_index - 1]
        return current.tile == position and current.elevation == elevation
