"""
Bounded A* over (tile, elevation) states.

Provides the single-elevation-pair search used by the composer. Elevation
is part of every search state, so the same tile can be visited once on the
ground and once on the plateau.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .config import DEFAULT_CONFIG, PathfindingConfig
from .movement import MoveValidator
from .terrain import TerrainQuery
from .types import Elevation, Route, RouteStep, TileCoord, as_tile

logger = logging.getLogger(__name__)

StateKey = Tuple[TileCoord, Elevation]

# North, south, east, west; order fixes tie-breaking between equal nodes
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))


@dataclass(eq=False)
class Node:
    """A search state: a tile at a given elevation."""
    tile: TileCoord
    elevation: Elevation
    g_cost: int = 0  # Cost from start
    h_cost: int = 0  # Heuristic cost to goal
    parent: Optional['Node'] = field(default=None, repr=False)

    @property
    def f_cost(self) -> int:
        return self.g_cost + self.h_cost

    @property
    def key(self) -> StateKey:
        return (self.tile, self.elevation)

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)


@dataclass
class SearchStats:
    """
    Counters filled in by one ``find_path`` call.

    Pass an instance in to inspect how much work a search did. Every call
    resets the counters, so one instance can be reused across searches.
    """
    expansions: int = 0
    nodes_created: int = 0
    iteration_cap: int = 0
    cap_hit: bool = False


class Pathfinder:
    """
    A* pathfinding over a TerrainQuery with elevation-aware moves.

    Search space is bounded by a Manhattan radius around a focus tile and
    by a hard expansion cap of ``iteration_cap_factor * max_distance ** 2``.
    """

    def __init__(self, terrain: TerrainQuery, config: Optional[PathfindingConfig] = None,
                 validator: Optional[MoveValidator] = None):
        """
        Initialize the pathfinder.

        Args:
            terrain: Read-only map oracle
            config: Search bounds and step cost (defaults to DEFAULT_CONFIG)
            validator: Move rules; built from ``terrain`` when omitted
        """
        self.terrain = terrain
        self.config = config or DEFAULT_CONFIG
        self.validator = validator or MoveValidator(terrain)

    def find_path(
        self,
        start: Tuple[int, int],
        start_elevation: Elevation,
        goal: Tuple[int, int],
        goal_elevation: Elevation,
        focus: Optional[Tuple[int, int]] = None,
        max_distance: Optional[int] = None,
        stats: Optional[SearchStats] = None,
    ) -> Optional[Route]:
        """
        Find a route from (start, start_elevation) to (goal, goal_elevation).

        Args:
            start: Starting tile; must be in bounds and wall-free
            start_elevation: Elevation the agent is at on ``start``
            goal: Goal tile; must be in bounds but need not be walkable
            goal_elevation: Elevation the agent must have on ``goal``
            focus: Centre of the search bound (defaults to ``start``)
            max_distance: Manhattan bound around ``focus`` (defaults to
                ``config.direct_max_distance``)
            stats: Optional SearchStats to fill in

        Returns:
            Route from start to goal inclusive, or None if no path was found
        """
        start = as_tile(start)
        goal = as_tile(goal)
        focus = start if focus is None else as_tile(focus)
        if max_distance is None:
            max_distance = self.config.direct_max_distance
        if stats is None:
            stats = SearchStats()
        # Counters describe this call only
        stats.expansions = 0
        stats.nodes_created = 0
        stats.cap_hit = False
        stats.iteration_cap = self.config.iteration_cap(max_distance)

        terrain = self.terrain
        if not terrain.in_bounds(start.x, start.y) or terrain.has_wall(start):
            logger.debug(f"Pathfinding: start {start} is out of bounds or blocked")
            return None
        if not terrain.in_bounds(goal.x, goal.y):
            logger.debug(f"Pathfinding: goal {goal} is out of bounds")
            return None

        logger.debug(
            f"Pathfinding: {start}@{start_elevation} -> {goal}@{goal_elevation} "
            f"(focus {focus}, max_distance {max_distance})"
        )
        return self._astar(start, start_elevation, goal, goal_elevation, focus, max_distance, stats)

    def _astar(
        self,
        start: TileCoord,
        start_elevation: Elevation,
        goal: TileCoord,
        goal_elevation: Elevation,
        focus: TileCoord,
        max_distance: int,
        stats: SearchStats,
    ) -> Optional[Route]:
        """
        A* pathfinding algorithm implementation.

        The heap holds ``(f_cost, h_cost, sequence, node)`` so equal-cost
        nodes pop in insertion order. Improving an open node updates it in
        place and re-pushes it; the outdated heap entry is skipped when popped.
        """
        step_cost = self.config.step_cost
        start_node = Node(start, start_elevation, 0, self._heuristic(start, goal))
        sequence = itertools.count(1)

        open_list: List[Tuple[int, int, int, Node]] = [(start_node.f_cost, start_node.h_cost, 0, start_node)]
        node_map: Dict[StateKey, Node] = {start_node.key: start_node}
        closed_set: Set[StateKey] = set()
        stats.nodes_created += 1

        while open_list:
            f_cost, _, _, current = heapq.heappop(open_list)
            if current.key in closed_set or f_cost != current.f_cost:
                continue

            # Tile and elevation must both match
            if current.tile == goal and current.elevation == goal_elevation:
                route = self._reconstruct_path(current)
                logger.debug(f"Path found: {len(route)} tiles after {stats.expansions} expansions")
                return route

            if stats.expansions >= stats.iteration_cap:
                stats.cap_hit = True
                logger.warning(
                    f"Pathfinding aborted: {stats.iteration_cap} expansions without reaching "
                    f"{goal}@{goal_elevation}"
                )
                return None

            stats.expansions += 1
            closed_set.add(current.key)

            for neighbor_tile in self._get_neighbors(current.tile, focus, max_distance):
                allowed, neighbor_elevation = self.validator.can_step(
                    current.tile, current.elevation, neighbor_tile
                )
                if not allowed:
                    continue

                key = (neighbor_tile, neighbor_elevation)
                if key in closed_set:
                    continue

                g_cost = current.g_cost + step_cost
                neighbor = node_map.get(key)
                if neighbor is None:
                    neighbor = Node(neighbor_tile, neighbor_elevation, g_cost,
                                    self._heuristic(neighbor_tile, goal), parent=current)
                    node_map[key] = neighbor
                    stats.nodes_created += 1
                elif g_cost < neighbor.g_cost:
                    neighbor.g_cost = g_cost
                    neighbor.parent = current
                else:
                    continue

                heapq.heappush(open_list, (neighbor.f_cost, neighbor.h_cost, next(sequence), neighbor))

        logger.debug(f"No path to {goal}@{goal_elevation}: open set exhausted after {stats.expansions} expansions")
        return None

    def _get_neighbors(self, tile: TileCoord, focus: TileCoord, max_distance: int) -> List[TileCoord]:
        """Neighbour tiles that stay within ``max_distance`` of the focus tile."""
        neighbors = []
        for dx, dy in NEIGHBOR_OFFSETS:
            neighbor = tile.offset(dx, dy)
            if neighbor.manhattan(focus) <= max_distance:
                neighbors.append(neighbor)
        return neighbors

    def _heuristic(self, tile: TileCoord, goal: TileCoord) -> int:
        """
        Manhattan distance in step-cost units; ignores elevation.

        Scaled by ``step_cost`` so h and g share units; with unit costs this
        is plain Manhattan distance.
        """
        return tile.manhattan(goal) * self.config.step_cost

    def _reconstruct_path(self, node: Node) -> Route:
        """Reconstruct the route from start to ``node``."""
        steps = []
        current = node
        while current:
            steps.append(RouteStep(current.tile, current.elevation))
            current = current.parent
        steps.reverse()
        return Route(steps)


# Convenience function
def find_path(
    terrain: TerrainQuery,
    start: Tuple[int, int],
    start_elevation: Elevation,
    goal: Tuple[int, int],
    goal_elevation: Elevation,
    max_distance: Optional[int] = None,
    config: Optional[PathfindingConfig] = None,
) -> Optional[Route]:
    """
    Find a route between two (tile, elevation) states, bounded around the start.

    Args:
        terrain: Read-only map oracle
        start: Starting tile
        start_elevation: Elevation at the start
        goal: Goal tile
        goal_elevation: Elevation required at the goal
        max_distance: Manhattan search bound (default from config)
        config: Optional PathfindingConfig

    Returns:
        Route, or None if no path found
    """
    pathfinder = Pathfinder(terrain, config)
    return pathfinder.find_path(start, start_elevation, goal, goal_elevation, max_distance=max_distance)
