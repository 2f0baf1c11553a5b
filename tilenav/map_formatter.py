"""
ASCII rendering of terrain and routes for debug output.

Uses the same legend as ``GridTerrain.from_ascii`` so a rendered map can be
pasted back in as a fixture. Rows are printed north first.
"""

from typing import Optional, Tuple

from .terrain import GridTerrain
from .types import Route

# Overlay symbols
START_SYMBOL = "P"
GOAL_SYMBOL = "G"
ROUTE_SYMBOL = "*"


def format_tile_to_symbol(terrain: GridTerrain, x: int, y: int) -> str:
    """
    Convert a single tile to its display symbol.

    Returns:
        str: Single character from the terrain legend
    """
    tile = (x, y)
    if terrain.has_wall(tile):
        return "#"
    if terrain.stair_feature_at(tile) is not None:
        return "S"
    if terrain.has_bridge(tile):
        return "H" if terrain.has_ground(tile) else "="
    if terrain.has_ground(tile):
        return "."
    return " "


def format_elevation_map(terrain: GridTerrain) -> str:
    """One digit per tile, north first."""
    lines = []
    for y in range(terrain.height - 1, -1, -1):
        lines.append("".join(str(terrain.elevation_at(x, y)) for x in range(terrain.width)))
    return "\n".join(lines)


def format_route_map(
    terrain: GridTerrain,
    route: Optional[Route] = None,
    start: Optional[Tuple[int, int]] = None,
    goal: Optional[Tuple[int, int]] = None,
    title: Optional[str] = None,
) -> str:
    """
    Render the terrain with an optional route overlay.

    Args:
        terrain: Terrain to draw
        route: Route whose tiles are marked with ``*``
        start: Start tile marked ``P`` (defaults to the route start)
        goal: Goal tile marked ``G`` (defaults to the route goal)
        title: Optional heading line

    Returns:
        str: Multi-line ASCII map
    """
    overlay = {}
    if route is not None:
        for tile in route.tiles:
            overlay[tuple(tile)] = ROUTE_SYMBOL
        start = start if start is not None else route.start
        goal = goal if goal is not None else route.goal
    if goal is not None:
        overlay[tuple(goal)] = GOAL_SYMBOL
    if start is not None:
        overlay[tuple(start)] = START_SYMBOL

    lines = []
    if title:
        lines.append(f"{title} ({terrain.width}x{terrain.height}):")
    for y in range(terrain.height - 1, -1, -1):
        row = "".join(overlay.get((x, y), format_tile_to_symbol(terrain, x, y))
                      for x in range(terrain.width))
        lines.append(row)
    return "\n".join(lines)


def format_route_steps(route: Route) -> str:
    """List each step as ``(x, y)@elevation``."""
    return " -> ".join(f"({step.tile.x}, {step.tile.y})@{step.elevation}" for step in route)
