#!/usr/bin/env python3
"""
Display a tile map from JSON and plan a route across it

Usage:
    python display_map.py maps/cliffs.json --start 0 0 --goal 3 7 --goal-elevation 1
    python display_map.py maps/cliffs.json --start 0 0 --goal 3 7 --output route.txt
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from tilenav.composer import PathComposer
from tilenav.config import PathfindingConfig, load_config
from tilenav.errors import TilenavError
from tilenav.map_formatter import format_elevation_map, format_route_map, format_route_steps
from tilenav.terrain import GridTerrain


def load_terrain(map_file: Path) -> Optional[GridTerrain]:
    """
    Load a terrain from a JSON map file.

    Returns:
        GridTerrain, or None if the file could not be read
    """
    try:
        with open(map_file, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: Could not read map {map_file}: {e}")
        return None
    try:
        return GridTerrain.from_map_json(data)
    except TilenavError as e:
        print(f"Error: Invalid map {map_file}: {e}")
        return None


def display_route(terrain: GridTerrain, config: PathfindingConfig, args, output_file: Optional[Path] = None):
    """Plan a route on the terrain and print the map with the route overlaid."""
    start = tuple(args.start)
    goal = tuple(args.goal)
    composer = PathComposer(terrain, config)
    route = composer.find_overall_path(start, args.start_elevation, goal, args.goal_elevation)

    title = f"{args.map_file.stem} {start}@{args.start_elevation} -> {goal}@{args.goal_elevation}"
    output_lines = [format_route_map(terrain, route, start=start, goal=goal, title=title), ""]
    output_lines.append("=" * 80)
    output_lines.append("Elevations:")
    output_lines.append(format_elevation_map(terrain))
    stairs = ", ".join(f"({t.x}, {t.y})" for t in terrain.stair_tiles())
    output_lines.append(f"Stairs: {stairs or 'none'}")
    output_lines.append("=" * 80)
    if route is None:
        output_lines.append("No path found")
    else:
        output_lines.append(f"Route: {len(route)} tiles, {len(route) - 1} moves")
        output_lines.append(f"  Steps: {format_route_steps(route)}")
        output_lines.append(f"  Moves: {' '.join(route.to_directions())}")

    output_text = "\n".join(output_lines)

    if output_file:
        with open(output_file, 'w') as f:
            f.write(output_text)
        print(f"Route saved to {output_file}")
    else:
        print(output_text)
    return route


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Display a tile map and the route between two (tile, elevation) states",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python display_map.py maps/cliffs.json --start 0 0 --goal 3 7 --goal-elevation 1
  python display_map.py maps/cliffs.json --start 0 0 --goal 4 4 --config tilenav.json
        """
    )
    parser.add_argument("map_file", type=Path, help="JSON map with 'features' and optional 'elevations' rows")
    parser.add_argument("--start", type=int, nargs=2, metavar=("X", "Y"), required=True)
    parser.add_argument("--start-elevation", type=int, default=0)
    parser.add_argument("--goal", type=int, nargs=2, metavar=("X", "Y"), required=True)
    parser.add_argument("--goal-elevation", type=int, default=0)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON pathfinding config (default: TILENAV_* environment variables)"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path (default: print to stdout)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    if not args.map_file.exists():
        print(f"Error: Map file not found: {args.map_file}")
        sys.exit(1)

    try:
        config = load_config(args.config) if args.config else PathfindingConfig.from_env()
    except TilenavError as e:
        print(f"Error: {e}")
        sys.exit(1)

    terrain = load_terrain(args.map_file)
    if terrain is None:
        sys.exit(1)

    output_file = Path(args.output) if args.output else None
    route = display_route(terrain, config, args, output_file)
    sys.exit(0 if route is not None else 2)


if __name__ == "__main__":
    main()
