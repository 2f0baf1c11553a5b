"""
tilenav - multi-elevation grid pathfinding for tile-world agents
"""

from .composer import PathComposer, find_overall_path, stitch_routes
from .config import DEFAULT_CONFIG, PathfindingConfig, load_config
from .errors import PathfindingConfigError, TerrainConfigurationError, TilenavError
from .features import FeatureLocator
from .movement import MoveValidator
from .navigator import Navigator
from .pathfinding import Pathfinder, SearchStats, find_path
from .terrain import GridTerrain, TerrainQuery
from .types import (
    BRIDGE_LEVEL,
    GROUND_LEVEL,
    PLATEAU_LEVEL,
    Elevation,
    FeatureCrossing,
    Route,
    RouteStep,
    TileCoord,
    TransitionFeature,
)

__version__ = "0.1.0"

__all__ = [
    "BRIDGE_LEVEL",
    "DEFAULT_CONFIG",
    "Elevation",
    "FeatureCrossing",
    "FeatureLocator",
    "GROUND_LEVEL",
    "GridTerrain",
    "MoveValidator",
    "Navigator",
    "PLATEAU_LEVEL",
    "PathComposer",
    "Pathfinder",
    "PathfindingConfig",
    "PathfindingConfigError",
    "Route",
    "RouteStep",
    "SearchStats",
    "TerrainConfigurationError",
    "TerrainQuery",
    "TileCoord",
    "TilenavError",
    "TransitionFeature",
    "find_overall_path",
    "find_path",
    "load_config",
    "stitch_routes",
]
