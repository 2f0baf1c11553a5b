"""
Exception types raised while building terrain and configuration objects.

Search-time failures are never raised; they come back as ``None``.
"""


class TilenavError(Exception):
    """Base class for all tilenav errors"""


class TerrainConfigurationError(TilenavError):
    """Terrain layers are missing, ragged, or use unknown symbols."""


class PathfindingConfigError(TilenavError):
    """Pathfinding settings failed validation."""
