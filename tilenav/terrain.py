"""
Read-only terrain oracle consumed by the search, plus a numpy grid implementation.

The search only ever talks to the ``TerrainQuery`` protocol, so any map
representation (tilemaps, chunked worlds, synthetic test grids) can be
plugged in as long as it answers these six questions.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from .errors import TerrainConfigurationError
from .types import GROUND_LEVEL, TileCoord, TransitionFeature, as_tile

logger = logging.getLogger(__name__)


@runtime_checkable
class TerrainQuery(Protocol):
    """Everything the pathfinder needs to know about a map."""

    def in_bounds(self, x: int, y: int) -> bool: ...

    def elevation_at(self, x: int, y: int) -> int: ...

    def has_wall(self, tile: Tuple[int, int]) -> bool: ...

    def has_ground(self, tile: Tuple[int, int]) -> bool: ...

    def has_bridge(self, tile: Tuple[int, int]) -> bool: ...

    def stair_feature_at(self, tile: Tuple[int, int]) -> Optional[TransitionFeature]: ...


# ASCII legend for authoring maps:
#   '.' ground        '#' wall standing on ground
#   'S' stair         '=' bridge over a gap      'H' bridge over ground
#   ' ' / 'X' void (no surface at all)
# Each symbol maps to (wall, ground, bridge, stair)
SYMBOL_LAYERS: Dict[str, Tuple[bool, bool, bool, bool]] = {
    '.': (False, True, False, False),
    '#': (True, True, False, False),
    'S': (False, False, False, True),
    '=': (False, False, True, False),
    'H': (False, True, True, False),
    ' ': (False, False, False, False),
    'X': (False, False, False, False),
}


class GridTerrain:
    """
    Terrain backed by numpy layers indexed ``[x, y]``.

    Layers:
        elevation: int array, data elevation of each tile
        walls, ground, bridges, stairs: bool arrays

    Every stair is south-facing: climbed from the tile south of it onto the
    tile north of it.
    """

    def __init__(
        self,
        elevation: np.ndarray,
        walls: Optional[np.ndarray] = None,
        ground: Optional[np.ndarray] = None,
        bridges: Optional[np.ndarray] = None,
        stairs: Optional[np.ndarray] = None,
    ):
        elevation = np.asarray(elevation)
        if elevation.ndim != 2 or elevation.size == 0:
            raise TerrainConfigurationError(
                f"Elevation layer must be a non-empty 2D array, got shape {elevation.shape}"
            )
        self.width, self.height = elevation.shape
        self.elevation = elevation.astype(np.int32)
        self.walls = self._layer(walls, "walls", default=False)
        self.ground = self._layer(ground, "ground", default=True)
        self.bridges = self._layer(bridges, "bridges", default=False)
        self.stairs = self._layer(stairs, "stairs", default=False)

    def _layer(self, data: Optional[np.ndarray], name: str, default: bool) -> np.ndarray:
        if data is None:
            return np.full((self.width, self.height), default, dtype=bool)
        layer = np.asarray(data, dtype=bool)
        if layer.shape != (self.width, self.height):
            raise TerrainConfigurationError(
                f"Layer '{name}' has shape {layer.shape}, expected {(self.width, self.height)}"
            )
        return layer.copy()

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def flat(cls, width: int, height: int, elevation: int = GROUND_LEVEL) -> 'GridTerrain':
        """Open ground at a single elevation."""
        if width <= 0 or height <= 0:
            raise TerrainConfigurationError(f"Invalid terrain size {width}x{height}")
        return cls(np.full((width, height), elevation, dtype=np.int32))

    @classmethod
    def from_ascii(
        cls,
        features: Sequence[str],
        elevations: Optional[Sequence[str]] = None,
        default_elevation: int = GROUND_LEVEL,
    ) -> 'GridTerrain':
        """
        Build a terrain from ASCII rows.

        Rows are listed north first, so the first row is the highest ``y``.

        Args:
            features: One string per row using the SYMBOL_LAYERS legend
            elevations: Optional rows of digits with the same shape
            default_elevation: Elevation used when ``elevations`` is omitted

        Returns:
            GridTerrain

        Raises:
            TerrainConfigurationError: ragged rows, unknown symbols, or
                mismatched elevation rows
        """
        rows = [row for row in features]
        if not rows:
            raise TerrainConfigurationError("ASCII map has no rows")
        width = len(rows[0])
        height = len(rows)
        for row_index, row in enumerate(rows):
            if len(row) != width:
                raise TerrainConfigurationError(
                    f"Row {row_index} has {len(row)} columns, expected {width}"
                )

        if elevations is not None:
            elevation_rows = list(elevations)
            if len(elevation_rows) != height or any(len(r) != width for r in elevation_rows):
                raise TerrainConfigurationError(
                    f"Elevation rows must match the {width}x{height} feature grid"
                )
        else:
            elevation_rows = None

        elevation = np.full((width, height), default_elevation, dtype=np.int32)
        walls = np.zeros((width, height), dtype=bool)
        ground = np.zeros((width, height), dtype=bool)
        bridges = np.zeros((width, height), dtype=bool)
        stairs = np.zeros((width, height), dtype=bool)

        for row_index, row in enumerate(rows):
            y = height - 1 - row_index
            for x, symbol in enumerate(row):
                layers = SYMBOL_LAYERS.get(symbol)
                if layers is None:
                    raise TerrainConfigurationError(
                        f"Unknown terrain symbol {symbol!r} at column {x}, row {row_index}"
                    )
                walls[x, y], ground[x, y], bridges[x, y], stairs[x, y] = layers
                if elevation_rows is not None:
                    digit = elevation_rows[row_index][x]
                    if not digit.isdigit():
                        raise TerrainConfigurationError(
                            f"Elevation {digit!r} at column {x}, row {row_index} is not a digit"
                        )
                    elevation[x, y] = int(digit)

        terrain = cls(elevation, walls=walls, ground=ground, bridges=bridges, stairs=stairs)
        logger.debug(
            f"Built {width}x{height} terrain: {int(stairs.sum())} stairs, "
            f"{int(bridges.sum())} bridge tiles, {int(walls.sum())} walls"
        )
        return terrain

    @classmethod
    def from_map_json(cls, data: Mapping) -> 'GridTerrain':
        """
        Build a terrain from a JSON map document.

        Expected keys: ``features`` (list of row strings, north first) and
        optionally ``elevations`` (list of digit strings).
        """
        features = data.get('features') or data.get('grid')
        if not features:
            raise TerrainConfigurationError("Map JSON is missing a 'features' grid")
        rows = [row if isinstance(row, str) else ''.join(row) for row in features]
        elevations = data.get('elevations')
        if elevations is not None:
            elevations = [row if isinstance(row, str) else ''.join(str(c) for c in row)
                          for row in elevations]
        return cls.from_ascii(rows, elevations, data.get('default_elevation', GROUND_LEVEL))

    # ------------------------------------------------------------------
    # Authoring helpers (fixtures only; searches never mutate terrain)
    # ------------------------------------------------------------------

    def set_elevation(self, tiles: Iterable[Tuple[int, int]], elevation: int) -> None:
        for x, y in tiles:
            self.elevation[x, y] = elevation

    def set_wall(self, tiles: Iterable[Tuple[int, int]], present: bool = True) -> None:
        for x, y in tiles:
            self.walls[x, y] = present

    def set_ground(self, tiles: Iterable[Tuple[int, int]], present: bool = True) -> None:
        for x, y in tiles:
            self.ground[x, y] = present

    def set_bridge(self, tiles: Iterable[Tuple[int, int]], present: bool = True) -> None:
        for x, y in tiles:
            self.bridges[x, y] = present

    def set_stair(self, tiles: Iterable[Tuple[int, int]], present: bool = True) -> None:
        for x, y in tiles:
            self.stairs[x, y] = present

    # ------------------------------------------------------------------
    # TerrainQuery
    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def elevation_at(self, x: int, y: int) -> int:
        # numpy would silently wrap negative indices
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile ({x}, {y}) is outside the {self.width}x{self.height} map")
        return int(self.elevation[x, y])

    def has_wall(self, tile: Tuple[int, int]) -> bool:
        x, y = tile
        return self.in_bounds(x, y) and bool(self.walls[x, y])

    def has_ground(self, tile: Tuple[int, int]) -> bool:
        x, y = tile
        return self.in_bounds(x, y) and bool(self.ground[x, y])

    def has_bridge(self, tile: Tuple[int, int]) -> bool:
        x, y = tile
        return self.in_bounds(x, y) and bool(self.bridges[x, y])

    def stair_feature_at(self, tile: Tuple[int, int]) -> Optional[TransitionFeature]:
        x, y = tile
        if not self.in_bounds(x, y) or not self.stairs[x, y]:
            return None
        return TransitionFeature.south_facing(as_tile(tile))

    def stair_tiles(self) -> List[TileCoord]:
        """All stair tiles in row-major order (y, then x)."""
        xs, ys = np.nonzero(self.stairs)
        return sorted((TileCoord(int(x), int(y)) for x, y in zip(xs, ys)),
                      key=lambda t: (t.y, t.x))

    def __repr__(self) -> str:
        return f"GridTerrain({self.width}x{self.height})"
