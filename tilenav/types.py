"""
Value types shared by the terrain, search and composition layers.
"""

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Sequence, Tuple, Union, overload

# Elevation is an open integer; these are the two levels the base maps use.
Elevation = int
GROUND_LEVEL: Elevation = 0
PLATEAU_LEVEL: Elevation = 1
# Bridge decks are always authored on the plateau level
BRIDGE_LEVEL: Elevation = PLATEAU_LEVEL


class TileCoord(NamedTuple):
    """Integer grid coordinate. North is +y, east is +x."""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> 'TileCoord':
        return TileCoord(self.x + dx, self.y + dy)

    def manhattan(self, other: Tuple[int, int]) -> int:
        return abs(self.x - other[0]) + abs(self.y - other[1])

    def distance_sq(self, other: Tuple[int, int]) -> int:
        dx = self.x - other[0]
        dy = self.y - other[1]
        return dx * dx + dy * dy


def as_tile(value: Union[TileCoord, Tuple[int, int]]) -> TileCoord:
    """Coerce an ``(x, y)`` pair into a TileCoord."""
    if isinstance(value, TileCoord):
        return value
    x, y = value
    return TileCoord(int(x), int(y))


@dataclass(frozen=True)
class TransitionFeature:
    """
    A stair instance.

    The stair tile's data elevation is the lower of the two levels it joins.
    ``low_access_tile`` is the neighbour directly south of the stair and
    ``high_access_tile`` the neighbour directly north of it.
    """
    feature_tile: TileCoord
    low_access_tile: TileCoord
    high_access_tile: TileCoord

    @classmethod
    def south_facing(cls, tile: Tuple[int, int]) -> 'TransitionFeature':
        """Build the only stair orientation the maps use (climb northwards)."""
        tile = as_tile(tile)
        return cls(
            feature_tile=tile,
            low_access_tile=tile.offset(0, -1),
            high_access_tile=tile.offset(0, 1),
        )


@dataclass(frozen=True)
class FeatureCrossing:
    """A TransitionFeature bound to the direction an agent will use it in."""
    feature: TransitionFeature
    access_tile: TileCoord
    access_elevation: Elevation
    exit_tile: TileCoord
    exit_elevation: Elevation

    @property
    def ascending(self) -> bool:
        return self.exit_elevation > self.access_elevation

    @property
    def feature_tile(self) -> TileCoord:
        return self.feature.feature_tile


class RouteStep(NamedTuple):
    """A tile and the elevation the agent has after stepping onto it."""
    tile: TileCoord
    elevation: Elevation


# Direction names follow the controller's button vocabulary
DIRECTION_NAMES = {
    (0, 1): "UP",
    (0, -1): "DOWN",
    (1, 0): "RIGHT",
    (-1, 0): "LEFT",
}


class Route:
    """
    Ordered, immutable sequence of RouteSteps from start to goal inclusive.

    Each consecutive pair is a single legal move. The elevation recorded on
    each step is the one the search planned, so followers never need to
    infer it from tile data.
    """

    __slots__ = ("_steps",)

    def __init__(self, steps: Sequence[RouteStep]):
        if not steps:
            raise ValueError("A route needs at least one step")
        self._steps: Tuple[RouteStep, ...] = tuple(
            RouteStep(as_tile(step[0]), int(step[1])) for step in steps
        )

    @property
    def steps(self) -> Tuple[RouteStep, ...]:
        return self._steps

    @property
    def tiles(self) -> List[TileCoord]:
        return [step.tile for step in self._steps]

    @property
    def elevations(self) -> List[Elevation]:
        return [step.elevation for step in self._steps]

    @property
    def start(self) -> TileCoord:
        return self._steps[0].tile

    @property
    def goal(self) -> TileCoord:
        return self._steps[-1].tile

    @property
    def final_elevation(self) -> Elevation:
        return self._steps[-1].elevation

    def to_directions(self) -> List[str]:
        """Convert the route into one UP/DOWN/LEFT/RIGHT command per step."""
        directions = []
        for prev, curr in zip(self._steps, self._steps[1:]):
            delta = (curr.tile.x - prev.tile.x, curr.tile.y - prev.tile.y)
            directions.append(DIRECTION_NAMES[delta])
        return directions

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[RouteStep]:
        return iter(self._steps)

    @overload
    def __getitem__(self, index: int) -> RouteStep: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[RouteStep, ...]: ...

    def __getitem__(self, index):
        return self._steps[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self._steps == other._steps

    def __hash__(self) -> int:
        return hash(self._steps)

    def __repr__(self) -> str:
        return f"Route({len(self._steps)} steps: {self.start} -> {self.goal} @ {self.final_elevation})"
