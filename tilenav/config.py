"""
Pathfinding settings.

Defaults suit maps of a few hundred tiles per side. Values can be
overridden from ``TILENAV_*`` environment variables or a JSON file.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .errors import PathfindingConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TILENAV_"


class PathfindingConfig(BaseModel):
    """Tunable bounds for the search and composition layers."""

    model_config = {"frozen": True, "extra": "forbid"}

    step_cost: int = Field(default=10, ge=1, description="Cost of one N/S/E/W move")
    direct_max_distance: int = Field(
        default=40, ge=0,
        description="Manhattan bound around the goal for single-elevation searches"
    )
    feature_search_radius: int = Field(
        default=20, ge=0,
        description="Half-width of the square scanned for stairs around the start"
    )
    segment_margin: int = Field(
        default=5, ge=0,
        description="Extra slack added to the scan window for the approach segment"
    )
    iteration_cap_factor: int = Field(
        default=4, ge=1,
        description="Expansion cap is factor * max_distance ** 2"
    )
    refresh_interval: float = Field(
        default=0.1, gt=0,
        description="Seconds between route refreshes for a Navigator"
    )

    @property
    def approach_max_distance(self) -> int:
        """Manhattan bound for the walk to a stair; covers every corner of the square scan window."""
        return 2 * self.feature_search_radius + self.segment_margin

    def iteration_cap(self, max_distance: int) -> int:
        return self.iteration_cap_factor * max_distance * max_distance

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> 'PathfindingConfig':
        try:
            return cls(**dict(values))
        except ValidationError as e:
            raise PathfindingConfigError(f"Invalid pathfinding config: {e}") from e

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'PathfindingConfig':
        """
        Build a config from ``TILENAV_<FIELD>`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (for tests)

        Returns:
            PathfindingConfig with any overrides applied
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        if values:
            logger.debug(f"Pathfinding config overrides from environment: {values}")
        return cls.from_mapping(values)


def load_config(path: Union[str, Path]) -> PathfindingConfig:
    """Load a PathfindingConfig from a JSON file."""
    path = Path(path)
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PathfindingConfigError(f"Could not read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise PathfindingConfigError(f"Config {path} must contain a JSON object")
    return PathfindingConfig.from_mapping(data)


DEFAULT_CONFIG = PathfindingConfig()
