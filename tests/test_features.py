#!/usr/bin/env python3
"""
Tests for FeatureLocator
========================

- Direction-specific access and exit tiles
- Nearest-stair selection and scan-order tie-breaking
- Search radius, malformed stairs and incompatible elevations
"""

import pytest

from tilenav.features import FeatureLocator
from tilenav.terrain import GridTerrain
from tilenav.types import TransitionFeature


class TestDirection:

    def test_ascending_uses_low_side_as_access(self, cliff_terrain):
        crossing = FeatureLocator(cliff_terrain).find_nearest_transition((0, 0), 0, 1, 20)

        assert crossing is not None
        assert crossing.feature_tile == (3, 5)
        assert crossing.access_tile == (3, 4)
        assert crossing.access_elevation == 0
        assert crossing.exit_tile == (3, 6)
        assert crossing.exit_elevation == 1
        assert crossing.ascending

    def test_descending_uses_high_side_as_access(self, cliff_terrain):
        crossing = FeatureLocator(cliff_terrain).find_nearest_transition((5, 8), 1, 0, 20)

        assert crossing.access_tile == (3, 6)
        assert crossing.exit_tile == (3, 4)
        assert crossing.exit_elevation == 0
        assert not crossing.ascending

    def test_levels_two_apart_have_no_single_stair(self, cliff_terrain):
        assert FeatureLocator(cliff_terrain).find_nearest_transition((0, 0), 0, 2, 20) is None

    def test_same_level_has_no_stair(self, cliff_terrain):
        assert FeatureLocator(cliff_terrain).find_nearest_transition((0, 0), 0, 0, 20) is None

    def test_stair_joining_other_levels_ignored(self):
        terrain = GridTerrain.from_ascii(
            [".", "S", "."],
            ["2", "1", "1"],
        )
        locator = FeatureLocator(terrain)
        assert locator.find_nearest_transition((0, 0), 0, 1, 5) is None
        assert locator.find_nearest_transition((0, 0), 1, 2, 5) is not None


class TestSelection:

    def test_picks_nearest(self, two_stair_terrain):
        crossing = FeatureLocator(two_stair_terrain).find_nearest_transition((6, 0), 0, 1, 20)
        assert crossing.feature_tile == (7, 5)

    def test_tie_goes_to_first_in_scan_order(self):
        terrain = GridTerrain.from_ascii(
            [
                ".........",
                "##S###S##",
                ".........",
                ".........",
            ],
            ["111111111", "000000000", "000000000", "000000000"],
        )
        # Both stairs are (2, 2) away from (4, 0)
        crossing = FeatureLocator(terrain).find_nearest_transition((4, 0), 0, 1, 10)
        assert crossing.feature_tile == (2, 2)

    def test_radius_limits_scan(self, cliff_terrain):
        locator = FeatureLocator(cliff_terrain)
        assert locator.find_nearest_transition((0, 0), 0, 1, 4) is None
        assert locator.find_nearest_transition((0, 0), 0, 1, 5) is not None

    def test_window_clipped_to_map(self, cliff_terrain):
        crossing = FeatureLocator(cliff_terrain).find_nearest_transition((7, 9), 1, 0, 100)
        assert crossing.feature_tile == (3, 5)


class TestWellFormed:

    @pytest.mark.parametrize("broken", [(3, 4), (3, 6)])
    def test_walled_access_tile_excludes_stair(self, cliff_terrain, broken):
        cliff_terrain.set_wall([broken])
        locator = FeatureLocator(cliff_terrain)
        assert not locator.is_well_formed(TransitionFeature.south_facing((3, 5)))
        assert locator.find_nearest_transition((0, 0), 0, 1, 20) is None
        assert locator.find_nearest_transition((5, 8), 1, 0, 20) is None

    def test_void_access_tile_excludes_stair(self, cliff_terrain):
        cliff_terrain.set_ground([(3, 4)], False)
        assert FeatureLocator(cliff_terrain).find_nearest_transition((0, 0), 0, 1, 20) is None

    def test_access_on_wrong_level_excludes_stair(self, cliff_terrain):
        cliff_terrain.set_elevation([(3, 6)], 0)
        assert FeatureLocator(cliff_terrain).find_nearest_transition((0, 0), 0, 1, 20) is None

    def test_stair_on_map_edge_is_malformed(self):
        terrain = GridTerrain.from_ascii(["S", "."], ["0", "0"])
        locator = FeatureLocator(terrain)
        assert not locator.is_well_formed(TransitionFeature.south_facing((0, 1)))
        assert locator.find_nearest_transition((0, 0), 0, 1, 3) is None

    def test_misaligned_access_tiles(self, cliff_terrain):
        feature = TransitionFeature((3, 5), (2, 4), (3, 6))
        assert not FeatureLocator(cliff_terrain).is_well_formed(feature)

    def test_malformed_stair_skipped_for_farther_good_one(self, two_stair_terrain):
        two_stair_terrain.set_wall([(7, 6)])
        crossing = FeatureLocator(two_stair_terrain).find_nearest_transition((6, 0), 0, 1, 20)
        assert crossing.feature_tile == (2, 5)
