"""
test_shape_classifier.py — Unit tests for the shape rule chain.

Tests cover:
  - explicit shape_preference wins over inference
  - stirrup, crank, U, L and straight inference
  - custom fallback with a compliance note
  - pluggable rule lists
"""

import pytest

from rebar_bbs.models.bbs_schema import BarGroupInput, BBSOptions
from rebar_bbs.services.shape_classifier import (
    ShapeClassifier,
    StraightRule,
    classify,
)
from rebar_bbs.services.units_engine import normalize

_OPTS = BBSOptions()


def _n(**overrides):
    base = dict(
        element_type="beam", member_id="B1", bar_type="Main",
        bar_diameter_mm=12, num_bars=2, clear_length_m=3.0,
    )
    base.update(overrides)
    return normalize(BarGroupInput(**base), _OPTS)


class TestInference:

    def test_preference_wins(self):
        assert classify(_n(bar_type="Stirrups/Ties", shape_preference="U")) == "U"

    def test_stirrups(self):
        assert classify(_n(element_type="column", bar_type="Stirrups/Ties")) == "stirrup"

    def test_column_main_two_bends_is_crank(self):
        assert classify(_n(element_type="column", bend_angles=[90, 90])) == "crank"

    def test_inclined_bend_is_crank(self):
        assert classify(_n(element_type="slab", bend_angles=[45, 45])) == "crank"

    def test_two_hook_family_bends_is_u(self):
        assert classify(_n(bend_angles=[90, 90])) == "U"

    def test_single_bend_is_l(self):
        assert classify(_n(element_type="footing", bend_angles=[90])) == "L"

    @pytest.mark.parametrize("element", ["beam", "slab", "column", "footing", "wall", "stair"])
    def test_no_bends_is_straight(self, element):
        assert classify(_n(element_type=element)) == "straight"

    def test_distribution_bar_is_straight(self):
        assert classify(_n(element_type="slab", bar_type="Distribution")) == "straight"


class TestFallback:

    def test_custom_element_without_bends_falls_back(self):
        result = ShapeClassifier().classify(_n(element_type="custom"))
        assert result.shape_code == "custom"
        assert result.rule == "fallback"
        assert result.note and "custom" in result.note

    def test_three_hook_bends_fall_back(self):
        result = ShapeClassifier().classify(_n(bend_angles=[90, 90, 90]))
        assert result.shape_code == "custom"

    def test_inferred_shapes_carry_no_note(self):
        assert ShapeClassifier().classify(_n()).note is None


class TestPluggableRules:

    def test_custom_rule_list(self):
        """A classifier with only the straight rule falls back for bent bars."""
        clf = ShapeClassifier(rules=[StraightRule()])
        assert clf.classify(_n()).shape_code == "straight"
        assert clf.classify(_n(bend_angles=[90])).shape_code == "custom"
