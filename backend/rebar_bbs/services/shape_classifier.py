"""
Shape classifier — maps a bar group to the canonical shape code that selects
its cutting-length formula.

Classification is a chain of rules, one per shape family; the first rule that
recognises the item wins. Nothing here fails: an item no rule recognises is
classified `custom` and a compliance note says so.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from rebar_bbs.config import SHAPE_CODES
from rebar_bbs.services.units_engine import NormalizedItem

logger = logging.getLogger("rebar-bbs-shapes")

HOOK_FAMILY_MIN_DEG = 90.0


@dataclass(frozen=True)
class ShapeClassification:
    shape_code: str
    rule: str
    note: Optional[str] = None   # set only when the item fell back to custom


class ShapeRule:
    """One shape family's recognition rule."""
    name = "rule"

    def match(self, item: NormalizedItem) -> Optional[str]:
        raise NotImplementedError


class PreferenceRule(ShapeRule):
    name = "preference"

    def match(self, item):
        if item.shape_preference in SHAPE_CODES:
            return item.shape_preference
        return None


class StirrupRule(ShapeRule):
    name = "stirrup"

    def match(self, item):
        return "stirrup" if item.bar_type == "Stirrups/Ties" else None


class ColumnCrankRule(ShapeRule):
    name = "column-crank"

    def match(self, item):
        if item.bar_type == "Main" and item.element_type == "column" and len(item.bend_angles) > 1:
            return "crank"
        return None


class InclinedBendRule(ShapeRule):
    """Any bend shallower than 90° means a cranked (bent-up) bar."""
    name = "inclined-bend"

    def match(self, item):
        if any(angle < HOOK_FAMILY_MIN_DEG for angle in item.bend_angles):
            return "crank"
        return None


class UBendRule(ShapeRule):
    name = "u-bend"

    def match(self, item):
        angles = item.bend_angles
        if len(angles) == 2 and all(a >= HOOK_FAMILY_MIN_DEG for a in angles):
            return "U"
        return None


class LBendRule(ShapeRule):
    name = "l-bend"

    def match(self, item):
        angles = item.bend_angles
        if len(angles) == 1 and angles[0] >= HOOK_FAMILY_MIN_DEG:
            return "L"
        return None


class StraightRule(ShapeRule):
    name = "straight"

    def match(self, item):
        if not item.bend_angles and item.element_type != "custom":
            return "straight"
        return None


DEFAULT_RULES: List[ShapeRule] = [
    PreferenceRule(),
    StirrupRule(),
    ColumnCrankRule(),
    InclinedBendRule(),
    UBendRule(),
    LBendRule(),
    StraightRule(),
]


class ShapeClassifier:
    def __init__(self, rules: Sequence[ShapeRule] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def classify(self, item: NormalizedItem) -> ShapeClassification:
        for rule in self.rules:
            shape = rule.match(item)
            if shape is not None:
                return ShapeClassification(shape_code=shape, rule=rule.name)

        logger.warning(
            f"{item.member_id}: no shape rule matched "
            f"({item.element_type}/{item.bar_type}, bends={list(item.bend_angles)}), using custom"
        )
        return ShapeClassification(
            shape_code="custom",
            rule="fallback",
            note=(
                f"{item.member_id}: shape could not be inferred and was treated as custom "
                f"(clear length plus explicit hook only); verify the bar shape"
            ),
        )


_default_classifier = ShapeClassifier()


def classify(item: NormalizedItem) -> str:
    """Shape code for one item using the default rule chain."""
    return _default_classifier.classify(item).shape_code
