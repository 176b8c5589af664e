"""
Eager per-item validation. Runs after normalize(), so every number seen here
is already finite, non-negative and metric; what remains is zero values,
catalog membership and cross-field consistency.
"""
from __future__ import annotations

from rebar_bbs.config import BAR_DIAMETERS_MM, MAX_BEND_ANGLE_DEG
from rebar_bbs.errors import ValidationError
from rebar_bbs.models.bbs_schema import BBSOptions
from rebar_bbs.services.units_engine import NormalizedItem


def validate_item(item: NormalizedItem, index: int) -> None:
    """Raise ValidationError on the first problem found in one bar group."""

    def fail(message: str, field: str) -> None:
        raise ValidationError(message, index, item.member_id, field)

    if item.bar_diameter_mm <= 0:
        fail("bar diameter must be positive", "bar_diameter_mm")
    if item.bar_diameter_mm not in BAR_DIAMETERS_MM:
        fail(
            f"{item.bar_diameter_mm:g} mm is not a catalog diameter {list(BAR_DIAMETERS_MM)}",
            "bar_diameter_mm",
        )
    if item.num_bars < 1:
        fail("at least one bar is required", "num_bars")
    if item.clear_length_m <= 0:
        fail("clear length must be positive", "clear_length_m")

    for angle in item.bend_angles:
        if not 0 < angle <= MAX_BEND_ANGLE_DEG:
            fail(f"bend angle {angle:g}° outside (0, {MAX_BEND_ANGLE_DEG:g}]", "bend_angles")

    if item.hook_type == "custom" and item.hook_length_mm is None:
        fail("custom hook requires hook_length_mm", "hook_length_mm")

    for name in ("spacing_mm", "stock_length_m", "lap_length_m"):
        value = getattr(item, name)
        if value is not None and value <= 0:
            fail(f"{name} must be positive when given", name)

    if item.wastage_percent is not None and item.wastage_percent >= 100:
        fail("wastage must be below 100 %", "wastage_percent")

    has_b = item.member_breadth_mm is not None
    has_d = item.member_depth_mm is not None
    if has_b != has_d:
        fail("member breadth and depth must be given together", "member_depth_mm" if has_b else "member_breadth_mm")
    if has_b and (item.member_breadth_mm <= 0 or item.member_depth_mm <= 0):
        fail("member breadth and depth must be positive", "member_breadth_mm")


def validate_options(options: BBSOptions) -> None:
    if options.stock_length_m <= 0:
        raise ValidationError("stock length must be positive", field="stock_length_m")
    if options.wastage_percent_default is not None and options.wastage_percent_default >= 100:
        raise ValidationError("wastage must be below 100 %", field="wastage_percent_default")
