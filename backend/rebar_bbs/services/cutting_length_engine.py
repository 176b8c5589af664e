"""
Cutting-length engine — fabricated length of one representative bar.

One formula class per shape family, looked up by shape code:

    straight   L + 2h
    L          L + h_end             (h_end = hook, else the 90° leg allowance)
    U          L + 2h − Σ bend deductions
    stirrup    2(b' + D') + 2h − 3 × 90° deductions   (b', D' from member size − 2 × cover)
               L + 2h                                  (no member size: L is the developed leg)
    crank      L + Σ Δ(angle)·d + 2h
    spiral     L + 2h                                  (L is the developed helix length)
    custom     L + explicit hook length only

L = clear length, h = hook allowance per end, d = bar diameter (m).
All lengths in metres. Development length is reported in remarks and never
added to the cutting length.
"""
from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, List, Tuple

from rebar_bbs.config import (
    BEND_DEDUCTIONS,
    CODE_DEFAULTS,
    CRANK_45_EXTRA,
    STIRRUP_CORNER_BENDS,
)
from rebar_bbs.errors import InvalidGeometryError
from rebar_bbs.services.units_engine import ResolvedItem

logger = logging.getLogger("rebar-bbs-cutting")


@dataclass(frozen=True)
class CuttingLengthResult:
    cutting_length_m: float
    hook_details: str
    remarks: Tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Geometry helpers
# ---------------------------------------------------------------------------

def _interpolate(points: Dict[float, float], angle: float) -> float:
    """Piecewise-linear lookup through sorted (angle, value) points."""
    xs = sorted(points)
    if angle <= xs[0]:
        return points[xs[0]]
    if angle >= xs[-1]:
        return points[xs[-1]]
    i = bisect_right(xs, angle)
    x0, x1 = xs[i - 1], xs[i]
    y0, y1 = points[x0], points[x1]
    return y0 + (y1 - y0) * (angle - x0) / (x1 - x0)


def bend_deduction(angle: float) -> float:
    """Bend deduction in bar diameters (1d per 45°, interpolated)."""
    return _interpolate(BEND_DEDUCTIONS, angle)


def crank_extra(angle: float, code: str) -> float:
    """
    Extra length per bend in bar diameters.

    0.42d at 45°, the code's hook allowance at 90°/135°/180°, linear between.
    """
    hooks = CODE_DEFAULTS[code]["hook"]
    points = {
        0.0: 0.0,
        45.0: CRANK_45_EXTRA,
        90.0: hooks["90"],
        135.0: hooks["135"],
        180.0: hooks["180"],
    }
    return _interpolate(points, angle)


def _hook_label(r: ResolvedItem) -> str:
    hook_type = r.item.hook_type
    if hook_type and hook_type != "custom":
        return f"{hook_type}°"
    return "custom"


def _describe_hooks(r: ResolvedItem, ends: int) -> str:
    if r.hook_length_m <= 0 or ends == 0:
        return "No hooks"
    mm = r.hook_length_m * 1000.0
    basis = "explicit" if r.hook_explicit else f"{r.hook_multiplier:g}d"
    return f"{ends} × {_hook_label(r)} hook @ {mm:.0f} mm ({basis})"


def _describe_bends(angles) -> str:
    return "bends " + ", ".join(f"{a:g}°" for a in angles)


# ---------------------------------------------------------------------------
# Shape formulas
# ---------------------------------------------------------------------------

class ShapeFormula:
    """Cutting length of one shape family. Returns (length_m, hook_details, remarks)."""
    shape_code = ""

    def compute(self, r: ResolvedItem) -> Tuple[float, str, List[str]]:
        raise NotImplementedError


class StraightFormula(ShapeFormula):
    shape_code = "straight"

    def compute(self, r):
        length = r.item.clear_length_m + 2 * r.hook_length_m
        return length, _describe_hooks(r, 2), []


class LFormula(ShapeFormula):
    shape_code = "L"

    def compute(self, r):
        if r.hook_length_m > 0:
            return r.item.clear_length_m + r.hook_length_m, _describe_hooks(r, 1), []
        leg_mult = CODE_DEFAULTS[r.code]["hook"]["90"]
        leg = leg_mult * r.diameter_m
        details = f"1 × 90° bent leg @ {leg * 1000.0:.0f} mm ({leg_mult:g}d)"
        return r.item.clear_length_m + leg, details, []


class UFormula(ShapeFormula):
    shape_code = "U"

    def compute(self, r):
        angles = r.item.bend_angles or (90.0, 90.0)
        deductions = sum(bend_deduction(a) for a in angles) * r.diameter_m
        length = r.item.clear_length_m + 2 * r.hook_length_m - deductions
        details = f"{_describe_hooks(r, 2)}; {_describe_bends(angles)}"
        return length, details, [f"bend deductions {deductions * 1000.0:.0f} mm"]


class StirrupFormula(ShapeFormula):
    shape_code = "stirrup"

    def compute(self, r):
        item = r.item
        hooks = 2 * r.hook_length_m
        details = _describe_hooks(r, 2)
        if item.member_breadth_mm is None or item.member_depth_mm is None:
            # Leg length supplied directly; the cross-section is never guessed
            length = item.clear_length_m + hooks
            return length, details, ["developed leg length as supplied"]

        core_b = item.member_breadth_mm - 2 * r.cover_mm
        core_d = item.member_depth_mm - 2 * r.cover_mm
        if core_b <= 0 or core_d <= 0:
            raise InvalidGeometryError(
                f"cover {r.cover_mm:g} mm leaves no core in "
                f"{item.member_breadth_mm:g} × {item.member_depth_mm:g} mm member",
                r.index, item.member_id, "cover_mm",
            )
        perimeter = 2 * (core_b + core_d) / 1000.0
        deductions = STIRRUP_CORNER_BENDS * bend_deduction(90.0) * r.diameter_m
        length = perimeter + hooks - deductions
        remarks = [f"core {core_b:g} × {core_d:g} mm (cover {r.cover_mm:g} mm)"]
        return length, details, remarks


class CrankFormula(ShapeFormula):
    shape_code = "crank"

    def compute(self, r):
        angles = r.item.bend_angles
        extra = sum(crank_extra(a, r.code) for a in angles) * r.diameter_m
        length = r.item.clear_length_m + extra + 2 * r.hook_length_m
        details = _describe_hooks(r, 2)
        if angles:
            details = f"{details}; {_describe_bends(angles)}"
        return length, details, [f"crank allowance {extra * 1000.0:.0f} mm"]


class SpiralFormula(ShapeFormula):
    shape_code = "spiral"

    def compute(self, r):
        length = r.item.clear_length_m + 2 * r.hook_length_m
        return length, _describe_hooks(r, 2), ["developed helix length as supplied"]


class CustomFormula(ShapeFormula):
    shape_code = "custom"

    def compute(self, r):
        extra = r.hook_length_m if r.hook_explicit else 0.0
        details = f"explicit hook @ {extra * 1000.0:.0f} mm" if extra > 0 else "No hooks"
        return r.item.clear_length_m + extra, details, []


SHAPE_FORMULAS: Dict[str, ShapeFormula] = {
    f.shape_code: f
    for f in (
        StraightFormula(),
        LFormula(),
        UFormula(),
        StirrupFormula(),
        CrankFormula(),
        SpiralFormula(),
        CustomFormula(),
    )
}


# ---------------------------------------------------------------------------
# Engine entry point
# ---------------------------------------------------------------------------

def _common_remarks(r: ResolvedItem) -> List[str]:
    item = r.item
    remarks = []
    if r.development_defaulted:
        mult = CODE_DEFAULTS[r.code]["development"]
        remarks.append(f"Ld = {r.development_length_m:.3f} m ({mult:g}d, {r.code})")
    else:
        remarks.append(f"Ld = {r.development_length_m:.3f} m (supplied)")
    if item.requires_full_development:
        remarks.append(
            "full development length required at unsupported end; not added to cutting length"
        )
    if item.spacing_mm is not None:
        remarks.append(f"@ {item.spacing_mm:g} mm c/c")
    return remarks


def compute_cutting_length(r: ResolvedItem, shape_code: str) -> CuttingLengthResult:
    """Cutting length of one bar of the group; InvalidGeometryError when ≤ 0."""
    formula = SHAPE_FORMULAS.get(shape_code, SHAPE_FORMULAS["custom"])
    length, hook_details, shape_remarks = formula.compute(r)

    if length <= 0:
        raise InvalidGeometryError(
            f"{shape_code} bar resolves to a cutting length of {length:.3f} m",
            r.index, r.item.member_id, "clear_length_m",
        )

    logger.debug(f"{r.item.member_id}: {shape_code} Ø{r.item.bar_diameter_mm:g} cut {length:.3f} m")
    return CuttingLengthResult(
        cutting_length_m=length,
        hook_details=hook_details,
        remarks=tuple(shape_remarks + _common_remarks(r)),
    )
