"""
Units & constants provider for the BBS engine.

  - normalize(): imperial → metric conversion of one bar group, rejecting
    non-finite and negative numbers (InvalidUnitError)
  - unit_weight(): d² / 162 kg/m
  - code_defaults(): per-code multiplier table (UnknownMixOrCodeError)
  - resolve_defaults(): the single defaulting step that turns a normalized
    item + options into fully-specified effective values

Pure functions; nothing here reads ambient state.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from rebar_bbs.config import (
    CODE_DEFAULTS,
    FT_TO_M,
    IN_TO_MM,
    UNIT_WEIGHT_DIVISOR,
)
from rebar_bbs.errors import InvalidUnitError, UnknownMixOrCodeError
from rebar_bbs.models.bbs_schema import BarGroupInput, BBSOptions


# Item fields converted in imperial mode
_FEET_FIELDS: Tuple[str, ...] = (
    "clear_length_m",
    "development_length_m",
    "lap_length_m",
    "stock_length_m",
)
_INCH_FIELDS: Tuple[str, ...] = (
    "hook_length_mm",
    "cover_mm",
    "spacing_mm",
    "member_breadth_mm",
    "member_depth_mm",
)
# Checked but never converted
_PLAIN_FIELDS: Tuple[str, ...] = (
    "bar_diameter_mm",
    "num_bars",
    "wastage_percent",
    "steel_rate_per_kg",
)


@dataclass(frozen=True)
class NormalizedItem:
    """A bar group in metric units with its member label filled in."""
    element_type: str
    member_id: str
    bar_type: str
    bar_diameter_mm: float
    num_bars: int
    clear_length_m: float
    spacing_mm: Optional[float] = None
    hook_type: Optional[str] = None
    hook_length_mm: Optional[float] = None
    bend_angles: Tuple[float, ...] = ()
    development_length_m: Optional[float] = None
    cover_mm: Optional[float] = None
    wastage_percent: Optional[float] = None
    lap_length_m: Optional[float] = None
    stock_length_m: Optional[float] = None
    steel_rate_per_kg: Optional[float] = None
    shape_preference: Optional[str] = None
    member_breadth_mm: Optional[float] = None
    member_depth_mm: Optional[float] = None
    requires_full_development: bool = False


@dataclass(frozen=True)
class ResolvedItem:
    """Effective values for one bar group after defaulting."""
    item: NormalizedItem
    index: int
    code: str
    diameter_m: float
    hook_length_m: float            # allowance per hook end, 0 without hooks
    hook_multiplier: Optional[float]  # table value for hook_type, None if no table hook
    hook_explicit: bool
    cover_mm: float
    cover_defaulted: bool
    default_cover_mm: float         # options default, else the code default
    wastage_percent: float
    stock_length_m: float
    lap_length_m: float             # per splice
    development_length_m: float
    development_defaulted: bool
    steel_rate_per_kg: Optional[float]


# ---------------------------------------------------------------------------
# Constants lookups
# ---------------------------------------------------------------------------

def unit_weight(diameter_mm: float) -> float:
    """Mass per metre of a steel bar, kg/m."""
    return diameter_mm ** 2 / UNIT_WEIGHT_DIVISOR


def code_key(code: str) -> str:
    """Canonical design-code key; raises UnknownMixOrCodeError when unsupported."""
    key = (code or "").strip().upper()
    if key not in CODE_DEFAULTS:
        raise UnknownMixOrCodeError(
            f"unsupported design code '{code}', expected one of {sorted(CODE_DEFAULTS)}",
            field="code",
        )
    return key


def code_defaults(code: str) -> dict:
    return CODE_DEFAULTS[code_key(code)]


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def _check_number(value, field: str, index: Optional[int], member_id: Optional[str]) -> None:
    if value is None:
        return
    if not math.isfinite(value):
        raise InvalidUnitError(f"{value!r} is not a finite number", index, member_id, field)
    if value < 0:
        raise InvalidUnitError(f"{value!r} must not be negative", index, member_id, field)


def normalize(item: BarGroupInput, options: BBSOptions, index: int = 0) -> NormalizedItem:
    """Convert one bar group to metric. Fails on non-finite or negative numbers."""
    member_id = item.member_id or f"Member {index + 1}"

    for name in _FEET_FIELDS + _INCH_FIELDS + _PLAIN_FIELDS:
        _check_number(getattr(item, name), name, index, member_id)
    angles: List[float] = list(item.bend_angles or [])
    for angle in angles:
        _check_number(angle, "bend_angles", index, member_id)

    values = {name: getattr(item, name) for name in _FEET_FIELDS + _INCH_FIELDS}
    if options.units == "imperial":
        for name in _FEET_FIELDS:
            if values[name] is not None:
                values[name] = values[name] * FT_TO_M
        for name in _INCH_FIELDS:
            if values[name] is not None:
                values[name] = values[name] * IN_TO_MM

    return NormalizedItem(
        element_type=item.element_type,
        member_id=member_id,
        bar_type=item.bar_type,
        bar_diameter_mm=float(item.bar_diameter_mm),
        num_bars=item.num_bars,
        bend_angles=tuple(angles),
        hook_type=item.hook_type,
        wastage_percent=item.wastage_percent,
        steel_rate_per_kg=item.steel_rate_per_kg,
        shape_preference=item.shape_preference,
        requires_full_development=item.requires_full_development,
        **values,
    )


def check_options(options: BBSOptions) -> str:
    """Validate option-level numbers and return the canonical code key."""
    key = code_key(options.code)
    for name in ("stock_length_m", "default_cover_mm", "wastage_percent_default", "steel_rate_per_kg"):
        _check_number(getattr(options, name), name, None, None)
    return key


# ---------------------------------------------------------------------------
# Defaulting
# ---------------------------------------------------------------------------

def _hook(item: NormalizedItem, table: dict) -> Tuple[float, Optional[float], bool]:
    multiplier = table.get(item.hook_type) if item.hook_type else None
    if item.hook_length_mm is not None:
        return item.hook_length_mm / 1000.0, multiplier, True
    if multiplier is not None:
        return multiplier * item.bar_diameter_mm / 1000.0, multiplier, False
    return 0.0, None, False


def resolve_defaults(item: NormalizedItem, options: BBSOptions, index: int = 0) -> ResolvedItem:
    """
    Resolve every optional override against options and the code table.

    Precedence for each value: item override → options → code default.
    """
    code = code_key(options.code)
    defaults = CODE_DEFAULTS[code]
    d_m = item.bar_diameter_mm / 1000.0

    hook_m, multiplier, explicit = _hook(item, defaults["hook"])

    if options.default_cover_mm is not None:
        default_cover = options.default_cover_mm
    else:
        default_cover = defaults["cover_mm"]
    if item.cover_mm is not None:
        cover, cover_defaulted = item.cover_mm, False
    else:
        cover, cover_defaulted = default_cover, True

    if item.wastage_percent is not None:
        wastage = item.wastage_percent
    elif options.wastage_percent_default is not None:
        wastage = options.wastage_percent_default
    else:
        wastage = defaults["wastage_pct"]

    stock = item.stock_length_m if item.stock_length_m is not None else options.stock_length_m
    lap = item.lap_length_m if item.lap_length_m is not None else defaults["lap"] * d_m

    if item.development_length_m is not None:
        development, development_defaulted = item.development_length_m, False
    else:
        development, development_defaulted = defaults["development"] * d_m, True

    rate = item.steel_rate_per_kg
    if rate is None:
        rate = options.steel_rate_per_kg

    return ResolvedItem(
        item=item,
        index=index,
        code=code,
        diameter_m=d_m,
        hook_length_m=hook_m,
        hook_multiplier=multiplier,
        hook_explicit=explicit,
        cover_mm=cover,
        cover_defaulted=cover_defaulted,
        default_cover_mm=default_cover,
        wastage_percent=wastage,
        stock_length_m=stock,
        lap_length_m=lap,
        development_length_m=development,
        development_defaulted=development_defaulted,
        steel_rate_per_kg=rate,
    )
