"""
Compliance annotations — advisory notes attached to a schedule.

Notes never block a result. They flag conservative estimates (custom shapes),
stock-length overruns, assumed or below-default cover, tight spacing,
suspiciously short links and hooks shorter than the code allowance.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from rebar_bbs.config import (
    MIN_SPACING_DIAMETERS,
    MIN_SPACING_MM,
    STIRRUP_MIN_LENGTH_DIAMETERS,
)
from rebar_bbs.models.bbs_results import BBSResultRow
from rebar_bbs.services.shape_classifier import ShapeClassification
from rebar_bbs.services.units_engine import ResolvedItem


@dataclass(frozen=True)
class RowContext:
    """What the engine knew about a row beyond the row itself."""
    resolved: ResolvedItem
    classification: ShapeClassification


def _splice_note(row: BBSResultRow, ctx: RowContext) -> Optional[str]:
    if not row.splice_count:
        return None
    return (
        f"{row.bar_mark} ({row.member_id}): cutting length {row.cutting_length_m:.3f} m exceeds "
        f"stock length {ctx.resolved.stock_length_m:g} m; {row.splice_count} lap splice(s) of "
        f"{row.lap_length_m:.3f} m added to quantities"
    )


def _short_stirrup_note(row: BBSResultRow, ctx: RowContext) -> Optional[str]:
    if row.shape_code != "stirrup":
        return None
    minimum = STIRRUP_MIN_LENGTH_DIAMETERS * ctx.resolved.diameter_m
    if row.cutting_length_m >= minimum:
        return None
    return (
        f"{row.bar_mark} ({row.member_id}): stirrup cutting length {row.cutting_length_m:.3f} m is "
        f"below {STIRRUP_MIN_LENGTH_DIAMETERS:g}d ({minimum:.3f} m); check leg length or member size"
    )


def _short_hook_note(row: BBSResultRow, ctx: RowContext) -> Optional[str]:
    r = ctx.resolved
    if not r.hook_explicit or r.hook_multiplier is None:
        return None
    table_m = r.hook_multiplier * r.diameter_m
    if r.hook_length_m >= table_m:
        return None
    return (
        f"{row.bar_mark} ({row.member_id}): explicit hook {r.hook_length_m * 1000.0:.0f} mm is shorter "
        f"than the {r.code} {r.item.hook_type}° allowance of {table_m * 1000.0:.0f} mm "
        f"({r.hook_multiplier:g}d)"
    )


def _spacing_note(row: BBSResultRow, ctx: RowContext) -> Optional[str]:
    spacing = ctx.resolved.item.spacing_mm
    if spacing is None:
        return None
    minimum = max(MIN_SPACING_MM, MIN_SPACING_DIAMETERS * ctx.resolved.item.bar_diameter_mm)
    if spacing >= minimum:
        return None
    return (
        f"{row.bar_mark} ({row.member_id}): spacing {spacing:g} mm is below the "
        f"recommended minimum of {minimum:g} mm"
    )


def _low_cover_note(row: BBSResultRow, ctx: RowContext) -> Optional[str]:
    r = ctx.resolved
    if r.cover_defaulted or r.cover_mm >= r.default_cover_mm:
        return None
    return (
        f"{row.bar_mark} ({row.member_id}): cover {r.cover_mm:g} mm is less than "
        f"the default {r.default_cover_mm:g} mm"
    )


def _cover_notes(rows: Sequence[BBSResultRow], contexts: Sequence[RowContext]) -> List[str]:
    by_cover: Dict[float, List[str]] = {}
    for row, ctx in zip(rows, contexts):
        if ctx.resolved.cover_defaulted:
            by_cover.setdefault(ctx.resolved.cover_mm, []).append(row.bar_mark)
    return [
        f"Cover not supplied for {', '.join(marks)}; {cover:g} mm assumed"
        for cover, marks in by_cover.items()
    ]


def collect_notes(rows: Sequence[BBSResultRow], contexts: Sequence[RowContext]) -> List[str]:
    """Ordered, de-duplicated compliance notes for a schedule."""
    notes: List[str] = []
    for row, ctx in zip(rows, contexts):
        if ctx.classification.note:
            notes.append(f"{row.bar_mark}: {ctx.classification.note}")
        for rule in (_splice_note, _short_stirrup_note, _short_hook_note, _spacing_note, _low_cover_note):
            note = rule(row, ctx)
            if note:
                notes.append(note)
    notes.extend(_cover_notes(rows, contexts))
    return list(dict.fromkeys(notes))
