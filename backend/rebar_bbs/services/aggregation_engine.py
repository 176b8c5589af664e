"""
Aggregator — expands per-bar results by count and rolls the schedule up.

Sums are exact running sums in row order; rounding is left to presentation.
"""
from __future__ import annotations

from typing import Dict, List, Sequence

from rebar_bbs.models.bbs_results import BBSResultRow, BBSSummary, DiameterSummary
from rebar_bbs.services.cutting_length_engine import CuttingLengthResult
from rebar_bbs.services.lap_engine import LapResult
from rebar_bbs.services.units_engine import ResolvedItem, unit_weight


def expand_row(
    r: ResolvedItem,
    shape_code: str,
    bar_mark: str,
    cut: CuttingLengthResult,
    lap: LapResult,
) -> BBSResultRow:
    """One schedule row: geometric length per bar, consumed length × count, weight."""
    item = r.item
    total_length = lap.spliced_length_m * item.num_bars
    kg_per_m = unit_weight(item.bar_diameter_mm)
    total_weight = total_length * kg_per_m

    remarks = list(cut.remarks)
    if lap.splice_count:
        remarks.append(
            f"{lap.splice_count} splice(s) per bar, lap {lap.lap_length_m:.3f} m each "
            f"(stock {r.stock_length_m:g} m)"
        )

    return BBSResultRow(
        bar_mark=bar_mark,
        member_id=item.member_id,
        element_type=item.element_type,
        bar_type=item.bar_type,
        shape_code=shape_code,
        bar_diameter_mm=item.bar_diameter_mm,
        num_bars=item.num_bars,
        cutting_length_m=cut.cutting_length_m,
        consumed_length_per_bar_m=lap.spliced_length_m,
        total_length_m=total_length,
        unit_weight_kg_per_m=kg_per_m,
        total_weight_kg=total_weight,
        wastage_percent=r.wastage_percent,
        ordered_weight_kg=total_weight * (1 + r.wastage_percent / 100.0),
        hook_details=cut.hook_details,
        splice_count=lap.splice_count,
        lap_length_m=lap.lap_length_m,
        remarks="; ".join(remarks),
    )


def aggregate(rows: Sequence[BBSResultRow]) -> BBSSummary:
    """Grand totals plus a per-diameter breakdown sorted by diameter."""
    by_dia: Dict[float, Dict[str, float]] = {}
    for row in rows:
        bucket = by_dia.setdefault(
            row.bar_diameter_mm, {"count": 0, "total_length_m": 0.0, "total_weight_kg": 0.0}
        )
        bucket["count"] += row.num_bars
        bucket["total_length_m"] += row.total_length_m
        bucket["total_weight_kg"] += row.total_weight_kg

    breakdown: List[DiameterSummary] = [
        DiameterSummary(
            bar_diameter_mm=dia,
            count=int(b["count"]),
            total_length_m=b["total_length_m"],
            total_weight_kg=b["total_weight_kg"],
        )
        for dia, b in sorted(by_dia.items())
    ]

    priced = [row.total_cost for row in rows if row.total_cost is not None]

    return BBSSummary(
        total_bars=sum(row.num_bars for row in rows),
        grand_total_length_m=sum(row.total_length_m for row in rows),
        total_steel_weight_kg=sum(row.total_weight_kg for row in rows),
        total_ordered_weight_kg=sum(row.ordered_weight_kg for row in rows),
        by_diameter=tuple(breakdown),
        total_cost=sum(priced) if priced else None,
    )
