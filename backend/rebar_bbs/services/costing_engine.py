"""
Costing & compliance annotator.

Cost per row = total_weight_kg × rate, the rate being the item's own
steel_rate_per_kg or the options default. With no rate anywhere the row's
total_cost stays None: "unpriced" is not the same as "free".
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Sequence

from rebar_bbs.models.bbs_results import BBSResultRow
from rebar_bbs.services.compliance_engine import RowContext, collect_notes


@dataclass(frozen=True)
class Annotation:
    rows_with_cost: tuple
    compliance_notes: tuple


def price_row(row: BBSResultRow, ctx: RowContext) -> BBSResultRow:
    rate = ctx.resolved.steel_rate_per_kg
    if rate is None:
        return row
    return replace(row, total_cost=row.total_weight_kg * rate)


def annotate(rows: Sequence[BBSResultRow], contexts: Sequence[RowContext]) -> Annotation:
    """Priced copies of the rows plus advisory notes. Never raises on content."""
    priced: List[BBSResultRow] = [price_row(row, ctx) for row, ctx in zip(rows, contexts)]
    notes = collect_notes(priced, contexts)

    unpriced = [row.bar_mark for row in priced if row.total_cost is None]
    if unpriced and len(unpriced) < len(priced):
        notes.append(
            f"No steel rate for {', '.join(unpriced)}; total cost covers priced rows only"
        )

    return Annotation(rows_with_cost=tuple(priced), compliance_notes=tuple(notes))
