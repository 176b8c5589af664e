"""
BBS engine — computes a complete Bar Bending Schedule from bar-group inputs.

Pipeline per item (strictly one-directional, each stage returns a new frozen
record):

    parse → normalize → validate → resolve defaults → classify shape
          → cutting length → laps → schedule row

then once per call: cost + compliance notes → summary.

The first invalid item aborts the whole call. A schedule is a procurement
document, so a bar group is never silently dropped.
"""
from __future__ import annotations

import logging
import time
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from rebar_bbs.config import BAR_MARK_PREFIXES
from rebar_bbs.errors import ValidationError
from rebar_bbs.models.bbs_results import BBSResult, BBSResultRow
from rebar_bbs.models.bbs_schema import BarGroupInput, BBSOptions
from rebar_bbs.services.aggregation_engine import aggregate, expand_row
from rebar_bbs.services.compliance_engine import RowContext
from rebar_bbs.services.costing_engine import annotate
from rebar_bbs.services.cutting_length_engine import compute_cutting_length
from rebar_bbs.services.lap_engine import resolve_laps
from rebar_bbs.services.shape_classifier import ShapeClassifier
from rebar_bbs.services.units_engine import check_options, normalize, resolve_defaults
from rebar_bbs.services.validation_engine import validate_item, validate_options

logger = logging.getLogger("rebar-bbs-engine")

ItemLike = Union[BarGroupInput, dict]


def _parse(model, raw, index: Optional[int] = None):
    if isinstance(raw, model):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or None
        member_id = raw.get("member_id") if isinstance(raw, dict) else None
        raise ValidationError(first.get("msg", str(e)), index, member_id, field) from e


class BBSEngine:
    """Stateless between calls; one instance can serve any number of threads."""

    def __init__(self, classifier: ShapeClassifier = None):
        self.classifier = classifier or ShapeClassifier()

    def calculate(
        self,
        items: Iterable[ItemLike],
        options: Union[BBSOptions, dict, None] = None,
    ) -> BBSResult:
        started = time.perf_counter()
        opts: BBSOptions = _parse(BBSOptions, options if options is not None else {})
        code = check_options(opts)
        validate_options(opts)

        rows: List[BBSResultRow] = []
        contexts: List[RowContext] = []
        mark_counters: Dict[str, int] = {}

        for index, raw in enumerate(items):
            item = _parse(BarGroupInput, raw, index)
            normalized = normalize(item, opts, index)
            validate_item(normalized, index)
            resolved = resolve_defaults(normalized, opts, index)

            classification = self.classifier.classify(normalized)
            cut = compute_cutting_length(resolved, classification.shape_code)
            lap = resolve_laps(cut.cutting_length_m, resolved.stock_length_m, resolved.lap_length_m)

            prefix = BAR_MARK_PREFIXES[normalized.element_type]
            mark_counters[prefix] = mark_counters.get(prefix, 0) + 1
            bar_mark = f"{prefix}{mark_counters[prefix]:02d}"

            row = expand_row(resolved, classification.shape_code, bar_mark, cut, lap)
            logger.debug(
                f"{bar_mark} {row.member_id}: {row.shape_code} Ø{row.bar_diameter_mm:g} × {row.num_bars}, "
                f"cut {row.cutting_length_m:.3f} m, total {row.total_length_m:.3f} m",
                extra={"bar_mark": bar_mark},
            )
            rows.append(row)
            contexts.append(RowContext(resolved=resolved, classification=classification))

        annotation = annotate(rows, contexts)
        summary = aggregate(annotation.rows_with_cost)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            f"BBS ({code}): {len(rows)} bar marks, {summary.total_bars} bars, "
            f"{summary.total_steel_weight_kg:,.1f} kg, {len(annotation.compliance_notes)} notes",
            extra={"duration_ms": duration_ms},
        )

        return BBSResult(
            results=annotation.rows_with_cost,
            summary=summary,
            project_meta=opts.project_meta(),
            code_used=code,
            compliance_notes=annotation.compliance_notes,
        )


_engine = BBSEngine()


def calculate(items: Iterable[ItemLike], options: Union[BBSOptions, dict, None] = None) -> BBSResult:
    """Compute a Bar Bending Schedule. Raises a BBSError subclass on bad input."""
    return _engine.calculate(items, options)
