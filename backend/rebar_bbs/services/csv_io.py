"""
CSV import/export for bar bending schedules.

Import reads the fixed header schema (element_type, member_id, bar_type,
bar_diameter_mm, num_bars, spacing_mm, clear_length_m, hook_type,
hook_length_mm, bend_angles, development_length_m, cover_mm, wastage_percent,
lap_length_m, stock_length_m, steel_rate_per_kg) into plain dicts that
calculate() accepts. Blank cells are left out so the engine's defaulting
applies; bend_angles is a ';'-separated sub-list.

Export flattens a BBSResult into a DataFrame, rounding only here.
"""
from __future__ import annotations

import io
from typing import Any, Dict, List, Optional

import pandas as pd

from rebar_bbs.config import BEND_ANGLE_SEPARATOR, CSV_HEADERS
from rebar_bbs.errors import ValidationError
from rebar_bbs.models.bbs_results import BBSResult

_NUMERIC_COLUMNS = {
    "bar_diameter_mm",
    "num_bars",
    "spacing_mm",
    "clear_length_m",
    "hook_length_mm",
    "development_length_m",
    "cover_mm",
    "wastage_percent",
    "lap_length_m",
    "stock_length_m",
    "steel_rate_per_kg",
    "member_breadth_mm",
    "member_depth_mm",
}
_OPTIONAL_COLUMNS = ["shape_preference", "member_breadth_mm", "member_depth_mm"]
_KNOWN_COLUMNS = set(CSV_HEADERS) | set(_OPTIONAL_COLUMNS)

# Sample rows shipped with the template
_TEMPLATE_ROWS = [
    ["beam", "Beam B1", "Main", "16", "4", "", "5.0", "135", "", "90;45", "", "25", "3", "", "12", ""],
    ["column", "C1", "Stirrups/Ties", "8", "20", "", "0.8", "135", "", "", "", "25", "3", "", "12", ""],
    ["slab", "S1 Main", "Main", "12", "50", "150", "4.2", "", "", "45;45", "", "20", "3", "", "12", ""],
]


def _to_number(text: str, column: str, row_no: int):
    try:
        value = float(text)
    except ValueError:
        raise ValidationError(f"'{text}' is not a number", row_no, None, column)
    if column == "num_bars" and value.is_integer():
        return int(value)
    return value


def _parse_angles(text: str, row_no: int) -> List[float]:
    angles = []
    for part in text.split(BEND_ANGLE_SEPARATOR):
        part = part.strip()
        if not part:
            continue
        angles.append(_to_number(part, "bend_angles", row_no))
    return angles


def read_bbs_csv(source=None, *, text: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Parse a BBS CSV into calculate()-ready dicts.

    Pass either ``source`` (path or file-like object) or ``text`` (CSV content).
    Content pandas cannot parse raises ValidationError on field ``csv``;
    a missing file still raises OSError.
    """
    if (source is None) == (text is None):
        raise TypeError("read_bbs_csv() takes exactly one of source or text")
    if text is not None:
        source = io.StringIO(text)
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ValidationError(f"unreadable CSV: {e}", field="csv") from e
    df.columns = df.columns.str.strip().str.lower()

    items: List[Dict[str, Any]] = []
    for row_no, record in enumerate(df.to_dict(orient="records")):
        item: Dict[str, Any] = {}
        for column, raw in record.items():
            if column not in _KNOWN_COLUMNS:
                continue
            text = str(raw).strip()
            if not text:
                continue
            if column == "bend_angles":
                item[column] = _parse_angles(text, row_no)
            elif column in _NUMERIC_COLUMNS:
                item[column] = _to_number(text, column, row_no)
            else:
                item[column] = text
        item.setdefault("member_id", f"Member {row_no + 1}")
        items.append(item)
    return items


def template_csv() -> str:
    """Header plus sample rows, ready to save as bbs_template.csv."""
    df = pd.DataFrame(_TEMPLATE_ROWS, columns=CSV_HEADERS)
    return df.to_csv(index=False, lineterminator="\n")


def schedule_to_dataframe(
    result: BBSResult,
    length_decimals: int = 3,
    unit_weight_decimals: int = 3,
    weight_decimals: int = 2,
) -> pd.DataFrame:
    """One line per bar mark, display-rounded."""
    records = []
    for r in result.results:
        records.append({
            "Bar Mark": r.bar_mark,
            "Member ID": r.member_id,
            "Bar Type": r.bar_type,
            "Shape": r.shape_code,
            "Dia (mm)": r.bar_diameter_mm,
            "Qty": r.num_bars,
            "Cut Length (m)": round(r.cutting_length_m, length_decimals),
            "Total Length (m)": round(r.total_length_m, length_decimals),
            "Unit Wt (kg/m)": round(r.unit_weight_kg_per_m, unit_weight_decimals),
            "Total Wt (kg)": round(r.total_weight_kg, weight_decimals),
            "Hook Details": r.hook_details,
            "Lap (m)": round(r.lap_length_m, length_decimals) if r.lap_length_m is not None else None,
            "Remarks": r.remarks,
            "Cost": round(r.total_cost, 2) if r.total_cost is not None else None,
        })
    return pd.DataFrame.from_records(records)


def by_diameter_dataframe(result: BBSResult, weight_decimals: int = 2) -> pd.DataFrame:
    return pd.DataFrame.from_records([
        {
            "Dia (mm)": d.bar_diameter_mm,
            "Count": d.count,
            "Total Length (m)": round(d.total_length_m, 3),
            "Total Wt (kg)": round(d.total_weight_kg, weight_decimals),
        }
        for d in result.summary.by_diameter
    ])


def write_schedule_csv(result: BBSResult, path: Optional[str] = None) -> str:
    """Write the schedule CSV to path (if given) and return the CSV text."""
    text = schedule_to_dataframe(result).to_csv(index=False, lineterminator="\n")
    if path:
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
    return text
