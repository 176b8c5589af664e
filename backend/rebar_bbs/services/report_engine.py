"""
Report engine — spreadsheet export of a computed Bar Bending Schedule.

Sheets:
  1. Schedule     one line per bar mark
  2. By Diameter  per-diameter count / length / weight
  3. Summary      project block, grand totals, compliance notes
"""
import logging

import xlsxwriter

from rebar_bbs.models.bbs_results import BBSResult

logger = logging.getLogger("rebar-bbs-report")

_SCHEDULE_COLUMNS = [
    ("Bar Mark", 10), ("Member ID", 18), ("Bar Type", 14), ("Shape", 10),
    ("Dia (mm)", 9), ("Qty", 7), ("Cut Length (m)", 14), ("Total Length (m)", 15),
    ("Unit Wt (kg/m)", 13), ("Total Wt (kg)", 13), ("Hook Details", 34),
    ("Lap (m)", 9), ("Remarks", 60), ("Cost", 14),
]


def generate_schedule_excel(result: BBSResult, path: str, currency_symbol: str = "") -> str:
    """Write the schedule workbook to path and return the path."""
    wb = xlsxwriter.Workbook(path)
    try:
        hdr = wb.add_format({"bold": True, "bg_color": "#14141E", "font_color": "#FFFFFF",
                             "border": 1, "font_size": 10})
        normal = wb.add_format({"border": 1, "font_size": 9})
        len_fmt = wb.add_format({"num_format": "#,##0.000", "border": 1, "font_size": 9})
        wt_fmt = wb.add_format({"num_format": "#,##0.00", "border": 1, "font_size": 9})
        money = wb.add_format({"num_format": f'"{currency_symbol}"#,##0.00' if currency_symbol else "#,##0.00",
                               "border": 1, "font_size": 9})
        title_fmt = wb.add_format({"bold": True, "font_size": 14, "font_color": "#14141E"})
        total_fmt = wb.add_format({"bold": True, "bg_color": "#002147", "font_color": "#FFFFFF",
                                   "border": 1, "font_size": 10, "num_format": "#,##0.00"})

        # ── Sheet 1: Schedule ────────────────────────────────────────────────
        ws = wb.add_worksheet("Schedule")
        for col, (label, width) in enumerate(_SCHEDULE_COLUMNS):
            ws.set_column(col, col, width)
            ws.write(0, col, label, hdr)
        for i, r in enumerate(result.results, start=1):
            ws.write(i, 0, r.bar_mark, normal)
            ws.write(i, 1, r.member_id, normal)
            ws.write(i, 2, r.bar_type, normal)
            ws.write(i, 3, r.shape_code, normal)
            ws.write_number(i, 4, r.bar_diameter_mm, normal)
            ws.write_number(i, 5, r.num_bars, normal)
            ws.write_number(i, 6, r.cutting_length_m, len_fmt)
            ws.write_number(i, 7, r.total_length_m, len_fmt)
            ws.write_number(i, 8, r.unit_weight_kg_per_m, len_fmt)
            ws.write_number(i, 9, r.total_weight_kg, wt_fmt)
            ws.write(i, 10, r.hook_details, normal)
            if r.lap_length_m is not None:
                ws.write_number(i, 11, r.lap_length_m, len_fmt)
            else:
                ws.write_blank(i, 11, None, normal)
            ws.write(i, 12, r.remarks, normal)
            if r.total_cost is not None:
                ws.write_number(i, 13, r.total_cost, money)
            else:
                ws.write_blank(i, 13, None, normal)

        # ── Sheet 2: By Diameter ─────────────────────────────────────────────
        ws2 = wb.add_worksheet("By Diameter")
        ws2.set_column("A:D", 16)
        ws2.write_row(0, 0, ["Dia (mm)", "Count", "Total Length (m)", "Total Wt (kg)"], hdr)
        for i, d in enumerate(result.summary.by_diameter, start=1):
            ws2.write_number(i, 0, d.bar_diameter_mm, normal)
            ws2.write_number(i, 1, d.count, normal)
            ws2.write_number(i, 2, d.total_length_m, len_fmt)
            ws2.write_number(i, 3, d.total_weight_kg, wt_fmt)

        # ── Sheet 3: Summary ─────────────────────────────────────────────────
        ws3 = wb.add_worksheet("Summary")
        ws3.set_column("A:A", 32)
        ws3.set_column("B:B", 90)
        meta = result.project_meta or {}
        ws3.write("A1", meta.get("project_name") or "Bar Bending Schedule", title_fmt)
        ws3.write("A2", f"Designed as per {result.code_used}", normal)
        row = 3
        for label in ("location", "designer"):
            if meta.get(label):
                ws3.write(row, 0, label.title(), normal)
                ws3.write(row, 1, meta[label], normal)
                row += 1

        s = result.summary
        row += 1
        totals = [
            ("Total Bars", s.total_bars),
            ("Grand Total Length (m)", s.grand_total_length_m),
            ("Total Steel Weight (kg)", s.total_steel_weight_kg),
            ("Weight incl. Wastage (kg)", s.total_ordered_weight_kg),
        ]
        if s.total_cost is not None:
            currency = currency_symbol or meta.get("currency")
            totals.append((f"Total Cost ({currency})" if currency else "Total Cost", s.total_cost))
        for label, value in totals:
            ws3.write(row, 0, label, hdr)
            ws3.write_number(row, 1, value, total_fmt)
            row += 1

        if result.compliance_notes:
            row += 1
            ws3.write(row, 0, "Compliance Notes", hdr)
            row += 1
            for note in result.compliance_notes:
                ws3.write(row, 1, note, normal)
                row += 1
    finally:
        wb.close()

    logger.info(f"BBS workbook generated: {path} ({len(result.results)} bar marks)")
    return path
