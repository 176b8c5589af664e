#!/usr/bin/env python3
"""
rebar-bbs — compute a Bar Bending Schedule from a CSV of bar groups.

Usage:
    rebar-bbs --template > bbs_template.csv          # Blank schedule with sample rows
    rebar-bbs schedule.csv                            # JSON result on stdout
    rebar-bbs schedule.csv --code IS --rate 95 --xlsx bbs.xlsx --csv bbs.csv
    rebar-bbs schedule.csv --preset column            # Append a preset member

Environment:
    LOG_LEVEL   (default INFO)
    LOG_FORMAT  json | text (default json)
"""
import argparse
import json
import logging
import os
import sys

from rebar_bbs.errors import BBSError
from rebar_bbs.services.bbs_engine import calculate
from rebar_bbs.services.csv_io import read_bbs_csv, template_csv, write_schedule_csv
from rebar_bbs.services.logging_config import setup_logging
from rebar_bbs.services.presets import PRESETS
from rebar_bbs.services.report_engine import generate_schedule_excel

logger = logging.getLogger("rebar-bbs-cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rebar-bbs", description="Bar Bending Schedule calculator")
    p.add_argument("input", nargs="?", help="CSV file of bar groups")
    p.add_argument("--template", action="store_true", help="print a CSV template and exit")
    p.add_argument("--preset", action="append", choices=sorted(PRESETS), default=[],
                   help="append a preset member (repeatable)")
    p.add_argument("--code", default="NBC", help="design code: NBC, IS or ACI")
    p.add_argument("--units", default="metric", choices=["metric", "imperial"])
    p.add_argument("--stock-length", type=float, default=12.0, help="stock bar length, m")
    p.add_argument("--cover", type=float, help="default cover, mm")
    p.add_argument("--wastage", type=float, help="default wastage, %%")
    p.add_argument("--rate", type=float, help="steel rate per kg")
    p.add_argument("--currency", help="currency label carried into reports")
    p.add_argument("--project", help="project name")
    p.add_argument("--location")
    p.add_argument("--designer")
    p.add_argument("--csv", dest="csv_out", help="write the schedule CSV here")
    p.add_argument("--xlsx", dest="xlsx_out", help="write the schedule workbook here")
    return p


def main(argv=None) -> int:
    setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        json_output=os.getenv("LOG_FORMAT", "json").lower() != "text",
    )
    args = build_parser().parse_args(argv)

    if args.template:
        sys.stdout.write(template_csv())
        return 0

    if not args.input and not args.preset:
        logger.error("No input CSV or preset given")
        return 2

    options = {
        "code": args.code,
        "units": args.units,
        "stock_length_m": args.stock_length,
        "default_cover_mm": args.cover,
        "wastage_percent_default": args.wastage,
        "steel_rate_per_kg": args.rate,
        "currency": args.currency,
        "project_name": args.project,
        "location": args.location,
        "designer": args.designer,
    }

    try:
        items = read_bbs_csv(args.input) if args.input else []
        for name in args.preset:
            items.extend(PRESETS[name]())
        result = calculate(items, options)
    except BBSError as e:
        logger.error(f"BBS calculation failed: {e}")
        return 2
    except OSError as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    if args.csv_out:
        write_schedule_csv(result, args.csv_out)
    if args.xlsx_out:
        generate_schedule_excel(result, args.xlsx_out, currency_symbol=args.currency or "")
    if not args.csv_out and not args.xlsx_out:
        json.dump(result.to_dict(), sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
