#!/usr/bin/env python3
"""
Report Label Filter CLI — pick rows out of archived hierarchical reports.

USAGE:
  python -m reportlabel.cli reports                                    # List archived reports
  python -m reportlabel.cli filter Actions.getPageUrls --date 2024-03-01 --label "docs>index"
  python -m reportlabel.cli filter Actions.getPageUrls --date 2024-03-01 --label blog --label "docs>install"
  python -m reportlabel.cli filter Actions.getPageTitles --period month --date last3 --label "Home"
  python -m reportlabel.cli filter Actions.getPageUrls --date 2024-03-01 --raw --label "a b>c%d"
  python -m reportlabel.cli filter Actions.getPageUrls --date 2024-03-01 --label blog --json out.json --xlsx out.xlsx

Labels are read as URL-encoded, one level per ">" separated part.
Use --raw to pass plain text and let the CLI encode each part.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from reportlabel.config import ARCHIVE_FOLDER, DEFAULT_PERIOD, PERIOD_TYPES
from reportlabel.data.normalize import encode_label_path, split_raw_label, unsanitize_input_value
from reportlabel.data.store import ArchiveStore, build_request


def _encode_labels(labels: list[str], raw: bool) -> list[str]:
    if not raw:
        return labels
    return [encode_label_path(split_raw_label(label)) for label in labels]


def cmd_reports(args) -> int:
    """List archived reports."""
    store = ArchiveStore(Path(args.archive)).load()
    for name in store.reports():
        print(f"  {name}")
    return 0


def cmd_filter(args) -> int:
    """Filter one report by label(s) and print the matching rows."""
    from reportlabel.reports.label_report import generate_json, generate_excel

    print("\n" + "=" * 70)
    print("  REPORT LABEL FILTER")
    print("=" * 70)

    labels = _encode_labels(args.label, args.raw)
    store = ArchiveStore(Path(args.archive)).load()

    try:
        request = build_request(args.report, args.period, args.date, label=",".join(labels))
        data = generate_json(store, request, labels)
    except ValueError as e:
        print(f"  ERROR: {e}")
        return 1

    matched = 0
    for p in data["periods"]:
        header = p["period"] or data["report"]
        print(f"\n  {header}")
        if not p["rows"]:
            print("    (no match)")
        for r in p["rows"]:
            matched += 1
            metrics = "  ".join(f"{k}={v}" for k, v in r["columns"].items())
            print(f"    [{r['label_idx']}] {unsanitize_input_value(r['label'])[:40]:<42}{metrics}")

    missing = [q for i, q in enumerate(labels) if not any(r["label_idx"] == i for p in data["periods"] for r in p["rows"])]
    for q in missing:
        print(f"  Label not found in any period: '{q}'")

    if args.json:
        out = Path(args.json)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w") as f:
            json.dump(data, f, indent=2)
        print(f"\n  JSON saved to: {out}")

    if args.xlsx:
        out = generate_excel(data, args.xlsx)
        print(f"  Workbook saved to: {out}")

    print(f"\n  {matched} row(s) matched\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Report Label Filter — label path lookup in hierarchical reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # reports subcommand
    reports_parser = subparsers.add_parser("reports", help="List archived reports")
    reports_parser.add_argument("--archive", default=str(ARCHIVE_FOLDER), help="Archive directory")
    reports_parser.set_defaults(func=cmd_reports)

    # filter subcommand
    filter_parser = subparsers.add_parser("filter", help="Filter a report by label")
    filter_parser.add_argument("report", help="Report name, e.g. Actions.getPageUrls")
    filter_parser.add_argument("--label", action="append", required=True, help="Label or label path (repeatable)")
    filter_parser.add_argument("--period", choices=PERIOD_TYPES, default=DEFAULT_PERIOD, help="Period type")
    filter_parser.add_argument("--date", default="today", help="YYYY-MM-DD, today, yesterday, lastN, previousN or start,end")
    filter_parser.add_argument("--raw", action="store_true", help="Labels are plain text, encode them first")
    filter_parser.add_argument("--json", help="Write the result as JSON to this path")
    filter_parser.add_argument("--xlsx", help="Write the result as an Excel workbook to this path")
    filter_parser.add_argument("--archive", default=str(ARCHIVE_FOLDER), help="Archive directory")
    filter_parser.set_defaults(func=cmd_filter)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
