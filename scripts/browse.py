#!/usr/bin/env python3
"""
Component Screenshot Browser - Command Line
Browse, filter and analyse a directory of component screenshots.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from catalog import (
    DEFAULT_SCREENSHOTS_DIR,
    GROUP_BY_OPTIONS,
    FilterOptions,
    ScreenshotRecord,
    filter_screenshots,
    format_relative_date,
    group_screenshots,
    group_tags,
    scan_directory,
    sort_screenshots,
    unique_components,
    unique_states,
    unique_tags,
)
from report import build_analysis, render_analysis
from variant_engine import (
    available_options,
    build_property_groups,
    filter_by_properties,
    find_best_match,
    has_controls,
    resolve_on_property_change,
    selection_from_record,
)


def parse_assignments(raw: Optional[List[str]]) -> List[tuple]:
    """``["size=large", "theme=dark"]`` -> ordered (key, value) pairs."""
    pairs = []
    for item in raw or []:
        if "=" not in item:
            continue
        key, value = item.split("=", 1)
        if key.strip():
            pairs.append((key.strip(), value.strip()))
    return pairs


def apply_changes(
    records: List[ScreenshotRecord],
    changes: List[tuple],
    selection: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Feed each change through the resolver, as a UI would on every click."""
    selection = dict(selection or {})
    for key, value in changes:
        selection = resolve_on_property_change(records, key, value, selection)
    return selection


def format_tag_groups(groups: List[Dict[str, str]]) -> str:
    parts = [f"{g['key']}={g['value']}" if "key" in g else f"#{g['tag']}" for g in groups]
    return " ".join(parts)


def cmd_scan(args: argparse.Namespace) -> int:
    records = scan_directory(args.dir)
    payload = {"screenshots": [r.to_dict() for r in records]}
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"✅ Wrote {len(records)} screenshots to {args.output}")
    else:
        print(text)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    records = scan_directory(args.dir)
    filters = FilterOptions(
        search=args.search or "",
        component=args.component or "",
        state=args.state or "",
        tags=args.tag or [],
        tag_mode=args.tag_mode,
    )
    records = sort_screenshots(filter_screenshots(records, filters), args.sort, args.order)
    if not records:
        print("No screenshots found")
        return 0

    for group, items in group_screenshots(records, args.group_by).items():
        print(f"\n{group} ({len(items)})")
        for record in items:
            print(f"  {record.filename:<48} {record.state:<24} {format_relative_date(record.date)}")
            if args.show_tags:
                print(f"      {format_tag_groups(group_tags(record.tags, record.property_controls))}")
    return 0


def cmd_facets(args: argparse.Namespace) -> int:
    records = scan_directory(args.dir)
    facets = {
        "components": unique_components(records),
        "states": unique_states(records),
        "tags": unique_tags(records),
    }
    if args.json:
        print(json.dumps(facets, ensure_ascii=False, indent=2))
        return 0
    for name, values in facets.items():
        print(f"{name.capitalize()} ({len(values)}): {', '.join(values) or '-'}")
    return 0


def cmd_variants(args: argparse.Namespace) -> int:
    records = [r for r in scan_directory(args.dir) if r.component == args.component]
    if not has_controls(records, args.component):
        print(f"❌ {args.component} has no property controls")
        return 1

    changes = parse_assignments(args.set)
    for key, value in changes:
        if value not in available_options(records, key):
            print(f"⚠️  {key}={value} is not captured for {args.component}")

    selection = selection_from_record(records[0]) if not args.all else {}
    selection = apply_changes(records, changes, selection)

    print(f"{args.component}")
    for group in build_property_groups(records, selection):
        print(f"  {group.key:<16} [{group.type}] {group.current_value:<16} options: {', '.join(group.options)}")

    matches = filter_by_properties(records, selection)
    print(f"\nMatching screenshots ({len(matches)}):")
    for record in matches:
        print(f"  {record.filename}")
    if not matches:
        print("  (nothing captured for this combination)")
        closest = find_best_match(records, selection)
        if closest is not None:
            print(f"Closest: {closest.filename}")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    records = scan_directory(args.dir)
    analysis = build_analysis(records)
    if args.json:
        content = json.dumps(analysis, ensure_ascii=False, indent=2)
    else:
        content = render_analysis(analysis, screenshots_dir=str(args.dir))
    if args.output:
        Path(args.output).write_text(content, encoding="utf-8")
        print(f"✅ Analysis written to {args.output}")
    else:
        print(content)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse a directory of component screenshots")
    parser.add_argument("--dir", "-d", default=DEFAULT_SCREENSHOTS_DIR, help="Screenshots directory")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Dump the parsed catalog as JSON")
    scan.add_argument("--output", "-o", help="Write JSON here instead of stdout")
    scan.set_defaults(func=cmd_scan)

    listing = sub.add_parser("list", help="Search, filter and group screenshots")
    listing.add_argument("--search", "-s", help="Match component, state, description or tag")
    listing.add_argument("--component", "-c", help="Exact component name")
    listing.add_argument("--state", help="Exact state")
    listing.add_argument("--tag", "-t", action="append", help="Tag filter (repeatable)")
    listing.add_argument("--tag-mode", choices=["AND", "OR"], default="AND", help="Require all tags or any tag")
    listing.add_argument("--group-by", choices=GROUP_BY_OPTIONS, default="component")
    listing.add_argument("--sort", choices=["alphabetical", "date"], default="alphabetical")
    listing.add_argument("--order", choices=["asc", "desc"], default="asc")
    listing.add_argument("--show-tags", action="store_true", help="Print property pairs and remaining tags")
    listing.set_defaults(func=cmd_list)

    facets = sub.add_parser("facets", help="Unique components, states and tags")
    facets.add_argument("--json", action="store_true", help="Emit JSON")
    facets.set_defaults(func=cmd_facets)

    variants = sub.add_parser("variants", help="Property controls for one component")
    variants.add_argument("component", help="Component name")
    variants.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="Change a property; applied in order, other properties follow (repeatable)",
    )
    variants.add_argument("--all", action="store_true", help="Start from an empty selection")
    variants.set_defaults(func=cmd_variants)

    analyze = sub.add_parser("analyze", help="Documentation coverage and property usage")
    analyze.add_argument("--output", "-o", help="Write the report here instead of stdout")
    analyze.add_argument("--json", action="store_true", help="Emit raw analysis JSON")
    analyze.set_defaults(func=cmd_analyze)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
