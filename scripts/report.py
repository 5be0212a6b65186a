#!/usr/bin/env python3
"""
Component Screenshot Browser - Analysis Report
Documentation coverage and property usage across the whole catalog.
"""

from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from catalog import ScreenshotRecord, group_screenshots

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
TOP_PROPERTY_LIMIT = 10


def property_label(key: str, value: str) -> str:
    return f"{key}:{value}"


def build_analysis(records: List[ScreenshotRecord]) -> Dict[str, Any]:
    by_component = group_screenshots(records, "component")
    with_docs = [c for c, items in by_component.items() if any(r.documentation for r in items)]
    without_docs = [c for c, items in by_component.items() if not any(r.documentation for r in items)]

    usage: Counter = Counter()
    first_component: Dict[str, str] = {}
    for record in records:
        for control in record.property_controls:
            label = property_label(control.key, control.value)
            usage[label] += 1
            first_component.setdefault(label, record.component)

    top_properties = [{"property": p, "count": n} for p, n in usage.most_common(TOP_PROPERTY_LIMIT)]
    one_offs = [
        {"property": p, "count": n, "component": first_component.get(p, "Unknown")}
        for p, n in usage.items()
        if n == 1
    ]
    one_offs.sort(key=lambda item: item["component"])

    return {
        "total_components": len(by_component),
        "total_screenshots": len(records),
        "components_with_docs": len(with_docs),
        "components_without_docs": len(without_docs),
        "missing_docs_components": without_docs,
        "property_usage": dict(usage),
        "top_properties": top_properties,
        "one_off_properties": one_offs,
    }


def docs_coverage(analysis: Dict[str, Any]) -> str:
    total = analysis.get("total_components", 0)
    if not total:
        return "n/a"
    return f"{round(100.0 * analysis.get('components_with_docs', 0) / total)}%"


def render_analysis(
    analysis: Dict[str, Any],
    screenshots_dir: str = "",
    templates_dir: Optional[Path] = None,
) -> str:
    template = (templates_dir or TEMPLATES_DIR).joinpath("analysis.md").read_text(encoding="utf-8")

    def join_list(items: List[str]) -> str:
        if not items:
            return "-"
        return "\n".join([f"- {item}" for item in items])

    def simple_table(rows: List[Dict[str, Any]], columns: List[str]) -> str:
        if not rows:
            return "(none)"
        header = "| " + " | ".join(columns) + " |\n"
        divider = "|" + "|".join([" --- " for _ in columns]) + "|\n"
        body = ""
        for row in rows:
            body += "| " + " | ".join(str(row.get(col, "")) for col in columns) + " |\n"
        return header + divider + body

    replacements = {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "screenshots_dir": screenshots_dir or "-",
        "total_components": analysis.get("total_components", 0),
        "total_screenshots": analysis.get("total_screenshots", 0),
        "components_with_docs": analysis.get("components_with_docs", 0),
        "components_without_docs": analysis.get("components_without_docs", 0),
        "docs_coverage": docs_coverage(analysis),
        "missing_docs_block": join_list(analysis.get("missing_docs_components", [])),
        "top_properties_table": simple_table(analysis.get("top_properties", []), ["property", "count"]),
        "one_off_properties_table": simple_table(
            analysis.get("one_off_properties", []), ["property", "component"]
        ),
    }
    for key, value in replacements.items():
        template = template.replace("{{" + key + "}}", str(value))
    return template
