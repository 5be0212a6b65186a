#!/usr/bin/env python3
"""
Component Screenshot Browser - Variant Engine

Figma/Storybook-style variant pickers over a component's screenshots:

1. Every property always offers ALL values ever captured for it. Options are
   never narrowed by the current selection.
2. Changing one property snaps the whole selection to a captured variant
   that has the new value, so other properties follow along.

Records are anything carrying ``property_controls`` (ParsedName or
ScreenshotRecord). Every function here is pure; nothing is cached.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from filename_parser import BOOLEAN_VALUES, TOGGLE, determine_control_type


@dataclass
class PropertyGroup:
    key: str
    type: str
    options: List[str] = field(default_factory=list)
    current_value: str = ""


def controls_of(record: Any) -> List[Any]:
    return getattr(record, "property_controls", None) or []


def control_value(record: Any, key: str) -> Optional[str]:
    for control in controls_of(record):
        if control.key == key:
            return control.value
    return None


def selection_from_record(record: Any) -> Dict[str, str]:
    return {control.key: control.value for control in controls_of(record)}


def collect_values(records: Sequence[Any]) -> Dict[str, List[str]]:
    """Values per key, in first-seen order."""
    seen: Dict[str, Dict[str, None]] = {}
    for record in records:
        for control in controls_of(record):
            seen.setdefault(control.key, {})[control.value] = None
    return {key: list(values) for key, values in seen.items()}


def available_options(records: Sequence[Any], key: str) -> List[str]:
    return sorted({control.value for record in records for control in controls_of(record) if control.key == key})


def build_property_groups(
    records: Sequence[Any],
    selection: Optional[Dict[str, str]] = None,
) -> List[PropertyGroup]:
    selection = selection or {}
    groups = []
    for key, values in collect_values(records).items():
        control_type = determine_control_type(key, values[0])
        options = set(values)
        if control_type == TOGGLE:
            options |= BOOLEAN_VALUES
        options = sorted(options)
        groups.append(PropertyGroup(
            key=key,
            type=control_type,
            options=options,
            current_value=selection.get(key) or options[0],
        ))
    return sorted(groups, key=lambda g: g.key)


def matches_selection(record: Any, selection: Dict[str, str]) -> bool:
    if not controls_of(record):
        return False
    return all(control_value(record, key) == value for key, value in selection.items())


def filter_by_properties(records: Sequence[Any], selection: Dict[str, str]) -> List[Any]:
    if not selection:
        return list(records)
    return [r for r in records if matches_selection(r, selection)]


def find_best_match(records: Sequence[Any], selection: Dict[str, str]) -> Optional[Any]:
    """First exact match, else the first record sharing at least one selected pair."""
    exact = filter_by_properties(records, selection)
    if exact:
        return exact[0]
    for record in records:
        if any(control_value(record, key) == value for key, value in selection.items()):
            return record
    return None


def resolve_on_property_change(
    records: Sequence[Any],
    changed_key: str,
    changed_value: str,
    current_selection: Dict[str, str],
) -> Dict[str, str]:
    """
    Return the selection after ``changed_key`` is set to ``changed_value``.

    A record matching the whole candidate selection wins; otherwise the first
    record carrying just the changed pair. Either way the result is that
    record's complete property map. If no record has the value at all, the
    key is overwritten in place and the rest is left as it was.
    """
    candidate = dict(current_selection)
    candidate[changed_key] = changed_value

    matches = filter_by_properties(records, candidate)
    if not matches:
        matches = filter_by_properties(records, {changed_key: changed_value})
    if matches:
        return selection_from_record(matches[0])
    return candidate


def has_controls(records: Sequence[Any], component: Optional[str] = None) -> bool:
    if component:
        records = [r for r in records if getattr(r, "component", None) == component]
    return any(controls_of(r) for r in records)
