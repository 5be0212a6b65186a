#!/usr/bin/env python3
"""
Component Screenshot Browser - Filename Parser
Turns screenshot filenames like ``Card_hover_size-large_theme-dark.png`` into
component / state / property metadata.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")

UNKNOWN_COMPONENT = "Unknown"
DEFAULT_STATE = "default"
PROPS_MARKER = "props"

TOGGLE = "toggle"
DROPDOWN = "dropdown"
TEXT = "text"

BOOLEAN_VALUES = {"true", "false"}

DROPDOWN_KEYS = {
    "size",
    "variant",
    "type",
    "color",
    "theme",
    "state",
}

# (substring, key, value), applied in order. Later rules overwrite earlier
# ones for the same key, so the negated word must follow its positive form.
LEGACY_PROP_RULES = [
    ("primary", "type", "primary"),
    ("secondary", "type", "secondary"),
    ("success", "type", "success"),
    ("warning", "type", "warning"),
    ("disabled", "disabled", True),
    ("focused", "focused", True),
    ("hover", "hover", True),
    ("error", "error", True),
    ("loading", "loading", True),
    ("test", "test", True),
    ("selected", "selected", True),
    ("unselected", "selected", False),
    ("checked", "checked", True),
    ("unchecked", "checked", False),
    ("open", "open", True),
    ("closed", "open", False),
    ("active", "active", True),
    ("inactive", "active", False),
]

_EXTENSION_RE = re.compile(
    r"(" + "|".join(re.escape(ext) for ext in IMAGE_EXTENSIONS) + r")$",
    re.IGNORECASE,
)


@dataclass
class PropertyControl:
    key: str
    value: str
    type: str = DROPDOWN


@dataclass
class ParsedName:
    component: str
    state: str = DEFAULT_STATE
    legacy_props: Dict[str, Union[bool, str]] = field(default_factory=dict)
    property_controls: List[PropertyControl] = field(default_factory=list)


def is_image_file(filename: str) -> bool:
    return filename.lower().endswith(IMAGE_EXTENSIONS)


def strip_extension(filename: str) -> str:
    return _EXTENSION_RE.sub("", filename or "")


def determine_control_type(key: str, value: str) -> str:
    if value in BOOLEAN_VALUES:
        return TOGGLE
    if key.lower() in DROPDOWN_KEYS:
        return DROPDOWN
    return TEXT


def infer_legacy_props(state: str) -> Dict[str, Union[bool, str]]:
    props: Dict[str, Union[bool, str]] = {}
    for needle, key, value in LEGACY_PROP_RULES:
        if needle in state:
            props[key] = value
    return props


def split_property(segment: str) -> Optional[PropertyControl]:
    """Return a control for a ``key-value`` segment, or None if malformed."""
    if "-" not in segment:
        return None
    key, value = segment.split("-", 1)
    if not key or not value or value == PROPS_MARKER:
        return None
    return PropertyControl(key=key, value=value, type=determine_control_type(key, value))


def parse_filename(filename: str) -> ParsedName:
    """
    Parse a screenshot filename.

    The first ``_`` segment names the component. Remaining segments are either
    the ``props`` marker (dropped), ``key-value`` property controls, or state
    tokens re-joined with ``_``. Never raises; bad input degrades to defaults.
    """
    parts = strip_extension(filename).split("_")
    component = parts[0] or UNKNOWN_COMPONENT

    if len(parts) < 2:
        return ParsedName(component=component, state=DEFAULT_STATE)

    controls: List[PropertyControl] = []
    state_parts: List[str] = []
    for segment in parts[1:]:
        if segment == PROPS_MARKER:
            continue
        control = split_property(segment)
        if control is not None:
            controls.append(control)
        else:
            state_parts.append(segment)

    state = "_".join(state_parts) or DEFAULT_STATE
    return ParsedName(
        component=component,
        state=state,
        legacy_props=infer_legacy_props(state),
        property_controls=controls,
    )


def generate_tags(parsed: ParsedName) -> List[str]:
    tags = [parsed.component.lower()]
    tags.extend(part.lower() for part in parsed.state.split("_") if part.strip())
    for control in parsed.property_controls:
        tags.append(control.key.lower())
        tags.append(control.value.lower())
    return list(dict.fromkeys(tags))


def generate_description(component: str, state: str) -> str:
    return f"{component} component in {state.replace('_', ' ')} state"


def naming_problem(
    component: str,
    state: Optional[str] = None,
    properties: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    """Why build_filename would not parse back to these values, or None."""
    if component and "_" in component:
        return f"component '{component}' contains '_'"
    for segment in (state or "").split("_"):
        if segment == PROPS_MARKER:
            return f"state '{state}' contains the '{PROPS_MARKER}' marker"
        if "-" in segment:
            return f"state '{state}' contains '-'"
    for key, value in (properties or {}).items():
        if isinstance(value, bool):
            continue
        key, value = str(key), str(value)
        if not key or "-" in key or "_" in key:
            return f"property key '{key}' is empty or contains '-' or '_'"
        if not value or "_" in value or value == PROPS_MARKER:
            return f"property {key} value '{value}' is empty, contains '_' or is '{PROPS_MARKER}'"
    return None


def build_filename(
    component: str,
    state: Optional[str] = None,
    properties: Optional[Dict[str, Any]] = None,
    extension: str = ".png",
) -> str:
    """Inverse of parse_filename, used when naming captured screenshots."""
    segments = [component or UNKNOWN_COMPONENT]
    if state and state != DEFAULT_STATE:
        segments.append(state)
    for key, value in (properties or {}).items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        segments.append(f"{key}-{value}")
    return "_".join(segments) + extension
