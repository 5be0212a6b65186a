#!/usr/bin/env python3
"""
Component Screenshot Browser - Catalog
Reads a screenshots directory into records and provides the browse-view
helpers (search/filter, grouping, sorting, tag grouping).
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from filename_parser import (
    PropertyControl,
    generate_description,
    generate_tags,
    is_image_file,
    parse_filename,
)

logger = logging.getLogger(__name__)


DEFAULT_SCREENSHOTS_DIR = "public/screenshots"
IMAGE_URL_PREFIX = "/screenshots/"
ERROR_LABEL = "Error"

GROUP_BY_OPTIONS = ("component", "state", "flat")
FLAT_GROUP = "All Screenshots"


@dataclass
class ScreenshotRecord:
    id: str
    component: str
    state: str
    filename: str
    date: str
    props: Dict[str, Union[bool, str]] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)
    description: str = ""
    image_url: str = ""
    thumbnail_url: str = ""
    documentation: Optional[str] = None
    property_controls: List[PropertyControl] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FilterOptions:
    search: str = ""
    component: str = ""
    state: str = ""
    tags: List[str] = field(default_factory=list)
    tag_mode: str = "AND"


def image_url(filename: str) -> str:
    return f"{IMAGE_URL_PREFIX}{filename}"


def file_date(path: Path) -> str:
    return datetime.fromtimestamp(path.stat().st_mtime).isoformat()


def load_documentation(directory: Path) -> Dict[str, str]:
    """Map component name -> markdown for every ``<Component>.md`` file."""
    docs: Dict[str, str] = {}
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix.lower() != ".md":
            continue
        try:
            docs[path.stem] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error(f"Error reading markdown file {path.name}: {exc}")
    return docs


def build_record(
    filename: str,
    index: int,
    date: str,
    documentation: Optional[Dict[str, str]] = None,
) -> ScreenshotRecord:
    parsed = parse_filename(filename)
    url = image_url(filename)
    return ScreenshotRecord(
        id=f"{parsed.component}_{parsed.state}_{index}",
        component=parsed.component,
        state=parsed.state,
        filename=filename,
        date=date,
        props=parsed.legacy_props,
        tags=generate_tags(parsed),
        description=generate_description(parsed.component, parsed.state),
        image_url=url,
        thumbnail_url=url,
        documentation=(documentation or {}).get(parsed.component),
        property_controls=parsed.property_controls,
    )


def error_record(filename: str, index: int) -> ScreenshotRecord:
    url = image_url(filename)
    return ScreenshotRecord(
        id=f"{ERROR_LABEL}_{index}",
        component=ERROR_LABEL,
        state=ERROR_LABEL,
        filename=filename,
        date=datetime.now().isoformat(),
        tags=[ERROR_LABEL.lower()],
        description=f"Could not read {filename}",
        image_url=url,
        thumbnail_url=url,
    )


def scan_directory(directory: Union[str, Path]) -> List[ScreenshotRecord]:
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning(f"Screenshots directory not found: {directory}")
        return []

    documentation = load_documentation(directory)
    image_files = sorted(p.name for p in directory.iterdir() if p.is_file() and is_image_file(p.name))

    records = []
    for index, filename in enumerate(image_files):
        try:
            records.append(build_record(filename, index, file_date(directory / filename), documentation))
        except OSError as exc:
            logger.error(f"Error processing {filename}: {exc}")
            records.append(error_record(filename, index))
    logger.debug(f"Loaded {len(records)} screenshots from {directory}")
    return records


def matches_search(record: ScreenshotRecord, search: str) -> bool:
    needle = search.lower()
    return (
        needle in record.component.lower()
        or needle in record.state.lower()
        or needle in (record.description or "").lower()
        or any(needle in tag.lower() for tag in record.tags)
    )


def filter_screenshots(records: List[ScreenshotRecord], filters: FilterOptions) -> List[ScreenshotRecord]:
    result = []
    for record in records:
        if filters.search and not matches_search(record, filters.search):
            continue
        if filters.component and record.component != filters.component:
            continue
        if filters.state and record.state != filters.state:
            continue
        if filters.tags:
            hits = [tag in record.tags for tag in filters.tags]
            if filters.tag_mode.upper() == "OR":
                if not any(hits):
                    continue
            elif not all(hits):
                continue
        result.append(record)
    return result


def group_screenshots(records: List[ScreenshotRecord], group_by: str = "component") -> Dict[str, List[ScreenshotRecord]]:
    grouped: Dict[str, List[ScreenshotRecord]] = {}
    for record in records:
        if group_by == "component":
            key = record.component
        elif group_by == "state":
            key = record.state
        else:
            key = FLAT_GROUP
        grouped.setdefault(key, []).append(record)
    return grouped


def sort_screenshots(
    records: List[ScreenshotRecord],
    sort_by: str = "alphabetical",
    order: str = "asc",
) -> List[ScreenshotRecord]:
    if sort_by == "date":
        key = lambda r: r.date
    else:
        key = lambda r: r.component.lower()
    return sorted(records, key=key, reverse=(order == "desc"))


def unique_components(records: List[ScreenshotRecord]) -> List[str]:
    return sorted({r.component for r in records})


def unique_states(records: List[ScreenshotRecord]) -> List[str]:
    return sorted({r.state for r in records})


def unique_tags(records: List[ScreenshotRecord]) -> List[str]:
    return sorted({tag for r in records for tag in r.tags})


def group_tags(tags: List[str], property_controls: Optional[List[PropertyControl]] = None) -> List[Dict[str, str]]:
    """Property pairs first, then the tags no property key or value covers."""
    controls = property_controls or []
    grouped: List[Dict[str, str]] = [{"key": c.key, "value": c.value} for c in controls]
    covered = {c.key.lower() for c in controls} | {c.value.lower() for c in controls}
    for tag in tags:
        if tag.lower() not in covered:
            grouped.append({"tag": tag})
    return grouped


def format_relative_date(value: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    seconds = (now - datetime.fromisoformat(value)).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    def plural(count: int, unit: str) -> str:
        return f"{count} {unit}{'' if count == 1 else 's'} ago"

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return plural(minutes, "minute")
    if hours < 24:
        return plural(hours, "hour")
    if days < 30:
        return plural(days, "day")
    if days // 30 < 12:
        return plural(days // 30, "month")
    return plural(days // 365, "year")
