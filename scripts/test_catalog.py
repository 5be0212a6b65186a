"""
Tests for directory scanning and the browse helpers.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

import catalog
from catalog import (
    FLAT_GROUP,
    FilterOptions,
    filter_screenshots,
    format_relative_date,
    group_screenshots,
    group_tags,
    load_documentation,
    scan_directory,
    sort_screenshots,
    unique_components,
    unique_states,
    unique_tags,
)
from filename_parser import PropertyControl


def make_dir(tmp_path, names):
    for name in names:
        (tmp_path / name).write_bytes(b"")
    return tmp_path


def sample_records(tmp_path):
    make_dir(tmp_path, [
        "Button_primary_default.png",
        "Button_secondary_hover.png",
        "Card_size-large_theme-dark.png",
        "Modal_open.jpg",
        "notes.txt",
    ])
    (tmp_path / "Button.md").write_text("# Button\nUse for actions.", encoding="utf-8")
    return scan_directory(tmp_path)


def test_scan_builds_records(tmp_path):
    records = sample_records(tmp_path)
    assert [r.filename for r in records] == [
        "Button_primary_default.png",
        "Button_secondary_hover.png",
        "Card_size-large_theme-dark.png",
        "Modal_open.jpg",
    ]
    button = records[0]
    assert button.id == "Button_primary_default_0"
    assert button.props == {"type": "primary"}
    assert button.tags == ["button", "primary", "default"]
    assert button.description == "Button component in primary default state"
    assert button.image_url == "/screenshots/Button_primary_default.png"
    assert button.thumbnail_url == button.image_url
    assert button.documentation.startswith("# Button")
    datetime.fromisoformat(button.date)

    card = records[2]
    assert card.documentation is None
    assert [(c.key, c.value) for c in card.property_controls] == [("size", "large"), ("theme", "dark")]
    assert card.tags == ["card", "default", "size", "large", "theme", "dark"]


def test_scan_missing_directory(tmp_path):
    assert scan_directory(tmp_path / "missing") == []


def test_scan_replaces_failing_file_with_error_record(tmp_path, monkeypatch):
    make_dir(tmp_path, ["Button_default.png", "Card_default.png"])
    real_file_date = catalog.file_date

    def flaky_file_date(path):
        if path.name.startswith("Card"):
            raise OSError("stat failed")
        return real_file_date(path)

    monkeypatch.setattr(catalog, "file_date", flaky_file_date)
    records = scan_directory(tmp_path)
    assert len(records) == 2
    assert records[0].component == "Button"
    assert records[1].component == "Error"
    assert records[1].state == "Error"
    assert records[1].tags == ["error"]
    assert records[1].filename == "Card_default.png"


def test_load_documentation(tmp_path):
    (tmp_path / "Card.md").write_text("card docs", encoding="utf-8")
    (tmp_path / "Broken.md").write_bytes(b"\xff\xfe\xfa")
    (tmp_path / "Card.png").write_bytes(b"")
    assert load_documentation(tmp_path) == {"Card": "card docs"}


def test_to_dict_is_json_ready(tmp_path):
    data = sample_records(tmp_path)[2].to_dict()
    assert data["property_controls"][0] == {"key": "size", "value": "large", "type": "dropdown"}


def test_filter_search_and_exact_fields(tmp_path):
    records = sample_records(tmp_path)
    assert [r.component for r in filter_screenshots(records, FilterOptions(search="HOVER"))] == ["Button"]
    assert len(filter_screenshots(records, FilterOptions(component="Button"))) == 2
    assert [r.state for r in filter_screenshots(records, FilterOptions(state="open"))] == ["open"]
    assert filter_screenshots(records, FilterOptions()) == records


def test_filter_tag_modes(tmp_path):
    records = sample_records(tmp_path)
    both = FilterOptions(tags=["button", "hover"])
    assert [r.state for r in filter_screenshots(records, both)] == ["secondary_hover"]
    either = FilterOptions(tags=["hover", "modal"], tag_mode="OR")
    assert [r.component for r in filter_screenshots(records, either)] == ["Button", "Modal"]


def test_grouping(tmp_path):
    records = sample_records(tmp_path)
    by_component = group_screenshots(records, "component")
    assert list(by_component) == ["Button", "Card", "Modal"]
    assert len(by_component["Button"]) == 2
    assert list(group_screenshots(records, "state")) == ["primary_default", "secondary_hover", "default", "open"]
    assert list(group_screenshots(records, "flat")) == [FLAT_GROUP]


def test_sorting(tmp_path):
    records = sample_records(tmp_path)
    assert [r.component for r in sort_screenshots(records, "alphabetical", "desc")][0] == "Modal"
    records[0].date = "2020-01-01T00:00:00"
    assert sort_screenshots(records, "date", "asc")[0] is records[0]


def test_unique_values(tmp_path):
    records = sample_records(tmp_path)
    assert unique_components(records) == ["Button", "Card", "Modal"]
    assert unique_states(records) == ["default", "open", "primary_default", "secondary_hover"]
    assert "dark" in unique_tags(records)


def test_group_tags_puts_properties_first():
    controls = [PropertyControl("size", "large"), PropertyControl("theme", "dark")]
    grouped = group_tags(["card", "size", "large", "Dark", "hover"], controls)
    assert grouped == [
        {"key": "size", "value": "large"},
        {"key": "theme", "value": "dark"},
        {"tag": "card"},
        {"tag": "hover"},
    ]
    assert group_tags(["a"]) == [{"tag": "a"}]


def test_format_relative_date():
    now = datetime(2024, 6, 1, 12, 0, 0)
    assert format_relative_date(now.isoformat(), now) == "just now"
    assert format_relative_date((now - timedelta(minutes=1)).isoformat(), now) == "1 minute ago"
    assert format_relative_date((now - timedelta(hours=5)).isoformat(), now) == "5 hours ago"
    assert format_relative_date((now - timedelta(days=3)).isoformat(), now) == "3 days ago"
    assert format_relative_date((now - timedelta(days=65)).isoformat(), now) == "2 months ago"
    assert format_relative_date((now - timedelta(days=800)).isoformat(), now) == "2 years ago"
