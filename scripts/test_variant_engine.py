"""
Tests for property groups, property filtering and variant snapping.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from filename_parser import DROPDOWN, TEXT, TOGGLE, parse_filename
from variant_engine import (
    available_options,
    build_property_groups,
    filter_by_properties,
    find_best_match,
    has_controls,
    resolve_on_property_change,
    selection_from_record,
)


def catalog(*names):
    return [parse_filename(name) for name in names]


ROUTES = catalog(
    "Map_type-route_user-rider.png",
    "Map_type-large-route_user-driver.png",
)

BUTTONS = catalog(
    "Button_size-small_variant-primary_disabled-false.png",
    "Button_size-large_variant-primary_disabled-false.png",
    "Button_size-large_variant-ghost_disabled-false.png",
    "Button_size-small_variant-ghost_disabled-false.png",
    "Button_hover.png",
)


def test_groups_sorted_by_key_with_all_options():
    groups = build_property_groups(BUTTONS)
    assert [g.key for g in groups] == ["disabled", "size", "variant"]
    disabled, size, variant = groups
    assert disabled.type == TOGGLE
    assert disabled.options == ["false", "true"]
    assert size.type == DROPDOWN
    assert size.options == ["large", "small"]
    assert variant.options == ["ghost", "primary"]


def test_group_type_comes_from_first_seen_value():
    records = catalog("Chip_label-true.png", "Chip_label-Hello.png")
    (group,) = build_property_groups(records)
    assert group.type == TOGGLE
    assert group.options == ["Hello", "false", "true"]

    records = catalog("Chip_label-Hello.png", "Chip_label-true.png")
    (group,) = build_property_groups(records)
    assert group.type == TEXT


def test_current_value_defaults_to_first_option():
    groups = {g.key: g for g in build_property_groups(BUTTONS, {"size": "small"})}
    assert groups["size"].current_value == "small"
    assert groups["variant"].current_value == "ghost"


def test_options_never_narrowed_by_selection():
    unfiltered = build_property_groups(BUTTONS)
    for selection in [{}, {"size": "small"}, {"size": "large", "variant": "ghost"}, {"variant": "missing"}]:
        groups = build_property_groups(BUTTONS, selection)
        assert [g.options for g in groups] == [g.options for g in unfiltered]


def test_build_is_repeatable():
    assert build_property_groups(BUTTONS) == build_property_groups(BUTTONS)


def test_available_options():
    assert available_options(BUTTONS, "size") == ["large", "small"]
    assert available_options(BUTTONS, "nope") == []


def test_filter_empty_selection_is_identity():
    assert filter_by_properties(BUTTONS, {}) == BUTTONS


def test_filter_requires_every_pair():
    matches = filter_by_properties(BUTTONS, {"size": "large", "variant": "ghost"})
    assert [r.property_controls[0].value for r in matches] == ["large"]
    assert len(matches) == 1
    assert filter_by_properties(BUTTONS, {"size": "huge"}) == []


def test_records_without_controls_never_match():
    matches = filter_by_properties(BUTTONS, {"size": "small"})
    assert all(r.property_controls for r in matches)
    assert BUTTONS[-1] not in matches


def test_resolve_snaps_every_property():
    result = resolve_on_property_change(ROUTES, "type", "large-route", {"type": "route", "user": "rider"})
    assert result == {"type": "large-route", "user": "driver"}


def test_resolve_prefers_full_match():
    current = {"size": "small", "variant": "ghost", "disabled": "false"}
    result = resolve_on_property_change(BUTTONS, "size", "large", current)
    assert result == {"size": "large", "variant": "ghost", "disabled": "false"}


def test_resolve_relaxes_to_changed_pair_in_catalog_order():
    records = catalog(
        "Badge_tone-info_size-small.png",
        "Badge_tone-alert_size-large.png",
        "Badge_tone-alert_size-medium.png",
    )
    result = resolve_on_property_change(records, "tone", "alert", {"tone": "info", "size": "small"})
    assert result == {"tone": "alert", "size": "large"}


def test_resolve_unknown_value_overwrites_only_changed_key():
    current = {"type": "route", "user": "rider"}
    result = resolve_on_property_change(ROUTES, "type", "ferry", current)
    assert result == {"type": "ferry", "user": "rider"}
    assert current == {"type": "route", "user": "rider"}


def test_resolve_with_empty_catalog():
    assert resolve_on_property_change([], "size", "large", {}) == {"size": "large"}


def test_find_best_match():
    assert find_best_match(ROUTES, {"type": "route"}) is ROUTES[0]
    assert find_best_match(ROUTES, {"type": "ferry", "user": "driver"}) is ROUTES[1]
    assert find_best_match(ROUTES, {"type": "ferry"}) is None


def test_selection_from_record():
    assert selection_from_record(ROUTES[1]) == {"type": "large-route", "user": "driver"}
    assert selection_from_record(BUTTONS[-1]) == {}


def test_has_controls():
    assert has_controls(BUTTONS)
    assert has_controls(BUTTONS, "Button")
    assert not has_controls(BUTTONS, "Card")
    assert not has_controls(catalog("Card_default.png"))
