from __future__ import annotations

from powerplanctl.core.plan_table import active_plan, build_plan_table, parse_plan_listing

LISTING = [
    "Existing Power Schemes (* Active)",
    "-----------------------------------",
    "",
    "Power Scheme GUID: 381b4222-f694-41f0-9685-ff5bb260df2e  (Balanced) *",
    "Power Scheme GUID: 8c5e7fda-e8bf-4a96-9a85-a6e23a8c635c  (High performance)",
]


def test_listing_marks_single_active_plan() -> None:
    plans = parse_plan_listing(LISTING)
    assert [p.name for p in plans] == ["Balanced", "High performance"]
    assert [p.active for p in plans] == [True, False]
    assert active_plan(plans).name == "Balanced"


def test_descriptions_match_exact_display_name() -> None:
    plans = parse_plan_listing(LISTING, {"Balanced": "Default", "High": "not exact"})
    assert plans[0].description == "Default"
    assert plans[1].description is None


def test_short_output_yields_empty_table() -> None:
    assert parse_plan_listing(["Existing Power Schemes (* Active)", "---"]) == []


def test_lines_without_name_or_guid_are_dropped() -> None:
    plans = build_plan_table(
        [
            "Power Scheme GUID: 381b4222-f694-41f0-9685-ff5bb260df2e",
            "Power Scheme GUID: broken  (Broken)",
            "Power Scheme GUID: a1841308-3541-4fab-bc81-f71556f20b4a  (Power saver)",
        ]
    )
    assert [p.name for p in plans] == ["Power saver"]


def test_at_most_one_plan_is_active() -> None:
    plans = build_plan_table(
        [
            "Power Scheme GUID: 381b4222-f694-41f0-9685-ff5bb260df2e  (Balanced) *",
            "Power Scheme GUID: a1841308-3541-4fab-bc81-f71556f20b4a  (Power saver) *",
        ]
    )
    assert sum(p.active for p in plans) == 1
    assert plans[0].active


def test_no_active_plan() -> None:
    plans = build_plan_table(["Power Scheme GUID: 381b4222-f694-41f0-9685-ff5bb260df2e  (Balanced)"])
    assert active_plan(plans) is None
