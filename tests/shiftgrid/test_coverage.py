from __future__ import annotations

import pytest

from shiftgrid.config import Config
from shiftgrid.coverage import (
    SlotRequirement,
    SlotSignup,
    build_coverage_grid,
    build_dispatcher_rows,
    classify_block,
    classify_slot,
    find_gaps,
)
from shiftgrid.result_types import REGIONAL_COUNTY, CoverageStatus
from shiftgrid.shifts import DispatcherAssignment


def _dispatcher(county="Durham", date="2024-12-09", start=6, end=10, **kw):
    return DispatcherAssignment(
        user_id=kw.pop("user_id", "d1"),
        county=county,
        date=date,
        start_hour=start,
        end_hour=end,
        **kw,
    )


# ---------- classify_block ----------


def test_block_without_shifts_has_no_status():
    assert classify_block([], has_dispatcher=True) is None


def test_dispatcher_and_leads_everywhere_is_green(make_shift):
    shifts = [make_shift("North", [True, False]), make_shift("South", [True])]
    assert classify_block(shifts, has_dispatcher=True) is CoverageStatus.GREEN


def test_removing_dispatcher_downgrades_to_yellow(make_shift):
    shifts = [make_shift("North", [True, False]), make_shift("South", [True])]
    assert classify_block(shifts, has_dispatcher=False) is CoverageStatus.YELLOW


def test_one_leaderless_shift_is_yellow(make_shift):
    shifts = [make_shift("North", [True]), make_shift("South", [False, False])]
    assert classify_block(shifts, has_dispatcher=True) is CoverageStatus.YELLOW


def test_all_shifts_empty_is_gray(make_shift):
    shifts = [make_shift("North"), make_shift("South")]
    assert classify_block(shifts, has_dispatcher=False) is CoverageStatus.GRAY


def test_dispatcher_alone_does_not_lift_empty_block_out_of_gray(make_shift):
    shifts = [make_shift("North"), make_shift("South")]
    assert classify_block(shifts, has_dispatcher=True) is CoverageStatus.GRAY


def test_leaderless_staffed_shift_next_to_empty_shift_is_yellow(make_shift):
    shifts = [make_shift("North", [False]), make_shift("South")]
    assert classify_block(shifts, has_dispatcher=True) is CoverageStatus.YELLOW
    assert classify_block(shifts, has_dispatcher=False) is CoverageStatus.YELLOW


def test_led_shift_next_to_empty_shift_is_not_green(make_shift):
    shifts = [make_shift("North", [True]), make_shift("South")]
    assert classify_block(shifts, has_dispatcher=True) is CoverageStatus.YELLOW


def test_declined_rsvps_do_not_count(make_shift):
    shifts = [make_shift("North", [True], status="DECLINED")]
    assert classify_block(shifts, has_dispatcher=True) is CoverageStatus.GRAY


def test_pending_rsvps_count_by_default(make_shift):
    shifts = [make_shift("North", [True], status="PENDING")]
    assert classify_block(shifts, has_dispatcher=True) is CoverageStatus.GREEN


def test_explicit_statuses_override_config(make_shift):
    shifts = [make_shift("North", [True], status="PENDING")]
    status = classify_block(shifts, has_dispatcher=True, statuses=["CONFIRMED"])
    assert status is CoverageStatus.GRAY


def test_status_labels_match_api_values():
    assert CoverageStatus.GREEN.coverage_label == "full"
    assert CoverageStatus.YELLOW.coverage_label == "partial"
    assert CoverageStatus.GRAY.coverage_label == "none"


def test_find_gaps_lists_zones_once_in_order(make_shift):
    shifts = [
        make_shift("South", [False]),
        make_shift("North", [True]),
        make_shift("South"),
        make_shift("East"),
    ]
    gaps = find_gaps(shifts, has_dispatcher=False)
    assert gaps.needs_dispatcher is True
    assert gaps.zones_needing_leads == ["South", "East"]


# ---------- build_coverage_grid ----------


def test_grid_has_one_cell_per_block_sorted(make_shift):
    shifts = [
        make_shift("North", [True], start_hour=10, end_hour=14),
        make_shift("North", [True]),
        make_shift("Chapel Hill", [True], county="Orange"),
        make_shift("South", [False]),
    ]
    cells = build_coverage_grid(shifts, [_dispatcher()], mode="ZONE")

    assert [(c.county, c.start_hour) for c in cells] == [
        ("Durham", 6),
        ("Durham", 10),
        ("Orange", 6),
    ]
    first = cells[0]
    assert first.status is CoverageStatus.YELLOW
    assert first.zones == ["North", "South"]
    assert first.gaps.zones_needing_leads == ["South"]
    assert first.gaps.needs_dispatcher is False
    assert cells[1].status is CoverageStatus.YELLOW
    assert cells[1].gaps.needs_dispatcher is True


def test_grid_separates_primary_and_backup_dispatchers(make_shift):
    shifts = [make_shift("North", [True])]
    dispatchers = [
        _dispatcher(user_id="backup", is_backup=True),
        _dispatcher(user_id="primary"),
    ]
    (cell,) = build_coverage_grid(shifts, dispatchers, mode="ZONE")
    assert cell.status is CoverageStatus.GREEN
    assert cell.dispatcher is not None and cell.dispatcher.user_id == "primary"
    assert [d.user_id for d in cell.backup_dispatchers] == ["backup"]


def test_backup_dispatcher_alone_does_not_count(make_shift):
    shifts = [make_shift("North", [True])]
    (cell,) = build_coverage_grid(
        shifts, [_dispatcher(is_backup=True)], mode="ZONE"
    )
    assert cell.status is CoverageStatus.YELLOW
    assert cell.dispatcher is None
    assert cell.gaps.needs_dispatcher is True


def test_dispatcher_without_shifts_creates_no_cell(make_shift, caplog):
    shifts = [make_shift("North", [True])]
    orphan = _dispatcher(date="2024-12-10")
    with caplog.at_level("WARNING", logger="shiftgrid.coverage"):
        cells = build_coverage_grid(shifts, [orphan], mode="ZONE")
    assert len(cells) == 1
    assert "match no shifts" in caplog.text


def test_county_mode_colour_ignores_dispatcher_but_reports_the_gap(make_shift):
    shifts = [make_shift("North", [True]), make_shift("South", [True])]
    (cell,) = build_coverage_grid(shifts, [], mode="COUNTY")
    assert cell.status is CoverageStatus.GREEN
    assert cell.gaps.needs_dispatcher is True

    (cell,) = build_coverage_grid(shifts, [_dispatcher()], mode="COUNTY")
    assert cell.status is CoverageStatus.GREEN
    assert cell.gaps.needs_dispatcher is False


def test_county_mode_unmatched_dispatcher_is_not_warned_about(make_shift, caplog):
    shifts = [make_shift("North", [True])]
    with caplog.at_level("WARNING", logger="shiftgrid.coverage"):
        build_coverage_grid(shifts, [_dispatcher(start=14, end=18)], mode="COUNTY")
    assert "match no shifts" not in caplog.text


def test_county_mode_partial_and_none(make_shift):
    partial = [make_shift("North", [True]), make_shift("South", [False])]
    (cell,) = build_coverage_grid(partial, [_dispatcher()], mode="REGIONAL")
    assert cell.status is CoverageStatus.YELLOW

    unled = [make_shift("North", [False]), make_shift("South")]
    (cell,) = build_coverage_grid(unled, [_dispatcher()], mode="county")
    assert cell.status is CoverageStatus.GRAY


def test_mode_defaults_to_config(make_shift):
    shifts = [make_shift("North", [True])]
    (cell,) = build_coverage_grid(
        shifts, [], config=Config(DISPATCHER_SCHEDULING_MODE="COUNTY")
    )
    assert cell.status is CoverageStatus.GREEN


def test_unknown_mode_raises(make_shift):
    with pytest.raises(ValueError, match="scheduling mode"):
        build_coverage_grid([make_shift("North", [True])], mode="STATE")


def test_cell_to_dict_shape(make_shift):
    (cell,) = build_coverage_grid(
        [make_shift("North", [True])], [_dispatcher(name="Dee")], mode="ZONE"
    )
    payload = cell.to_dict()
    assert payload["status"] == "GREEN"
    assert payload["coverage"] == "full"
    assert payload["dispatcher"]["name"] == "Dee"
    assert payload["gaps"] == {"needsDispatcher": False, "zonesNeedingLeads": []}


# ---------- classify_slot ----------


def test_slot_full_when_every_need_is_filled():
    req = SlotRequirement(min_volunteers=2, needs_lead=True, needs_dispatcher=True)
    signups = [
        SlotSignup("a", "DISPATCHER"),
        SlotSignup("b", "zone_lead"),
        SlotSignup("c", "VERIFIER"),
        SlotSignup("d", "VERIFIER"),
    ]
    assert classify_slot(req, signups) is CoverageStatus.GREEN


def test_slot_partial_and_empty():
    req = SlotRequirement(min_volunteers=2, needs_lead=True)
    assert classify_slot(req, [SlotSignup("c", "VERIFIER")]) is CoverageStatus.YELLOW
    assert classify_slot(req, []) is CoverageStatus.GRAY


def test_second_dispatcher_does_not_stand_in_for_a_verifier():
    req = SlotRequirement(min_volunteers=1, needs_dispatcher=True)
    signups = [SlotSignup("a", "DISPATCHER"), SlotSignup("b", "DISPATCHER")]
    assert classify_slot(req, signups) is CoverageStatus.YELLOW


def test_slot_with_no_requirements_is_full():
    assert classify_slot(SlotRequirement(), []) is CoverageStatus.GREEN


def test_slot_validation():
    with pytest.raises(ValueError):
        SlotRequirement(min_volunteers=-1)
    with pytest.raises(ValueError, match="signup role"):
        SlotSignup("a", "DRIVER")


# ---------- build_dispatcher_rows ----------


def test_zone_mode_has_no_dispatcher_rows():
    assert build_dispatcher_rows([_dispatcher()], "ZONE") == []


def test_county_rows_cover_the_grid_and_pick_a_primary():
    dispatchers = [
        _dispatcher(user_id="backup", is_backup=True),
        _dispatcher(user_id="primary"),
        _dispatcher(county=REGIONAL_COUNTY, user_id="regional"),
    ]
    rows = build_dispatcher_rows(
        dispatchers,
        "COUNTY",
        counties=["Durham", "Orange"],
        dates=["2024-12-09"],
        time_blocks=[(6, 10)],
    )

    assert [(r.county, r.status) for r in rows] == [
        ("Durham", CoverageStatus.GREEN),
        ("Orange", CoverageStatus.GRAY),
    ]
    durham = rows[0]
    assert durham.dispatcher is not None and durham.dispatcher.user_id == "primary"
    assert [d.user_id for d in durham.backup_dispatchers] == ["backup"]
    assert rows[1].to_dict()["coverage"] == "none"


def test_backup_alone_leaves_row_uncovered():
    (row,) = build_dispatcher_rows([_dispatcher(is_backup=True)], "COUNTY")
    assert row.status is CoverageStatus.GRAY
    assert row.dispatcher is None


def test_county_row_exists_even_without_shifts(make_shift):
    # the assignment has no shifts in its block, so it only shows up as a row
    orphan = _dispatcher(start=14, end=18)
    assert build_coverage_grid([make_shift("North", [True])], [orphan], mode="COUNTY")
    (row,) = build_dispatcher_rows([orphan], "COUNTY")
    assert (row.start_hour, row.end_hour, row.status) == (14, 18, CoverageStatus.GREEN)


def test_regional_mode_adds_region_wide_rows_last():
    dispatchers = [_dispatcher(county=REGIONAL_COUNTY, user_id="regional", name="Rae")]
    rows = build_dispatcher_rows(
        dispatchers,
        "regional",
        counties=["Durham"],
        dates=["2024-12-09"],
        time_blocks=[(6, 10), (10, 14)],
    )

    assert [(r.county, r.start_hour, r.status) for r in rows] == [
        ("Durham", 6, CoverageStatus.GRAY),
        ("Durham", 10, CoverageStatus.GRAY),
        (REGIONAL_COUNTY, 6, CoverageStatus.GREEN),
        (REGIONAL_COUNTY, 10, CoverageStatus.GRAY),
    ]
    assert rows[2].to_dict()["dispatcher"]["name"] == "Rae"


def test_dispatcher_rows_mode_defaults_to_config_and_rejects_unknown():
    config = Config(DISPATCHER_SCHEDULING_MODE="COUNTY")
    assert len(build_dispatcher_rows([_dispatcher()], config=config)) == 1
    with pytest.raises(ValueError, match="scheduling mode"):
        build_dispatcher_rows([], "STATE")
