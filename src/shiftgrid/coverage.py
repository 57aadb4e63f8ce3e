"""
Coverage status for the schedule grid.

A grid cell is one (county, date, time block). Its status is derived from the
cell's shifts on every read:

  GREEN  : fully covered
  YELLOW : partially covered
  GRAY   : nobody signed up

How "fully covered" is defined depends on the dispatcher scheduling mode, see
shiftgrid.rules.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from itertools import product
from typing import Any, Iterable, Optional, Sequence, Type

from shiftgrid.config import SCHEDULING_MODES, Config, cfg
from shiftgrid.result_types import (
    REGIONAL_COUNTY,
    CoverageBlock,
    CoverageCell,
    CoverageGaps,
    CoverageStatus,
    DispatcherRow,
)
from shiftgrid.rules.base import CoverageRule, RuleSpec
from shiftgrid.rules.helpers import zones_needing_leads
from shiftgrid.rules.registry import rule_for_mode
from shiftgrid.rules.zone import ZoneCoverageRule
from shiftgrid.shifts import BlockKey, DispatcherAssignment, Shift
from shiftgrid.slots import normalize_date, validate_hours

logger = logging.getLogger(__name__)

SIGNUP_ROLES: tuple[str, ...] = ("DISPATCHER", "ZONE_LEAD", "VERIFIER")


def _statuses(
    statuses: Optional[Iterable[str]], config: Optional[Config] = None
) -> tuple[str, ...]:
    if statuses is not None:
        return tuple(s.upper() for s in statuses)
    return tuple((config or cfg).COUNTED_RSVP_STATUSES)


def _mode(mode: Optional[str], config: Config) -> str:
    return str(mode or config.DISPATCHER_SCHEDULING_MODE).strip().upper()


def _split_dispatchers(
    assigned: Sequence[DispatcherAssignment],
) -> tuple[Optional[DispatcherAssignment], list[DispatcherAssignment]]:
    """First non-backup assignment is primary; every backup is listed after it."""
    primary = next((d for d in assigned if not d.is_backup), None)
    return primary, [d for d in assigned if d.is_backup]


def classify_block(
    shifts: Sequence[Shift],
    has_dispatcher: bool,
    *,
    statuses: Optional[Iterable[str]] = None,
) -> Optional[CoverageStatus]:
    """
    Classify one time block using dispatcher + zone-lead coverage.

    Returns None when the block has no shifts; callers skip such blocks.
    """
    block = CoverageBlock(
        shifts=list(shifts),
        has_dispatcher=bool(has_dispatcher),
        statuses=_statuses(statuses),
    )
    return ZoneCoverageRule().classify(block)


def find_gaps(
    shifts: Sequence[Shift],
    has_dispatcher: bool,
    *,
    statuses: Optional[Iterable[str]] = None,
    rule: Optional[CoverageRule] = None,
) -> CoverageGaps:
    block = CoverageBlock(
        shifts=list(shifts),
        has_dispatcher=bool(has_dispatcher),
        statuses=_statuses(statuses),
    )
    active = rule or ZoneCoverageRule()
    return CoverageGaps(
        needs_dispatcher=active.needs_dispatcher(block),
        zones_needing_leads=zones_needing_leads(block),
    )


def build_coverage_grid(
    shifts: Iterable[Shift],
    dispatchers: Iterable[DispatcherAssignment] = (),
    *,
    mode: Optional[str] = None,
    statuses: Optional[Iterable[str]] = None,
    rules: Sequence[RuleSpec | Type[CoverageRule]] | None = None,
    config: Optional[Config] = None,
) -> list[CoverageCell]:
    """
    Build one CoverageCell per (county, date, start, end) that has shifts.

    Cells come from shifts only. In ZONE mode a dispatcher assignment whose
    block has no shifts is ignored with a warning; the other modes report
    such assignments through build_dispatcher_rows. The first non-backup
    dispatcher of a block is primary. Output is sorted by (county, date,
    start_hour).
    """
    config_obj = config or cfg
    mode_key = _mode(mode, config_obj)
    rule = rule_for_mode(mode_key, rules)
    counted = _statuses(statuses, config_obj)

    shifts_by_block: dict[BlockKey, list[Shift]] = defaultdict(list)
    for shift in shifts:
        shifts_by_block[shift.block_key].append(shift)

    dispatchers_by_block: dict[BlockKey, list[DispatcherAssignment]] = defaultdict(
        list
    )
    for assignment in dispatchers:
        dispatchers_by_block[assignment.block_key].append(assignment)

    # outside ZONE mode, unmatched assignments still appear in the dispatcher rows
    orphaned = set(dispatchers_by_block) - set(shifts_by_block)
    if orphaned and mode_key == "ZONE":
        logger.warning(
            "%d dispatcher assignment block(s) match no shifts and were ignored",
            len(orphaned),
        )

    cells: list[CoverageCell] = []
    for key in sorted(shifts_by_block):
        county, day, start, end = key
        block_shifts = shifts_by_block[key]
        assigned = dispatchers_by_block.get(key, [])
        primary, backups = _split_dispatchers(assigned)

        block = CoverageBlock(
            shifts=block_shifts,
            has_dispatcher=primary is not None,
            statuses=counted,
        )
        status = rule.classify(block)
        if status is None:
            logger.debug("Skipping block %s with no shifts", key)
            continue

        zones: list[str] = []
        for shift in block_shifts:
            if shift.zone not in zones:
                zones.append(shift.zone)

        cells.append(
            CoverageCell(
                county=county,
                date=day,
                start_hour=start,
                end_hour=end,
                status=status,
                gaps=CoverageGaps(
                    needs_dispatcher=rule.needs_dispatcher(block),
                    zones_needing_leads=zones_needing_leads(block),
                ),
                dispatcher=primary,
                backup_dispatchers=backups,
                zones=zones,
            )
        )
    return cells


def build_dispatcher_rows(
    dispatchers: Iterable[DispatcherAssignment],
    mode: Optional[str] = None,
    *,
    counties: Iterable[str] = (),
    dates: Iterable[Any] = (),
    time_blocks: Iterable[tuple[int, int]] = (),
    config: Optional[Config] = None,
) -> list[DispatcherRow]:
    """
    Build the separate dispatcher rows shown in COUNTY and REGIONAL modes.

    One row per (county, date, block) that has an assignment, plus every
    combination of the given counties, dates and time blocks so empty slots
    show up as GRAY. REGIONAL mode adds the region-wide rows (county
    REGIONAL_COUNTY), which COUNTY mode ignores. ZONE mode has no dispatcher
    rows since the dispatcher is part of each cell.
    """
    mode_key = _mode(mode, config or cfg)
    if mode_key not in SCHEDULING_MODES:
        raise ValueError(f"Unknown dispatcher scheduling mode {mode!r}")
    if mode_key == "ZONE":
        return []
    regional = mode_key == "REGIONAL"

    by_block: dict[BlockKey, list[DispatcherAssignment]] = defaultdict(list)
    for assignment in dispatchers:
        if assignment.county == REGIONAL_COUNTY and not regional:
            logger.debug("Ignoring region-wide assignment %s in COUNTY mode", assignment)
            continue
        by_block[assignment.block_key].append(assignment)

    days = [normalize_date(d) for d in dates]
    blocks = [validate_hours(start, end) for start, end in time_blocks]
    row_counties = [c for c in counties if c != REGIONAL_COUNTY]
    if regional:
        row_counties.append(REGIONAL_COUNTY)

    keys = set(by_block)
    keys.update(
        (county, day, start, end)
        for county, day, (start, end) in product(row_counties, days, blocks)
    )

    rows: list[DispatcherRow] = []
    for key in sorted(keys, key=lambda k: (k[0] == REGIONAL_COUNTY, k)):
        county, day, start, end = key
        primary, backups = _split_dispatchers(by_block.get(key, []))
        rows.append(
            DispatcherRow(
                county=county,
                date=day,
                start_hour=start,
                end_hour=end,
                status=CoverageStatus.GREEN if primary else CoverageStatus.GRAY,
                dispatcher=primary,
                backup_dispatchers=backups,
            )
        )
    return rows


@dataclass(frozen=True)
class SlotRequirement:
    """Configured needs of one coverage slot (per zone, day and start hour)."""

    min_volunteers: int = 0
    needs_lead: bool = False
    needs_dispatcher: bool = False

    def __post_init__(self) -> None:
        if self.min_volunteers < 0:
            raise ValueError("min_volunteers must be non-negative.")

    @property
    def total_needed(self) -> int:
        return (
            int(self.needs_dispatcher) + int(self.needs_lead) + self.min_volunteers
        )


@dataclass(frozen=True)
class SlotSignup:
    user_id: str
    role_type: str

    def __post_init__(self) -> None:
        role = str(self.role_type).strip().upper()
        if role not in SIGNUP_ROLES:
            raise ValueError(
                f"Unknown signup role {self.role_type!r}; expected one of {SIGNUP_ROLES}"
            )
        object.__setattr__(self, "role_type", role)


def classify_slot(
    requirement: SlotRequirement, signups: Iterable[SlotSignup]
) -> CoverageStatus:
    """
    Compare a slot's filled positions against its configured needs.

    One dispatcher and one lead count at most once each; every verifier counts.
    A slot with nothing required is GREEN.
    """
    signups = list(signups)
    has_dispatcher = any(s.role_type == "DISPATCHER" for s in signups)
    has_lead = any(s.role_type == "ZONE_LEAD" for s in signups)
    verifiers = sum(1 for s in signups if s.role_type == "VERIFIER")

    filled = int(has_dispatcher) + int(has_lead) + verifiers
    if filled >= requirement.total_needed:
        return CoverageStatus.GREEN
    if filled > 0:
        return CoverageStatus.YELLOW
    return CoverageStatus.GRAY
