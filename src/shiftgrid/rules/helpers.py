from __future__ import annotations

from shiftgrid.result_types import CoverageBlock
from shiftgrid.shifts import Shift


def staffed_shifts(block: CoverageBlock) -> list[Shift]:
    """Shifts with at least one counted volunteer (lead or not)."""
    return [s for s in block.shifts if s.counted_volunteers(block.statuses)]


def led_shifts(block: CoverageBlock) -> list[Shift]:
    return [s for s in block.shifts if s.has_zone_lead(block.statuses)]


def zones_needing_leads(block: CoverageBlock) -> list[str]:
    """Zones (in first-seen order) with a shift that has no counted zone lead."""
    out: list[str] = []
    for shift in block.shifts:
        if not shift.has_zone_lead(block.statuses) and shift.zone not in out:
            out.append(shift.zone)
    return out
