# shiftgrid/result_types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence

from shiftgrid.shifts import DispatcherAssignment, Shift


class CoverageStatus(str, Enum):
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    GRAY = "GRAY"

    @property
    def coverage_label(self) -> str:
        """Label used by the schedule JSON payloads."""
        return _COVERAGE_LABELS[self]


_COVERAGE_LABELS = {
    CoverageStatus.GREEN: "full",
    CoverageStatus.YELLOW: "partial",
    CoverageStatus.GRAY: "none",
}


def _dispatcher_dict(d: DispatcherAssignment) -> dict[str, Any]:
    return {
        "id": d.user_id,
        "name": d.name,
        "isBackup": d.is_backup,
        "notes": d.notes,
    }


@dataclass(frozen=True)
class CoverageBlock:
    """The shifts of one (county, date, time block) cell and whether it has a dispatcher."""

    shifts: Sequence[Shift]
    has_dispatcher: bool = False
    statuses: Optional[tuple[str, ...]] = None


@dataclass(frozen=True)
class CoverageGaps:
    needs_dispatcher: bool
    zones_needing_leads: list[str] = field(default_factory=list)


@dataclass
class CoverageCell:
    """Structured output for one cell of the coverage grid."""

    county: str
    date: str
    start_hour: int
    end_hour: int
    status: CoverageStatus
    gaps: CoverageGaps
    dispatcher: Optional[DispatcherAssignment] = None
    backup_dispatchers: list[DispatcherAssignment] = field(default_factory=list)
    zones: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "county": self.county,
            "date": self.date,
            "startHour": self.start_hour,
            "endHour": self.end_hour,
            "status": self.status.value,
            "coverage": self.status.coverage_label,
            "dispatcher": _dispatcher_dict(self.dispatcher) if self.dispatcher else None,
            "backupDispatchers": [_dispatcher_dict(d) for d in self.backup_dispatchers],
            "zones": list(self.zones),
            "gaps": {
                "needsDispatcher": self.gaps.needs_dispatcher,
                "zonesNeedingLeads": list(self.gaps.zones_needing_leads),
            },
        }


# County value of region-wide dispatcher assignments
REGIONAL_COUNTY = "ALL"


@dataclass
class DispatcherRow:
    """
    The dispatcher row of the grid in COUNTY and REGIONAL modes.

    county is REGIONAL_COUNTY for the region-wide row. A row is GREEN with a
    primary dispatcher and GRAY without one; backups never count.
    """

    county: str
    date: str
    start_hour: int
    end_hour: int
    status: CoverageStatus
    dispatcher: Optional[DispatcherAssignment] = None
    backup_dispatchers: list[DispatcherAssignment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "county": self.county,
            "date": self.date,
            "startHour": self.start_hour,
            "endHour": self.end_hour,
            "status": self.status.value,
            "coverage": self.status.coverage_label,
            "dispatcher": _dispatcher_dict(self.dispatcher) if self.dispatcher else None,
            "backupDispatchers": [_dispatcher_dict(d) for d in self.backup_dispatchers],
        }
