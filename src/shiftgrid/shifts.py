from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from shiftgrid.config import RSVP_STATUSES, cfg
from shiftgrid.slots import normalize_date, validate_hours

BlockKey = tuple[str, str, int, int]  # (county, date, start_hour, end_hour)


def _normalize_status(status: str) -> str:
    norm = str(status).strip().upper()
    if norm not in RSVP_STATUSES:
        raise ValueError(
            f"Unknown RSVP status {status!r}; expected one of {RSVP_STATUSES}"
        )
    return norm


@dataclass(slots=True)
class ShiftVolunteer:
    """An RSVP on a shift. Zone leads are flagged on the RSVP itself."""

    user_id: str
    name: str = ""
    is_zone_lead: bool = False
    status: str = "CONFIRMED"

    def __post_init__(self) -> None:
        self.status = _normalize_status(self.status)
        if not isinstance(self.is_zone_lead, bool):
            raise TypeError("is_zone_lead must be a bool.")

    def counts(self, statuses: Optional[Iterable[str]] = None) -> bool:
        allowed = cfg.COUNTED_RSVP_STATUSES if statuses is None else statuses
        return self.status in set(allowed)


@dataclass(slots=True)
class Shift:
    """
    A shift in one zone for one time block.

    The county groups zones into coverage-grid rows; date is stored as an ISO
    string in the organisation's time zone.
    """

    id: str
    zone: str
    county: str
    date: str
    start_hour: int
    end_hour: int
    volunteers: list[ShiftVolunteer] = field(default_factory=list)

    def __repr__(self) -> str:
        leads = sum(1 for v in self.volunteers if v.is_zone_lead)
        return (
            f"Shift(id={self.id!r}, zone={self.zone!r}, county={self.county!r}, "
            f"{self.date} {self.start_hour}-{self.end_hour}, "
            f"vols={len(self.volunteers)}, leads={leads})"
        )

    def __post_init__(self) -> None:
        self.date = normalize_date(self.date)
        self.start_hour, self.end_hour = validate_hours(self.start_hour, self.end_hour)
        self.volunteers = list(self.volunteers)

    @property
    def block_key(self) -> BlockKey:
        return (self.county, self.date, self.start_hour, self.end_hour)

    def counted_volunteers(
        self, statuses: Optional[Iterable[str]] = None
    ) -> list[ShiftVolunteer]:
        return [v for v in self.volunteers if v.counts(statuses)]

    def has_zone_lead(self, statuses: Optional[Iterable[str]] = None) -> bool:
        return any(v.is_zone_lead for v in self.counted_volunteers(statuses))


@dataclass(slots=True)
class DispatcherAssignment:
    user_id: str
    county: str
    date: str
    start_hour: int
    end_hour: int
    is_backup: bool = False
    name: str = ""
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        self.date = normalize_date(self.date)
        self.start_hour, self.end_hour = validate_hours(self.start_hour, self.end_hour)

    @property
    def block_key(self) -> BlockKey:
        return (self.county, self.date, self.start_hour, self.end_hour)
