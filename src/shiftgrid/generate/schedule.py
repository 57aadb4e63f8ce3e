# src/shiftgrid/generate/schedule.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Tuple

import numpy as np

from shiftgrid.result_types import CoverageStatus
from shiftgrid.shifts import BlockKey, DispatcherAssignment, Shift, ShiftVolunteer


# ----------------------------
# Configuration container
# ----------------------------
@dataclass(slots=True)
class ScheduleGenConfig:
    """
    Configuration for generation of a synthetic week of shifts.
    """

    start_date: date = date(2024, 12, 9)  # Monday
    days: int = 7

    # county -> zones in that county
    zones: dict[str, Tuple[str, ...]] = field(
        default_factory=lambda: {
            "Durham": ("Durham North", "Durham South"),
            "Orange": ("Chapel Hill", "Hillsborough", "Carrboro"),
            "Wake": ("Raleigh Central", "Cary"),
        }
    )

    # (start_hour, end_hour) blocks run every day
    time_blocks: Tuple[Tuple[int, int], ...] = ((6, 10), (10, 14), (14, 18))

    # Target colour mix for each cell: (GREEN, YELLOW, GRAY), must sum to 1.0
    status_probs: Tuple[float, float, float] = (0.34, 0.33, 0.33)

    # Non-lead volunteers added to each staffed shift
    min_extra_volunteers: int = 0
    max_extra_volunteers: int = 2

    # Probability that a generated dispatcher also gets a backup
    backup_dispatcher_rate: float = 0.10

    # RNG seed
    seed: Optional[int] = 7

    def validate(self) -> None:
        if self.days <= 0:
            raise ValueError("days must be > 0.")
        if not self.zones or any(not z for z in self.zones.values()):
            raise ValueError("zones must map every county to at least one zone.")
        for start, end in self.time_blocks:
            if not (0 <= start < end <= 24):
                raise ValueError(f"Invalid time block {start}-{end}.")
        if len(self.status_probs) != 3:
            raise ValueError("status_probs needs (GREEN, YELLOW, GRAY) entries.")
        if any(p < 0 for p in self.status_probs):
            raise ValueError("status_probs must be non-negative.")
        if not np.isclose(sum(self.status_probs), 1.0, atol=1e-9):
            raise ValueError("status_probs must sum to 1.0")
        if not (0 <= self.min_extra_volunteers <= self.max_extra_volunteers):
            raise ValueError(
                "Require 0 <= min_extra_volunteers <= max_extra_volunteers."
            )
        if not (0.0 <= self.backup_dispatcher_rate <= 1.0):
            raise ValueError("backup_dispatcher_rate must be in [0,1].")
        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError("seed must be an int or None.")


@dataclass
class GeneratedWeek:
    shifts: list[Shift]
    dispatchers: list[DispatcherAssignment]
    # colour each (county, date, start, end) cell was built to show in ZONE mode
    targets: dict[BlockKey, CoverageStatus]


# ----------------------------
# Generation helpers
# ----------------------------
def _rng(seed: Optional[int]) -> np.random.Generator:
    return np.random.default_rng(seed) if seed is not None else np.random.default_rng()


_STATUS_ORDER = (CoverageStatus.GREEN, CoverageStatus.YELLOW, CoverageStatus.GRAY)


class _People:
    """Hands out sequential volunteer ids."""

    def __init__(self) -> None:
        self._n = 0

    def next(self, is_zone_lead: bool = False) -> ShiftVolunteer:
        self._n += 1
        return ShiftVolunteer(
            user_id=f"vol-{self._n}",
            name=f"Volunteer {self._n}",
            is_zone_lead=is_zone_lead,
        )


# ----------------------------
# Core API
# ----------------------------
def create_week(cfg: ScheduleGenConfig) -> GeneratedWeek:
    """
    Build shifts and dispatcher assignments whose cells hit a target colour.

    GREEN cells get a dispatcher and a lead on every shift. YELLOW cells are
    staffed but either lack the dispatcher or leave one shift without a lead.
    GRAY cells have shifts with nobody signed up.
    """
    cfg.validate()
    g = _rng(cfg.seed)
    people = _People()
    probs = np.array(cfg.status_probs, dtype=float)

    shifts: list[Shift] = []
    dispatchers: list[DispatcherAssignment] = []
    targets: dict[BlockKey, CoverageStatus] = {}
    shift_no = 0

    for d in range(cfg.days):
        day = (cfg.start_date + timedelta(days=d)).isoformat()
        for county, zones in cfg.zones.items():
            for start, end in cfg.time_blocks:
                target = _STATUS_ORDER[int(g.choice(3, p=probs))]
                targets[(county, day, start, end)] = target

                if target is CoverageStatus.YELLOW:
                    drop_dispatcher = bool(g.random() < 0.5)
                    leaderless = -1 if drop_dispatcher else int(g.integers(len(zones)))
                else:
                    drop_dispatcher = target is CoverageStatus.GRAY
                    leaderless = -1

                for z, zone in enumerate(zones):
                    shift_no += 1
                    vols: list[ShiftVolunteer] = []
                    if target is not CoverageStatus.GRAY:
                        vols.append(people.next(is_zone_lead=z != leaderless))
                        extra = int(
                            g.integers(
                                cfg.min_extra_volunteers, cfg.max_extra_volunteers + 1
                            )
                        )
                        vols.extend(people.next() for _ in range(extra))
                    shifts.append(
                        Shift(
                            id=f"shift-{shift_no}",
                            zone=zone,
                            county=county,
                            date=day,
                            start_hour=start,
                            end_hour=end,
                            volunteers=vols,
                        )
                    )

                if drop_dispatcher:
                    continue
                dispatcher = people.next()
                dispatchers.append(
                    DispatcherAssignment(
                        user_id=dispatcher.user_id,
                        name=dispatcher.name,
                        county=county,
                        date=day,
                        start_hour=start,
                        end_hour=end,
                    )
                )
                if g.random() < cfg.backup_dispatcher_rate:
                    backup = people.next()
                    dispatchers.append(
                        DispatcherAssignment(
                            user_id=backup.user_id,
                            name=backup.name,
                            county=county,
                            date=day,
                            start_hour=start,
                            end_hour=end,
                            is_backup=True,
                        )
                    )

    return GeneratedWeek(shifts=shifts, dispatchers=dispatchers, targets=targets)
