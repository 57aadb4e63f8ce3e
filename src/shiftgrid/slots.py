"""
Contiguous slot grouping.

Coverage signups arrive as one record per hour. Calendar invites are sent per
contiguous block instead, so back-to-back hours on the same date are merged
into a single (date, start_hour, end_hour) range.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional
from zoneinfo import ZoneInfo

from shiftgrid.config import cfg

logger = logging.getLogger(__name__)


class SlotValidationError(ValueError):
    """Raised for slots with a malformed date or an invalid hour range."""


def _local_date(value: datetime) -> date:
    # aware timestamps are read in the organisation's time zone
    if value.tzinfo is not None:
        value = value.astimezone(ZoneInfo(cfg.TIMEZONE))
    return value.date()


def normalize_date(value: Any) -> str:
    """
    Return an ISO YYYY-MM-DD string for a date, datetime or ISO string.

    Strings must be a whole ISO date or ISO timestamp; anything else raises.
    """
    if isinstance(value, datetime):
        return _local_date(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            pass
        try:
            return _local_date(datetime.fromisoformat(text)).isoformat()
        except ValueError:
            raise SlotValidationError(
                f"Invalid date {value!r}; expected YYYY-MM-DD."
            ) from None
    raise SlotValidationError(
        f"Slot dates must be str, datetime.date or datetime.datetime; got {type(value)!r}"
    )


def validate_hours(start_hour: Any, end_hour: Any) -> tuple[int, int]:
    """Check 0 <= start < end <= 24 and return the hours as ints."""
    for name, val in (("start_hour", start_hour), ("end_hour", end_hour)):
        if isinstance(val, bool) or not isinstance(val, int):
            raise SlotValidationError(f"{name} must be an int; got {val!r}")
    lo, hi = int(cfg.MIN_HOUR), int(cfg.MAX_HOUR)
    if not (lo <= start_hour <= hi and lo <= end_hour <= hi):
        raise SlotValidationError(
            f"Hours must be within [{lo}, {hi}]; got {start_hour}-{end_hour}"
        )
    if start_hour >= end_hour:
        raise SlotValidationError(
            f"start_hour must be before end_hour; got {start_hour}-{end_hour}"
        )
    return int(start_hour), int(end_hour)


@dataclass(frozen=True)
class TimeSlot:
    """A signup for [start_hour, end_hour) on one date. end_hour defaults to start + 1."""

    date: str
    start_hour: int
    end_hour: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", normalize_date(self.date))
        end = self.end_hour
        if end is None and isinstance(self.start_hour, int):
            end = self.start_hour + 1
        start, end = validate_hours(self.start_hour, end)
        object.__setattr__(self, "end_hour", end)

    def hours(self) -> range:
        return range(self.start_hour, int(self.end_hour))  # type: ignore[arg-type]

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> TimeSlot:
        """
        Build a slot from a JSON-style record.

        Accepts camelCase (startHour/endHour) or snake_case keys.
        """
        keys = {str(k).lower().replace("_", ""): k for k in raw.keys()}
        date_key = keys.get("date")
        start_key = keys.get("starthour")
        end_key = keys.get("endhour")
        if date_key is None or start_key is None:
            raise SlotValidationError(
                f"Slot records need 'date' and 'startHour'; got keys {sorted(map(str, raw))}"
            )
        return cls(
            date=raw[date_key],
            start_hour=raw[start_key],
            end_hour=raw[end_key] if end_key is not None else None,
        )


@dataclass(frozen=True)
class ContiguousBlock:
    date: str
    start_hour: int
    end_hour: int

    @property
    def duration_hours(self) -> int:
        return self.end_hour - self.start_hour

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "startHour": self.start_hour,
            "endHour": self.end_hour,
        }


def _to_slot(item: TimeSlot | ContiguousBlock | Mapping[str, Any]) -> TimeSlot:
    if isinstance(item, TimeSlot):
        return item
    if isinstance(item, ContiguousBlock):
        return TimeSlot(item.date, item.start_hour, item.end_hour)
    if isinstance(item, Mapping):
        return TimeSlot.from_mapping(item)
    raise SlotValidationError(
        f"Slots must be TimeSlot, ContiguousBlock or mapping; got {type(item)!r}"
    )


def group_contiguous_slots(
    slots: Iterable[TimeSlot | ContiguousBlock | Mapping[str, Any]],
) -> list[ContiguousBlock]:
    """
    Merge slots into maximal contiguous blocks per date.

    Every slot is validated before any grouping happens. Each slot covers the
    hours [start, end); duplicate hours on a date collapse. Within a date the
    sorted hours are walked, extending the running block while the next hour
    equals the block's end. Blocks never cross dates and are returned sorted
    by (date, start_hour).
    """
    parsed = [_to_slot(s) for s in slots]
    if not parsed:
        return []

    hours_by_date: dict[str, set[int]] = {}
    for slot in parsed:
        hours_by_date.setdefault(slot.date, set()).update(slot.hours())

    blocks: list[ContiguousBlock] = []
    for day, hour_set in hours_by_date.items():
        hours = sorted(hour_set)
        block_start = hours[0]
        block_end = hours[0] + 1
        for h in hours[1:]:
            if h == block_end:
                block_end = h + 1
            else:
                blocks.append(ContiguousBlock(day, block_start, block_end))
                block_start, block_end = h, h + 1
        blocks.append(ContiguousBlock(day, block_start, block_end))

    blocks.sort(key=lambda b: (b.date, b.start_hour))
    logger.debug("Grouped %d slots into %d blocks", len(parsed), len(blocks))
    return blocks
