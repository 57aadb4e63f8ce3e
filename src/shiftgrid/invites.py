from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shiftgrid.config import cfg
from shiftgrid.slots import ContiguousBlock


def format_hour(hour: int) -> str:
    """0 -> 12am, 6 -> 6am, 12 -> 12pm, 18 -> 6pm, 24 -> 12am."""
    h = int(hour) % 24
    if h == 0:
        return "12am"
    if h == 12:
        return "12pm"
    if h < 12:
        return f"{h}am"
    return f"{h - 12}pm"


def block_label(block: ContiguousBlock) -> str:
    return f"{format_hour(block.start_hour)} - {format_hour(block.end_hour)}"


def _zone(timezone: Optional[str]) -> ZoneInfo:
    name = timezone or cfg.TIMEZONE
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        raise ValueError(f"Unknown time zone {name!r}") from None


def _local(day: date, hour: int, tz: ZoneInfo) -> datetime:
    # hour 24 is midnight of the following day
    return datetime.combine(day + timedelta(days=hour // 24), time(hour % 24), tzinfo=tz)


def block_window(
    block: ContiguousBlock, timezone: Optional[str] = None
) -> tuple[datetime, datetime]:
    """Start/end of a block as aware datetimes in the organisation time zone."""
    tz = _zone(timezone)
    day = date.fromisoformat(block.date)
    return _local(day, block.start_hour, tz), _local(day, block.end_hour, tz)


def invite_windows(
    blocks: Iterable[ContiguousBlock], timezone: Optional[str] = None
) -> list[dict[str, Any]]:
    """One record per block, as used to build calendar invite emails."""
    out: list[dict[str, Any]] = []
    for block in blocks:
        start, end = block_window(block, timezone)
        out.append(
            {
                **block.to_dict(),
                "label": block_label(block),
                "start": start.isoformat(),
                "end": end.isoformat(),
                "durationHours": block.duration_hours,
            }
        )
    return out
