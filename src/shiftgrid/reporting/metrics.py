from __future__ import annotations

from typing import Sequence

import pandas as pd

from shiftgrid.invites import format_hour
from shiftgrid.result_types import CoverageCell, CoverageStatus

from .data_models import CoverageSummary

FRAME_COLUMNS = [
    "county",
    "date",
    "start_hour",
    "end_hour",
    "time_block",
    "status",
    "needs_dispatcher",
    "zones_needing_leads",
    "n_zones",
]


def _time_block(start: int, end: int) -> str:
    return f"{format_hour(start)} - {format_hour(end)}"


def cells_to_frame(cells: Sequence[CoverageCell]) -> pd.DataFrame:
    """One row per coverage cell."""
    if not cells:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    rows = [
        {
            "county": c.county,
            "date": c.date,
            "start_hour": c.start_hour,
            "end_hour": c.end_hour,
            "time_block": _time_block(c.start_hour, c.end_hour),
            "status": c.status.value,
            "needs_dispatcher": c.gaps.needs_dispatcher,
            "zones_needing_leads": len(c.gaps.zones_needing_leads),
            "n_zones": len(c.zones),
        }
        for c in cells
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def coverage_matrix(cells: Sequence[CoverageCell], county: str | None = None) -> pd.DataFrame:
    """
    Pivot of status names: rows are (county, time block), columns are dates.

    Cells absent from the grid (no shifts) are left as NaN.
    """
    df = cells_to_frame(cells)
    if county is not None:
        df = df[df["county"] == county]
    if df.empty:
        return pd.DataFrame()
    df = df.sort_values(["county", "start_hour", "date"])
    matrix = df.pivot_table(
        index=["county", "start_hour", "time_block"],
        columns="date",
        values="status",
        aggfunc="first",
    )
    matrix.index = matrix.index.droplevel("start_hour")
    return matrix


def coverage_summary(cells: Sequence[CoverageCell]) -> CoverageSummary:
    counts = {status: 0 for status in CoverageStatus}
    for c in cells:
        counts[c.status] += 1
    return CoverageSummary(
        total_cells=len(cells),
        green=counts[CoverageStatus.GREEN],
        yellow=counts[CoverageStatus.YELLOW],
        gray=counts[CoverageStatus.GRAY],
        cells_needing_dispatcher=sum(1 for c in cells if c.gaps.needs_dispatcher),
        zones_needing_leads=sum(len(c.gaps.zones_needing_leads) for c in cells),
    )
