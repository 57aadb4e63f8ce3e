from __future__ import annotations

import pytest

from shiftgrid.coverage import build_coverage_grid
from shiftgrid.shifts import DispatcherAssignment


@pytest.fixture
def sample_cells(make_shift):
    """Durham: one GREEN and one YELLOW block on day one; Orange: one GRAY block on day two."""
    shifts = [
        make_shift("North", [True]),
        make_shift("South", [True, False]),
        make_shift("North", [False], start_hour=10, end_hour=14),
        make_shift("Chapel Hill", county="Orange", date="2024-12-10"),
    ]
    dispatchers = [
        DispatcherAssignment(
            user_id="d1", county="Durham", date="2024-12-09", start_hour=6, end_hour=10
        )
    ]
    return build_coverage_grid(shifts, dispatchers, mode="ZONE")
