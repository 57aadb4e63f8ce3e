"""
Build and report a week's coverage grid.

Usage via cli:
    shiftgrid --mode ZONE --seed 3
    shiftgrid --mode COUNTY --no-plot
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from shiftgrid.config import SCHEDULING_MODES, Config, cfg
from shiftgrid.coverage import build_coverage_grid, build_dispatcher_rows
from shiftgrid.generate.schedule import ScheduleGenConfig, create_week
from shiftgrid.reporting import (
    CoverageSummary,
    coverage_summary,
    render_text_report,
    show_coverage_grid,
)
from shiftgrid.result_types import CoverageCell, DispatcherRow
from shiftgrid.shifts import DispatcherAssignment, Shift

logger = logging.getLogger(__name__)


@dataclass
class CoverageReport:
    cells: list[CoverageCell]
    summary: CoverageSummary
    # empty in ZONE mode
    dispatcher_rows: list[DispatcherRow] = field(default_factory=list)


def run_coverage_report(
    shifts: Iterable[Shift],
    dispatchers: Iterable[DispatcherAssignment] = (),
    config: Config | None = None,
    mode: str | None = None,
    enable_reporting: bool = True,
    enable_plots: bool = True,
) -> CoverageReport:
    """
    Classify every cell of the grid and optionally print / plot it.

    Parameters
    ----------
    config:
        Defaults to `shiftgrid.config.cfg` when omitted; validated before use.
    mode:
        Dispatcher scheduling mode; falls back to the config's mode.
    enable_reporting:
        When False, skips the text report.
    enable_plots:
        When False, skips the coverage heat-map.
    """
    cfg_obj = config or cfg
    cfg_obj.validate()

    shifts = list(shifts)
    dispatchers = list(dispatchers)
    cells = build_coverage_grid(shifts, dispatchers, mode=mode, config=cfg_obj)
    dispatcher_rows = build_dispatcher_rows(
        dispatchers,
        mode,
        counties=sorted({s.county for s in shifts}),
        dates=sorted({s.date for s in shifts}),
        time_blocks=sorted({(s.start_hour, s.end_hour) for s in shifts}),
        config=cfg_obj,
    )
    summary = coverage_summary(cells)
    logger.info(
        "Built %d coverage cells (%d green, %d yellow, %d gray)",
        summary.total_cells,
        summary.green,
        summary.yellow,
        summary.gray,
    )

    if enable_reporting:
        render_text_report(cells, dispatcher_rows=dispatcher_rows)
    if enable_plots:
        show_coverage_grid(cells)

    return CoverageReport(
        cells=cells, summary=summary, dispatcher_rows=dispatcher_rows
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="shiftgrid",
        description="Generate a synthetic week of shifts and report its coverage grid.",
    )
    parser.add_argument(
        "--mode",
        choices=SCHEDULING_MODES,
        default=None,
        help="Dispatcher scheduling mode (default: from environment/config).",
    )
    parser.add_argument("--seed", type=int, default=7, help="Random seed.")
    parser.add_argument("--days", type=int, default=7, help="Days to generate.")
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=date(2024, 12, 9),
        help="First date (YYYY-MM-DD).",
    )
    parser.add_argument("--no-plot", action="store_true", help="Skip the heat-map.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> CoverageReport:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    week = create_week(
        ScheduleGenConfig(start_date=args.start, days=args.days, seed=args.seed)
    )
    return run_coverage_report(
        week.shifts,
        week.dispatchers,
        config=cfg,
        mode=args.mode,
        enable_plots=not args.no_plot,
    )


if __name__ == "__main__":
    main()
