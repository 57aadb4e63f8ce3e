from __future__ import annotations

from typing import Sequence

from shiftgrid.result_types import CoverageCell, DispatcherRow

from .metrics import coverage_matrix, coverage_summary


def _fmt_pct(x: float, nd: int = 1) -> str:
    return f"{100 * x:.{nd}f}%"


def render_text_report(
    cells: Sequence[CoverageCell],
    *,
    num_print_gaps: int = 10,
    dispatcher_rows: Sequence[DispatcherRow] = (),
) -> None:
    """
    Print the coverage summary, the status grid and the first open gaps.

    In COUNTY and REGIONAL modes the dispatcher rows are summarised last.
    """
    summary = coverage_summary(cells)
    if summary.total_cells == 0:
        print("Coverage: (no cells with shifts)")
        return

    print(
        f"Coverage cells: {summary.total_cells} | "
        f"green={summary.green} | yellow={summary.yellow} | gray={summary.gray} | "
        f"full={_fmt_pct(summary.full_fraction)}"
    )
    print(
        f"Open gaps: {summary.cells_needing_dispatcher} cell(s) need a dispatcher, "
        f"{summary.zones_needing_leads} zone slot(s) need a lead"
    )

    matrix = coverage_matrix(cells)
    if not matrix.empty:
        print("\nStatus grid:")
        print(matrix.fillna("-").to_string())

    gaps = [
        c
        for c in cells
        if c.gaps.needs_dispatcher or c.gaps.zones_needing_leads
    ]
    if gaps:
        print(f"\nFirst {min(num_print_gaps, len(gaps))} cell(s) with gaps:")
        for c in gaps[:num_print_gaps]:
            parts = []
            if c.gaps.needs_dispatcher:
                parts.append("dispatcher")
            if c.gaps.zones_needing_leads:
                parts.append("leads: " + ", ".join(c.gaps.zones_needing_leads))
            print(
                f"  {c.county:<12} {c.date} {c.start_hour:>2}-{c.end_hour:<2} "
                f"[{c.status.value}] needs {'; '.join(parts)}"
            )

    if dispatcher_rows:
        covered = sum(1 for r in dispatcher_rows if r.dispatcher is not None)
        print(f"\nDispatcher rows: {covered}/{len(dispatcher_rows)} covered")
        for r in dispatcher_rows:
            if r.dispatcher is None:
                print(
                    f"  {r.county:<12} {r.date} {r.start_hour:>2}-{r.end_hour:<2} "
                    "needs dispatcher"
                )
