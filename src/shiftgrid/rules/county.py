from __future__ import annotations

from typing import Optional

from shiftgrid.result_types import CoverageBlock, CoverageStatus
from shiftgrid.rules.base import CoverageRule
from shiftgrid.rules.helpers import led_shifts


class CountyCoverageRule(CoverageRule):
    """
    Cell coverage = zone leads only.

    Used when dispatchers are scheduled per county or region and shown in a
    separate row, so the dispatcher never affects the cell colour. A cell
    without a primary dispatcher is still reported as needing one.
    """

    name = "CountyCoverage"
    modes = ("COUNTY", "REGIONAL")

    def classify(self, block: CoverageBlock) -> Optional[CoverageStatus]:
        if not block.shifts:
            return None
        led = len(led_shifts(block))
        if led == len(block.shifts):
            return CoverageStatus.GREEN
        if led > 0:
            return CoverageStatus.YELLOW
        return CoverageStatus.GRAY
