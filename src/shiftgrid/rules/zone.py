from __future__ import annotations

from typing import Optional

from shiftgrid.result_types import CoverageBlock, CoverageStatus
from shiftgrid.rules.base import CoverageRule
from shiftgrid.rules.helpers import led_shifts, staffed_shifts


class ZoneCoverageRule(CoverageRule):
    """
    Cell coverage = dispatcher + a zone lead on every shift.

      GREEN  : dispatcher present and every shift has >= 1 zone lead
      YELLOW : someone is signed up, but the dispatcher or a lead is missing
      GRAY   : no counted volunteers on any shift in the block

    An empty shift next to a staffed one counts as "missing lead", so a block
    mixing leaderless and empty shifts is YELLOW. A dispatcher alone does not
    lift an unstaffed block out of GRAY.
    """

    name = "ZoneCoverage"
    modes = ("ZONE",)

    def classify(self, block: CoverageBlock) -> Optional[CoverageStatus]:
        if not block.shifts:
            return None
        if not staffed_shifts(block):
            return CoverageStatus.GRAY
        all_led = len(led_shifts(block)) == len(block.shifts)
        if block.has_dispatcher and all_led:
            return CoverageStatus.GREEN
        return CoverageStatus.YELLOW
