from __future__ import annotations

from .data_models import CoverageSummary
from .metrics import cells_to_frame, coverage_matrix, coverage_summary
from .plots import show_coverage_grid
from .text_report import render_text_report

__all__ = [
    "CoverageSummary",
    "cells_to_frame",
    "coverage_matrix",
    "coverage_summary",
    "render_text_report",
    "show_coverage_grid",
]
