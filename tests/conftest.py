# tests/conftest.py
from __future__ import annotations

import os
import random
from pathlib import Path

import numpy as np
import pytest

from shiftgrid.shifts import Shift, ShiftVolunteer


# -----------------------------
# Global, deterministic seeding
# -----------------------------
@pytest.fixture(autouse=True, scope="session")
def _seed_everything() -> None:
    """
    Make tests deterministic across runs. If you need a different seed in a test,
    override locally.
    """
    seed = int(os.environ.get("PYTEST_SEED", "1234"))
    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)


# -----------------------------
# Path helpers
# -----------------------------
@pytest.fixture(scope="session")
def project_root() -> Path:
    """Repository root (where pyproject.toml lives)."""
    return Path(__file__).resolve().parents[1]


# -----------------------------
# Shift builders
# -----------------------------
@pytest.fixture
def make_shift():
    """
    Factory for shifts in one block. `vols` is a list of lead flags, e.g.
    [True, False] -> one lead and one regular volunteer.
    """
    counter = {"n": 0}

    def _make(
        zone: str = "North",
        vols: list[bool] | None = None,
        county: str = "Durham",
        date: str = "2024-12-09",
        start_hour: int = 6,
        end_hour: int = 10,
        status: str = "CONFIRMED",
    ) -> Shift:
        counter["n"] += 1
        n = counter["n"]
        return Shift(
            id=f"s{n}",
            zone=zone,
            county=county,
            date=date,
            start_hour=start_hour,
            end_hour=end_hour,
            volunteers=[
                ShiftVolunteer(user_id=f"u{n}-{i}", is_zone_lead=lead, status=status)
                for i, lead in enumerate(vols or [])
            ],
        )

    return _make
