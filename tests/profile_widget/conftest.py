# tests/profile_widget/conftest.py
"""Pytest configuration and shared fixtures for profile_widget tests."""
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

MINUTES = 1440
DAYS = 14
ESTRUS_DAYS = {2, 6, 10, 14}


def pytest_configure() -> None:
    # Ensure mousecycle package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def male_df() -> pd.DataFrame:
    """m1 reads 37.0 on every minute of 14 days."""
    return pd.DataFrame({"m1": np.full(DAYS * MINUTES, 37.0)})


@pytest.fixture
def female_df() -> pd.DataFrame:
    """f1 reads 39.0 on estrus days (2, 6, 10, 14) and 36.0 otherwise."""
    day_values = [39.0 if d in ESTRUS_DAYS else 36.0 for d in range(1, DAYS + 1)]
    return pd.DataFrame({"f1": np.repeat(np.asarray(day_values), MINUTES)})


@pytest.fixture
def example_profiles(male_df, female_df):
    """Profiles of the two-subject example, male first."""
    from mousecycle.profile_widget.aggregator import aggregate
    from mousecycle.profile_widget.profile import Sex

    return aggregate(male_df, Sex.MALE) + aggregate(female_df, Sex.FEMALE)


@pytest.fixture
def profiles_by_metric(example_profiles):
    from mousecycle.profile_widget.profile import Metric

    return {Metric.TEMPERATURE: example_profiles}
