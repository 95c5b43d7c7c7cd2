"""Aggregation of raw per-minute recordings into minute-of-day profiles.

Raw datasets have one row per absolute minute of the recording and one
column per subject. Each subject is folded into a 1440-slot day profile by
averaging same-minute readings across days. Female subjects are split
into estrus and non-estrus days by a fixed 4-day schedule.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

import numpy as np
import pandas as pd

from mousecycle.utils.logging import get_logger
from mousecycle.profile_widget.minute_of_day import (
    ESTRUS_CYCLE_LENGTH,
    ESTRUS_CYCLE_OFFSET,
    MINUTES_PER_DAY,
    RECORDING_DAYS,
)
from mousecycle.profile_widget.profile import CyclePhase, Metric, Profile, Sex

logger = get_logger(__name__)

RawDataset = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]


class MalformedDatasetError(ValueError):
    """Raw dataset cannot be folded into day profiles.

    Raised when the row count is not a positive multiple of 1440, when rows
    do not share the same subject IDs, or when a reading is not numeric.
    """


def is_estrus_day(day: int) -> bool:
    """True if 1-based recording day `day` is an estrus day.

    Days 2, 6, 10, 14, ... are estrus days.
    """
    return (day - ESTRUS_CYCLE_OFFSET) % ESTRUS_CYCLE_LENGTH == 0


def classify_days(n_days: int) -> list[CyclePhase]:
    """Phase of each recording day 1..n_days for a female subject."""
    return [
        CyclePhase.ESTRUS if is_estrus_day(day) else CyclePhase.NON_ESTRUS
        for day in range(1, n_days + 1)
    ]


def _to_frame(raw_rows: RawDataset) -> pd.DataFrame:
    """Coerce raw rows to a DataFrame with one column per subject."""
    if isinstance(raw_rows, pd.DataFrame):
        if raw_rows.columns.duplicated().any():
            dupes = sorted({str(c) for c in raw_rows.columns[raw_rows.columns.duplicated()]})
            raise MalformedDatasetError(f"Duplicate subject IDs in dataset: {dupes}")
        return raw_rows

    rows = list(raw_rows)
    if not rows:
        raise MalformedDatasetError("Dataset has no rows")
    subject_ids = list(rows[0].keys())
    expected = set(subject_ids)
    for i, row in enumerate(rows):
        keys = set(row.keys())
        if keys != expected:
            missing = sorted(str(k) for k in expected - keys)
            extra = sorted(str(k) for k in keys - expected)
            raise MalformedDatasetError(
                f"Row {i} has a different subject-ID set (missing={missing}, extra={extra})"
            )
    return pd.DataFrame.from_records(rows, columns=subject_ids)


def _numeric_readings(df: pd.DataFrame) -> pd.DataFrame:
    """Validate shape and convert every column to float."""
    n_rows = len(df)
    if n_rows == 0 or n_rows % MINUTES_PER_DAY != 0:
        raise MalformedDatasetError(
            f"Dataset must have a positive multiple of {MINUTES_PER_DAY} rows, got {n_rows}"
        )
    numeric = df.apply(pd.to_numeric, errors="coerce").astype(float)
    bad = numeric.isna() & ~df.isna()
    if bad.to_numpy().any():
        cols = [str(c) for c in numeric.columns[bad.any(axis=0).to_numpy()]]
        raise MalformedDatasetError(f"Non-numeric readings for subject(s) {cols}")
    missing = numeric.isna()
    if missing.to_numpy().any():
        cols = [str(c) for c in numeric.columns[missing.any(axis=0).to_numpy()]]
        raise MalformedDatasetError(f"Missing readings for subject(s) {cols}")
    return numeric


def aggregate(raw_rows: RawDataset, sex: Union[Sex, str]) -> list[Profile]:
    """Fold a raw dataset into per-subject minute-of-day profiles.

    Args:
        raw_rows: DataFrame (columns are subject IDs, row i is absolute
            minute i) or a sequence of {subject_id: reading} mappings.
        sex: Sex of every subject in the dataset.

    Returns:
        Profiles in subject-ID order. Male subjects yield one MALE profile,
        summed over all days and divided by RECORDING_DAYS. Female subjects
        yield an ESTRUS profile then a NON_ESTRUS profile, each averaged over
        its own day count; a phase with no days is omitted.

    Raises:
        MalformedDatasetError: If the dataset is empty, not a whole number
            of days, has heterogeneous or duplicate subject IDs, or holds
            missing or non-numeric readings.
    """
    sex = Sex(sex)
    readings = _numeric_readings(_to_frame(raw_rows))
    n_days = len(readings) // MINUTES_PER_DAY

    if sex is Sex.MALE and n_days != RECORDING_DAYS:
        logger.warning(
            f"Male dataset spans {n_days} day(s); averages are still divided by {RECORDING_DAYS}"
        )

    estrus_mask = np.array([p is CyclePhase.ESTRUS for p in classify_days(n_days)], dtype=bool)

    profiles: list[Profile] = []
    for col in readings.columns:
        subject_id = str(col)
        by_day = readings[col].to_numpy(dtype=float).reshape(n_days, MINUTES_PER_DAY)

        if sex is Sex.MALE:
            values = by_day.sum(axis=0) / RECORDING_DAYS
            profiles.append(Profile(
                subject_id=subject_id,
                sex=sex,
                cycle_phase=CyclePhase.MALE,
                values=tuple(float(v) for v in values),
                day_count=RECORDING_DAYS,
            ))
            continue

        for phase, day_mask in ((CyclePhase.ESTRUS, estrus_mask), (CyclePhase.NON_ESTRUS, ~estrus_mask)):
            count = int(day_mask.sum())
            if count == 0:
                logger.debug(f"Subject {subject_id}: no {phase.value} days, profile omitted")
                continue
            values = by_day[day_mask].sum(axis=0) / count
            profiles.append(Profile(
                subject_id=subject_id,
                sex=sex,
                cycle_phase=phase,
                values=tuple(float(v) for v in values),
                day_count=count,
            ))

    logger.info(
        f"aggregate: sex={sex.value}, subjects={len(readings.columns)}, days={n_days}, profiles={len(profiles)}"
    )
    return profiles


def aggregate_datasets(
    datasets: Mapping[tuple[Sex, Metric], RawDataset],
) -> dict[Metric, list[Profile]]:
    """Aggregate every (sex, metric) dataset and group the profiles by metric.

    Within a metric, male profiles come before female profiles. Metrics
    without any dataset are left out of the result.
    """
    result: dict[Metric, list[Profile]] = {}
    for metric in Metric:
        present = [(sex, datasets[(sex, metric)]) for sex in (Sex.MALE, Sex.FEMALE) if (sex, metric) in datasets]
        if not present:
            continue
        profiles: list[Profile] = []
        for sex, raw in present:
            profiles.extend(aggregate(raw, sex))
        result[metric] = profiles
    return result
