"""Unit tests for aggregate(): day folding, estrus split, malformed input."""

import numpy as np
import pandas as pd
import pytest

from mousecycle.profile_widget.aggregator import (
    MalformedDatasetError,
    aggregate,
    aggregate_datasets,
    classify_days,
    is_estrus_day,
)
from mousecycle.profile_widget.profile import CyclePhase, Metric, Sex

MINUTES = 1440
DAYS = 14
ESTRUS_DAYS = {2, 6, 10, 14}


def per_day_column(day_values: list[float]) -> np.ndarray:
    """One reading per minute, constant within each day."""
    return np.repeat(np.asarray(day_values, dtype=float), MINUTES)


def test_estrus_days_are_2_6_10_14():
    """Over a 14-day recording the estrus days are exactly {2, 6, 10, 14}."""
    estrus = {d for d in range(1, DAYS + 1) if is_estrus_day(d)}
    assert estrus == ESTRUS_DAYS


def test_classify_days_counts_sum_to_total():
    phases = classify_days(DAYS)
    n_estrus = phases.count(CyclePhase.ESTRUS)
    n_non = phases.count(CyclePhase.NON_ESTRUS)
    assert (n_estrus, n_non) == (4, 10)
    assert n_estrus + n_non == DAYS


def test_example_scenario_yields_three_profiles(example_profiles):
    """m1 constant 37 -> male 37; f1 -> estrus 39, non-estrus 36; in that order."""
    assert [(p.subject_id, p.cycle_phase) for p in example_profiles] == [
        ("m1", CyclePhase.MALE),
        ("f1", CyclePhase.ESTRUS),
        ("f1", CyclePhase.NON_ESTRUS),
    ]
    male, estrus, non_estrus = example_profiles
    assert list(male.values) == pytest.approx([37.0] * MINUTES)
    assert list(estrus.values) == pytest.approx([39.0] * MINUTES)
    assert list(non_estrus.values) == pytest.approx([36.0] * MINUTES)


def test_female_day_counts_sum_to_total(example_profiles):
    female = [p for p in example_profiles if p.sex is Sex.FEMALE]
    assert sum(p.day_count for p in female) == DAYS
    assert {p.cycle_phase: p.day_count for p in female} == {
        CyclePhase.ESTRUS: 4,
        CyclePhase.NON_ESTRUS: 10,
    }


def test_constant_value_gives_constant_profile_for_both_phases():
    df = pd.DataFrame({"f2": np.full(DAYS * MINUTES, 12.5)})
    profiles = aggregate(df, Sex.FEMALE)
    assert len(profiles) == 2
    for p in profiles:
        assert list(p.values) == pytest.approx([12.5] * MINUTES)


def test_minute_of_day_buckets_are_kept_apart():
    """Each minute-of-day averages only its own minute across days."""
    one_day = np.arange(MINUTES, dtype=float)
    df = pd.DataFrame({"m1": np.tile(one_day, DAYS)})
    (profile,) = aggregate(df, Sex.MALE)
    assert list(profile.values) == pytest.approx(one_day.tolist())


def test_male_always_divides_by_fourteen():
    """A 7-day male dataset is still divided by 14 (sum of 7 ones / 14)."""
    df = pd.DataFrame({"m1": np.ones(7 * MINUTES)})
    (profile,) = aggregate(df, "male")
    assert profile.day_count == 14
    assert profile.values[0] == pytest.approx(0.5)


def test_phase_with_no_days_is_omitted():
    """A single-day female recording has no estrus day: only non-estrus is emitted."""
    df = pd.DataFrame({"f1": np.full(MINUTES, 36.0)})
    profiles = aggregate(df, Sex.FEMALE)
    assert [p.cycle_phase for p in profiles] == [CyclePhase.NON_ESTRUS]
    assert not any(np.isnan(profiles[0].values))


def test_subject_order_follows_columns():
    df = pd.DataFrame({
        "f9": per_day_column([1.0] * DAYS),
        "f1": per_day_column([2.0] * DAYS),
    })
    profiles = aggregate(df, Sex.FEMALE)
    assert [p.subject_id for p in profiles] == ["f9", "f9", "f1", "f1"]


def test_sequence_of_mappings_is_accepted():
    rows = [{"m1": 1.0, "m2": 3.0} for _ in range(DAYS * MINUTES)]
    profiles = aggregate(rows, Sex.MALE)
    assert [p.subject_id for p in profiles] == ["m1", "m2"]
    assert profiles[1].values[100] == pytest.approx(3.0)


@pytest.mark.parametrize("n_rows", [0, 1439, 1441, DAYS * MINUTES - 1])
def test_row_count_not_multiple_of_day_raises(n_rows):
    df = pd.DataFrame({"m1": np.ones(n_rows)})
    with pytest.raises(MalformedDatasetError) as exc_info:
        aggregate(df, Sex.MALE)
    assert "1440" in str(exc_info.value)


def test_empty_row_sequence_raises():
    with pytest.raises(MalformedDatasetError):
        aggregate([], Sex.FEMALE)


def test_heterogeneous_keys_raise():
    rows = [{"m1": 1.0, "m2": 2.0} for _ in range(MINUTES)]
    rows[5] = {"m1": 1.0}
    with pytest.raises(MalformedDatasetError) as exc_info:
        aggregate(rows, Sex.MALE)
    assert "Row 5" in str(exc_info.value)
    assert "m2" in str(exc_info.value)


def test_missing_cell_in_dataframe_raises():
    values = np.ones(MINUTES)
    values[10] = np.nan
    df = pd.DataFrame({"m1": np.ones(MINUTES), "m2": values})
    with pytest.raises(MalformedDatasetError) as exc_info:
        aggregate(df, Sex.MALE)
    assert "m2" in str(exc_info.value)


def test_non_numeric_reading_raises():
    values = ["1.0"] * MINUTES
    values[3] = "n/a"
    df = pd.DataFrame({"m1": values})
    with pytest.raises(MalformedDatasetError) as exc_info:
        aggregate(df, Sex.MALE)
    assert "Non-numeric" in str(exc_info.value)


def test_numeric_strings_are_accepted():
    df = pd.DataFrame({"m1": ["2.0"] * (DAYS * MINUTES)})
    (profile,) = aggregate(df, Sex.MALE)
    assert profile.values[0] == pytest.approx(2.0)


def test_duplicate_subject_columns_raise():
    df = pd.DataFrame(np.ones((MINUTES, 2)), columns=["m1", "m1"])
    with pytest.raises(MalformedDatasetError) as exc_info:
        aggregate(df, Sex.MALE)
    assert "Duplicate" in str(exc_info.value)


def test_unknown_sex_raises_value_error(male_df):
    with pytest.raises(ValueError):
        aggregate(male_df, "unknown")


def test_aggregate_datasets_groups_by_metric(male_df, female_df):
    datasets = {
        (Sex.FEMALE, Metric.TEMPERATURE): female_df,
        (Sex.MALE, Metric.TEMPERATURE): male_df,
        (Sex.MALE, Metric.ACTIVITY): male_df * 0 + 5.0,
    }
    result = aggregate_datasets(datasets)
    assert list(result) == [Metric.TEMPERATURE, Metric.ACTIVITY]
    assert [p.label for p in result[Metric.TEMPERATURE]] == [
        "m1 (male)",
        "f1 (estrus)",
        "f1 (non-estrus)",
    ]
    assert [p.category for p in result[Metric.ACTIVITY]] == ["male"]
