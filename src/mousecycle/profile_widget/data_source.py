"""CSV loading for the four raw recordings.

Provides discovery of the male/female temperature/activity CSV files in a
data directory and aggregation of all of them into profiles per metric.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Union

import pandas as pd

from mousecycle.utils.logging import get_logger
from mousecycle.profile_widget.aggregator import aggregate_datasets
from mousecycle.profile_widget.profile import Metric, Profile, Sex

logger = get_logger(__name__)

# Absolute-minute index columns written by common exports; not subjects.
INDEX_COLUMNS = ("time (min)", "minuteIndex", "minute_index")

DEFAULT_FILES: dict[tuple[Sex, Metric], str] = {
    (Sex.MALE, Metric.TEMPERATURE): "male_temp.csv",
    (Sex.MALE, Metric.ACTIVITY): "male_act.csv",
    (Sex.FEMALE, Metric.TEMPERATURE): "fem_temp.csv",
    (Sex.FEMALE, Metric.ACTIVITY): "fem_act.csv",
}


def dataset_key(key: str) -> tuple[Sex, Metric]:
    """Parse 'male_temperature' style keys used in the JSON config."""
    sex_str, _, metric_str = key.partition("_")
    return Sex(sex_str), Metric(metric_str)


def dataset_key_str(key: tuple[Sex, Metric]) -> str:
    return f"{key[0].value}_{key[1].value}"


def load_raw_dataset(path: Union[str, Path]) -> pd.DataFrame:
    """Load one raw recording CSV.

    Columns are subject IDs; an absolute-minute index column is dropped if
    present. Values are left as read; the aggregator validates them.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV not found: {path}")
    df = pd.read_csv(path)
    drop = [c for c in df.columns if str(c).strip() in INDEX_COLUMNS]
    if drop:
        df = df.drop(columns=drop)
    df.columns = [str(c).strip() for c in df.columns]
    logger.info(f"Loaded {path.name}: rows={len(df)}, subjects={len(df.columns)}")
    return df


def load_profiles(
    data_dir: Union[str, Path],
    files: Optional[Mapping[tuple[Sex, Metric], str]] = None,
) -> dict[Metric, list[Profile]]:
    """Load every configured CSV from data_dir and aggregate it.

    Args:
        data_dir: Directory holding the CSV files.
        files: (sex, metric) -> filename. Defaults to DEFAULT_FILES.

    Returns:
        Profiles per metric (see aggregate_datasets()).

    Raises:
        FileNotFoundError: If a configured file is missing.
        MalformedDatasetError: If a file cannot be aggregated.
    """
    data_dir = Path(data_dir)
    files = dict(DEFAULT_FILES if files is None else files)
    datasets = {key: load_raw_dataset(data_dir / filename) for key, filename in files.items()}
    return aggregate_datasets(datasets)
