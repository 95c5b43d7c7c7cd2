"""Profile records produced by the aggregator.

This module defines the Sex, CyclePhase and Metric enums and the Profile
dataclass: one subject's averaged 1440-point daily curve for one phase.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from mousecycle.profile_widget.minute_of_day import MINUTES_PER_DAY


class Sex(Enum):
    """Sex of the subjects in a dataset."""
    MALE = "male"
    FEMALE = "female"


class CyclePhase(Enum):
    """Filter category of a profile. Values are the filter keys."""
    MALE = "male"
    ESTRUS = "estrus"
    NON_ESTRUS = "non-estrus"


class Metric(Enum):
    """Recorded physiological signal."""
    TEMPERATURE = "temperature"
    ACTIVITY = "activity"

    @property
    def axis_title(self) -> str:
        return {
            Metric.TEMPERATURE: "Average Temperature (°C)",
            Metric.ACTIVITY: "Average Activity",
        }[self]


ALL_PHASES: tuple[CyclePhase, ...] = (CyclePhase.MALE, CyclePhase.ESTRUS, CyclePhase.NON_ESTRUS)


def parse_cycle_phase(key: Union[CyclePhase, str, None]) -> Optional[CyclePhase]:
    """Return the CyclePhase for a filter key, or None if the key is unknown."""
    if isinstance(key, CyclePhase):
        return key
    try:
        return CyclePhase(key)
    except ValueError:
        return None


@dataclass(frozen=True)
class Profile:
    """Aggregated minute-of-day profile for one subject and one phase.

    Profiles are immutable once produced; the view controller shares them
    read-only.
    """
    subject_id: str
    sex: Sex
    cycle_phase: CyclePhase
    values: tuple[float, ...]
    day_count: int  # number of days averaged into each value

    def __post_init__(self) -> None:
        if len(self.values) != MINUTES_PER_DAY:
            raise ValueError(
                f"Profile {self.subject_id!r} must have {MINUTES_PER_DAY} values, got {len(self.values)}"
            )

    @property
    def category(self) -> str:
        """Filter key of this profile."""
        return self.cycle_phase.value

    @property
    def label(self) -> str:
        """Trace name, e.g. 'f1 (estrus)'."""
        return f"{self.subject_id} ({self.cycle_phase.value})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return {
            "subject_id": self.subject_id,
            "sex": self.sex.value,
            "cycle_phase": self.cycle_phase.value,
            "day_count": self.day_count,
            "values": list(self.values),
        }
