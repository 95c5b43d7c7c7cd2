"""View state for the profile chart.

ViewState is an immutable value object: which filter categories are
enabled and which minute-of-day window the value axis is zoomed to.
Transitions are plain functions that take a state and return a new one;
ProfileViewController holds the only mutable reference.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union

from mousecycle.utils.logging import get_logger
from mousecycle.profile_widget.minute_of_day import MINUTES_PER_DAY, clamp_minute
from mousecycle.profile_widget.profile import ALL_PHASES, CyclePhase, parse_cycle_phase

logger = get_logger(__name__)


@dataclass(frozen=True)
class ViewState:
    """Filter and zoom state of the profile chart.

    zoom_window is a half-open [start, end) interval of minute-of-day
    with 0 <= start < end <= 1440; None means the full day.
    """
    active_filters: frozenset[CyclePhase] = field(default_factory=lambda: frozenset(ALL_PHASES))
    zoom_window: Optional[tuple[int, int]] = None

    @classmethod
    def default(cls) -> "ViewState":
        return cls()

    def is_active(self, key: Union[CyclePhase, str]) -> bool:
        phase = parse_cycle_phase(key)
        return phase is not None and phase in self.active_filters

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dict (filters in canonical order)."""
        return {
            "active_filters": [p.value for p in ALL_PHASES if p in self.active_filters],
            "zoom_window": list(self.zoom_window) if self.zoom_window is not None else None,
        }


def toggle_filter(state: ViewState, key: Union[CyclePhase, str]) -> ViewState:
    """Flip membership of `key` in active_filters. Unknown keys are a no-op."""
    phase = parse_cycle_phase(key)
    if phase is None:
        logger.debug(f"toggle_filter: ignoring unknown key {key!r}")
        return state
    if phase in state.active_filters:
        filters = state.active_filters - {phase}
    else:
        filters = state.active_filters | {phase}
    return replace(state, active_filters=frozenset(filters))


def brush(state: ViewState, minute_start: float, minute_end: float) -> ViewState:
    """Zoom to [start, end).

    start is clamped to [0, 1439] and end to [0, 1440], so a brush running
    past the end of the day includes minute 1439. Empty, inverted or NaN
    windows are a no-op.
    """
    if math.isnan(minute_start) or math.isnan(minute_end):
        logger.debug(f"brush: ignoring NaN selection {minute_start!r}..{minute_end!r}")
        return state
    start = clamp_minute(minute_start)
    end = clamp_minute(minute_end, upper=MINUTES_PER_DAY)
    if start >= end:
        logger.debug(f"brush: ignoring empty selection {minute_start!r}..{minute_end!r}")
        return state
    return replace(state, zoom_window=(start, end))


def reset_zoom(state: ViewState) -> ViewState:
    return replace(state, zoom_window=None)


def reset(state: ViewState) -> ViewState:
    """Back to defaults: all filters enabled, full day."""
    return ViewState.default()
