"""View controller for the minute-of-day profile chart.

Provides ProfileViewController, which owns the ViewState and the selected
metric, applies filter/brush/reset transitions, and derives what the
renderer needs: the visible profiles, the padded value range and the
x-axis window.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping, Sequence
from typing import Callable, Iterable, Optional, Union

import numpy as np

from mousecycle.utils.logging import get_logger
from mousecycle.profile_widget import view_state as vs
from mousecycle.profile_widget.minute_of_day import MINUTES_PER_DAY
from mousecycle.profile_widget.profile import ALL_PHASES, CyclePhase, Metric, Profile
from mousecycle.profile_widget.view_state import ViewState

logger = get_logger(__name__)

# Multiplicative padding applied to (min, max) of the value axis.
DEFAULT_PADDING: tuple[float, float] = (0.98, 1.02)

# Candidate x-axis tick spacings in minutes, finest first.
TICK_STEPS: tuple[int, ...] = (1, 5, 10, 15, 30, 60, 120, 180)
MAX_TICKS = 8


class EmptySelectionWarning(UserWarning):
    """No data to scale the value axis on; the global range is used instead."""


def _extent(series: Iterable[Sequence[float]]) -> Optional[tuple[float, float]]:
    """(min, max) over all values of all sequences, or None if there are none."""
    arrays = [np.asarray(s, dtype=float) for s in series]
    arrays = [a for a in arrays if a.size]
    if not arrays:
        return None
    values = np.concatenate(arrays)
    return float(values.min()), float(values.max())


class ProfileViewController:
    """Filter and zoom state machine over a fixed set of profiles.

    Profiles are grouped by Metric; one metric is shown at a time. The
    ViewState survives metric switches so filters and zoom stay put while
    the value range is recomputed for the new data.

    **Transitions:** toggle_filter(), brush(), reset_zoom(), reset(),
    select_metric(). Each one that changes something calls on_change.

    **Derived views:** visible_profiles(), value_range(), x_range(),
    tick_step(), category_counts().
    """

    def __init__(
        self,
        profiles_by_metric: Mapping[Metric, Sequence[Profile]],
        *,
        metric: Optional[Union[Metric, str]] = None,
        padding: tuple[float, float] = DEFAULT_PADDING,
        on_change: Optional[Callable[[ViewState], None]] = None,
        state: Optional[ViewState] = None,
    ) -> None:
        """Initialize with aggregated profiles.

        Args:
            profiles_by_metric: Profiles per metric, as returned by
                aggregate_datasets().
            metric: Initially shown metric. Defaults to the first metric
                present, or TEMPERATURE when there are no profiles.
            padding: (low, high) multipliers applied to the value range.
            on_change: Optional callback invoked with the new ViewState
                after each transition that changed the state or metric.
            state: Initial view state, e.g. one restored by the caller.
                Defaults to ViewState.default().

        Raises:
            ValueError: If metric is given but has no profiles.
        """
        self._profiles: dict[Metric, tuple[Profile, ...]] = {
            Metric(m): tuple(p) for m, p in profiles_by_metric.items()
        }
        self.padding = (float(padding[0]), float(padding[1]))
        self._on_change = on_change
        self._state = state if state is not None else ViewState.default()

        if metric is None:
            self._metric = next(iter(self._profiles), Metric.TEMPERATURE)
        else:
            self._metric = self._check_metric(metric)

    # ----------------------------
    # State
    # ----------------------------

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def metric(self) -> Metric:
        return self._metric

    @property
    def metrics(self) -> list[Metric]:
        """Metrics that have profiles, in insertion order."""
        return list(self._profiles)

    @property
    def profiles(self) -> tuple[Profile, ...]:
        """All profiles of the current metric, unfiltered."""
        return self._profiles.get(self._metric, ())

    def _check_metric(self, metric: Union[Metric, str]) -> Metric:
        metric = Metric(metric)
        if metric not in self._profiles:
            raise ValueError(f"No profiles loaded for metric {metric.value!r}")
        return metric

    def _set_state(self, new_state: ViewState, action: str) -> ViewState:
        if new_state == self._state:
            return self._state
        self._state = new_state
        logger.debug(f"{action}: {new_state.to_dict()}")
        if self._on_change is not None:
            self._on_change(new_state)
        return new_state

    # ----------------------------
    # Transitions
    # ----------------------------

    def toggle_filter(self, key: Union[CyclePhase, str]) -> ViewState:
        return self._set_state(vs.toggle_filter(self._state, key), "toggle_filter")

    def brush(self, minute_start: float, minute_end: float) -> ViewState:
        return self._set_state(vs.brush(self._state, minute_start, minute_end), "brush")

    def reset_zoom(self) -> ViewState:
        return self._set_state(vs.reset_zoom(self._state), "reset_zoom")

    def reset(self) -> ViewState:
        return self._set_state(vs.reset(self._state), "reset")

    def select_metric(self, metric: Union[Metric, str]) -> Metric:
        """Show another metric. Keeps the current filters and zoom window.

        Raises:
            ValueError: If the metric is unknown or has no profiles.
        """
        metric = self._check_metric(metric)
        if metric is not self._metric:
            self._metric = metric
            logger.info(f"select_metric: {metric.value}")
            if self._on_change is not None:
                self._on_change(self._state)
        return self._metric

    # ----------------------------
    # Derived views
    # ----------------------------

    def visible_profiles(self) -> list[Profile]:
        """Profiles of the current metric whose phase is an active filter."""
        active = self._state.active_filters
        return [p for p in self.profiles if p.cycle_phase in active]

    def profiles_for_subject(self, subject_id: str) -> list[Profile]:
        """Visible profiles of one subject (e.g. after a line click)."""
        return [p for p in self.visible_profiles() if p.subject_id == subject_id]

    def category_counts(self) -> dict[str, int]:
        """Number of profiles per filter category for the current metric."""
        counts = {phase.value: 0 for phase in ALL_PHASES}
        for p in self.profiles:
            counts[p.category] += 1
        return counts

    def _pad(self, extent: tuple[float, float]) -> tuple[float, float]:
        lo, hi = extent
        return lo * self.padding[0], hi * self.padding[1]

    def _warn_empty(self, message: str) -> None:
        logger.debug(message)
        warnings.warn(message, EmptySelectionWarning, stacklevel=3)

    def value_range(self) -> Optional[tuple[float, float]]:
        """Padded (min, max) of the value axis.

        Without a zoom window the extent covers every value of the visible
        profiles. With a zoom window [s, e) only values[s:e] count. When no
        profile is visible or the slice is empty an EmptySelectionWarning
        is issued and the global range is returned instead.

        Returns:
            (min * low_pad, max * high_pad), or None if the current metric
            has no profiles at all.
        """
        if not self.profiles:
            return None

        visible = self.visible_profiles()
        if not visible:
            self._warn_empty("No visible profiles; using the range of all profiles")
            return self._pad(_extent(p.values for p in self.profiles))

        global_extent = _extent(p.values for p in visible)
        window = self._state.zoom_window
        if window is None:
            return self._pad(global_extent)

        start, end = window
        windowed = _extent(p.values[start:end] for p in visible)
        if windowed is None:
            self._warn_empty(f"Zoom window {window} holds no values; using the full-day range")
            return self._pad(global_extent)
        return self._pad(windowed)

    def x_range(self) -> tuple[int, int]:
        """Half-open [start, end) minute-of-day span shown on the x axis.

        Same window value_range() scales to; (0, 1440) for the full day.
        """
        if self._state.zoom_window is None:
            return 0, MINUTES_PER_DAY
        return self._state.zoom_window

    def tick_step(self) -> int:
        """X-axis tick spacing in minutes for the current window."""
        start, end = self.x_range()
        width = max(1, end - start)
        for step in TICK_STEPS:
            if width / step <= MAX_TICKS:
                return step
        return TICK_STEPS[-1]
