"""Minute-of-day profile aggregation and interactive chart for NiceGUI."""

from mousecycle.profile_widget.aggregator import MalformedDatasetError, aggregate, aggregate_datasets
from mousecycle.profile_widget.profile import CyclePhase, Metric, Profile, Sex
from mousecycle.profile_widget.view_controller import EmptySelectionWarning, ProfileViewController
from mousecycle.profile_widget.view_state import ViewState

__all__ = [
    "CyclePhase",
    "EmptySelectionWarning",
    "MalformedDatasetError",
    "Metric",
    "Profile",
    "ProfileViewController",
    "Sex",
    "ViewState",
    "aggregate",
    "aggregate_datasets",
]
