"""
mousecycle: minute-of-day profiles of rodent temperature and activity.

This package provides:
- aggregate(): fold 14-day per-minute recordings into 1440-point day
  profiles, splitting female subjects into estrus / non-estrus days
- ProfileViewController: filter and brush-zoom state of the profile chart
- ProfilePanel / profile_app: NiceGUI + Plotly front end
- Logging utilities for library and application use

For logging configuration in standalone scripts:
    ```python
    from mousecycle.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from mousecycle.utils.logging import configure_logging, get_logger

from mousecycle.profile_widget import (
    CyclePhase,
    EmptySelectionWarning,
    MalformedDatasetError,
    Metric,
    Profile,
    ProfileViewController,
    Sex,
    ViewState,
    aggregate,
    aggregate_datasets,
)

# NullHandler until an application calls configure_logging().
_logger = logging.getLogger("mousecycle")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

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
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
