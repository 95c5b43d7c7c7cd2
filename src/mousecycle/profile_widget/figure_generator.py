"""Plotly figure generation for the profile chart.

This module provides ProfileFigureGenerator, which turns the derived views
of a ProfileViewController into a Plotly figure dictionary. Minute-of-day
indices become wall-clock timestamps here and nowhere else.
"""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from mousecycle.utils.logging import get_logger
from mousecycle.profile_widget.minute_of_day import (
    MINUTES_PER_DAY,
    REFERENCE_DAY,
    minute_to_timestamp,
    minutes_to_timestamps,
)
from mousecycle.profile_widget.profile import CyclePhase, Profile
from mousecycle.profile_widget.view_controller import ProfileViewController

logger = get_logger(__name__)

# Plotly date axes take plain strings.
AXIS_DATETIME_FMT = "%Y-%m-%d %H:%M:%S"

# The axis stops half a minute short of the exclusive window end so minute
# `end` is never drawn while minute `end - 1` stays visible.
AXIS_END_INSET = pd.Timedelta(seconds=30)

CATEGORY_COLORS: dict[CyclePhase, str] = {
    CyclePhase.MALE: "steelblue",
    CyclePhase.ESTRUS: "crimson",
    CyclePhase.NON_ESTRUS: "darkorange",
}


class ProfileFigureGenerator:
    """Generates Plotly figure dictionaries from a ProfileViewController.

    Attributes:
        line_width: Width of every profile line.
        show_legend: Whether the legend is drawn.
    """

    def __init__(self, *, line_width: float = 1.0, show_legend: bool = True) -> None:
        self.line_width = line_width
        self.show_legend = show_legend
        self._x = list(minutes_to_timestamps(MINUTES_PER_DAY).strftime(AXIS_DATETIME_FMT))

    def _trace(self, profile: Profile) -> go.Scatter:
        return go.Scatter(
            x=self._x,
            y=list(profile.values),
            mode="lines",
            name=profile.label,
            legendgroup=profile.category,
            line=dict(color=CATEGORY_COLORS[profile.cycle_phase], width=self.line_width),
            customdata=[profile.subject_id] * MINUTES_PER_DAY,
            hovertemplate=(
                "subject=%{customdata}<br>"
                f"phase={profile.category}<br>"
                "time=%{x|%H:%M}<br>"
                "value=%{y:.3f}<extra></extra>"
            ),
        )

    def make_figure(self, controller: ProfileViewController) -> dict:
        """Generate the Plotly figure dictionary for the controller's current view.

        Args:
            controller: Source of visible profiles, value range and zoom window.

        Returns:
            Plotly figure dictionary.
        """
        visible = controller.visible_profiles()
        y_range = controller.value_range()
        x_start, x_end = controller.x_range()
        step = controller.tick_step()

        logger.info(
            f"ProfileFigureGenerator.make_figure: metric={controller.metric.value}, "
            f"visible={len(visible)}/{len(controller.profiles)}, state={controller.state.to_dict()}"
        )

        fig = go.Figure()
        for profile in visible:
            fig.add_trace(self._trace(profile))

        if not visible:
            fig.add_annotation(
                text="No profiles selected",
                xref="paper",
                yref="paper",
                x=0.5,
                y=0.5,
                showarrow=False,
            )

        fig.update_layout(
            margin=dict(l=60, r=20, t=40, b=50),
            showlegend=self.show_legend,
            dragmode="select",
            selectdirection="h",
            hovermode="closest",
            uirevision=controller.metric.value,
        )
        fig.update_xaxes(
            title_text="Time of Day",
            type="date",
            range=[
                minute_to_timestamp(x_start).strftime(AXIS_DATETIME_FMT),
                (minute_to_timestamp(x_end) - AXIS_END_INSET).strftime(AXIS_DATETIME_FMT),
            ],
            tick0=REFERENCE_DAY.strftime(AXIS_DATETIME_FMT),
            dtick=step * 60 * 1000,  # ms
            tickformat="%H:%M",
        )
        if y_range is not None:
            fig.update_yaxes(title_text=controller.metric.axis_title, range=list(y_range))
        else:
            fig.update_yaxes(title_text=controller.metric.axis_title, autorange=True)
        return fig.to_dict()
