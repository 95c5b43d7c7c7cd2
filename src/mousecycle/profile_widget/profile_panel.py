"""NiceGUI panel for the minute-of-day profile chart.

Provides ProfilePanel: a metric toggle, one filter button per category,
reset buttons and a Plotly chart. Browser gestures are translated into
ProfileViewController transitions and the chart is re-rendered after
each one.
"""

from __future__ import annotations

from typing import Callable, Optional

from nicegui import ui
from nicegui.events import GenericEventArguments

from mousecycle.utils.logging import get_logger
from mousecycle.profile_widget.figure_generator import CATEGORY_COLORS, ProfileFigureGenerator
from mousecycle.profile_widget.minute_of_day import MINUTES_PER_DAY, format_minute
from mousecycle.profile_widget.profile import ALL_PHASES, CyclePhase, Metric, Profile
from mousecycle.profile_widget.relayout import (
    is_reset_payload,
    parse_brush_payload,
    parse_click_payload,
    unwrap_event_args,
)
from mousecycle.profile_widget.view_controller import ProfileViewController
from mousecycle.profile_widget.view_state import ViewState

logger = get_logger(__name__)


def filter_button_text(phase: CyclePhase, count: int) -> str:
    return f"{phase.value} ({count})"


def zoom_label_text(state: ViewState) -> str:
    if state.zoom_window is None:
        return "Full day"
    start, end = state.zoom_window
    end_text = "24:00" if end >= MINUTES_PER_DAY else format_minute(end)
    return f"Zoom {format_minute(start)}–{end_text}"


class ProfilePanel:
    """Interactive profile chart bound to a ProfileViewController.

    **Public API:**

    - **__init__(controller, ...)**: Wrap a controller.
    - **build(container=None)**: Create the widgets. Call once.
    - **refresh()**: Re-render from the controller's current state.
    """

    def __init__(
        self,
        controller: ProfileViewController,
        *,
        figure_generator: Optional[ProfileFigureGenerator] = None,
        on_profile_clicked: Optional[Callable[[str, list[Profile]], None]] = None,
        on_metric_changed: Optional[Callable[[Metric], None]] = None,
    ) -> None:
        """Initialize the panel.

        Args:
            controller: View controller holding profiles and view state.
            figure_generator: Optional figure generator; a default one is used if None.
            on_profile_clicked: Optional callback when a line is clicked.
                Signature: (subject_id: str, profiles: list[Profile]) -> None,
                where profiles are the subject's visible profiles.
            on_metric_changed: Optional callback after the user switched
                the shown metric.
        """
        self.controller = controller
        self.figure_generator = figure_generator or ProfileFigureGenerator()
        self._on_profile_clicked = on_profile_clicked
        self._on_metric_changed = on_metric_changed

        # UI handles
        self._plot: Optional[ui.plotly] = None
        self._metric_toggle: Optional[ui.toggle] = None
        self._filter_buttons: dict[CyclePhase, ui.button] = {}
        self._zoom_label: Optional[ui.label] = None
        self._clicked_label: Optional[ui.label] = None

    # ----------------------------
    # UI
    # ----------------------------

    def build(self, *, container: Optional[ui.element] = None) -> None:
        """Build the panel (public API).

        Args:
            container: Optional NiceGUI container to build into. If None,
                widgets are created at the current top level.
        """
        def _build_content():
            with ui.row().classes("w-full items-center gap-3 flex-wrap"):
                self._metric_toggle = ui.toggle(
                    {m.value: m.value.capitalize() for m in self.controller.metrics},
                    value=self.controller.metric.value,
                    on_change=self._on_metric_change,
                )
                for phase in ALL_PHASES:
                    btn = ui.button(
                        on_click=lambda _e, p=phase: self._on_filter_click(p),
                    ).classes("text-sm")
                    self._filter_buttons[phase] = btn
                ui.button("Reset zoom", on_click=self._on_reset_zoom_click).classes("text-sm")
                ui.button("Reset", on_click=self._on_reset_click).classes("text-sm")
                self._zoom_label = ui.label().classes("text-sm font-medium")
            self._clicked_label = ui.label("Click a line to show its subject...").classes("text-sm text-gray-600")

            self._plot = ui.plotly(self.figure_generator.make_figure(self.controller)).classes("w-full h-[32rem]")
            self._plot.on("plotly_relayout", self._on_plotly_relayout)
            self._plot.on("plotly_selected", self._on_plotly_selected)
            self._plot.on("plotly_click", self._on_plotly_click)
            self._sync_controls()

        if container is not None:
            with container:
                _build_content()
        else:
            _build_content()

    def _sync_controls(self) -> None:
        """Update button colors/labels and the zoom label from the view state."""
        state = self.controller.state
        counts = self.controller.category_counts()
        for phase, btn in self._filter_buttons.items():
            btn.text = filter_button_text(phase, counts[phase.value])
            btn.props(remove="outline unelevated")
            if state.is_active(phase):
                btn.props(f"color={CATEGORY_COLORS[phase]} unelevated")
            else:
                btn.props("color=grey outline")
        if self._zoom_label is not None:
            self._zoom_label.text = zoom_label_text(state)

    def refresh(self) -> None:
        """Re-render the chart and controls from the controller's state."""
        if self._plot is None:
            return
        try:
            self._plot.update_figure(self.figure_generator.make_figure(self.controller))
            self._plot.update()
        except Exception as ex:
            logger.exception(f"Error rendering profile chart: {ex}")
            ui.notify(f"Render failed: {ex}", type="negative")
        self._sync_controls()

    # ----------------------------
    # Events
    # ----------------------------

    def _on_metric_change(self, e) -> None:
        value = getattr(e, "value", None)
        if value is None:
            return
        try:
            self.controller.select_metric(value)
        except ValueError as ex:
            logger.warning(str(ex))
            ui.notify(str(ex), type="warning")
            return
        self.refresh()
        if self._on_metric_changed is not None:
            self._on_metric_changed(self.controller.metric)

    def _on_filter_click(self, phase: CyclePhase) -> None:
        self.controller.toggle_filter(phase)
        self.refresh()

    def _on_reset_zoom_click(self) -> None:
        self.controller.reset_zoom()
        self.refresh()

    def _on_reset_click(self) -> None:
        self.controller.reset()
        self.refresh()

    def _handle_brush_payload(self, payload: dict) -> None:
        if is_reset_payload(payload):
            self.controller.reset_zoom()
            self.refresh()
            return
        window = parse_brush_payload(payload)
        if window is None:
            return
        self.controller.brush(*window)
        self.refresh()

    def _on_plotly_relayout(self, e: GenericEventArguments) -> None:
        self._handle_brush_payload(unwrap_event_args(e.args))

    def _on_plotly_selected(self, e: GenericEventArguments) -> None:
        self._handle_brush_payload(unwrap_event_args(e.args))

    def _on_plotly_click(self, e: GenericEventArguments) -> None:
        subject_id = parse_click_payload(unwrap_event_args(e.args))
        if subject_id is None:
            logger.warning("Plotly click event received but no subject found")
            return
        profiles = self.controller.profiles_for_subject(subject_id)
        logger.info(f"Clicked on subject {subject_id} ({len(profiles)} visible profile(s))")
        if self._clicked_label is not None:
            phases = ", ".join(p.category for p in profiles) or "hidden"
            self._clicked_label.text = f"Subject {subject_id}: {phases}"
        if self._on_profile_clicked is not None:
            self._on_profile_clicked(subject_id, profiles)
