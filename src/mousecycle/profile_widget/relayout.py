"""Translate Plotly browser events into view-state transitions.

Brushes arrive as rect selections (dragmode="select") or as axis ranges
when the user zooms with the Plotly toolbar. Double-clicking the chart
sends xaxis.autorange, which maps to a zoom reset.
"""

from __future__ import annotations

from typing import Any, Optional

from mousecycle.utils.logging import get_logger
from mousecycle.profile_widget.minute_of_day import ceil_minute, floor_minute, timestamp_to_minute

logger = get_logger(__name__)


def unwrap_event_args(raw: Any) -> dict:
    """NiceGUI delivers event args as a dict or a one-element list holding one."""
    if isinstance(raw, list) and len(raw) == 1 and isinstance(raw[0], dict):
        return raw[0]
    if isinstance(raw, dict):
        return raw
    return {}


def _x_pair(payload: dict) -> Optional[tuple[Any, Any]]:
    """Find the raw (x0, x1) pair in a relayout or selected payload."""
    if "xaxis.range[0]" in payload and "xaxis.range[1]" in payload:
        return payload["xaxis.range[0]"], payload["xaxis.range[1]"]

    rng = payload.get("xaxis.range")
    if isinstance(rng, (list, tuple)) and len(rng) == 2:
        return rng[0], rng[1]

    if "selections[0].x0" in payload and "selections[0].x1" in payload:
        return payload["selections[0].x0"], payload["selections[0].x1"]

    selections = payload.get("selections")
    if isinstance(selections, list) and selections and isinstance(selections[0], dict):
        sel = selections[0]
        if sel.get("type", "rect") == "rect" and sel.get("x0") is not None and sel.get("x1") is not None:
            return sel["x0"], sel["x1"]

    # plotly_selected event: {"range": {"x": [x0, x1], "y": [...]}}
    sel_range = payload.get("range")
    if isinstance(sel_range, dict):
        xs = sel_range.get("x")
        if isinstance(xs, (list, tuple)) and len(xs) == 2:
            return xs[0], xs[1]
    return None


def parse_brush_payload(payload: dict) -> Optional[tuple[int, int]]:
    """Minute-of-day (start, end) of a brush, or None if the payload holds none.

    The start is floored and the end ceiled so the window covers every
    minute the brush touches. The result is not clamped.
    """
    pair = _x_pair(payload)
    if pair is None:
        return None
    try:
        a = timestamp_to_minute(pair[0])
        b = timestamp_to_minute(pair[1])
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not parse brush range {pair!r}: {e}")
        return None
    lo, hi = min(a, b), max(a, b)
    return floor_minute(lo), ceil_minute(hi)


def is_reset_payload(payload: dict) -> bool:
    """True for a double-click / autoscale relayout."""
    return bool(payload.get("xaxis.autorange"))


def parse_click_payload(payload: dict) -> Optional[str]:
    """Subject ID of the clicked line, taken from the point's customdata."""
    points = payload.get("points") or []
    if not points or not isinstance(points[0], dict):
        return None
    custom = points[0].get("customdata")
    if isinstance(custom, (str, int, float)):
        return str(custom)
    if isinstance(custom, (list, tuple)) and custom:
        return str(custom[0])
    return None
