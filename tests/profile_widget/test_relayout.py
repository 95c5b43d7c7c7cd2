"""Tests for parsing Plotly relayout / selected / click payloads."""

import pytest

from mousecycle.profile_widget.relayout import (
    is_reset_payload,
    parse_brush_payload,
    parse_click_payload,
    unwrap_event_args,
)


def test_unwrap_event_args_variants():
    assert unwrap_event_args({"a": 1}) == {"a": 1}
    assert unwrap_event_args([{"a": 1}]) == {"a": 1}
    assert unwrap_event_args(None) == {}
    assert unwrap_event_args([1, 2]) == {}


def test_axis_range_keys():
    payload = {
        "xaxis.range[0]": "2000-01-01 01:00:00",
        "xaxis.range[1]": "2000-01-01 02:00:00",
    }
    assert parse_brush_payload(payload) == (60, 120)


def test_axis_range_list():
    payload = {"xaxis.range": ["2000-01-01 00:10:00", "2000-01-01 00:20:00"]}
    assert parse_brush_payload(payload) == (10, 20)


def test_selection_shape_keys():
    payload = {
        "selections[0].x0": "2000-01-01 10:00:00",
        "selections[0].x1": "2000-01-01 11:00:00",
    }
    assert parse_brush_payload(payload) == (600, 660)


def test_selections_list_with_reversed_drag():
    payload = {
        "selections": [
            {"type": "rect", "x0": "2000-01-01 11:00:00", "x1": "2000-01-01 10:00:00"},
        ]
    }
    assert parse_brush_payload(payload) == (600, 660)


def test_plotly_selected_range():
    payload = {"range": {"x": ["2000-01-01 00:00:00", "2000-01-01 00:01:00"], "y": [30, 40]}}
    assert parse_brush_payload(payload) == (0, 1)


def test_fractional_minutes_are_widened():
    payload = {"xaxis.range": ["2000-01-01 00:10:30.5", "2000-01-01 00:19:10"]}
    assert parse_brush_payload(payload) == (10, 20)


def test_numeric_values_are_minutes():
    assert parse_brush_payload({"xaxis.range": [5.2, 9.7]}) == (5, 10)


def test_out_of_day_values_are_not_clamped():
    payload = {"xaxis.range": ["1999-12-31 23:00:00", "2000-01-02 01:00:00"]}
    assert parse_brush_payload(payload) == (-60, 1500)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"xaxis.autorange": True},
        {"selections": []},
        {"dragmode": "zoom"},
        {"xaxis.range": ["not a date", "2000-01-01 00:10:00"]},
    ],
)
def test_payloads_without_brush(payload):
    assert parse_brush_payload(payload) is None


def test_reset_payload():
    assert is_reset_payload({"xaxis.autorange": True})
    assert not is_reset_payload({"xaxis.range[0]": "2000-01-01 01:00:00"})
    assert not is_reset_payload({})


def test_click_payload():
    assert parse_click_payload({"points": [{"customdata": "f1"}]}) == "f1"
    assert parse_click_payload({"points": [{"customdata": ["m1", 3]}]}) == "m1"
    assert parse_click_payload({"points": [{"x": 1}]}) is None
    assert parse_click_payload({}) is None
