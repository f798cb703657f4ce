import math

from ride_metrics.core.analytics.scoring import (
    build_detail,
    clamp_level,
    clamp_score,
    component_value,
    floor_level,
)
from ride_metrics.core.analytics.time_utils import format_duration, to_minutes
from ride_metrics.schemas.metrics import Trend


def test_clamp_score_rounds_and_bounds():
    assert clamp_score(99.6) == 100
    assert clamp_score(104) == 100
    assert clamp_score(-3) == 0
    assert clamp_score(math.nan) == 0
    assert clamp_score(math.inf) == 0


def test_levels_are_bounded():
    assert clamp_level(0) == 1
    assert clamp_level(14) == 10
    assert floor_level(3.9999999999999996) == 4
    assert floor_level(3.7) == 3
    assert floor_level(-2) == 1


def test_component_value_reads_numbers_only():
    detail = build_detail(80, [("Ratio", 1.25, 80), ("Label", "1h 5m", 0)], Trend.STABLE, "ok")
    assert component_value(detail, "Ratio") == 1.25
    assert component_value(detail, "Label", default=-1) == -1
    assert component_value(detail, "Missing") == 0.0


def test_time_helpers():
    assert to_minutes(None) == 0.0
    assert to_minutes(5400) == 90.0
    assert format_duration(135) == "2h 15m"
    assert format_duration(45) == "45m"
    assert format_duration(-5) == "0m"
