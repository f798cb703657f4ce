import pytest

from ride_metrics import config
from ride_metrics.core.analytics.intensity import (
    calculate_intensity,
    classify_workout,
    zone_distribution,
    zone_seconds,
)
from ride_metrics.core.analytics.scoring import component_value


def _rides(make_activity, count, **fields):
    return [make_activity(days_ago=i % 5, hours_before=1 + i // 5, **fields) for i in range(count)]


def test_perfect_polarization(reference, make_activity):
    rides = _rides(make_activity, 2, average_heartrate=165) + _rides(make_activity, 8, average_heartrate=130)
    _, z4, z3 = zone_distribution(rides)
    assert z4 == pytest.approx(18.0)
    assert z3 == pytest.approx(2.0)

    detail = calculate_intensity(rides, reference)
    assert detail.score == 100
    assert "Perfect Polarization" in detail.suggestion


def test_junk_mile_penalty(reference, make_activity):
    rides = _rides(make_activity, 5, average_heartrate=145) + _rides(make_activity, 5, average_heartrate=130)
    detail = calculate_intensity(rides, reference)
    assert detail.score == 60
    assert "Junk Mile Penalty" in detail.suggestion


def test_rides_without_heartrate_are_not_counted_as_easy(reference, make_activity):
    rides = (
        _rides(make_activity, 2, average_heartrate=165)
        + _rides(make_activity, 8, average_heartrate=130)
        + _rides(make_activity, 10)
    )
    assert calculate_intensity(rides, reference).score == 100


def test_no_heartrate_default(reference, make_activity):
    rides = _rides(make_activity, 4, name="Saturday crit")
    detail = calculate_intensity(rides, reference)
    assert detail.score == 50
    assert component_value(detail, "Hard Sessions (by name)") == 4


def test_mostly_easy_is_interpolated(reference, make_activity):
    rides = _rides(make_activity, 10, average_heartrate=125)
    detail = calculate_intensity(rides, reference)
    assert 40 <= detail.score < 60
    assert "Not enough intensity" in detail.suggestion


def test_low_average_with_high_max_counts_as_intervals(make_activity):
    ride = make_activity(minutes=100, average_heartrate=128, max_heartrate=178)
    assert zone_seconds(ride) == pytest.approx((900.0, 1500.0))


def test_zone_thresholds_follow_config(monkeypatch, make_activity):
    ride = make_activity(minutes=10, average_heartrate=165)
    monkeypatch.setattr(config, "Z4_HEARTRATE", 170.0)
    z4, z3 = zone_seconds(ride)
    assert z4 == pytest.approx(60.0)
    assert z3 == pytest.approx(480.0)


@pytest.mark.parametrize("name,label", [
    ("Tuesday VO2 Max Intervals", "vo2"),
    ("Sweet Spot 3x15", "threshold"),
    ("Club TT", "race"),
    ("Tempo blocks", "tempo"),
    ("Zone 2 base", "endurance"),
    ("Easy spin", "recovery"),
    ("Attack the hill", None),
    ("Morning Ride", None),
    (None, None),
])
def test_classify_workout(name, label):
    assert classify_workout(name) == label
