import random
from datetime import timedelta, timezone

import pytest

from ride_metrics.errors import InvalidWeightsError
from ride_metrics.schemas.activities import Activity
from ride_metrics.schemas.metrics import DataQuality
from ride_metrics.services.health_metrics_service import health_metrics_service


@pytest.fixture
def season(make_activity):
    """8 周、每周 4 次的混合训练，带心率与功率。"""
    rides = []
    for week in range(8):
        for day, minutes, hr, watts, name in (
            (0, 150, 132, 180, "Sunday long ride"),
            (2, 60, 165, 260, "VO2 intervals"),
            (4, 60, 128, 170, "Easy spin"),
            (6, 75, 130, 185, "Zone 2 base"),
        ):
            rides.append(make_activity(
                days_ago=7 * week + day,
                minutes=minutes,
                name=name,
                average_heartrate=hr,
                max_heartrate=hr + 20,
                weighted_average_watts=watts + week,
            ))
    return rides


def test_empty_input_scores_zero(reference):
    result = health_metrics_service.calculate([], reference)

    for name in ("load", "consistency", "endurance", "intensity", "efficiency", "overall_score"):
        assert getattr(result, name) == 0
    assert result.data_quality == DataQuality.LIMITED
    assert result.profile.punch.level == 4
    assert result.profile.stamina.level == 1
    assert result.profile.capacity.level == 1
    assert result.weekly_volume.this_week_distance == 0.0


def test_future_and_untimed_activities_are_ignored(reference, make_activity):
    future = Activity(start_date_local=reference + timedelta(days=1), moving_time=3600, distance=30000)
    untimed = Activity(start_date_local=reference - timedelta(days=1), distance=30000)
    result = health_metrics_service.calculate([future, untimed], reference)
    assert result.overall_score == 0


def test_full_season(reference, season):
    result = health_metrics_service.calculate(season, reference, ftp=250)

    for name in ("load", "consistency", "endurance", "intensity", "efficiency", "overall_score"):
        assert 0 <= getattr(result, name) <= 100
    assert result.consistency == 100
    assert result.load == 85
    assert result.data_quality == DataQuality.EXCELLENT
    assert result.reference_instant == reference
    assert result.profile.discipline.level == 6
    assert result.profile.stamina.level == 6
    assert len(result.weekly_volume.buckets) == 8


def test_deterministic_and_order_independent(reference, season):
    first = health_metrics_service.calculate(season, reference)
    shuffled = list(season)
    random.Random(7).shuffle(shuffled)
    second = health_metrics_service.calculate(shuffled, reference)
    assert first.model_dump() == second.model_dump()


def test_input_is_not_mutated(reference, season):
    before = [a.model_dump() for a in season]
    health_metrics_service.calculate(season, reference)
    assert [a.model_dump() for a in season] == before


def test_aware_reference_is_treated_as_local(reference, season):
    naive = health_metrics_service.calculate(season, reference)
    aware = health_metrics_service.calculate(season, reference.replace(tzinfo=timezone.utc))
    assert naive.model_dump() == aware.model_dump()


def test_invalid_weights_are_rejected(reference, season):
    with pytest.raises(InvalidWeightsError):
        health_metrics_service.calculate(season, reference, weights={"load": 1.0})


def test_snapshot(season):
    snapshot = health_metrics_service.calculate_snapshot(season)
    assert 0 < snapshot.overall_score <= 100


def test_stale_history_is_not_excellent(reference, make_activity):
    rides = [make_activity(days_ago=d, average_heartrate=140) for d in range(400, 408)]
    result = health_metrics_service.calculate(rides, reference)
    assert result.data_quality == DataQuality.LIMITED


def _random_activity(rng, reference):
    def maybe(value):
        return value if rng.random() > 0.2 else None

    hr = rng.uniform(40, 190)
    return Activity(
        name=rng.choice([None, "VO2 intervals", "Easy spin", "Saturday crit", "Morning Ride"]),
        type=rng.choice(["Ride", "VirtualRide", "Run"]),
        start_date_local=reference - timedelta(minutes=rng.randint(-3 * 24 * 60, 80 * 24 * 60)),
        moving_time=maybe(rng.randint(0, 8 * 3600)),
        distance=maybe(rng.uniform(0, 200000)),
        average_speed=maybe(rng.uniform(0, 15)),
        average_heartrate=maybe(hr),
        max_heartrate=maybe(hr + rng.uniform(0, 30)),
        average_watts=maybe(rng.uniform(0, 400)),
        weighted_average_watts=maybe(rng.uniform(0, 450)),
        total_elevation_gain=maybe(rng.uniform(0, 3000)),
    )


@pytest.mark.parametrize("seed", range(20))
def test_scores_and_levels_stay_in_bounds(reference, seed):
    rng = random.Random(seed)
    activities = [_random_activity(rng, reference) for _ in range(rng.randint(0, 60))]
    ftp = rng.choice([None, rng.uniform(120, 400)])
    best = rng.choice([None, rng.uniform(100, 500)])

    result = health_metrics_service.calculate(activities, reference, ftp=ftp, best_5min_power=best)
    for name in ("load", "consistency", "endurance", "intensity", "efficiency", "overall_score"):
        assert 0 <= getattr(result, name) <= 100
    for name in ("discipline", "stamina", "punch", "capacity", "economy"):
        assert 1 <= getattr(result.profile, name).level <= 10

    snapshot = health_metrics_service.calculate_snapshot(activities)
    for name in ("power", "endurance", "consistency", "speed", "training_load", "overall_score"):
        assert 0 <= getattr(snapshot, name) <= 100
