from datetime import timezone

from ride_metrics.core.analytics.rider_profile import (
    capacity_level,
    discipline_level,
    economy_level,
    punch_level,
    stamina_level,
)
from ride_metrics.core.analytics.scoring import default_detail


def test_discipline_from_average_days():
    consistency = default_detail(100, "", [("Avg Days/Week", 4.0, 0)])
    level = discipline_level(consistency)
    assert level.level == 6
    assert level.current_value == "4.0 days/wk"
    assert level.next_level_criteria == "5 days/wk"


def test_stamina_from_longest_recent_ride(reference, make_activity):
    rides = [make_activity(days_ago=3, minutes=95), make_activity(days_ago=40, minutes=400)]
    level = stamina_level(rides, reference)
    assert level.level == 4
    assert level.current_value == "1h 35m"
    assert level.next_level_criteria == "2h 0m"


def test_stamina_maxes_out(reference, make_activity):
    level = stamina_level([make_activity(days_ago=3, minutes=300)], reference)
    assert level.level == 10
    assert level.next_level_criteria == "Max"


def test_punch_placeholder_uses_ftp_ratio():
    level = punch_level(ftp=250)
    assert level.level == 4
    assert level.current_value == "275w (x1.10)"
    assert level.next_level_criteria == "281w for 5m"


def test_punch_with_measured_power():
    level = punch_level(ftp=250, best_5min_power=300)
    assert level.level == 8


def test_capacity_from_load_ratio():
    assert capacity_level(default_detail(100, "", [("A:C Ratio", 1.2, 100)])).level == 8
    maintenance = capacity_level(default_detail(85, "", [("A:C Ratio", 1.0, 85)]))
    assert maintenance.level == 5
    assert maintenance.next_level_criteria == "1.07"


def test_economy_without_long_rides(reference, make_activity):
    level = economy_level([make_activity(days_ago=2, minutes=30)], reference)
    assert level.level == 1
    assert level.current_value == "N/A"


def test_economy_improving_efficiency(reference, make_activity):
    rides = [
        make_activity(days_ago=20, minutes=90, weighted_average_watts=200, average_heartrate=150),
        make_activity(days_ago=3, minutes=90, weighted_average_watts=210, average_heartrate=150),
    ]
    assert economy_level(rides, reference).level == 10


def test_economy_without_recent_rides(reference, make_activity):
    rides = [make_activity(days_ago=20, minutes=90, weighted_average_watts=200, average_heartrate=150)]
    level = economy_level(rides, reference)
    assert level.level == 5
    assert level.current_value == "~5% Est. Drift"


def test_level_detail_serializes_camel_case():
    data = punch_level(ftp=250).model_dump(by_alias=True)
    assert "currentValue" in data
    assert "nextLevelCriteria" in data


def test_economy_accepts_aware_reference(reference, make_activity):
    rides = [
        make_activity(days_ago=20, minutes=90, weighted_average_watts=200, average_heartrate=150),
        make_activity(days_ago=3, minutes=90, weighted_average_watts=210, average_heartrate=150),
    ]
    aware = reference.replace(tzinfo=timezone.utc)
    assert economy_level(rides, aware) == economy_level(rides, reference)
