from datetime import datetime

from ride_metrics.core.analytics.volume import calculate_weekly_volume, type_breakdown
from ride_metrics.schemas.activities import Activity

# 周训练量按自然周（周一起算）统计，这里固定一个周三参考时刻
WEDNESDAY = datetime(2024, 5, 29, 21, 0)


def _ride(start, distance, minutes=60, **fields):
    return Activity(start_date_local=start, moving_time=minutes * 60, distance=distance, **fields)


def test_this_week_versus_last_week():
    rides = [
        _ride(datetime(2024, 5, 29, 7), 30000),
        _ride(datetime(2024, 5, 27, 7), 30000),
        _ride(datetime(2024, 5, 26, 7), 40000),
        _ride(datetime(2024, 5, 30, 7), 99000),  # 晚于参考时刻
    ]
    volume = calculate_weekly_volume(rides, WEDNESDAY)

    assert len(volume.buckets) == 8
    assert volume.buckets[0].week_start.isoformat() == "2024-05-27"
    assert volume.this_week_distance == 60.0
    assert volume.last_week_distance == 40.0
    assert volume.change_pct == 50
    assert volume.type_breakdown[0].count == 3


def test_no_last_week_means_no_change():
    volume = calculate_weekly_volume([_ride(datetime(2024, 5, 28, 7), 30000)], WEDNESDAY)
    assert volume.last_week_distance == 0.0
    assert volume.change_pct == 0


def test_type_breakdown_keeps_first_seen_order(make_activity):
    rides = [
        make_activity(type="VirtualRide", minutes=45, distance=20000),
        make_activity(type="Ride", minutes=60, distance=30000),
        make_activity(type="VirtualRide", minutes=30, distance=10000),
    ]
    breakdown = type_breakdown(rides)
    assert [b.type for b in breakdown] == ["VirtualRide", "Ride"]
    assert breakdown[0].count == 2
    assert breakdown[0].distance == 30000
    assert breakdown[0].time == 75 * 60
