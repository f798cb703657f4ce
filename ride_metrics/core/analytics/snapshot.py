"""纯活动数据快照评分（Activity Snapshot）

说明：
- 只使用活动摘要（速度、距离、时长、爬升），不依赖心率历史，也不划分时间窗口；
- 取最近 28 次活动（按时间倒序），给出 Power / Endurance / Consistency / Speed / Training Load
  五个维度，各维度由若干加分项累加后截断到 100；
- 综合分权重：0.2 / 0.25 / 0.2 / 0.15 / 0.2；
- 没有活动时返回全零结果。
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from ...schemas.activities import Activity
from ...schemas.metrics import ActivitySnapshot, MetricDetail, SnapshotDetails, Trend
from .scoring import build_detail, clamp_score, mean

SNAPSHOT_ACTIVITIES = 28
MPS_TO_MPH = 2.237
METERS_TO_MILES = 0.000621371
METERS_TO_FEET = 3.28084

SNAPSHOT_WEIGHTS = {
    "power": 0.2,
    "endurance": 0.25,
    "consistency": 0.2,
    "speed": 0.15,
    "training_load": 0.2,
}


def _mph(a: Activity) -> float:
    return (a.average_speed or 0.0) * MPS_TO_MPH


def _tiered(suggestions: Tuple[str, str, str], score: int) -> str:
    if score < 60:
        return suggestions[0]
    if score < 80:
        return suggestions[1]
    return suggestions[2]


def speed_or_distance_trend(activities: Sequence[Activity], metric: str) -> Trend:
    """前半（较新）与后半（较旧）均值对比，变化超过 ±5% 才算趋势。"""
    if len(activities) < 6:
        return Trend.STABLE
    mid = len(activities) // 2
    if metric == "speed":
        values = [a.average_speed or 0.0 for a in activities]
    else:
        values = [a.distance or 0.0 for a in activities]
    recent_avg = mean(values[:mid])
    older_avg = mean(values[mid:])
    if older_avg == 0:
        return Trend.STABLE
    change = (recent_avg - older_avg) / older_avg * 100.0
    if change > 5:
        return Trend.IMPROVING
    if change < -5:
        return Trend.DECLINING
    return Trend.STABLE


def power_metric(activities: Sequence[Activity]) -> MetricDetail:
    n = len(activities)
    hard = [a for a in activities if _mph(a) >= 18]
    hard_pct = len(hard) / n * 100.0
    power_score = min(40.0, hard_pct * 2)

    avg_elevation = mean([a.total_elevation_gain or 0.0 for a in activities])
    elevation_score = min(30.0, avg_elevation / 1000.0 * 30)

    max_effort = max(_mph(a) for a in activities)
    effort_score = min(30.0, max_effort / 25.0 * 30)

    score = clamp_score(min(100.0, power_score + elevation_score + effort_score))
    return build_detail(
        score,
        [
            ("High Intensity Rides", f"{len(hard)} rides ({round(hard_pct)}%)", round(power_score)),
            ("Climbing Volume", f"{round(avg_elevation * METERS_TO_FEET)} ft avg", round(elevation_score)),
            ("Peak Performance", f"{max_effort:.1f} mph max avg", round(effort_score)),
        ],
        speed_or_distance_trend(activities, "speed"),
        _tiered((
            "Add 1-2 high-intensity interval sessions per week",
            "Good power development - maintain intensity work",
            "Excellent power capacity - focus on maintaining and varying stimuli",
        ), score),
    )


def endurance_metric(activities: Sequence[Activity]) -> MetricDetail:
    n = len(activities)
    total_distance = sum(a.distance or 0.0 for a in activities)
    weekly_miles = total_distance / n * 7 * METERS_TO_MILES
    if weekly_miles >= 150:
        volume_score = 40.0
    elif weekly_miles >= 100:
        volume_score = 32.0
    elif weekly_miles >= 75:
        volume_score = 25.0
    elif weekly_miles >= 50:
        volume_score = 20.0
    else:
        volume_score = weekly_miles * 0.4

    longest_miles = max(a.distance or 0.0 for a in activities) * METERS_TO_MILES
    if longest_miles >= 100:
        long_score = 35.0
    elif longest_miles >= 75:
        long_score = 28.0
    elif longest_miles >= 50:
        long_score = 22.0
    else:
        long_score = longest_miles * 0.4

    avg_hours = sum(a.moving_time or 0 for a in activities) / n / 3600.0
    duration_score = min(25.0, avg_hours * 8)

    score = clamp_score(min(100.0, volume_score + long_score + duration_score))
    return build_detail(
        score,
        [
            ("Weekly Volume", f"{weekly_miles:.1f} mi/week", round(volume_score)),
            ("Longest Ride", f"{longest_miles:.1f} miles", round(long_score)),
            ("Ride Duration", f"{avg_hours:.1f}h avg", round(duration_score)),
        ],
        speed_or_distance_trend(activities, "distance"),
        _tiered((
            "Build aerobic base with longer, easier rides",
            "Solid endurance base - gradually increase volume",
            "Excellent endurance capacity - maintain consistency",
        ), score),
    )


def consistency_metric(activities: Sequence[Activity]) -> MetricDetail:
    unique_days = len({a.start_date_local.date() for a in activities})
    span = activities[0].start_date_local - activities[-1].start_date_local
    day_range = math.ceil(span.total_seconds() / 86400.0)
    frequency = unique_days / day_range * 7 if day_range > 0 else 0.0

    if 4 <= frequency <= 6:
        frequency_score = 40.0
    elif 3 <= frequency <= 7:
        frequency_score = 30.0
    elif frequency >= 2:
        frequency_score = 20.0
    else:
        frequency_score = frequency * 10

    distances = np.asarray([a.distance or 0.0 for a in activities], dtype=float)
    avg_distance = float(distances.mean())
    cv = float(distances.std()) / avg_distance * 100.0 if avg_distance > 0 else 0.0
    volume_score = max(0.0, min(35.0, 35 - cv * 0.5))

    gaps: List[int] = []
    for newer, older in zip(activities, activities[1:]):
        gap_days = abs((newer.start_date_local - older.start_date_local).total_seconds()) / 86400.0
        gaps.append(1 if gap_days <= 3 else 0)
    regularity_score = mean(gaps) * 25 if gaps else 0.0

    score = clamp_score(min(100.0, frequency_score + volume_score + regularity_score))
    return build_detail(
        score,
        [
            ("Training Frequency", f"{frequency:.1f} days/week", round(frequency_score)),
            ("Volume Consistency", f"{100 - cv:.0f}% consistent", round(volume_score)),
            ("Schedule Regularity", f"{round(regularity_score / 25 * 100)}% regular", round(regularity_score)),
        ],
        Trend.STABLE,
        _tiered((
            "Aim for 3-4 rides per week with consistent gaps",
            "Good consistency - maintain regular training schedule",
            "Excellent training consistency - key to long-term improvement",
        ), score),
    )


def speed_metric(activities: Sequence[Activity]) -> MetricDetail:
    speeds = [_mph(a) for a in activities]
    avg_speed = mean(speeds)
    if avg_speed >= 20:
        speed_score = 40.0
    elif avg_speed >= 18:
        speed_score = 35.0
    elif avg_speed >= 16:
        speed_score = 30.0
    elif avg_speed >= 14:
        speed_score = 25.0
    else:
        speed_score = avg_speed * 1.5

    mid = len(speeds) // 2
    recent_avg = mean(speeds[:mid])
    older_avg = mean(speeds[mid:])
    improvement = (recent_avg - older_avg) / older_avg * 100.0 if mid > 0 and older_avg > 0 else 0.0
    progression_score = min(30.0, max(0.0, 15 + improvement * 1.5))

    max_speed = max(speeds)
    peak_score = min(30.0, max_speed / 25.0 * 30)

    score = clamp_score(min(100.0, speed_score + progression_score + peak_score))
    if improvement > 5:
        trend = Trend.IMPROVING
    elif improvement < -5:
        trend = Trend.DECLINING
    else:
        trend = Trend.STABLE

    return build_detail(
        score,
        [
            ("Average Speed", f"{avg_speed:.1f} mph", round(speed_score)),
            ("Speed Progression", f"{improvement:+.1f}%" if improvement > 0 else f"{improvement:.1f}%", round(progression_score)),
            ("Peak Speed Capacity", f"{max_speed:.1f} mph", round(peak_score)),
        ],
        trend,
        _tiered((
            "Work on leg strength and cadence efficiency",
            "Good speed - add tempo work to continue improving",
            "Excellent speed capacity - focus on sustaining at race pace",
        ), score),
    )


def easy_share(activities: Sequence[Activity]) -> int:
    """速度低于 15 mph 的活动占比（%）。"""
    if not activities:
        return 0
    easy = sum(1 for a in activities if _mph(a) < 15)
    return round(easy / len(activities) * 100)


def workload_progression(activities: Sequence[Activity]) -> str:
    if len(activities) < 6:
        return "Appropriate"
    distances = [a.distance or 0.0 for a in activities]
    recent = sum(distances[:3]) / 3
    older = sum(distances[3:6]) / 3
    if older == 0:
        return "Appropriate"
    change = (recent - older) / older * 100.0
    if change > 15:
        return "Too aggressive"
    if change < -15:
        return "Decreasing"
    return "Appropriate"


def training_load_metric(activities: Sequence[Activity]) -> MetricDetail:
    n = len(activities)
    weekly_hours = sum(a.moving_time or 0 for a in activities) / 3600.0 / n * 7
    if weekly_hours >= 10:
        hours_score = 35.0
    elif weekly_hours >= 8:
        hours_score = 30.0
    elif weekly_hours >= 6:
        hours_score = 25.0
    elif weekly_hours >= 4:
        hours_score = 20.0
    else:
        hours_score = weekly_hours * 5

    easy = easy_share(activities)
    if 70 <= easy <= 85:
        balance_score = 35
    elif 60 <= easy <= 90:
        balance_score = 25
    else:
        balance_score = 15

    # load management always contributes its full 30 points; the label is informational
    management_score = 30
    score = clamp_score(min(100.0, hours_score + balance_score + management_score))
    return build_detail(
        score,
        [
            ("Weekly Hours", f"{weekly_hours:.1f}h/week", round(hours_score)),
            ("Easy/Hard Balance", f"{easy}% easy", balance_score),
            ("Load Management", workload_progression(activities), management_score),
        ],
        Trend.STABLE,
        _tiered((
            "Balance training load with 80% easy, 20% hard rides",
            "Good training load balance - avoid sudden increases",
            "Excellent load management - sustainable long-term",
        ), score),
    )


def zero_snapshot() -> ActivitySnapshot:
    empty = MetricDetail(score=0, components=[], trend=Trend.STABLE, suggestion="No data available")
    return ActivitySnapshot(
        power=0,
        endurance=0,
        consistency=0,
        speed=0,
        training_load=0,
        overall_score=0,
        details=SnapshotDetails(
            power=empty,
            endurance=empty,
            consistency=empty,
            speed=empty,
            training_load=empty,
        ),
    )


def calculate_snapshot(activities: Sequence[Activity]) -> ActivitySnapshot:
    usable = sorted(
        (a for a in activities if a.moving_time is not None),
        key=lambda a: a.start_date_local,
        reverse=True,
    )[:SNAPSHOT_ACTIVITIES]
    if not usable:
        return zero_snapshot()

    details = SnapshotDetails(
        power=power_metric(usable),
        endurance=endurance_metric(usable),
        consistency=consistency_metric(usable),
        speed=speed_metric(usable),
        training_load=training_load_metric(usable),
    )
    overall = clamp_score(sum(getattr(details, k).score * w for k, w in SNAPSHOT_WEIGHTS.items()))
    return ActivitySnapshot(
        power=details.power.score,
        endurance=details.endurance.score,
        consistency=details.consistency.score,
        speed=details.speed.score,
        training_load=details.training_load.score,
        overall_score=overall,
        details=details,
    )
