"""周训练量概览：自然周汇总、本周与上周对比、按活动类型汇总。"""

from collections import OrderedDict
from datetime import datetime
from typing import List, Sequence

from ...schemas.activities import Activity
from ...schemas.metrics import TypeBreakdown, WeeklyVolume
from .windowing import as_local, weekly_buckets

VOLUME_WEEKS = 8


def type_breakdown(activities: Sequence[Activity]) -> List[TypeBreakdown]:
    """按首次出现的顺序汇总每种活动类型的次数/距离/时间。"""
    totals: "OrderedDict[str, dict]" = OrderedDict()
    for a in activities:
        entry = totals.setdefault(a.type, {"count": 0, "distance": 0.0, "time": 0})
        entry["count"] += 1
        entry["distance"] += a.distance or 0.0
        entry["time"] += a.moving_time or 0
    return [
        TypeBreakdown(type=t, count=v["count"], distance=round(v["distance"], 1), time=int(v["time"]))
        for t, v in totals.items()
    ]


def calculate_weekly_volume(activities: Sequence[Activity], reference: datetime, weeks: int = VOLUME_WEEKS) -> WeeklyVolume:
    reference = as_local(reference)
    buckets = weekly_buckets(activities, reference, weeks)
    this_week = buckets[0].total_distance / 1000.0
    last_week = buckets[1].total_distance / 1000.0 if len(buckets) > 1 else 0.0
    change = (this_week - last_week) / last_week * 100.0 if last_week > 0 else 0.0

    covered = [
        a for a in activities
        if buckets[-1].week_start <= a.start_date_local.date() and a.start_date_local <= reference
    ]
    return WeeklyVolume(
        buckets=buckets,
        this_week_distance=round(this_week, 1),
        last_week_distance=round(last_week, 1),
        change_pct=int(round(change)),
        type_breakdown=type_breakdown(covered),
    )
