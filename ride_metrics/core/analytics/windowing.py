"""时间窗口划分（Time Windowing）

说明：
- 所有窗口都以调用方传入的参考时刻 `reference` 为锚点，模块内不读取系统时钟；
- 活动时间与参考时刻都按本地墙上时间比较（naive datetime）；
- 晚于参考时刻的活动一律不进入任何窗口；
- 周窗口有两种对齐方式：
    * calendar：自然周，周一 00:00 起算，第 0 周为包含参考时刻的一周（可能不完整）；
    * rolling：以参考时刻为终点的连续 7 天，第 0 周为 [reference - 7d, reference]。
- 返回的都是新列表，不修改输入。
"""

from datetime import datetime, time, timedelta
from typing import List, Sequence, Tuple

from ...errors import InvalidWindowError
from ...schemas.activities import Activity
from ...schemas.metrics import WeeklyBucket

DAY = timedelta(days=1)
WEEK = timedelta(days=7)

ALIGN_CALENDAR = "calendar"
ALIGN_ROLLING = "rolling"


def as_local(reference: datetime) -> datetime:
    """参考时刻去掉时区，与活动的本地时间对齐。"""
    if reference.tzinfo is not None:
        return reference.replace(tzinfo=None)
    return reference


def eligible(activities: Sequence[Activity], reference: datetime) -> List[Activity]:
    """筛掉未来活动与缺少移动时间的记录，按时间倒序（最新在前）。

    排序是稳定的，同一时刻的活动保持输入顺序。
    """
    reference = as_local(reference)
    kept = [
        a for a in activities
        if a.moving_time is not None and a.start_date_local <= reference
    ]
    return sorted(kept, key=lambda a: a.start_date_local, reverse=True)


def lookback(activities: Sequence[Activity], reference: datetime, days: float) -> List[Activity]:
    """[reference - days, reference] 内的活动。"""
    reference = as_local(reference)
    start = reference - timedelta(days=days)
    return [a for a in activities if start <= a.start_date_local <= reference]


def between(activities: Sequence[Activity], start: datetime, end: datetime) -> List[Activity]:
    """[start, end) 内的活动。"""
    return [a for a in activities if start <= a.start_date_local < end]


def week_start(reference: datetime) -> datetime:
    """参考时刻所在自然周的周一 00:00。"""
    day = datetime.combine(as_local(reference).date(), time.min)
    return day - timedelta(days=day.weekday())


def week_ranges(reference: datetime, weeks: int, align: str = ALIGN_CALENDAR) -> List[Tuple[datetime, datetime]]:
    """生成 weeks 个周区间（新→旧），每个为 (start, end)。

    calendar 对齐时区间为 [start, end)；rolling 对齐时第 0 周包含 end（即参考时刻本身）。
    """
    if weeks < 1:
        raise InvalidWindowError(f"weeks must be >= 1, got {weeks}")
    reference = as_local(reference)
    if align == ALIGN_CALENDAR:
        current = week_start(reference)
        return [(current - k * WEEK, current - (k - 1) * WEEK) for k in range(weeks)]
    if align == ALIGN_ROLLING:
        return [(reference - (k + 1) * WEEK, reference - k * WEEK) for k in range(weeks)]
    raise InvalidWindowError(f"unknown week alignment: {align!r}")


def split_weeks(
    activities: Sequence[Activity],
    reference: datetime,
    weeks: int,
    align: str = ALIGN_CALENDAR,
) -> List[List[Activity]]:
    """按周切分活动（新→旧）。"""
    reference = as_local(reference)
    out: List[List[Activity]] = []
    for index, (start, end) in enumerate(week_ranges(reference, weeks, align)):
        closed = index == 0 and align == ALIGN_ROLLING
        out.append([
            a for a in activities
            if start <= a.start_date_local <= reference
            and (a.start_date_local < end or (closed and a.start_date_local == end))
        ])
    return out


def weekly_buckets(
    activities: Sequence[Activity],
    reference: datetime,
    weeks: int,
    align: str = ALIGN_CALENDAR,
) -> List[WeeklyBucket]:
    """按周汇总距离/时间/次数/训练天数（新→旧）。"""
    ranges = week_ranges(reference, weeks, align)
    buckets: List[WeeklyBucket] = []
    for index, week in enumerate(split_weeks(activities, reference, weeks, align)):
        buckets.append(WeeklyBucket(
            week_index=index,
            week_start=ranges[index][0].date(),
            total_distance=round(sum(a.distance or 0.0 for a in week), 1),
            total_time=int(sum(a.moving_time or 0 for a in week)),
            activity_count=len(week),
            active_days=len({a.start_date_local.date() for a in week}),
        ))
    return buckets


__all__ = [
    "ALIGN_CALENDAR",
    "ALIGN_ROLLING",
    "as_local",
    "between",
    "eligible",
    "lookback",
    "split_weeks",
    "week_ranges",
    "week_start",
    "weekly_buckets",
]
