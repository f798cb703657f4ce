"""耐力（长距离骑行进步）评分

说明：
- 当前值：最近 7 天内最长一次骑行的移动时间；
- 基线：前 1~4 个滚动周（每周 7 天）各自最长骑行的平均值，空周按 0 计入；
- ratio = 当前 / 基线：≥ 1.5 满分；[1.0, 1.5) 在 80~100 之间线性；
  < 1.0 按 80 - 80 × (1 - ratio) 下降，最低 40；
- 无基线但本周有骑行：按最长距离的绝对阈值打分；两者都没有：默认 50。
"""

from datetime import datetime
from typing import Sequence

from ...schemas.activities import Activity
from ...schemas.metrics import MetricDetail, Trend
from .scoring import build_detail, default_detail
from .time_utils import to_minutes
from .windowing import ALIGN_ROLLING, lookback, split_weeks

BASELINE_WEEKS = 4
FULL_SCORE_RATIO = 1.5
SCORE_FLOOR = 40
DEFAULT_SCORE = 50

# (km, score), checked top-down when there is no baseline yet
ABSOLUTE_DISTANCE_SCORES = (
    (100.0, 100),
    (60.0, 85),
    (30.0, 70),
)
ABSOLUTE_DISTANCE_FLOOR = 55


def longest_ride(activities: Sequence[Activity]) -> int:
    return max([a.moving_time or 0 for a in activities], default=0)


def ratio_score(ratio: float) -> float:
    if ratio >= FULL_SCORE_RATIO:
        return 100.0
    if ratio >= 1.0:
        return 80.0 + 40.0 * (ratio - 1.0)
    return max(float(SCORE_FLOOR), 80.0 - 80.0 * (1.0 - ratio))


def absolute_distance_score(km: float) -> int:
    for threshold, score in ABSOLUTE_DISTANCE_SCORES:
        if km >= threshold:
            return score
    return ABSOLUTE_DISTANCE_FLOOR


def calculate_endurance(activities: Sequence[Activity], reference: datetime) -> MetricDetail:
    current_week = lookback(activities, reference, 7)
    current = longest_ride(current_week)

    weeks = split_weeks(activities, reference, BASELINE_WEEKS + 1, align=ALIGN_ROLLING)[1:]
    baseline = sum(longest_ride(w) for w in weeks) / BASELINE_WEEKS

    if baseline <= 0:
        if current <= 0:
            return default_detail(
                DEFAULT_SCORE,
                "No rides in the last 5 weeks. Log a long ride to start tracking endurance.",
            )
        longest_km = max((a.distance or 0.0) for a in current_week) / 1000.0
        score = absolute_distance_score(longest_km)
        return build_detail(
            score,
            [
                ("This Week Longest", f"{round(to_minutes(current))}m", 0),
                ("Longest Distance", f"{longest_km:.1f} km", score),
            ],
            Trend.STABLE,
            "No baseline yet. Scored on absolute distance until 4 weeks of history exist.",
        )

    ratio = current / baseline
    score = ratio_score(ratio)

    if ratio > 1.10:
        suggestion = "Excellent! Pushing boundaries (> 110% of baseline)."
    elif ratio >= 0.95:
        target = round(to_minutes(baseline * FULL_SCORE_RATIO))
        suggestion = f"Comfort Zone. To reach Score 100, extend your long ride to > {target} mins."
    else:
        target = round(to_minutes(baseline * 0.95))
        suggestion = f"Regression (< 95% baseline). Long ride needs to be at least {target} mins to maintain."

    trend = Trend.IMPROVING if ratio >= 1.0 else Trend.DECLINING

    return build_detail(
        score,
        [
            ("This Week Longest", f"{round(to_minutes(current))}m", 0),
            ("Baseline Longest", f"{round(to_minutes(baseline))}m", 0),
            ("Ratio", round(ratio, 2), round(score)),
        ],
        trend,
        suggestion,
    )
