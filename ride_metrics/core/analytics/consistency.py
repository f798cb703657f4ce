"""训练规律性（Consistency）评分

说明：
- 统计以参考时刻为终点的最近 8 个滚动周（每周 7 天），与星期几无关；
- 每周训练天数取平均得到 "Avg Days/Week"，供骑手画像的 Discipline 等级使用；
- 周距离的变异系数 CV = 总体标准差 / 均值，得分 = max(0, 100 - 50 × CV)；
  全部距离为 0（如室内骑行未记录距离）时改用周移动时间；
- 有训练的周少于 2 周时返回中性默认分 50。
"""

from datetime import datetime
from typing import List, Sequence

import numpy as np

from ...schemas.activities import Activity
from ...schemas.metrics import MetricDetail, Trend
from .scoring import build_detail, clamp_score, default_detail
from .windowing import ALIGN_ROLLING, split_weeks

CONSISTENCY_WEEKS = 8
CV_PENALTY = 50.0
DEFAULT_SCORE = 50
MIN_ACTIVE_WEEKS = 2


def consistency_weeks(activities: Sequence[Activity], reference: datetime, weeks: int = CONSISTENCY_WEEKS) -> List[List[Activity]]:
    """最近 weeks 个滚动周（新→旧），第 0 周为 [reference - 7d, reference]。"""
    return split_weeks(activities, reference, weeks, align=ALIGN_ROLLING)


def active_days(week: Sequence[Activity]) -> int:
    return len({a.start_date_local.date() for a in week})


def weekly_volume(weeks: Sequence[Sequence[Activity]]) -> List[float]:
    distances = [float(sum(a.distance or 0.0 for a in w)) for w in weeks]
    if sum(distances) > 0:
        return distances
    return [float(sum(a.moving_time or 0 for a in w)) for w in weeks]


def coefficient_of_variation(values: Sequence[float]) -> float:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    avg = float(arr.mean())
    if avg <= 0:
        return 0.0
    return float(arr.std()) / avg


def _suggestion(score: int) -> str:
    if score >= 95:
        return "Machine-like Consistency! Same volume, same days, every week."
    if score >= 80:
        return "Good Consistency. Don't miss sessions."
    if score >= 60:
        return "Variable Schedule. Try to lock in your days."
    return "Erratic weekly volume. Establish a routine."


def calculate_consistency(activities: Sequence[Activity], reference: datetime) -> MetricDetail:
    weeks = consistency_weeks(activities, reference)
    days = [active_days(w) for w in weeks]
    avg_days = float(np.mean(days)) if days else 0.0
    volumes = weekly_volume(weeks)

    if sum(1 for w in weeks if w) < MIN_ACTIVE_WEEKS or sum(volumes) <= 0:
        return default_detail(
            DEFAULT_SCORE,
            "Not enough weekly history. Train at least two separate weeks to score consistency.",
            [("Avg Days/Week", round(avg_days, 1), 0)],
        )

    cv = coefficient_of_variation(volumes)
    score = clamp_score(100 - CV_PENALTY * cv)
    days_std = float(np.std(days))

    recent_std = float(np.std(days[:4]))
    older_std = float(np.std(days[4:])) if days[4:] else recent_std
    if recent_std < older_std:
        trend = Trend.IMPROVING
    elif recent_std > older_std:
        trend = Trend.DECLINING
    else:
        trend = Trend.STABLE

    return build_detail(
        score,
        [
            ("Avg Days/Week", round(avg_days, 1), 0),
            ("Volume Variation (CV)", f"{cv * 100:.0f}%", 0),
            ("Variability", f"±{days_std:.1f} days", score),
        ],
        trend,
        _suggestion(score),
    )
