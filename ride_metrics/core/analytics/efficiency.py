"""有氧效率（EF 趋势）评分

说明：
- EF = 功率 / 平均心率，功率优先取加权平均功率，其次平均功率；
  缺少功率或心率（或心率 < 50，视为传感器异常）的活动不参与；
- 近期：最近 7 天；基线：[reference - 35d, reference - 7d)；
- 变化率 = (近期 - 基线) / 基线 × 100：
    ≥ +2% → 100；[0, 2%) → 85；负数 → 85 + 7 × 变化率，最低 40；
- 任一窗口没有 EF 数据时返回默认 50。
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from ...schemas.activities import Activity
from ...schemas.metrics import MetricDetail, Trend
from .scoring import build_detail, default_detail, mean
from .windowing import as_local, between, lookback

RECENT_DAYS = 7
BASELINE_DAYS = 35
MIN_VALID_HR = 50
STRONG_GAIN_PCT = 2.0
DEFAULT_SCORE = 50
LOSS_FLOOR = 40


def activity_power(activity: Activity) -> Optional[float]:
    return activity.weighted_average_watts or activity.average_watts or None


def efficiency_factor(activity: Activity) -> Optional[float]:
    power = activity_power(activity)
    hr = activity.average_heartrate
    if not power or not hr or hr < MIN_VALID_HR:
        return None
    return power / hr


def window_efficiency(activities: Sequence[Activity]) -> List[float]:
    values = [efficiency_factor(a) for a in activities]
    return [v for v in values if v is not None]


def efficiency_score(change_pct: float) -> float:
    if change_pct >= STRONG_GAIN_PCT:
        return 100.0
    if change_pct >= 0:
        return 85.0
    return max(float(LOSS_FLOOR), round(85.0 + 7.0 * change_pct))


def calculate_efficiency(activities: Sequence[Activity], reference: datetime) -> MetricDetail:
    reference = as_local(reference)
    recent = window_efficiency(lookback(activities, reference, RECENT_DAYS))
    baseline = window_efficiency(between(
        activities,
        reference - timedelta(days=BASELINE_DAYS),
        reference - timedelta(days=RECENT_DAYS),
    ))

    recent_ef = mean(recent)
    baseline_ef = mean(baseline)

    if not recent or not baseline or baseline_ef <= 0:
        return default_detail(
            DEFAULT_SCORE,
            "Not enough power + heart rate data to calculate efficiency. Record rides with both sensors.",
            [
                ("Current EF", round(recent_ef, 2), 0),
                ("Baseline EF", round(baseline_ef, 2), 0),
            ],
        )

    change = (recent_ef - baseline_ef) / baseline_ef * 100.0
    score = efficiency_score(change)

    if change >= STRONG_GAIN_PCT:
        suggestion = f"Strong Efficiency Gains (+{change:.1f}%)! Fitness is rising."
    elif change >= 0:
        suggestion = f"Marginal Gains (+{change:.1f}%). Push for > 2% improvement."
    else:
        suggestion = f"Efficiency Loss ({change:.1f}%). Fatigue or detraining detected."

    if change > 0:
        trend = Trend.IMPROVING
    elif change < 0:
        trend = Trend.DECLINING
    else:
        trend = Trend.STABLE

    return build_detail(
        score,
        [
            ("Current EF", round(recent_ef, 2), 0),
            ("Baseline EF", round(baseline_ef, 2), 0),
            ("EF Change", f"{change:+.1f}%", round(score)),
        ],
        trend,
        suggestion,
    )
