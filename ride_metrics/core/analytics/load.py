"""训练负荷（ACWR，急性:慢性负荷比）评分

说明：
- 急性负荷：最近 7 天的移动时间（分钟）；
- 慢性负荷：最近 42 天的移动时间 / 42 × 7，即 6 周的周均分钟数。
  注意慢性窗口包含急性这一周（与产品历史行为一致，增长/维持/危险三个示例都依赖这一点）；
- 比值分档与文案来自固定表，不做连续插值；
- 慢性负荷过低时不做除法：有急性负荷视为"从零突增"（比值 2.0），否则视为维持（比值 1.0）。
"""

from datetime import datetime
from typing import Sequence, Tuple

from ...schemas.activities import Activity
from ...schemas.metrics import MetricDetail, Trend
from .scoring import build_detail
from .time_utils import to_minutes
from .windowing import lookback

ACUTE_DAYS = 7
CHRONIC_DAYS = 42
# below this chronic volume (minutes/week) the ratio is meaningless
MIN_CHRONIC_MINUTES = 10.0

BAND_GROWTH = "growth"
BAND_MAINTENANCE = "maintenance"
BAND_AGGRESSIVE = "aggressive"
BAND_DETRAINING = "detraining"
BAND_DANGER = "danger"

LOAD_BANDS = {
    BAND_GROWTH: (100, "Perfect Growth Zone (1.1 - 1.3). You are building fitness."),
    BAND_MAINTENANCE: (85, "Maintenance Mode (0.95 - 1.1). Push volume slightly to grow."),
    BAND_AGGRESSIVE: (80, "Aggressive Build (1.3 - 1.45). Watch for fatigue."),
    BAND_DETRAINING: (60, "Detraining Risk (< 0.95). Increase training volume."),
    BAND_DANGER: (50, "Danger Zone (> 1.45). Too much too soon! Back off."),
}


def training_minutes(activities: Sequence[Activity]) -> float:
    return sum(to_minutes(a.moving_time) for a in activities)


def acute_chronic_ratio(activities: Sequence[Activity], reference: datetime) -> Tuple[float, float, float]:
    """返回 (acute, chronic, ratio)，单位：分钟/周。"""
    acute = training_minutes(lookback(activities, reference, ACUTE_DAYS))
    chronic = training_minutes(lookback(activities, reference, CHRONIC_DAYS)) / CHRONIC_DAYS * 7

    if chronic > MIN_CHRONIC_MINUTES:
        ratio = acute / chronic
    elif acute > 0:
        ratio = 2.0
    else:
        ratio = 1.0
    return acute, chronic, ratio


def load_band(ratio: float) -> str:
    if 1.10 <= ratio <= 1.30:
        return BAND_GROWTH
    if 0.95 <= ratio < 1.10:
        return BAND_MAINTENANCE
    if 1.30 < ratio <= 1.45:
        return BAND_AGGRESSIVE
    if ratio < 0.95:
        return BAND_DETRAINING
    return BAND_DANGER


def calculate_load(activities: Sequence[Activity], reference: datetime) -> MetricDetail:
    acute, chronic, ratio = acute_chronic_ratio(activities, reference)
    score, suggestion = LOAD_BANDS[load_band(ratio)]

    if ratio > 1.05:
        trend = Trend.IMPROVING
    elif ratio < 0.95:
        trend = Trend.DECLINING
    else:
        trend = Trend.STABLE

    return build_detail(
        score,
        [
            ("Acute Load (7d)", f"{round(acute)} mins", 0),
            ("Chronic Load (42d)", f"{round(chronic)} mins", 0),
            ("A:C Ratio", round(ratio, 2), score),
        ],
        trend,
        suggestion,
    )
