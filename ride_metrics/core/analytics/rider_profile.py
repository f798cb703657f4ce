"""骑手画像等级（Rider Profile）

说明：
- 五个维度各给出 1~10 的整数等级，升级目标由同一公式反推：
    * Discipline（自律）：min(10, floor(周均训练天数 × 1.5))，来自 Consistency 详情
    * Stamina（耐力）：floor(1 + 近 28 天最长骑行分钟 / 30)
    * Punch（爆发）：floor((最佳 5 分钟功率 / FTP - 1) × 40)
    * Capacity（负荷容量）：floor(5 + (ACWR - 1.0 + 0.001) × 15)，来自 Load 详情
    * Economy（经济性）：近 14 天与更早的 EF 变化换算成"估算心率漂移"
- 没有功率曲线时，最佳 5 分钟功率按 FTP × 1.1 占位。这是已知的近似，
  不尝试从活动摘要里"推算" 5 分钟功率。
"""

import math
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ... import config
from ...schemas.activities import Activity
from ...schemas.metrics import LevelDetail, MetricDetail, RiderProfile
from .efficiency import activity_power, efficiency_factor
from .scoring import component_value, floor_level, mean
from .time_utils import format_duration, to_minutes
from .windowing import as_local, lookback

STAMINA_DAYS = 28
STAMINA_MINUTES_PER_LEVEL = 30
PUNCH_FALLBACK_RATIO = 1.1
PUNCH_RATIO_SCALE = 40
CAPACITY_RATIO_SCALE = 15
ECONOMY_DAYS = 42
ECONOMY_RECENT_DAYS = 14
ECONOMY_MIN_RIDE_SECONDS = 60 * 60


def discipline_level(consistency: MetricDetail) -> LevelDetail:
    avg_days = component_value(consistency, "Avg Days/Week")
    level = floor_level(min(10.0, avg_days * 1.5))
    next_days = math.ceil((level + 1) / 1.5)
    maxed = level >= 10
    return LevelDetail(
        level=level,
        current_value=f"{avg_days:.1f} days/wk",
        next_level_criteria="Max" if maxed else f"{next_days} days/wk",
        prompt="Keep the streak alive." if maxed else "Don't break the chain. Aim for consistency.",
    )


def stamina_level(activities: Sequence[Activity], reference: datetime) -> LevelDetail:
    recent = lookback(activities, reference, STAMINA_DAYS)
    longest_min = to_minutes(max([a.moving_time or 0 for a in recent], default=0))
    level = floor_level(1 + longest_min / STAMINA_MINUTES_PER_LEVEL)
    next_min = level * STAMINA_MINUTES_PER_LEVEL

    if level >= 10:
        return LevelDetail(
            level=level,
            current_value=format_duration(longest_min),
            next_level_criteria="Max",
            prompt="Grand Tour Stamina. Maintain your long rides.",
        )
    return LevelDetail(
        level=level,
        current_value=format_duration(longest_min),
        next_level_criteria=format_duration(next_min),
        prompt=f"Complete a {format_duration(next_min)} ride this month to Level Up.",
    )


def punch_level(ftp: Optional[float] = None, best_5min_power: Optional[float] = None) -> LevelDetail:
    """best_5min_power 来自外部功率曲线；缺失时按 FTP × 1.1 占位。"""
    if not ftp or ftp <= 0:
        ftp = config.DEFAULT_FTP
    best = best_5min_power if best_5min_power and best_5min_power > 0 else ftp * PUNCH_FALLBACK_RATIO
    ratio = best / ftp

    level = floor_level((ratio - 1.0) * PUNCH_RATIO_SCALE)
    next_ratio = (level + 1) / PUNCH_RATIO_SCALE + 1.0
    next_watts = round(next_ratio * ftp)

    return LevelDetail(
        level=level,
        current_value=f"{round(best)}w (x{ratio:.2f})",
        next_level_criteria=f"{next_watts}w for 5m",
        prompt=f"Hit {next_watts}w for 5 mins to Level Up.",
    )


def capacity_level(load: MetricDetail) -> LevelDetail:
    ratio = component_value(load, "A:C Ratio")
    level = floor_level(5 + (ratio - 1.0 + 0.001) * CAPACITY_RATIO_SCALE)
    next_ratio = (level + 1 - 5) / CAPACITY_RATIO_SCALE + 1.0
    maxed = level >= 10
    return LevelDetail(
        level=level,
        current_value=f"{ratio:.2f}",
        next_level_criteria=f"{next_ratio:.2f}",
        prompt="Max Growth Rate." if maxed else f"Safely increase volume to ACWR {next_ratio:.2f}.",
    )


def economy_level(activities: Sequence[Activity], reference: datetime) -> LevelDetail:
    """EF 变化作为心率漂移的代理：+5% EF ≈ 0% 漂移（10 级），0% ≈ 5%（5 级），-5% ≈ 10%（1 级）。"""
    reference = as_local(reference)
    rides = [
        a for a in lookback(activities, reference, ECONOMY_DAYS)
        if (a.moving_time or 0) >= ECONOMY_MIN_RIDE_SECONDS
        and activity_power(a) and a.average_heartrate
    ]
    if not rides:
        return LevelDetail(
            level=1,
            current_value="N/A",
            next_level_criteria="N/A",
            prompt="Record rides > 60m with Power & HR to track Economy.",
        )

    split = reference - timedelta(days=ECONOMY_RECENT_DAYS)
    recent = [ef for ef in (efficiency_factor(a) for a in rides if a.start_date_local >= split) if ef is not None]
    older = [ef for ef in (efficiency_factor(a) for a in rides if a.start_date_local < split) if ef is not None]
    recent_avg = mean(recent)
    baseline_avg = mean(older)

    if recent_avg > 0 and baseline_avg > 0:
        change_pct = (recent_avg - baseline_avg) / baseline_avg * 100.0
        drift = 5.0 - change_pct
        level = floor_level(5 + change_pct)
        drift_text = "< 1" if drift <= 0 else f"{drift:.1f}"
        return LevelDetail(
            level=level,
            current_value=f"{drift_text}% Est. Drift",
            next_level_criteria=f"< {max(0.0, drift - 1.5):.1f}% Drift",
            prompt="Focus on steady Zone 2 rides to reduce cardiac drift.",
        )

    return LevelDetail(
        level=5,
        current_value="~5% Est. Drift",
        next_level_criteria="< 3.5% Drift",
        prompt="Keep recording long rides to establish Economy baseline.",
    )


def calculate_profile(
    activities: Sequence[Activity],
    reference: datetime,
    load: MetricDetail,
    consistency: MetricDetail,
    ftp: Optional[float] = None,
    best_5min_power: Optional[float] = None,
) -> RiderProfile:
    return RiderProfile(
        discipline=discipline_level(consistency),
        stamina=stamina_level(activities, reference),
        punch=punch_level(ftp, best_5min_power),
        capacity=capacity_level(load),
        economy=economy_level(activities, reference),
    )
