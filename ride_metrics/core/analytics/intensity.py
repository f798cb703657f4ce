"""强度分布（两极化）评分

说明：
- 窗口：最近 7 天；只有带平均心率的活动计入分母，无心率的活动不当作 Z1；
- 单次活动的区间占比是经验代理（没有逐秒心率流）：
    * 平均心率 ≥ Z4 阈值（默认 160）：90% Z4 + 10% Z3
    * 平均心率 ≥ Z3 阈值（默认 135）：80% Z3 + 10% Z4（"灰色区间"骑行）
    * 平均心率偏低但最大心率 ≥ 170：15% Z4 + 25% Z3（低均值的间歇课）
    * 其余：全部视为轻松区间
- 判定顺序：Z4 > 15% 且 Z3 < 20% → 100；否则 Z3 > 30% → 60（垃圾里程惩罚）；否则插值；
- 没有任何心率数据时返回默认 50，避免把 0%/0% 误判为完美分布；
- 活动标题按固定关键词表分类，仅作为展示项（不参与打分）。
"""

import re
from datetime import datetime
from typing import Optional, Sequence, Tuple

from ... import config
from ...schemas.activities import Activity
from ...schemas.metrics import MetricDetail, Trend
from .scoring import build_detail, default_detail
from .windowing import lookback

WINDOW_DAYS = 7
DEFAULT_SCORE = 50

POLARIZED_Z4_MIN = 15.0
POLARIZED_Z3_MAX = 20.0
JUNK_Z3_MIN = 30.0
JUNK_SCORE = 60

# (label, keywords); first match wins, so hard sessions come first
WORKOUT_KEYWORDS = (
    ("race", ("race", "crit", "criterium", "gran fondo", "time trial", "tt")),
    ("vo2", ("vo2", "vo2max", "anaerobic", "sprint", "sprints")),
    ("threshold", ("threshold", "ftp", "sweet spot", "sweetspot", "over-under", "over unders")),
    ("tempo", ("tempo", "steady state")),
    ("endurance", ("endurance", "zone 2", "z2", "base", "long ride")),
    ("recovery", ("recovery", "easy", "spin", "cooldown", "cool down")),
)
HARD_LABELS = frozenset({"race", "vo2", "threshold"})


def classify_workout(name: Optional[str]) -> Optional[str]:
    """按标题关键词给出训练类型；无匹配返回 None。"""
    if not name:
        return None
    text = name.lower()
    for label, keywords in WORKOUT_KEYWORDS:
        for kw in keywords:
            if re.search(r"\b" + re.escape(kw) + r"\b", text):
                return label
    return None


def zone_seconds(activity: Activity) -> Tuple[float, float]:
    """估算单次活动的 (Z4 秒数, Z3 秒数)。"""
    duration = float(activity.moving_time or 0)
    avg_hr = activity.average_heartrate or 0
    max_hr = activity.max_heartrate or 0

    if avg_hr >= config.Z4_HEARTRATE:
        return duration * 0.9, duration * 0.1
    if avg_hr >= config.Z3_HEARTRATE:
        return duration * 0.1, duration * 0.8
    if max_hr >= config.INTERVAL_MAX_HEARTRATE:
        return duration * 0.15, duration * 0.25
    return 0.0, 0.0


def zone_distribution(activities: Sequence[Activity]) -> Tuple[float, float, float]:
    """返回 (有心率的总时长秒, Z4 %, Z3 %)。"""
    with_hr = [a for a in activities if a.average_heartrate]
    total = float(sum(a.moving_time or 0 for a in with_hr))
    if total <= 0:
        return 0.0, 0.0, 0.0
    z4 = z3 = 0.0
    for a in with_hr:
        s4, s3 = zone_seconds(a)
        z4 += s4
        z3 += s3
    return total, z4 / total * 100.0, z3 / total * 100.0


def interpolated_score(z4_pct: float, z3_pct: float) -> float:
    score = 50.0 + 45.0 * min(z4_pct, POLARIZED_Z4_MIN) / POLARIZED_Z4_MIN - 2.0 * max(0.0, z3_pct - POLARIZED_Z3_MAX)
    return max(40.0, min(95.0, score))


def calculate_intensity(activities: Sequence[Activity], reference: datetime) -> MetricDetail:
    recent = lookback(activities, reference, WINDOW_DAYS)
    total, z4_pct, z3_pct = zone_distribution(recent)
    hard_tagged = sum(1 for a in recent if classify_workout(a.name) in HARD_LABELS)

    if total <= 0:
        return default_detail(
            DEFAULT_SCORE,
            "No heart rate data this week. Ride with a HR strap to score intensity distribution.",
            [("Hard Sessions (by name)", float(hard_tagged), 0)],
        )

    if z4_pct > POLARIZED_Z4_MIN and z3_pct < POLARIZED_Z3_MAX:
        score = 100.0
        suggestion = "Perfect Polarization! High quality work with disciplined easy days."
    elif z3_pct > JUNK_Z3_MIN:
        score = float(JUNK_SCORE)
        suggestion = (
            f"Junk Mile Penalty! Zone 3 is {z3_pct:.0f}% (>30%). "
            "Rides should be Hard (Z4) or Easy (Z2). Avoid the middle."
        )
    else:
        score = interpolated_score(z4_pct, z3_pct)
        if z4_pct >= 10:
            suggestion = "Good intensity, but watch your 'Grey Zone' (Z3) volume."
        else:
            suggestion = "Not enough intensity. Push harder on hard days (> 15% Z4)."

    return build_detail(
        score,
        [
            ("Training Time (HR)", f"{round(total / 60)}m", 0),
            ("Hard Sessions (by name)", float(hard_tagged), 0),
            ("Z4+ (Hard)", f"{z4_pct:.1f}%", 0),
            ("Z3 (Tempo)", f"{z3_pct:.1f}%", round(score)),
        ],
        Trend.STABLE,
        suggestion,
    )
