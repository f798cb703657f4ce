"""综合评分与数据质量

说明：
- 综合分 = 五个维度得分的加权和（四舍五入），权重固定且总和必须为 1.0；
- 数据质量只看最近 8 周（56 天）内的活动，更早的历史不计入；阈值为：
    * 没有活动 → limited
    * ≥ 8 次活动 且 有心率数据 且（历史 ≥ 42 天 或 ≥ 14 天的睡眠/恢复数据）→ excellent
    * 历史 ≥ 28 天 → good
    * 其余 → limited
"""

import logging
import math
from datetime import datetime
from typing import Dict, Mapping, Optional, Sequence

from ...errors import InvalidWeightsError
from ...schemas.activities import Activity
from ...schemas.metrics import DataQuality, MetricDetail
from .scoring import clamp_score
from .windowing import as_local, lookback

logger = logging.getLogger(__name__)

DIMENSIONS = ("load", "consistency", "endurance", "intensity", "efficiency")

DEFAULT_WEIGHTS: Dict[str, float] = {
    "load": 0.2,
    "consistency": 0.2,
    "endurance": 0.2,
    "intensity": 0.2,
    "efficiency": 0.2,
}

QUALITY_WINDOW_DAYS = 56
EXCELLENT_MIN_ACTIVITIES = 8
EXCELLENT_HISTORY_DAYS = 42
EXCELLENT_ANCILLARY_DAYS = 14
GOOD_HISTORY_DAYS = 28


def validate_weights(weights: Mapping[str, float]) -> None:
    missing = [d for d in DIMENSIONS if d not in weights]
    if missing:
        raise InvalidWeightsError(f"missing weights for: {', '.join(missing)}")
    if any(w < 0 for w in weights.values()):
        raise InvalidWeightsError("weights must be non-negative")
    total = sum(weights[d] for d in DIMENSIONS)
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise InvalidWeightsError(f"weights must sum to 1.0, got {total}")


def overall_score(details: Mapping[str, MetricDetail], weights: Optional[Mapping[str, float]] = None) -> int:
    weights = DEFAULT_WEIGHTS if weights is None else weights
    validate_weights(weights)
    weighted = sum(details[d].score * weights[d] for d in DIMENSIONS)
    return clamp_score(weighted)


def history_days(activities: Sequence[Activity], reference: datetime) -> int:
    if not activities:
        return 0
    reference = as_local(reference)
    oldest = min(a.start_date_local for a in activities)
    return max(0, (reference - oldest).days)


def assess_data_quality(
    activities: Sequence[Activity],
    reference: datetime,
    ancillary_days: int = 0,
) -> DataQuality:
    reference = as_local(reference)
    activities = lookback(activities, reference, QUALITY_WINDOW_DAYS)
    if not activities:
        return DataQuality.LIMITED

    days = history_days(activities, reference)
    has_hr = any(a.average_heartrate for a in activities)

    if (
        len(activities) >= EXCELLENT_MIN_ACTIVITIES
        and has_hr
        and (days >= EXCELLENT_HISTORY_DAYS or ancillary_days >= EXCELLENT_ANCILLARY_DAYS)
    ):
        quality = DataQuality.EXCELLENT
    elif days >= GOOD_HISTORY_DAYS:
        quality = DataQuality.GOOD
    else:
        quality = DataQuality.LIMITED

    logger.debug(
        "[aggregate][data-quality] activities=%s history_days=%s has_hr=%s ancillary_days=%s quality=%s",
        len(activities), days, has_hr, ancillary_days, quality.value,
    )
    return quality
