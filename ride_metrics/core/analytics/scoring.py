"""评分通用工具：分数/等级截断、明细构造与读取。"""

import math
from typing import Iterable, List, Optional, Tuple, Union

from ...schemas.metrics import MetricComponent, MetricDetail, Trend

# guards floor() against float noise such as 3.9999999999999996
_LEVEL_EPSILON = 1e-9


def clamp_score(value: float) -> int:
    """四舍五入后截断到 [0, 100]；NaN/Inf 视为 0。"""
    if value is None or not math.isfinite(value):
        return 0
    return int(max(0, min(100, round(value))))


def clamp_level(value: float) -> int:
    """截断到 [1, 10]。"""
    if value is None or not math.isfinite(value):
        return 1
    return int(max(1, min(10, value)))


def floor_level(value: float) -> int:
    """向下取整后截断到 [1, 10]。"""
    if value is None or not math.isfinite(value):
        return 1
    return clamp_level(math.floor(value + _LEVEL_EPSILON))


def build_detail(
    score: float,
    components: Iterable[Tuple[str, Union[float, str], int]],
    trend: Trend,
    suggestion: str,
) -> MetricDetail:
    return MetricDetail(
        score=clamp_score(score),
        components=[MetricComponent(name=n, value=v, contribution=c) for n, v, c in components],
        trend=trend,
        suggestion=suggestion,
    )


def default_detail(score: int, suggestion: str, components: Optional[List[Tuple[str, Union[float, str], int]]] = None) -> MetricDetail:
    """数据不足时的默认详情。"""
    return build_detail(score, components or [], Trend.STABLE, suggestion)


def component_value(detail: MetricDetail, name: str, default: float = 0.0) -> float:
    """按名称读取数值型组成项；不存在或不可解析时返回 default。"""
    for c in detail.components:
        if c.name != name:
            continue
        try:
            return float(c.value)
        except (TypeError, ValueError):
            return default
    return default


def mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0
