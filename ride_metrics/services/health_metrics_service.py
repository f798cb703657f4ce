"""
Health Metrics Service（健康度评分服务）

职责：
- 以一个参考时刻为锚点，把活动列表转换为五维健康度评分、综合分、数据质量与骑手画像
- 提供不依赖心率历史的活动快照评分

说明：
- 服务对象没有任何可变字段，单例只是为了调用方便；同一输入总是得到同一输出
- 参考时刻由调用方传入，服务内不读取系统时钟
- 输入列表不会被修改；未来时间的活动、缺少移动时间的活动会被剔除
"""

import logging
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..core.analytics.aggregate import DIMENSIONS, assess_data_quality, overall_score
from ..core.analytics.consistency import calculate_consistency
from ..core.analytics.efficiency import calculate_efficiency
from ..core.analytics.endurance import calculate_endurance
from ..core.analytics.intensity import calculate_intensity
from ..core.analytics.load import calculate_load
from ..core.analytics.rider_profile import calculate_profile
from ..core.analytics.snapshot import calculate_snapshot
from ..core.analytics.volume import calculate_weekly_volume
from ..core.analytics.windowing import as_local, eligible
from ..schemas.activities import Activity
from ..schemas.metrics import (
    ActivitySnapshot,
    AggregateMetrics,
    DataQuality,
    HealthDetails,
    MetricDetail,
    Trend,
)

logger = logging.getLogger(__name__)


class HealthMetricsService:
    """健康度评分服务"""

    def calculate(
        self,
        activities: Sequence[Activity],
        reference_instant: datetime,
        ftp: Optional[float] = None,
        best_5min_power: Optional[float] = None,
        ancillary_days: int = 0,
        weights: Optional[Mapping[str, float]] = None,
    ) -> AggregateMetrics:
        """计算完整的健康度评分

        Args:
            activities: 活动列表（顺序不限）
            reference_instant: 参考时刻（本地时间），所有窗口都以它为终点
            ftp: 功能阈值功率，不传则使用 config.DEFAULT_FTP
            best_5min_power: 外部功率曲线给出的最佳 5 分钟功率，不传则按 FTP × 1.1 占位
            ancillary_days: 睡眠/恢复等辅助数据的天数，仅影响数据质量等级
            weights: 综合分权重，不传则五维等权

        Returns:
            AggregateMetrics: 空输入时所有分数为 0、数据质量为 limited
        """
        reference = as_local(reference_instant)
        usable = eligible(activities, reference)

        if not usable:
            logger.info(
                "[health-metrics][empty] received=%s reference=%s",
                len(activities), reference.isoformat(),
            )
            return self._zero_metrics(reference, ftp, best_5min_power)

        details = HealthDetails(
            load=calculate_load(usable, reference),
            consistency=calculate_consistency(usable, reference),
            endurance=calculate_endurance(usable, reference),
            intensity=calculate_intensity(usable, reference),
            efficiency=calculate_efficiency(usable, reference),
        )
        overall = overall_score({d: getattr(details, d) for d in DIMENSIONS}, weights)
        quality = assess_data_quality(usable, reference, ancillary_days)
        profile = calculate_profile(usable, reference, details.load, details.consistency, ftp, best_5min_power)

        logger.info(
            "[health-metrics][calculated] activities=%s reference=%s load=%s consistency=%s "
            "endurance=%s intensity=%s efficiency=%s overall=%s quality=%s",
            len(usable), reference.isoformat(),
            details.load.score, details.consistency.score, details.endurance.score,
            details.intensity.score, details.efficiency.score, overall, quality.value,
        )

        return AggregateMetrics(
            load=details.load.score,
            consistency=details.consistency.score,
            endurance=details.endurance.score,
            intensity=details.intensity.score,
            efficiency=details.efficiency.score,
            overall_score=overall,
            data_quality=quality,
            reference_instant=reference,
            details=details,
            profile=profile,
            weekly_volume=calculate_weekly_volume(usable, reference),
        )

    def calculate_snapshot(self, activities: Sequence[Activity]) -> ActivitySnapshot:
        """纯活动数据快照评分（最近 28 次活动）"""
        snapshot = calculate_snapshot(activities)
        logger.info(
            "[health-metrics][snapshot] activities=%s overall=%s",
            len(activities), snapshot.overall_score,
        )
        return snapshot

    def _zero_metrics(
        self,
        reference: datetime,
        ftp: Optional[float],
        best_5min_power: Optional[float],
    ) -> AggregateMetrics:
        empty = MetricDetail(score=0, components=[], trend=Trend.STABLE, suggestion="No data available")
        details = HealthDetails(
            load=empty,
            consistency=empty,
            endurance=empty,
            intensity=empty,
            efficiency=empty,
        )
        return AggregateMetrics(
            load=0,
            consistency=0,
            endurance=0,
            intensity=0,
            efficiency=0,
            overall_score=0,
            data_quality=DataQuality.LIMITED,
            reference_instant=reference,
            details=details,
            profile=calculate_profile([], reference, empty, empty, ftp, best_5min_power),
            weekly_volume=calculate_weekly_volume([], reference),
        )


# 创建单例实例
health_metrics_service = HealthMetricsService()
