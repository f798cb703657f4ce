"""
Metrics API routes

包含：
- POST /metrics/health：五维健康度评分 + 综合分 + 骑手画像 + 周训练量
- POST /metrics/snapshot：纯活动数据快照评分
"""

from datetime import datetime
import logging

from fastapi import APIRouter, HTTPException

from ..errors import MetricsError
from ..schemas.activities import HealthMetricsRequest, SnapshotRequest
from ..schemas.metrics import ActivitySnapshot, AggregateMetrics
from ..services.health_metrics_service import health_metrics_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/metrics", tags=["健康度"])


@router.post("/health", response_model=AggregateMetrics)
async def calculate_health_metrics(request: HealthMetricsRequest):
    """计算健康度评分

    Args:
        request: 活动列表、参考时刻（可选）、FTP、最佳 5 分钟功率、辅助数据天数

    Returns:
        AggregateMetrics: 五维得分、综合分、数据质量、明细、骑手画像、周训练量

    Raises:
        HTTPException: 400 - 评分参数非法
        HTTPException: 500 - 服务器内部错误
    """
    # 参考时刻只在接口层回落到服务器时间
    reference = request.reference_instant or datetime.now()
    try:
        return health_metrics_service.calculate(
            request.activities,
            reference,
            ftp=request.ftp,
            best_5min_power=request.best_5min_power,
            ancillary_days=request.ancillary_days,
        )
    except HTTPException:
        raise
    except MetricsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("[metrics-api][health-failed] activities=%s", len(request.activities))
        raise HTTPException(status_code=500, detail=f"健康度计算失败: {str(e)}")


@router.post("/snapshot", response_model=ActivitySnapshot)
async def calculate_activity_snapshot(request: SnapshotRequest):
    """纯活动数据快照评分（最近 28 次活动）"""
    try:
        return health_metrics_service.calculate_snapshot(request.activities)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("[metrics-api][snapshot-failed] activities=%s", len(request.activities))
        raise HTTPException(status_code=500, detail=f"快照评分失败: {str(e)}")
