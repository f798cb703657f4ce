"""
Activities 模块的输入数据结构

说明：
- Activity 对应外部数据源（运动记录平台）推送的单条活动摘要，字段名沿用其 API；
- 模型为只读（frozen），评分引擎不会修改任何活动；
- 时间统一按"本地时间"理解：带时区的时间戳会被去掉时区，只保留墙上时间。
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Activity(BaseModel):
    """单条活动摘要"""
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(None, description="活动ID（外部数据源）")
    name: Optional[str] = Field(None, description="活动标题，用于关键词强度分类")
    type: str = Field("Ride", description="活动类型，如 Ride/VirtualRide/Run")
    start_date_local: datetime = Field(..., description="开始时间（本地时间）")
    moving_time: Optional[int] = Field(None, ge=0, description="移动时间（秒）")
    distance: Optional[float] = Field(None, ge=0, description="距离（米）")
    average_speed: Optional[float] = Field(None, ge=0, description="平均速度（米/秒）")
    max_speed: Optional[float] = Field(None, ge=0, description="最大速度（米/秒）")
    average_heartrate: Optional[float] = Field(None, ge=0, description="平均心率（bpm）")
    max_heartrate: Optional[float] = Field(None, ge=0, description="最大心率（bpm）")
    average_watts: Optional[float] = Field(None, ge=0, description="平均功率（瓦特）")
    weighted_average_watts: Optional[float] = Field(None, ge=0, description="加权平均功率（瓦特）")
    max_watts: Optional[float] = Field(None, ge=0, description="最大功率（瓦特）")
    total_elevation_gain: Optional[float] = Field(None, ge=0, description="累计爬升（米）")

    @field_validator('start_date_local')
    @classmethod
    def _as_local_time(cls, value: datetime) -> datetime:
        # "2024-06-02T10:00:00Z" and "2024-06-02T10:00:00" are the same local wall time
        if value.tzinfo is not None:
            return value.replace(tzinfo=None)
        return value


class HealthMetricsRequest(BaseModel):
    """健康度评分请求"""
    activities: List[Activity] = Field(default_factory=list, description="活动列表（顺序不限）")
    reference_instant: Optional[datetime] = Field(None, description="参考时刻（本地时间），不传则使用服务器当前时间")
    ftp: Optional[float] = Field(None, gt=0, description="功能阈值功率（瓦特），不传则使用默认值")
    best_5min_power: Optional[float] = Field(None, gt=0, description="最近 6 周最佳 5 分钟功率（瓦特），来自功率曲线")
    ancillary_days: int = Field(0, ge=0, description="可穿戴设备提供的睡眠/恢复数据天数")


class SnapshotRequest(BaseModel):
    """纯活动数据快照评分请求"""
    activities: List[Activity] = Field(default_factory=list, description="活动列表（顺序不限）")
