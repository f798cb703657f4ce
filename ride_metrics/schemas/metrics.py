"""
评分结果的数据结构

定义引擎输出（AggregateMetrics / ActivitySnapshot）及其组成部分。
所有模型都可以通过 `model_dump(mode="json")` 直接序列化为 JSON。
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field


class Trend(str, Enum):
    """趋势枚举"""
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class DataQuality(str, Enum):
    """数据质量等级"""
    EXCELLENT = "excellent"
    GOOD = "good"
    LIMITED = "limited"


class MetricComponent(BaseModel):
    """评分明细中的一项"""
    name: str = Field(..., description="组成项名称")
    value: Union[float, str] = Field(..., description="展示值（数值或格式化字符串）")
    contribution: int = Field(0, description="对总分的贡献（部分项仅用于展示，为 0）")


class MetricDetail(BaseModel):
    """单个维度的评分详情"""
    score: int = Field(..., ge=0, le=100, description="维度得分（0-100）")
    components: List[MetricComponent] = Field(default_factory=list, description="组成项，顺序固定")
    trend: Trend = Field(Trend.STABLE, description="趋势")
    suggestion: str = Field("", description="建议文案（来自固定文案表）")


class LevelDetail(BaseModel):
    """骑手画像中单个维度的等级"""
    model_config = ConfigDict(populate_by_name=True)

    level: int = Field(..., ge=1, le=10, description="等级（1-10）")
    current_value: str = Field(..., alias="currentValue", description="当前值（展示字符串）")
    next_level_criteria: str = Field(..., alias="nextLevelCriteria", description="升级目标（展示字符串）")
    prompt: str = Field(..., description="升级提示")


class RiderProfile(BaseModel):
    """骑手画像（五个 1-10 等级）"""
    discipline: LevelDetail
    stamina: LevelDetail
    punch: LevelDetail
    capacity: LevelDetail
    economy: LevelDetail


class WeeklyBucket(BaseModel):
    """单周训练量汇总（0 = 最近一周）"""
    week_index: int = Field(..., ge=0, description="周序号，0 为包含参考时刻的一周")
    week_start: date = Field(..., description="周起始日期")
    total_distance: float = Field(0.0, description="总距离（米）")
    total_time: int = Field(0, description="总移动时间（秒）")
    activity_count: int = Field(0, description="活动次数")
    active_days: int = Field(0, description="有训练的自然日数")


class TypeBreakdown(BaseModel):
    """按活动类型汇总"""
    type: str
    count: int
    distance: float
    time: int


class WeeklyVolume(BaseModel):
    """周训练量概览"""
    buckets: List[WeeklyBucket] = Field(default_factory=list, description="最近若干自然周（新→旧）")
    this_week_distance: float = Field(0.0, description="本周距离（千米，保留一位小数）")
    last_week_distance: float = Field(0.0, description="上周距离（千米，保留一位小数）")
    change_pct: int = Field(0, description="本周相对上周的距离变化（%）")
    type_breakdown: List[TypeBreakdown] = Field(default_factory=list, description="按活动类型汇总")


class HealthDetails(BaseModel):
    """五个健康维度的评分详情"""
    load: MetricDetail
    consistency: MetricDetail
    endurance: MetricDetail
    intensity: MetricDetail
    efficiency: MetricDetail


class AggregateMetrics(BaseModel):
    """健康度评分总结果"""
    load: int = Field(..., ge=0, le=100)
    consistency: int = Field(..., ge=0, le=100)
    endurance: int = Field(..., ge=0, le=100)
    intensity: int = Field(..., ge=0, le=100)
    efficiency: int = Field(..., ge=0, le=100)
    overall_score: int = Field(..., ge=0, le=100, description="加权综合得分")
    data_quality: DataQuality = Field(..., description="数据质量等级")
    reference_instant: datetime = Field(..., description="本次计算使用的参考时刻")
    details: HealthDetails
    profile: RiderProfile
    weekly_volume: WeeklyVolume


class SnapshotDetails(BaseModel):
    """纯活动数据快照的五个维度详情"""
    power: MetricDetail
    endurance: MetricDetail
    consistency: MetricDetail
    speed: MetricDetail
    training_load: MetricDetail


class ActivitySnapshot(BaseModel):
    """纯活动数据快照评分（不依赖心率历史）"""
    power: int = Field(..., ge=0, le=100)
    endurance: int = Field(..., ge=0, le=100)
    consistency: int = Field(..., ge=0, le=100)
    speed: int = Field(..., ge=0, le=100)
    training_load: int = Field(..., ge=0, le=100)
    overall_score: int = Field(..., ge=0, le=100)
    details: SnapshotDetails
