"""
pytest配置文件，定义测试环境和共享的测试夹具（fixtures）。

主要功能：
1. 参考时刻（评分引擎不读系统时钟）：每个用例在多个参考时刻下各跑一遍，
   覆盖周日晚上、周中午间、清晨，评分不应依赖星期几或一天中的时刻
2. 提供活动构造工厂
3. 提供FastAPI测试客户端
"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from ride_metrics.main import app
from ride_metrics.schemas.activities import Activity

REFERENCES = [
    datetime(2024, 6, 2, 20, 0),   # 周日晚上
    datetime(2024, 5, 29, 12, 30),  # 周三中午
    datetime(2024, 6, 4, 6, 0),    # 周二清晨
]


@pytest.fixture(params=REFERENCES, ids=["sunday-evening", "wednesday-noon", "tuesday-early"])
def reference(request):
    return request.param


@pytest.fixture
def make_activity(reference):
    """按"几天前 + 时长（分钟）"构造活动，其它字段透传。

    开始时间 = 参考时刻 - days_ago 天 - hours_before 小时（hours_before < 24），
    因此 days_ago=n 的活动总是落在第 n 天的滚动窗口内；默认距离按 30 km/h 估算。
    """
    def _make(days_ago=0, minutes=60, hours_before=2, **fields):
        fields.setdefault("distance", minutes * 500.0)
        return Activity(
            start_date_local=reference - timedelta(days=days_ago, hours=hours_before),
            moving_time=int(minutes * 60),
            **fields,
        )
    return _make


@pytest.fixture
def client():
    """提供FastAPI测试客户端"""
    with TestClient(app) as test_client:
        yield test_client
