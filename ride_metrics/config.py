"""
引擎配置中心（Configuration Center）

说明（强烈建议先快速浏览）：
- 本模块统一管理评分引擎的运行配置（日志、FTP 默认值、心率区间边界）
- 配置优先从环境变量中读取，未设置时使用与产品一致的默认值
- 所有值在导入时读取一次；评分函数本身不读取环境变量，保证同一输入得到同一输出

常用环境变量（全部可选）：
1) 日志
   - `LOG_LEVEL`：日志等级，默认 INFO（可选 DEBUG/INFO/WARNING/ERROR 等）

2) 骑手参数
   - `RIDE_METRICS_DEFAULT_FTP`：调用方未提供 FTP 时使用的默认值（瓦特），默认 250

3) 心率区间（强度评分的粗略代理）
   - `RIDE_METRICS_Z4_HR`：平均心率达到该值视为高强度（Z4），默认 160
   - `RIDE_METRICS_Z3_HR`：平均心率达到该值视为节奏区（Z3），默认 135
   - `RIDE_METRICS_INTERVAL_MAX_HR`：平均心率偏低但最大心率达到该值时视为含间歇，默认 170
"""

import os


def _env_float(name: str, default: float) -> float:
    """读取浮点型环境变量；解析失败时回退默认值。"""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# 日志（Logging）
# LOG_LEVEL 用于控制 logging 的根等级，详见 ride_metrics/logging_config.py
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

# 骑手（Rider）
# 未知 FTP 时 Punch 等级的计算基准
DEFAULT_FTP = _env_float('RIDE_METRICS_DEFAULT_FTP', 250.0)

# 心率区间（Heart-rate zones）
Z4_HEARTRATE = _env_float('RIDE_METRICS_Z4_HR', 160.0)
Z3_HEARTRATE = _env_float('RIDE_METRICS_Z3_HR', 135.0)
INTERVAL_MAX_HEARTRATE = _env_float('RIDE_METRICS_INTERVAL_MAX_HR', 170.0)
