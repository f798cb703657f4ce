"""
日志初始化（Logging Bootstrap）

说明：
- 评分引擎各模块只通过 `logging.getLogger(__name__)` 打日志，不自行配置 handler；
- 日志内容统一为 "[模块][事件] key=value" 形式，便于 grep，例如：
    [health-metrics][calculated] activities=32 ... overall=87 quality=excellent
- 等级取显式传入的 `level`，否则取 config.LOG_LEVEL（环境变量 LOG_LEVEL，默认 INFO）；
- 在 ride_metrics/main.py 启动时调用一次；作为库嵌入时由调用方自行配置日志。
"""

import logging
from typing import Optional

from . import config

DEFAULT_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def setup_logging(level: Optional[str] = None, fmt: str = DEFAULT_FORMAT) -> None:
    """
    初始化根日志记录器。

    参数：
        level: 日志等级字符串（DEBUG/INFO/...），无法识别时按 INFO 处理
        fmt: 日志格式
    """
    log_level = (level or config.LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO), format=fmt)
    # 评分明细（如数据质量判定）只在 DEBUG 下输出
    logging.getLogger('ride_metrics').setLevel(getattr(logging, log_level, logging.INFO))
