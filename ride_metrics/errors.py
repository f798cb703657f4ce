"""评分引擎的异常类型。

数据不足、除零等情况一律在评分函数内部回退为默认分数，不会抛出；
这里的异常只用于调用方传参错误（权重表、窗口参数）。
"""


class MetricsError(Exception):
    """评分引擎参数错误的基类。"""


class InvalidWeightsError(MetricsError):
    """综合评分权重表不合法（缺项、负数或总和不为 1.0）。"""


class InvalidWindowError(MetricsError):
    """时间窗口参数不合法（周数小于 1、未知的对齐方式等）。"""
