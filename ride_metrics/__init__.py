"""ride_metrics：骑行训练数据评分引擎（健康度五维评分 + 骑手等级）。"""

__version__ = "0.3.0"
