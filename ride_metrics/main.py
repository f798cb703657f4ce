"""
骑行健康度评分 API 主应用文件。

本文件是FastAPI应用的入口点，负责：
1. 初始化日志
2. 创建FastAPI应用实例
3. 注册路由
"""

from fastapi import FastAPI
from .logging_config import setup_logging
from .config import LOG_LEVEL

from .api.metrics import router as metrics_router

setup_logging(LOG_LEVEL)
app = FastAPI(title="骑行健康度评分 API")

# 路由注册
app.include_router(metrics_router, tags=["健康度"])
