"""
配速分布 API 入口

- 创建 FastAPI 应用
- 注册路由
"""

from fastapi import FastAPI
from .logging_config import setup_logging
from .config import LOG_LEVEL

from .api.pace import router as pace_router

setup_logging(LOG_LEVEL)
app = FastAPI(title="Pace Distribution API")

app.include_router(pace_router, tags=["pace"])
