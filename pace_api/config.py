"""
应用配置中心（Configuration Center）

说明：
- 本模块统一管理配速服务的运行配置（日志、流数据来源、Strava 客户端、配速分布默认值）
- 配置优先从环境变量中读取；每项都有安全的默认值，不做任何配置也能启动

常用环境变量（全部可选）：
1) 日志
   - `LOG_LEVEL`：日志等级，默认 INFO

2) 流数据来源
   - `STREAM_SOURCE`："strava"（默认）或 "fit"
   - `FIT_DIR`：STREAM_SOURCE=fit 时存放 `<activity_id>.fit` 的目录，默认 `./data/fit`

3) Strava 相关
   - `STRAVA_BASE_URL`：API 根地址，默认 https://www.strava.com/api/v3
   - `STRAVA_TIMEOUT`：调用 Strava API 的超时时间（秒），默认 10

4) 配速分布
   - `PACE_INTERVAL_SECONDS`：默认分段长度（秒），默认 30；HTTP 请求与核心算法共用
   - `PACE_MAX_WORKERS`：每批次并发拉取流数据的线程数，默认 1（顺序执行）
   - `PACE_BANDS_FILE`：默认配速区间的 JSON 文件
     （`[{"label": "Easy", "min": 5.75, "max": 7.0}, ...]`）；未设置时使用内置区间
"""

import os
from typing import Optional


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

# Stream source
STREAM_SOURCE = os.environ.get('STREAM_SOURCE', 'strava').lower()
FIT_DIR = os.environ.get('FIT_DIR', os.path.join(os.getcwd(), 'data', 'fit'))

# Strava
STRAVA_BASE_URL = os.environ.get('STRAVA_BASE_URL', 'https://www.strava.com/api/v3').rstrip('/')
STRAVA_TIMEOUT = _int_from_env('STRAVA_TIMEOUT', 10)

# Pace distribution
PACE_INTERVAL_SECONDS = _int_from_env('PACE_INTERVAL_SECONDS', 30)
PACE_MAX_WORKERS = max(1, _int_from_env('PACE_MAX_WORKERS', 1))


def get_pace_bands_file() -> Optional[str]:
    """
    配速区间配置文件路径；返回 None 表示使用内置区间。

    每次调用都重新读取环境变量，无需重启即可切换文件。
    """
    path = os.environ.get('PACE_BANDS_FILE')
    if path and path.strip():
        return path.strip()
    return None
