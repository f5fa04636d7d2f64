"""跑步配速核心算法

说明：
- 配速单位为 分钟/公里（min/km），数值越小越快
- 速度与配速的换算、整段活动的平均配速
- "分钟:秒" 配速字符串解析
"""

from typing import Optional, Sequence
import logging
import re

import numpy as np

from ...streams.models import ActivityStream
from ...streams.providers import ActivityId, StreamFetchError, StreamProvider

logger = logging.getLogger(__name__)


# 1000 m/km ÷ 60 s/min：m/s 换算为 min/km 即 VELOCITY_TO_PACE / v
VELOCITY_TO_PACE = 16.6667


def pace_from_velocity(average_velocity: float) -> Optional[float]:
    """平均速度（m/s）对应的配速（min/km），未移动时返回 None。"""
    if average_velocity is None or average_velocity <= 0:
        return None
    return VELOCITY_TO_PACE / average_velocity


def pace_from_distance_time(distance_m: float, time_s: float) -> Optional[float]:
    """由距离（米）和用时（秒）计算配速（min/km），距离为 0 时返回 None。"""
    if distance_m is None or distance_m <= 0:
        return None
    return (time_s / 60.0) / (distance_m / 1000.0)


def mean_velocity(velocity: Sequence[float]) -> float:
    if not velocity:
        return 0.0
    return float(np.mean(np.asarray(velocity, dtype=np.float64)))


def average_pace(stream: ActivityStream) -> Optional[float]:
    """
    整段活动的平均配速。

    优先使用速度序列的均值；否则用最后一个样本的总距离 / 总时间。
    两种方式都得不到结果时返回 None。
    """
    if stream.velocity:
        pace = pace_from_velocity(mean_velocity(stream.velocity))
        if pace is not None:
            return pace

    if stream.distance and stream.time:
        total_distance = stream.distance[-1]
        total_time = stream.time[-1]
        return pace_from_distance_time(total_distance, total_time)

    return None


def parse_pace_string(pace_str: str) -> Optional[float]:
    """
    解析配速字符串为 分钟/公里

    支持的格式：
    - "3:40" (分钟:秒) -> 返回 3.6667
    - "4.5" (纯数字，按分钟) -> 返回 4.5

    返回：
        配速（min/km），解析失败或秒数 >= 60 时返回 None
    """
    if not pace_str or not isinstance(pace_str, str):
        return None

    pace_str = pace_str.strip()
    if not pace_str:
        return None

    match = re.match(r'^(\d+):(\d{1,2})$', pace_str)
    if match:
        minutes = int(match.group(1))
        seconds = int(match.group(2))
        if seconds >= 60:
            return None
        return minutes + seconds / 60.0

    try:
        value = float(pace_str)
    except ValueError:
        return None
    return value if value >= 0 else None


def compute_average_pace(
    activity_id: ActivityId,
    access_token: Optional[str],
    provider: StreamProvider,
) -> Optional[float]:
    """
    拉取单个活动并返回平均配速（min/km）。

    provider 失败只记录日志并返回 None，不向上抛出。
    """
    try:
        stream = provider.fetch(activity_id, access_token)
    except StreamFetchError as e:
        logger.warning("[pace][fetch-failed] activity_id=%s err=%s", activity_id, e.message)
        return None
    except Exception:
        logger.exception("[pace][fetch-error] activity_id=%s", activity_id)
        return None

    pace = average_pace(stream)
    if pace is None:
        logger.info("[pace][unavailable] activity_id=%s", activity_id)
    return pace
