"""
FIT 文件解析器（基于 fitparse）

说明：
- 读取 `record` 消息，生成 time / distance / velocity 三条序列；
- time 为相对第一条记录的秒数，无时间戳的记录直接跳过；
- 速度优先取 enhanced_speed，其次 speed。
"""

from io import BytesIO
from typing import List, Optional
import logging

from fitparse import FitFile

from .models import ActivityStream


logger = logging.getLogger(__name__)


class FitParser:
    """从 FIT 文件中提取时间、距离、速度序列。"""

    def parse_fit_file(self, file_data: bytes) -> ActivityStream:
        fitfile = FitFile(BytesIO(file_data))
        timestamp: List[float] = []
        distance: List[float] = []
        speed: List[float] = []
        start_time = None
        last_distance = 0.0
        seen_distance = False
        seen_speed = False

        for record in fitfile.get_messages('record'):
            ts = record.get_value('timestamp')
            if ts is None:
                continue
            if start_time is None:
                start_time = ts
            timestamp.append(float((ts - start_time).total_seconds()))

            dist = record.get_value('distance')
            if dist is not None:
                seen_distance = True
                last_distance = float(dist)
            # 累计序列：缺失时沿用上一个已知值
            distance.append(last_distance)

            spd = record.get_value('enhanced_speed')
            if spd is None:
                spd = record.get_value('speed')
            if spd is not None:
                seen_speed = True
                speed.append(float(spd))
            else:
                speed.append(0.0)

        logger.debug(
            "[fit-parser] records=%s distance=%s speed=%s",
            len(timestamp), seen_distance, seen_speed,
        )
        return ActivityStream(
            time=timestamp or None,
            distance=distance if seen_distance else None,
            velocity=speed if seen_speed else None,
        )


def parse_fit_stream(file_data: bytes) -> Optional[ActivityStream]:
    """解析 FIT 字节流，无法解码时返回 None。"""
    try:
        return FitParser().parse_fit_file(file_data)
    except Exception:
        logger.exception("[fit-parser] parse failed")
        return None
