"""
配速引擎使用的流数据模型

包含：
1. ActivityStream - 单个活动的三条并行序列
2. from_strava_payload - Strava streams 响应到 ActivityStream 的转换
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


STRAVA_VELOCITY_KEY = 'velocity_smooth'


class ActivityStream(BaseModel):
    """单个活动的原始遥测数据。

    `time`（已用秒数）与 `distance`（累计米）单调不减，通常等长；
    `velocity`（m/s）与二者共用下标，但可能更短，使用前由调用方做范围检查。
    """
    time    : Optional[List[float]] = Field(None, description="elapsed seconds")
    distance: Optional[List[float]] = Field(None, description="cumulative meters")
    velocity: Optional[List[float]] = Field(None, description="instantaneous m/s")

    @property
    def has_time_and_distance(self) -> bool:
        return bool(self.time) and bool(self.distance)

    @property
    def sample_count(self) -> int:
        """可用于分段的样本数（time 与 distance 的公共前缀）。"""
        if not self.has_time_and_distance:
            return 0
        return min(len(self.time), len(self.distance))

    @property
    def elapsed_seconds(self) -> float:
        n = self.sample_count
        if n == 0:
            return 0.0
        return float(self.time[n - 1] - self.time[0])


def _series(item: Any, cumulative: bool = False) -> Optional[List[float]]:
    """取出 `{"data": [...]}` 中的数值序列。

    累计序列（time/distance）中的 null 沿用上一个已知值（开头为 0.0），
    保持单调不减；瞬时序列（velocity）中的 null 记为 0.0。
    """
    if not isinstance(item, dict):
        return None
    data = item.get('data')
    if data is None:
        return None
    values: List[float] = []
    last = 0.0
    for v in data:
        if v is not None:
            last = float(v)
            values.append(last)
        else:
            values.append(last if cumulative else 0.0)
    return values


def from_strava_payload(payload: Any) -> ActivityStream:
    """将 Strava `/streams` 响应转换为 ActivityStream。

    兼容两种返回形态：按类型为键的 dict（`key_by_type=true`），
    或 `{"type": ..., "data": [...]}` 列表。缺失的键记为 None。
    """
    if isinstance(payload, list):
        payload = {item.get('type'): item for item in payload if isinstance(item, dict)}
    if not isinstance(payload, dict):
        return ActivityStream()

    streams: Dict[str, Any] = payload
    return ActivityStream(
        time=_series(streams.get('time'), cumulative=True),
        distance=_series(streams.get('distance'), cumulative=True),
        velocity=_series(streams.get(STRAVA_VELOCITY_KEY)),
    )
