"""时间/距离序列的分段与分段配速

说明：
- 每段至少 ``interval`` 秒：从段起点开始，第一个累计用时达到 interval 的样本即为段终点；
- 下一段从上一段的终点样本开始；
- 末尾不足一段的部分始终丢弃。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from .pace import mean_velocity, pace_from_distance_time, pace_from_velocity


@dataclass(frozen=True)
class Segment:
    start_index: int
    end_index: int
    time_delta: float
    distance_delta: float
    # None 表示无法分类（静止或无前进距离）
    pace: Optional[float]

    @property
    def classifiable(self) -> bool:
        return self.pace is not None


def iter_segment_bounds(
    time: Sequence[float],
    sample_count: int,
    interval: float,
) -> Iterator[Tuple[int, int]]:
    """
    依次产出完整分段的 ``(start, end)`` 样本下标。

    ``end`` 严格递增，时间不增长时也会在 ``sample_count`` 处结束。
    """
    n = min(sample_count, len(time))
    start = 0
    while start < n - 1:
        t0 = time[start]
        j = start + 1
        while j < n and time[j] - t0 < interval:
            j += 1
        if j >= n:
            # 末尾不足一段
            return
        yield start, j
        start = j


def segment_pace(
    start: int,
    end: int,
    time_delta: float,
    distance_delta: float,
    velocity: Optional[Sequence[float]] = None,
) -> Optional[float]:
    """
    分段 ``[start, end]`` 的配速（min/km）。

    速度序列覆盖 ``end`` 时取 ``velocity[start:end]`` 的均值，否则用距离 / 时间；
    所选方式得到的速度或距离为 0 时返回 None。
    """
    if velocity is not None and len(velocity) > end:
        return pace_from_velocity(mean_velocity(velocity[start:end]))
    return pace_from_distance_time(distance_delta, time_delta)


def iter_segments(
    time: Sequence[float],
    distance: Sequence[float],
    interval: float = 30,
    velocity: Optional[Sequence[float]] = None,
) -> Iterator[Segment]:
    """惰性地把一个活动切分为 Segment；只能遍历一次。"""
    n = min(len(time), len(distance))
    for start, end in iter_segment_bounds(time, n, interval):
        dt = time[end] - time[start]
        dd = distance[end] - distance[start]
        yield Segment(
            start_index=start,
            end_index=end,
            time_delta=dt,
            distance_delta=dd,
            pace=segment_pace(start, end, dt, dd, velocity),
        )
