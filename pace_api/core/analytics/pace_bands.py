"""配速区间定义与配置加载

说明：
- 区间为带标签的半开区间 ``[min, max)``，单位 min/km；
- 区间列表有序，分类取第一个包含该配速的区间；
- 允许重叠或留空，不校验覆盖范围。
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ...config import get_pace_bands_file
from .pace import parse_pace_string

logger = logging.getLogger(__name__)


class PaceBandConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PaceBand:
    label: str
    min: float
    max: float = math.inf

    def contains(self, pace: Optional[float]) -> bool:
        if pace is None:
            return False
        return self.min <= pace < self.max

    @property
    def range_display(self) -> str:
        if math.isinf(self.max):
            return f">= {self.min:g} min/km"
        return f"{self.min:g}–{self.max:g} min/km"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "min": self.min,
            "max": None if math.isinf(self.max) else self.max,
        }


# 由快到慢，从 0 起连续无空隙，任何正配速都有归属
_DEFAULT_BANDS_TABLE: List[Tuple[str, float, float]] = [
    ("Sprint", 0.00, 3.50),
    ("Interval", 3.50, 4.25),
    ("Threshold", 4.25, 5.00),
    ("Tempo", 5.00, 5.75),
    ("Easy", 5.75, 7.00),
    ("Recovery", 7.00, 9.00),
    ("Walk", 9.00, math.inf),
]

DEFAULT_PACE_BANDS: Tuple[PaceBand, ...] = tuple(
    PaceBand(label, low, high) for label, low, high in _DEFAULT_BANDS_TABLE
)


def _coerce_bound(raw: Any, field: str, label: str) -> float:
    if isinstance(raw, bool):
        raise PaceBandConfigError(f"band {label!r}: {field} must be a number or 'm:ss' string")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        parsed = parse_pace_string(raw)
        if parsed is None:
            raise PaceBandConfigError(f"band {label!r}: cannot parse {field}={raw!r}")
        value = parsed
    else:
        raise PaceBandConfigError(f"band {label!r}: {field} must be a number or 'm:ss' string")
    if math.isnan(value) or value < 0:
        raise PaceBandConfigError(f"band {label!r}: {field} must be >= 0")
    return value


def band_from_config(item: Union[PaceBand, Dict[str, Any]]) -> PaceBand:
    """
    由 ``{"label", "min", "max"}`` 构造 PaceBand。

    ``min``/``max`` 可以是数字（min/km）或 "m:ss" 字符串；``max`` 缺失或为 null 表示无上限。
    """
    if isinstance(item, PaceBand):
        return item
    if not isinstance(item, dict):
        raise PaceBandConfigError(f"band entry must be an object, got {type(item).__name__}")

    label = item.get("label")
    if not label or not isinstance(label, str):
        raise PaceBandConfigError("band entry requires a non-empty 'label'")
    if item.get("min") is None:
        raise PaceBandConfigError(f"band {label!r}: 'min' is required")

    low = _coerce_bound(item["min"], "min", label)
    raw_high = item.get("max")
    high = math.inf if raw_high is None else _coerce_bound(raw_high, "max", label)
    if high < low:
        raise PaceBandConfigError(f"band {label!r}: max ({high:g}) is below min ({low:g})")
    return PaceBand(label, low, high)


def bands_from_config(items: Optional[Iterable[Union[PaceBand, Dict[str, Any]]]]) -> List[PaceBand]:
    if items is None:
        return []
    return [band_from_config(item) for item in items]


def load_pace_bands(path: Union[str, Path]) -> List[PaceBand]:
    """从 ``path`` 读取 JSON 区间列表。"""
    file_path = Path(path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise PaceBandConfigError(f"cannot read pace band file {file_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise PaceBandConfigError(f"invalid JSON in pace band file {file_path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("bands")
    if not isinstance(data, list):
        raise PaceBandConfigError(f"pace band file {file_path} must contain a list of bands")

    bands = bands_from_config(data)
    logger.info("[pace-bands][load] path=%s bands=%s", file_path, len(bands))
    return bands


def get_default_pace_bands() -> List[PaceBand]:
    """配置了 PACE_BANDS_FILE 时从文件读取，否则使用内置区间。"""
    path = get_pace_bands_file()
    if path:
        return load_pace_bands(path)
    return list(DEFAULT_PACE_BANDS)


def classify_pace(pace: Optional[float], bands: Sequence[PaceBand]) -> Optional[int]:
    """
    返回第一个 ``[min, max)`` 包含 ``pace`` 的区间下标。

    pace 为 None（无法分类）或不落在任何区间时返回 None。
    """
    if pace is None:
        return None
    for idx, band in enumerate(bands):
        if band.min <= pace < band.max:
            return idx
    return None
