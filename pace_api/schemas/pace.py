"""
Pace 模块的请求和响应模式

定义配速相关 API 接口的输入输出数据结构。
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..config import PACE_INTERVAL_SECONDS


class PaceBandIn(BaseModel):
    """调用方提供的配速区间，上下限可为 min/km 数字或 "m:ss" 字符串"""
    label: str = Field(..., min_length=1, description="band name")
    min: Union[float, str] = Field(..., description="lower bound (inclusive), min/km or 'm:ss'")
    max: Optional[Union[float, str]] = Field(None, description="upper bound (exclusive); null for no upper bound")


class PaceBandOut(BaseModel):
    label: str
    min: float
    max: Optional[float] = Field(None, description="null means no upper bound")


class DistributionRequest(BaseModel):
    """配速分布请求"""
    activity_ids: List[Union[int, str]] = Field(..., description="activities to aggregate, in order")
    access_token: Optional[str] = Field(None, description="Strava API access token")
    interval: float = Field(PACE_INTERVAL_SECONDS, gt=0, description="minimum segment length in seconds")
    mode: Literal["time", "distance"] = Field("time", description="accumulate elapsed time or distance")
    bands: Optional[List[PaceBandIn]] = Field(None, description="ordered bands, first match wins; default bands when null")
    max_workers: Optional[int] = Field(None, ge=1, le=16, description="concurrent stream fetches")


class ActivityFailureOut(BaseModel):
    activity_id: Union[int, str]
    reason: Literal["fetch_failed", "missing_streams", "cancelled"]
    message: str = ""


class DistributionBandItem(BaseModel):
    label: str
    range: str
    min: float
    max: Optional[float] = None
    value: float = Field(..., description="seconds in time mode, meters in distance mode")
    percentage: float
    formatted: str


class DistributionChart(BaseModel):
    type: str = "bar"
    unit: str
    categories: List[str]
    values: List[float]
    tooltips: List[str]


class DistributionResponse(BaseModel):
    """配速分布结果"""
    mode: Literal["time", "distance"]
    bands: List[PaceBandOut]
    values: List[float] = Field(..., description="one total per band, same order as bands")
    total: float
    failures: List[ActivityFailureOut] = Field(default_factory=list)
    cancelled: bool = False
    chart: DistributionChart
    breakdown: List[DistributionBandItem]


class AveragePaceResponse(BaseModel):
    """单个活动的平均配速"""
    activity_id: Union[int, str]
    available: bool
    pace: Optional[float] = Field(None, description="min/km")
    formatted_pace: Optional[str] = Field(None, description="m:ss /km")


class PaceBandsResponse(BaseModel):
    bands: List[PaceBandOut]
