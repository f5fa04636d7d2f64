"""
Pace API 路由

- GET  /activities/{activity_id}/pace ：单个活动的平均配速；
- POST /pace/distribution             ：多个活动的配速区间分布；
- GET  /pace/bands                    ：默认配速区间配置。

路由只做参数校验并调用 pace_service；provider 失败体现在响应体中，不作为 HTTP 错误返回。
"""

from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.analytics.pace_bands import PaceBandConfigError
from ..schemas.pace import (
    AveragePaceResponse,
    DistributionRequest,
    DistributionResponse,
    PaceBandsResponse,
)
from ..services.pace_service import pace_service
from ..streams.providers import StreamProvider, get_stream_provider, parse_activity_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pace"])


@router.get("/activities/{activity_id}/pace", response_model=AveragePaceResponse)
def get_activity_pace(
    activity_id: str,
    access_token: Optional[str] = Query(None, description="Strava API access token"),
    provider: StreamProvider = Depends(get_stream_provider),
):
    """单个活动的平均配速；id 规则与 /pace/distribution 一致（数字或字符串）。"""
    try:
        return pace_service.get_average_pace(provider, parse_activity_id(activity_id), access_token)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("[pace-api][pace-error] activity_id=%s", activity_id)
        raise HTTPException(status_code=500, detail=f"failed to compute pace: {str(e)}")


@router.post("/pace/distribution", response_model=DistributionResponse)
def get_pace_distribution(
    request: DistributionRequest,
    provider: StreamProvider = Depends(get_stream_provider),
):
    """
    按配速区间累计时间或距离。

    无法获取或缺少 time/distance 流的活动列在 `failures` 中，不影响其他活动的统计。
    """
    try:
        return pace_service.get_distribution(provider, request)
    except PaceBandConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("[pace-api][distribution-error] activities=%s", len(request.activity_ids))
        raise HTTPException(status_code=500, detail=f"failed to compute pace distribution: {str(e)}")


@router.get("/pace/bands", response_model=PaceBandsResponse)
def get_pace_bands():
    try:
        return pace_service.get_default_bands()
    except PaceBandConfigError as e:
        raise HTTPException(status_code=500, detail=f"invalid pace band configuration: {str(e)}")
