"""Pace Service（配速服务编排层）

职责：
- 确定配速区间（请求中的区间或配置的默认区间）；
- 使用注入的 stream provider 调用配速核心算法；
- 组装 API 路由返回的响应模型。
"""

import logging
import threading
from typing import Optional, Union

from ..config import PACE_MAX_WORKERS
from ..core.analytics.pace import compute_average_pace
from ..core.analytics.pace_bands import bands_from_config, get_default_pace_bands
from ..core.analytics.pace_distribution import compute_distribution, generate_distribution_payload
from ..core.analytics.time_utils import format_pace
from ..schemas.pace import (
    AveragePaceResponse,
    DistributionRequest,
    DistributionResponse,
    PaceBandsResponse,
)
from ..streams.providers import StreamProvider

logger = logging.getLogger(__name__)


class PaceService:

    def get_average_pace(
        self,
        provider: StreamProvider,
        activity_id: Union[int, str],
        access_token: Optional[str],
    ) -> AveragePaceResponse:
        pace = compute_average_pace(activity_id, access_token, provider)
        return AveragePaceResponse(
            activity_id=activity_id,
            available=pace is not None,
            pace=round(pace, 4) if pace is not None else None,
            formatted_pace=format_pace(pace),
        )

    def get_distribution(
        self,
        provider: StreamProvider,
        request: DistributionRequest,
        cancel_event: Optional[threading.Event] = None,
    ) -> DistributionResponse:
        """
        按请求计算配速分布。

        异常：
            PaceBandConfigError: 请求中的区间或 PACE_BANDS_FILE 配置无效。
        """
        if request.bands is not None:
            bands = bands_from_config([band.model_dump() for band in request.bands])
        else:
            bands = get_default_pace_bands()

        distribution = compute_distribution(
            request.activity_ids,
            request.access_token,
            interval=request.interval,
            mode=request.mode,
            bands=bands,
            provider=provider,
            max_workers=request.max_workers or PACE_MAX_WORKERS,
            cancel_event=cancel_event,
        )
        payload = generate_distribution_payload(distribution)
        logger.info(
            "[pace-service][distribution] activities=%s failures=%s total=%.1f",
            len(request.activity_ids), len(distribution.failures), distribution.total,
        )
        return DistributionResponse(
            **distribution.to_dict(),
            total=payload["total"],
            chart=payload["chart"],
            breakdown=payload["bands"],
        )

    def get_default_bands(self) -> PaceBandsResponse:
        return PaceBandsResponse(bands=[band.to_dict() for band in get_default_pace_bands()])


# 单例
pace_service = PaceService()
