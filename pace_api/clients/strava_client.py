"""Strava API 客户端（最小封装）

功能：
- 统一添加鉴权头；
- 只提供配速服务需要的一个 GET：按类型为键的活动流数据。
"""

from typing import Dict, Any, Optional, List
import logging
import requests

from ..config import STRAVA_BASE_URL, STRAVA_TIMEOUT


logger = logging.getLogger(__name__)

PACE_STREAM_KEYS = ['time', 'distance', 'velocity_smooth']


class StravaApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"Strava API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class StravaClient:
    def __init__(
        self,
        access_token: str,
        timeout: Optional[int] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.access_token = access_token
        self.timeout = timeout or STRAVA_TIMEOUT
        self.base_url = (base_url or STRAVA_BASE_URL).rstrip('/')
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        })

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """内部 GET 封装：非 200 统一抛 StravaApiError。"""
        url = f"{self.base_url}{path}"
        resp = self.session.get(url, params=params or {}, timeout=self.timeout)
        if resp.status_code != 200:
            raise StravaApiError(resp.status_code, resp.text)
        return resp.json()

    def get_streams(
        self,
        activity_id: int,
        keys: Optional[List[str]] = None,
        key_by_type: bool = True,
    ) -> Dict[str, Any]:
        """
        获取活动原始流数据。

        参数：
            activity_id: Strava 活动 ID
            keys: 需要的流类型，默认 time/distance/velocity_smooth
            key_by_type: 按流类型返回 dict（解析器按此形态处理）
        """
        params = {
            "keys": ",".join(keys or PACE_STREAM_KEYS),
            "key_by_type": str(key_by_type).lower(),
        }
        logger.debug("[strava-client][streams] activity_id=%s keys=%s", activity_id, params["keys"])
        return self._get(f"/activities/{activity_id}/streams", params=params)

    def close(self) -> None:
        self.session.close()
