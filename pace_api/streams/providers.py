"""
流数据提供者（Stream Provider）

说明：
- provider 把 `(activity_id, access_token)` 转换为 ActivityStream，失败时抛 StreamFetchError；
- 配速引擎只依赖 `fetch`，数据来源在这里决定：
  - StravaStreamProvider：通过 HTTP 调用 Strava `/activities/{id}/streams`；
  - FitFileStreamProvider：读取本地 `<fit_dir>/<activity_id>.fit`，忽略 token。
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union
import logging

import requests

from ..clients.strava_client import StravaApiError, StravaClient
from ..config import FIT_DIR, STREAM_SOURCE, STRAVA_TIMEOUT
from .fit_parser import parse_fit_stream
from .models import ActivityStream, from_strava_payload


logger = logging.getLogger(__name__)

ActivityId = Union[int, str]


def parse_activity_id(raw: str) -> ActivityId:
    """路径参数中的 id：纯数字按 int（Strava id），其余原样保留为 str。"""
    raw = raw.strip()
    return int(raw) if raw.isdecimal() else raw


class StreamFetchError(Exception):
    def __init__(self, activity_id: ActivityId, message: str, status_code: Optional[int] = None):
        super().__init__(f"activity {activity_id}: {message}")
        self.activity_id = activity_id
        self.message = message
        self.status_code = status_code


class StreamProvider(ABC):
    """流数据来源接口，各数据源实现 `fetch`。"""

    @abstractmethod
    def fetch(self, activity_id: ActivityId, access_token: Optional[str]) -> ActivityStream:
        """
        获取单个活动的流数据。

        异常：
            StreamFetchError: 数据不可用（网络、鉴权、文件缺失或无法解析）。
        """
        pass


class StravaStreamProvider(StreamProvider):
    def __init__(self, timeout: Optional[int] = None, base_url: Optional[str] = None):
        self.timeout = timeout or STRAVA_TIMEOUT
        self.base_url = base_url

    def _client(self, access_token: str) -> StravaClient:
        return StravaClient(access_token, timeout=self.timeout, base_url=self.base_url)

    def fetch(self, activity_id: ActivityId, access_token: Optional[str]) -> ActivityStream:
        if not access_token:
            raise StreamFetchError(activity_id, "missing access token", status_code=401)
        client = self._client(access_token)
        try:
            payload = client.get_streams(activity_id)
        except StravaApiError as e:
            raise StreamFetchError(activity_id, e.message, status_code=e.status_code) from e
        except (requests.RequestException, ValueError) as e:
            # ValueError：响应体不是合法 JSON
            raise StreamFetchError(activity_id, str(e)) from e
        finally:
            client.close()
        return from_strava_payload(payload)


class FitFileStreamProvider(StreamProvider):
    def __init__(self, fit_dir: Union[str, Path] = FIT_DIR):
        self.fit_dir = Path(fit_dir)

    def path_for(self, activity_id: ActivityId) -> Path:
        """
        活动对应的 FIT 文件路径。

        id 来自请求体，含路径分隔符或解析后落在 fit_dir 之外时按文件不存在处理（404）。
        """
        name = str(activity_id)
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise StreamFetchError(activity_id, f"invalid activity id: {name!r}", status_code=404)
        file_path = self.fit_dir / f"{name}.fit"
        if self.fit_dir.resolve() not in file_path.resolve().parents:
            raise StreamFetchError(activity_id, f"invalid activity id: {name!r}", status_code=404)
        return file_path

    def fetch(self, activity_id: ActivityId, access_token: Optional[str] = None) -> ActivityStream:
        file_path = self.path_for(activity_id)
        if not file_path.exists():
            raise StreamFetchError(activity_id, f"FIT file not found: {file_path}", status_code=404)
        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise StreamFetchError(activity_id, f"cannot read {file_path}: {e}") from e
        stream = parse_fit_stream(data)
        if stream is None:
            raise StreamFetchError(activity_id, f"cannot parse FIT file {file_path}")
        return stream


def get_stream_provider() -> StreamProvider:
    """FastAPI 依赖：按 STREAM_SOURCE 选择 provider。"""
    if STREAM_SOURCE == 'fit':
        return FitFileStreamProvider(FIT_DIR)
    if STREAM_SOURCE != 'strava':
        logger.warning("[stream-provider] unknown STREAM_SOURCE=%s, falling back to strava", STREAM_SOURCE)
    return StravaStreamProvider()
