"""
pytest配置文件，定义测试环境和共享的测试夹具（fixtures）。

主要功能：
1. 内存中的 stream provider（无需网络和 Strava 账号）
2. 配速测试共用的流数据样本
3. 覆盖 stream provider 依赖的 FastAPI 测试客户端
"""

from typing import Dict, List, Optional, Union

import pytest
from fastapi.testclient import TestClient

from pace_api.main import app
from pace_api.streams.models import ActivityStream
from pace_api.streams.providers import StreamFetchError, StreamProvider, get_stream_provider


class FakeStreamProvider(StreamProvider):
    """返回预置流数据；`failing` 中的 id 抛出 StreamFetchError。"""

    def __init__(self, streams: Optional[Dict[Union[int, str], ActivityStream]] = None, failing=()):
        self.streams = dict(streams or {})
        self.failing = set(failing)
        self.calls: List[Union[int, str]] = []

    def fetch(self, activity_id, access_token):
        self.calls.append(activity_id)
        if activity_id in self.failing:
            raise StreamFetchError(activity_id, "rate limit exceeded", status_code=429)
        if activity_id not in self.streams:
            raise StreamFetchError(activity_id, "not found", status_code=404)
        return self.streams[activity_id]


def constant_speed_stream(velocity: float, seconds: int = 600, with_velocity: bool = True) -> ActivityStream:
    """1 Hz、匀速（m/s）的流数据。"""
    time = [float(t) for t in range(seconds + 1)]
    distance = [velocity * t for t in time]
    return ActivityStream(
        time=time,
        distance=distance,
        velocity=[velocity] * len(time) if with_velocity else None,
    )


@pytest.fixture
def constant_stream():
    return constant_speed_stream


@pytest.fixture
def make_provider():
    def _make(streams=None, failing=()):
        return FakeStreamProvider(streams, failing)
    return _make


@pytest.fixture
def easy_run_stream():
    # 3 m/s -> 5:33 /km
    return constant_speed_stream(3.0)


@pytest.fixture
def fast_run_stream():
    # 5 m/s -> 3:20 /km
    return constant_speed_stream(5.0)


@pytest.fixture
def fake_provider(easy_run_stream, fast_run_stream):
    return FakeStreamProvider(
        {
            1: easy_run_stream,
            2: fast_run_stream,
            3: ActivityStream(time=[0.0, 10.0, 20.0], distance=None),
        },
        failing={99},
    )


@pytest.fixture
def client(fake_provider):
    """使用假 provider 的 FastAPI 测试客户端"""
    app.dependency_overrides[get_stream_provider] = lambda: fake_provider
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
