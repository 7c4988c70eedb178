import json

import httpx
import pytest
from fastapi.testclient import TestClient

from doodle_guess.adapters.vision.dashscope_vision import DashScopeVision
from doodle_guess.canvas.surface import StrokeSurface
from doodle_guess.config.settings import Settings
from doodle_guess.orchestrator.contracts import Point
from doodle_guess.services.api import create_app
from doodle_guess.services.status_store import StatusStore

BASE_URL = "https://upstream.test/compatible-mode/v1"


class FakeUpstream:
    """Stands in for the chat-completions endpoint; records every request."""

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.status_code = 200
        self.body: dict | str = {"choices": [{"message": {"role": "assistant", "content": "猫"}}]}
        self.exc: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.exc is not None:
            raise self.exc
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    def last_json(self) -> dict:
        return json.loads(self.calls[-1].content)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def make_client(upstream, status):
    def _make(api_key: str | None = "sk-test", default_model: str | None = None) -> TestClient:
        settings = Settings(api_key=api_key, base_url=BASE_URL, default_model=default_model,
                            vision_adapter="dashscope", timeout_s=5.0)
        vision = DashScopeVision(status, api_key=api_key, base_url=BASE_URL, timeout=5.0,
                                 client=httpx.Client(transport=httpx.MockTransport(upstream.handler)))
        return TestClient(create_app(settings, vision=vision, status=status))
    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def sketch() -> str:
    s = StrokeSurface()
    s.begin(Point(50, 50))
    s.extend(Point(450, 450))
    s.end()
    return s.export()
