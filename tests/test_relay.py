import random

import pytest

from doodle_guess.adapters.vision.base import VisionAdapter
from doodle_guess.adapters.vision.dashscope_vision import build_payload, extract_guess
from doodle_guess.adapters.vision.mock_vision import GUESSES, MockVision
from doodle_guess.config.models import DEFAULT_MODEL, FALLBACK_PROMPT, PROFILES, ModelProfile
from doodle_guess.orchestrator.contracts import AnalyzeRequest
from doodle_guess.orchestrator.errors import (
    ConfigurationError, InternalFailure, MissingInput, UpstreamFailure,
)
from doodle_guess.orchestrator.relay import UNRECOGNIZED, Relay


class ExplodingVision(VisionAdapter):
    requires_credential = True

    def __init__(self, exc):
        self.exc = exc
        self.calls = 0

    def guess(self, image_data, profile):
        self.calls += 1
        raise self.exc


class SilentVision(VisionAdapter):
    def guess(self, image_data, profile):
        return None


def test_missing_image(status):
    relay = Relay(MockVision(status), status)
    with pytest.raises(MissingInput):
        relay.analyze(AnalyzeRequest(image_data=None))


def test_missing_credential_checked_before_call(status):
    vision = ExplodingVision(RuntimeError("should not be called"))
    relay = Relay(vision, status, api_key=None)
    with pytest.raises(ConfigurationError):
        relay.analyze(AnalyzeRequest(image_data="data:image/png;base64,AAAA"))
    assert vision.calls == 0


def test_mock_vision_needs_no_credential(status):
    relay = Relay(MockVision(status, rng=random.Random(1)), status, api_key=None)
    result = relay.analyze(AnalyzeRequest(image_data="data:image/png;base64,AAAA", model_name="qwen-vl-max"))
    assert result.guess in GUESSES
    assert result.model == PROFILES["qwen-vl-max"].display_name
    assert status.last_guess is result


def test_unexpected_exception_becomes_internal_failure(status):
    relay = Relay(ExplodingVision(KeyError("boom")), status, api_key="k")
    with pytest.raises(InternalFailure):
        relay.analyze(AnalyzeRequest(image_data="x"))
    assert status.in_flight == 0


def test_upstream_failure_propagates_unchanged(status):
    relay = Relay(ExplodingVision(UpstreamFailure(503)), status, api_key="k")
    with pytest.raises(UpstreamFailure) as ei:
        relay.analyze(AnalyzeRequest(image_data="x"))
    assert ei.value.status_code == 503


def test_no_text_gives_placeholder(status):
    result = Relay(SilentVision(), status).analyze(AnalyzeRequest(image_data="x"))
    assert result.guess == UNRECOGNIZED
    assert result.model == PROFILES[DEFAULT_MODEL].display_name


def test_build_payload_uses_fallback_prompt():
    p = ModelProfile(name="bare", display_name="Bare", description="", model="m", temperature=0.2, max_tokens=7)
    body = build_payload("data:image/png;base64,AAAA", p)
    assert body["messages"][0]["content"][0]["text"] == FALLBACK_PROMPT
    assert body["temperature"] == 0.2
    assert body["max_tokens"] == 7


@pytest.mark.parametrize("body,expected", [
    ({"choices": [{"message": {"content": "树"}}]}, "树"),
    ({"choices": [{"message": {"content": "   "}}]}, None),
    ({"choices": [{"message": {}}]}, None),
    ({"choices": [{"message": {"content": [{"type": "text"}]}}]}, None),
    ({}, None),
])
def test_extract_guess(body, expected):
    assert extract_guess(body) == expected
