"""
DashScope (阿里云百炼) vision adapter.
Uses the OpenAI-compatible chat-completions endpoint with multimodal content.
Requires DASHSCOPE_API_KEY in .env or the process environment.

One request per call: no retry, no backoff. A timeout is reported as an
upstream failure (504) so the caller sees the same retry-later message as for
any other upstream error.
"""
import httpx

from doodle_guess.adapters.vision.base import VisionAdapter
from doodle_guess.config.models import ModelProfile
from doodle_guess.config.settings import DASHSCOPE_BASE_URL
from doodle_guess.orchestrator.errors import InternalFailure, UpstreamFailure

CHAT_COMPLETIONS_PATH = "/chat/completions"


def build_payload(image_data: str, profile: ModelProfile) -> dict:
    return {
        "model": profile.model,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": profile.effective_prompt},
                    {"type": "image_url", "image_url": {"url": image_data}},
                ],
            }
        ],
        "temperature": profile.temperature,
        "max_tokens": profile.max_tokens,
    }


def extract_guess(body: dict) -> str | None:
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(content, str):
        return None
    return content.strip() or None


class DashScopeVision(VisionAdapter):
    requires_credential = True

    def __init__(self, status_store, api_key: str | None, base_url: str = DASHSCOPE_BASE_URL,
                 timeout: float = 30.0, client: httpx.Client | None = None):
        self.status = status_store
        self._api_key = api_key
        self.url = f"{base_url.rstrip('/')}{CHAT_COMPLETIONS_PATH}"
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None
        self.timeout = timeout

    def guess(self, image_data: str, profile: ModelProfile) -> str | None:
        payload = build_payload(image_data, profile)
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        self.status.log(f"dashscope_vision: POST model={profile.model}")

        try:
            resp = self._client.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except httpx.TimeoutException as e:
            self.status.log(f"dashscope_vision: timeout after {self.timeout}s ({type(e).__name__})")
            raise UpstreamFailure(504, "upstream timeout") from e
        except httpx.HTTPError as e:
            self.status.log(f"dashscope_vision: request error: {e}")
            raise InternalFailure(str(e)) from e

        if not resp.is_success:
            self.status.log(f"dashscope_vision: HTTP {resp.status_code} — {resp.text[:300]}")
            status = resp.status_code if resp.status_code >= 400 else 502
            raise UpstreamFailure(status)

        try:
            body = resp.json()
        except ValueError as e:
            self.status.log("dashscope_vision: response is not JSON")
            raise InternalFailure("invalid upstream JSON") from e

        raw = extract_guess(body)
        self.status.log(f"dashscope_vision: raw={raw!r}")
        return raw

    def close(self):
        if self._owns_client:
            self._client.close()
