import time

from doodle_guess.config.models import resolve_profile
from doodle_guess.orchestrator.contracts import AnalyzeRequest, AnalyzeResult
from doodle_guess.orchestrator.errors import (
    ConfigurationError, InternalFailure, MissingInput, RelayError,
)

UNRECOGNIZED = "无法识别"


class Relay:
    """Stateless analyze-drawing handler: validate → resolve profile → one upstream call."""

    def __init__(self, vision, status_store, api_key: str | None = None, default_model: str | None = None):
        self.vision = vision
        self.status = status_store
        self.api_key = api_key
        self.default_model = default_model

    def analyze(self, req: AnalyzeRequest) -> AnalyzeResult:
        if not req.image_data:
            self.status.log("relay: missing imageData")
            raise MissingInput()

        if self.vision.requires_credential and not self.api_key:
            self.status.log("relay: DASHSCOPE_API_KEY not set")
            raise ConfigurationError()

        profile = resolve_profile(req.model_name, self.default_model)
        if req.model_name and req.model_name != profile.name:
            self.status.log(f"relay: unknown model {req.model_name!r}, using {profile.name}")

        self.status.enter()
        t0 = time.time()
        try:
            raw = self.vision.guess(req.image_data, profile)
        except RelayError as e:
            self.status.last_error = e.message
            self.status.log(f"relay: {type(e).__name__} status={e.status_code} ({e.detail or e.message})")
            raise
        except Exception as e:
            self.status.last_error = InternalFailure.message
            self.status.log(f"relay: error {type(e).__name__}: {e}")
            raise InternalFailure(str(e)) from e
        finally:
            self.status.leave()

        dt = int((time.time() - t0) * 1000)
        result = AnalyzeResult(guess=raw or UNRECOGNIZED, model=profile.display_name)
        self.status.last_guess = result
        self.status.last_error = None
        self.status.log(f"relay: guess={result.guess!r} model={profile.name} dt={dt}ms")
        return result
