from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from doodle_guess.adapters.vision.base import VisionAdapter
from doodle_guess.config.models import MODEL_COMPARISON, PROFILES, resolve_profile
from doodle_guess.config.settings import Settings, load_settings
from doodle_guess.orchestrator.contracts import AnalyzeRequest
from doodle_guess.orchestrator.errors import MSG_INTERNAL, MSG_MISSING_IMAGE, RelayError
from doodle_guess.orchestrator.relay import Relay
from doodle_guess.services.models import (
    AnalyzeDrawingRequest, AnalyzeDrawingResponse, ComparisonOut, ErrorResponse,
    LastGuessOut, ModelOut, ModelsResponse, StatusResponse,
)
from doodle_guess.services.status_store import StatusStore


def make_vision(settings: Settings, status: StatusStore) -> VisionAdapter:
    # Values: dashscope | mock  (default: dashscope)
    if settings.vision_adapter == "mock":
        from doodle_guess.adapters.vision.mock_vision import MockVision
        return MockVision(status)

    from doodle_guess.adapters.vision.dashscope_vision import DashScopeVision
    if not settings.has_credential:
        status.log("vision: DASHSCOPE_API_KEY not set, /analyze-drawing will answer 500")
    return DashScopeVision(status, api_key=settings.api_key, base_url=settings.base_url,
                           timeout=settings.timeout_s)


def create_app(settings: Settings | None = None, vision: VisionAdapter | None = None,
               status: StatusStore | None = None) -> FastAPI:
    settings = settings or load_settings()
    status = status or StatusStore()
    vision = vision or make_vision(settings, status)
    relay = Relay(vision, status, api_key=settings.api_key, default_model=settings.default_model)

    status.log(f"vision adapter: {type(vision).__name__}")
    status.log(f"default model: {resolve_profile(None, settings.default_model).name}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        vision.close()

    app = FastAPI(title="doodle-guess api", lifespan=lifespan)
    app.state.vision = vision
    app.state.settings = settings
    app.state.status = status
    app.state.relay = relay

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def bad_body_handler(request: Request, exc: RequestValidationError):
        # body is not JSON or has wrong field types: treat as missing image
        status.log(f"analyze: invalid request body ({len(exc.errors())} errors)")
        return JSONResponse(status_code=400, content={"error": MSG_MISSING_IMAGE})

    @app.exception_handler(Exception)
    async def unexpected_handler(request: Request, exc: Exception):
        status.log(f"unhandled {type(exc).__name__}: {exc}")
        return JSONResponse(status_code=500, content={"error": MSG_INTERNAL})

    @app.post(
        "/analyze-drawing",
        response_model=AnalyzeDrawingResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def analyze_drawing(req: AnalyzeDrawingRequest):
        # sync handler: FastAPI runs it in a worker thread, so the blocking upstream call
        # does not stall other requests
        model_name = req.modelName if isinstance(req.modelName, str) else None
        result = relay.analyze(AnalyzeRequest(image_data=req.imageData, model_name=model_name))
        return AnalyzeDrawingResponse(guess=result.guess, success=result.success, model=result.model)

    @app.get("/models", response_model=ModelsResponse)
    def list_models():
        out = []
        for key, p in PROFILES.items():
            cmp = MODEL_COMPARISON.get(key)
            out.append(ModelOut(
                name=p.name,
                displayName=p.display_name,
                description=p.description,
                comparison=ComparisonOut(speed=cmp.speed, accuracy=cmp.accuracy, cost=cmp.cost,
                                         features=list(cmp.features)) if cmp else None,
            ))
        return ModelsResponse(default=resolve_profile(None, settings.default_model).name, models=out)

    @app.get("/status", response_model=StatusResponse)
    def get_status():
        g = status.last_guess
        return StatusResponse(
            in_flight=status.in_flight,
            last_guess=LastGuessOut(guess=g.guess, model=g.model) if g else None,
            last_error=status.last_error,
            logs=list(status.logs),
        )

    @app.get("/health")
    def health():
        return {
            "api": True,
            "vision_adapter": type(vision).__name__,
            "credential_configured": settings.has_credential,
            "default_model": resolve_profile(None, settings.default_model).name,
            "all_ok": settings.has_credential or not vision.requires_credential,
        }

    return app
