from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from doodle_guess.services.api import create_app

root = Path(__file__).resolve().parent


def create_web_app(api_app: FastAPI | None = None) -> FastAPI:
    api_app = api_app or create_app()

    # mounted sub-apps do not get lifespan events of their own
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        api_app.state.vision.close()

    app = FastAPI(title="doodle-guess web", lifespan=lifespan)

    # "/" must be registered BEFORE the catch-all mount("") or it gets intercepted
    @app.get("/", response_class=HTMLResponse)
    def index():
        return (root / "templates" / "index.html").read_text(encoding="utf-8")

    app.mount("/static", StaticFiles(directory=str(root / "static")), name="static")

    # mount API sub-app last — catch-all prefix "" would shadow routes above it
    app.mount("", api_app)
    return app
